from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from remixflow import crud
from remixflow.models import SplitInput
from remixflow.services.remix_pipeline import OriginalContentNotFoundError, create_remix_flow
from remixflow.services.royalty import RoyaltySplitError
from remixflow.services.transform import SourceFile, UnsupportedTransformationError


@pytest.fixture
def llm():
    client = MagicMock()
    client.generate_text = AsyncMock(return_value="A Spanish dub of Night Drive")
    client.generate_image = AsyncMock(return_value="https://images.example/frame.png")
    return client


@pytest.fixture
def pinned():
    with patch(
        "remixflow.services.transform.upload_to_ipfs", AsyncMock(return_value="QmTransformed")
    ) as upload, patch(
        "remixflow.services.provenance.upload_json_to_ipfs", AsyncMock(return_value="QmMetadata")
    ) as upload_json:
        yield upload, upload_json


SOURCE = SourceFile(filename="night_drive.mp3", content_type="audio/mpeg", data=b"audio")


@pytest.mark.asyncio
async def test_flow_persists_minted_remix(store, stored_content, llm, pinned):
    remix = await create_remix_flow(
        store=store,
        file=SOURCE,
        media_type="audio",
        transformation="dubbing",
        transformation_params={"language": "es"},
        original_content_id=stored_content.content_id,
        creator_address="0xRemixer",
        llm=llm,
    )

    assert remix.title == "Night Drive (dubbing Remix)"
    assert remix.description == "dubbing transformation of Night Drive"
    assert remix.ipfs_hash == "QmTransformed"
    assert remix.original_ipfs_hash == "QmOriginalHash"
    assert remix.content_type == "text/plain"
    assert remix.token_id is not None
    assert remix.onchain_tx_hash.startswith("0x")
    assert remix.royalty_distribution_tx_hash.startswith("0x")
    assert remix.metadata["tokenURI"].endswith("QmMetadata")
    assert remix.metadata["ipfsHash"] == "QmTransformed"

    assert crud.get_remix(store=store, remix_id=remix.remix_id) == remix
    assert crud.get_content_remixes(store=store, content_id=stored_content.content_id) == [
        remix.remix_id
    ]
    assert crud.get_user_remixes(store=store, user_id="0xRemixer") == [remix.remix_id]


@pytest.mark.asyncio
async def test_flow_defaults_royalties_to_original_owner(store, stored_content, llm, pinned):
    remix = await create_remix_flow(
        store=store,
        file=SOURCE,
        media_type="audio",
        transformation="styleTransfer",
        original_content_id=stored_content.content_id,
        creator_address="0xRemixer",
        llm=llm,
    )

    splits = crud.get_remix_royalty_splits(store=store, remix_id=remix.remix_id)
    assert [(split.recipient_address, split.percentage) for split in splits] == [
        ("0xOriginalOwner", 50)
    ]


@pytest.mark.asyncio
async def test_flow_keeps_caller_title_and_metadata(store, stored_content, llm, pinned):
    remix = await create_remix_flow(
        store=store,
        file=SOURCE,
        media_type="audio",
        transformation="dubbing",
        original_content_id=stored_content.content_id,
        creator_address="0xRemixer",
        title="Noche",
        description="Late night dub",
        royalty_splits=[SplitInput(recipient="0xa", percentage=20)],
        tags=["dub"],
        metadata={"mood": "calm"},
        llm=llm,
    )

    assert (remix.title, remix.description) == ("Noche", "Late night dub")
    assert remix.tags == ["dub"]
    assert remix.metadata["mood"] == "calm"
    splits = crud.get_remix_royalty_splits(store=store, remix_id=remix.remix_id)
    assert [split.recipient_address for split in splits] == ["0xa"]


@pytest.mark.asyncio
async def test_flow_rejects_missing_original(store, llm, pinned):
    with pytest.raises(OriginalContentNotFoundError):
        await create_remix_flow(
            store=store,
            file=SOURCE,
            media_type="audio",
            transformation="dubbing",
            original_content_id="content:0:0",
            creator_address="0xRemixer",
            llm=llm,
        )

    llm.generate_text.assert_not_called()


@pytest.mark.asyncio
async def test_flow_rejects_unknown_transformation(store, stored_content, llm, pinned):
    with pytest.raises(UnsupportedTransformationError):
        await create_remix_flow(
            store=store,
            file=SOURCE,
            media_type="audio",
            transformation="reverb",
            original_content_id=stored_content.content_id,
            creator_address="0xRemixer",
            llm=llm,
        )

    assert crud.list_remixes(store=store)[1] == 0


@pytest.mark.asyncio
async def test_flow_rejects_oversubscribed_splits_before_storing(store, stored_content, llm, pinned):
    with pytest.raises(RoyaltySplitError):
        await create_remix_flow(
            store=store,
            file=SOURCE,
            media_type="audio",
            transformation="dubbing",
            original_content_id=stored_content.content_id,
            creator_address="0xRemixer",
            royalty_splits=[
                SplitInput(recipient="0xa", percentage=70),
                SplitInput(recipient="0xb", percentage=40),
            ],
            llm=llm,
        )

    assert crud.list_remixes(store=store)[1] == 0
    assert crud.get_recipient_royalty_splits(store=store, recipient_address="0xa") == []
