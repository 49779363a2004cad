from unittest.mock import patch

from remixflow import crud
from remixflow.models import (
    ContentUpdate,
    RemixUpdate,
    SocialLinks,
    UserCreate,
    UserUpdate,
    new_remix,
    new_split,
    new_user,
)


def test_create_then_get_user_returns_same_record(store):
    user = new_user(
        UserCreate(
            wallet_address="0xabc",
            display_name="Ada",
            social_links=SocialLinks(twitter="@ada"),
        )
    )
    crud.create_user(store=store, user=user)

    fetched = crud.get_user(store=store, user_id="0xabc")

    assert fetched == user
    assert fetched.user_id == fetched.wallet_address == "0xabc"
    assert fetched.created_at == fetched.updated_at


def test_user_is_stored_as_flat_camel_case_hash(store):
    crud.create_user(store=store, user=new_user(UserCreate(wallet_address="0xabc")))

    raw = store.hgetall("user:0xabc")

    assert raw["walletAddress"] == '"0xabc"'
    assert "email" not in raw


def test_get_missing_records_return_none(store):
    assert crud.get_user(store=store, user_id="0xnobody") is None
    assert crud.get_content(store=store, content_id="content:1:1") is None
    assert crud.get_remix(store=store, remix_id="remix:1:1") is None
    assert crud.get_royalty_split(store=store, split_id="split:x:y") is None


def test_update_user_bumps_updated_at_and_keeps_identity(store):
    with patch("remixflow.models.get_timestamp_ms", return_value=1000):
        crud.create_user(store=store, user=new_user(UserCreate(wallet_address="0xabc")))

    with patch("remixflow.crud.get_timestamp_ms", return_value=2000):
        updated = crud.update_user(store=store, user_id="0xabc", user_in=UserUpdate(bio="hello"))

    assert updated.bio == "hello"
    assert updated.user_id == "0xabc"
    assert updated.created_at == 1000
    assert updated.updated_at == 2000
    assert crud.get_user(store=store, user_id="0xabc") == updated


def test_update_user_clears_field_set_to_none(store):
    crud.create_user(
        store=store, user=new_user(UserCreate(wallet_address="0xabc", bio="old bio"))
    )

    updated = crud.update_user(store=store, user_id="0xabc", user_in=UserUpdate(bio=None))

    assert updated.bio is None
    assert "bio" not in store.hgetall("user:0xabc")


def test_update_missing_user_returns_none(store):
    assert crud.update_user(store=store, user_id="0xghost", user_in=UserUpdate(bio="x")) is None


def test_create_content_indexes_owner(store, stored_content):
    assert crud.get_user_content(store=store, user_id="0xOriginalOwner") == [stored_content.content_id]
    assert stored_content.royalty_percentage == 50
    assert stored_content.content_id.startswith("content:")


def test_update_content_preserves_content_id(store, stored_content):
    with patch("remixflow.crud.get_timestamp_ms", return_value=stored_content.updated_at + 5):
        updated = crud.update_content(
            store=store,
            content_id=stored_content.content_id,
            content_in=ContentUpdate(title="Night Drive II", tags=["synthwave"]),
        )

    assert updated.content_id == stored_content.content_id
    assert updated.title == "Night Drive II"
    assert updated.tags == ["synthwave"]
    assert updated.updated_at == stored_content.updated_at + 5


def test_create_remix_updates_membership_sets_and_token_index(store, stored_content, stored_remix):
    assert crud.get_user_remixes(store=store, user_id="0xRemixer") == [stored_remix.remix_id]
    assert crud.get_content_remixes(store=store, content_id=stored_content.content_id) == [
        stored_remix.remix_id
    ]
    assert crud.get_remix_by_token(store=store, token_id=42) == stored_remix
    assert crud.get_tokens_by_original_hash(store=store, original_ipfs_hash="QmOriginalHash") == [42]


def test_update_remix_preserves_remix_id(store, stored_remix):
    updated = crud.update_remix(
        store=store,
        remix_id=stored_remix.remix_id,
        remix_in=RemixUpdate(plays=10, likes=3, title="Renamed"),
    )

    assert updated.remix_id == stored_remix.remix_id
    assert updated.plays == 10
    assert updated.likes == 3
    assert updated.shares == 0
    assert crud.get_remix(store=store, remix_id=stored_remix.remix_id).title == "Renamed"


def test_list_remixes_is_newest_first_and_paginated(store, stored_content):
    created = []
    for index in range(3):
        with patch("remixflow.models.get_timestamp_ms", return_value=1000 + index):
            remix = new_remix(
                original_content_id=stored_content.content_id,
                creator_address="0xRemixer",
                ipfs_hash=f"QmRemix{index}",
                original_ipfs_hash=stored_content.ipfs_hash,
                title=f"Remix {index}",
                transformation="styleTransfer",
                content_type="text/plain",
            )
        created.append(crud.create_remix(store=store, remix=remix))

    page, count = crud.list_remixes(store=store, limit=2, offset=0)
    rest, _ = crud.list_remixes(store=store, limit=2, offset=2)

    assert count == 3
    assert [remix.title for remix in page] == ["Remix 2", "Remix 1"]
    assert [remix.title for remix in rest] == ["Remix 0"]


def test_changing_token_id_drops_old_token_index(store, stored_remix):
    crud.update_remix(store=store, remix_id=stored_remix.remix_id, remix_in=RemixUpdate(token_id=43))

    assert crud.get_remix_by_token(store=store, token_id=42) is None
    assert crud.get_remix_by_token(store=store, token_id=43).remix_id == stored_remix.remix_id
    assert crud.get_tokens_by_original_hash(store=store, original_ipfs_hash="QmOriginalHash") == [43]


def test_clearing_token_id_removes_token_index(store, stored_remix):
    updated = crud.update_remix(
        store=store, remix_id=stored_remix.remix_id, remix_in=RemixUpdate(token_id=None)
    )

    assert updated.token_id is None
    assert crud.get_remix_by_token(store=store, token_id=42) is None
    assert crud.get_tokens_by_original_hash(store=store, original_ipfs_hash="QmOriginalHash") == []


def test_update_royalty_split_merges_and_keeps_split_id(store):
    split = crud.create_royalty_split(
        store=store, split=new_split(remix_id="remix:1:1", recipient_address="0xa", percentage=25)
    )

    updated = crud.update_royalty_split(
        store=store,
        split_id=split.split_id,
        changes={"percentage": 30, "split_id": "split:other"},
    )

    assert updated.split_id == split.split_id
    assert updated.percentage == 30
    assert updated.recipient_address == "0xa"
    assert crud.get_royalty_split(store=store, split_id=split.split_id) == updated
    assert crud.update_royalty_split(store=store, split_id="split:none", changes={}) is None


def test_record_payment_appends_transaction(store):
    split = crud.create_royalty_split(
        store=store, split=new_split(remix_id="remix:1:1", recipient_address="0xa", percentage=25)
    )

    crud.record_payment(store=store, split_id=split.split_id, amount=0.5, tx_hash="0x01")
    updated = crud.record_payment(store=store, split_id=split.split_id, amount=0.25, tx_hash="0x02")

    assert updated.amount_paid == 0.75
    assert [payment.tx_hash for payment in updated.transactions] == ["0x01", "0x02"]
    assert updated.last_paid_at == updated.transactions[-1].timestamp
    assert crud.get_royalty_split(store=store, split_id=split.split_id) == updated


def test_splits_are_indexed_by_remix_and_recipient(store):
    crud.create_royalty_split(
        store=store, split=new_split(remix_id="remix:1:1", recipient_address="0xa", percentage=25)
    )
    crud.create_royalty_split(
        store=store, split=new_split(remix_id="remix:1:1", recipient_address="0xb", percentage=30)
    )
    crud.create_royalty_split(
        store=store, split=new_split(remix_id="remix:2:2", recipient_address="0xa", percentage=40)
    )

    by_remix = crud.get_remix_royalty_splits(store=store, remix_id="remix:1:1")
    by_recipient = crud.get_recipient_royalty_splits(store=store, recipient_address="0xa")

    assert {split.recipient_address for split in by_remix} == {"0xa", "0xb"}
    assert {split.remix_id for split in by_recipient} == {"remix:1:1", "remix:2:2"}
    assert by_remix[0].split_id == "split:remix:1:1:0xa"
