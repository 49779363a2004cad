import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool
from redis import Redis

from remixflow import crud
from remixflow.models import MediaType, Remix, SplitInput, new_remix
from remixflow.services.llm_client import LLMClient
from remixflow.services.provenance import create_remix_metadata, mint_remix_nft
from remixflow.services.royalty import calculate_royalty_splits, register_remix_royalties
from remixflow.services.transform import SourceFile, process_ai_remix

logger = logging.getLogger(__name__)


class OriginalContentNotFoundError(LookupError):
    pass


async def create_remix_flow(
    *,
    store: Redis,
    file: SourceFile,
    media_type: MediaType,
    transformation: str,
    original_content_id: str,
    creator_address: str,
    transformation_params: dict[str, Any] | None = None,
    title: str | None = None,
    description: str | None = None,
    royalty_splits: list[SplitInput] | None = None,
    tags: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
    llm: LLMClient | None = None,
) -> Remix:
    """
    Transform, register royalties, mint and persist a remix of stored content.

    The store writes, the royalty registration and the mint are independent
    calls; a failure part-way leaves the earlier ones in place.
    """
    params = transformation_params or {}

    original = crud.get_content(store=store, content_id=original_content_id)
    if not original:
        raise OriginalContentNotFoundError(original_content_id)

    result = await process_ai_remix(file, media_type, transformation, params, llm=llm)

    splits = calculate_royalty_splits(original.owner_address, royalty_splits)

    remix = new_remix(
        original_content_id=original_content_id,
        creator_address=creator_address,
        ipfs_hash=result.ipfs_hash,
        original_ipfs_hash=original.ipfs_hash,
        title=title or f"{original.title} ({transformation} Remix)",
        description=description or f"{transformation} transformation of {original.title}",
        transformation=transformation,
        transformation_params=params,
        content_type=result.transformed_file.content_type,
        tags=tags,
        metadata={**(metadata or {}), **result.metadata},
    )

    royalty_tx_hash = await run_in_threadpool(
        register_remix_royalties,
        store=store,
        remix_id=remix.remix_id,
        creator=creator_address,
        splits=splits,
    )

    nft_metadata = create_remix_metadata(
        name=remix.title,
        description=remix.description,
        original_content_hash=original.ipfs_hash,
        remix_content_hash=result.ipfs_hash,
        creator_address=creator_address,
        transformation=transformation,
        transformation_params=params,
        content_type=result.transformed_file.content_type,
        image=result.metadata.get("imageUrl"),
    )
    mint = await mint_remix_nft(
        creator=creator_address,
        original_content_hash=original.ipfs_hash,
        remix_content_hash=result.ipfs_hash,
        transformation=transformation,
        metadata=nft_metadata,
    )

    remix.royalty_distribution_tx_hash = royalty_tx_hash
    remix.onchain_tx_hash = mint.tx_hash
    remix.token_id = mint.token_id
    remix.metadata["tokenURI"] = mint.token_uri

    crud.create_remix(store=store, remix=remix)
    logger.info("Created remix %s of %s", remix.remix_id, original_content_id)
    return remix
