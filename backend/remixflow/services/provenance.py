import logging
import random
from dataclasses import dataclass
from typing import Any

from fastapi.concurrency import run_in_threadpool
from redis import Redis

from remixflow import crud
from remixflow.core.config import settings
from remixflow.models import ProvenanceCertificate, get_timestamp_ms
from remixflow.services.chain import (
    BlockchainError,
    get_chain_client,
    random_tx_hash,
    to_checksum,
    write_or_simulate,
)
from remixflow.services.ipfs import fetch_from_ipfs, get_ipfs_url, upload_json_to_ipfs

logger = logging.getLogger(__name__)


@dataclass
class MintResult:
    tx_hash: str
    token_id: int
    token_uri: str


def create_remix_metadata(
    *,
    name: str,
    description: str,
    original_content_hash: str,
    remix_content_hash: str,
    creator_address: str,
    transformation: str,
    transformation_params: dict[str, Any],
    content_type: str,
    image: str | None = None,
    animation_url: str | None = None,
) -> dict[str, Any]:
    """ERC-721 metadata document for a remix token."""
    return {
        "name": name,
        "description": description,
        "external_url": f"{settings.PUBLIC_APP_URL}/remix/{remix_content_hash}",
        "image": image or f"{settings.PUBLIC_APP_URL}/api/thumbnail/{remix_content_hash}",
        "animation_url": animation_url,
        "attributes": [
            {"trait_type": "Transformation", "value": transformation},
            {"trait_type": "Content Type", "value": content_type},
            {"trait_type": "Original Creator", "value": creator_address},
        ],
        "properties": {
            "originalContentHash": original_content_hash,
            "remixContentHash": remix_content_hash,
            "transformation": transformation,
            "transformationParams": transformation_params,
            "contentType": content_type,
            "createdAt": get_timestamp_ms(),
        },
    }


def _minted_token_id(receipt: Any) -> int:
    client = get_chain_client()
    try:
        transfers = client.provenance.events.Transfer().process_receipt(receipt)
    except Exception as exc:
        raise BlockchainError(f"Could not decode mint receipt: {exc}") from exc
    if not transfers:
        raise BlockchainError("Mint receipt carries no Transfer event")
    return int(transfers[0]["args"]["tokenId"])


async def mint_remix_nft(
    *,
    creator: str,
    original_content_hash: str,
    remix_content_hash: str,
    transformation: str,
    metadata: dict[str, Any],
) -> MintResult:
    """Pins the token metadata, then mints the provenance token for a remix."""
    metadata_hash = await upload_json_to_ipfs(metadata)
    token_uri = get_ipfs_url(metadata_hash)

    def send() -> tuple[str, int]:
        client = get_chain_client()
        tx_hash, receipt = client.write(
            client.provenance,
            "mintRemix",
            to_checksum(creator),
            original_content_hash,
            remix_content_hash,
            transformation,
            token_uri,
        )
        return tx_hash, _minted_token_id(receipt)

    def simulate() -> tuple[str, int]:
        return random_tx_hash(), random.randrange(1_000_000)

    tx_hash, token_id = await run_in_threadpool(write_or_simulate, "mintRemix", send, simulate)
    logger.info("Minted provenance token %s for %s (tx %s)", token_id, remix_content_hash, tx_hash)
    return MintResult(tx_hash=tx_hash, token_id=token_id, token_uri=token_uri)


async def get_provenance_certificate(*, store: Redis, token_id: int) -> ProvenanceCertificate:
    if settings.onchain_enabled:
        client = get_chain_client()
        creator, original_hash, remix_hash, transformation = await run_in_threadpool(
            client.call, client.provenance, "getProvenance", token_id
        )
        token_uri = await run_in_threadpool(client.call, client.provenance, "tokenURI", token_id)
        metadata = await fetch_from_ipfs(token_uri) if token_uri else {}
        return ProvenanceCertificate(
            token_id=token_id,
            creator=creator,
            original_content_hash=original_hash,
            remix_content_hash=remix_hash,
            transformation=transformation,
            token_uri=token_uri,
            metadata=metadata,
        )

    remix = crud.get_remix_by_token(store=store, token_id=token_id)
    if not remix:
        return ProvenanceCertificate(token_id=token_id)
    return ProvenanceCertificate(
        token_id=token_id,
        creator=remix.creator_address,
        original_content_hash=remix.original_ipfs_hash,
        remix_content_hash=remix.ipfs_hash,
        transformation=remix.transformation,
        token_uri=remix.metadata.get("tokenURI", ""),
        metadata=remix.metadata,
    )


async def get_remixes_by_original_content(*, store: Redis, original_content_hash: str) -> list[int]:
    if settings.onchain_enabled:
        client = get_chain_client()
        token_ids = await run_in_threadpool(
            client.call, client.provenance, "getRemixesByOriginalContent", original_content_hash
        )
        return [int(token_id) for token_id in token_ids]
    return crud.get_tokens_by_original_hash(store=store, original_ipfs_hash=original_content_hash)
