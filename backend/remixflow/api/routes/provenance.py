import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Path

from remixflow.api.deps import StoreDep
from remixflow.models import ProvenanceCertificate
from remixflow.services.chain import BlockchainError
from remixflow.services.ipfs import IPFSError
from remixflow.services.provenance import (
    get_provenance_certificate,
    get_remixes_by_original_content,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/certificate/{token_id}", response_model=ProvenanceCertificate)
async def read_certificate(store: StoreDep, token_id: int = Path(ge=0)) -> Any:
    try:
        return await get_provenance_certificate(store=store, token_id=token_id)
    except (BlockchainError, IPFSError) as exc:
        logger.error("Error getting provenance certificate %s: %s", token_id, exc)
        raise HTTPException(
            status_code=500, detail="Failed to get provenance certificate"
        ) from exc


@router.get("/remixes/{original_content_hash}", response_model=list[int])
async def read_remix_tokens(original_content_hash: str, store: StoreDep) -> Any:
    try:
        return await get_remixes_by_original_content(
            store=store, original_content_hash=original_content_hash
        )
    except BlockchainError as exc:
        logger.error("Error getting remixes for %s: %s", original_content_hash, exc)
        raise HTTPException(
            status_code=500, detail="Failed to get remixes by original content"
        ) from exc
