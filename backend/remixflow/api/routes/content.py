import logging
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from pydantic import ValidationError

from remixflow import crud
from remixflow.api.deps import StoreDep
from remixflow.api.forms import parse_json_field, parse_percentage
from remixflow.models import ContentUpdate, OriginalContent, get_timestamp_ms, new_content
from remixflow.services.ipfs import IPFSError, upload_to_ipfs

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", response_model=OriginalContent, status_code=201)
async def create_content(
    *,
    store: StoreDep,
    file: UploadFile | None = File(default=None),
    owner_address: str | None = Form(default=None, alias="ownerAddress"),
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    royalty_percentage: str | None = Form(default=None, alias="royaltyPercentage"),
    tags: str | None = Form(default=None),
    metadata: str | None = Form(default=None),
) -> Any:
    """
    Upload an original asset, pin it, and store its content record.
    """
    if not file or not owner_address or not title:
        raise HTTPException(
            status_code=400, detail="File, owner address, and title are required"
        )

    percentage = parse_percentage(royalty_percentage)
    tag_list = parse_json_field(tags, "tags", list[str], [])
    extra_metadata = parse_json_field(metadata, "metadata", dict[str, Any], {})

    data = await file.read()
    content_type = file.content_type or "application/octet-stream"
    try:
        ipfs_hash = await upload_to_ipfs(
            file.filename or "upload",
            data,
            content_type,
            {
                "creator": owner_address,
                "contentType": content_type,
                "title": title,
                "description": description or "",
                "timestamp": get_timestamp_ms(),
            },
        )
    except IPFSError as exc:
        logger.error("Error creating content: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to create content") from exc

    try:
        content = new_content(
            ipfs_hash=ipfs_hash,
            owner_address=owner_address,
            title=title,
            content_type=content_type,
            description=description,
            royalty_percentage=percentage,
            tags=tag_list,
            metadata=extra_metadata,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid content data") from exc

    return crud.create_content(store=store, content=content)


@router.get("/{content_id}", response_model=OriginalContent)
def read_content(content_id: str, store: StoreDep) -> Any:
    content = crud.get_content(store=store, content_id=content_id)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return content


@router.put("/{content_id}", response_model=OriginalContent)
def update_content(*, content_id: str, store: StoreDep, content_in: ContentUpdate) -> Any:
    try:
        content = crud.update_content(store=store, content_id=content_id, content_in=content_in)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid content data") from exc
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return content


@router.get("/{content_id}/remixes", response_model=list[str])
def read_content_remixes(content_id: str, store: StoreDep) -> Any:
    return crud.get_content_remixes(store=store, content_id=content_id)
