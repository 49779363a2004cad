import logging
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError

from remixflow import crud
from remixflow.api.deps import StoreDep
from remixflow.api.forms import parse_json_field
from remixflow.models import Remix, RemixesPublic, RemixUpdate, SplitInput
from remixflow.services.chain import BlockchainError
from remixflow.services.ipfs import IPFSError
from remixflow.services.remix_pipeline import OriginalContentNotFoundError, create_remix_flow
from remixflow.services.royalty import RoyaltySplitError
from remixflow.services.transform import (
    SourceFile,
    TransformationError,
    UnsupportedTransformationError,
)

router = APIRouter()
logger = logging.getLogger(__name__)

MEDIA_TYPES = ("audio", "video")


@router.get("/", response_model=RemixesPublic)
def read_remixes(
    store: StoreDep,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> Any:
    remixes, count = crud.list_remixes(store=store, limit=limit, offset=offset)
    return RemixesPublic(data=remixes, count=count)


@router.post("/", response_model=Remix, status_code=201)
async def create_remix(
    *,
    store: StoreDep,
    file: UploadFile | None = File(default=None),
    media_type: str | None = Form(default=None, alias="type"),
    transformation: str | None = Form(default=None),
    transformation_params: str | None = Form(default=None, alias="transformationParams"),
    original_content_id: str | None = Form(default=None, alias="originalContentId"),
    creator_address: str | None = Form(default=None, alias="creatorAddress"),
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    royalty_splits: str | None = Form(default=None, alias="royaltySplits"),
    tags: str | None = Form(default=None),
    metadata: str | None = Form(default=None),
) -> Any:
    """
    Create an AI remix of stored content:
    transform and pin the upload, register royalty splits, mint the provenance token, store the remix.
    """
    if not file or not media_type or not transformation or not original_content_id or not creator_address:
        raise HTTPException(
            status_code=400,
            detail="File, type, transformation, original content ID, and creator address are required",
        )
    if media_type not in MEDIA_TYPES:
        raise HTTPException(status_code=400, detail="Type must be 'audio' or 'video'")

    params = parse_json_field(transformation_params, "transformationParams", dict[str, Any], {})
    splits = parse_json_field(royalty_splits, "royaltySplits", list[SplitInput], [])
    tag_list = parse_json_field(tags, "tags", list[str], [])
    extra_metadata = parse_json_field(metadata, "metadata", dict[str, Any], {})

    source = SourceFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=await file.read(),
    )

    try:
        return await create_remix_flow(
            store=store,
            file=source,
            media_type=media_type,  # type: ignore[arg-type]
            transformation=transformation,
            transformation_params=params,
            original_content_id=original_content_id,
            creator_address=creator_address,
            title=title,
            description=description,
            royalty_splits=splits,
            tags=tag_list,
            metadata=extra_metadata,
        )
    except OriginalContentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Original content not found") from exc
    except (UnsupportedTransformationError, RoyaltySplitError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid remix data") from exc
    except (TransformationError, IPFSError, BlockchainError) as exc:
        logger.error("Error creating remix: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to create remix") from exc


@router.get("/{remix_id}", response_model=Remix)
def read_remix(remix_id: str, store: StoreDep) -> Any:
    remix = crud.get_remix(store=store, remix_id=remix_id)
    if not remix:
        raise HTTPException(status_code=404, detail="Remix not found")
    return remix


@router.put("/{remix_id}", response_model=Remix)
def update_remix(*, remix_id: str, store: StoreDep, remix_in: RemixUpdate) -> Any:
    try:
        remix = crud.update_remix(store=store, remix_id=remix_id, remix_in=remix_in)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid remix data") from exc
    if not remix:
        raise HTTPException(status_code=404, detail="Remix not found")
    return remix
