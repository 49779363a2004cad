"""
Simulated AI transformations.

Audio transformations ask the chat model to describe the result and ship that
description as a text file; video transformations render a representative
image. Either way the output is pinned so a remix always has a content hash.
"""
import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

import httpx

from remixflow.models import MediaType
from remixflow.services import prompts
from remixflow.services.ipfs import upload_to_ipfs
from remixflow.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

SUPPORTED_TRANSFORMATIONS = ("dubbing", "styleTransfer")
IMAGE_DOWNLOAD_TIMEOUT = 60.0


class TransformationError(RuntimeError):
    pass


class UnsupportedTransformationError(TransformationError, ValueError):
    pass


@dataclass
class SourceFile:
    filename: str
    content_type: str
    data: bytes = b""


@dataclass
class TransformedFile:
    filename: str
    content_type: str
    data: bytes
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RemixResult:
    transformed_file: TransformedFile
    ipfs_hash: str
    metadata: dict[str, Any]


def _stem(filename: str) -> str:
    return PurePath(filename).name.split(".")[0] or "remix"


def _check_supported(transformation: str) -> None:
    if transformation not in SUPPORTED_TRANSFORMATIONS:
        raise UnsupportedTransformationError(f"Unsupported transformation: {transformation}")


async def _download_image(image_url: str) -> bytes:
    async with httpx.AsyncClient(timeout=IMAGE_DOWNLOAD_TIMEOUT) as client:
        response = await client.get(image_url)
        response.raise_for_status()
        return response.content


async def transform_audio(
    file: SourceFile,
    transformation: str,
    params: dict[str, Any],
    *,
    llm: LLMClient | None = None,
) -> TransformedFile:
    _check_supported(transformation)
    llm = llm or LLMClient()
    try:
        if transformation == "dubbing":
            language = params.get("language") or "en"
            description = await llm.generate_text(
                prompts.AUDIO_DUBBING_PROMPT.format(language=language, filename=file.filename)
            )
            return TransformedFile(
                filename=f"{_stem(file.filename)}_{language}.txt",
                content_type="text/plain",
                data=(description or "Audio dubbing transformation").encode("utf-8"),
                metadata={
                    "transformation": "dubbing",
                    "originalFileName": file.filename,
                    "targetLanguage": language,
                    "description": description,
                },
            )

        style = params.get("style") or params.get("language") or "jazz"
        description = await llm.generate_text(
            prompts.AUDIO_STYLE_TRANSFER_PROMPT.format(style=style, filename=file.filename)
        )
        return TransformedFile(
            filename=f"{_stem(file.filename)}_{style}_style.txt",
            content_type="text/plain",
            data=(description or "Audio style transfer transformation").encode("utf-8"),
            metadata={
                "transformation": "styleTransfer",
                "originalFileName": file.filename,
                "style": style,
                "description": description,
            },
        )
    except Exception as exc:
        logger.error("Error transforming audio %s: %s", file.filename, exc)
        raise TransformationError(f"Failed to transform audio: {exc}") from exc


async def transform_video(
    file: SourceFile,
    transformation: str,
    params: dict[str, Any],
    *,
    llm: LLMClient | None = None,
) -> TransformedFile:
    _check_supported(transformation)
    llm = llm or LLMClient()
    try:
        if transformation == "dubbing":
            language = params.get("language") or "en"
            image_url = await llm.generate_image(prompts.VIDEO_DUBBING_PROMPT.format(language=language))
            return TransformedFile(
                filename=f"{_stem(file.filename)}_{language}_dubbed.png",
                content_type="image/png",
                data=await _download_image(image_url),
                metadata={
                    "transformation": "dubbing",
                    "originalFileName": file.filename,
                    "targetLanguage": language,
                    "imageUrl": image_url,
                },
            )

        style = params.get("style") or params.get("language") or "cinematic"
        image_url = await llm.generate_image(prompts.VIDEO_STYLE_TRANSFER_PROMPT.format(style=style))
        return TransformedFile(
            filename=f"{_stem(file.filename)}_{style}_style.png",
            content_type="image/png",
            data=await _download_image(image_url),
            metadata={
                "transformation": "styleTransfer",
                "originalFileName": file.filename,
                "style": style,
                "imageUrl": image_url,
            },
        )
    except Exception as exc:
        logger.error("Error transforming video %s: %s", file.filename, exc)
        raise TransformationError(f"Failed to transform video: {exc}") from exc


async def process_ai_remix(
    file: SourceFile,
    media_type: MediaType,
    transformation: str,
    params: dict[str, Any],
    *,
    llm: LLMClient | None = None,
) -> RemixResult:
    """Runs the transformation for the media type and pins the result."""
    if media_type == "audio":
        transformed = await transform_audio(file, transformation, params, llm=llm)
    else:
        transformed = await transform_video(file, transformation, params, llm=llm)

    ipfs_hash = await upload_to_ipfs(
        transformed.filename,
        transformed.data,
        transformed.content_type,
        {
            "transformation": transformation,
            "params": params,
            "originalFileName": file.filename,
            **transformed.metadata,
        },
    )
    return RemixResult(
        transformed_file=transformed,
        ipfs_hash=ipfs_hash,
        metadata={**transformed.metadata, "ipfsHash": ipfs_hash},
    )
