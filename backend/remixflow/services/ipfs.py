import json
import logging
from typing import Any

import httpx

from remixflow.core.config import settings
from remixflow.models import get_timestamp_ms

logger = logging.getLogger(__name__)

MOCK_HASH_PREFIX = "mock-ipfs-hash-"
PIN_TIMEOUT = 60.0


class IPFSError(RuntimeError):
    """Raised when pinning or fetching content fails outside local development."""


def _mock_hash() -> str:
    return f"{MOCK_HASH_PREFIX}{get_timestamp_ms()}"


def _auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {settings.PINATA_JWT}"}


def _keyvalues(metadata: dict[str, Any]) -> dict[str, str | int | float]:
    # Pinata only accepts scalar key/values.
    values: dict[str, str | int | float] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            values[key] = value
        else:
            values[key] = json.dumps(value)
    return values


async def upload_to_ipfs(
    filename: str,
    data: bytes,
    content_type: str,
    metadata: dict[str, Any] | None = None,
) -> str:
    """Pins a file and returns its content hash."""
    form: dict[str, str] = {}
    if metadata:
        form["pinataMetadata"] = json.dumps({"name": filename, "keyvalues": _keyvalues(metadata)})
    try:
        async with httpx.AsyncClient(timeout=PIN_TIMEOUT) as client:
            response = await client.post(
                f"{settings.PINATA_API_URL}/pinning/pinFileToIPFS",
                headers=_auth_headers(),
                files={"file": (filename, data, content_type)},
                data=form,
            )
            response.raise_for_status()
        ipfs_hash = response.json()["IpfsHash"]
        logger.info("Pinned %s (%s bytes) as %s", filename, len(data), ipfs_hash)
        return ipfs_hash
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.error("Error uploading %s to IPFS: %s", filename, exc)
        if settings.ENVIRONMENT == "local":
            logger.warning("Using mock IPFS hash for development")
            return _mock_hash()
        raise IPFSError(f"Failed to upload to IPFS: {exc}") from exc


async def upload_json_to_ipfs(data: dict[str, Any], *, name: str = "metadata.json") -> str:
    """Pins a JSON document and returns its content hash."""
    try:
        async with httpx.AsyncClient(timeout=PIN_TIMEOUT) as client:
            response = await client.post(
                f"{settings.PINATA_API_URL}/pinning/pinJSONToIPFS",
                headers=_auth_headers(),
                json={
                    "pinataContent": data,
                    "pinataMetadata": {"name": name, "keyvalues": {"type": "metadata"}},
                },
            )
            response.raise_for_status()
        return response.json()["IpfsHash"]
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.error("Error uploading JSON to IPFS: %s", exc)
        if settings.ENVIRONMENT == "local":
            logger.warning("Using mock IPFS hash for development")
            return _mock_hash()
        raise IPFSError(f"Failed to upload JSON to IPFS: {exc}") from exc


def get_ipfs_url(ipfs_hash: str) -> str:
    if ipfs_hash.startswith("http") or ipfs_hash.startswith("ipfs://"):
        return ipfs_hash
    if ipfs_hash.startswith(MOCK_HASH_PREFIX):
        return f"{settings.PUBLIC_APP_URL}/api/mock/{ipfs_hash}"
    return f"{settings.IPFS_GATEWAY}{ipfs_hash}"


async def fetch_from_ipfs(ipfs_hash: str) -> Any:
    """Fetches a pinned JSON document through the gateway."""
    url = get_ipfs_url(ipfs_hash)
    try:
        async with httpx.AsyncClient(timeout=PIN_TIMEOUT) as client:
            response = await client.get(url)
            response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Error fetching %s from IPFS: %s", ipfs_hash, exc)
        if settings.ENVIRONMENT == "local":
            logger.warning("Using mock data for development")
            return {"mockData": True, "hash": ipfs_hash}
        raise IPFSError(f"Failed to fetch from IPFS: {exc}") from exc
