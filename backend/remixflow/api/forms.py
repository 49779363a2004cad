"""Helpers for multipart form fields that carry JSON or numbers as strings."""
import json
from typing import Any

from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError


def parse_json_field(raw: str | None, field_name: str, expected: Any, default: Any) -> Any:
    if raw is None or not raw.strip():
        return default
    try:
        return TypeAdapter(expected).validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}") from exc


def parse_percentage(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Royalty percentage must be a number") from exc
    if not 0 <= value <= 100:
        raise HTTPException(status_code=400, detail="Royalty percentage must be between 0 and 100")
    return value
