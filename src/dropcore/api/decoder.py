"""Decoding of fixed-shape JSON response bodies into typed models."""

from __future__ import annotations

import json
import math
from typing import Any

from dropcore.api.errors import DecodeError
from dropcore.api.models import (
    FIELD_BYTES,
    FIELD_CONTENTS,
    FIELD_COPY_REF,
    FIELD_COUNTRY,
    FIELD_DISPLAY_NAME,
    FIELD_EMAIL,
    FIELD_EXPIRES,
    FIELD_ICON,
    FIELD_IS_DIR,
    FIELD_MIME_TYPE,
    FIELD_MODIFIED,
    FIELD_NORMAL,
    FIELD_PATH,
    FIELD_QUOTA,
    FIELD_QUOTA_INFO,
    FIELD_REFERRAL_LINK,
    FIELD_REV,
    FIELD_REVISION,
    FIELD_ROOT,
    FIELD_SHARED,
    FIELD_SIZE,
    FIELD_THUMB_EXISTS,
    FIELD_UID,
    FIELD_URL,
    AccountInfo,
    CopyReference,
    FileMetadata,
    QuotaInfo,
    ShareLink,
)

MAX_CONTENTS_DEPTH = 32


def decode_json(body: bytes, endpoint: str | None = None) -> Any:
    """Parse a response body as JSON.

    Raises:
        DecodeError: If the body is not valid UTF-8 JSON.
    """
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"Invalid JSON response: {exc}", endpoint) from exc
    except RecursionError as exc:
        raise DecodeError("Invalid JSON response: nested too deeply", endpoint) from exc


def expect_object(value: Any, what: str, endpoint: str | None = None) -> dict[str, Any]:
    """Return ``value`` if it is a JSON object, else raise DecodeError."""
    if not isinstance(value, dict):
        raise DecodeError(f"Expected {what} to be an object, got {type(value).__name__}", endpoint)
    return value


# ------------------------------------------------------------------
# Field readers: an absent or null field yields the zero value
# ------------------------------------------------------------------


def read_str(raw: dict[str, Any], key: str, endpoint: str | None = None) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"Field '{key}' must be a string, got {type(value).__name__}", endpoint)
    return value


def read_bool(raw: dict[str, Any], key: str, endpoint: str | None = None) -> bool:
    value = raw.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"Field '{key}' must be a boolean, got {type(value).__name__}", endpoint)
    return value


def read_uint(raw: dict[str, Any], key: str, endpoint: str | None = None) -> int:
    """Read a non-negative integer, truncating floats toward zero.

    JSON has no integer type, so counts may arrive as ``1024.0``.
    """
    value = raw.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{key}' must be a number, got {type(value).__name__}", endpoint)
    if isinstance(value, float) and not math.isfinite(value):
        raise DecodeError(f"Field '{key}' must be finite, got {value}", endpoint)
    if value < 0:
        raise DecodeError(f"Field '{key}' must not be negative, got {value}", endpoint)
    return int(value)


def _require_str(raw: dict[str, Any], key: str, endpoint: str | None) -> str:
    if key not in raw:
        raise DecodeError(f"Missing required field '{key}'", endpoint)
    return read_str(raw, key, endpoint)


# ------------------------------------------------------------------
# Model decoders
# ------------------------------------------------------------------


def file_metadata_from_dict(
    raw: dict[str, Any], endpoint: str | None = None, depth: int = 0
) -> FileMetadata:
    """Map a raw metadata object to FileMetadata.

    Unknown keys are ignored. Folder ``contents`` are decoded recursively.
    ``depth`` is the nesting level of ``raw``; folders nested deeper than
    MAX_CONTENTS_DEPTH are rejected.

    Raises:
        DecodeError: If any recognized field has the wrong type, or contents
            are nested too deeply.
    """
    if depth > MAX_CONTENTS_DEPTH:
        raise DecodeError(
            f"Field '{FIELD_CONTENTS}' nested deeper than {MAX_CONTENTS_DEPTH}", endpoint
        )
    raw_contents = raw.get(FIELD_CONTENTS)
    contents: list[FileMetadata] = []
    if raw_contents is not None:
        if not isinstance(raw_contents, list):
            raise DecodeError(f"Field '{FIELD_CONTENTS}' must be a list", endpoint)
        contents = [
            file_metadata_from_dict(
                expect_object(child, FIELD_CONTENTS, endpoint), endpoint, depth + 1
            )
            for child in raw_contents
        ]

    return FileMetadata(
        size=read_str(raw, FIELD_SIZE, endpoint),
        rev=read_str(raw, FIELD_REV, endpoint),
        thumb_exists=read_bool(raw, FIELD_THUMB_EXISTS, endpoint),
        bytes=read_uint(raw, FIELD_BYTES, endpoint),
        modified=read_str(raw, FIELD_MODIFIED, endpoint),
        path=read_str(raw, FIELD_PATH, endpoint),
        is_dir=read_bool(raw, FIELD_IS_DIR, endpoint),
        icon=read_str(raw, FIELD_ICON, endpoint),
        root=read_str(raw, FIELD_ROOT, endpoint),
        mime_type=read_str(raw, FIELD_MIME_TYPE, endpoint),
        revision=read_uint(raw, FIELD_REVISION, endpoint),
        contents=contents,
    )


def decode_file_metadata(body: bytes, endpoint: str | None = None) -> FileMetadata:
    """Decode a single metadata object response."""
    raw = expect_object(decode_json(body, endpoint), "metadata", endpoint)
    return file_metadata_from_dict(raw, endpoint)


def decode_file_list(body: bytes, endpoint: str | None = None) -> list[FileMetadata]:
    """Decode a JSON array of metadata objects (search and revisions)."""
    raw = decode_json(body, endpoint)
    if not isinstance(raw, list):
        raise DecodeError(f"Expected a list of metadata, got {type(raw).__name__}", endpoint)
    return [
        file_metadata_from_dict(expect_object(item, "metadata", endpoint), endpoint)
        for item in raw
    ]


def decode_account_info(body: bytes, endpoint: str | None = None) -> AccountInfo:
    raw = expect_object(decode_json(body, endpoint), "account info", endpoint)
    raw_quota = raw.get(FIELD_QUOTA_INFO)
    quota = QuotaInfo()
    if raw_quota is not None:
        raw_quota = expect_object(raw_quota, FIELD_QUOTA_INFO, endpoint)
        quota = QuotaInfo(
            shared=read_uint(raw_quota, FIELD_SHARED, endpoint),
            quota=read_uint(raw_quota, FIELD_QUOTA, endpoint),
            normal=read_uint(raw_quota, FIELD_NORMAL, endpoint),
        )
    return AccountInfo(
        referral_link=read_str(raw, FIELD_REFERRAL_LINK, endpoint),
        display_name=read_str(raw, FIELD_DISPLAY_NAME, endpoint),
        country=read_str(raw, FIELD_COUNTRY, endpoint),
        email=read_str(raw, FIELD_EMAIL, endpoint),
        uid=read_uint(raw, FIELD_UID, endpoint),
        quota_info=quota,
    )


def decode_share_link(body: bytes, endpoint: str | None = None) -> ShareLink:
    raw = expect_object(decode_json(body, endpoint), "link", endpoint)
    return ShareLink(
        url=_require_str(raw, FIELD_URL, endpoint),
        expires=read_str(raw, FIELD_EXPIRES, endpoint),
    )


def decode_copy_ref(body: bytes, endpoint: str | None = None) -> CopyReference:
    raw = expect_object(decode_json(body, endpoint), "copy_ref", endpoint)
    return CopyReference(
        copy_ref=_require_str(raw, FIELD_COPY_REF, endpoint),
        expires=read_str(raw, FIELD_EXPIRES, endpoint),
    )
