"""Decoding of /delta responses into typed entries.

The wire format carries each change as a two-element array
``[path, metadata-or-null]`` rather than an object, so entries are
validated and dispatched on the runtime shape of the second element.
"""

from __future__ import annotations

import logging
from typing import Any

from dropcore.api.decoder import (
    decode_json,
    expect_object,
    file_metadata_from_dict,
    read_bool,
    read_str,
)
from dropcore.api.errors import DecodeError
from dropcore.api.models import (
    DELTA_CURSOR,
    DELTA_ENTRIES,
    DELTA_HAS_MORE,
    DELTA_RESET,
    DeltaEntry,
    DeltaEnvelope,
)

logger = logging.getLogger(__name__)


def normalize_entry(raw: Any, index: int = 0, endpoint: str | None = None) -> DeltaEntry:
    """Convert one raw ``[path, metadata]`` pair into a DeltaEntry.

    Args:
        raw: The raw entry as parsed from JSON.
        index: Position of the entry in the batch, used in error messages.
        endpoint: Endpoint URL, used in error messages.

    Returns:
        DeltaEntry whose metadata is None when the path was deleted.

    Raises:
        DecodeError: If the entry is not a two-element array, the path is not
            a string, or the metadata is neither null nor a valid object.
    """
    if not isinstance(raw, list) or len(raw) != 2:
        raise DecodeError(f"Delta entry {index} must be a [path, metadata] pair: {raw!r}", endpoint)

    path, raw_metadata = raw
    if not isinstance(path, str):
        raise DecodeError(
            f"Delta entry {index} path must be a string, got {type(path).__name__}", endpoint
        )

    if raw_metadata is None:
        return DeltaEntry(path=path, metadata=None)

    metadata = expect_object(raw_metadata, f"delta entry {index} metadata", endpoint)
    try:
        return DeltaEntry(path=path, metadata=file_metadata_from_dict(metadata, endpoint))
    except DecodeError as exc:
        raise DecodeError(f"Delta entry {index} ({path}): {exc.message}", endpoint) from exc


def normalize_entries(raw_entries: Any, endpoint: str | None = None) -> list[DeltaEntry]:
    """Convert the raw delta entry list into typed DeltaEntry objects.

    Fails on the first malformed entry; no partial list is ever returned.

    Raises:
        DecodeError: If ``raw_entries`` is not a list or any entry is malformed.
    """
    if not isinstance(raw_entries, list):
        raise DecodeError(
            f"Delta entries must be a list, got {type(raw_entries).__name__}", endpoint
        )
    return [normalize_entry(raw, i, endpoint) for i, raw in enumerate(raw_entries)]


def decode_delta(body: bytes, endpoint: str | None = None) -> DeltaEnvelope:
    """Decode a full /delta response body.

    Args:
        body: Raw JSON body.
        endpoint: Endpoint URL, used in error messages.

    Returns:
        DeltaEnvelope with the cursor, flags and normalized entries.

    Raises:
        DecodeError: If the body or any entry is malformed.
    """
    raw = expect_object(decode_json(body, endpoint), "delta response", endpoint)
    raw_entries = raw.get(DELTA_ENTRIES)
    entries = [] if raw_entries is None else normalize_entries(raw_entries, endpoint)
    envelope = DeltaEnvelope(
        reset=read_bool(raw, DELTA_RESET, endpoint),
        cursor=read_str(raw, DELTA_CURSOR, endpoint),
        has_more=read_bool(raw, DELTA_HAS_MORE, endpoint),
        entries=entries,
    )
    logger.info(
        "[decode_delta] decoded delta page; entries:%d;reset:%s;has_more:%s",
        len(entries),
        envelope.reset,
        envelope.has_more,
    )
    return envelope
