"""Snapshot documents and URL-safe share codes.

A share code is the compact JSON snapshot, zlib-compressed and encoded with
the URL-safe base64 alphabet without padding, so it can live in a URL
fragment as ``p=<code>`` (plus ``&lock=1`` for solve-only links).
"""

from __future__ import annotations

import base64
import binascii
import json
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import parse_qs, urlencode

from ..core.constants import CellKind
from ..core.exceptions import RestoreError
from ..engine.grid import PuzzleGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DOCUMENT_VERSION = 1


def encode_snapshot(snapshot: Dict[str, Any]) -> str:
    raw = json.dumps(snapshot, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    packed = base64.urlsafe_b64encode(zlib.compress(raw, 9)).decode("ascii")
    return packed.rstrip("=")


def decode_snapshot(code: str) -> Dict[str, Any]:
    """Inverse of :func:`encode_snapshot`; any failure raises RestoreError."""

    if not code or not code.strip():
        raise RestoreError("Empty share code")
    text = code.strip()
    padded = text + "=" * (-len(text) % 4)
    try:
        raw = zlib.decompress(base64.urlsafe_b64decode(padded.encode("ascii")))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, zlib.error, UnicodeError, ValueError) as exc:
        LOGGER.warning("Share code could not be decoded: %s", exc)
        raise RestoreError("Decode failed") from exc
    if not isinstance(payload, dict):
        raise RestoreError("Decode failed: snapshot is not an object")
    return payload


def strip_answers(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``snapshot`` with every answer cell blanked, for solve-only links."""

    return {
        "cells": [
            [
                dict(entry, letter="") if entry.get("kind") == CellKind.EMPTY.value else dict(entry)
                for entry in row
            ]
            for row in snapshot.get("cells", [])
        ]
    }


@dataclass(frozen=True)
class SharedPuzzle:
    grid: PuzzleGrid
    locked: bool = False


def make_share_fragment(grid: PuzzleGrid, lock: bool = False) -> str:
    snapshot = grid.to_jsonable()
    if lock:
        snapshot = strip_answers(snapshot)
    params = {"p": encode_snapshot(snapshot)}
    if lock:
        params["lock"] = "1"
    return urlencode(params)


def parse_share_fragment(fragment: str) -> SharedPuzzle:
    """Restore the puzzle carried by a ``#p=...`` fragment."""

    params = parse_qs(fragment.lstrip("#"))
    codes = params.get("p")
    if not codes:
        raise RestoreError("Share link carries no puzzle")
    grid = PuzzleGrid.from_jsonable(decode_snapshot(codes[0]))
    locked = params.get("lock", ["0"])[0] == "1"
    LOGGER.info("Restored shared %dx%d puzzle (locked=%s)", grid.size, grid.size, locked)
    return SharedPuzzle(grid=grid, locked=locked)


# ----------------------------------------------------------------------
# File documents
# ----------------------------------------------------------------------
def to_document(grid: PuzzleGrid) -> Dict[str, Any]:
    return {
        "version": DOCUMENT_VERSION,
        "n": grid.size,
        "created_at": datetime.now(timezone.utc).isoformat(),
        **grid.to_jsonable(),
    }


def from_document(document: Any, expected_size: int | None = None) -> PuzzleGrid:
    if not isinstance(document, dict) or document.get("version") != DOCUMENT_VERSION:
        raise RestoreError("Unsupported puzzle document version")
    grid = PuzzleGrid.from_jsonable(document)
    if document.get("n") != grid.size or (expected_size is not None and grid.size != expected_size):
        raise RestoreError(f"Puzzle document size mismatch: n={document.get('n')}, grid={grid.size}")
    return grid


def document_to_text(grid: PuzzleGrid) -> str:
    return json.dumps(to_document(grid), ensure_ascii=False, indent=2)


def document_from_text(text: str, expected_size: int | None = None) -> PuzzleGrid:
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise RestoreError(f"Puzzle document is not valid JSON: {exc}") from exc
    return from_document(document, expected_size)
