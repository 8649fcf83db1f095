"""Lightweight HTTP client for the highscore service."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from ..core.exceptions import ScoreStoreError
from ..core.models import RELOAD_SENTINEL_MS, ScoreRow
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)

HIGHSCORES_URL_ENV = "ARROWWORD_HIGHSCORES_URL"
DEFAULT_HIGHSCORES_URL = "http://localhost:3000/api/highscores"


def rows_from_payload(data: Any) -> List[ScoreRow]:
    """Parse a ``{"rows": [...]}`` payload (or a bare list), skipping malformed rows."""

    raw_rows = data.get("rows") if isinstance(data, dict) else data
    if raw_rows is None:
        return []
    if not isinstance(raw_rows, list):
        raise ScoreStoreError(f"Highscore rows must be a list, got {type(raw_rows).__name__}")
    rows = []
    for raw in raw_rows:
        if not isinstance(raw, dict):
            LOGGER.warning("Skipping highscore row that is not an object: %r", raw)
            continue
        try:
            rows.append(ScoreRow.from_payload(raw))
        except (TypeError, ValueError) as exc:
            LOGGER.warning("Skipping malformed highscore row %s: %s", raw, exc)
    return rows


@dataclass
class ScoreStoreConfig:
    """Where the highscore endpoint lives and how long to wait for it."""

    url: str = field(default_factory=lambda: os.environ.get(HIGHSCORES_URL_ENV, DEFAULT_HIGHSCORES_URL))
    timeout_seconds: float = 10.0


class ScoreStoreClient:
    """Minimal client around the ``/api/highscores`` endpoint.

    ``GET`` returns ``{"rows": [...]}``; ``POST`` accepts
    ``{"nickname", "time_ms"}``. Retries are left to the caller.
    """

    def __init__(
        self,
        config: Optional[ScoreStoreConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ScoreStoreConfig()
        self.session = session or requests.Session()

    def fetch_rows(self) -> List[ScoreRow]:
        """Fetch every row the store currently exposes."""
        rows = rows_from_payload(self._request("GET"))
        LOGGER.debug("Fetched %d highscore rows", len(rows))
        return rows

    def submit_row(self, nickname: str, time_ms: int | float) -> ScoreRow:
        """Store one finished (or abandoned) run and return it as a row."""
        clean_nickname = (nickname or "").strip()
        if not clean_nickname:
            raise ValueError("nickname must not be blank")
        if isinstance(time_ms, bool) or not isinstance(time_ms, (int, float)):
            raise ValueError(f"time_ms must be a number, got {time_ms!r}")
        if not math.isfinite(time_ms) or time_ms < 0:
            raise ValueError(f"time_ms must be a finite, non-negative number, got {time_ms!r}")

        payload = {"nickname": clean_nickname, "time_ms": int(time_ms)}
        data = self._request("POST", json=payload)
        stored = data.get("row")
        if isinstance(stored, dict):
            return ScoreRow.from_payload(stored)
        return ScoreRow(
            id=None,
            nickname=clean_nickname,
            time_ms=int(time_ms),
            created_at=datetime.now(timezone.utc),
        )

    def submit_reload(self, nickname: str) -> ScoreRow:
        """Record a run abandoned by reloading the page."""
        return self.submit_row(nickname, RELOAD_SENTINEL_MS)

    def _request(self, method: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self.session.request(
                method,
                self.config.url,
                timeout=self.config.timeout_seconds,
                **kwargs,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.warning("Highscore %s failed: %s", method, exc)
            raise ScoreStoreError(f"Highscore request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ScoreStoreError("Highscore response is not JSON") from exc
        if not isinstance(data, dict):
            raise ScoreStoreError("Highscore response is not an object")
        if data.get("error"):
            raise ScoreStoreError(f"Highscore service error: {data['error']}")
        return data
