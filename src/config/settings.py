"""Application settings for reaching the league record store.

The record store is a PostgREST endpoint (as exposed by Supabase) holding the
``matches`` and ``penalties`` tables. Environment variables are loaded from a
``.env`` file using ``python-dotenv`` and exposed through a Pydantic settings
object.
"""

from __future__ import annotations

import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
REST_PATH = "rest/v1"
REQUEST_TIMEOUT = 10  # seconds


class Settings(BaseModel):
    """Immutable settings object used by the record store client."""

    base_url: str
    headers: Mapping[str, str]
    timeout: float = REQUEST_TIMEOUT

    model_config = ConfigDict(frozen=True)


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    url = (os.getenv("RECORD_STORE_URL") or "").strip()
    key = (os.getenv("RECORD_STORE_KEY") or "").strip()
    if not url:
        raise RuntimeError("RECORD_STORE_URL is required to read matches and penalties")
    if not key:
        raise RuntimeError("RECORD_STORE_KEY is required to read matches and penalties")

    raw_timeout = os.getenv("RECORD_STORE_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else float(REQUEST_TIMEOUT)
    except ValueError as exc:
        raise RuntimeError(f"RECORD_STORE_TIMEOUT must be a number, got {raw_timeout!r}") from exc

    base_url = f"{url.rstrip('/')}/{REST_PATH}"
    headers: Mapping[str, str] = {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Accept": "application/json",
    }
    return Settings(base_url=base_url, headers=headers, timeout=timeout)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, building them on first use."""
    global _settings
    if _settings is None:
        _settings = _build_settings()
    return _settings
