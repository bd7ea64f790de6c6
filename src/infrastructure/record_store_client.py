from __future__ import annotations

import logging
import random
import time
from typing import Any, Mapping, Optional, Protocol, cast

import requests

from src.config.settings import get_settings


class _HasHeaders(Protocol):
    headers: Mapping[str, str]


logger = logging.getLogger(__name__)


class RecordStoreError(RuntimeError):
    """Raised when the record store returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordStoreClient:
    """Read-only PostgREST client for the league tables.

    Features:
    - Auth via ``apikey`` and bearer headers (from settings).
    - Configurable timeout, retry count and exponential backoff with jitter.
    - Retries on HTTP 429, 5xx, timeouts and connection errors.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ) -> None:
        if base_url is None or timeout is None:
            cfg = get_settings()
            base_url = base_url or cfg.base_url
            timeout = timeout if timeout is not None else cfg.timeout
            default_headers = dict(cfg.headers)
        else:
            default_headers = {}
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.max_retries = int(max_retries)
        self.backoff_factor = float(backoff_factor)

        self._session = requests.Session()
        if headers:
            default_headers.update(headers)
        self._session.headers.update(default_headers)

    def _full_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Perform a GET request and return decoded JSON.

        Retries on 429 and 5xx responses with exponential backoff.
        Raises RecordStoreError on persistent failures or non-retriable 4xx.
        """

        url = self._full_url(path)
        attempt = 0
        last_error: Optional[Exception] = None

        while attempt <= self.max_retries:
            try:
                resp = self._session.request(
                    method="GET", url=url, params=params, timeout=self.timeout
                )

                if 200 <= resp.status_code < 300:
                    return resp.json()

                if resp.status_code == 429 or 500 <= resp.status_code < 600:
                    retry_after = self._compute_sleep_seconds(attempt, resp)
                    logger.warning(
                        "RecordStoreClient GET %s failed with %s. Retrying in %.2fs (attempt %d/%d)",
                        url,
                        resp.status_code,
                        retry_after,
                        attempt + 1,
                        self.max_retries,
                    )
                    attempt += 1
                    if attempt > self.max_retries:
                        break
                    time.sleep(retry_after)
                    continue

                # Non-retriable client error
                raise RecordStoreError(
                    f"Record store error {resp.status_code}: {resp.text[:200]}",
                    status_code=resp.status_code,
                )

            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                retry_after = self._compute_sleep_seconds(attempt)
                logger.warning(
                    "RecordStoreClient GET %s exception: %s. Retrying in %.2fs (attempt %d/%d)",
                    url,
                    type(exc).__name__,
                    retry_after,
                    attempt + 1,
                    self.max_retries,
                )
                attempt += 1
                if attempt > self.max_retries:
                    break
                time.sleep(retry_after)

        if last_error is not None:
            raise RecordStoreError(f"Request failed after retries: {last_error}")
        raise RecordStoreError("Request failed after retries", status_code=None)

    def select(self, table: str, *, order: Optional[str] = None) -> list[Mapping[str, Any]]:
        """``SELECT *`` from ``table``, optionally ordered (PostgREST ``order`` syntax)."""
        params: dict[str, str] = {"select": "*"}
        if order:
            params["order"] = order
        payload = self.get(table, params)
        if not isinstance(payload, list):
            raise RecordStoreError(f"Unexpected payload for {table}: {type(payload).__name__}")
        return [row for row in payload if isinstance(row, Mapping)]

    def _compute_sleep_seconds(self, attempt: int, response: Optional[_HasHeaders] = None) -> float:
        """Compute sleep duration for retries.

        - Respect Retry-After header if provided and valid.
        - Otherwise exponential backoff: backoff_factor * (2**attempt) + jitter.
        """
        if response is not None:
            headers = cast(Mapping[str, str], response.headers)
            ra = headers.get("Retry-After")
            if ra:
                try:
                    return max(0.0, float(int(ra)))
                except (TypeError, ValueError):
                    pass

        base: float = float(self.backoff_factor) * float(2**attempt)
        jitter: float = float(random.uniform(0.0, 0.1))
        return float(base + jitter)
