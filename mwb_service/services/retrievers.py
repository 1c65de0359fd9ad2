"""HTTP retrieval collaborator: fetch text or JSON and report failures as values."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..core import constants
from ..core.errors import RetrievalError
from ..core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


def create_headers(content_type: str, *, referer: str, accept_language: str) -> Dict[str, str]:
    """Headers for a GET request expecting ``content_type``."""
    return {
        "User-Agent": constants.BROWSER_USER_AGENT,
        "Accept": content_type,
        "Accept-Language": accept_language,
        "Accept-Encoding": "gzip, deflate, br",
        "Referer": referer,
    }


class WolRetriever:
    """
    Thin wrapper over a shared ``httpx.AsyncClient``.

    No caching and no retries: every call is one request, and any failure
    comes back as an ``Err`` carrying a ``RetrievalError``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str = constants.BASE_URL,
        accept_language: str = "es-ES,es;q=0.5",
        slow_request_seconds: float = 10.0,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.accept_language = accept_language
        self.slow_request_seconds = slow_request_seconds

    async def _get(self, url: str, content_type: str) -> Result[httpx.Response]:
        headers = create_headers(content_type, referer=self.base_url, accept_language=self.accept_language)
        start = time.perf_counter()
        logger.debug(f"Sending GET request to [{url}]")

        try:
            response = await self.http_client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            elapsed = time.perf_counter() - start
            message = f"Request to [{url}] failed after [{elapsed:.4f}] seconds. Request timed out: [{e}]"
            logger.error(message)
            return Err(RetrievalError(message, url=url))
        except httpx.RequestError as e:
            elapsed = time.perf_counter() - start
            message = f"Request to [{url}] failed after [{elapsed:.4f}] seconds. Network or DNS error occurred: [{e}]"
            logger.error(message)
            return Err(RetrievalError(message, url=url))

        elapsed = time.perf_counter() - start
        if response.is_error:
            message = (
                f"Failed to fetch [{url}] with status [{response.status_code}] ({response.reason_phrase}) "
                f"after [{elapsed:.4f}] seconds. Response headers: [{dict(response.headers)}]"
            )
            logger.error(message)
            return Err(RetrievalError(message, url=url, status_code=response.status_code))

        if elapsed > self.slow_request_seconds:
            logger.warning(f"Operation took [{elapsed:.4f}] seconds")

        return Ok(response)

    async def fetch_text(self, url: str) -> Result[str]:
        """Fetch ``url`` and return its body as text."""
        result = await self._get(url, "text/html")
        if not result.ok:
            return result
        content = result.value.text
        logger.info(f"Received TEXT content from [{url}] with status code [{result.value.status_code}]. Content length: [{len(content)}]")
        return Ok(content)

    async def fetch_json(self, url: str) -> Result[Any]:
        """Fetch ``url`` and decode its body as JSON."""
        result = await self._get(url, "application/json")
        if not result.ok:
            return result
        try:
            content = result.value.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse JSON response from [{url}]: [{e}]")
            return Err(RetrievalError(f"Failed to parse JSON response: [{e}]", url=url))
        logger.info(f"Received JSON content from [{url}] with status code [{result.value.status_code}]")
        return Ok(content)

    def absolute(self, path: str, language_prefix: Optional[str] = None) -> str:
        """Join a site path (optionally behind a language segment) onto the base URL."""
        prefix = language_prefix or ""
        return f"{self.base_url}{prefix}{path}"
