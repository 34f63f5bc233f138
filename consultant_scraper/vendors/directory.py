"""Client for the consultant directory search and profile endpoints."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from consultant_scraper.core.config import Settings, get_settings
from consultant_scraper.core.http import build_session, send, with_retries
from consultant_scraper.etl.extract import extract_detail
from consultant_scraper.models import DetailRecord

logger = logging.getLogger(__name__)


def build_list_form(page_index: int, page_size: int, shard_key: Optional[str] = None) -> dict:
    """Form body for one search page; ``resultMax`` is the offset of the page's first row."""
    if page_index < 1:
        raise ValueError("page_index starts at 1")
    return {
        "searchString": shard_key or "",
        "pageSize": page_size,
        "resultMax": (page_index - 1) * page_size,
    }


def describe_page(page_index: int, shard_key: Optional[str] = None) -> str:
    if shard_key:
        return f"shard {shard_key} page {page_index}"
    return f"page {page_index}"


class DirectoryClient:
    """Fetches search result pages and profile pages with bounded retries."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or build_session(self.settings)
        self._sleep = sleep

    def _retry(self, operation, *, phase: str, key: str):
        return with_retries(
            operation,
            phase=phase,
            key=key,
            max_attempts=self.settings.max_retries,
            backoff_seconds=self.settings.backoff_seconds,
            backoff_policy=self.settings.backoff_policy,
            sleep=self._sleep,
        )

    def fetch_page(self, page_index: int, shard_key: Optional[str] = None) -> str:
        """Return the raw HTML of one search results page."""
        form = build_list_form(page_index, self.settings.page_size, shard_key)
        key = describe_page(page_index, shard_key)

        def _request() -> str:
            logger.info("Fetching %s", key)
            response = send(
                self.session,
                "POST",
                self.settings.list_url,
                data=form,
                headers=self.settings.list_headers,
                timeout=self.settings.request_timeout,
            )
            logger.debug("Response size for %s: %.2f KB", key, len(response.text) / 1024)
            return response.text

        return self._retry(_request, phase="list", key=key)

    def detail_url(self, identity: str) -> str:
        return f"{self.settings.detail_url.rstrip('/')}/{identity}"

    def fetch_detail(self, identity: str) -> DetailRecord:
        """Fetch and parse the profile page for ``identity``."""
        url = self.detail_url(identity)

        def _request() -> str:
            logger.debug("Scraping details for consultant %s", identity)
            response = send(
                self.session,
                "GET",
                url,
                headers=self.settings.detail_headers,
                timeout=self.settings.request_timeout,
            )
            return response.text

        html = self._retry(_request, phase="detail", key=identity)
        return extract_detail(html)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "DirectoryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
