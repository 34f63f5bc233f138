"""HTTP session setup and retry helpers shared by the list and detail fetchers."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

import requests

from consultant_scraper.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchError(RuntimeError):
    """Base class for failures while fetching directory documents."""


class TransportError(FetchError):
    """A single request failed at the network or HTTP level."""


class ExhaustedRetryError(FetchError):
    """Raised once every allowed attempt for a page or identity has failed."""

    def __init__(self, phase: str, key: str, attempts: int, cause: Optional[BaseException] = None) -> None:
        self.phase = phase
        self.key = key
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"{phase} fetch for {key} failed after {attempts} attempts: {cause}")


def backoff_delay(attempt: int, base: float, policy: str = "linear") -> float:
    """Delay to wait after failed attempt number ``attempt`` (1-based)."""
    if attempt < 1:
        raise ValueError("attempt numbers start at 1")
    if policy == "exponential":
        return base * (2 ** (attempt - 1))
    if policy == "linear":
        return base * attempt
    raise ValueError(f"Unknown backoff policy: {policy}")


def with_retries(
    operation: Callable[[], T],
    *,
    phase: str,
    key: str,
    max_attempts: int,
    backoff_seconds: float,
    backoff_policy: str = "linear",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` transport failures occur.

    Only ``TransportError`` is retried; anything else propagates untouched.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except TransportError as exc:
            if attempt >= max_attempts:
                logger.error("%s fetch for %s exhausted retries (%s/%s): %s", phase, key, attempt, max_attempts, exc)
                raise ExhaustedRetryError(phase, key, attempt, exc) from exc
            delay = backoff_delay(attempt, backoff_seconds, backoff_policy)
            logger.warning(
                "%s fetch for %s failed (attempt %s/%s): %s; retrying in %.1fs",
                phase,
                key,
                attempt,
                max_attempts,
                exc,
                delay,
            )
            sleep(delay)


def build_session(settings: Settings) -> requests.Session:
    """Create the shared session, wiring in the configured user agent and proxy."""
    session = requests.Session()
    session.headers["User-Agent"] = settings.user_agent
    if settings.proxies:
        session.proxies.update(settings.proxies)
        logger.info("Routing directory requests through configured proxy")
    return session


def send(session: requests.Session, method: str, url: str, **kwargs) -> requests.Response:
    """Issue one request, converting every requests failure into ``TransportError``."""
    try:
        response = session.request(method, url, **kwargs)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError(f"{method} {url}: {exc}") from exc
    return response
