"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

DEFAULT_LIST_URL = "https://client.schwab.com/public/consultant/searchByName/"
DEFAULT_DETAIL_URL = "https://www.schwab.com/app/branch-services/financial-consultant"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36"
)
BACKOFF_POLICIES = ("linear", "exponential")


class ConfigError(RuntimeError):
    """Raised when configuration values cannot be used."""


def _default_list_headers() -> Dict[str, str]:
    return {
        "accept": "*/*",
        "content-type": "application/x-www-form-urlencoded; charset=UTF-8",
        "origin": "https://client.schwab.com",
        "referer": "https://client.schwab.com/public/consultant/find",
        "x-requested-with": "XMLHttpRequest",
    }


def _default_detail_headers() -> Dict[str, str]:
    return {
        "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "accept-language": "en-US,en;q=0.9",
        "cache-control": "no-cache",
        "upgrade-insecure-requests": "1",
    }


@dataclass(frozen=True)
class Settings:
    list_url: str = DEFAULT_LIST_URL
    detail_url: str = DEFAULT_DETAIL_URL
    user_agent: str = DEFAULT_USER_AGENT
    list_headers: Dict[str, str] = field(default_factory=_default_list_headers)
    detail_headers: Dict[str, str] = field(default_factory=_default_detail_headers)
    page_size: int = 100
    max_retries: int = 3
    backoff_policy: str = "linear"
    backoff_seconds: float = 1.0
    request_timeout: float = 30.0
    detail_concurrency: int = 20
    proxy_url: Optional[str] = None
    list_results_dir: str = "results_list"
    details_results_dir: str = "results_details"
    log_level: str = "INFO"
    log_memory_usage: bool = False
    worker_port: int = 8080

    def __post_init__(self) -> None:
        if self.backoff_policy not in BACKOFF_POLICIES:
            raise ConfigError(
                f"FETCH_BACKOFF_POLICY must be one of {', '.join(BACKOFF_POLICIES)}, got {self.backoff_policy!r}"
            )
        if self.max_retries < 1:
            raise ConfigError("FETCH_MAX_RETRIES must be at least 1")
        if self.backoff_seconds < 0:
            raise ConfigError("FETCH_BACKOFF_SECONDS cannot be negative")
        if self.detail_concurrency < 1:
            raise ConfigError("DETAIL_CONCURRENCY must be at least 1")
        if self.page_size < 1:
            raise ConfigError("LIST_PAGE_SIZE must be at least 1")

    @property
    def proxies(self) -> Optional[Dict[str, str]]:
        if not self.proxy_url:
            return None
        return {"http": self.proxy_url, "https": self.proxy_url}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def _build_proxy_url() -> Optional[str]:
    proxy_url = os.getenv("PROXY_URL")
    if proxy_url:
        return proxy_url.strip()

    host = os.getenv("PROXY_HOST")
    if not host:
        return None
    port = os.getenv("PROXY_PORT")
    if not port:
        raise ConfigError("PROXY_PORT must be set together with PROXY_HOST")

    user = os.getenv("PROXY_USER")
    password = os.getenv("PROXY_PASS")
    credentials = f"{user}:{password}@" if user and password else ""
    return f"http://{credentials}{host.strip()}:{port.strip()}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    user_agent = os.getenv("DIRECTORY_USER_AGENT") or DEFAULT_USER_AGENT
    proxy_url = _build_proxy_url()
    if not proxy_url:
        logger.debug("No proxy configured; requests go out directly.")

    settings = Settings(
        list_url=os.getenv("DIRECTORY_LIST_URL") or DEFAULT_LIST_URL,
        detail_url=(os.getenv("DIRECTORY_DETAIL_URL") or DEFAULT_DETAIL_URL).rstrip("/"),
        user_agent=user_agent,
        page_size=_env_int("LIST_PAGE_SIZE", 100),
        max_retries=_env_int("FETCH_MAX_RETRIES", 3),
        backoff_policy=(os.getenv("FETCH_BACKOFF_POLICY") or "linear").strip().lower(),
        backoff_seconds=_env_float("FETCH_BACKOFF_SECONDS", 1.0),
        request_timeout=_env_float("REQUEST_TIMEOUT", 30.0),
        detail_concurrency=_env_int("DETAIL_CONCURRENCY", 20),
        proxy_url=proxy_url,
        list_results_dir=os.getenv("LIST_RESULTS_DIR") or "results_list",
        details_results_dir=os.getenv("DETAILS_RESULTS_DIR") or "results_details",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_memory_usage=os.getenv("LOG_MEMORY_USAGE", "false").lower() in {"1", "true", "yes"},
        worker_port=_env_int("WORKER_PORT", 8080),
    )

    if settings.max_retries == 1:
        logger.warning("FETCH_MAX_RETRIES=1; failed requests will not be retried.")

    return settings
