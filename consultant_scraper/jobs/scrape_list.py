"""CLI job that walks the directory search pages and persists the consultant list."""

from __future__ import annotations

import argparse
import logging
import string
import time
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from consultant_scraper.core.config import LOG_FORMAT, ConfigError, get_settings
from consultant_scraper.core.http import ExhaustedRetryError
from consultant_scraper.core.progress import Observer, ProgressTracker, combine_observers, log_memory_usage, log_progress
from consultant_scraper.core.storage import ResultStore
from consultant_scraper.etl.dedupe import dedupe
from consultant_scraper.etl.extract import extract_profiles
from consultant_scraper.etl.transform import LIST_COLUMNS, to_list_row
from consultant_scraper.models import ProfileRecord
from consultant_scraper.vendors.directory import DirectoryClient, describe_page

logger = logging.getLogger(__name__)

ALPHABET_SHARDS: Sequence[str] = tuple(string.ascii_uppercase)

ALL_LIST_STEM = "all_consultants_list"
UNIQUE_LIST_STEM = "all_consultants_list_unique"


@dataclass
class ListRunResult:
    records: List[ProfileRecord] = field(default_factory=list)
    unique_records: List[ProfileRecord] = field(default_factory=list)
    pages_fetched: int = 0
    failed_shards: List[str] = field(default_factory=list)


def page_stem(page_index: int, shard_key: Optional[str] = None) -> str:
    if shard_key:
        return f"consultants_{shard_key}_page_{page_index}"
    return f"consultants_page_{page_index}"


def _save_records(store: ResultStore, stem: str, records: List[ProfileRecord]) -> None:
    store.save(
        store.list_dir,
        stem,
        [record.to_dict() for record in records],
        [to_list_row(record) for record in records],
        LIST_COLUMNS,
    )


def _scrape_shard(
    client: DirectoryClient,
    store: ResultStore,
    shard_key: Optional[str],
    max_pages: Optional[int],
    tracker: ProgressTracker,
    observer: Observer,
    result: ListRunResult,
) -> None:
    page_index = 1
    while max_pages is None or page_index <= max_pages:
        html = client.fetch_page(page_index, shard_key)
        consultants = extract_profiles(html)
        if not consultants:
            logger.info("No more consultants found on %s. Finishing shard.", describe_page(page_index, shard_key))
            return

        result.records.extend(consultants)
        result.pages_fetched += 1
        logger.info(
            "%s: found %d consultants. Total: %d",
            describe_page(page_index, shard_key),
            len(consultants),
            len(result.records),
        )
        _save_records(store, page_stem(page_index, shard_key), consultants)
        observer(tracker.record(label=describe_page(page_index, shard_key)))
        page_index += 1


def run_list_job(
    client: DirectoryClient,
    store: ResultStore,
    *,
    shard_keys: Sequence[str] = (),
    max_pages: Optional[int] = None,
    observer: Optional[Observer] = None,
) -> ListRunResult:
    """Scrape every page of every shard, then persist the full and unique lists.

    An empty ``shard_keys`` runs a single unfiltered page sequence. ``max_pages``
    caps the pages fetched per shard. A shard whose fetch exhausts its retries
    is abandoned; records gathered from other shards are still persisted.
    """
    if max_pages is not None and max_pages < 1:
        raise ValueError("max_pages must be positive")

    notify = observer or log_progress
    tracker = ProgressTracker("list")
    result = ListRunResult()
    shards: Sequence[Optional[str]] = list(shard_keys) or [None]

    for shard_key in shards:
        if shard_key:
            logger.info("Starting shard %s", shard_key)
        try:
            _scrape_shard(client, store, shard_key, max_pages, tracker, notify, result)
        except ExhaustedRetryError as exc:
            label = shard_key or "flat"
            logger.error("Aborting shard %s: %s", label, exc)
            result.failed_shards.append(label)

    if not result.records:
        logger.warning(
            "No consultants were scraped. Check whether the site structure changed or access is blocked."
        )
        return result

    logger.info("Removing duplicates...")
    result.unique_records = dedupe(result.records)
    logger.info("Duplicates removed. Unique consultants: %d", len(result.unique_records))

    _save_records(store, ALL_LIST_STEM, result.records)
    _save_records(store, UNIQUE_LIST_STEM, result.unique_records)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape the consultant directory list")
    parser.add_argument(
        "max_pages",
        nargs="?",
        type=int,
        default=None,
        help="Maximum number of pages to fetch per shard (default: until an empty page)",
    )
    parser.add_argument(
        "--sharded",
        action="store_true",
        help="Search letter by letter (A-Z) instead of one unfiltered listing",
    )
    parser.add_argument("--page-size", dest="page_size", type=int, help="Override LIST_PAGE_SIZE")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    if args.page_size:
        settings = replace(settings, page_size=args.page_size)

    logger.info("Starting scraper. Max pages: %s", args.max_pages or "Unlimited")
    observer = combine_observers(log_progress, log_memory_usage if settings.log_memory_usage else None)
    store = ResultStore(settings.list_results_dir, settings.details_results_dir)

    started = time.monotonic()
    try:
        with DirectoryClient(settings) as client:
            result = run_list_job(
                client,
                store,
                shard_keys=ALPHABET_SHARDS if args.sharded else (),
                max_pages=args.max_pages,
                observer=observer,
            )
    except Exception as exc:  # pragma: no cover - CLI fallback
        logger.error("List scrape failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc

    logger.info("Total consultants scraped: %d (unique: %d)", len(result.records), len(result.unique_records))
    logger.info("Pages scraped: %d", result.pages_fetched)
    if result.failed_shards:
        logger.warning("Shards aborted after exhausting retries: %s", ", ".join(result.failed_shards))
    logger.info("Time taken: %.2f seconds", time.monotonic() - started)


if __name__ == "__main__":
    main()
