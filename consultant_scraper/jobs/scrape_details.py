"""CLI job that enriches the unique consultant list with profile page details."""

from __future__ import annotations

import argparse
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Sequence

from consultant_scraper.core.config import LOG_FORMAT, ConfigError, get_settings
from consultant_scraper.core.http import FetchError
from consultant_scraper.core.progress import Observer, ProgressTracker, combine_observers, log_memory_usage, log_progress
from consultant_scraper.core.storage import ResultStore, safe_filename
from consultant_scraper.etl.transform import DETAIL_COLUMNS, to_detail_row
from consultant_scraper.jobs.scrape_list import UNIQUE_LIST_STEM
from consultant_scraper.models import EnrichedRecord, ProfileRecord
from consultant_scraper.vendors.directory import DirectoryClient

logger = logging.getLogger(__name__)

CONSOLIDATED_STEM = "all_consultants_details"


def save_enriched(store: ResultStore, stem: str, records: List[EnrichedRecord]) -> None:
    store.save(
        store.details_dir,
        stem,
        [record.to_dict() for record in records],
        [to_detail_row(record) for record in records],
        DETAIL_COLUMNS,
    )


def enrich_profile(client: DirectoryClient, store: ResultStore, profile: ProfileRecord) -> EnrichedRecord:
    """Fetch one profile's details and checkpoint the merged record to disk.

    Exhausted retries, or any other failure for this identity, produce a
    record carrying the error instead of raising.
    """
    try:
        details = client.fetch_detail(profile.id)
        record = EnrichedRecord(profile=profile, scraped_details=details)
    except FetchError as exc:
        logger.error("Error scraping details for %s (ID: %s): %s", profile.name, profile.id, exc)
        record = EnrichedRecord(profile=profile, scraped_details=None, error=str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error scraping details for %s (ID: %s)", profile.name, profile.id)
        record = EnrichedRecord(profile=profile, scraped_details=None, error=str(exc) or type(exc).__name__)

    try:
        save_enriched(store, safe_filename(profile.id), [record])
    except OSError:
        logger.exception("Failed to checkpoint details for %s (ID: %s)", profile.name, profile.id)
    else:
        if record.error is None:
            logger.info("Saved details for %s", profile.name)
    return record


def run_details_job(
    profiles: Sequence[ProfileRecord],
    client: DirectoryClient,
    store: ResultStore,
    *,
    concurrency: int,
    observer: Optional[Observer] = None,
) -> List[EnrichedRecord]:
    """Enrich every profile using at most ``concurrency`` simultaneous fetches.

    Each profile is submitted once up front; the executor's workers pull the
    next pending profile as soon as they free up. Completions are collected
    here, on the calling thread, which alone updates the progress counter and
    result list. The returned list and the consolidated files follow the
    input order, not completion order.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    notify = observer or log_progress
    tracker = ProgressTracker("details", total=len(profiles))
    results: List[Optional[EnrichedRecord]] = [None] * len(profiles)

    with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="details") as executor:
        futures = {
            executor.submit(enrich_profile, client, store, profile): index
            for index, profile in enumerate(profiles)
        }
        for future in as_completed(futures):
            index = futures[future]
            record = future.result()
            results[index] = record
            notify(tracker.record(label=record.id))

    enriched = [record for record in results if record is not None]
    save_enriched(store, CONSOLIDATED_STEM, enriched)
    return enriched


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape profile details for every consultant in the unique list")
    parser.add_argument(
        "--input",
        dest="input_path",
        help="Unique list JSON produced by the list job (default: <LIST_RESULTS_DIR>/all_consultants_list_unique.json)",
    )
    parser.add_argument("--concurrency", type=int, help="Override DETAIL_CONCURRENCY")
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
    store = ResultStore(settings.list_results_dir, settings.details_results_dir)
    input_path = Path(args.input_path) if args.input_path else store.list_dir / f"{UNIQUE_LIST_STEM}.json"
    concurrency = args.concurrency or settings.detail_concurrency

    started = time.monotonic()
    try:
        profiles = store.load_profiles(input_path)
        logger.info("Loaded %d consultants from %s", len(profiles), input_path)
        observer = combine_observers(log_progress, log_memory_usage if settings.log_memory_usage else None)
        with DirectoryClient(settings) as client:
            results = run_details_job(profiles, client, store, concurrency=concurrency, observer=observer)
    except Exception as exc:  # pragma: no cover - CLI fallback
        logger.error("Detail scrape failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc

    failures = sum(1 for record in results if record.error)
    logger.info("Total consultants processed: %d (failed: %d)", len(results), failures)
    logger.info("Time taken: %.2f seconds", time.monotonic() - started)


if __name__ == "__main__":
    main()
