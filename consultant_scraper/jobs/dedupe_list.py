"""CLI job that deduplicates an already persisted consultant list."""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from consultant_scraper.core.config import LOG_FORMAT, get_settings
from consultant_scraper.core.storage import ResultStore, write_json
from consultant_scraper.etl.dedupe import dedupe
from consultant_scraper.jobs.scrape_list import ALL_LIST_STEM

logger = logging.getLogger(__name__)

DEDUPED_STEM = "all_consultants_list_removed_duplicates"


def dedupe_list_file(store: ResultStore, input_path: Path, output_path: Path) -> int:
    """Rewrite ``input_path`` without duplicate ids and return the surviving count."""
    consultants = store.load_profiles(input_path)
    logger.info("Number of consultants before removing duplicates: %d", len(consultants))

    unique = dedupe(consultants)
    logger.info("Number of consultants after removing duplicates: %d", len(unique))

    write_json(output_path, [record.to_dict() for record in unique])
    return len(unique)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remove duplicate consultants from a persisted list")
    parser.add_argument("--input", dest="input_path", help="List JSON to read (default: all_consultants_list.json)")
    parser.add_argument("--output", dest="output_path", help="Where to write the deduplicated list")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    args = build_parser().parse_args(argv)

    store = ResultStore(settings.list_results_dir, settings.details_results_dir)
    input_path = Path(args.input_path) if args.input_path else store.list_dir / f"{ALL_LIST_STEM}.json"
    output_path = Path(args.output_path) if args.output_path else store.list_dir / f"{DEDUPED_STEM}.json"
    dedupe_list_file(store, input_path, output_path)


if __name__ == "__main__":
    main()
