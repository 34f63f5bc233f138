"""CLI job that post-processes the consolidated details CSV for spreadsheet use."""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from consultant_scraper.core.config import LOG_FORMAT, get_settings
from consultant_scraper.core.storage import read_csv, write_csv
from consultant_scraper.etl.transform import fix_detail_rows
from consultant_scraper.jobs.scrape_details import CONSOLIDATED_STEM

logger = logging.getLogger(__name__)

FIXED_STEM = "all_consultants_details_new"


def fix_csv_file(input_path: Path, output_path: Path, detail_url: str) -> int:
    rows = read_csv(input_path)
    if not rows:
        logger.warning("No rows found in %s; nothing to fix.", input_path)
        return 0

    fixed = fix_detail_rows(rows, detail_url)
    write_csv(output_path, fixed, list(fixed[0].keys()))
    return len(fixed)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Add profile URLs and clean branch details in the details CSV")
    parser.add_argument("--input", dest="input_path", help="Consolidated details CSV")
    parser.add_argument("--output", dest="output_path", help="Where to write the fixed CSV")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    args = build_parser().parse_args(argv)

    details_dir = Path(settings.details_results_dir)
    input_path = Path(args.input_path) if args.input_path else details_dir / f"{CONSOLIDATED_STEM}.csv"
    output_path = Path(args.output_path) if args.output_path else details_dir / f"{FIXED_STEM}.csv"
    count = fix_csv_file(input_path, output_path, settings.detail_url)
    logger.info("The CSV file was written successfully (%d rows)", count)


if __name__ == "__main__":
    main()
