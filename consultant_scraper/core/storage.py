"""JSON and CSV persistence for scrape results."""

from __future__ import annotations

import csv
import hashlib
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Union

from consultant_scraper.models import ProfileRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_filename(identity: str) -> str:
    """Turn an identity into a filesystem-safe file stem.

    Identities that needed cleaning get a short digest of the raw value
    appended, so "a/b" and "a_b" never share a checkpoint file.
    """
    if not identity:
        return "_empty"
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", identity)
    if cleaned == identity:
        return cleaned
    digest = hashlib.sha1(identity.encode("utf-8")).hexdigest()[:8]
    return f"{cleaned}_{digest}"


def write_json(path: PathLike, data: Any) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=2)
    logger.info("JSON file has been saved to: %s", target)
    return target


def write_csv(path: PathLike, rows: Iterable[Dict[str, Any]], columns: Sequence[str]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(columns), extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("CSV file has been saved to: %s", target)
    return target


def read_json(path: PathLike) -> Any:
    with Path(path).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def read_csv(path: PathLike) -> List[Dict[str, str]]:
    with Path(path).open("r", encoding="utf-8", newline="") as fh:
        return list(csv.DictReader(fh))


class ResultStore:
    """Writes each artifact as a ``.json`` document plus a ``.csv`` projection."""

    def __init__(self, list_dir: PathLike, details_dir: PathLike) -> None:
        self.list_dir = Path(list_dir)
        self.details_dir = Path(details_dir)

    def save(
        self,
        directory: Path,
        stem: str,
        documents: List[Dict[str, Any]],
        rows: List[Dict[str, Any]],
        columns: Sequence[str],
    ) -> None:
        write_json(directory / f"{stem}.json", documents)
        write_csv(directory / f"{stem}.csv", rows, columns)

    def load_profiles(self, path: PathLike) -> List[ProfileRecord]:
        raw = read_json(path)
        if not isinstance(raw, list):
            raise ValueError(f"Expected a JSON list of profiles in {path}")
        return [ProfileRecord.from_dict(item) for item in raw]
