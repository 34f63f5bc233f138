"""Identity-based deduplication of scraped profiles."""

from typing import Dict, Iterable, List

from consultant_scraper.models import ProfileRecord


def dedupe(records: Iterable[ProfileRecord]) -> List[ProfileRecord]:
    """Keep the first record seen for each ``id``, preserving input order.

    Records whose ``id`` could not be extracted all share the key ``""``, so
    only the first of them survives.
    """
    unique: Dict[str, ProfileRecord] = {}
    for record in records:
        if record.id not in unique:
            unique[record.id] = record
    return list(unique.values())
