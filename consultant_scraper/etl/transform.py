"""Utilities for flattening scraped records into spreadsheet rows."""

import logging
import re
from typing import Dict, Iterable, List, Optional

from consultant_scraper.models import EnrichedRecord, Location, ProfileRecord

logger = logging.getLogger(__name__)

LIST_COLUMNS = ["ID", "Name", "Title", "Designation", "Locations", "PhoneNumbers"]
DETAIL_COLUMNS = LIST_COLUMNS + [
    "FinancialCredentials",
    "ExperienceYears",
    "ExperiencePositions",
    "Education",
    "BranchInformation",
    "BranchMapLink",
    "Error",
]

_CAMEL_JOIN_REGEX = re.compile(r"([a-z0-9])([A-Z])")
_GLUED_DIGIT_REGEX = re.compile(r"([^\s\d(\-])(\d)")
_TRAILING_PHONE_REGEX = re.compile(r"(?<=\S)(.{14})$")


def _join(values: Optional[Iterable[str]], separator: str = "; ") -> str:
    return separator.join(values or [])


def location_to_text(location: Location) -> str:
    return " ".join(part for part in location.components() if part)


def locations_to_text(locations: Iterable[Location]) -> str:
    return "; ".join(location_to_text(location) for location in locations)


def to_list_row(record: ProfileRecord) -> Dict[str, str]:
    return {
        "ID": record.id,
        "Name": record.name,
        "Title": record.title,
        "Designation": record.designation,
        "Locations": locations_to_text(record.locations),
        "PhoneNumbers": _join(record.phone_numbers),
    }


def to_detail_row(record: EnrichedRecord) -> Dict[str, str]:
    row = to_list_row(record.profile)
    details = record.scraped_details
    if details is None:
        row.update({column: "" for column in DETAIL_COLUMNS if column not in row})
    else:
        years = details.experience.years
        row.update(
            {
                "FinancialCredentials": _join(details.financial_credentials),
                "ExperienceYears": str(years) if years is not None else "",
                "ExperiencePositions": _join(details.experience.positions),
                "Education": _join(details.education),
                "BranchInformation": _join(details.branch_information.details, " "),
                "BranchMapLink": details.branch_information.map_link or "",
            }
        )
    row["Error"] = record.error or ""
    return row


def clean_branch_information(text: str) -> str:
    """Tidy the flattened branch block of a detail row.

    The page renders address lines without separators, so the flattened text
    comes out as ``"Branch details:123 Main StSuite#4Springfield(555) 555-1234"``.
    """
    if not text:
        return text
    cleaned = re.sub(r"^Branch details:", "", text).strip()
    cleaned = _CAMEL_JOIN_REGEX.sub(r"\1 \2", cleaned)
    cleaned = cleaned.replace("Suite#", "Suite #")
    cleaned = _GLUED_DIGIT_REGEX.sub(r"\1 \2", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    # The last 14 characters are the "(xxx) xxx-xxxx" phone number.
    return _TRAILING_PHONE_REGEX.sub(r" \1", cleaned, count=1)


def fix_detail_rows(rows: Iterable[Dict[str, str]], detail_url: str) -> List[Dict[str, str]]:
    """Prepend a ``details_url`` column and clean ``BranchInformation`` on each row."""
    fixed: List[Dict[str, str]] = []
    base = detail_url.rstrip("/")
    for row in rows:
        new_row = {"details_url": f"{base}/{row.get('ID', '')}"}
        new_row.update(row)
        if new_row.get("BranchInformation"):
            new_row["BranchInformation"] = clean_branch_information(new_row["BranchInformation"])
        fixed.append(new_row)
    logger.debug("Fixed %d detail rows", len(fixed))
    return fixed
