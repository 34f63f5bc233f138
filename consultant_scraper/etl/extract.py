"""HTML extraction for directory search results and consultant profile pages.

Both extractors are pure: they never perform I/O and never raise on malformed
markup. Anything that cannot be located degrades to an empty string, an empty
list or ``None``.
"""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from consultant_scraper.models import (
    BranchInformation,
    DetailRecord,
    Experience,
    Location,
    ProfileRecord,
)

RESULT_SELECTOR = "#fcSearchResult"
NAME_SELECTOR = "#fcDisplayName"
TITLE_SELECTOR = "#fcJobTitle"
DESIGNATION_SELECTOR = "#fcDesignation"
LOCATION_SELECTOR = ".mapSpan"
PHONE_SELECTOR = ".telSpan"

CREDENTIALS_SELECTOR = "#_Financial_credentials > div > div > div > div > ul"
EXPERIENCE_SELECTOR = "#_Experience > div > div > div > div"
POSITIONS_SELECTOR = "#_Experience > div > div > div > div ul"
EDUCATION_SELECTOR = "#_Education > div > div > div > div > ul"
BRANCH_BODY_SELECTOR = "#_Branch_information-body > div > div"
BRANCH_LINK_SELECTOR = "#_Branch_information"

_PROFILE_ID_REGEX = re.compile(r"'([^']+)'")
_EXPERIENCE_YEARS_REGEX = re.compile(r"(\d+) years of professional experience")
_WHITESPACE_REGEX = re.compile(r"\s+")
_ADDRESS_SPLIT_REGEX = re.compile(r",\s*")


def _load(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _text(node: Tag, selector: str) -> str:
    found = node.select_one(selector)
    if found is None:
        return ""
    return found.get_text().strip()


def _tokens(value: str) -> List[str]:
    return value.split() or [""]


def _positional(tokens: List[str], size: int) -> List[Optional[str]]:
    padded: List[Optional[str]] = list(tokens[:size])
    padded.extend([None] * (size - len(padded)))
    return padded


def parse_location(raw_text: str) -> Location:
    """Split a location blob such as ``"Downtown Branch. 123 Main St, Springfield, IL 62701"``.

    The site renders addresses as free text, so the split is positional:

    * three or more comma parts: address, city, then ``"<state...> <zip>"``
    * two parts: address, then ``"<city> <state> <zip>"`` by position
    * one part: ``"<address> <city> <state> <zip>"`` by position

    Addresses with extra commas or multi-word cities land in the wrong slots.
    That is accepted; the real grammar of the source data is unknown.
    """
    full_text = _WHITESPACE_REGEX.sub(" ", raw_text or "").strip()
    branch, _, rest = full_text.partition(".")
    parts = _ADDRESS_SPLIT_REGEX.split(rest.strip())

    address: Optional[str]
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    if len(parts) >= 3:
        address, city = parts[0], parts[1]
        tokens = parts[2].split()
        if len(tokens) >= 2:
            state, zip_code = " ".join(tokens[:-1]), tokens[-1]
        elif tokens:
            state = tokens[0]
    elif len(parts) == 2:
        address = parts[0]
        city, state, zip_code = _positional(_tokens(parts[1]), 3)
    else:
        address, city, state, zip_code = _positional(_tokens(parts[0]), 4)

    return Location(
        branch=branch.strip(),
        address=address.strip() if address is not None else None,
        city=city.strip() if city is not None else None,
        state=state.strip() if state is not None else None,
        zip=zip_code.strip() if zip_code is not None else None,
    )


def parse_profile_id(href: Optional[str]) -> str:
    """Pull the identity out of a ``javascript:fn('<id>')`` style link."""
    if not href:
        return ""
    match = _PROFILE_ID_REGEX.search(href)
    return match.group(1) if match else ""


def _parse_profile(node: Tag) -> ProfileRecord:
    name_node = node.select_one(NAME_SELECTOR)
    name = name_node.get_text().strip() if name_node is not None else ""
    href = name_node.get("href") if name_node is not None else None

    return ProfileRecord(
        id=parse_profile_id(href),
        name=name,
        title=_text(node, TITLE_SELECTOR),
        designation=_text(node, DESIGNATION_SELECTOR),
        locations=[parse_location(loc.get_text()) for loc in node.select(LOCATION_SELECTOR)],
        phone_numbers=[phone.get_text().strip() for phone in node.select(PHONE_SELECTOR)],
    )


def extract_profiles(html: Optional[str]) -> List[ProfileRecord]:
    """Return every consultant on a search results page, in document order."""
    soup = _load(html)
    return [_parse_profile(node) for node in soup.select(RESULT_SELECTOR)]


def _list_items(soup: BeautifulSoup, selector: str) -> List[str]:
    items: List[str] = []
    for container in soup.select(selector):
        for child in container.find_all(recursive=False):
            items.append(child.get_text().strip())
    return items


def _joined_text(soup: BeautifulSoup, selector: str) -> str:
    return "".join(node.get_text() for node in soup.select(selector))


def extract_detail(html: Optional[str]) -> DetailRecord:
    """Parse a consultant profile page into a ``DetailRecord``."""
    soup = _load(html)

    years_match = _EXPERIENCE_YEARS_REGEX.search(_joined_text(soup, EXPERIENCE_SELECTOR))
    branch_text = _joined_text(soup, BRANCH_BODY_SELECTOR).strip()
    branch_details = [line.strip() for line in branch_text.split("\n")] if branch_text else []
    branch_link = soup.select_one(BRANCH_LINK_SELECTOR)
    map_link = branch_link.get("href") if branch_link is not None else None

    return DetailRecord(
        financial_credentials=_list_items(soup, CREDENTIALS_SELECTOR),
        experience=Experience(
            years=int(years_match.group(1)) if years_match else None,
            positions=_list_items(soup, POSITIONS_SELECTOR),
        ),
        education=_list_items(soup, EDUCATION_SELECTOR),
        branch_information=BranchInformation(details=branch_details, map_link=map_link),
    )
