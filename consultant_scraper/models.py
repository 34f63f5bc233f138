"""Core data models shared by the list and detail scraping phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

LOCATION_FIELDS = ("branch", "address", "city", "state", "zip")


@dataclass(slots=True)
class Location:
    """One branch address attached to a consultant, split into components."""

    branch: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    def components(self) -> List[Optional[str]]:
        return [getattr(self, name) for name in LOCATION_FIELDS]

    def to_dict(self) -> Dict[str, str]:
        # Absent components are dropped, present-but-empty ones are kept.
        return {name: value for name, value in zip(LOCATION_FIELDS, self.components()) if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(**{name: data.get(name) for name in LOCATION_FIELDS})


@dataclass(slots=True)
class ProfileRecord:
    """Flat consultant entry as rendered in a directory search results page."""

    id: str = ""
    name: str = ""
    title: str = ""
    designation: str = ""
    locations: List[Location] = field(default_factory=list)
    phone_numbers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "designation": self.designation,
            "locations": [location.to_dict() for location in self.locations],
            "phoneNumbers": list(self.phone_numbers),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileRecord":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            title=data.get("title") or "",
            designation=data.get("designation") or "",
            locations=[Location.from_dict(raw) for raw in data.get("locations") or []],
            phone_numbers=list(data.get("phoneNumbers") or []),
        )


@dataclass(slots=True)
class Experience:
    years: Optional[int] = None
    positions: List[str] = field(default_factory=list)


@dataclass(slots=True)
class BranchInformation:
    details: List[str] = field(default_factory=list)
    map_link: Optional[str] = None


@dataclass(slots=True)
class DetailRecord:
    """Secondary data scraped from a consultant's profile page."""

    financial_credentials: List[str] = field(default_factory=list)
    experience: Experience = field(default_factory=Experience)
    education: List[str] = field(default_factory=list)
    branch_information: BranchInformation = field(default_factory=BranchInformation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "financialCredentials": list(self.financial_credentials),
            "experience": {
                "years": self.experience.years,
                "positions": list(self.experience.positions),
            },
            "education": list(self.education),
            "branchInformation": {
                "details": list(self.branch_information.details),
                "mapLink": self.branch_information.map_link,
            },
        }


@dataclass(slots=True)
class EnrichedRecord:
    """A profile merged with its detail record, or with the error that prevented it."""

    profile: ProfileRecord
    scraped_details: Optional[DetailRecord] = None
    error: Optional[str] = None

    @property
    def id(self) -> str:
        return self.profile.id

    def to_dict(self) -> Dict[str, Any]:
        payload = self.profile.to_dict()
        payload["scrapedDetails"] = self.scraped_details.to_dict() if self.scraped_details else None
        if self.error is not None:
            payload["error"] = self.error
        return payload
