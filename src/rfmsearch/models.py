"""Typed value models for rfmsearch."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Hashable, Iterator, Optional

from rfmsearch.exceptions import InvalidCandidateData


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"not a coordinate: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError as exc:
            raise ValueError(f"coordinate too large: {value!r}") from exc
    if isinstance(value, str):
        # Danish profile data sometimes uses a decimal comma
        text = value.strip().replace(",", ".")
        if not text:
            raise ValueError("empty coordinate")
        return float(text)
    raise ValueError(f"not a coordinate: {value!r}")


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(
                f"Coordinate must be finite: ({self.latitude}, {self.longitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    @classmethod
    def parse(cls, latitude: object, longitude: object) -> Coordinate:
        """
        Build a Coordinate from raw stored values.

        Accepts numbers or numeric strings ('55.4038', '55,4038').
        Raises ValueError for anything that is not a finite, in-range pair.
        """
        return cls(_to_float(latitude), _to_float(longitude))

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class LocationQuery:
    """Location text plus radius; a radius of 0 means text match only."""

    raw_text: str
    radius_km: float = 0.0

    def __post_init__(self) -> None:
        if not self.radius_km >= 0:
            raise ValueError(f"radius_km must be >= 0, got {self.radius_km}")


@dataclass(frozen=True)
class Candidate:
    """
    A stored record eligible for radius filtering.

    *latitude* and *longitude* hold whatever the store holds (usually
    strings from profile metadata); they are parsed on demand.
    """

    id: Hashable
    latitude: object
    longitude: object

    def coordinate(self) -> Coordinate:
        """Parse the raw fields, raising InvalidCandidateData on failure."""
        try:
            return Coordinate.parse(self.latitude, self.longitude)
        except ValueError as exc:
            raise InvalidCandidateData(self.id, str(exc)) from exc


@dataclass(frozen=True)
class RankedMatch:
    id: Hashable
    distance_km: float


@dataclass(frozen=True)
class RankedResult:
    """Matches ordered nearest-first, plus how many candidates were unusable."""

    matches: tuple[RankedMatch, ...] = ()
    skipped: int = 0

    def __iter__(self) -> Iterator[RankedMatch]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __bool__(self) -> bool:
        return bool(self.matches)

    @property
    def ids(self) -> tuple:
        return tuple(m.id for m in self.matches)

    def distances(self) -> dict:
        """Map of id -> distance in km."""
        return {m.id: m.distance_km for m in self.matches}

    def to_dict(self) -> dict:
        return {
            "matches": [
                {"id": m.id, "distance_km": round(m.distance_km, 3)}
                for m in self.matches
            ],
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class ExpertRecord:
    """A published expert profile as held by the record store."""

    id: int
    title: str
    city: str = ""
    postal_code: str = ""
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    average_rating: float = 0.0
    plan: str = ""
    categories: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "city": self.city,
            "postal_code": self.postal_code,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "average_rating": self.average_rating,
            "plan": self.plan,
            "categories": list(self.categories),
        }


@dataclass(frozen=True)
class SearchResult:
    """Experts for one search request, in display order."""

    experts: tuple[ExpertRecord, ...]
    strategy: str                       # "radius", "text" or "all"
    center: Optional[Coordinate] = None
    distances: dict = field(default_factory=dict)
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.experts)

    def to_dict(self) -> dict:
        experts = []
        for expert in self.experts:
            row = expert.to_dict()
            if expert.id in self.distances:
                row["distance_km"] = round(self.distances[expert.id], 3)
            experts.append(row)
        return {
            "strategy": self.strategy,
            "center": self.center.to_dict() if self.center else None,
            "skipped": self.skipped,
            "experts": experts,
        }
