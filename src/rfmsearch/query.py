"""Search request parsing and the immutable expert query specification."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Mapping, Optional

from rfmsearch.models import Coordinate, LocationQuery, RankedResult
from rfmsearch.radius import filter_within_radius

if TYPE_CHECKING:
    from rfmsearch.resolver import GeoResolver
    from rfmsearch.store import ExpertStore

logger = logging.getLogger(__name__)

EXPERT_POST_TYPE = "rfm_expert"

# Request parameter names used by the directory's search form
PARAM_LOCATION = "rfm_location"
PARAM_RADIUS = "rfm_radius"
PARAM_CATEGORY = "rfm_category"
PARAM_SORT = "rfm_sort"


class SortKey(str, enum.Enum):
    RATING = "rating"
    DISTANCE = "distance"


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def parse_radius(raw: object) -> float:
    """
    Parse a radius from request input.

    Anything that is not a finite, non-negative number becomes 0.0,
    which disables radius search.
    """
    text = _clean(raw)
    if text is None:
        return 0.0
    try:
        value = float(text.replace(",", "."))
    except ValueError:
        logger.debug("Ignoring unparseable radius %r", raw)
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


@dataclass(frozen=True)
class SearchParams:
    """Sanitised search form input."""

    location: Optional[str] = None
    radius_km: Optional[float] = None   # None: not supplied, use the default
    category: Optional[str] = None
    sort: Optional[SortKey] = None

    @classmethod
    def from_request(cls, params: Mapping[str, object]) -> SearchParams:
        """Build from raw request parameters (e.g. a query-string dict)."""
        raw_radius = params.get(PARAM_RADIUS)
        radius = None if _clean(raw_radius) is None else parse_radius(raw_radius)

        sort = None
        raw_sort = _clean(params.get(PARAM_SORT))
        if raw_sort is not None:
            try:
                sort = SortKey(raw_sort.lower())
            except ValueError:
                logger.debug("Ignoring unknown sort key %r", raw_sort)

        return cls(
            location=_clean(params.get(PARAM_LOCATION)),
            radius_km=radius,
            category=_clean(params.get(PARAM_CATEGORY)),
            sort=sort,
        )

    def location_query(self, default_radius_km: float) -> Optional[LocationQuery]:
        """The location part of the request, or None when no location was given."""
        if self.location is None:
            return None
        radius = default_radius_km if self.radius_km is None else self.radius_km
        if not (math.isfinite(radius) and radius > 0):
            radius = 0.0
        return LocationQuery(self.location, radius)


@dataclass(frozen=True)
class ExpertQuery:
    """
    What to fetch from the record store.

    include_ids=None means no id restriction; an empty tuple means
    nothing matched and the result is empty.
    """

    post_type: str = EXPERT_POST_TYPE
    category: Optional[str] = None
    location_text: Optional[str] = None
    include_ids: Optional[tuple] = None
    sort: SortKey = SortKey.RATING

    def with_category(self, category: Optional[str]) -> ExpertQuery:
        return replace(self, category=category)

    def with_text_location(self, text: Optional[str]) -> ExpertQuery:
        return replace(self, location_text=text)

    def with_ranked_ids(self, ranked: RankedResult) -> ExpertQuery:
        return replace(self, include_ids=ranked.ids, sort=SortKey.DISTANCE)


def build_query(
    params: SearchParams,
    resolver: GeoResolver,
    store: ExpertStore,
    default_radius_km: float,
) -> tuple[ExpertQuery, Optional[RankedResult], Optional[Coordinate]]:
    """
    Assemble the ExpertQuery for *params*.

    Returns (query, ranked, center). *ranked* and *center* are None
    unless a radius search took place. A location that cannot be
    resolved, or a radius of 0, falls back to a city text match.
    """
    query = ExpertQuery().with_category(params.category)

    location = params.location_query(default_radius_km)
    if location is None:
        return query, None, None

    radius = location.radius_km
    center = resolver.resolve(location.raw_text) if radius > 0 else None

    if center is None:
        return query.with_text_location(location.raw_text), None, None

    candidates = store.find_candidates(query.post_type)
    ranked = filter_within_radius(center, radius, candidates)
    logger.info(
        "Radius search '%s' (%.1f km): %d of %d candidate(s) in range",
        location.raw_text, radius, len(ranked), len(candidates),
    )
    query = query.with_ranked_ids(ranked)
    if params.sort is SortKey.RATING:
        query = replace(query, sort=SortKey.RATING)
    return query, ranked, center
