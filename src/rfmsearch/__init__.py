"""rfmsearch — Radius search over the expert directory by postal code or city."""

from rfmsearch.client import ExpertSearch
from rfmsearch.exceptions import (
    DatabaseInvalid,
    DatabaseNotFound,
    InvalidCandidateData,
    LocationNotFound,
    RFMSearchError,
)
from rfmsearch.models import (
    Candidate,
    Coordinate,
    ExpertRecord,
    LocationQuery,
    RankedMatch,
    RankedResult,
    SearchResult,
)
from rfmsearch.postal import PostalCodeTable
from rfmsearch.query import ExpertQuery, SearchParams, SortKey
from rfmsearch.radius import filter_within_radius
from rfmsearch.resolver import GeoResolver
from rfmsearch.store import ExpertStore

__all__ = [
    "ExpertSearch",
    "ExpertStore",
    "GeoResolver",
    "PostalCodeTable",
    "filter_within_radius",
    "Candidate",
    "Coordinate",
    "ExpertRecord",
    "LocationQuery",
    "RankedMatch",
    "RankedResult",
    "SearchResult",
    "ExpertQuery",
    "SearchParams",
    "SortKey",
    "RFMSearchError",
    "LocationNotFound",
    "InvalidCandidateData",
    "DatabaseNotFound",
    "DatabaseInvalid",
]
