"""ExpertSearch — the main entry point for the library."""

from __future__ import annotations

import logging
from typing import Mapping, Union

from rfmsearch.config import DEFAULT_RADIUS_KM, Settings
from rfmsearch.models import RankedResult, SearchResult
from rfmsearch.postal import PostalCodeTable
from rfmsearch.query import SearchParams, build_query
from rfmsearch.radius import filter_within_radius
from rfmsearch.resolver import GeoResolver
from rfmsearch.store import ExpertStore

logger = logging.getLogger(__name__)


class ExpertSearch:
    """
    Location-aware expert directory search.

    Takes a record store and a GeoResolver; nothing is global, so
    callers construct one per process (or per request) and pass it on.
    """

    def __init__(
        self,
        store: ExpertStore,
        resolver: GeoResolver,
        default_radius_km: float = DEFAULT_RADIUS_KM,
    ):
        self._store = store
        self._resolver = resolver
        self._default_radius = default_radius_km

    @classmethod
    def from_settings(cls, settings: Settings) -> ExpertSearch:
        """
        Open both SQLite databases named in *settings*.

        Raises DatabaseNotFound or DatabaseInvalid if either is unusable.
        """
        store = ExpertStore(settings.experts_db)
        table = PostalCodeTable(settings.postal_db)
        try:
            store.validate()
            table.validate()
        except Exception:
            store.close()
            table.close()
            raise
        return cls(store, GeoResolver(table), settings.default_radius_km)

    # ── Public API ────────────────────────────────────────────────

    def search(self, params: Union[SearchParams, Mapping[str, object]]) -> SearchResult:
        """
        Run a directory search.

        *params* is either a SearchParams or the raw request parameters
        (rfm_location, rfm_radius, rfm_category, rfm_sort).
        """
        if not isinstance(params, SearchParams):
            params = SearchParams.from_request(params)

        query, ranked, center = build_query(
            params, self._resolver, self._store, self._default_radius
        )
        experts = tuple(self._store.find_by_type_and_filters(query))

        if ranked is not None:
            strategy = "radius"
        elif query.location_text:
            strategy = "text"
        else:
            strategy = "all"

        return SearchResult(
            experts=experts,
            strategy=strategy,
            center=center,
            distances=ranked.distances() if ranked is not None else {},
            skipped=ranked.skipped if ranked is not None else 0,
        )

    def nearby(self, location_text: str, radius_km: float) -> RankedResult:
        """
        Rank every located expert within *radius_km* of *location_text*.

        Raises LocationNotFound if the location cannot be resolved.
        """
        center = self._resolver.require(location_text)
        return filter_within_radius(center, radius_km, self._store.find_candidates())

    def health_check(self) -> dict:
        """
        Verify both databases are accessible and contain expected tables.

        Returns a dict with status information.
        """
        status: dict = {"healthy": True, "experts_db": "ok", "postal_db": "ok"}
        try:
            self._store.validate()
        except Exception as exc:
            status["healthy"] = False
            status["experts_db"] = str(exc)
        try:
            self._resolver.table.validate()
        except Exception as exc:
            status["healthy"] = False
            status["postal_db"] = str(exc)
        return status

    def diagnose(self, location_text: str) -> dict:
        """
        Explain what a search for *location_text* would do.

        Reports the resolved coordinate, how many experts carry
        coordinates, and the ids in range at the default radius.
        """
        report: dict = {
            "location": location_text,
            "default_radius_km": self._default_radius,
            "experts": self._store.stats(),
        }
        center = self._resolver.resolve(location_text)
        report["center"] = center.to_dict() if center else None
        if center is None:
            report["in_range"] = []
            report["skipped"] = 0
            return report

        ranked = filter_within_radius(
            center, self._default_radius, self._store.find_candidates()
        )
        report["in_range"] = ranked.to_dict()["matches"]
        report["skipped"] = ranked.skipped
        return report

    def close(self) -> None:
        """Close both database connections."""
        self._store.close()
        self._resolver.table.close()

    def __enter__(self) -> ExpertSearch:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
