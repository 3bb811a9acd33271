"""SQLite-backed expert record store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from rfmsearch._db import _DatabasePool
from rfmsearch.models import Candidate, ExpertRecord
from rfmsearch.query import EXPERT_POST_TYPE, ExpertQuery, SortKey

logger = logging.getLogger(__name__)

PUBLISHED = "publish"

_COLUMNS = (
    "e.id, e.title, e.city, e.postal_code, e.latitude, e.longitude, "
    "e.average_rating, e.plan"
)

# Premium profiles first, then standard, then everyone else
_PLAN_BOOST = (
    "CASE e.plan WHEN 'premium' THEN 1 WHEN 'standard' THEN 2 ELSE 3 END"
)

_HAS_COORDINATES = (
    "e.latitude IS NOT NULL AND TRIM(e.latitude) != '' "
    "AND e.longitude IS NOT NULL AND TRIM(e.longitude) != ''"
)

# Older SQLite builds allow at most 999 bound variables per statement
MAX_IDS_PER_QUERY = 500

_PLAN_RANK = {"premium": 1, "standard": 2}


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _chunks(ids: tuple) -> Iterable[tuple]:
    for start in range(0, len(ids), MAX_IDS_PER_QUERY):
        yield ids[start:start + MAX_IDS_PER_QUERY]


class ExpertStore:
    """
    Read-only access to published expert profiles.

    Expects an ``experts`` table and an ``expert_categories`` table
    (expert_id, category slug).
    """

    TABLES = ["experts", "expert_categories"]

    def __init__(self, db_path: str | Path):
        self._pool = _DatabasePool(Path(db_path), "Experts")

    @property
    def path(self) -> Path:
        return self._pool.path

    def validate(self) -> None:
        self._pool.validate_tables(self.TABLES)

    # ── Queries ───────────────────────────────────────────────────

    def find_candidates(self, post_type: str = EXPERT_POST_TYPE) -> list[Candidate]:
        """Published records of *post_type* with both coordinates filled in."""
        cur = self._pool.execute(
            "SELECT e.id, e.latitude, e.longitude FROM experts e "
            f"WHERE e.post_type = ? AND e.status = ? AND {_HAS_COORDINATES} "
            "ORDER BY e.id",
            (post_type, PUBLISHED),
        )
        return [Candidate(row[0], row[1], row[2]) for row in cur]

    def find_by_type_and_filters(self, query: ExpertQuery) -> list[ExpertRecord]:
        """
        Fetch the published experts described by *query*.

        With ``SortKey.DISTANCE`` and ``include_ids`` the rows come back in
        include_ids order; otherwise premium plans first, then by rating.
        """
        if query.include_ids is not None and not query.include_ids:
            return []

        clauses = ["e.post_type = ?", "e.status = ?"]
        params: list = [query.post_type, PUBLISHED]

        if query.category:
            clauses.append(
                "EXISTS (SELECT 1 FROM expert_categories c "
                "WHERE c.expert_id = e.id AND c.category = ?)"
            )
            params.append(query.category)

        if query.location_text:
            clauses.append("casefold(e.city) LIKE ? ESCAPE '\\'")
            params.append(_like_pattern(query.location_text.casefold()))

        sql = f"SELECT {_COLUMNS} FROM experts e WHERE {' AND '.join(clauses)}"
        order = f" ORDER BY {_PLAN_BOOST}, e.average_rating DESC, e.id"

        if query.include_ids is None:
            rows = self._pool.execute(sql + order, tuple(params)).fetchall()
            return self._to_records(rows)

        rows = []
        for chunk in _chunks(tuple(query.include_ids)):
            marks = ", ".join("?" for _ in chunk)
            rows.extend(
                self._pool.execute(
                    f"{sql} AND e.id IN ({marks})", (*params, *chunk)
                ).fetchall()
            )
        records = self._to_records(rows)

        if query.sort is SortKey.DISTANCE:
            return _in_id_order(records, query.include_ids)
        return sorted(records, key=_rating_key)

    def find_by_ids_ordered(self, ids: Iterable) -> list[ExpertRecord]:
        """Published experts for *ids*, in the given order. Unknown ids are dropped."""
        ids = tuple(ids)
        if not ids:
            return []
        rows = []
        for chunk in _chunks(ids):
            marks = ", ".join("?" for _ in chunk)
            rows.extend(
                self._pool.execute(
                    f"SELECT {_COLUMNS} FROM experts e "
                    f"WHERE e.status = ? AND e.id IN ({marks})",
                    (PUBLISHED, *chunk),
                ).fetchall()
            )
        return _in_id_order(self._to_records(rows), ids)

    def stats(self, post_type: str = EXPERT_POST_TYPE) -> dict:
        """Counts of published experts with and without coordinates."""
        total, located = self._pool.execute(
            f"SELECT COUNT(*), SUM(CASE WHEN {_HAS_COORDINATES} THEN 1 ELSE 0 END) "
            "FROM experts e WHERE e.post_type = ? AND e.status = ?",
            (post_type, PUBLISHED),
        ).fetchone()
        located = located or 0
        return {
            "published": total,
            "with_coordinates": located,
            "without_coordinates": total - located,
        }

    def close(self) -> None:
        self._pool.close()

    def __enter__(self) -> ExpertStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── Private helpers ───────────────────────────────────────────

    def _categories_for(self, ids: list) -> dict:
        found: dict = {}
        for chunk in _chunks(tuple(ids)):
            marks = ", ".join("?" for _ in chunk)
            cur = self._pool.execute(
                "SELECT expert_id, category FROM expert_categories "
                f"WHERE expert_id IN ({marks}) ORDER BY expert_id, category",
                chunk,
            )
            for expert_id, category in cur:
                found.setdefault(expert_id, []).append(category)
        return found

    def _to_records(self, rows: list) -> list[ExpertRecord]:
        categories = self._categories_for([row[0] for row in rows])
        return [
            ExpertRecord(
                id=row[0],
                title=row[1] or "",
                city=row[2] or "",
                postal_code=row[3] or "",
                latitude=row[4],
                longitude=row[5],
                average_rating=float(row[6] or 0.0),
                plan=row[7] or "",
                categories=tuple(categories.get(row[0], ())),
            )
            for row in rows
        ]


def _rating_key(record: ExpertRecord) -> tuple:
    # Same order as _PLAN_BOOST, average_rating DESC, id
    return (_PLAN_RANK.get(record.plan, 3), -record.average_rating, record.id)


def _in_id_order(records: list[ExpertRecord], ids: tuple) -> list[ExpertRecord]:
    position = {expert_id: i for i, expert_id in enumerate(ids)}
    return sorted(
        (r for r in records if r.id in position),
        key=lambda r: position[r.id],
    )
