"""Postal-code table: postal code or city name -> coordinates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rfmsearch._db import _DatabasePool
from rfmsearch.models import Coordinate

logger = logging.getLogger(__name__)

TABLE = "postal_codes"


def normalise(raw: str) -> str:
    """Strip and collapse whitespace, e.g. '  5240 ' -> '5240'."""
    return " ".join(raw.split())


def normalise_code(raw: str) -> str:
    """Postal codes are stored without spaces: '52 40' -> '5240'."""
    return "".join(raw.split()).upper()


def postal_sort_key(code: str) -> tuple:
    """
    Order postal codes numerically, non-numeric codes last.

    Used to pick one entry when several postal codes share a city.
    """
    if code.isdigit():
        return (0, int(code), code)
    return (1, 0, code)


def _row_coordinate(row: tuple) -> Optional[Coordinate]:
    """Coordinate of a (postal_code, latitude, longitude) row, or None if unusable."""
    try:
        return Coordinate.parse(row[1], row[2])
    except ValueError as exc:
        logger.warning("Postal code %s has unusable coordinates: %s", row[0], exc)
        return None


class PostalCodeTable:
    """
    Read-only lookup over a SQLite ``postal_codes`` table.

    Columns: postal_code (TEXT, primary key), city, latitude, longitude.
    """

    def __init__(self, db_path: str | Path):
        self._pool = _DatabasePool(Path(db_path), "Postal code")

    @property
    def path(self) -> Path:
        return self._pool.path

    def validate(self) -> None:
        self._pool.validate_tables([TABLE])

    def get_coordinates(self, postal_code: str) -> Optional[Coordinate]:
        """
        Exact postal-code lookup.

        Returns None when the code is unknown or its row has no usable
        coordinates.
        """
        code = normalise_code(postal_code)
        if not code:
            return None
        row = self._pool.execute(
            f"SELECT postal_code, latitude, longitude FROM {TABLE} WHERE postal_code = ?",
            (code,),
        ).fetchone()
        if row is None:
            return None
        return _row_coordinate(row)

    def get_coordinates_by_city(self, city: str) -> Optional[Coordinate]:
        """
        Case-insensitive city lookup.

        A city can span several postal codes (Odense has 5000-5270);
        the lowest postal code with usable coordinates is returned.
        """
        name = normalise(city)
        if not name:
            return None
        rows = self._pool.execute(
            f"SELECT postal_code, latitude, longitude FROM {TABLE} "
            "WHERE casefold(city) = ?",
            (name.casefold(),),
        ).fetchall()
        for row in sorted(rows, key=lambda r: postal_sort_key(str(r[0]))):
            coord = _row_coordinate(row)
            if coord is not None:
                logger.debug(
                    "City '%s' matched %d postal code(s); using %s", name, len(rows), row[0]
                )
                return coord
        return None

    def close(self) -> None:
        self._pool.close()

    def __enter__(self) -> PostalCodeTable:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
