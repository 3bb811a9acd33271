"""Resolve free-text locations to coordinates."""

from __future__ import annotations

import logging
from typing import Optional

from rfmsearch.exceptions import LocationNotFound
from rfmsearch.models import Coordinate
from rfmsearch.postal import PostalCodeTable, normalise

logger = logging.getLogger(__name__)


class GeoResolver:
    """
    Turns a postal code or city name into a Coordinate.

    Tries the postal-code column first and falls back to the city
    column of the same table.
    """

    def __init__(self, table: PostalCodeTable):
        self._table = table

    @property
    def table(self) -> PostalCodeTable:
        return self._table

    def resolve(self, location_text: str) -> Optional[Coordinate]:
        """Return the coordinate for *location_text*, or None if unknown."""
        text = normalise(location_text or "")
        if not text:
            return None

        coord = self._table.get_coordinates(text)
        if coord is None:
            coord = self._table.get_coordinates_by_city(text)
        if coord is None:
            logger.info("Location '%s' did not match a postal code or city", text)
        return coord

    def require(self, location_text: str) -> Coordinate:
        """Like resolve(), but raises LocationNotFound instead of returning None."""
        coord = self.resolve(location_text)
        if coord is None:
            raise LocationNotFound(location_text)
        return coord
