"""Radius filtering of candidate records around a center point."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from rfmsearch.exceptions import InvalidCandidateData
from rfmsearch.geo import distance_km
from rfmsearch.models import Candidate, Coordinate, RankedMatch, RankedResult

logger = logging.getLogger(__name__)


def filter_within_radius(
    center: Coordinate,
    radius_km: float,
    candidates: Iterable[Candidate],
) -> RankedResult:
    """
    Return the candidates within *radius_km* of *center*, nearest first.

    The boundary is inclusive and equal distances keep their input order.
    Candidates whose coordinates do not parse, or are out of range, are
    left out and counted in ``RankedResult.skipped``. A radius that is
    zero, negative or not finite gives an empty result.
    """
    if not (math.isfinite(radius_km) and radius_km > 0):
        return RankedResult()

    kept: list[RankedMatch] = []
    skipped = 0

    for candidate in candidates:
        try:
            coord = candidate.coordinate()
        except InvalidCandidateData as exc:
            skipped += 1
            logger.debug("Skipping candidate: %s", exc)
            continue

        dist = distance_km(center, coord)
        if dist <= radius_km:
            kept.append(RankedMatch(candidate.id, dist))

    if skipped:
        logger.info("Skipped %d candidate(s) with unusable coordinates", skipped)

    # list.sort is stable, so ties stay in input order
    kept.sort(key=lambda m: m.distance_km)
    return RankedResult(tuple(kept), skipped)
