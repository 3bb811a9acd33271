"""Tests for rfmsearch.geo and the Coordinate model."""

import math

import pytest

from rfmsearch.exceptions import InvalidCandidateData
from rfmsearch.geo import EARTH_RADIUS_KM, distance_km, haversine_km
from rfmsearch.models import Candidate, Coordinate, LocationQuery

COPENHAGEN = Coordinate(55.6761, 12.5683)
ODENSE = Coordinate(55.4038, 10.4024)


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(55.4, 10.4, 55.4, 10.4) == 0.0

    def test_copenhagen_to_odense(self):
        assert distance_km(COPENHAGEN, ODENSE) == pytest.approx(139.6, abs=1.0)

    def test_symmetric(self):
        assert distance_km(COPENHAGEN, ODENSE) == pytest.approx(
            distance_km(ODENSE, COPENHAGEN)
        )

    def test_one_degree_of_latitude(self):
        expected = EARTH_RADIUS_KM * math.pi / 180
        assert haversine_km(0, 0, 1, 0) == pytest.approx(expected)

    def test_antipodal_points_do_not_overshoot(self):
        d = haversine_km(0, 0, 0, 180)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_KM)
        assert not math.isnan(d)


class TestCoordinate:
    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(-90.0001, 0.0), (90.0001, 0.0), (0.0, -180.0001), (0.0, 180.0001)],
    )
    def test_rejects_out_of_range(self, lat: float, lon: float):
        with pytest.raises(ValueError):
            Coordinate(lat, lon)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite(self, bad: float):
        with pytest.raises(ValueError):
            Coordinate(bad, 10.0)

    def test_accepts_bounds(self):
        assert Coordinate(90.0, -180.0).latitude == 90.0

    @pytest.mark.parametrize(
        ("lat", "lon", "expected"),
        [
            ("55.4038", "10.4024", (55.4038, 10.4024)),
            (" 55,4038 ", "10,4024", (55.4038, 10.4024)),
            (55, 10, (55.0, 10.0)),
        ],
    )
    def test_parse(self, lat, lon, expected):
        coord = Coordinate.parse(lat, lon)
        assert (coord.latitude, coord.longitude) == expected

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [("", "10.4"), ("abc", "10.4"), (None, 10.4), (True, 10.4), ("nan", "10"), ("95", "10")],
    )
    def test_parse_rejects(self, lat, lon):
        with pytest.raises(ValueError):
            Coordinate.parse(lat, lon)

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            ODENSE.latitude = 0.0


class TestCandidate:
    def test_coordinate_parses(self):
        assert Candidate(1, "55.4038", "10.4024").coordinate() == ODENSE

    def test_bad_coordinate_raises_invalid_candidate_data(self):
        with pytest.raises(InvalidCandidateData) as exc_info:
            Candidate(42, "abc", "10.4").coordinate()
        assert exc_info.value.candidate_id == 42


class TestLocationQuery:
    def test_zero_radius_allowed(self):
        assert LocationQuery("Odense").radius_km == 0.0

    def test_negative_radius_rejected(self):
        with pytest.raises(ValueError):
            LocationQuery("Odense", -1.0)
