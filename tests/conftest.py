"""Shared test fixtures — small SQLite databases with realistic data."""

import sqlite3
from pathlib import Path

import pytest


@pytest.fixture()
def tmp_postal_db(tmp_path: Path) -> Path:
    """Create a small Danish postal code database."""
    db_path = tmp_path / "test_postal.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE postal_codes (
            postal_code TEXT PRIMARY KEY,
            city TEXT,
            latitude REAL,
            longitude REAL
        )
        """
    )
    rows = [
        ("1050", "København K", 55.6761, 12.5683),
        # Three codes share the city name; 5000 is the lowest
        ("5240", "Odense", 55.403, 10.402),
        ("5000", "Odense", 55.3959, 10.3883),
        ("5230", "Odense", 55.3790, 10.4040),
        ("4600", "Køge", 55.4580, 12.1821),
        ("8000", "Aarhus C", 56.1567, 10.2108),
        ("9000", "Aalborg", 57.0488, 9.9217),
    ]
    conn.executemany("INSERT INTO postal_codes VALUES (?, ?, ?, ?)", rows)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def tmp_experts_db(tmp_path: Path) -> Path:
    """Create a small expert directory with a mix of good and bad rows."""
    db_path = tmp_path / "test_experts.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE experts (
            id INTEGER PRIMARY KEY,
            post_type TEXT,
            status TEXT,
            title TEXT,
            city TEXT,
            postal_code TEXT,
            latitude TEXT,
            longitude TEXT,
            average_rating REAL,
            plan TEXT
        )
        """
    )
    conn.execute(
        "CREATE TABLE expert_categories (expert_id INTEGER, category TEXT)"
    )
    experts = [
        (1, "rfm_expert", "publish", "Frank Hansen", "Odense", "5240",
         "55.4038", "10.4024", 4.5, "standard"),
        (2, "rfm_expert", "publish", "Anna Jensen", "København", "1050",
         "55.6761", "12.5683", 4.9, "premium"),
        # Decimal comma, as typed into some profiles
        (3, "rfm_expert", "publish", "Mette Larsen", "Odense", "5000",
         "55,3959", "10,3883", 3.8, "premium"),
        (4, "rfm_expert", "publish", "Ole Berg", "Aarhus", "8000",
         "56.1567", "10.2108", 4.0, "free"),
        # No coordinates at all: never a candidate
        (5, "rfm_expert", "publish", "Ida Holm", "Odense", "5230",
         "", "", 5.0, "free"),
        # Unparseable latitude: a candidate that must be skipped
        (6, "rfm_expert", "publish", "Per Broken", "Odense", "5200",
         "abc", "10.35", 4.1, "free"),
        (7, "rfm_expert", "draft", "Draft Expert", "Odense", "5240",
         "55.40", "10.40", 5.0, "premium"),
        (8, "rfm_article", "publish", "Some Article", "Odense", "5240",
         "55.40", "10.40", 5.0, "premium"),
    ]
    conn.executemany(
        "INSERT INTO experts VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", experts
    )
    conn.executemany(
        "INSERT INTO expert_categories VALUES (?, ?)",
        [
            (1, "coaching"),
            (2, "coaching"),
            (3, "terapi"),
            (4, "coaching"),
            (5, "terapi"),
            (1, "mindfulness"),
        ],
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def postal_table(tmp_postal_db: Path):
    from rfmsearch.postal import PostalCodeTable

    table = PostalCodeTable(tmp_postal_db)
    yield table
    table.close()


@pytest.fixture()
def store(tmp_experts_db: Path):
    from rfmsearch.store import ExpertStore

    s = ExpertStore(tmp_experts_db)
    yield s
    s.close()


@pytest.fixture()
def resolver(postal_table):
    from rfmsearch.resolver import GeoResolver

    return GeoResolver(postal_table)


@pytest.fixture()
def client(store, resolver):
    """Create an ExpertSearch over the test databases."""
    from rfmsearch import ExpertSearch

    c = ExpertSearch(store, resolver, default_radius_km=25.0)
    yield c
    c.close()
