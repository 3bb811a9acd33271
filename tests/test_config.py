"""Tests for rfmsearch.config module."""

from pathlib import Path

import pytest

from rfmsearch import config


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path: Path):
    # No stray .env from the developer's checkout
    monkeypatch.chdir(tmp_path)
    for name in ("RFM_EXPERTS_DB", "RFM_POSTAL_DB", "RFM_DEFAULT_RADIUS_KM", "RFM_LOG_LEVEL"):
        # setenv first so monkeypatch also undoes whatever .env loads
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_defaults(tmp_path: Path):
    settings = config.get_settings()
    assert settings.experts_db == tmp_path.resolve() / "experts.db"
    assert settings.postal_db == tmp_path.resolve() / "postal_codes.db"
    assert settings.default_radius_km == 25.0
    assert settings.log_level == "WARNING"


def test_reads_env(monkeypatch):
    monkeypatch.setenv("RFM_EXPERTS_DB", "/data/experts.db")
    monkeypatch.setenv("RFM_POSTAL_DB", "/data/postal.db")
    monkeypatch.setenv("RFM_DEFAULT_RADIUS_KM", "40")
    monkeypatch.setenv("RFM_LOG_LEVEL", "debug")

    settings = config.get_settings()

    assert settings.experts_db == Path("/data/experts.db")
    assert settings.postal_db == Path("/data/postal.db")
    assert settings.default_radius_km == 40.0
    assert settings.log_level == "DEBUG"


def test_reads_dotenv_file(tmp_path: Path):
    (tmp_path / ".env").write_text("RFM_DEFAULT_RADIUS_KM=15\n")
    assert config.get_settings().default_radius_km == 15.0


@pytest.mark.parametrize("raw", ["far", "-5", "nan"])
def test_bad_radius_warns_and_uses_default(monkeypatch, caplog, raw: str):
    monkeypatch.setenv("RFM_DEFAULT_RADIUS_KM", raw)

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert settings.default_radius_km == config.DEFAULT_RADIUS_KM
    assert "RFM_DEFAULT_RADIUS_KM" in caplog.text


def test_bad_log_level_warns(monkeypatch, caplog):
    monkeypatch.setenv("RFM_LOG_LEVEL", "chatty")

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert settings.log_level == "WARNING"
    assert "RFM_LOG_LEVEL" in caplog.text


def test_cached():
    assert config.get_settings() is config.get_settings()
