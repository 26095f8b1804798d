import pytest

from config import Configuration


def test_from_env_reads_and_coerces(monkeypatch):
    monkeypatch.setenv("QUESTION_LENGTH", "long")
    monkeypatch.setenv("SESSION_TTL_SEC", "120")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://eatwhat.app")
    monkeypatch.delenv("REPORT_TOP_N", raising=False)

    cfg = Configuration.from_env()

    assert cfg.question_length == "long"
    assert cfg.session_ttl_sec == 120
    assert cfg.cors_origins == ["http://localhost:3000", "https://eatwhat.app"]
    assert cfg.report_top_n == 5
    assert "question_length=long" in cfg.log_summary()


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("REPORT_TOP_N", "3")
    cfg = Configuration.from_env({"report_top_n": 8, "question_length": None})
    assert cfg.report_top_n == 8


def test_invalid_values_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_CONFIDENCE", "1.5")
    with pytest.raises(ValueError):
        Configuration.from_env()
