import pytest

from wallmasters.config import Settings

STRONG_ACCESS_SECRET = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
STRONG_REFRESH_SECRET = "fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210"


def _settings(monkeypatch, access: str, refresh: str) -> Settings:
    monkeypatch.setenv("JWT_SECRET", access)
    monkeypatch.setenv("JWT_REFRESH_SECRET", refresh)
    return Settings(_env_file=None)


def test_missing_secret_fails_closed(monkeypatch):
    with pytest.raises(Exception, match="JWT_SECRET"):
        _settings(monkeypatch, "", STRONG_REFRESH_SECRET)


def test_weak_refresh_secret_fails_closed(monkeypatch):
    with pytest.raises(Exception, match="JWT_REFRESH_SECRET"):
        _settings(monkeypatch, STRONG_ACCESS_SECRET, "changeme-in-production")


def test_low_entropy_secret_fails_closed(monkeypatch):
    with pytest.raises(Exception, match="entropy"):
        _settings(monkeypatch, "a" * 64, STRONG_REFRESH_SECRET)


def test_shared_secret_fails_closed(monkeypatch):
    with pytest.raises(Exception, match="must differ"):
        _settings(monkeypatch, STRONG_ACCESS_SECRET, STRONG_ACCESS_SECRET)


def test_strong_distinct_secrets_pass(monkeypatch):
    settings = _settings(monkeypatch, STRONG_ACCESS_SECRET, STRONG_REFRESH_SECRET)

    assert settings.access_token_expire_minutes == 60
    assert settings.refresh_token_expire_days == 30
    assert settings.jwt_secret != settings.jwt_refresh_secret
