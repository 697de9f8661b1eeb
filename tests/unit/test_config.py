from collections.abc import Iterator

import pytest

from eventdesk.config.settings import INSECURE_SECRET_KEY, Settings, get_settings


@pytest.mark.unit
class TestSettings:
    def test_default_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        settings = Settings()
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert "postgresql" in settings.database_url
        assert settings.conceal_denied_events is True
        assert settings.session_cookie_name == "session"
        assert settings.session_max_age == 86400

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://user:pass@db:5432/mydb")
        monkeypatch.setenv("SECRET_KEY", "my-secret")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CONCEAL_DENIED_EVENTS", "false")
        monkeypatch.setenv("USE_DATABASE", "true")
        settings = Settings()
        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.conceal_denied_events is False
        assert settings.use_database is True


@pytest.mark.unit
class TestGetSettings:
    @pytest.fixture(autouse=True)
    def _clear_cache(self) -> Iterator[None]:
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_insecure_secret_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SECRET_KEY", INSECURE_SECRET_KEY)
        with pytest.warns(UserWarning, match="SECRET_KEY"):
            get_settings()

    def test_non_positive_session_age_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        monkeypatch.setenv("SESSION_MAX_AGE", "0")
        with pytest.raises(ValueError, match="SESSION_MAX_AGE"):
            get_settings()

    def test_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        assert get_settings() is get_settings()
