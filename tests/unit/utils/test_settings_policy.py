import pytest

from fittrack.settings import ClientSettings, Settings


@pytest.mark.unit
def test_settings_fails_fast_when_secret_missing_in_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    # Prevent `load_dotenv()` from injecting a value from local `.env`.
    monkeypatch.setenv("SECRET_KEY", "")

    with pytest.raises(ValueError, match=r"SECRET_KEY.*production"):
        Settings.load()


@pytest.mark.unit
def test_settings_fails_fast_when_database_url_missing_in_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-jwt-secret-key")
    monkeypatch.setenv("DATABASE_URL", "")

    with pytest.raises(ValueError, match=r"DATABASE_URL.*production"):
        Settings.load()


@pytest.mark.unit
def test_settings_generates_secrets_outside_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "development")
    monkeypatch.setenv("SECRET_KEY", "")
    monkeypatch.setenv("JWT_SECRET_KEY", "")
    monkeypatch.setenv("DATABASE_URL", "")

    settings = Settings.load()

    assert settings.secret_key
    assert settings.jwt_secret_key
    assert settings.debug is True
    assert settings.database_url.startswith("sqlite:///")


@pytest.mark.unit
def test_settings_parses_cors_origins(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", " http://a.test , ,http://b.test")

    settings = Settings.load()

    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.to_flask_config()["CORS_ORIGINS"] == "http://a.test,http://b.test"


@pytest.mark.unit
def test_settings_rejects_unknown_log_level(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings.load()


@pytest.mark.unit
def test_client_settings_reads_prefixed_env(monkeypatch) -> None:
    monkeypatch.setenv("FITTRACK_API_BASE_URL", "http://api.test/api/")
    monkeypatch.setenv("FITTRACK_ROWS_PER_PAGE", "25")

    settings = ClientSettings.load()

    assert settings.api_base_url == "http://api.test/api"
    assert settings.rows_per_page == 25
    assert settings.search_debounce == 0.4


@pytest.mark.unit
@pytest.mark.parametrize("debounce", [0.1, 0.9])
def test_client_settings_debounce_window(debounce) -> None:
    with pytest.raises(ValueError, match="SEARCH_DEBOUNCE"):
        ClientSettings(search_debounce=debounce)
