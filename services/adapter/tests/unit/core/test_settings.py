from circonus_adapter.core.config import Settings, settings


class TestSettings:
    """Test configuration settings."""

    def test_default_values(self):
        config = Settings()

        assert config.circonus_api_url == "https://api.circonus.com/v2"
        assert config.circonus_app_name == "custom-metrics-circonus-adapter"
        assert config.circonus_request_timeout_seconds == 10.0
        assert config.config_refresh_interval_seconds == 10.0
        assert config.config_directory == "/etc/circonus-adapter/config"
        assert config.otel_service_name == "circonus_adapter"
        assert config.app_log_level == "INFO"
        assert "key" in config.app_log_redaction_patterns
        assert "token" in config.app_log_redaction_patterns

    def test_settings_singleton(self):
        assert isinstance(settings, Settings)

    def test_custom_api_url(self):
        config = Settings(circonus_api_url="https://circonus.internal/v2")
        assert config.circonus_api_url == "https://circonus.internal/v2"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CIRCONUS_API_URL", "https://env.circonus.test/v2")
        monkeypatch.setenv("CONFIG_REFRESH_INTERVAL_SECONDS", "2.5")
        config = Settings()
        assert config.circonus_api_url == "https://env.circonus.test/v2"
        assert config.config_refresh_interval_seconds == 2.5
