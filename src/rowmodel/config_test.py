"""
Unit tests for Config.

Run with: pytest src/rowmodel/config_test.py -v
"""
from rowmodel.config import Config, config


class TestFromEnv:
    """Tests for Config.from_env()"""

    def test_test_environment_selected_before_import(self):
        assert config.environment == "test"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/rowmodel")
        monkeypatch.setenv("ROWMODEL_LOG_LEVEL", "debug")
        monkeypatch.setenv("ROWMODEL_CONNECT_TIMEOUT", "30")

        config = Config.from_env()

        assert config.environment == "test"
        assert config.database_url == "postgresql://localhost/rowmodel"
        assert config.log_level == "DEBUG"
        assert config.connect_timeout == 30

    def test_environment_read_at_call_time(self, monkeypatch):
        monkeypatch.setenv("ROWMODEL_ENV", "Staging")

        assert Config.from_env().environment == "staging"

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ROWMODEL_ENV", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("ROWMODEL_LOG_LEVEL", raising=False)
        monkeypatch.delenv("ROWMODEL_CONNECT_TIMEOUT", raising=False)

        config = Config.from_env()

        assert config.environment == "development"
        assert config.database_url is None
        assert config.log_level == "WARNING"
        assert config.connect_timeout == 10
