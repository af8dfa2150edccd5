"""Tests for refinery.config."""

import pytest

from refinery.config import RefineryConfigModel, get_env_flag, load_config


class TestLoadConfig:
    """Test environment-driven settings."""

    def test_defaults(self, tmp_path):
        config = load_config(env_file=tmp_path / "absent.env")
        assert config == RefineryConfigModel()

    def test_environment_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REFINERY_DEBUG", "yes")
        monkeypatch.setenv("REFINERY_LOG_LEVEL", "info")
        monkeypatch.setenv("REFINERY_LOG_FILE", str(tmp_path / "refinery.log"))
        config = load_config(env_file=tmp_path / "absent.env")
        assert config.debug is True
        assert config.log_level == "INFO"
        assert config.log_file == tmp_path / "refinery.log"

    def test_env_file_does_not_override(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("REFINERY_LOG_LEVEL=ERROR\nREFINERY_DEBUG=1\n")
        monkeypatch.setenv("REFINERY_LOG_LEVEL", "INFO")

        config = load_config(env_file=env_file)
        assert config.log_level == "INFO"
        assert config.debug is True

    def test_invalid_level(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REFINERY_LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError, match="Invalid refinery configuration"):
            load_config(env_file=tmp_path / "absent.env")

    def test_env_flag(self, monkeypatch):
        monkeypatch.setenv("SOME_FLAG", "TRUE")
        assert get_env_flag("SOME_FLAG") is True
        monkeypatch.setenv("SOME_FLAG", "0")
        assert get_env_flag("SOME_FLAG", default=True) is False
        monkeypatch.delenv("SOME_FLAG")
        assert get_env_flag("SOME_FLAG", default=True) is True
