"""test suite for configuration."""
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from abrasor import config


@pytest.fixture(autouse=True)
def abrasor_home(tmp_path, monkeypatch):
    monkeypatch.setenv("ABRASOR_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


class TestConfig:
    def test_config_dir_override(self, abrasor_home):
        assert config.get_config_dir() == abrasor_home
        assert config.get_config_file() == abrasor_home / "config"

    def test_missing_file(self):
        assert config.get_config_value("ANYTHING") is None
        assert config.get_config_value("ANYTHING", "fallback") == "fallback"

    def test_set_and_get(self, abrasor_home):
        config.set_config_value(config.UNIT_SYSTEM_KEY, "imperial")
        assert config.get_config_value(config.UNIT_SYSTEM_KEY) == "imperial"
        assert (abrasor_home / "config").read_text() == "ABRASOR_UNIT_SYSTEM=imperial\n"

    def test_set_preserves_other_values(self):
        config.set_config_value(config.UNIT_SYSTEM_KEY, "imperial")
        config.set_config_value(config.STRICT_TOKENS_KEY, "true")
        assert config.get_config_value(config.UNIT_SYSTEM_KEY) == "imperial"
        assert config.get_config_value(config.STRICT_TOKENS_KEY) == "true"

    def test_unit_system_default(self):
        assert config.get_unit_system() == "metric"

    def test_unit_system_invalid_value(self):
        config.set_config_value(config.UNIT_SYSTEM_KEY, "furlongs")
        assert config.get_unit_system() == "metric"

    def test_strict_tokens(self):
        assert config.get_strict_tokens() is False
        config.set_config_value(config.STRICT_TOKENS_KEY, "True")
        assert config.get_strict_tokens() is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
