"""Tests for TimerConfig."""

import json
import tempfile
from pathlib import Path

import pytest

from session_timer.config import CONFIG_FILENAME, TimerConfig, default_data_dir
from session_timer.core.errors import ConfigError


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


def test_defaults_without_config_file(temp_data_dir):
    """Test that a missing config.json yields defaults."""
    config = TimerConfig.load(temp_data_dir)

    assert config.data_dir == temp_data_dir
    assert config.tick_ms == 10
    assert config.sets_key == "savedSessionSets"
    assert config.storage_dir == temp_data_dir / "storage"


def test_env_var_sets_default_dir(monkeypatch, temp_data_dir):
    """Test that SESSION_TIMER_HOME picks the data directory."""
    monkeypatch.setenv("SESSION_TIMER_HOME", str(temp_data_dir))

    assert default_data_dir() == temp_data_dir
    assert TimerConfig.load().data_dir == temp_data_dir


def test_save_and_load(temp_data_dir):
    """Test that saved settings are read back."""
    TimerConfig(data_dir=temp_data_dir / "nested", tick_ms=20, name_format="Run {date}").save()

    config = TimerConfig.load(temp_data_dir / "nested")

    assert config.tick_ms == 20
    assert config.name_format == "Run {date}"
    data = json.loads((temp_data_dir / "nested" / CONFIG_FILENAME).read_text())
    assert data["version"] == 1
    assert "data_dir" not in data


def test_malformed_config_raises(temp_data_dir):
    """Test that broken JSON is reported as ConfigError."""
    (temp_data_dir / CONFIG_FILENAME).write_text("{oops")

    with pytest.raises(ConfigError, match="Malformed"):
        TimerConfig.load(temp_data_dir)


def test_invalid_setting_raises(temp_data_dir):
    """Test that an out-of-range tick is reported as ConfigError."""
    (temp_data_dir / CONFIG_FILENAME).write_text(json.dumps({"tick_ms": 0}))

    with pytest.raises(ConfigError, match="Invalid setting"):
        TimerConfig.load(temp_data_dir)
