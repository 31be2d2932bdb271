"""Configuration for Session Timer, stored as config.json in the data directory."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

from session_timer.core.clock import DEFAULT_TICK_MS
from session_timer.core.errors import ConfigError
from session_timer.core.store import DEFAULT_NAME_FORMAT, SAVED_SESSION_SETS_KEY

HOME_ENV_VAR = "SESSION_TIMER_HOME"
CONFIG_FILENAME = "config.json"
CONFIG_VERSION = 1


def default_data_dir() -> Path:
    """Data directory from SESSION_TIMER_HOME, else ~/.session-timer."""
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".session-timer"


class TimerConfig(BaseModel):
    """User-adjustable settings."""

    data_dir: Path = Field(default_factory=default_data_dir)
    tick_ms: int = Field(default=DEFAULT_TICK_MS, gt=0)
    sets_key: str = SAVED_SESSION_SETS_KEY
    name_format: str = DEFAULT_NAME_FORMAT

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    @property
    def storage_dir(self) -> Path:
        return self.data_dir / "storage"

    @classmethod
    def load(cls, data_dir: Optional[Union[str, Path]] = None) -> "TimerConfig":
        """Read config.json from ``data_dir``; defaults apply when it is missing."""
        directory = Path(data_dir).expanduser() if data_dir else default_data_dir()
        config_file = directory / CONFIG_FILENAME
        if not config_file.exists():
            return cls(data_dir=directory)

        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Malformed {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Malformed {config_file}: expected an object")

        data.pop("data_dir", None)
        try:
            return cls(data_dir=directory, **data)
        except ValidationError as e:
            raise ConfigError(f"Invalid setting in {config_file}: {e}") from e

    def save(self) -> Path:
        """Write config.json, creating the data directory if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config = {
            "version": CONFIG_VERSION,
            "created": datetime.now().isoformat(),
            **self.model_dump(mode="json", exclude={"data_dir"}),
        }
        self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
        return self.config_file
