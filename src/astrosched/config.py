"""Configuration models for astrosched."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from astrosched.timeparse import DEFAULT_FORMAT


class StoreConfig(BaseModel):
    """Configuration for the task store."""

    edit_strategy: Literal["atomic", "remove_then_add"] = "atomic"


class LoggingConfig(BaseModel):
    """Configuration for the event log."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: str | None = None


class SchedulerConfig(BaseModel):
    """Main configuration for astrosched."""

    time_format: str = DEFAULT_FORMAT
    default_priority: int = Field(default=3, ge=1, le=5)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> SchedulerConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)


# Default config directory
APP_DIR = Path(".astrosched")
CONFIG_FILE = APP_DIR / "config.json"
