from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AwareDatetime, BaseModel, field_validator


class AppDataConfig(BaseModel):
    api_url: str
    cache_file: Path

    # images are fetched from f"{image_base_url}/{record_name}"
    image_base_url: str
    image_dir: Path


class DisplayConfig(BaseModel):
    timezone: str = "Europe/London"

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone {value!r}") from e
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class CompanionConfig(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    app_data: AppDataConfig
    display: DisplayConfig = DisplayConfig()

    # pretend the current time is this, for testing outside of the conference
    simulated_time: AwareDatetime | None = None


def load_config(config_file: Path) -> CompanionConfig:
    """Read and validate a TOML configuration file."""
    return CompanionConfig(**tomllib.loads(config_file.read_text()))
