from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict

from conference_companion.models import AppData


class Loaded(BaseModel):
    """Conference data was loaded and is ready to use."""

    model_config = ConfigDict(frozen=True)

    data: AppData


class Failed(BaseModel):
    """Conference data could not be loaded."""

    model_config = ConfigDict(frozen=True)

    reason: str


LoadResult: TypeAlias = Loaded | Failed
