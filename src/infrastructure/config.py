"""Environment-driven configuration for infrastructure adapters.

Settings are read from process environment variables, optionally seeded from a
`.env` file (python-dotenv). Values are validated once, at construction, by
the Pydantic model.

Variables:
    TOWER_PLANNER_ELEVATION_PROVIDER  open-elevation | geotiff | none
    TOWER_PLANNER_ELEVATION_URL       Open-Elevation base URL
    TOWER_PLANNER_ELEVATION_TIMEOUT_S Per-request timeout and async deadline
    TOWER_PLANNER_ELEVATION_RETRIES   Attempts after the first failure
    TOWER_PLANNER_ELEVATION_BACKOFF_S Base delay for exponential backoff
    TOWER_PLANNER_DEM_PATH            GeoTIFF path for the geotiff provider
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

ENV_PREFIX = "TOWER_PLANNER_"

DEFAULT_ELEVATION_URL = "https://api.open-elevation.com"


class ElevationSettings(BaseModel):
    """Elevation collaborator settings (Value Object)."""

    provider: Literal["open-elevation", "geotiff", "none"] = "open-elevation"
    base_url: str = DEFAULT_ELEVATION_URL
    timeout_s: float = Field(default=10.0, gt=0)
    retries: int = Field(default=2, ge=0)
    backoff_s: float = Field(default=0.5, ge=0)
    dem_path: Path | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_provider(self) -> "ElevationSettings":
        if self.provider == "geotiff" and self.dem_path is None:
            raise ValueError("geotiff provider requires TOWER_PLANNER_DEM_PATH")
        return self


def load_settings(
    environ: Mapping[str, str] | None = None, dotenv_path: Path | str | None = None
) -> ElevationSettings:
    """Build ElevationSettings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests pass a dict).
            When given, no .env file is loaded.
        dotenv_path: Explicit .env file; default search applies when None.

    Raises:
        pydantic.ValidationError: If a variable has an invalid value
    """
    if environ is None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        environ = os.environ

    fields = {
        "provider": "ELEVATION_PROVIDER",
        "base_url": "ELEVATION_URL",
        "timeout_s": "ELEVATION_TIMEOUT_S",
        "retries": "ELEVATION_RETRIES",
        "backoff_s": "ELEVATION_BACKOFF_S",
        "dem_path": "DEM_PATH",
    }
    values = {
        field: environ[ENV_PREFIX + name]
        for field, name in fields.items()
        if environ.get(ENV_PREFIX + name, "").strip()
    }
    return ElevationSettings(**values)
