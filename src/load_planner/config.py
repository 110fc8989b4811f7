"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from load_planner.packing.first_fit import GRID_STEP_MM

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    grid_step: int = Field(default=GRID_STEP_MM, gt=0, description="Floor search grid step in mm")
    check_stack_collisions: bool = Field(
        default=True,
        description="Reject stacked positions that collide with any placed box",
    )
    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_settings(env_path: Optional[Path] = None, **overrides: Any) -> Settings:
    """
    Load settings from LOAD_PLANNER_* environment variables.

    A .env file (``env_path`` or the one found from the working directory)
    is read first; variables already set in the environment win. Keyword
    overrides that are not None win over both, and every value goes through
    the same Settings validation.
    """
    if env_path is not None:
        load_dotenv(env_path)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    values: dict[str, Any] = {
        "grid_step": int(os.getenv("LOAD_PLANNER_GRID_STEP", GRID_STEP_MM)),
        "check_stack_collisions": _env_bool("LOAD_PLANNER_STACK_COLLISIONS", True),
        "log_level": os.getenv("LOAD_PLANNER_LOG_LEVEL", "INFO").upper(),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
