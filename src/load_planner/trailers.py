# src/load_planner/trailers.py
from __future__ import annotations

import copy
from typing import Any

from load_planner.models import TrailerBounds

# Internal usable dims (mm) and limits (kg) of the standard fleet.
TRAILER_PRESETS: dict[str, dict[str, Any]] = {
    "BACHE": {
        "name": "Bache trailer",
        "length": 13600, "width": 2450, "height": 2700,
        "max_payload": 24000, "max_axle_load": 10000,
        "wheel_arches": {"height": 300, "width": 800},
    },
    "FRIGO": {
        "name": "Frigo trailer",
        "length": 13300, "width": 2400, "height": 2600,
        "max_payload": 22000, "max_axle_load": 10000,
        # Zone width runs along the trailer length (x), height across it (y).
        "temperature_zones": [
            {"name": "Cool Zone 2-8°C", "x": 0, "y": 0, "width": 8000, "height": 2400,
             "temp_min": 2, "temp_max": 8},
            {"name": "Ambient Zone 15-25°C", "x": 8000, "y": 0, "width": 5300, "height": 2400,
             "temp_min": 15, "temp_max": 25},
        ],
    },
    "STUKGOED": {
        "name": "Stukgoed truck",
        "length": 9000, "width": 2300, "height": 2500,
        "max_payload": 12000, "max_axle_load": 6000,
    },
}


def get_trailer_dims(preset: str) -> dict[str, Any]:
    key = preset.strip().upper()
    if key not in TRAILER_PRESETS:
        raise ValueError(f"Unknown trailer_preset '{preset}'. Valid: {sorted(TRAILER_PRESETS.keys())}")
    return copy.deepcopy(TRAILER_PRESETS[key])


def get_trailer(preset: str, **overrides: Any) -> TrailerBounds:
    """Build a TrailerBounds from a preset; keyword overrides win over preset values."""
    trailer_kwargs = get_trailer_dims(preset)
    trailer_kwargs.update(overrides)
    return TrailerBounds(**trailer_kwargs)
