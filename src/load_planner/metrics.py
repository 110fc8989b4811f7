from __future__ import annotations

from load_planner.geometry import center_of_gravity
from load_planner.models import Placement, PlanMetrics, TrailerBounds


def placement_volume(p: Placement) -> float:
    return float(p.dimensions.volume)


def compute_metrics(trailer: TrailerBounds, placements: list[Placement]) -> PlanMetrics:
    total_volume = sum(placement_volume(p) for p in placements)
    trailer_volume = float(trailer.volume)
    utilization = 0.0 if trailer_volume == 0 else total_volume / trailer_volume * 100
    cog = center_of_gravity(placements)
    return PlanMetrics(
        total_weight=cog.total_weight,
        total_volume=total_volume,
        trailer_volume=trailer_volume,
        utilization=utilization,
        center_of_gravity=cog,
    )
