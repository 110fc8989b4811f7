# src/load_planner/packing/first_fit.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from load_planner.geometry import (
    Bounds,
    bounds_at,
    bounds_inside,
    boxes_overlap,
    placement_bounds,
    rotate_dimensions,
)
from load_planner.metrics import compute_metrics
from load_planner.models import (
    CargoDefinition,
    Dimensions,
    PackingItem,
    PackingResult,
    Placement,
    Position,
    TrailerBounds,
)

logger = logging.getLogger(__name__)

GRID_STEP_MM = 50

ALL_ROTATIONS = (0, 90, 180, 270)
UPRIGHT_ROTATIONS = (0, 180)


@dataclass
class UnitItem:
    """One physical unit expanded from a (cargo, quantity) request."""

    id: str
    cargo: CargoDefinition

    @property
    def volume(self) -> int:
        return self.cargo.volume


def expand_items(items: Iterable[PackingItem]) -> list[UnitItem]:
    units: list[UnitItem] = []
    for item in items:
        for i in range(item.quantity):
            units.append(UnitItem(id=f"{item.cargo.id}-{i}", cargo=item.cargo))
    return units


def rotations_for(cargo: CargoDefinition) -> tuple[int, ...]:
    """Rotations to try, in order; 'this side up' cargo only gets half turns."""
    return UPRIGHT_ROTATIONS if cargo.this_side_up else ALL_ROTATIONS


def stack_candidates(base: Bounds, dims: Dimensions, trailer: TrailerBounds) -> list[tuple[float, float, float]]:
    """
    Origins for placing ``dims`` on top of ``base``: aligned with the base
    origin first, then centered on the base footprint.
    """
    bx1, by1, _, bx2, by2, top = base
    if top + dims.height > trailer.height:
        return []

    aligned = (bx1, by1)
    centered = (
        bx1 + ((bx2 - bx1) - dims.length) / 2,
        by1 + ((by2 - by1) - dims.width) / 2,
    )
    return [(x, y, top) for x, y in (aligned, centered) if x >= 0 and y >= 0]


def find_stack_position(
    placements: list[Placement],
    placed_bounds: list[Bounds],
    dims: Dimensions,
    trailer: TrailerBounds,
    check_collisions: bool = True,
) -> Optional[tuple[tuple[float, float, float], Placement]]:
    """Return (origin, base placement) for the first feasible stacked position."""
    for base, base_bounds in zip(placements, placed_bounds):
        for x, y, z in stack_candidates(base_bounds, dims, trailer):
            candidate = bounds_at(x, y, z, dims)
            if not bounds_inside(candidate, trailer):
                continue
            if check_collisions and any(boxes_overlap(candidate, b) for b in placed_bounds):
                continue
            return (x, y, z), base
    return None


def find_floor_position(
    placed_bounds: list[Bounds],
    dims: Dimensions,
    trailer: TrailerBounds,
    grid_step: int = GRID_STEP_MM,
) -> Optional[tuple[float, float, float]]:
    """Grid search at z=0, front to back (x outer) and left to right (y inner)."""
    for x in range(0, trailer.length - dims.length + 1, grid_step):
        for y in range(0, trailer.width - dims.width + 1, grid_step):
            candidate = bounds_at(float(x), float(y), 0.0, dims)
            if not bounds_inside(candidate, trailer):
                continue
            if any(boxes_overlap(candidate, b) for b in placed_bounds):
                continue
            return float(x), float(y), 0.0
    return None


def pack_items(
    items: Iterable[PackingItem],
    trailer: TrailerBounds,
    *,
    grid_step: int = GRID_STEP_MM,
    check_stack_collisions: bool = True,
) -> PackingResult:
    """
    Largest-volume-first, first-fit packer.
    - Expands quantities into unit items and sorts them by volume (stable)
    - Per rotation: tries stacking on placed boxes (stackable items only), then the floor grid
    - Accepts the FIRST feasible position, never backtracks
    - Skips units that would push the load over the trailer payload
    - Units without a position are reported in ``unplaced``, never raised
    """
    if grid_step <= 0:
        raise ValueError(f"grid_step must be positive, got {grid_step}")

    units = expand_items(items)
    # sorted() is stable with reverse=True, ties keep input order
    units_sorted = sorted(units, key=lambda u: u.volume, reverse=True)
    logger.debug(
        f"pack_items start: units={len(units_sorted)}, "
        f"trailer={trailer.length}x{trailer.width}x{trailer.height}, max_payload={trailer.max_payload}"
    )

    placements: list[Placement] = []
    placed_bounds: list[Bounds] = []
    unplaced: list[str] = []
    current_weight = 0.0

    for unit in units_sorted:
        cargo = unit.cargo
        unit_weight = float(cargo.weight)

        if current_weight + unit_weight > trailer.max_payload:
            logger.warning(f"Could not place item {unit.id}: payload limit {trailer.max_payload}kg reached")
            unplaced.append(unit.id)
            continue

        placement: Optional[Placement] = None

        for rotation in rotations_for(cargo):
            dims = rotate_dimensions(cargo.dimensions, rotation)

            origin: Optional[tuple[float, float, float]] = None
            base: Optional[Placement] = None

            if cargo.is_stackable:
                stacked = find_stack_position(
                    placements, placed_bounds, dims, trailer, check_collisions=check_stack_collisions
                )
                if stacked is not None:
                    origin, base = stacked

            if origin is None:
                origin = find_floor_position(placed_bounds, dims, trailer, grid_step)

            if origin is not None:
                x, y, z = origin
                placement = Placement(
                    id=unit.id,
                    cargo=cargo,
                    position=Position(x=x, y=y, z=z),
                    rotation=rotation,
                    weight=unit_weight,
                    stack_level=base.stack_level + 1 if base is not None else 0,
                )
                break

        if placement is None:
            logger.warning(f"Could not place item {unit.id}")
            unplaced.append(unit.id)
            continue

        placements.append(placement)
        placed_bounds.append(placement_bounds(placement))
        current_weight += unit_weight

    logger.debug(f"pack_items done: placed={len(placements)}, unplaced={len(unplaced)}")

    return PackingResult(
        placements=placements,
        unplaced=unplaced,
        requested_units=len(units_sorted),
        metrics=compute_metrics(trailer, placements),
    )


def pack(
    items: Iterable[PackingItem],
    trailer: TrailerBounds,
    *,
    grid_step: int = GRID_STEP_MM,
    check_stack_collisions: bool = True,
) -> list[Placement]:
    """Placements only; callers diff requested vs. returned counts to spot omissions."""
    return pack_items(
        items,
        trailer,
        grid_step=grid_step,
        check_stack_collisions=check_stack_collisions,
    ).placements
