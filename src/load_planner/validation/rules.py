"""Rules checked against a load plan."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, Field

from ..geometry import (
    center_of_gravity,
    center_point,
    detect_collisions,
    footprints_overlap,
    top_z,
    within_bounds,
)
from ..models import (
    CargoDefinition,
    FindingType,
    Placement,
    Severity,
    TrailerBounds,
    ValidationFinding,
)


class ValidationConfig(BaseModel):
    """Thresholds used by the rules; every value can be overridden per call."""

    payload_warning_ratio: float = Field(default=0.9, gt=0, description="Share of max payload that triggers a warning")
    rear_axle_ratio: float = Field(default=0.7, gt=0, description="Assumed rear axle position as share of trailer length")
    cog_front_ratio: float = Field(default=0.25, ge=0)
    cog_rear_ratio: float = Field(default=0.75, ge=0)
    fragile_weight_limit: float = Field(default=500.0, ge=0, description="Max kg on top of a fragile item")
    hazard_distance: float = Field(default=1000.0, ge=0, description="Adjacency distance in mm")
    incompatible_hazard_pairs: list[tuple[str, str]] = Field(
        default_factory=lambda: [("3", "8")],
        description="ADR class pairs that may not be adjacent, in either order",
    )

    def hazards_incompatible(self, a: str, b: str) -> bool:
        return any({a, b} == {x, y} for x, y in self.incompatible_hazard_pairs)


def _finding(
    type_: FindingType,
    severity: Severity,
    message: str,
    item_id: Optional[str] = None,
) -> ValidationFinding:
    return ValidationFinding(type=type_, severity=severity, message=message, item_id=item_id)


class Rule:
    """Base class for load plan rules."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()

    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        """
        Check the placements against the rule.

        Args:
            placements: Arrangement to check, never modified
            trailer: Trailer the arrangement is loaded into

        Returns:
            Findings in a deterministic order, empty when the rule holds
        """
        raise NotImplementedError


class BoundaryRule(Rule):
    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        return [
            _finding(
                FindingType.BOUNDARY_EXCEEDED,
                Severity.ERROR,
                f"Item {p.id} exceeds trailer boundaries",
                p.id,
            )
            for p in placements
            if not within_bounds(p, trailer)
        ]


class CollisionRule(Rule):
    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        result = detect_collisions(placements)
        return [
            _finding(
                FindingType.COLLISION,
                Severity.ERROR,
                f"Item {item_id} collides with another item",
                item_id,
            )
            for item_id in result.colliding_ids
        ]


class WeightRule(Rule):
    """Total payload, plus a simple axle load check on the center of gravity."""

    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        total_weight = sum(float(p.weight) for p in placements)
        max_payload = float(trailer.max_payload)

        if total_weight > max_payload:
            findings.append(_finding(
                FindingType.WEIGHT_EXCEEDED,
                Severity.ERROR,
                f"Total weight {total_weight:g}kg exceeds max payload {max_payload:g}kg",
            ))
        elif total_weight > max_payload * self.config.payload_warning_ratio:
            findings.append(_finding(
                FindingType.WEIGHT_EXCEEDED,
                Severity.WARNING,
                f"Total weight {total_weight:g}kg is close to max payload {max_payload:g}kg",
            ))

        if trailer.max_axle_load:
            cog = center_of_gravity(placements)
            rear_axle_x = trailer.length * self.config.rear_axle_ratio
            if cog.total_weight > 0 and cog.x > rear_axle_x:
                findings.append(_finding(
                    FindingType.AXLE_LOAD_WARNING,
                    Severity.WARNING,
                    f"Center of gravity ({cog.x / 1000:.2f}m) is behind rear axle position ({rear_axle_x / 1000:.2f}m)",
                ))

        return findings


def find_box_below(box: Placement, candidates: list[Placement]) -> Optional[Placement]:
    """First candidate whose footprint overlaps the box; not necessarily its physical base."""
    for below in candidates:
        if footprints_overlap(box, below):
            return below
    return None


def boxes_above(base: Placement, placements: list[Placement]) -> list[Placement]:
    return [
        p for p in placements
        if p.stack_level > base.stack_level and footprints_overlap(base, p)
    ]


def weight_above(base: Placement, placements: list[Placement]) -> float:
    return sum(float(p.weight) for p in boxes_above(base, placements))


def height_above(base: Placement, placements: list[Placement]) -> float:
    above = boxes_above(base, placements)
    if not above:
        return 0.0
    return max(top_z(p) for p in above) - top_z(base)


class StackingRule(Rule):
    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []

        levels: dict[int, list[Placement]] = {}
        for p in placements:
            levels.setdefault(p.stack_level, []).append(p)

        for level, level_boxes in levels.items():
            if level == 0:
                continue

            below_boxes = [p for p in placements if p.stack_level < level]

            for box in level_boxes:
                if not box.cargo.is_stackable:
                    findings.append(_finding(
                        FindingType.STACKING_VIOLATION,
                        Severity.ERROR,
                        f"Item {box.id} is not stackable but is placed on level {level}",
                        box.id,
                    ))
                    continue

                base = find_box_below(box, below_boxes)
                if base is None:
                    continue
                findings.extend(self._check_base(box, base, placements))

        return findings

    def _check_base(
        self,
        box: Placement,
        base: Placement,
        placements: list[Placement],
    ) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        limits = base.cargo

        if limits.max_stack_weight is not None:
            load = weight_above(base, placements)
            if load > limits.max_stack_weight:
                findings.append(_finding(
                    FindingType.STACKING_VIOLATION,
                    Severity.ERROR,
                    f"Weight above item {base.id} ({load:g}kg) exceeds max stack weight {limits.max_stack_weight:g}kg",
                    base.id,
                ))

        if limits.max_stack_height is not None:
            stack_height = height_above(base, placements)
            if stack_height > limits.max_stack_height:
                findings.append(_finding(
                    FindingType.STACKING_VIOLATION,
                    Severity.ERROR,
                    f"Stack height above item {base.id} ({stack_height:g}mm) exceeds max stack height {limits.max_stack_height:g}mm",
                    base.id,
                ))

        if limits.is_fragile and box.weight > self.config.fragile_weight_limit:
            findings.append(_finding(
                FindingType.FRAGILE_PLACEMENT,
                Severity.WARNING,
                f"Heavy item {box.id} placed on fragile item {base.id}",
                box.id,
            ))

        return findings


def _temperature_range(cargo: CargoDefinition) -> str:
    if cargo.temperature_max is None:
        return f"at least {cargo.temperature_min:g}°C"
    return f"{cargo.temperature_min:g}-{cargo.temperature_max:g}°C"


class TemperatureZoneRule(Rule):
    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        if not trailer.temperature_zones:
            return findings

        for p in placements:
            cargo = p.cargo
            if cargo.temperature_min is None:
                continue

            cx, cy, _ = center_point(p)
            zone = next((z for z in trailer.temperature_zones if z.contains(cx, cy)), None)

            if zone is None:
                findings.append(_finding(
                    FindingType.TEMPERATURE_ZONE_MISMATCH,
                    Severity.ERROR,
                    f"Item {p.id} requires temperature {_temperature_range(cargo)} but is not in a matching zone",
                    p.id,
                ))
            elif cargo.temperature_min < zone.temp_min or (
                cargo.temperature_max is not None and cargo.temperature_max > zone.temp_max
            ):
                label = f" '{zone.name}'" if zone.name else ""
                findings.append(_finding(
                    FindingType.TEMPERATURE_ZONE_MISMATCH,
                    Severity.ERROR,
                    f"Item {p.id} temperature range {_temperature_range(cargo)} does not match "
                    f"zone{label} ({zone.temp_min:g}-{zone.temp_max:g}°C)",
                    p.id,
                ))

        return findings


class CenterOfGravityRule(Rule):
    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        cog = center_of_gravity(placements)
        rear_threshold = trailer.length * self.config.cog_rear_ratio
        front_threshold = trailer.length * self.config.cog_front_ratio

        if cog.x > rear_threshold:
            message = f"Center of gravity is too far back ({cog.x / 1000:.2f}m from front)"
        elif cog.x < front_threshold:
            message = f"Center of gravity is too far forward ({cog.x / 1000:.2f}m from front)"
        else:
            return []

        return [_finding(FindingType.CENTER_OF_GRAVITY_WARNING, Severity.WARNING, message)]


class HazardAdjacencyRule(Rule):
    """Simplified ADR check: incompatible classes within a fixed floor distance."""

    def check(self, placements: list[Placement], trailer: TrailerBounds) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        hazardous = [p for p in placements if p.cargo.hazard_class]

        for i in range(len(hazardous)):
            for j in range(i + 1, len(hazardous)):
                a, b = hazardous[i], hazardous[j]
                distance = math.hypot(
                    a.position.x - b.position.x,
                    a.position.y - b.position.y,
                )
                if distance >= self.config.hazard_distance:
                    continue

                class_a, class_b = a.cargo.hazard_class, b.cargo.hazard_class
                if self.config.hazards_incompatible(class_a, class_b):
                    findings.append(_finding(
                        FindingType.ADR_CONFLICT,
                        Severity.ERROR,
                        f"ADR class {class_a} and {class_b} items cannot be adjacent ({a.id}, {b.id})",
                        a.id,
                    ))

        return findings
