from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Rotation about the vertical axis only; cargo is never tipped on its side.
Rotation = Literal[0, 90, 180, 270]


class Dimensions(BaseModel):
    """Physical dimensions in millimeters."""

    model_config = ConfigDict(frozen=True)

    length: int = Field(gt=0, description="Length in mm (x axis)")
    width: int = Field(gt=0, description="Width in mm (y axis)")
    height: int = Field(gt=0, description="Height in mm (z axis)")

    @property
    def volume(self) -> int:
        return self.length * self.width * self.height


class CargoDefinition(BaseModel):
    """Catalog entry describing one kind of cargo unit."""

    id: str = Field(description="Unique identifier of the cargo definition")
    name: Optional[str] = Field(default=None, description="Display name")
    sku: Optional[str] = Field(default=None, description="Stock keeping unit")
    dimensions: Dimensions
    weight: float = Field(ge=0, allow_inf_nan=False, description="Weight of one unit in kg")
    is_stackable: bool = Field(default=True, description="Unit may be placed on top of other units")
    max_stack_weight: Optional[float] = Field(
        default=None,
        ge=0,
        description="Max weight in kg this unit may carry on top of it")
    max_stack_height: Optional[float] = Field(
        default=None,
        ge=0,
        description="Max stack height in mm above this unit")
    is_fragile: bool = False
    this_side_up: bool = Field(default=False, description="Restricts rotations to 0 and 180 degrees")
    temperature_min: Optional[float] = Field(default=None, description="Required minimum temperature in C")
    temperature_max: Optional[float] = Field(default=None, description="Required maximum temperature in C")
    hazard_class: Optional[str] = Field(default=None, description="ADR hazard class code")

    @property
    def volume(self) -> int:
        return self.dimensions.volume


class Position(BaseModel):
    """Origin corner of a placement in mm."""

    x: float = Field(default=0.0, allow_inf_nan=False)
    y: float = Field(default=0.0, allow_inf_nan=False)
    z: float = Field(default=0.0, allow_inf_nan=False)


class Placement(BaseModel):
    """One physical unit of cargo positioned inside the trailer."""

    id: str = Field(description="Unique identifier of the placement")
    cargo: CargoDefinition = Field(description="Referenced cargo definition")
    position: Position
    rotation: Rotation = 0
    weight: float = Field(ge=0, allow_inf_nan=False, description="Resolved weight in kg")
    stack_level: int = Field(default=0, ge=0, description="Assigned tier index, 0 = floor")

    @property
    def dimensions(self) -> Dimensions:
        return self.cargo.dimensions


class PackingItem(BaseModel):
    """Requested quantity of one cargo definition."""

    cargo: CargoDefinition
    quantity: int = Field(default=1, ge=0)


class WheelArches(BaseModel):
    """Wheel arch intrusion; advisory only, never treated as an obstacle."""

    height: float = Field(gt=0)
    width: float = Field(gt=0)
    position_x: Optional[float] = Field(default=None, ge=0, description="Distance from the front in mm")


class TemperatureZone(BaseModel):
    """Floor rectangle with an allowed temperature range.

    ``width`` extends along the x axis and ``height`` along the y axis.
    """

    name: Optional[str] = None
    x: float = Field(ge=0)
    y: float = Field(ge=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    temp_min: float
    temp_max: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


class TrailerBounds(BaseModel):
    """Usable internal volume of a trailer plus its load limits."""

    name: Optional[str] = None
    length: int = Field(gt=0, description="Internal length in mm")
    width: int = Field(gt=0, description="Internal width in mm")
    height: int = Field(gt=0, description="Internal height in mm")
    max_payload: float = Field(gt=0, description="Maximum payload in kg")
    max_axle_load: Optional[float] = Field(default=None, gt=0, description="Maximum axle load in kg")
    wheel_arches: Optional[WheelArches] = None
    temperature_zones: list[TemperatureZone] = Field(default_factory=list)

    @property
    def volume(self) -> int:
        return self.length * self.width * self.height


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class FindingType(str, Enum):
    BOUNDARY_EXCEEDED = "BOUNDARY_EXCEEDED"
    COLLISION = "COLLISION"
    WEIGHT_EXCEEDED = "WEIGHT_EXCEEDED"
    AXLE_LOAD_WARNING = "AXLE_LOAD_WARNING"
    STACKING_VIOLATION = "STACKING_VIOLATION"
    FRAGILE_PLACEMENT = "FRAGILE_PLACEMENT"
    TEMPERATURE_ZONE_MISMATCH = "TEMPERATURE_ZONE_MISMATCH"
    CENTER_OF_GRAVITY_WARNING = "CENTER_OF_GRAVITY_WARNING"
    ADR_CONFLICT = "ADR_CONFLICT"


class ValidationFinding(BaseModel):
    type: FindingType
    severity: Severity
    message: str
    item_id: Optional[str] = None


class CollisionResult(BaseModel):
    has_collision: bool = False
    colliding_ids: list[str] = Field(default_factory=list)


class CenterOfGravity(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    total_weight: float = 0.0


class PlanMetrics(BaseModel):
    """Aggregates a caller stores alongside a load plan."""

    total_weight: float = 0.0
    total_volume: float = 0.0
    trailer_volume: float = 0.0
    utilization: float = Field(default=0.0, description="Used volume in percent of the trailer volume")
    center_of_gravity: CenterOfGravity = Field(default_factory=CenterOfGravity)


class PackingResult(BaseModel):
    """Standard result returned by the packer."""

    placements: list[Placement] = Field(default_factory=list)
    unplaced: list[str] = Field(default_factory=list, description="Ids of unit items without a position")
    requested_units: int = 0
    metrics: PlanMetrics = Field(default_factory=PlanMetrics)


class ValidationReport(BaseModel):
    findings: list[ValidationFinding] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(f.severity == Severity.ERROR for f in self.findings)

    @property
    def has_warnings(self) -> bool:
        return any(f.severity == Severity.WARNING for f in self.findings)
