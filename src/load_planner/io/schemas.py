"""Data schemas for input/output operations."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from ..models import (
    CargoDefinition,
    PackingItem,
    PackingResult,
    Placement,
    Position,
    Rotation,
    TrailerBounds,
    ValidationFinding,
    ValidationReport,
)
from ..trailers import get_trailer_dims


class ItemRequestSchema(BaseModel):
    """Requested quantity of a catalog entry."""
    cargo_id: str = Field(description="Id of a cargo definition in the catalog")
    quantity: int = Field(ge=0, default=1, description="Number of units to pack")


class PlacementRecord(BaseModel):
    """Serializable placement; refers to its cargo by id."""
    id: str
    cargo_id: str
    position: Position
    rotation: Rotation = 0
    weight: Optional[float] = Field(None, ge=0, description="Defaults to the cargo weight")
    stack_level: int = Field(ge=0, default=0)

    @classmethod
    def from_placement(cls, placement: Placement) -> "PlacementRecord":
        return cls(
            id=placement.id,
            cargo_id=placement.cargo.id,
            position=placement.position,
            rotation=placement.rotation,
            weight=placement.weight,
            stack_level=placement.stack_level,
        )


class _PlanRequestSchema(BaseModel):
    """Trailer (explicit and/or preset) plus the cargo catalog."""
    trailer_preset: Optional[str] = Field(None, description="Key of a trailer preset")
    trailer: Optional[TrailerBounds] = None
    cargo: List[CargoDefinition] = Field(default_factory=list, description="Cargo catalog")

    @model_validator(mode="before")
    @classmethod
    def merge_trailer_preset(cls, data: Any) -> Any:
        # Explicit trailer fields override the preset values.
        if isinstance(data, dict) and data.get("trailer_preset"):
            merged = dict(get_trailer_dims(data["trailer_preset"]))
            overrides = data.get("trailer") or {}
            if isinstance(overrides, TrailerBounds):
                overrides = overrides.model_dump(exclude_unset=True)
            merged.update(overrides)
            data = {**data, "trailer": merged}
        return data

    @model_validator(mode="after")
    def require_trailer(self) -> "_PlanRequestSchema":
        if self.trailer is None:
            raise ValueError("Input must include either 'trailer_preset' or 'trailer'")
        return self

    def catalog(self) -> dict[str, CargoDefinition]:
        catalog: dict[str, CargoDefinition] = {}
        for cargo in self.cargo:
            if cargo.id in catalog:
                raise ValueError(f"Duplicate cargo id '{cargo.id}' in catalog")
            catalog[cargo.id] = cargo
        return catalog

    def lookup(self, catalog: dict[str, CargoDefinition], cargo_id: str) -> CargoDefinition:
        if cargo_id not in catalog:
            raise ValueError(f"Unknown cargo_id '{cargo_id}'. Valid: {sorted(catalog.keys())}")
        return catalog[cargo_id]


class PackRequestSchema(_PlanRequestSchema):
    """Schema for a packing request."""
    items: List[ItemRequestSchema] = Field(min_length=1, description="Requested cargo quantities")

    def packing_items(self) -> list[PackingItem]:
        catalog = self.catalog()
        return [
            PackingItem(cargo=self.lookup(catalog, item.cargo_id), quantity=item.quantity)
            for item in self.items
        ]


class ValidateRequestSchema(_PlanRequestSchema):
    """Schema for a validation request."""
    placements: List[PlacementRecord] = Field(default_factory=list)

    def resolve_placements(self) -> list[Placement]:
        catalog = self.catalog()
        placements: list[Placement] = []
        for record in self.placements:
            cargo = self.lookup(catalog, record.cargo_id)
            placements.append(Placement(
                id=record.id,
                cargo=cargo,
                position=record.position,
                rotation=record.rotation,
                weight=cargo.weight if record.weight is None else record.weight,
                stack_level=record.stack_level,
            ))
        return placements


class PackResultSchema(BaseModel):
    """Schema for a packing result."""
    trailer: TrailerBounds
    cargo: List[CargoDefinition]
    placements: List[PlacementRecord]
    unplaced: List[str]
    requested_units: int = Field(ge=0)
    placed_units: int = Field(ge=0)
    total_weight: float
    total_volume: float
    utilization: float = Field(ge=0, description="Used volume in percent")
    center_of_gravity: dict[str, float]

    @classmethod
    def from_result(
        cls,
        result: PackingResult,
        trailer: TrailerBounds,
        cargo: List[CargoDefinition],
    ) -> "PackResultSchema":
        metrics = result.metrics
        return cls(
            trailer=trailer,
            cargo=cargo,
            placements=[PlacementRecord.from_placement(p) for p in result.placements],
            unplaced=result.unplaced,
            requested_units=result.requested_units,
            placed_units=len(result.placements),
            total_weight=metrics.total_weight,
            total_volume=metrics.total_volume,
            utilization=metrics.utilization,
            center_of_gravity=metrics.center_of_gravity.model_dump(),
        )


class ValidationResultSchema(BaseModel):
    """Schema for a validation result."""
    validations: List[ValidationFinding]
    has_errors: bool
    has_warnings: bool

    @classmethod
    def from_report(cls, report: ValidationReport) -> "ValidationResultSchema":
        return cls(
            validations=report.findings,
            has_errors=report.has_errors,
            has_warnings=report.has_warnings,
        )
