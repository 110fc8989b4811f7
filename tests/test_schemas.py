"""Tests for request parsing, catalog resolution and input validation."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from load_planner.io.schemas import (
    PackRequestSchema,
    PackResultSchema,
    ValidateRequestSchema,
    ValidationResultSchema,
)
from load_planner.models import CargoDefinition, Dimensions, Placement, Position
from load_planner.packing.first_fit import pack_items
from load_planner.validation.validator import validate_plan

EURO = {
    "id": "EURO",
    "name": "EURO pallet",
    "dimensions": {"length": 1200, "width": 800, "height": 1440},
    "weight": 1200,
    "max_stack_weight": 5000,
}


def test_pack_request_with_preset_and_overrides() -> None:
    request = PackRequestSchema.model_validate({
        "trailer_preset": "bache",
        "trailer": {"max_payload": 20000},
        "cargo": [EURO],
        "items": [{"cargo_id": "EURO", "quantity": 3}],
    })

    assert request.trailer.length == 13600
    assert request.trailer.max_payload == 20000

    items = request.packing_items()
    assert len(items) == 1
    assert items[0].quantity == 3
    assert items[0].cargo is request.cargo[0]


def test_missing_trailer_is_rejected() -> None:
    with pytest.raises(ValidationError, match="trailer_preset"):
        PackRequestSchema.model_validate({
            "cargo": [EURO],
            "items": [{"cargo_id": "EURO"}],
        })


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown trailer_preset"):
        PackRequestSchema.model_validate({
            "trailer_preset": "SPACESHIP",
            "cargo": [EURO],
            "items": [{"cargo_id": "EURO"}],
        })


def test_empty_items_are_rejected() -> None:
    with pytest.raises(ValidationError):
        PackRequestSchema.model_validate({"trailer_preset": "BACHE", "cargo": [EURO], "items": []})


def test_unknown_cargo_id() -> None:
    request = PackRequestSchema.model_validate({
        "trailer_preset": "BACHE",
        "cargo": [EURO],
        "items": [{"cargo_id": "MISSING"}],
    })

    with pytest.raises(ValueError, match="Unknown cargo_id 'MISSING'"):
        request.packing_items()


def test_duplicate_cargo_id() -> None:
    request = PackRequestSchema.model_validate({
        "trailer_preset": "BACHE",
        "cargo": [EURO, EURO],
        "items": [{"cargo_id": "EURO"}],
    })

    with pytest.raises(ValueError, match="Duplicate cargo id"):
        request.packing_items()


def test_non_positive_dimensions_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Dimensions(length=0, width=800, height=1000)
    with pytest.raises(ValidationError):
        Dimensions(length=1200, width=-1, height=1000)


def test_nan_coordinates_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Position(x=math.nan, y=0, z=0)


def test_only_cardinal_rotations_are_accepted() -> None:
    cargo = CargoDefinition(id="C", dimensions=Dimensions(length=1, width=1, height=1), weight=1)

    with pytest.raises(ValidationError):
        Placement(id="p", cargo=cargo, position=Position(), rotation=45, weight=1)


def test_placement_weight_defaults_to_cargo_weight() -> None:
    request = ValidateRequestSchema.model_validate({
        "trailer_preset": "BACHE",
        "cargo": [EURO],
        "placements": [
            {"id": "p1", "cargo_id": "EURO", "position": {"x": 0, "y": 0, "z": 0}},
            {"id": "p2", "cargo_id": "EURO", "position": {"x": 1200, "y": 0, "z": 0},
             "rotation": 90, "weight": 900},
        ],
    })

    placements = request.resolve_placements()

    assert [p.weight for p in placements] == [1200, 900]
    assert placements[1].rotation == 90
    assert placements[0].cargo is placements[1].cargo


def test_pack_output_feeds_validate_input() -> None:
    request = PackRequestSchema.model_validate({
        "trailer_preset": "BACHE",
        "cargo": [EURO],
        "items": [{"cargo_id": "EURO", "quantity": 4}],
    })
    result = pack_items(request.packing_items(), request.trailer)
    output = PackResultSchema.from_result(result, request.trailer, request.cargo).model_dump(mode="json")

    assert output["placed_units"] == 4
    assert output["requested_units"] == 4
    assert output["unplaced"] == []
    assert output["placements"][0]["cargo_id"] == "EURO"

    validate_request = ValidateRequestSchema.model_validate(output)
    placements = validate_request.resolve_placements()
    report = validate_plan(placements, validate_request.trailer)
    payload = ValidationResultSchema.from_report(report).model_dump(mode="json")

    assert [p.position for p in placements] == [p.position for p in result.placements]
    assert payload["has_errors"] is False
    assert payload["has_warnings"] is True
    assert payload["validations"][0]["type"] == "CENTER_OF_GRAVITY_WARNING"
    assert payload["validations"][0]["severity"] == "WARNING"
