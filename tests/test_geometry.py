from __future__ import annotations

import pytest

from load_planner.geometry import (
    boxes_collide,
    boxes_overlap,
    center_of_gravity,
    detect_collisions,
    effective_dimensions,
    footprints_overlap,
    within_bounds,
)
from load_planner.models import CargoDefinition, Dimensions, Placement, Position, TrailerBounds


def make_cargo(length=1000, width=800, height=1000, weight=1000.0, cargo_id="C") -> CargoDefinition:
    return CargoDefinition(
        id=cargo_id,
        dimensions=Dimensions(length=length, width=width, height=height),
        weight=weight,
    )


def make_box(box_id, x=0.0, y=0.0, z=0.0, rotation=0, cargo=None, weight=None) -> Placement:
    cargo = cargo or make_cargo()
    return Placement(
        id=box_id,
        cargo=cargo,
        position=Position(x=x, y=y, z=z),
        rotation=rotation,
        weight=cargo.weight if weight is None else weight,
    )


def test_boxes_overlap_overlapping() -> None:
    """Test that overlapping boxes are detected."""
    # Box a: (0, 0, 0) to (2, 2, 2)
    a = (0.0, 0.0, 0.0, 2.0, 2.0, 2.0)
    # Box b: (1, 1, 1) to (3, 3, 3) - overlaps with a
    b = (1.0, 1.0, 1.0, 3.0, 3.0, 3.0)

    assert boxes_overlap(a, b) is True


def test_boxes_overlap_not_overlapping() -> None:
    """Test that non-overlapping boxes are detected."""
    a = (0.0, 0.0, 0.0, 1.0, 1.0, 1.0)
    b = (2.0, 2.0, 2.0, 3.0, 3.0, 3.0)

    assert boxes_overlap(a, b) is False


def test_boxes_overlap_touching_faces() -> None:
    a = (0.0, 0.0, 0.0, 1.0, 1.0, 1.0)
    b = (1.0, 0.0, 0.0, 2.0, 1.0, 1.0)

    assert boxes_overlap(a, b) is False
    assert boxes_overlap(b, a) is False


def test_effective_dimensions_quarter_turn_swaps_length_and_width() -> None:
    cargo = make_cargo(length=1200, width=800, height=1440)

    for rotation in (90, 270):
        dims = effective_dimensions(make_box("A", rotation=rotation, cargo=cargo))
        assert (dims.length, dims.width, dims.height) == (800, 1200, 1440)

    for rotation in (0, 180):
        dims = effective_dimensions(make_box("A", rotation=rotation, cargo=cargo))
        assert (dims.length, dims.width, dims.height) == (1200, 800, 1440)


def test_boxes_collide_when_overlapping() -> None:
    box1 = make_box("box1")
    box2 = make_box("box2", x=500, y=400, z=500)

    assert boxes_collide(box1, box2) is True


def test_boxes_do_not_collide_when_separate() -> None:
    box1 = make_box("box1")
    box2 = make_box("box2", x=2000)

    assert boxes_collide(box1, box2) is False


def test_flush_boxes_do_not_collide_after_rotation() -> None:
    # Rotated 90 degrees the first box is 800 long, so x=800 is flush.
    a = make_box("a", rotation=90)
    b = make_box("b", x=800)
    c = make_box("c", x=799)

    assert boxes_collide(a, b) is False
    assert boxes_collide(a, c) is True


def test_footprints_overlap_ignores_height() -> None:
    base = make_box("base")
    above = make_box("above", z=1000)
    beside = make_box("beside", x=1000, z=1000)

    assert boxes_collide(base, above) is False
    assert footprints_overlap(base, above) is True
    assert footprints_overlap(base, beside) is False


def test_within_bounds() -> None:
    bounds = Dimensions(length=5000, width=2500, height=3000)

    assert within_bounds(make_box("box1"), bounds) is True
    assert within_bounds(make_box("outside", x=4000), bounds) is False


def test_within_bounds_accepts_exact_fill() -> None:
    trailer = TrailerBounds(length=1000, width=800, height=1000, max_payload=1000)

    assert within_bounds(make_box("full"), trailer) is True


@pytest.mark.parametrize(
    "start, moved",
    [
        ({"x": 0}, {"x": -1}),
        ({"y": 0}, {"y": -1}),
        ({"z": 0}, {"z": -1}),
        ({"x": 4000}, {"x": 4001}),
        ({"y": 1700}, {"y": 1701}),
        ({"z": 2000}, {"z": 2001}),
    ],
)
def test_within_bounds_one_mm_outward_is_outside(start, moved) -> None:
    bounds = Dimensions(length=5000, width=2500, height=3000)

    assert within_bounds(make_box("inside", **start), bounds) is True
    assert within_bounds(make_box("moved", **moved), bounds) is False


def test_center_of_gravity_weighted_average() -> None:
    cube = make_cargo(length=1000, width=1000, height=1000)
    boxes = [
        make_box("box1", cargo=cube, weight=1000),
        make_box("box2", x=2000, cargo=cube, weight=2000),
    ]

    cog = center_of_gravity(boxes)

    # Center of box1 is at 500, box2 at 2500
    assert cog.x == pytest.approx(1833.33, abs=0.01)
    assert cog.y == pytest.approx(500)
    assert cog.z == pytest.approx(500)
    assert cog.total_weight == 3000


def test_center_of_gravity_empty() -> None:
    cog = center_of_gravity([])

    assert (cog.x, cog.y, cog.z, cog.total_weight) == (0, 0, 0, 0)


def test_center_of_gravity_is_order_invariant() -> None:
    boxes = [
        make_box("a", weight=300),
        make_box("b", x=3000, y=1000, weight=700),
        make_box("c", x=6000, z=1000, rotation=90, weight=1500),
    ]

    forward = center_of_gravity(boxes)
    backward = center_of_gravity(list(reversed(boxes)))

    assert forward.x == pytest.approx(backward.x)
    assert forward.y == pytest.approx(backward.y)
    assert forward.z == pytest.approx(backward.z)
    assert forward.total_weight == backward.total_weight


def test_center_of_gravity_uses_rotated_dimensions() -> None:
    cargo = make_cargo(length=1200, width=800)

    cog = center_of_gravity([make_box("a", rotation=90, cargo=cargo)])

    assert (cog.x, cog.y) == (400, 600)


def test_detect_collisions_reports_each_id_once_in_first_seen_order() -> None:
    boxes = [
        make_box("A"),
        make_box("B", x=500),
        make_box("C", y=500),
        make_box("D", x=8000),
    ]

    result = detect_collisions(boxes)

    assert result.has_collision is True
    assert result.colliding_ids == ["A", "B", "C"]


def test_detect_collisions_none() -> None:
    boxes = [make_box("A"), make_box("B", x=1000), make_box("C", z=1000)]

    result = detect_collisions(boxes)

    assert result.has_collision is False
    assert result.colliding_ids == []
