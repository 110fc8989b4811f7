"""Geometry utilities shared by the packer and the validator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol

from .models import CenterOfGravity, CollisionResult, Dimensions

if TYPE_CHECKING:
    from .models import Placement

Bounds = tuple[float, float, float, float, float, float]


class SupportsExtent(Protocol):
    length: int
    width: int
    height: int


def rotate_dimensions(dims: Dimensions, rotation: int) -> Dimensions:
    """Swap length and width for quarter turns; height never changes."""
    if rotation in (90, 270):
        return Dimensions(length=dims.width, width=dims.length, height=dims.height)
    return dims


def effective_dimensions(placement: "Placement") -> Dimensions:
    return rotate_dimensions(placement.dimensions, placement.rotation)


def bounds_at(x: float, y: float, z: float, dims: Dimensions) -> Bounds:
    return (x, y, z, x + dims.length, y + dims.width, z + dims.height)


def placement_bounds(placement: "Placement") -> Bounds:
    p = placement.position
    return bounds_at(float(p.x), float(p.y), float(p.z), effective_dimensions(placement))


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1) and (az1 < bz2 and az2 > bz1)


def rects_overlap(a: Bounds, b: Bounds) -> bool:
    """Same open-interval test restricted to the floor plane (x and y)."""
    ax1, ay1, _, ax2, ay2, _ = a
    bx1, by1, _, bx2, by2, _ = b
    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1)


def boxes_collide(a: "Placement", b: "Placement") -> bool:
    return boxes_overlap(placement_bounds(a), placement_bounds(b))


def footprints_overlap(a: "Placement", b: "Placement") -> bool:
    return rects_overlap(placement_bounds(a), placement_bounds(b))


def bounds_inside(bounds: Bounds, limits: SupportsExtent) -> bool:
    x1, y1, z1, x2, y2, z2 = bounds
    return (
        x1 >= 0 and y1 >= 0 and z1 >= 0
        and x2 <= limits.length
        and y2 <= limits.width
        and z2 <= limits.height
    )


def within_bounds(placement: "Placement", limits: SupportsExtent) -> bool:
    """
    True if the placement lies inside ``limits`` (a trailer or plain dimensions).

    The upper bound is closed: a box exactly filling the trailer is valid.
    """
    return bounds_inside(placement_bounds(placement), limits)


def top_z(placement: "Placement") -> float:
    return float(placement.position.z) + effective_dimensions(placement).height


def center_point(placement: "Placement") -> tuple[float, float, float]:
    x1, y1, z1, x2, y2, z2 = placement_bounds(placement)
    return ((x1 + x2) / 2, (y1 + y2) / 2, (z1 + z2) / 2)


def center_of_gravity(placements: Iterable["Placement"]) -> CenterOfGravity:
    """
    Weight-weighted average of the placements' geometric centers.

    An empty input (or one without any weight) yields the all-zero value.
    """
    total_weight = 0.0
    weighted_x = weighted_y = weighted_z = 0.0

    for p in placements:
        cx, cy, cz = center_point(p)
        weight = float(p.weight)
        weighted_x += cx * weight
        weighted_y += cy * weight
        weighted_z += cz * weight
        total_weight += weight

    if total_weight <= 0:
        return CenterOfGravity(total_weight=total_weight)

    return CenterOfGravity(
        x=weighted_x / total_weight,
        y=weighted_y / total_weight,
        z=weighted_z / total_weight,
        total_weight=total_weight,
    )


def detect_collisions(placements: list["Placement"]) -> CollisionResult:
    """Pairwise overlap test; every colliding id is reported once, first-seen order."""
    bounds = [placement_bounds(p) for p in placements]
    colliding: dict[str, None] = {}

    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            if boxes_overlap(bounds[i], bounds[j]):
                colliding.setdefault(placements[i].id, None)
                colliding.setdefault(placements[j].id, None)

    ids = list(colliding)
    return CollisionResult(has_collision=bool(ids), colliding_ids=ids)
