from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models import Placement, Severity, TrailerBounds, ValidationFinding, ValidationReport
from .rules import (
    BoundaryRule,
    CenterOfGravityRule,
    CollisionRule,
    HazardAdjacencyRule,
    Rule,
    StackingRule,
    TemperatureZoneRule,
    ValidationConfig,
    WeightRule,
)

logger = logging.getLogger(__name__)

# Order matters: findings are concatenated in this sequence.
RULE_CLASSES: tuple[type[Rule], ...] = (
    BoundaryRule,
    CollisionRule,
    WeightRule,
    StackingRule,
    TemperatureZoneRule,
    CenterOfGravityRule,
    HazardAdjacencyRule,
)


def build_rules(config: Optional[ValidationConfig] = None) -> list[Rule]:
    config = config or ValidationConfig()
    return [rule_cls(config) for rule_cls in RULE_CLASSES]


def validate(
    placements: Iterable[Placement],
    trailer: TrailerBounds,
    config: Optional[ValidationConfig] = None,
) -> list[ValidationFinding]:
    """
    Run every rule against the arrangement and return all findings.

    Rules never short-circuit each other and the inputs are never modified,
    so calling this twice on the same input yields the same list.
    """
    placements = list(placements)
    findings: list[ValidationFinding] = []

    for rule in build_rules(config):
        findings.extend(rule.check(placements, trailer))

    errors = sum(1 for f in findings if f.severity == Severity.ERROR)
    warnings = sum(1 for f in findings if f.severity == Severity.WARNING)
    logger.info(f"validated placements={len(placements)}, errors={errors}, warnings={warnings}")

    return findings


def validate_plan(
    placements: Iterable[Placement],
    trailer: TrailerBounds,
    config: Optional[ValidationConfig] = None,
) -> ValidationReport:
    return ValidationReport(findings=validate(placements, trailer, config))
