from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from load_planner.config import load_settings
from load_planner.io.schemas import (
    PackRequestSchema,
    PackResultSchema,
    ValidateRequestSchema,
    ValidationResultSchema,
)
from load_planner.packing.first_fit import pack_items
from load_planner.validation.validator import validate_plan

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_HAS_ERRORS = 1
EXIT_BAD_INPUT = 2


def load_input(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def write_plan(plan: dict, path: str = "plan.json") -> None:
    """
    Write a plan dictionary to a JSON file.

    Creates parent folders if needed, writes JSON with indent=2 and sort_keys=True,
    and overwrites the file on every run.
    """
    output_path = Path(path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"write_plan: writing to {output_path}")
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, sort_keys=True)


def run_pack(data: dict, output: str, grid_step: int, check_stack_collisions: bool) -> int:
    request = PackRequestSchema.model_validate(data)
    result = pack_items(
        request.packing_items(),
        request.trailer,
        grid_step=grid_step,
        check_stack_collisions=check_stack_collisions,
    )
    plan = PackResultSchema.from_result(result, request.trailer, request.cargo)
    write_plan(plan.model_dump(mode="json"), output)

    print(f"✅ Placed {plan.placed_units}/{plan.requested_units} units")
    if plan.unplaced:
        print(f"❌ Unplaced : {', '.join(plan.unplaced)}")
    print(f"📊 Weight {plan.total_weight:g}kg, utilization {plan.utilization:.2f}%")
    return EXIT_OK


def run_validate(data: dict, output: str) -> int:
    request = ValidateRequestSchema.model_validate(data)
    report = validate_plan(request.resolve_placements(), request.trailer)
    result = ValidationResultSchema.from_report(report)
    write_plan(result.model_dump(mode="json"), output)

    for finding in result.validations:
        print(f"{finding.severity.value:<7} {finding.type.value}: {finding.message}")
    if not result.validations:
        print("✅ No findings")
    return EXIT_HAS_ERRORS if result.has_errors else EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Trailer load planner CLI")
    parser.add_argument("--input", required=True, help="Input request JSON file")
    parser.add_argument("--output", required=True, help="Output JSON file")
    parser.add_argument(
        "--mode",
        choices=["pack", "validate"],
        default="pack",
        help="pack = place cargo automatically, validate = check an existing arrangement",
    )
    parser.add_argument(
        "--grid-step",
        type=int,
        help="Floor search grid step in mm (overrides LOAD_PLANNER_GRID_STEP)",
    )
    parser.add_argument(
        "--env-file",
        help="Optional .env file with LOAD_PLANNER_* settings",
    )
    args = parser.parse_args(argv)

    try:
        # --grid-step and LOAD_PLANNER_GRID_STEP share the Settings check (gt=0)
        settings = load_settings(
            Path(args.env_file) if args.env_file else None,
            grid_step=args.grid_step,
        )
    except (ValidationError, ValueError) as e:
        print(f"⚠️ Invalid settings (--grid-step or LOAD_PLANNER_* environment)\n{e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        data = load_input(Path(args.input))
        if args.mode == "validate":
            return run_validate(data, args.output)
        return run_pack(data, args.output, settings.grid_step, settings.check_stack_collisions)
    except (ValidationError, ValueError, OSError) as e:
        # JSONDecodeError is a ValueError
        logger.error(f"Invalid input for --mode {args.mode}: {e}")
        print(f"⚠️ Missing or invalid information\n{e}", file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
