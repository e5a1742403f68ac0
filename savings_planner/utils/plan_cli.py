from __future__ import annotations

import argparse
import json
from typing import Dict, List

from pydantic import ValidationError

from savings_planner.core.config import SETTINGS
from savings_planner.core.errors import ProjectionError, validation_envelope
from savings_planner.core.schemas import ErrorEnvelope, ProjectionReport
from savings_planner.tools.projection_tools import load_configured_catalog, tool_compute_projection
from savings_planner.utils.answer_format import render_summary_md
from savings_planner.utils.catalog_loader import load_catalog, validate_catalog
from savings_planner.utils.logging import setup_logging


def _parse_allocation(items: List[str]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for it in items:
        key, sep, weight = it.partition("=")
        if not sep:
            raise ValueError(f"Allocation must look like key=weight, got {it!r}")
        out[key.strip()] = float(weight)
    return out


def _print_error(env: ErrorEnvelope, as_json: bool) -> int:
    if as_json:
        print(env.model_dump_json(indent=2))
    else:
        print(f"ERROR [{env.code}]: {env.message}")
    return 2


def cmd_project(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog) if args.catalog else load_configured_catalog()
    try:
        allocation = _parse_allocation(args.allocation)
    except ValueError as e:
        return _print_error(ErrorEnvelope(code="INVALID_INPUT", message=str(e)), args.json)

    payload = {
        "goal": {"target_amount": args.target_amount, "target_age": args.target_age},
        "allocation": allocation,
        "beneficiaries": [{"id": i, "current_age": a} for i, a in enumerate(args.ages, start=1)],
        "modifiers": {"conservative_percent": args.conservative, "optimistic_percent": args.optimistic},
    }

    try:
        out = tool_compute_projection(payload, catalog=catalog)
    except ProjectionError as e:
        return _print_error(e.to_envelope(), args.json)
    except ValidationError as e:
        return _print_error(validation_envelope(e), args.json)

    if args.json:
        print(json.dumps(out, indent=2))
    else:
        print(render_summary_md(ProjectionReport.model_validate(out), catalog=catalog))
    return 0


def cmd_validate_catalog(args: argparse.Namespace) -> int:
    rep = validate_catalog(args.catalog or SETTINGS.catalog_path)

    if args.json:
        print(rep.model_dump_json(indent=2))
    else:
        if rep.errors:
            print("Catalog validation FAILED")
            for e in rep.errors:
                print(f"ERROR: {e.message} ({e.location or ''})")
        else:
            print("Catalog validation OK (no errors)")

        for w in rep.warnings:
            print(f"WARN: {w.message} ({w.location or ''})")

    return 0 if rep.ok else 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="plan_cli", description="Savings goal projections")
    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("project", help="Compute required contributions and trajectories")
    pr.add_argument("--target_amount", type=float, default=SETTINGS.default_target_amount)
    pr.add_argument("--target_age", type=int, default=SETTINGS.default_target_age)
    pr.add_argument("--ages", type=int, nargs="+", default=list(SETTINGS.default_beneficiary_ages))
    pr.add_argument("--allocation", nargs="+", default=["growth=75", "conservative_growth=15", "small_cap=10"],
                    help="key=weight pairs, weights in percent")
    pr.add_argument("--conservative", type=float, default=SETTINGS.conservative_percent)
    pr.add_argument("--optimistic", type=float, default=SETTINGS.optimistic_percent)
    pr.add_argument("--catalog", default=None)
    pr.add_argument("--json", action="store_true")
    pr.set_defaults(func=cmd_project)

    v = sub.add_parser("validate-catalog", help="Validate the asset catalog file")
    v.add_argument("--catalog", default=None)
    v.add_argument("--json", action="store_true")
    v.set_defaults(func=cmd_validate_catalog)

    return p


def main() -> None:
    setup_logging(SETTINGS.log_level)
    args = build_parser().parse_args()
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
