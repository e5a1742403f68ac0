from __future__ import annotations

from typing import Any, Dict, Optional

from savings_planner.core.config import SETTINGS
from savings_planner.core.schemas import ProjectionRequest
from savings_planner.utils.catalog_loader import AssetCatalog, default_catalog, load_catalog
from savings_planner.utils.logging import get_logger
from savings_planner.utils.projection_engine import build_projection_report

logger = get_logger("projection_tools")

_TOP_ALIASES = {"scenarioModifiers": "modifiers", "allocations": "allocation"}
_GOAL_ALIASES = {"targetAmount": "target_amount", "targetAge": "target_age"}
_ENTRY_ALIASES = {"assetKey": "asset_key", "weightPercent": "weight_percent", "key": "asset_key", "weight": "weight_percent"}
_BENEFICIARY_ALIASES = {"currentAge": "current_age", "age": "current_age"}
_MODIFIER_ALIASES = {"conservativePercent": "conservative_percent", "optimisticPercent": "optimistic_percent"}


def _rename(d: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    out = dict(d or {})
    for alias, canonical in aliases.items():
        if canonical not in out and alias in out:
            out[canonical] = out.pop(alias)
    return out


def normalize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    p = _rename(payload, _TOP_ALIASES)

    # goal fields may be flattened at top level
    goal = _rename(p.get("goal") or {}, _GOAL_ALIASES)
    flat = _rename({k: p.pop(k) for k in list(p) if k in _GOAL_ALIASES or k in _GOAL_ALIASES.values()}, _GOAL_ALIASES)
    for k, v in flat.items():
        goal.setdefault(k, v)
    goal.setdefault("target_amount", SETTINGS.default_target_amount)
    goal.setdefault("target_age", SETTINGS.default_target_age)
    p["goal"] = goal

    # allocation may be a {key: weight} mapping
    alloc = p.get("allocation") or []
    if isinstance(alloc, dict):
        alloc = [{"asset_key": k, "weight_percent": v} for k, v in alloc.items()]
    p["allocation"] = [_rename(e, _ENTRY_ALIASES) for e in alloc]

    if "beneficiaries" not in p:
        p["beneficiaries"] = [{"id": i, "current_age": a} for i, a in enumerate(SETTINGS.default_beneficiary_ages, start=1)]
    p["beneficiaries"] = [_rename(b, _BENEFICIARY_ALIASES) for b in p["beneficiaries"]]

    mods = _rename(p.get("modifiers") or {}, _MODIFIER_ALIASES)
    mods.setdefault("conservative_percent", SETTINGS.conservative_percent)
    mods.setdefault("optimistic_percent", SETTINGS.optimistic_percent)
    p["modifiers"] = mods

    p.setdefault("currency", SETTINGS.currency)
    return p


def load_configured_catalog() -> AssetCatalog:
    try:
        return load_catalog(SETTINGS.catalog_path)
    except FileNotFoundError:
        logger.warning("Catalog %s not found; using built-in reference catalog", SETTINGS.catalog_path)
        return default_catalog()


def tool_compute_projection(payload: Dict[str, Any], catalog: Optional[AssetCatalog] = None) -> Dict[str, Any]:
    req = ProjectionRequest(**normalize_payload(payload))
    out = build_projection_report(req, catalog if catalog is not None else load_configured_catalog())
    return out.model_dump(mode="json")
