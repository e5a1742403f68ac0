from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml

from savings_planner.core.errors import UnresolvedAssetKey
from savings_planner.core.schemas import AssetOption, ValidationReport

AssetCatalog = Dict[str, AssetOption]

REQUIRED_ASSET_FIELDS = ["key", "display_name", "annual_return"]

# Reference three-option catalog, also used when no catalog file is configured.
_DEFAULT_OPTIONS: List[AssetOption] = [
    AssetOption(key="growth", display_name="Growth Portfolio", annual_return=0.1293),
    AssetOption(key="conservative_growth", display_name="Conservative Growth", annual_return=0.0764),
    AssetOption(key="small_cap", display_name="Small Cap", annual_return=0.1465),
]


def default_catalog() -> AssetCatalog:
    return {o.key: o for o in _DEFAULT_OPTIONS}


def _read_rows(catalog_path: str) -> List[dict]:
    p = Path(catalog_path)
    if not p.exists():
        raise FileNotFoundError(f"Asset catalog not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    rows = raw.get("assets") if isinstance(raw, dict) else raw
    if not isinstance(rows, list):
        raise ValueError(f"Asset catalog must contain a list under 'assets': {p}")
    return rows


def load_catalog(catalog_path: str) -> AssetCatalog:
    rows = _read_rows(catalog_path)

    out: AssetCatalog = {}
    for i, r in enumerate(rows):
        missing = [c for c in REQUIRED_ASSET_FIELDS if not isinstance(r, dict) or c not in r]
        if missing:
            raise ValueError(f"Asset catalog entry #{i} missing fields: {missing}")
        opt = AssetOption(**{c: r[c] for c in REQUIRED_ASSET_FIELDS})
        if opt.key in out:
            raise ValueError(f"Duplicate asset key in catalog: {opt.key}")
        out[opt.key] = opt
    return out


def get_option(catalog: AssetCatalog, key: Optional[str]) -> AssetOption:
    """Strict lookup; raises UnresolvedAssetKey for unknown or empty keys."""
    if not key or key not in catalog:
        raise UnresolvedAssetKey(key)
    return catalog[key]


def resolve_return(catalog: AssetCatalog, key: Optional[str]) -> Optional[float]:
    """Annual return for `key`, or None when the key is unset or not in the catalog."""
    if not key:
        return None
    opt = catalog.get(key)
    return None if opt is None else float(opt.annual_return)


def validate_catalog(catalog_path: str) -> ValidationReport:
    report = ValidationReport(ok=True)

    try:
        catalog = load_catalog(catalog_path)
    except Exception as e:
        report.add_error(str(e), location=catalog_path)
        return report.finalize()

    if not catalog:
        report.add_error("Asset catalog is empty.", location=catalog_path)

    for key, opt in catalog.items():
        if not opt.display_name.strip():
            report.add_warning(f"Asset '{key}' has an empty display name.", location=catalog_path)
        if not 0.0 <= opt.annual_return <= 1.0:
            report.add_warning(
                f"Asset '{key}' annual_return {opt.annual_return} is outside [0, 1]; expected a fraction.",
                location=catalog_path,
            )

    return report.finalize()
