from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from savings_planner.core.errors import ALLOCATION_SUM_MESSAGE
from savings_planner.core.schemas import AllocationEntry
from savings_planner.utils.catalog_loader import AssetCatalog, resolve_return
from savings_planner.utils.decimal_math import to_decimal as _d

# Unresolved or unset asset keys contribute this rate to the blend.
UNRESOLVED_RETURN = 0.0


def total_weight(entries: Sequence[AllocationEntry]) -> float:
    return float(sum(e.weight_percent for e in entries))


def is_fully_allocated(entries: Sequence[AllocationEntry]) -> bool:
    # Exact equality: 99.999 and 100.001 both fail.
    return total_weight(entries) == 100


def allocation_error(entries: Sequence[AllocationEntry]) -> Optional[str]:
    """Validation sentinel recomputed on every allocation change: message or None."""
    if not is_fully_allocated(entries):
        return ALLOCATION_SUM_MESSAGE
    return None


def unresolved_keys(entries: Sequence[AllocationEntry], catalog: AssetCatalog) -> List[str]:
    out: List[str] = []
    for e in entries:
        if e.weight_percent > 0 and resolve_return(catalog, e.asset_key) is None:
            out.append(e.asset_key or "")
    return out


def blend(entries: Sequence[AllocationEntry], catalog: AssetCatalog) -> float:
    """
    Weighted average annual return of the allocation.

    Weights are not re-validated here; callers gate on is_fully_allocated().
    Entries whose key does not resolve contribute UNRESOLVED_RETURN.
    """
    total = Decimal(0)
    for e in entries:
        rate = resolve_return(catalog, e.asset_key)
        if rate is None:
            rate = UNRESOLVED_RETURN
        total += _d(rate) * (_d(e.weight_percent) / Decimal(100))
    return float(total)
