from __future__ import annotations

from decimal import Decimal

from savings_planner.core.schemas import BlendedRates, ScenarioKind, ScenarioModifiers
from savings_planner.utils.decimal_math import to_decimal as _d


def derive_scenario_rate(base_rate: float, kind: ScenarioKind, modifiers: ScenarioModifiers) -> float:
    """
    Conservative: base * (1 - conservative%/100). Optimistic: base * (1 + optimistic%/100).

    No clamping: a haircut above 100% produces a negative rate and is passed on as-is.
    """
    base = _d(base_rate)
    if kind == ScenarioKind.CONSERVATIVE:
        return float(base * (Decimal(1) - _d(modifiers.conservative_percent) / Decimal(100)))
    if kind == ScenarioKind.OPTIMISTIC:
        return float(base * (Decimal(1) + _d(modifiers.optimistic_percent) / Decimal(100)))
    return float(base)


def blended_rates(base_rate: float, modifiers: ScenarioModifiers) -> BlendedRates:
    return BlendedRates(
        base=derive_scenario_rate(base_rate, ScenarioKind.BASE, modifiers),
        conservative=derive_scenario_rate(base_rate, ScenarioKind.CONSERVATIVE, modifiers),
        optimistic=derive_scenario_rate(base_rate, ScenarioKind.OPTIMISTIC, modifiers),
    )
