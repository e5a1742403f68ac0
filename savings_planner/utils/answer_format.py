from __future__ import annotations

from typing import Dict, List, Optional

from savings_planner.core.schemas import ProjectionReport, ScenarioKind, SCENARIO_LABELS
from savings_planner.utils.catalog_loader import AssetCatalog
from savings_planner.utils.decimal_math import whole_units

_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(value: float, currency: str = "USD") -> str:
    """Whole currency units with thousands separators, e.g. $75,000."""
    whole = whole_units(value)
    sign = "-" if whole < 0 else ""
    sym = _SYMBOLS.get(currency.upper())
    body = f"{abs(whole):,.0f}"
    if sym:
        return f"{sign}{sym}{body}"
    return f"{sign}{body} {currency.upper()}"


def format_rate_pct(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def render_summary_md(
    report: ProjectionReport,
    *,
    catalog: Optional[AssetCatalog] = None,
    beneficiary_names: Optional[Dict[int, str]] = None,
) -> str:
    cur = report.currency
    names = beneficiary_names or {}
    lines: List[str] = ["## Investment summary"]

    if report.allocation_error:
        lines.append(f"- **{report.allocation_error}**")

    for bid in sorted(report.results):
        res = report.results[bid]
        name = names.get(bid) or f"Beneficiary {bid}"
        lines.append(f"\n### {name} (age {res.current_age})")
        lines.append(f"- Investment period: **{res.horizon_years} years**")
        lines.append(f"- Required monthly investment: **{format_currency(res.required_monthly_contribution, cur)}**")
        for kind in ScenarioKind:
            lines.append(f"- Final balance ({SCENARIO_LABELS[kind]}): {format_currency(res.final_balance(kind), cur)}")

    lines.append("\n### Allocation")
    if report.allocation:
        for e in report.allocation:
            label = e.asset_key or "(unset)"
            if catalog and e.asset_key in catalog:
                label = catalog[e.asset_key].display_name
            lines.append(f"- {label}: {e.weight_percent:g}%")
    else:
        lines.append("- (none)")

    lines.append("\n### Return scenarios")
    for kind in ScenarioKind:
        lines.append(f"- {SCENARIO_LABELS[kind]} return: {format_rate_pct(report.rates.for_kind(kind))}")

    if report.warnings:
        lines.append("\n### Notes")
        lines.extend(f"- {w}" for w in report.warnings)

    return "\n".join(lines)
