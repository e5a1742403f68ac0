from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from savings_planner.core.errors import AllocationSumError, DegenerateRate, InvalidHorizon
from savings_planner.core.schemas import (
    Beneficiary, Goal, ScenarioModifiers, ScenarioKind,
    ScenarioProjection, ProjectionResult, ProjectionRequest, ProjectionReport, TrajectoryPoint,
)
from savings_planner.utils.allocation import allocation_error, blend, total_weight, unresolved_keys
from savings_planner.utils.catalog_loader import AssetCatalog
from savings_planner.utils.decimal_math import to_decimal as _d, whole_units
from savings_planner.utils.logging import get_logger, reset_beneficiary, set_beneficiary
from savings_planner.utils.scenarios import blended_rates

logger = get_logger("projection_engine")


def _monthly_rate(r_annual) -> Decimal:
    # Nominal annual rate compounded monthly.
    mr = _d(r_annual) / Decimal(12)
    if mr <= Decimal(-1):
        raise DegenerateRate(float(r_annual), "monthly rate must be greater than -100%")
    return mr


def _annuity_factor(mr: Decimal, n_months: int) -> Decimal:
    """Future value of 1 paid at the end of each month for n_months."""
    growth = (Decimal(1) + mr) ** n_months
    # Rates too small to move 1 + mr at working precision compound like a zero rate.
    if mr == 0 or growth == 1:
        return Decimal(n_months)
    return (growth - Decimal(1)) / mr


def required_monthly_contribution(
    target_amount: float,
    horizon_years: int,
    annual_rate: float,
    *,
    beneficiary_id: Optional[int] = None,
) -> float:
    """
    Monthly end-of-period contribution that grows to `target_amount` in `horizon_years`.

    Zero rate degrades to a linear target / months. Non-positive horizons raise InvalidHorizon.
    """
    if horizon_years <= 0:
        raise InvalidHorizon([(beneficiary_id, int(horizon_years))])

    n_months = int(horizon_years) * 12
    factor = _annuity_factor(_monthly_rate(annual_rate), n_months)
    return float(_d(target_amount) / factor)


def project_growth(monthly_contribution: float, horizon_years: int, annual_rate: float) -> List[TrajectoryPoint]:
    """Year-end balances for years 0..horizon_years inclusive, rounded to whole currency units."""
    if horizon_years < 0:
        raise InvalidHorizon([(None, int(horizon_years))])

    mr = _monthly_rate(annual_rate)
    monthly = _d(monthly_contribution)

    points: List[TrajectoryPoint] = []
    for year in range(0, int(horizon_years) + 1):
        if year == 0:
            points.append(TrajectoryPoint(year=0, balance=0.0))
            continue

        bal = monthly * _annuity_factor(mr, year * 12)
        points.append(TrajectoryPoint(year=year, balance=float(whole_units(bal))))
    return points


def compute_all(
    beneficiaries: Sequence[Beneficiary],
    goal: Goal,
    blended_base_rate: float,
    modifiers: ScenarioModifiers,
) -> Dict[int, ProjectionResult]:
    offenders = [
        (b.id, goal.target_age - b.current_age)
        for b in beneficiaries
        if goal.target_age - b.current_age <= 0
    ]
    if offenders:
        raise InvalidHorizon(offenders)

    rates = blended_rates(blended_base_rate, modifiers)
    results: Dict[int, ProjectionResult] = {}

    for b in beneficiaries:
        token = set_beneficiary(b.id)
        try:
            horizon = goal.target_age - b.current_age

            # Solved once at the base rate; every scenario reuses it.
            base_monthly = required_monthly_contribution(
                goal.target_amount, horizon, rates.base, beneficiary_id=b.id
            )
            logger.debug("horizon=%sy base_rate=%.6f monthly=%.2f", horizon, rates.base, base_monthly)

            scenarios: Dict[ScenarioKind, ScenarioProjection] = {}
            for kind in ScenarioKind:
                rate = rates.for_kind(kind)
                scenarios[kind] = ScenarioProjection(
                    kind=kind,
                    annual_rate=rate,
                    required_monthly_contribution=base_monthly,
                    trajectory=project_growth(base_monthly, horizon, rate),
                )

            results[b.id] = ProjectionResult(
                beneficiary_id=b.id,
                current_age=b.current_age,
                horizon_years=horizon,
                scenarios=scenarios,
            )
        finally:
            reset_beneficiary(token)

    return results


def build_projection_report(
    request: ProjectionRequest,
    catalog: AssetCatalog,
    *,
    raise_on_invalid: bool = True,
) -> ProjectionReport:
    """
    Validate the allocation, blend it, and project every beneficiary.

    With raise_on_invalid=False an unbalanced allocation yields a report carrying
    `allocation_error` and no results instead of raising AllocationSumError.
    """
    warnings: List[str] = []
    data_quality: Dict[str, str] = {}

    for key in unresolved_keys(request.allocation, catalog):
        label = key or "(unset)"
        logger.warning("Allocation references unknown asset %s; counted as 0%% return", label)
        warnings.append(f"Unknown asset '{label}' contributes 0% return.")
        data_quality[f"unresolved_asset:{label}"] = "true"

    base_rate = blend(request.allocation, catalog)
    rates = blended_rates(base_rate, request.modifiers)

    err = allocation_error(request.allocation)
    if err:
        if raise_on_invalid:
            raise AllocationSumError(total_weight(request.allocation))
        return ProjectionReport(
            currency=request.currency,
            rates=rates,
            allocation=list(request.allocation),
            allocation_error=err,
            warnings=warnings,
            data_quality=data_quality,
        )

    results = compute_all(request.beneficiaries, request.goal, base_rate, request.modifiers)

    return ProjectionReport(
        currency=request.currency,
        rates=rates,
        allocation=list(request.allocation),
        allocation_error=None,
        results=results,
        warnings=warnings,
        data_quality=data_quality,
    )
