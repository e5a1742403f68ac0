import pytest

from savings_planner.core.errors import AllocationSumError, DegenerateRate, InvalidHorizon
from savings_planner.core.schemas import (
    AllocationEntry, Beneficiary, Goal, ProjectionRequest, ScenarioKind, ScenarioModifiers,
)
from savings_planner.utils.catalog_loader import default_catalog
from savings_planner.utils.logging import beneficiary_var, reset_beneficiary, set_beneficiary
from savings_planner.utils.projection_engine import (
    build_projection_report, compute_all, project_growth, required_monthly_contribution,
)

BASE_RATE = 0.121955
MODS = ScenarioModifiers(conservative_percent=25, optimistic_percent=10)


def _formula(target, years, rate):
    mr = rate / 12
    return target * mr / ((1 + mr) ** (years * 12) - 1)


def test_required_contribution_matches_annuity_formula():
    out = required_monthly_contribution(75000, 12, BASE_RATE)
    assert out == pytest.approx(_formula(75000, 12, BASE_RATE), rel=1e-9)


def test_contribution_decreases_as_rate_rises():
    vals = [required_monthly_contribution(75000, 12, r) for r in (0.01, 0.04, 0.08, 0.12, 0.2)]
    assert all(a > b for a, b in zip(vals, vals[1:]))


def test_zero_rate_is_linear():
    assert required_monthly_contribution(72000, 10, 0.0) == pytest.approx(600.0)
    traj = project_growth(600.0, 10, 0.0)
    assert traj[5].balance == 36000
    assert traj[-1].balance == 72000


def test_non_positive_horizon_rejected():
    with pytest.raises(InvalidHorizon):
        required_monthly_contribution(1000, 0, 0.1)
    with pytest.raises(InvalidHorizon):
        required_monthly_contribution(1000, -2, 0.1)


def test_degenerate_rate_rejected():
    with pytest.raises(DegenerateRate):
        required_monthly_contribution(1000, 5, -12.0)
    with pytest.raises(DegenerateRate):
        project_growth(100.0, 5, -15.0)


def test_trajectory_shape():
    for h in range(0, 6):
        traj = project_growth(250.0, h, 0.08)
        assert len(traj) == h + 1
        assert [p.year for p in traj] == list(range(h + 1))
        assert (traj[0].year, traj[0].balance) == (0, 0)


def test_trajectory_balances_are_whole_units():
    traj = project_growth(333.33, 4, 0.07)
    assert all(p.balance == int(p.balance) for p in traj)
    assert traj[1].balance < traj[2].balance < traj[3].balance < traj[4].balance


def test_round_trip_reaches_target():
    monthly = required_monthly_contribution(75000, 12, BASE_RATE)
    traj = project_growth(monthly, 12, BASE_RATE)
    assert traj[-1].balance == pytest.approx(75000, abs=1)


def test_compute_all_uses_base_contribution_for_every_scenario():
    goal = Goal(target_amount=75000, target_age=17)
    bens = [Beneficiary(id=1, current_age=5), Beneficiary(id=2, current_age=3)]
    out = compute_all(bens, goal, BASE_RATE, MODS)

    assert set(out) == {1, 2}
    assert out[1].horizon_years == 12
    assert out[2].horizon_years == 14

    for res in out.values():
        monthly = {res.scenarios[k].required_monthly_contribution for k in ScenarioKind}
        assert len(monthly) == 1
        assert res.final_balance(ScenarioKind.BASE) == pytest.approx(75000, abs=1)

        base = res.scenarios[ScenarioKind.BASE].trajectory
        cons = res.scenarios[ScenarioKind.CONSERVATIVE].trajectory
        opt = res.scenarios[ScenarioKind.OPTIMISTIC].trajectory
        for b, c, o in zip(base, cons, opt):
            assert c.balance <= b.balance <= o.balance

    # longer horizon needs less per month
    assert out[2].required_monthly_contribution < out[1].required_monthly_contribution


def test_compute_all_is_idempotent():
    goal = Goal(target_amount=50000, target_age=18)
    bens = [Beneficiary(id=7, current_age=2)]
    a = compute_all(bens, goal, 0.09, MODS)
    b = compute_all(bens, goal, 0.09, MODS)
    assert a[7].model_dump() == b[7].model_dump()


def test_compute_all_reports_every_bad_horizon_and_computes_nothing():
    goal = Goal(target_amount=10000, target_age=10)
    bens = [Beneficiary(id=1, current_age=4), Beneficiary(id=2, current_age=10), Beneficiary(id=3, current_age=12)]
    with pytest.raises(InvalidHorizon) as ei:
        compute_all(bens, goal, 0.08, MODS)
    assert ei.value.beneficiary_ids == [2, 3]
    env = ei.value.to_envelope()
    assert env.code == "INVALID_HORIZON"
    assert env.details["beneficiaries"][1] == {"id": 3, "horizon_years": -2}


def _request(allocation):
    return ProjectionRequest(
        goal=Goal(target_amount=75000, target_age=17),
        allocation=allocation,
        beneficiaries=[Beneficiary(id=1, current_age=5), Beneficiary(id=2, current_age=3)],
        modifiers=MODS,
    )


def test_report_for_reference_plan():
    req = _request([
        AllocationEntry(asset_key="growth", weight_percent=75),
        AllocationEntry(asset_key="conservative_growth", weight_percent=15),
        AllocationEntry(asset_key="small_cap", weight_percent=10),
    ])
    rep = build_projection_report(req, default_catalog())
    assert rep.allocation_error is None
    assert rep.rates.base == pytest.approx(BASE_RATE)
    assert len(rep.results) == 2
    assert rep.warnings == []


def test_report_blocks_unbalanced_allocation():
    req = _request([AllocationEntry(asset_key="growth", weight_percent=90)])
    with pytest.raises(AllocationSumError) as ei:
        build_projection_report(req, default_catalog())
    assert ei.value.total_percent == 90
    assert ei.value.to_envelope().code == "ALLOCATION_SUM"

    rep = build_projection_report(req, default_catalog(), raise_on_invalid=False)
    assert rep.allocation_error == "Portfolio allocations must sum to 100%"
    assert rep.results == {}


def test_report_flags_unknown_asset():
    req = _request([
        AllocationEntry(asset_key="growth", weight_percent=80),
        AllocationEntry(asset_key="crypto", weight_percent=20),
    ])
    rep = build_projection_report(req, default_catalog())
    assert rep.rates.base == pytest.approx(0.1293 * 0.8)
    assert rep.data_quality.get("unresolved_asset:crypto") == "true"
    assert any("crypto" in w for w in rep.warnings)


def test_rate_below_working_precision_behaves_like_zero():
    assert required_monthly_contribution(72000, 10, 1e-30) == pytest.approx(600.0)
    traj = project_growth(600.0, 10, 1e-30)
    assert traj[-1].balance == 72000


def test_compute_all_restores_caller_log_context():
    token = set_beneficiary(42)
    try:
        compute_all([Beneficiary(id=1, current_age=5)], Goal(target_amount=1000, target_age=8), 0.05, MODS)
        assert beneficiary_var.get() == "42"
    finally:
        reset_beneficiary(token)
    assert beneficiary_var.get() == "-"
