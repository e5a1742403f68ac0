import pytest

from savings_planner.core.schemas import ScenarioKind, ScenarioModifiers
from savings_planner.utils.scenarios import blended_rates, derive_scenario_rate


def test_conservative_and_optimistic_rates():
    mods = ScenarioModifiers(conservative_percent=25, optimistic_percent=10)
    assert derive_scenario_rate(0.12, ScenarioKind.CONSERVATIVE, mods) == pytest.approx(0.09)
    assert derive_scenario_rate(0.12, ScenarioKind.OPTIMISTIC, mods) == pytest.approx(0.132)
    assert derive_scenario_rate(0.12, ScenarioKind.BASE, mods) == pytest.approx(0.12)


def test_haircut_over_100_passes_negative_rate_through():
    mods = ScenarioModifiers.model_construct(conservative_percent=150.0, optimistic_percent=0.0)
    assert derive_scenario_rate(0.10, ScenarioKind.CONSERVATIVE, mods) == pytest.approx(-0.05)


def test_modifier_bounds_validated():
    with pytest.raises(ValueError):
        ScenarioModifiers(conservative_percent=101, optimistic_percent=0)
    with pytest.raises(ValueError):
        ScenarioModifiers(conservative_percent=10, optimistic_percent=-1)


def test_blended_rates_summary():
    rates = blended_rates(0.121955, ScenarioModifiers(conservative_percent=25, optimistic_percent=10))
    assert rates.base == pytest.approx(0.121955)
    assert rates.conservative == pytest.approx(0.121955 * 0.75)
    assert rates.optimistic == pytest.approx(0.121955 * 1.10)
    assert rates.for_kind(ScenarioKind.OPTIMISTIC) == rates.optimistic
