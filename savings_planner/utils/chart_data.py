from __future__ import annotations

import pandas as pd

from savings_planner.core.schemas import ProjectionResult, ScenarioKind, SCENARIO_LABELS


def trajectory_frame(result: ProjectionResult) -> pd.DataFrame:
    """Wide frame: one row per year, one column per scenario label."""
    df = pd.DataFrame({"year": [p.year for p in result.scenarios[ScenarioKind.BASE].trajectory]})
    for kind in ScenarioKind:
        df[SCENARIO_LABELS[kind]] = [p.balance for p in result.scenarios[kind].trajectory]
    return df


def trajectory_long_frame(result: ProjectionResult) -> pd.DataFrame:
    """Long frame (year, scenario, balance) for grouped bar charts."""
    wide = trajectory_frame(result)
    return wide.melt(id_vars="year", var_name="scenario", value_name="balance")
