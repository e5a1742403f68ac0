from __future__ import annotations

from savings_planner.tools.projection_tools import tool_compute_projection
from savings_planner.utils.catalog_loader import default_catalog

def main():
    payload = {
        "goal": {"targetAmount": 75000, "targetAge": 17},
        "allocation": {"growth": 75, "conservative_growth": 15, "small_cap": 10},
        "beneficiaries": [{"id": 1, "currentAge": 5}, {"id": 2, "currentAge": 3}],
        "modifiers": {"conservativePercent": 25, "optimisticPercent": 10},
    }
    out = tool_compute_projection(payload, catalog=default_catalog())
    rates = out["rates"]
    print("Blended base:", rates["base"])
    print("Conservative:", rates["conservative"])
    print("Optimistic:", rates["optimistic"])
    for bid, res in out["results"].items():
        base = res["scenarios"]["base"]
        print(f"Beneficiary {bid}: {res['horizon_years']}y, monthly {base['required_monthly_contribution']:.2f}")
        for kind, sc in res["scenarios"].items():
            print("  ", kind, sc["trajectory"][-1]["balance"])

if __name__ == "__main__":
    main()
