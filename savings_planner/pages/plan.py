import streamlit as st
import plotly.express as px
from pydantic import ValidationError

from savings_planner.core.config import SETTINGS
from savings_planner.core.errors import ProjectionError, validation_envelope
from savings_planner.core.schemas import Goal, ProjectionRequest
from savings_planner.tools.projection_tools import load_configured_catalog
from savings_planner.utils.allocation import allocation_error, total_weight
from savings_planner.utils.answer_format import format_currency, format_rate_pct, render_summary_md
from savings_planner.utils.chart_data import trajectory_long_frame
from savings_planner.utils.projection_engine import build_projection_report
from savings_planner.web_app.ui_helpers import (
    SCENARIO_COLORS, _badge, _render_allocation_editor, _render_beneficiary_editor,
)


def render():
    st.subheader("Savings goal")
    catalog = load_configured_catalog()

    col_l, col_r = st.columns([0.45, 0.55], gap="large")

    with col_l:
        target_amount = st.number_input("Target amount", min_value=1000.0, value=float(st.session_state["target_amount"]), step=1000.0)
        target_age = st.number_input("Target age", min_value=10, max_value=25, value=int(st.session_state["target_age"]), step=1)
        st.session_state["target_amount"] = float(target_amount)
        st.session_state["target_age"] = int(target_age)

        st.divider()
        st.markdown("**Portfolio allocation (%)**")
        _render_allocation_editor(catalog)

        err = allocation_error(st.session_state["allocation"])
        if err:
            st.error(f"{err} (currently {total_weight(st.session_state['allocation']):g}%)")
        else:
            _badge("Allocation OK", "ok")

        st.divider()
        st.markdown("**Beneficiaries**")
        _render_beneficiary_editor(st.session_state["beneficiaries"])

        if st.button("Calculate", type="primary", disabled=bool(err)):
            st.session_state["_show_results"] = True

    with col_r:
        if not st.session_state.get("_show_results"):
            st.info("Set the goal and allocation, then press Calculate.")
            return

        try:
            req = ProjectionRequest(
                goal=Goal(target_amount=st.session_state["target_amount"], target_age=st.session_state["target_age"]),
                allocation=st.session_state["allocation"],
                beneficiaries=st.session_state["beneficiaries"],
                modifiers=st.session_state["modifiers"],
                currency=SETTINGS.currency,
            )
            report = build_projection_report(req, catalog, raise_on_invalid=False)
        except ProjectionError as e:
            st.error(f"Projection failed: {e}")
            return
        except ValidationError as e:
            st.error(f"Invalid input: {validation_envelope(e).message}")
            return

        if report.allocation_error:
            st.warning(report.allocation_error)
            return

        for bid, res in sorted(report.results.items()):
            st.markdown(f"#### Beneficiary {bid} (age {res.current_age}) projections")
            fig = px.bar(
                trajectory_long_frame(res),
                x="year",
                y="balance",
                color="scenario",
                barmode="group",
                color_discrete_map=SCENARIO_COLORS,
            )
            fig.update_layout(yaxis_tickprefix="$" if report.currency == "USD" else "")
            st.plotly_chart(fig, use_container_width=True)
            st.metric("Required monthly investment", format_currency(res.required_monthly_contribution, report.currency))

        st.caption(
            f"Base {format_rate_pct(report.rates.base)} · Conservative {format_rate_pct(report.rates.conservative)} · "
            f"Optimistic {format_rate_pct(report.rates.optimistic)}"
        )
        st.markdown(render_summary_md(report, catalog=catalog))
