import streamlit as st
import uuid
from savings_planner.core.config import SETTINGS
from savings_planner.core.schemas import AllocationEntry, ScenarioModifiers
from savings_planner.utils.beneficiaries import default_beneficiaries
from savings_planner.utils.logging import setup_logging, set_log_context
from savings_planner.pages import plan

# Setup logging
setup_logging(SETTINGS.log_level)

st.set_page_config(page_title="Savings Goal Planner", layout="wide")

# Session initialization
def _init_session() -> None:
    st.session_state.setdefault("session_id", str(uuid.uuid4()))
    st.session_state.setdefault("target_amount", float(SETTINGS.default_target_amount))
    st.session_state.setdefault("target_age", int(SETTINGS.default_target_age))
    st.session_state.setdefault("beneficiaries", default_beneficiaries(SETTINGS.default_beneficiary_ages))
    st.session_state.setdefault(
        "allocation",
        [
            AllocationEntry(asset_key="growth", weight_percent=75),
            AllocationEntry(asset_key="conservative_growth", weight_percent=15),
            AllocationEntry(asset_key="small_cap", weight_percent=10),
        ],
    )
    st.session_state.setdefault(
        "modifiers",
        ScenarioModifiers(
            conservative_percent=SETTINGS.conservative_percent,
            optimistic_percent=SETTINGS.optimistic_percent,
        ),
    )

_init_session()
set_log_context(request_id=str(uuid.uuid4()), session_id=st.session_state["session_id"])

# Sidebar for scenario settings
with st.sidebar:
    st.subheader("Scenarios")
    mods: ScenarioModifiers = st.session_state["modifiers"]
    conservative = st.number_input("Conservative haircut (%)", min_value=0.0, max_value=100.0, value=float(mods.conservative_percent), step=5.0)
    optimistic = st.number_input("Optimistic uplift (%)", min_value=0.0, value=float(mods.optimistic_percent), step=5.0)
    st.session_state["modifiers"] = ScenarioModifiers(conservative_percent=conservative, optimistic_percent=optimistic)

    st.divider()
    st.caption(f"Session: {st.session_state['session_id']}")
    st.caption(f"Currency: {SETTINGS.currency}")

# Main UI
st.title("Savings Goal Planner")

plan.render()
