from __future__ import annotations
from typing import List

import streamlit as st

from savings_planner.core.errors import LastBeneficiaryError
from savings_planner.core.schemas import AllocationEntry, Beneficiary
from savings_planner.utils.beneficiaries import add_beneficiary, remove_beneficiary, update_age
from savings_planner.utils.catalog_loader import AssetCatalog

SCENARIO_COLORS = {
    "Base Case": "#82ca9d",
    "Conservative": "#ff9999",
    "Optimistic": "#8884d8",
}


def _badge(text: str, kind: str = "info") -> None:
    """Small colored badge using HTML."""
    color = {
        "ok": "#0f9d58",
        "warn": "#f4b400",
        "bad": "#db4437",
        "info": "#4285f4",
    }.get(kind, "#4285f4")
    st.markdown(
        f"""
        <span style="display:inline-block;padding:2px 10px;border-radius:999px;font-size:12px;background:{color};color:white;">
          {text}
        </span>
        """,
        unsafe_allow_html=True,
    )


def _clear_widget_state(*prefixes: str) -> None:
    for k in list(st.session_state.keys()):
        if isinstance(k, str) and k.startswith(prefixes):
            del st.session_state[k]


def _render_allocation_editor(catalog: AssetCatalog) -> None:
    """Edits st.session_state["allocation"]; add/remove reruns with fresh widget state."""
    entries: List[AllocationEntry] = st.session_state["allocation"]
    keys = [""] + list(catalog.keys())
    out: List[AllocationEntry] = []
    changed = False
    for i, e in enumerate(entries):
        c_asset, c_weight, c_rm = st.columns([0.6, 0.3, 0.1])
        with c_asset:
            idx = keys.index(e.asset_key) if e.asset_key in keys else 0
            key = st.selectbox(
                "Asset",
                keys,
                index=idx,
                key=f"alloc_key_{i}",
                format_func=lambda k: catalog[k].display_name if k in catalog else "(select)",
            )
        with c_weight:
            weight = st.number_input("Weight (%)", min_value=0.0, max_value=100.0, value=float(e.weight_percent), step=5.0, key=f"alloc_w_{i}")
        with c_rm:
            if st.button("✕", key=f"alloc_rm_{i}"):
                changed = True
                continue
        out.append(AllocationEntry(asset_key=key or None, weight_percent=weight))

    if st.button("Add asset", key="alloc_add"):
        out.append(AllocationEntry(asset_key=None, weight_percent=0.0))
        changed = True

    st.session_state["allocation"] = out
    if changed:
        # Row widgets are keyed by position; drop them so shifted rows re-read their entries.
        _clear_widget_state("alloc_key_", "alloc_w_")
        st.rerun()


def _render_beneficiary_editor(beneficiaries: List[Beneficiary]) -> None:
    """Mutates the caller-owned beneficiary list."""
    changed = False
    for b in list(beneficiaries):
        c_age, c_rm = st.columns([0.8, 0.2])
        with c_age:
            age = st.number_input(f"Beneficiary {b.id} current age", min_value=0, max_value=99, value=int(b.current_age), step=1, key=f"benef_age_{b.id}")
            if int(age) != b.current_age:
                update_age(beneficiaries, b.id, int(age))
        with c_rm:
            if st.button("Remove", key=f"benef_rm_{b.id}"):
                try:
                    remove_beneficiary(beneficiaries, b.id)
                    st.session_state.pop(f"benef_age_{b.id}", None)
                    changed = True
                except LastBeneficiaryError as e:
                    st.warning(str(e))

    if st.button("Add beneficiary", key="benef_add"):
        add_beneficiary(beneficiaries, current_age=0)
        changed = True

    if changed:
        st.rerun()
