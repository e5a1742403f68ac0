from streamlit.testing.v1 import AppTest


def _allocation_editor_app():
    import streamlit as st
    from savings_planner.core.schemas import AllocationEntry
    from savings_planner.utils.catalog_loader import default_catalog
    from savings_planner.web_app.ui_helpers import _render_allocation_editor

    if "allocation" not in st.session_state:
        st.session_state["allocation"] = [
            AllocationEntry(asset_key="growth", weight_percent=75),
            AllocationEntry(asset_key="conservative_growth", weight_percent=15),
            AllocationEntry(asset_key="small_cap", weight_percent=10),
        ]
    _render_allocation_editor(default_catalog())


def _beneficiary_editor_app():
    import streamlit as st
    from savings_planner.utils.beneficiaries import default_beneficiaries
    from savings_planner.web_app.ui_helpers import _render_beneficiary_editor

    if "beneficiaries" not in st.session_state:
        st.session_state["beneficiaries"] = default_beneficiaries([5, 3])
    _render_beneficiary_editor(st.session_state["beneficiaries"])


def _rows(at):
    return [(e.asset_key, e.weight_percent) for e in at.session_state["allocation"]]


def test_removing_first_allocation_row_keeps_the_others():
    at = AppTest.from_function(_allocation_editor_app)
    at.run()
    assert [s.value for s in at.selectbox] == ["growth", "conservative_growth", "small_cap"]

    at.button(key="alloc_rm_0").click().run()
    assert _rows(at) == [("conservative_growth", 15.0), ("small_cap", 10.0)]
    assert [s.value for s in at.selectbox] == ["conservative_growth", "small_cap"]
    assert [n.value for n in at.number_input] == [15.0, 10.0]

    # a later interaction must not resurrect the removed row
    at.run()
    assert _rows(at) == [("conservative_growth", 15.0), ("small_cap", 10.0)]


def test_adding_allocation_row_is_shown_immediately():
    at = AppTest.from_function(_allocation_editor_app)
    at.run()
    at.button(key="alloc_add").click().run()
    assert len(at.selectbox) == 4
    assert _rows(at)[-1] == (None, 0.0)


def test_beneficiary_add_and_remove_redraw_inputs():
    at = AppTest.from_function(_beneficiary_editor_app)
    at.run()
    assert len(at.number_input) == 2

    at.button(key="benef_add").click().run()
    assert len(at.number_input) == 3
    assert [b.id for b in at.session_state["beneficiaries"]] == [1, 2, 3]

    at.button(key="benef_rm_1").click().run()
    assert len(at.number_input) == 2
    assert [n.value for n in at.number_input] == [3, 0]


def test_last_beneficiary_cannot_be_removed():
    at = AppTest.from_function(_beneficiary_editor_app)
    at.run()
    at.button(key="benef_rm_1").click().run()
    at.button(key="benef_rm_2").click().run()
    assert len(at.number_input) == 1
    assert len(at.warning) == 1
    assert len(at.session_state["beneficiaries"]) == 1
