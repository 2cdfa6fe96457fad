"""
Streamlit Frontend for Split Calculator

Enter a total, pick a split ratio, and see each share both exactly and
rounded to the cent, with a check that the rounded shares still add up.

The "Manage Split Ratios" page edits a working copy of the saved ratios.
Nothing is saved until the user presses Save.
"""

import streamlit as st

from split_calculator.config import get_settings, validate_all_settings
from split_calculator.engine import format_components
from split_calculator.errors import SplitError
from split_calculator.orchestrator import CalculatorFlow, create_app_components
from split_calculator.registry import SplitEditor


# Page configuration
st.set_page_config(
    page_title=get_settings().app.page_title,
    page_icon="🧮",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


def get_flow() -> CalculatorFlow:
    """Get or create this session's calculator flow."""
    if "flow" not in st.session_state:
        flow, _, _ = create_app_components(use_storage=True)
        st.session_state.flow = flow
    return st.session_state.flow


def get_editor(flow: CalculatorFlow) -> SplitEditor:
    """Get this session's editing buffer, opening one if needed."""
    if "editor" not in st.session_state:
        st.session_state.editor = flow.open_editor()
    return st.session_state.editor


def close_editor() -> None:
    st.session_state.pop("editor", None)


def add_new_split(editor: SplitEditor) -> None:
    """Add the split typed into the form, then clear the form."""
    try:
        editor.add(st.session_state.new_split_name, st.session_state.new_split_values)
    except SplitError as e:
        st.session_state.add_error = e.message
        return
    st.session_state.new_split_name = ""
    st.session_state.new_split_values = ""


def main():
    """Main application entry point."""
    flow = get_flow()

    st.sidebar.title("🧮 Split Calculator")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🧮 Calculator", "⚙️ Manage Split Ratios", "🔧 Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Pick a split ratio
        2. Enter the total
        3. Check that the rounded shares add up
        """
    )

    if flow.registry.storage_error is not None:
        st.sidebar.warning(
            "Saved ratios could not be read or written. "
            "Changes will last for this session only."
        )

    if page == "🧮 Calculator":
        render_calculator_page(flow)
    elif page == "⚙️ Manage Split Ratios":
        render_manager_page(flow)
    elif page == "🔧 Settings":
        render_settings_page()


def render_calculator_page(flow: CalculatorFlow):
    """Render the calculator page."""
    st.title("🧮 Split Calculator")

    names = flow.registry.names
    selected = flow.selected
    choice = st.radio(
        "Split ratio",
        options=names,
        index=names.index(selected.name),
        horizontal=True,
    )
    flow.select(choice)

    total_text = st.text_input(
        "Total entered ($)",
        value=st.session_state.get("total_text", ""),
        placeholder="Dollar amount (with dot and two decimal places)",
    )

    try:
        result = flow.calculate(total_text)
    except SplitError as e:
        st.error(e.message)
        return
    st.session_state.total_text = total_text

    st.markdown("---")
    rows = [
        {
            "Percent": f"{share.percent:g}%",
            "Exact": f"{share.exact:.6f}",
            "Rounded": share.rounded,
        }
        for share in result.shares
    ]
    st.table(rows)

    reconciliation = result.reconciliation
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Exact total", f"{result.exact_total:.6f}")
    with col2:
        st.metric("Rounded total", f"{result.rounded_total:.2f}")

    if reconciliation.matches:
        st.markdown(f"""
        <div class="success-box">
            <h4>✅ Numbers match</h4>
            <p>The rounded shares add up to {result.rounded_total:,.2f}.</p>
        </div>
        """, unsafe_allow_html=True)
    elif reconciliation.show_difference:
        box = "warning-box" if reconciliation.difference_is_shortfall else "error-box"
        used_line = ""
        if reconciliation.totals_differ_at_cents:
            used_line = (
                f"<p><strong>{result.rounded_total:.2f}</strong> of the "
                f"{result.exact_total:.2f} original total was used</p>"
            )
        st.markdown(f"""
        <div class="{box}">
            <h4>⚠️ Difference: {reconciliation.difference_display}
            ({reconciliation.difference_detail})</h4>
            {used_line}
        </div>
        """, unsafe_allow_html=True)


def render_manager_page(flow: CalculatorFlow):
    """Render the split ratio management page."""
    st.title("⚙️ Manage Split Ratios")
    st.caption(
        "Separate values with commas, spaces, or hyphens "
        '(e.g. "50, 30, 20" or "50 30 20" or "50-30-20"). '
        "Values must be positive and sum to exactly 100%."
    )

    editor = get_editor(flow)

    st.subheader("Current Split Ratios")
    if editor.is_empty:
        st.info("No split ratios defined. Add one below.")

    for index, (entry, validation) in enumerate(editor.validations()):
        with st.container(border=True):
            col1, col2 = st.columns([5, 1])
            with col1:
                text = st.text_input(
                    entry.name,
                    value=format_components(entry.components),
                    key=f"edit-{index}-{entry.name}",
                )
                if editor.is_changed(entry.name, text):
                    editor.set_components(entry.name, text)
                    st.rerun()
            with col2:
                st.write("")
                if st.button("🗑️", key=f"delete-{index}-{entry.name}", help="Delete this split"):
                    editor.delete(entry.name)
                    st.rerun()

            status = "✓ Valid" if validation.is_valid else "✗ Invalid"
            line = f"Current sum: **{validation.sum:g}%**"
            if not validation.is_complete:
                line += f" | Remaining: **{validation.remaining:g}%**"
            st.markdown(f"{line} · {status}")

    st.markdown("---")
    st.subheader("Add New Split Ratio")
    new_name = st.text_input(
        "Split Name",
        key="new_split_name",
        placeholder="e.g., 60-30-10 or Custom Split",
    )
    new_values = st.text_input(
        "Percentages",
        key="new_split_values",
        placeholder="e.g., 60, 30, 10",
    )
    if new_values:
        preview = editor.preview(new_values)
        status = "✓ Valid" if preview.is_valid else "✗ Invalid"
        st.markdown(
            f"Preview sum: **{preview.sum:g}%** | "
            f"Remaining: **{preview.remaining:g}%** · {status}"
        )
    st.button(
        "➕ Add",
        disabled=not new_name.strip() or not new_values.strip(),
        on_click=add_new_split,
        args=(editor,),
    )
    if "add_error" in st.session_state:
        st.error(st.session_state.pop("add_error"))

    st.markdown("---")
    col1, col2, col3 = st.columns(3)

    with col1:
        if st.button("💾 Save", type="primary"):
            try:
                flow.save_editor(editor)
                close_editor()
                st.success("Split ratios saved.")
            except SplitError as e:
                st.markdown(f"""
                <div class="error-box">
                    <p style="white-space: pre-line">{e.message}</p>
                </div>
                """, unsafe_allow_html=True)

    with col2:
        if st.button("↩️ Cancel"):
            editor.discard()
            close_editor()
            st.rerun()

    with col3:
        confirm = st.checkbox("I understand reset cannot be undone")
        if st.button("♻️ Reset", disabled=not confirm):
            flow.reset_splits()
            close_editor()
            st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("🔧 Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()

    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("storage"):
        storage = get_settings().storage
        st.markdown(f"**Backend:** `{storage.backend}`")
        if storage.backend == "json_file":
            st.markdown(f"**File:** `{storage.path}`")

    st.markdown("---")
    st.markdown(
        "Settings are read from environment variables and a `.env` file. "
        "Use `SPLITCALC_STORAGE_BACKEND`, `SPLITCALC_STORAGE_PATH` and "
        "`LOG_LEVEL` to change them."
    )


if __name__ == "__main__":
    main()
