"""
Streamlit Frontend for Kiwi Ledger

A single page shared by the household:
1. Who has paid how much, and their share of the total
2. Every transaction, newest first
3. A form to add a new entry
4. A split view that shows fractional shares of one entry

DESIGN PRINCIPLES:
1. A broken row in the sheet never hides the rest of the ledger
2. Sheet errors are shown, not swallowed
3. Nothing is written without pressing "Add Entry"
"""

import asyncio
from datetime import date

import streamlit as st
from pydantic import ValidationError

from kiwi_ledger.config import get_settings, validate_all_settings
from kiwi_ledger.display import (
    format_currency,
    format_fraction,
    format_ledger_date,
    format_percentage,
)
from kiwi_ledger.orchestrator import LedgerFlow, LedgerView, create_app_components
from kiwi_ledger.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Kiwi Ledger",
    page_icon="🥝",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components(use_storage=True)


def main():
    """Main application entry point."""
    ledger_flow, _ = get_components()
    settings = get_settings()

    st.title(f"🥝 {settings.app.app_title}")

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    view = LedgerView()
    error = None
    try:
        view = run_async(ledger_flow.load_ledger())
    except StorageError as e:
        error = str(e)

    symbol = settings.ledger.currency_symbol

    if view.is_empty:
        st.info("No ledger data found.")
    else:
        render_summary(view, symbol)
        render_transactions(view, symbol)
        render_split(ledger_flow, view, symbol)

    if error:
        st.error(f"An unexpected error occurred: {error}")
        render_settings_status()

    if view.errors:
        with st.expander(f"⚠️ {len(view.errors)} rows in the sheet could not be read"):
            for row_error in view.errors:
                st.markdown(f"- {row_error.describe()}")

    st.markdown("---")
    render_add_entry_form(ledger_flow)


def render_settings_status():
    """Show which settings sections loaded, when the sheet can't be read."""
    status = validate_all_settings()

    sections = [
        ("Google Sheets (Storage)", "google_sheets"),
        ("Ledger", "ledger"),
        ("App", "app"),
    ]

    with st.expander("⚙️ Configuration status"):
        for name, key in sections:
            if status.get(key, False):
                st.success(f"✅ {name} - Configured")
            else:
                problem = status.get(f"{key}_error", "Not configured")
                st.error(f"❌ {name} - {problem}")

        st.markdown(
            "Set `GOOGLE_SHEETS_CREDENTIALS_PATH` and `GOOGLE_SHEETS_SPREADSHEET_ID` "
            "in the environment or in a `.env` file."
        )


def render_summary(view: LedgerView, symbol: str):
    """Render the per-person totals table."""
    st.table([
        {
            "Person": participant.name,
            "Amount": format_currency(participant.total, symbol),
            "Percentage": format_percentage(participant.percentage),
        }
        for participant in view.summary.participants
    ])


def render_transactions(view: LedgerView, symbol: str):
    """Render every valid entry, newest first, and the total paid."""
    st.dataframe(
        [
            {
                "Date": format_ledger_date(entry.date),
                "Description": entry.notes,
                "Who": entry.who,
                "Amount": entry.amount,
            }
            for entry in view.entries
        ],
        hide_index=True,
        width="stretch",
    )

    st.subheader("Total Paid")
    st.markdown(f"## {format_currency(view.summary.grand_total, symbol)}")


def render_split(ledger_flow: LedgerFlow, view: LedgerView, symbol: str):
    """Show fractional shares of one selected entry."""
    with st.expander("➗ Split an entry"):
        index = st.selectbox(
            "Entry",
            options=range(len(view.entries)),
            format_func=lambda i: (
                f"{format_ledger_date(view.entries[i].date)} · "
                f"{view.entries[i].notes or 'No description'} · "
                f"{view.entries[i].amount}"
            ),
        )
        if index is None:
            return

        entry = view.entries[index]
        st.markdown(f"**{entry.notes or 'No description'}** paid by {entry.who}")
        columns = st.columns(len(ledger_flow.split_fractions) or 1)
        for column, share in zip(columns, ledger_flow.split(entry)):
            column.metric(
                label=format_fraction(share.fraction),
                value=format_currency(share.amount, symbol),
            )


def render_add_entry_form(ledger_flow: LedgerFlow):
    """Render the add-entry form and append on submit."""
    st.subheader("➕ Add New Entry")

    with st.form("add_entry", clear_on_submit=True):
        entry_date = st.date_input("Date", value=date.today())
        amount = st.text_input("Amount", placeholder="$0.00")
        who = st.selectbox("Who", options=ledger_flow.roster)
        notes = st.text_input("Notes", placeholder="What was it for?")

        submitted = st.form_submit_button("Add Entry", type="primary")

    if not submitted:
        return

    try:
        entry = run_async(
            ledger_flow.add_entry(
                entry_date=entry_date,
                amount=amount,
                who=who,
                notes=notes,
            )
        )
    except ValidationError:
        st.error("Please enter an amount and choose who paid.")
        return
    except StorageError as e:
        st.error(f"Failed to add ledger entry: {e}")
        return

    st.session_state.flash = (
        f"Added {entry.amount} for {entry.who} on {format_ledger_date(entry.date)}"
    )
    st.rerun()


if __name__ == "__main__":
    main()
