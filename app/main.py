"""
Streamlit Frontend for Personal Ledger

One page: the running-balance waterfall chart on top, the transaction
table below it, and a sidebar form to add a transaction.

The UI only draws what the flows return:
- Grouping, balances and totals come from LedgerViewFlow
- Saving goes through TransactionEntryFlow and its password check
"""

import asyncio
from datetime import date
from decimal import Decimal

import altair as alt
import streamlit as st
from pydantic import ValidationError

from ledger.aggregation import InvalidModeError, MalformedTransactionError
from ledger.audit import create_correlation_id
from ledger.config import get_settings, validate_all_settings
from ledger.models.transaction import GroupingMode, NewTransaction
from ledger.orchestrator import (
    LedgerView,
    PasswordRejectedError,
    TransactionEntryFlow,
    create_app_components,
)
from ledger.presentation import format_amount, format_money, search_rows
from ledger.services.storage import StorageError


st.set_page_config(
    page_title="Personal Ledger",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

MODE_LABELS = {
    GroupingMode.NONE: "No grouping",
    GroupingMode.DAY: "Day",
    GroupingMode.WEEK: "Week",
    GroupingMode.MONTH: "Month",
    GroupingMode.YEAR: "Year",
}


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
    try:
        return create_app_components(use_storage=True)
    except (StorageError, ValueError) as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_app_components(use_storage=False)


def render_chart(view: LedgerView):
    records = view.chart.to_records()
    if not records:
        st.info("No transactions yet. Add one from the sidebar.")
        return

    chart = (
        alt.Chart(alt.Data(values=records))
        .mark_bar()
        .encode(
            x=alt.X(
                "order:O",
                title="Transaction Date",
                axis=alt.Axis(labelExpr=view.chart.axis_label_expr()),
            ),
            y=alt.Y("start:Q", title="Amount"),
            y2="end:Q",
            color=alt.Color("colour:N", scale=None),
            tooltip=alt.Tooltip("tooltip:N", title="Change"),
        )
        .properties(height=320)
        .interactive()
    )
    st.altair_chart(chart, use_container_width=True)


def render_table(view: LedgerView, currency_symbol: str):
    query = st.text_input(
        "Search",
        placeholder=f"Filter rows; prefix with # for index or {currency_symbol} for amount",
    )
    rows = search_rows(view.rows, query, currency_symbol)

    st.dataframe(
        [
            {
                "#": row.index,
                "Amount": format_amount(row.amount),
                "Description": row.description,
                "Date": row.date.isoformat(),
            }
            for row in rows
        ],
        use_container_width=True,
        hide_index=True,
    )
    st.markdown(f"**Total:** {format_money(view.total, currency_symbol)}")


def render_entry_form(entry_flow: TransactionEntryFlow):
    st.sidebar.markdown("### Add transaction")
    with st.sidebar.form("add_transaction", clear_on_submit=True):
        amount = st.number_input("Amount", value=0.0, step=1.0, format="%.2f")
        description = st.text_input("Description")
        entry_date = st.date_input("Date", value=date.today())
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return

    try:
        new = NewTransaction(
            amount=Decimal(str(amount)),
            description=description,
            date=entry_date,
        )
    except ValidationError as e:
        st.sidebar.error(f"Transaction amount is required and must be a number. {e}")
        return

    try:
        run_async(entry_flow.add_transaction(
            new,
            password=password,
            correlation_id=create_correlation_id(),
        ))
    except PasswordRejectedError:
        st.sidebar.error("The password that you've entered is incorrect. Please try again.")
        return
    except StorageError as e:
        st.sidebar.error(f"Could not save the transaction: {e}")
        return

    st.sidebar.success("Transaction saved.")
    st.rerun()


def render_settings_status():
    status = validate_all_settings()
    for key in ("storage", "app"):
        if not status.get(key, False):
            st.sidebar.error(f"{key} settings: {status.get(f'{key}_error', 'invalid')}")


def main():
    """Main application entry point."""
    view_flow, entry_flow = get_components()
    settings = get_settings().app

    st.sidebar.title("📒 Personal Ledger")
    render_settings_status()

    modes = list(MODE_LABELS)
    mode = st.sidebar.selectbox(
        "Group by",
        modes,
        index=modes.index(settings.default_group_mode),
        format_func=MODE_LABELS.get,
    )
    st.sidebar.markdown("---")
    render_entry_form(entry_flow)

    try:
        view = run_async(view_flow.load_view(
            mode,
            correlation_id=create_correlation_id(),
        ))
    except InvalidModeError as e:
        st.error(str(e))
        st.stop()
    except MalformedTransactionError as e:
        st.error(f"The transaction history contains an invalid record: {e}")
        st.stop()
    except StorageError as e:
        st.error(f"Error loading transactions: {e}")
        st.stop()

    st.title("Personal Ledger")
    st.metric("Balance", format_money(view.closing_balance, view_flow.currency_symbol))
    render_chart(view)
    render_table(view, view_flow.currency_symbol)


if __name__ == "__main__":
    main()
