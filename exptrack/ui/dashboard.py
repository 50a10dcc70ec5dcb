"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (exptrack.ui.components) with the business
logic (exptrack.tracker). The main() function builds the sidebar menu and routes
actions to components and tracker methods.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - All persistence and business rules live in exptrack.tracker.
 - One ExpenseTracker per server process, shared across reruns via st.cache_resource.
"""

import streamlit as st

from exptrack.storage import ExpenseStorage
from exptrack.tracker import ExpenseTracker
from exptrack.ui import components

ALL_MONTHS = "All"


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    return ExpenseTracker(ExpenseStorage())


def _select_month(tracker: ExpenseTracker, label: str, allow_all: bool):
    months = tracker.available_months()
    options = ([ALL_MONTHS] if allow_all else []) + months
    if not options:
        return None
    # default to the most recent month present in the data
    default = 0 if allow_all else len(options) - 1
    return st.selectbox(label, options=options, index=default)


def main():
    """
    Streamlit page: sidebar menu controls which view is shown.
    Actions:
      - Add Expense: show form and persist via tracker.add_expense
      - List Expenses: optional month filter, table and XLSX export
      - Monthly Report: category totals for one month
      - Expenses over time: monthly stacked bars
      - Edit / Delete Expense: edit form and delete button
      - Save: force a write of the current list
    """
    st.title("Expense Tracker Dashboard")
    tracker = get_tracker()
    if tracker.storage.exists():
        st.sidebar.success(f"Data file: {tracker.storage.path}")
    else:
        st.sidebar.warning(f"No data file yet; it will be created at {tracker.storage.path}")
    st.sidebar.caption("Use one running tracker per data file.")

    menu = [
        "Add Expense",
        "List Expenses",
        "Monthly Report",
        "Expenses over time",
        "Edit / Delete Expense",
        "Save",
    ]
    choice = st.sidebar.selectbox("Select an option", menu)

    if choice == "Add Expense":
        def on_submit(exp_input: components.ExpenseInput):
            tracker.add_expense(
                date=exp_input.date,
                category=exp_input.category,
                amount=exp_input.amount,
                note=exp_input.note,
            )

        categories = sorted({e.category for e in tracker.list_all() if e.category})
        components.display_expense_form(on_submit, categories)

    elif choice == "List Expenses":
        month_sel = _select_month(tracker, "Filter month (optional)", allow_all=True)
        if month_sel in (None, ALL_MONTHS):
            expenses = tracker.list_all()
        else:
            expenses = tracker.find_by_month(month_sel)
        components.display_expense_list(expenses)

    elif choice == "Monthly Report":
        month_sel = _select_month(tracker, "Month", allow_all=False)
        if month_sel is None:
            st.info("No expenses recorded yet.")
        else:
            components.display_monthly_report(
                month_sel,
                tracker.total_per_category(month_sel),
                tracker.total_for_month(month_sel),
            )

    elif choice == "Expenses over time":
        components.display_expenses_over_time(tracker.list_all())

    elif choice == "Edit / Delete Expense":
        components.display_manage_expenses(tracker)

    elif choice == "Save":
        if st.button("Save now"):
            if tracker.persist():
                st.success("Saved.")
            else:
                st.error("Failed to save. Check the server logs for details.")


if __name__ == "__main__":
    main()
