"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - display_expense_form(on_submit, categories)
 - display_expense_list / monthly report / expenses over time
 - display_manage_expenses(tracker) for edit and delete

Validation lives here, not in the tracker:
 - amount != 0 (negative amounts are allowed for refunds)
 - category must be picked or typed
 - date comes from st.date_input so it is always "YYYY-MM-DD"
"""

import datetime
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, Dict, List

import altair as alt
import pandas as pd
import streamlit as st

from exptrack.models import Expense

PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf"
]


def _trigger_rerun():
    # st.rerun replaced st.experimental_rerun in newer Streamlit releases
    if hasattr(st, "rerun"):
        st.rerun()
    else:
        st.experimental_rerun()


def _color_scale(categories: List[str]) -> alt.Scale:
    """Stable category -> color mapping, cycling the palette when needed."""
    ordered = sorted(categories)
    times = (len(ordered) + len(PALETTE) - 1) // len(PALETTE) or 1
    colors = (PALETTE * times)[: len(ordered)]
    return alt.Scale(domain=ordered, range=colors)


def _expenses_frame(expenses: List[Expense]) -> pd.DataFrame:
    return pd.DataFrame([e.to_dict() for e in expenses], columns=["id", "date", "category", "amount", "note"])


@dataclass
class ExpenseInput:
    """Lightweight container passed to the on_submit callback."""
    date: str  # ISO date string
    category: str
    amount: float
    note: str


def _category_picker(categories: List[str], key: str, current: str = "") -> str:
    """Selectbox of known categories; a typed new category wins over the selection."""
    selected = ""
    if categories:
        index = categories.index(current) if current in categories else 0
        selected = st.selectbox("Category", options=categories, index=index, key=key)
    typed = st.text_input("Or type a new category", key=f"{key}_new")
    # typed text is kept as entered, the tracker does not normalize categories
    return typed if typed.strip() else selected


def display_expense_form(on_submit: Callable[[ExpenseInput], None], categories: List[str]):
    """
    Display the 'Add Expense' form.

    Parameters:
      - on_submit: callback invoked with ExpenseInput when the form validates
      - categories: categories already used, shown in the dropdown
    """
    st.header("Add Expense")
    with st.form(key="expense_form"):
        date_val = st.date_input("Date", value=datetime.date.today())
        category = _category_picker(categories, key="add_category")
        amount = st.number_input("Amount", format="%.2f")
        note = st.text_input("Note (optional)")
        submit_button = st.form_submit_button("Add Expense")

        if submit_button:
            if amount == 0:
                st.error("Amount must not be 0.")
                return
            if not category:
                st.error("Please pick a category or type a new one.")
                return
            on_submit(ExpenseInput(
                date=date_val.isoformat(),
                category=category,
                amount=round(amount, 2),
                note=note.strip(),
            ))
            st.success("Expense added.")


def display_expense_list(expenses: List[Expense]):
    """
    Render expenses as an interactive table and provide an XLSX export button.
    The exported spreadsheet contains columns: id, date, category, amount, note
    """
    st.header("Expense List")
    if not expenses:
        st.write("No expenses recorded.")
        return

    df = _expenses_frame(expenses)
    st.dataframe(df.style.format({"amount": "{:.2f}"}), use_container_width=True)
    st.markdown(f"**Total: {df['amount'].sum():.2f}**")

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="expenses")
        totals = df.groupby("category", sort=False)["amount"].sum().reset_index()
        totals.to_excel(writer, index=False, sheet_name="totals_by_category")
    buffer.seek(0)

    st.download_button(
        label="Download as XLSX",
        data=buffer.getvalue(),
        file_name="expenses.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


def display_monthly_report(year_month: str, totals: Dict[str, float], month_total: float):
    """Show per-category totals for one month with a pie chart of the shares."""
    st.header(f"Totals per Category ({year_month})")
    if not totals:
        st.write(f"No data for {year_month}.")
        return

    st.write(f"Total: {month_total:.2f}")
    rows = []
    for cat, amt in totals.items():
        pct = (amt / month_total * 100) if month_total > 0 else 0.0
        st.write(f"  {cat or '(no category)'}: {amt:.2f} ({pct:.1f}%)")
        rows.append({"category": cat, "amount": amt, "percent": pct})

    df = pd.DataFrame(rows)
    # arcs need positive values; refunds can make a category net negative
    df = df[df["amount"] > 0]
    if df.empty:
        st.info("No positive amounts to chart.")
        return

    pie = alt.Chart(df).mark_arc(innerRadius=50).encode(
        theta=alt.Theta(field="amount", type="quantitative"),
        color=alt.Color(field="category", type="nominal", scale=_color_scale(list(df["category"])),
                        legend=alt.Legend(title="Category")),
        tooltip=[
            alt.Tooltip("category:N", title="Category"),
            alt.Tooltip("amount:Q", title="Amount", format=".2f"),
            alt.Tooltip("percent:Q", title="Share", format=".1f"),
        ],
    ).properties(title=f"Category share ({year_month})")
    st.altair_chart(pie, use_container_width=True)


def display_expenses_over_time(expenses: List[Expense]):
    """Show stacked monthly bars of expenses by category."""
    st.header("Expenses over time")
    rows = [{"month": e.month, "category": e.category, "amount": e.amount} for e in expenses if e.month]
    if not rows:
        st.info("No dated expenses to chart.")
        return

    df = pd.DataFrame(rows)
    # month prefixes are plain text; anything that is not a real YYYY-MM drops out here
    df["month"] = pd.to_datetime(df["month"], format="%Y-%m", errors="coerce")
    df = df.dropna(subset=["month"])
    if df.empty:
        st.info("No dated expenses to chart.")
        return
    agg = df.groupby(["month", "category"])["amount"].sum().reset_index()

    chart = alt.Chart(agg).mark_bar().encode(
        x=alt.X("month:T", title="Month", axis=alt.Axis(format="%Y-%m", labelAngle=-45)),
        y=alt.Y("amount:Q", title="Amount"),
        color=alt.Color("category:N", scale=_color_scale(list(agg["category"].unique())),
                        legend=alt.Legend(title="Category")),
        tooltip=[
            alt.Tooltip("month:T", title="Month", format="%Y-%m"),
            alt.Tooltip("category:N", title="Category"),
            alt.Tooltip("amount:Q", title="Amount", format=".2f"),
        ],
    ).properties(width="container", height=300)
    st.altair_chart(chart, use_container_width=True)


def display_manage_expenses(tracker):
    """
    UI to select, edit and delete an existing expense.
    Expects an exptrack.tracker.ExpenseTracker.
    """
    st.header("Edit / Delete Expense")
    exs = tracker.list_all()
    if not exs:
        st.info("No expenses recorded.")
        return

    options = {f"#{e.id} {e.category} {e.amount:.2f} {e.date}": e.id for e in exs}
    sel_label = st.selectbox("Select expense", options=list(options.keys()))
    expense = tracker.get(options[sel_label])
    if expense is None:
        st.error("Selected expense not found.")
        return

    categories = sorted({e.category for e in exs})
    with st.form(key=f"edit_expense_{expense.id}"):
        try:
            date_prefill = datetime.date.fromisoformat(expense.date)
        except ValueError:
            # stored dates are free text; fall back to today for the picker
            date_prefill = datetime.date.today()
        date_selected = st.date_input("Date", value=date_prefill)
        category = _category_picker(categories, key=f"edit_category_{expense.id}", current=expense.category)
        amount = st.number_input("Amount", format="%.2f", value=float(expense.amount))
        note = st.text_input("Note", value=expense.note)
        save_btn = st.form_submit_button("Save changes")

        if save_btn:
            if amount == 0:
                st.error("Amount must not be 0.")
            elif not category:
                st.error("Please pick a category or type a new one.")
            elif tracker.edit_expense(expense.id, date_selected.isoformat(), category, round(amount, 2), note.strip()):
                st.success("Expense updated.")
                _trigger_rerun()
            else:
                st.error("Failed to update expense.")

    st.markdown("---")
    st.write("Delete this expense")
    delete_confirm = st.checkbox("I confirm I want to delete this expense")
    if st.button("Delete expense") and delete_confirm:
        if tracker.remove_expense(expense.id):
            st.success("Expense deleted.")
            _trigger_rerun()
        else:
            st.error("Failed to delete expense. Check the server logs for details.")
