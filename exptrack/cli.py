"""
cli.py - interactive console shell

Menu-driven loop over an ExpenseTracker:

    1. List all expenses          5. List by month (YYYY-MM)
    2. Add expense                6. Report: totals per category for month
    3. Remove expense             7. Save
    4. Edit expense               8. Exit

Run with ``exptrack`` (or ``python -m exptrack.cli``), optionally passing
``--data-file PATH``. Input and output are injectable so the loop can be
driven from tests.
"""

import argparse
from typing import Callable, List, Optional

from exptrack.models import Expense, parse_float, parse_int
from exptrack.storage import ExpenseStorage
from exptrack.tracker import ExpenseTracker

MENU = """
=== ExpenseTracker ===
1. List all expenses
2. Add expense
3. Remove expense
4. Edit expense
5. List by month (YYYY-MM)
6. Report: totals per category for month
7. Save
8. Exit"""

TABLE_HEADER = "ID  | Date       | Category   |   Amount | Note"
TABLE_RULE = "----+------------+------------+----------+----------------"


def format_expense(e: Expense) -> str:
    return f"{e.id:>3} | {e.date} | {e.category:<10} | {e.amount:>8.2f} | {e.note}"


class ExpenseShell:
    """Read-command-dispatch loop. EOF on input behaves like the exit command."""

    def __init__(self, tracker: ExpenseTracker,
                 input_fn: Optional[Callable[[str], str]] = None,
                 output: Optional[Callable[[str], None]] = None):
        self.tracker = tracker
        self._input = input_fn or input
        self._out = output or print

    def _prompt(self, prompt: str) -> str:
        return self._input(prompt)

    def _read_float(self, prompt: str) -> Optional[float]:
        ok, value = parse_float(self._prompt(prompt))
        return value if ok else None

    def _read_int(self, prompt: str) -> Optional[int]:
        ok, value = parse_int(self._prompt(prompt))
        return value if ok else None

    def _print_table(self, expenses: List[Expense]):
        self._out(TABLE_HEADER)
        self._out(TABLE_RULE)
        for e in expenses:
            self._out(format_expense(e))

    def list_all(self):
        exs = self.tracker.list_all()
        if not exs:
            self._out("No expenses recorded.")
            return
        self._print_table(exs)

    def add(self):
        date = self._prompt("Date (YYYY-MM-DD): ")
        category = self._prompt("Category: ")
        amount = self._read_float("Amount: ")
        if amount is None:
            self._out("Invalid amount.")
            return
        note = self._prompt("Note (optional): ")
        exp = self.tracker.add_expense(date, category, amount, note)
        self._out(f"Added expense id={exp.id}")

    def remove(self):
        expense_id = self._read_int("ID to remove: ")
        if expense_id is None:
            self._out("Invalid id.")
            return
        self._out("Removed." if self.tracker.remove_expense(expense_id) else "Not found.")

    def edit(self):
        expense_id = self._read_int("ID to edit: ")
        if expense_id is None:
            self._out("Invalid id.")
            return
        date = self._prompt("New Date (YYYY-MM-DD): ")
        category = self._prompt("New Category: ")
        amount = self._read_float("New Amount: ")
        if amount is None:
            self._out("Invalid amount.")
            return
        note = self._prompt("New Note: ")
        ok = self.tracker.edit_expense(expense_id, date, category, amount, note)
        self._out("Edited." if ok else "Not found.")

    def list_month(self):
        ym = self._prompt("Year-month (YYYY-MM): ")
        exs = self.tracker.find_by_month(ym)
        if not exs:
            self._out(f"No expenses for {ym}")
            return
        self._print_table(exs)

    def report(self):
        ym = self._prompt("Year-month (YYYY-MM): ")
        sums = self.tracker.total_per_category(ym)
        if not sums:
            self._out(f"No data for {ym}")
            return
        self._out(f"Totals for {ym}:")
        for cat, total in sums.items():
            self._out(f"{cat:<12} -> {total:.2f}")
        self._out("--------------------")
        self._out(f"Total -> {self.tracker.total_for_month(ym):.2f}")

    def save(self):
        self._out("Saved." if self.tracker.persist() else "Failed to save.")

    def run(self):
        actions = {
            1: self.list_all,
            2: self.add,
            3: self.remove,
            4: self.edit,
            5: self.list_month,
            6: self.report,
            7: self.save,
        }
        while True:
            self._out(MENU)
            try:
                choice = self._prompt("Choose: ")
                if not choice:
                    self._out("Please choose an option.")
                    continue
                ok, opt = parse_int(choice)
                if not ok:
                    self._out("Invalid selection.")
                    continue
                if opt == 8:
                    break
                action = actions.get(opt)
                if action is None:
                    self._out("Unknown option.")
                    continue
                action()
            except EOFError:
                break
        self.tracker.persist()
        self._out("Goodbye.")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="exptrack", description="Personal expense tracker")
    parser.add_argument("--data-file", default=None,
                        help="expense data file (default: $EXPTRACK_DATA_FILE or ./expenses.db)")
    args = parser.parse_args(argv)
    tracker = ExpenseTracker(ExpenseStorage(args.data_file))
    ExpenseShell(tracker).run()


if __name__ == "__main__":
    main()
