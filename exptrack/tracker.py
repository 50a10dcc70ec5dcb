"""
tracker.py - core application logic

Responsibilities:
 - keep the in-memory list of Expense objects for the session
 - assign ids to new expenses
 - add / edit / remove expenses, persisting the full list after each change
 - provide query helpers consumed by the shells:
     list_all, find_by_month, total_per_category, total_for_month,
     available_months
"""

import logging
import os
from typing import Dict, List, Optional

from exptrack.models import Expense
from exptrack.storage import ExpenseStorage

LOG_LEVEL = (os.getenv("EXPTRACK_LOG_LEVEL") or "INFO").upper()

logger = logging.getLogger(__name__)

# ensure the package logger is available (stderr, so console output stays clean)
_pkg_logger = logging.getLogger("exptrack")
if not _pkg_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    _pkg_logger.addHandler(handler)
    _pkg_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))


class ExpenseTracker:
    """
    Session object owning the expense list. Create one per process from a
    storage handle and route every read and write through it.
    """

    def __init__(self, storage: Optional[ExpenseStorage] = None):
        self.storage = storage if storage is not None else ExpenseStorage()
        # in-memory list of Expense objects, in insertion order
        self.expenses: List[Expense] = self.storage.load()
        # next id is max(existing) + 1, recomputed on every start; it is not persisted,
        # so removing the highest id and restarting hands that id out again
        self._next_id = max((e.id for e in self.expenses), default=0) + 1
        logger.info("Loaded %d expenses from %s", len(self.expenses), self.storage.path)

    @property
    def next_id(self) -> int:
        return self._next_id

    def persist(self) -> bool:
        """Write the current list to storage. Returns False if the write failed."""
        ok = self.storage.save(self.expenses)
        if not ok:
            logger.warning("Persisting %d expenses failed", len(self.expenses))
        return ok

    def add_expense(self, date: str, category: str, amount: float, note: str = "") -> Expense:
        """
        Create an Expense, append it to the in-memory list and persist.
        Inputs are stored as given; validation belongs to the caller.
        """
        exp = Expense(id=self._next_id, date=date, category=category, amount=amount, note=note)
        self._next_id += 1
        self.expenses.append(exp)
        self.persist()
        logger.info("Added expense id=%d", exp.id)
        return exp

    def remove_expense(self, expense_id: int) -> bool:
        """Remove every expense with this id. Returns True if anything was removed."""
        before = len(self.expenses)
        self.expenses = [e for e in self.expenses if e.id != expense_id]
        if len(self.expenses) == before:
            logger.info("Expense id=%s not found", expense_id)
            return False
        self.persist()
        logger.info("Removed expense id=%s. Remaining expenses=%d.", expense_id, len(self.expenses))
        return True

    def edit_expense(self, expense_id: int, date: str, category: str, amount: float, note: str) -> bool:
        """
        Replace date, category, amount and note of the first expense with this id.
        Returns False (and writes nothing) when the id is unknown.
        """
        exp = self.get(expense_id)
        if exp is None:
            logger.info("Expense id=%s not found", expense_id)
            return False
        exp.date = date
        exp.category = category
        exp.amount = amount
        exp.note = note
        self.persist()
        logger.info("Edited expense id=%s", expense_id)
        return True

    def get(self, expense_id: int) -> Optional[Expense]:
        for e in self.expenses:
            if e.id == expense_id:
                return e
        return None

    def list_all(self) -> List[Expense]:
        return list(self.expenses)

    def find_by_month(self, year_month: str) -> List[Expense]:
        """Expenses whose date starts with `year_month` ("YYYY-MM"), in insertion order."""
        return [e for e in self.expenses if e.in_month(year_month)]

    def total_per_category(self, year_month: str) -> Dict[str, float]:
        """
        Sum of amounts per category for one month.
        Categories are grouped by their exact text ("Food" and "food" stay apart).
        """
        totals: Dict[str, float] = {}
        for e in self.find_by_month(year_month):
            totals[e.category] = totals.get(e.category, 0.0) + e.amount
        return totals

    def total_for_month(self, year_month: str) -> float:
        return sum((e.amount for e in self.find_by_month(year_month)), 0.0)

    def available_months(self) -> List[str]:
        """Sorted distinct "YYYY-MM" prefixes present in the data, for month pickers."""
        return sorted({e.month for e in self.expenses if e.month})
