"""
storage.py - flat-file persistence for expenses

The whole record list lives in a single UTF-8 text file, one serialized
Expense per line, in insertion order. Every save truncates and rewrites the
file; there is no temp-file/rename step, so a crash mid-write can leave a
truncated file. Only one process should use a given data file at a time.
"""

import logging
import os
from typing import Iterable, List, Optional

from exptrack.models import Expense

# location of the data file; override with EXPTRACK_DATA_FILE
DATA_FILE = os.getenv("EXPTRACK_DATA_FILE") or "expenses.db"

logger = logging.getLogger(__name__)


class ExpenseStorage:
    """Reads and writes the complete expense list to one backing file."""

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.abspath(path or DATA_FILE)

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> List[Expense]:
        """
        Return all valid records in file order.
        A missing or unreadable file is the normal first-run state and yields [].
        Blank lines are skipped and records whose id is not positive are dropped.
        """
        out: List[Expense] = []
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace", newline="\n") as f:
                for line in f:
                    line = line.rstrip("\n")
                    if not line:
                        continue
                    exp = Expense.deserialize(line)
                    if exp.id <= 0:
                        logger.debug("Skipping malformed record: %r", line)
                        continue
                    out.append(exp)
        except FileNotFoundError:
            logger.debug("No data file at %s, starting empty", self.path)
            return []
        except OSError:
            logger.warning("Could not read data file %s, starting empty", self.path, exc_info=True)
            return []
        return out

    def save(self, expenses: Iterable[Expense]) -> bool:
        """
        Overwrite the data file with `expenses`, one line each.
        Returns False when the file cannot be written.
        """
        count = 0
        try:
            with open(self.path, "w", encoding="utf-8", newline="\n") as f:
                for e in expenses:
                    f.write(e.serialize() + "\n")
                    count += 1
        except OSError:
            logger.exception("Failed to save data file %s", self.path)
            return False
        logger.info("Saved data to %s (expenses=%d)", self.path, count)
        return True
