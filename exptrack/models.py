"""
models.py - Data model definitions

This file defines the Expense dataclass used across the tracker, the storage
layer and both shells. Expenses are persisted one per line in a pipe-delimited
text file:

    id|date|category|amount|note

e.g. ``7|2024-03-02|food|10.50|lunch with Sam``.
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, Tuple

FIELD_SEPARATOR = "|"
FIELD_COUNT = 5

# leading-number grammar: whitespace, optional sign, digits (and a fraction/exponent for floats)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

# ids are 32-bit signed integers in the file format
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def parse_int(text: str) -> Tuple[bool, int]:
    """
    Parse the leading integer of `text`.
    Returns (ok, value); value is 0 when no integer prefix is present or the
    number does not fit in 32 bits.
    """
    m = _INT_PREFIX.match(text or "")
    if not m:
        return False, 0
    value = int(m.group(1))
    if not INT_MIN <= value <= INT_MAX:
        return False, 0
    return True, value


def parse_float(text: str) -> Tuple[bool, float]:
    """
    Parse the leading decimal number of `text` ("inf" and "nan" included).
    Returns (ok, value); value is 0.0 when no numeric prefix is present or a
    finite literal overflows to infinity or underflows to zero.
    """
    m = _FLOAT_PREFIX.match(text or "")
    if not m:
        return False, 0.0
    literal = m.group(1)
    value = float(literal)
    if literal.lstrip("+-")[:1].isalpha():
        return True, value
    mantissa = re.split(r"[eE]", literal)[0]
    if math.isinf(value) or (value == 0.0 and any(c in "123456789" for c in mantissa)):
        return False, 0.0
    return True, value


def _clean_note(note: str) -> str:
    for ch in ("|", "\n", "\r"):
        note = note.replace(ch, " ")
    return note


@dataclass
class Expense:
    """
    Represents a single expense record.

    Fields:
      - id: positive integer assigned by the tracker; 0 marks an invalid record
      - date: "YYYY-MM-DD" text, only its first 7 characters are ever interpreted
      - category: free-text label, kept exactly as entered
      - amount: float, written with two decimals (negative values allowed)
      - note: optional free text; delimiter characters are blanked when written
    """
    id: int = 0
    date: str = ""
    category: str = ""
    amount: float = 0.0
    note: str = ""

    @property
    def month(self) -> str:
        """The "YYYY-MM" prefix of the date, or "" for dates that are too short."""
        if len(self.date) < 7:
            return ""
        return self.date[:7]

    def in_month(self, year_month: str) -> bool:
        return len(self.date) >= 7 and self.date[:7] == year_month

    def serialize(self) -> str:
        """Render the record as one line of the data file (without the newline)."""
        return FIELD_SEPARATOR.join([
            str(self.id),
            self.date,
            self.category,
            f"{self.amount:.2f}",
            _clean_note(self.note),
        ])

    @staticmethod
    def deserialize(line: str) -> "Expense":
        """
        Inverse of serialize. Lines with fewer than five fields give a blank
        record (id 0); unparsable ids become 0 and unparsable amounts 0.0.
        """
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < FIELD_COUNT:
            return Expense()
        _, expense_id = parse_int(parts[0])
        _, amount = parse_float(parts[3])
        return Expense(
            id=expense_id,
            date=parts[1],
            category=parts[2],
            amount=amount,
            note=parts[4],
        )

    def to_dict(self) -> Dict:
        """Plain dict used to build dashboard tables and exports."""
        return {
            "id": self.id,
            "date": self.date,
            "category": self.category,
            "amount": self.amount,
            "note": self.note,
        }


def serialize(expense: Expense) -> str:
    return expense.serialize()


def deserialize(line: str) -> Expense:
    return Expense.deserialize(line)
