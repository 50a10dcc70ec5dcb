import pytest
from exptrack.cli import ExpenseShell, format_expense, main
from exptrack.models import Expense
from exptrack.storage import ExpenseStorage
from exptrack.tracker import ExpenseTracker


def _run(tracker, answers):
    """Drive the shell with scripted answers; running out of input acts like exit."""
    it = iter(answers)
    out = []

    def fake_input(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    ExpenseShell(tracker, input_fn=fake_input, output=out.append).run()
    return out


@pytest.fixture
def tracker(tmp_path):
    return ExpenseTracker(ExpenseStorage(str(tmp_path / "expenses.db")))


def test_format_expense():
    e = Expense(id=3, date="2024-01-02", category="food", amount=4.5, note="tea")
    assert format_expense(e) == "  3 | 2024-01-02 | food       |     4.50 | tea"


def test_add_and_list(tracker):
    out = _run(tracker, ["2", "2024-03-01", "food", "12.5", "lunch", "1", "8"])
    assert "Added expense id=1" in out
    assert format_expense(tracker.get(1)) in out
    assert out[-1] == "Goodbye."


def test_empty_list(tracker):
    assert "No expenses recorded." in _run(tracker, ["1", "8"])


def test_invalid_amount_does_not_add(tracker):
    out = _run(tracker, ["2", "2024-03-01", "food", "lots", "8"])
    assert "Invalid amount." in out
    assert tracker.list_all() == []


def test_remove_and_not_found(tracker):
    tracker.add_expense("2024-03-01", "food", 1.0)
    out = _run(tracker, ["3", "1", "3", "1", "3", "x", "8"])
    assert out.count("Removed.") == 1
    assert "Not found." in out
    assert "Invalid id." in out


def test_edit(tracker):
    tracker.add_expense("2024-03-01", "food", 1.0, "a")
    out = _run(tracker, ["4", "1", "2024-04-01", "rent", "700", "april", "4", "9", "d", "c", "1", "n", "8"])
    assert out.count("Edited.") == 1
    assert "Not found." in out
    assert tracker.get(1) == Expense(id=1, date="2024-04-01", category="rent", amount=700.0, note="april")


def test_month_listing_and_report(tracker):
    tracker.add_expense("2024-03-01", "food", 10.5)
    tracker.add_expense("2024-03-02", "food", 4.25)
    tracker.add_expense("2024-04-02", "fuel", 50.0)
    out = _run(tracker, ["5", "2024-03", "5", "2023-01", "6", "2024-03", "6", "2023-01", "8"])
    assert format_expense(tracker.get(1)) in out
    assert format_expense(tracker.get(3)) not in out
    assert "No expenses for 2023-01" in out
    assert "Totals for 2024-03:" in out
    assert "food         -> 14.75" in out
    assert "Total -> 14.75" in out
    assert "No data for 2023-01" in out


def test_menu_errors(tracker):
    out = _run(tracker, ["", "abc", "42", "8"])
    assert "Please choose an option." in out
    assert "Invalid selection." in out
    assert "Unknown option." in out


def test_save_and_exit_persist(tracker, monkeypatch):
    calls = []
    monkeypatch.setattr(tracker.storage, "save", lambda exs: calls.append(1) or True)
    out = _run(tracker, ["7", "8"])
    assert "Saved." in out
    assert len(calls) == 2


def test_save_failure_message(tmp_path):
    tracker = ExpenseTracker(ExpenseStorage(str(tmp_path)))
    assert "Failed to save." in _run(tracker, ["7", "8"])


def test_eof_exits(tracker):
    assert _run(tracker, [])[-1] == "Goodbye."


def test_main_uses_data_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.db"
    answers = iter(["2", "2024-05-01", "books", "9.99", "", "8"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    main(["--data-file", str(path)])
    assert path.read_text(encoding="utf-8") == "1|2024-05-01|books|9.99|\n"
