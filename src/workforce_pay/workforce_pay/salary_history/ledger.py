"""Pure reads over the salary history ledger.

An entry applies from its `effective_from` (always the first of a month) until a
later entry supersedes it. Nothing here touches storage.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import first_day_of_next_month
from ..payroll.model import WorkingSchedule
from .model import SalaryHistoryEntry


def next_effective_date(today: date) -> date:
    return first_day_of_next_month(today)


def _ordering(entry: SalaryHistoryEntry):
    return (entry.effective_from, entry.created_at, entry.entry_id)


def current_entry(entries: Iterable[SalaryHistoryEntry], as_of: date) -> Optional[SalaryHistoryEntry]:
    due = [e for e in entries if e.effective_from <= as_of]
    return max(due, key=_ordering) if due else None


def pre_ledger_schedule(entries: Iterable[SalaryHistoryEntry]) -> Optional[WorkingSchedule]:
    """Schedule the employee had before the first change was ever recorded.

    The earliest recorded entry snapshots it, whatever its effective date.
    """

    entries = list(entries)
    if not entries:
        return None
    first = min(entries, key=lambda e: (e.created_at, e.entry_id))
    return first.previous_schedule


def current_effective(entries: Iterable[SalaryHistoryEntry], as_of: date, baseline: WorkingSchedule) -> WorkingSchedule:
    entries = list(entries)
    entry = current_entry(entries, as_of)
    if entry is not None:
        return entry.schedule
    # Before any change took effect; the live employee row may already carry a later one.
    return pre_ledger_schedule(entries) or baseline


def pending(entries: Iterable[SalaryHistoryEntry], today: date) -> Optional[SalaryHistoryEntry]:
    future = [e for e in entries if e.effective_from > today]
    return max(future, key=_ordering) if future else None
