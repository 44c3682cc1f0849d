"""
Adherence aggregation: streaks, totals and calendar colouring.

Everything here works on already-fetched entries (any object with `date`
and `taken` attributes), so the functions can be used without a database.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Union

from ..utils.dates import parse_iso_date

TAKEN = "taken"
MISSED = "missed"


@dataclass
class AdherenceSummary:
    """Adherence figures for one account over one month."""
    streak: int
    total_taken: int
    total_missed: int
    adherence_rate: str
    days: Dict[str, list]

    @property
    def total_meds(self) -> int:
        return self.total_taken + self.total_missed

    def as_response(self) -> dict:
        return {
            "streak": self.streak,
            "totalTaken": self.total_taken,
            "totalMissed": self.total_missed,
            "adherenceRate": self.adherence_rate,
            "days": self.days,
        }


def bucket_by_date(entries: Iterable) -> Dict[str, list]:
    """Groups entries by their date, keeping the order in which they arrive."""
    days: Dict[str, list] = {}
    for entry in entries:
        days.setdefault(entry.date, []).append(entry)
    return days


def format_adherence_rate(total_taken: int, total_meds: int) -> str:
    """Formats taken/total as a percentage with two decimals, e.g. "66.67%"."""
    if total_meds == 0:
        return "0.00%"
    # Round ties up, as the web client's toFixed(2) does
    rate = Decimal(total_taken / total_meds * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{rate}%"


def compute_streak(days: Dict[str, list], reference: date) -> int:
    """
    Counts fully-taken dates walking backward from `reference` (inclusive).

    Only dates that have entries are considered, so days with nothing
    scheduled neither extend nor break the streak. The walk stops at the
    first date where any entry is not taken.
    """
    candidates = sorted(d for d in days if parse_iso_date(d) <= reference)

    streak = 0
    for day in reversed(candidates):
        if all(entry.taken for entry in days[day]):
            streak += 1
        else:
            break
    return streak


def summarize(entries: Iterable, reference: Union[date, str]) -> AdherenceSummary:
    """
    Builds the adherence summary for the entries of one month window.

    Totals and the adherence rate cover every entry passed in, including
    dates after `reference`; the streak only looks at dates up to it.
    """
    if isinstance(reference, str):
        reference = parse_iso_date(reference)

    days = bucket_by_date(entries)
    total_meds = sum(len(day_entries) for day_entries in days.values())
    total_taken = sum(1 for day_entries in days.values() for entry in day_entries if entry.taken)

    return AdherenceSummary(
        streak=compute_streak(days, reference),
        total_taken=total_taken,
        total_missed=total_meds - total_taken,
        adherence_rate=format_adherence_rate(total_taken, total_meds),
        days=days,
    )


def calendar_summary(entries: Iterable) -> Dict[str, str]:
    """
    Maps each date that has entries to "taken" when all of them were taken,
    otherwise to "missed". Dates are returned in ascending order.
    """
    counts: Dict[str, List[int]] = {}
    for entry in entries:
        taken_count, total = counts.get(entry.date, [0, 0])
        counts[entry.date] = [taken_count + (1 if entry.taken else 0), total + 1]

    return {
        day: TAKEN if taken_count == total else MISSED
        for day, (taken_count, total) in sorted(counts.items())
    }
