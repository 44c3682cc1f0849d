from datetime import date
from types import SimpleNamespace

import pytest

from medtrack.exceptions import ValidationError
from medtrack.services.adherence import (
    bucket_by_date,
    calendar_summary,
    compute_streak,
    format_adherence_rate,
    summarize,
)


def entry(day, taken, name="med"):
    return SimpleNamespace(date=day, taken=taken, name=name)


@pytest.fixture
def june_entries():
    return [
        entry("2025-06-18", True),
        entry("2025-06-19", True),
        entry("2025-06-20", False, "morning"),
        entry("2025-06-20", True, "evening"),
    ]


def test_streak_breaks_on_reference_day_with_a_miss(june_entries):
    summary = summarize(june_entries, "2025-06-20")
    assert summary.streak == 0


def test_streak_counts_back_from_earlier_reference(june_entries):
    summary = summarize(june_entries, date(2025, 6, 19))
    assert summary.streak == 2


def test_totals_cover_the_whole_window_not_just_up_to_reference(june_entries):
    summary = summarize(june_entries, "2025-06-18")
    assert summary.total_taken == 3
    assert summary.total_missed == 1
    assert summary.total_meds == 4
    assert summary.adherence_rate == "75.00%"


def test_streak_skips_days_without_entries():
    entries = [entry("2025-06-01", True), entry("2025-06-05", True), entry("2025-06-09", True)]
    assert summarize(entries, "2025-06-10").streak == 3


def test_streak_ignores_dates_after_reference():
    days = bucket_by_date([entry("2025-06-10", True), entry("2025-06-11", False)])
    assert compute_streak(days, date(2025, 6, 10)) == 1


def test_streak_stops_at_first_incomplete_day():
    entries = [
        entry("2025-06-01", True),
        entry("2025-06-02", False),
        entry("2025-06-03", True),
        entry("2025-06-04", True),
    ]
    assert summarize(entries, "2025-06-04").streak == 2


def test_empty_window():
    summary = summarize([], "2025-06-20")
    assert summary.streak == 0
    assert summary.total_taken == 0
    assert summary.total_missed == 0
    assert summary.adherence_rate == "0.00%"
    assert summary.days == {}


def test_adherence_rate_formatting():
    assert format_adherence_rate(0, 0) == "0.00%"
    assert format_adherence_rate(3, 3) == "100.00%"
    assert format_adherence_rate(2, 3) == "66.67%"
    assert format_adherence_rate(0, 4) == "0.00%"
    # Exact ties round up
    assert format_adherence_rate(1, 32) == "3.13%"
    assert format_adherence_rate(5, 32) == "15.63%"
    assert format_adherence_rate(1, 8) == "12.50%"


def test_days_keep_insertion_order_within_a_date(june_entries):
    days = summarize(june_entries, "2025-06-20").days
    assert list(days) == ["2025-06-18", "2025-06-19", "2025-06-20"]
    assert [e.name for e in days["2025-06-20"]] == ["morning", "evening"]


def test_as_response_uses_client_field_names(june_entries):
    body = summarize(june_entries, "2025-06-19").as_response()
    assert set(body) == {"streak", "totalTaken", "totalMissed", "adherenceRate", "days"}


def test_summarize_rejects_malformed_reference():
    with pytest.raises(ValidationError):
        summarize([], "20-06-2025")


def test_calendar_summary_statuses():
    entries = [
        entry("2025-06-02", True),
        entry("2025-06-02", True),
        entry("2025-06-01", True),
        entry("2025-06-01", False),
    ]
    result = calendar_summary(entries)
    assert result == {"2025-06-01": "missed", "2025-06-02": "taken"}
    assert "2025-06-03" not in result
    assert list(result) == ["2025-06-01", "2025-06-02"]


def test_summarize_rounds_half_up():
    entries = [entry("2025-06-01", i < 5) for i in range(32)]
    assert summarize(entries, "2025-06-30").adherence_rate == "15.63%"
