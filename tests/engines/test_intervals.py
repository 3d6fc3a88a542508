"""
Tests for the Interval Calculator.

Covers:
- Span to the next row and to the evaluation instant
- Calendar and elapsed day counting
- Negative spans: surfaced or clamped
"""

from datetime import datetime, timedelta, timezone

import pytest

from rental_engines.intervals import assign_day_spans, days_between
from rental_engines.ledger import LedgerRow
from rental_kernel.domain.policy import DaySpanMode, LedgerPolicy, NegativeSpanPolicy
from rental_kernel.exceptions import IncomparableInstantsError


def _row(day, balance=1, hour=0, record_id=None):
    return LedgerRow(
        occurred_at=datetime(2024, 1, day, hour),
        delta=1,
        balance=balance,
        record_id=record_id,
    )


class TestDaysBetween:
    def test_calendar_ignores_time_of_day(self):
        assert days_between(datetime(2024, 1, 1, 23), datetime(2024, 1, 2, 1)) == 1

    def test_calendar_same_day(self):
        assert days_between(datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 18)) == 0

    def test_calendar_negative(self):
        assert days_between(datetime(2024, 1, 5), datetime(2024, 1, 2)) == -3

    def test_calendar_mixes_naive_and_aware(self):
        end = datetime(2024, 1, 4, tzinfo=timezone.utc)
        assert days_between(datetime(2024, 1, 1), end) == 3

    def test_calendar_reads_aware_instants_in_utc(self):
        utc = datetime(2024, 1, 2, 1, tzinfo=timezone.utc)
        brt = datetime(2024, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-3)))
        assert brt > utc
        assert days_between(utc, brt) == 0

    def test_calendar_local_offset_against_utc_now(self):
        start = datetime(2024, 1, 1, 22, tzinfo=timezone(timedelta(hours=-3)))
        now = datetime(2024, 1, 5, tzinfo=timezone.utc)
        assert days_between(start, now) == 3

    def test_elapsed_truncate(self):
        start = datetime(2024, 1, 1, 23)
        assert days_between(start, datetime(2024, 1, 2, 1), DaySpanMode.ELAPSED_TRUNCATE) == 0
        assert days_between(start, datetime(2024, 1, 3, 22), DaySpanMode.ELAPSED_TRUNCATE) == 1

    def test_elapsed_truncate_negative_goes_toward_zero(self):
        assert days_between(
            datetime(2024, 1, 3), datetime(2024, 1, 1, 12), DaySpanMode.ELAPSED_TRUNCATE,
        ) == -1

    def test_elapsed_round_half_away_from_zero(self):
        start = datetime(2024, 1, 1)
        assert days_between(start, datetime(2024, 1, 2, 12), DaySpanMode.ELAPSED_ROUND) == 2
        assert days_between(start, datetime(2024, 1, 2, 11), DaySpanMode.ELAPSED_ROUND) == 1
        assert days_between(datetime(2024, 1, 2, 12), start, DaySpanMode.ELAPSED_ROUND) == -2

    def test_elapsed_rejects_mixed_awareness(self):
        with pytest.raises(IncomparableInstantsError):
            days_between(
                datetime(2024, 1, 1),
                datetime(2024, 1, 2, tzinfo=timezone.utc),
                DaySpanMode.ELAPSED_TRUNCATE,
            )


class TestAssignDaySpans:
    def test_spans_to_next_row_and_now(self):
        rows = [_row(1), _row(4), _row(6)]
        spanned = assign_day_spans(rows, datetime(2024, 1, 10))
        assert [r.day_span for r in spanned] == [3, 2, 4]

    def test_spans_cover_first_row_to_now(self):
        rows = [_row(2), _row(3), _row(9)]
        spanned = assign_day_spans(rows, datetime(2024, 1, 20))
        assert sum(r.day_span for r in spanned) == 18

    def test_same_day_rows_get_zero(self):
        rows = [_row(1, hour=8), _row(1, hour=17)]
        spanned = assign_day_spans(rows, datetime(2024, 1, 3))
        assert [r.day_span for r in spanned] == [0, 2]

    def test_empty(self):
        assert assign_day_spans([], datetime(2024, 1, 1)) == ()

    def test_input_rows_unchanged(self):
        rows = (_row(1),)
        assign_day_spans(rows, datetime(2024, 1, 2))
        assert rows[0].day_span is None

    def test_now_before_last_row_is_surfaced(self, captured_logs):
        spanned = assign_day_spans([_row(5, record_id=7)], datetime(2024, 1, 2))

        assert spanned[0].day_span == -3
        warnings = [r for r in captured_logs() if r["message"] == "negative_day_span"]
        assert warnings[0]["record_id"] == 7
        assert warnings[0]["policy"] == "surface"

    def test_now_before_last_row_clamped(self):
        policy = LedgerPolicy(negative_span=NegativeSpanPolicy.CLAMP)
        spanned = assign_day_spans([_row(1), _row(5)], datetime(2024, 1, 2), policy)
        assert [r.day_span for r in spanned] == [4, 0]

    def test_policy_mode_is_used(self):
        policy = LedgerPolicy(day_span_mode="elapsed_truncate")
        spanned = assign_day_spans([_row(1, hour=12)], datetime(2024, 1, 2, 6), policy)
        assert spanned[0].day_span == 0

    def test_mixed_offsets_in_order_never_go_negative(self):
        rows = [
            LedgerRow(datetime(2024, 1, 2, 1, tzinfo=timezone.utc), 5, 5),
            LedgerRow(datetime(2024, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-3))), 1, 6),
        ]
        spanned = assign_day_spans(rows, datetime(2024, 1, 5, tzinfo=timezone.utc))
        assert [r.day_span for r in spanned] == [0, 3]
