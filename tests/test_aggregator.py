"""Tests for calendar periods and the transaction aggregator."""

from datetime import date
from decimal import Decimal

import pytest

from ledger.aggregation import (
    PERIOD_STRATEGIES,
    InvalidModeError,
    MalformedTransactionError,
    aggregate,
    coerce_transaction,
    resolve_mode,
    total_of,
)
from ledger.aggregation.periods import (
    day_period,
    month_period,
    week_period,
    year_period,
)
from ledger.models.transaction import GroupingMode, Transaction


def tx(day: str, amount, tx_id: str = None) -> dict:
    return {
        "id": tx_id or f"{day}:{amount}",
        "amount": amount,
        "description": "",
        "date": day,
    }


SAMPLE = [
    tx("2024-03-10", "25.00", "a"),
    tx("2023-12-31", "-10.50", "b"),
    tx("2024-01-03", "50", "c"),
    tx("2024-02-29", "-5", "d"),
    tx("2024-01-07", "7.25", "e"),
    tx("2024-01-08", "100", "f"),
    tx("2024-02-15", "-30", "g"),
    tx("2024-01-03", "-20", "h"),
]


class TestPeriods:
    """Tests for the calendar strategy functions."""

    def test_day_period(self):
        period = day_period(date(2024, 5, 17))
        assert period.key == "2024-05-17"
        assert period.start == period.end == date(2024, 5, 17)

    def test_week_period_midweek(self):
        """Test that Wednesday 2024-01-03 falls in the week of Monday 2024-01-01."""
        period = week_period(date(2024, 1, 3))
        assert period.key == "2024-01-01"
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 1, 7)

    def test_week_period_monday_and_sunday(self):
        """Test that Monday starts and Sunday ends a week."""
        assert week_period(date(2024, 1, 1)).start == date(2024, 1, 1)
        assert week_period(date(2024, 1, 7)).start == date(2024, 1, 1)
        assert week_period(date(2024, 1, 8)).start == date(2024, 1, 8)

    def test_week_period_spans_year_boundary(self):
        """Test that a week can start in the previous year."""
        period = week_period(date(2025, 1, 1))
        assert period.key == "2024-12-30"
        assert period.end == date(2025, 1, 5)

    def test_month_period_leap_february(self):
        period = month_period(date(2024, 2, 15))
        assert period.key == "2024-02"
        assert period.start == date(2024, 2, 1)
        assert period.end == date(2024, 2, 29)

    def test_month_period_common_february(self):
        assert month_period(date(2023, 2, 10)).end == date(2023, 2, 28)

    def test_month_period_century_years(self):
        """Test the Gregorian century rule: 1900 is not a leap year, 2000 is."""
        assert month_period(date(1900, 2, 1)).end == date(1900, 2, 28)
        assert month_period(date(2000, 2, 1)).end == date(2000, 2, 29)

    def test_month_period_lengths(self):
        assert month_period(date(2024, 4, 30)).end == date(2024, 4, 30)
        assert month_period(date(2024, 12, 1)).end == date(2024, 12, 31)

    def test_year_period(self):
        period = year_period(date(2024, 2, 29))
        assert period.key == "2024"
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 12, 31)

    def test_every_aggregated_mode_has_a_strategy(self):
        aggregated = {mode for mode in GroupingMode if mode.is_aggregated}
        assert set(PERIOD_STRATEGIES) == aggregated


class TestResolveMode:
    """Tests for grouping selector values."""

    @pytest.mark.parametrize("value", [None, "", "none", GroupingMode.NONE])
    def test_no_grouping_values(self, value):
        assert resolve_mode(value) == GroupingMode.NONE

    def test_string_values(self):
        assert resolve_mode("month") == GroupingMode.MONTH

    @pytest.mark.parametrize("value", ["weekly", "Day", "quarter", 3, ["day"]])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidModeError) as exc_info:
            resolve_mode(value)
        assert exc_info.value.mode == value


class TestAggregate:
    """Tests for aggregate()."""

    def test_none_mode_reverses_input(self):
        """Test that ungrouped output is most-recent-first."""
        buckets = aggregate(
            [tx("2024-01-01", 100), tx("2024-01-02", -40)],
            GroupingMode.NONE,
        )
        assert [bucket.amount for bucket in buckets] == [Decimal("-40"), Decimal("100")]
        assert [bucket.key for bucket in buckets] == ["2024-01-02", "2024-01-01"]
        assert all(bucket.count == 1 for bucket in buckets)

    def test_none_mode_keeps_same_day_entries_separate(self):
        buckets = aggregate([tx("2024-01-01", 1), tx("2024-01-01", 2)], None)
        assert len(buckets) == 2

    def test_day_mode(self):
        buckets = aggregate(SAMPLE, "day")
        keys = [bucket.key for bucket in buckets]
        assert keys == [
            "2023-12-31",
            "2024-01-03",
            "2024-01-07",
            "2024-01-08",
            "2024-02-15",
            "2024-02-29",
            "2024-03-10",
        ]
        jan_3 = buckets[1]
        assert jan_3.amount == Decimal("30")
        assert jan_3.count == 2
        assert jan_3.range.start == jan_3.range.end == date(2024, 1, 3)

    def test_week_mode(self):
        buckets = aggregate(SAMPLE, GroupingMode.WEEK)
        assert [bucket.key for bucket in buckets] == [
            "2023-12-25",
            "2024-01-01",
            "2024-01-08",
            "2024-02-12",
            "2024-02-26",
            "2024-03-04",
        ]
        first_january_week = buckets[1]
        assert first_january_week.amount == Decimal("37.25")
        assert first_january_week.range.start == date(2024, 1, 1)
        assert first_january_week.range.end == date(2024, 1, 7)

    def test_week_mode_single_wednesday(self):
        buckets = aggregate([tx("2024-01-03", 50)], "week")
        assert len(buckets) == 1
        assert buckets[0].range.start == date(2024, 1, 1)
        assert buckets[0].range.end == date(2024, 1, 7)
        assert buckets[0].amount == Decimal("50")

    def test_month_mode(self):
        buckets = aggregate(SAMPLE, GroupingMode.MONTH)
        assert [bucket.key for bucket in buckets] == ["2023-12", "2024-01", "2024-02", "2024-03"]
        february = buckets[2]
        assert february.amount == Decimal("-35")
        assert february.count == 2
        assert february.range.end == date(2024, 2, 29)

    def test_month_mode_non_leap_february(self):
        buckets = aggregate([tx("2023-02-01", 1)], "month")
        assert buckets[0].key == "2023-02"
        assert buckets[0].range.end == date(2023, 2, 28)

    def test_year_mode(self):
        buckets = aggregate(SAMPLE, GroupingMode.YEAR)
        assert [bucket.key for bucket in buckets] == ["2023", "2024"]
        assert buckets[0].amount == Decimal("-10.50")
        assert buckets[1].amount == Decimal("127.25")
        assert buckets[1].range.start == date(2024, 1, 1)
        assert buckets[1].range.end == date(2024, 12, 31)

    @pytest.mark.parametrize("mode", ["day", "week", "month", "year"])
    def test_every_amount_lands_in_one_bucket(self, mode):
        """Test bucket coverage: bucket sums add up to the input sum."""
        buckets = aggregate(SAMPLE, mode)
        expected = sum((Decimal(t["amount"]) for t in SAMPLE), Decimal("0"))
        assert total_of(buckets) == expected
        assert sum(bucket.count for bucket in buckets) == len(SAMPLE)

    @pytest.mark.parametrize("mode", ["day", "week", "month", "year"])
    def test_buckets_are_chronological_and_disjoint(self, mode):
        buckets = aggregate(SAMPLE, mode)
        for previous, current in zip(buckets, buckets[1:]):
            assert previous.range.start <= current.range.start
            assert previous.range.end < current.range.start

    @pytest.mark.parametrize("mode", ["day", "week", "month", "year"])
    def test_output_does_not_depend_on_input_order(self, mode):
        assert aggregate(SAMPLE, mode) == aggregate(list(reversed(SAMPLE)), mode)

    def test_no_rounding_while_summing(self):
        buckets = aggregate(
            [tx("2024-01-01", "0.005"), tx("2024-01-02", "0.005")],
            "month",
        )
        assert buckets[0].amount == Decimal("0.010")

    def test_accepts_transaction_models(self):
        transactions = [Transaction(id="1", amount="3", date="2024-01-01")]
        assert aggregate(transactions, "year")[0].amount == Decimal("3")

    def test_empty_input(self):
        assert aggregate([], "month") == []
        assert aggregate([], "none") == []

    def test_invalid_mode(self):
        with pytest.raises(InvalidModeError):
            aggregate(SAMPLE, "fortnight")

    def test_invalid_mode_with_empty_input(self):
        """Test that the mode is checked even when there is nothing to group."""
        with pytest.raises(InvalidModeError):
            aggregate([], "fortnight")

    def test_invalid_mode_is_a_value_error(self):
        with pytest.raises(ValueError):
            aggregate(SAMPLE, "hourly")

    def test_does_not_mutate_input(self):
        records = [tx("2024-01-02", 1), tx("2024-01-01", 2)]
        snapshot = [dict(record) for record in records]
        aggregate(records, "day")
        aggregate(records, "none")
        assert records == snapshot


class TestMalformedTransactions:
    """Tests that bad records are rejected instead of bucketed."""

    @pytest.mark.parametrize("bad_date", ["not a date", "2023-02-29", "2024-13-01", ""])
    def test_unparseable_date(self, bad_date):
        with pytest.raises(MalformedTransactionError) as exc_info:
            aggregate([tx("2024-01-01", 1), tx(bad_date, 1)], "month")
        assert exc_info.value.record["date"] == bad_date
        assert any(message.startswith("date") for message in exc_info.value.errors)

    @pytest.mark.parametrize("bad_amount", [float("inf"), "NaN", "abc", None])
    def test_bad_amount(self, bad_amount):
        with pytest.raises(MalformedTransactionError):
            aggregate([tx("2024-01-01", bad_amount)], "day")

    def test_missing_field(self):
        with pytest.raises(MalformedTransactionError, match="amount"):
            coerce_transaction({"id": "1", "date": "2024-01-01"})

    def test_not_a_mapping(self):
        with pytest.raises(MalformedTransactionError):
            coerce_transaction("2024-01-01,100")

    def test_rejected_in_none_mode_too(self):
        with pytest.raises(MalformedTransactionError):
            aggregate([tx("yesterday", 1)], None)
