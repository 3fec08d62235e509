"""Tests for the period filter."""

from datetime import date

import pytest
from pydantic import ValidationError

from funnel_landing.funnel.period import (
    filter_by_period,
    is_in_period,
    parse_record_date,
    resolve_record_date,
)
from funnel_landing.models.period import PeriodFilter
from tests.conftest import make_opportunity, make_order, make_quotation


class TestParseRecordDate:
    """Tests for parse_record_date."""

    def test_plain_date(self) -> None:
        assert parse_record_date("2026-04-30") == date(2026, 4, 30)

    def test_datetime_keeps_literal_date(self) -> None:
        """Time and zone are ignored; the written calendar date wins."""
        assert parse_record_date("2026-03-31T23:30:00-05:00") == date(2026, 3, 31)
        assert parse_record_date("2026-03-31 23:30:00") == date(2026, 3, 31)

    def test_slash_separator(self) -> None:
        assert parse_record_date("2026/07/01") == date(2026, 7, 1)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2026-13-01", "2026-02-30", "31/12/2026"])
    def test_unparsable_is_none(self, value) -> None:
        assert parse_record_date(value) is None


class TestResolveRecordDate:
    """Tests for date precedence."""

    def test_period_end_wins_over_date(self) -> None:
        order = make_order(date="2025-12-01", period_end="2026-02-28")
        assert resolve_record_date(order) == date(2026, 2, 28)

    def test_falls_back_to_issue_date(self) -> None:
        quotation = make_quotation(date="2026-05-10")
        assert resolve_record_date(quotation) == date(2026, 5, 10)

    def test_opportunity_uses_close_date(self) -> None:
        opp = make_opportunity(close_date="2026-09-01")
        assert resolve_record_date(opp) == date(2026, 9, 1)

    def test_opportunity_period_end_wins(self) -> None:
        opp = make_opportunity(close_date="2026-09-01", period_end="2027-01-15")
        assert resolve_record_date(opp) == date(2027, 1, 15)

    def test_opportunity_without_dates(self) -> None:
        assert resolve_record_date(make_opportunity(close_date=None)) is None

    def test_unparsable_first_candidate_does_not_fall_through(self) -> None:
        """The first present candidate decides; a garbled one excludes the record."""
        order = make_order(date="2026-03-01", period_end="garbled")
        assert resolve_record_date(order) is None


class TestIsInPeriod:
    """Tests for year / quarter membership."""

    def test_year_only(self) -> None:
        period = PeriodFilter(year=2026)
        assert is_in_period(date(2026, 1, 1), period)
        assert is_in_period(date(2026, 12, 31), period)
        assert not is_in_period(date(2025, 12, 31), period)

    @pytest.mark.parametrize(
        "month,quarter",
        [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)],
    )
    def test_quarter_boundaries(self, month: int, quarter: int) -> None:
        due = date(2026, month, 1)
        assert is_in_period(due, PeriodFilter(year=2026, quarter=quarter))
        other = quarter % 4 + 1
        assert not is_in_period(due, PeriodFilter(year=2026, quarter=other))

    def test_missing_date_excluded(self) -> None:
        assert not is_in_period(None, PeriodFilter(year=2026))


class TestFilterByPeriod:
    """Tests for filter_by_period."""

    def test_keeps_source_order(self) -> None:
        orders = [
            make_order(1, date="2026-02-01"),
            make_order(2, date="2025-02-01"),
            make_order(3, date="2026-11-01"),
            make_order(4, date=""),
        ]
        result = filter_by_period(orders, PeriodFilter(year=2026))
        assert [o.order_id for o in result] == [1, 3]

    def test_quarter(self) -> None:
        quotations = [
            make_quotation(1, date="2026-03-31"),
            make_quotation(2, date="2026-04-01"),
            make_quotation(3, date="2026-06-30T18:00:00Z"),
        ]
        result = filter_by_period(quotations, PeriodFilter(year=2026, quarter=2))
        assert [q.quotation_id for q in result] == [2, 3]


class TestPeriodFilter:
    """Tests for the PeriodFilter model."""

    def test_months(self) -> None:
        assert PeriodFilter(year=2026).months == tuple(range(1, 13))
        assert PeriodFilter(year=2026, quarter=3).months == (7, 8, 9)

    def test_cache_data_type(self) -> None:
        assert PeriodFilter(year=2026).cache_data_type == "funnel_snapshot"
        assert PeriodFilter(year=2026, quarter=2).cache_data_type == "funnel_snapshot_q2"

    def test_label(self) -> None:
        assert PeriodFilter(year=2026).label() == "2026"
        assert PeriodFilter(year=2026, quarter=4).label() == "2026-Q4"

    @pytest.mark.parametrize("quarter", [0, 5])
    def test_invalid_quarter(self, quarter: int) -> None:
        with pytest.raises(ValidationError):
            PeriodFilter(year=2026, quarter=quarter)

    def test_frozen(self) -> None:
        period = PeriodFilter(year=2026)
        with pytest.raises(ValidationError):
            period.year = 2027
