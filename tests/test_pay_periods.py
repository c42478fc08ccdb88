"""Tests for biweekly pay period generation and selection."""

from datetime import date, timedelta

import pytest
from hypothesis import given, strategies as st

from pay_statements.calculators.pay_periods import (
    PayPeriodCalendar,
    generate_biweekly_periods,
    period_id,
)
from pay_statements.errors import ConfigurationError


class TestGenerateBiweeklyPeriods:
    """Test period generation."""

    def test_stops_before_horizon(self):
        """A period ending after the horizon is not generated."""
        periods = generate_biweekly_periods(date(2025, 8, 18), date(2025, 9, 15))

        assert [p.id for p in periods] == ["pp-001", "pp-002"]
        assert periods[0].start_date == date(2025, 8, 18)
        assert periods[0].end_date == date(2025, 8, 31)
        assert periods[1].start_date == date(2025, 9, 1)
        assert periods[1].end_date == date(2025, 9, 14)

    def test_period_ending_on_horizon_is_included(self):
        periods = generate_biweekly_periods(date(2025, 8, 18), date(2025, 8, 31))

        assert len(periods) == 1
        assert periods[0].end_date == date(2025, 8, 31)

    def test_horizon_shorter_than_one_period(self):
        assert generate_biweekly_periods(date(2025, 8, 18), date(2025, 8, 30)) == []

    def test_horizon_before_anchor_raises(self):
        with pytest.raises(ConfigurationError):
            generate_biweekly_periods(date(2025, 8, 18), date(2025, 8, 1))

    def test_period_ids_are_zero_padded(self):
        assert period_id(1) == "pp-001"
        assert period_id(42) == "pp-042"
        assert period_id(1000) == "pp-1000"

    def test_label(self):
        period = generate_biweekly_periods(date(2025, 8, 18), date(2025, 9, 1))[0]
        assert period.label == "08/18/2025 – 08/31/2025"

    @given(
        anchor=st.dates(min_value=date(2000, 1, 1), max_value=date(2040, 1, 1)),
        span_days=st.integers(min_value=0, max_value=800),
    )
    def test_periods_tile_without_gaps(self, anchor, span_days):
        """Consecutive periods are contiguous and exactly 14 days long."""
        periods = generate_biweekly_periods(anchor, anchor + timedelta(days=span_days))

        for period in periods:
            assert period.end_date == period.start_date + timedelta(days=13)
        for current, following in zip(periods, periods[1:]):
            assert following.start_date == current.end_date + timedelta(days=1)
        assert len(periods) == (span_days + 1) // 14
        if periods:
            assert periods[0].start_date == anchor


class TestPayPeriodCalendar:
    """Test period queries."""

    @pytest.fixture
    def short_calendar(self):
        return PayPeriodCalendar(date(2025, 8, 18), date(2025, 9, 15), grace_days=9)

    def test_empty_calendar_raises(self):
        with pytest.raises(ConfigurationError):
            PayPeriodCalendar(date(2025, 8, 18), date(2025, 8, 20))

    def test_lookup_by_id(self, short_calendar):
        assert short_calendar.lookup_by_id("pp-002").start_date == date(2025, 9, 1)

    def test_lookup_unknown_id_returns_none(self, short_calendar):
        """Unknown ids are a miss, not an error."""
        assert short_calendar.lookup_by_id("pp-999") is None
        assert short_calendar.lookup_by_id("") is None
        assert short_calendar.lookup_by_id(None) is None

    def test_available_periods_respects_grace(self, calendar):
        # pp-001 ends 2025-08-31; visible through 2025-09-09
        assert calendar.available_periods(date(2025, 9, 9))[0].id == "pp-001"
        assert calendar.available_periods(date(2025, 9, 10))[0].id == "pp-002"

    def test_available_periods_zero_grace(self):
        calendar = PayPeriodCalendar(date(2025, 8, 18), date(2025, 12, 31), grace_days=0)
        assert calendar.available_periods(date(2025, 9, 1))[0].id == "pp-002"

    def test_current_period(self, calendar):
        assert calendar.current_period(date(2025, 9, 3)).id == "pp-002"
        assert calendar.current_period(date(2025, 1, 1)) is None


class TestDefaultPeriod:
    """Test default period selection."""

    def test_period_containing_today(self, calendar):
        third = calendar.lookup_by_id("pp-003")
        assert calendar.default_period(third.start_date).id == "pp-003"
        assert calendar.default_period(third.end_date).id == "pp-003"
        assert calendar.default_period(third.start_date + timedelta(days=6)).id == "pp-003"

    def test_containing_period_wins_over_older_visible_ones(self, calendar):
        # pp-001 is still inside its grace window on 2025-09-05
        assert calendar.default_period(date(2025, 9, 5)).id == "pp-002"

    def test_before_first_period_picks_first_upcoming(self, calendar):
        assert calendar.default_period(date(2025, 8, 1)).id == "pp-001"

    def test_after_last_period_within_grace(self, calendar):
        last = calendar.periods[-1]
        assert calendar.default_period(last.end_date + timedelta(days=3)) == last

    def test_after_every_grace_window_returns_last_period(self, calendar):
        last = calendar.periods[-1]
        assert calendar.available_periods(last.end_date + timedelta(days=30)) == []
        assert calendar.default_period(last.end_date + timedelta(days=30)) == last

    def test_from_settings(self, settings):
        calendar = PayPeriodCalendar.from_settings(settings)
        assert calendar.periods[0].id == "pp-001"
        assert calendar.grace_days == 9
