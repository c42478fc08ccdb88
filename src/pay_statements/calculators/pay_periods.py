"""Biweekly pay period generation and selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from pay_statements.errors import ConfigurationError

PERIOD_LENGTH_DAYS = 14
DEFAULT_GRACE_DAYS = 9


@dataclass(frozen=True, order=True)
class PayPeriod:
    """A fixed 14-day window, both ends inclusive."""

    id: str
    start_date: date
    end_date: date

    @property
    def label(self) -> str:
        """Human label, e.g. ``08/18/2025 – 08/31/2025``."""
        return f"{self.start_date:%m/%d/%Y} – {self.end_date:%m/%d/%Y}"

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "label": self.label,
        }


def period_id(index: int) -> str:
    """Identifier for the 1-based period index."""
    return f"pp-{index:03d}"


def generate_biweekly_periods(anchor_start: date, horizon_end: date) -> list[PayPeriod]:
    """Generate consecutive 14-day periods starting at ``anchor_start``.

    Generation stops at the first period whose end would fall after
    ``horizon_end``.
    """
    if horizon_end < anchor_start:
        raise ConfigurationError(
            f"Pay period horizon {horizon_end} precedes anchor {anchor_start}"
        )

    periods: list[PayPeriod] = []
    k = 0
    while True:
        start = anchor_start + timedelta(days=PERIOD_LENGTH_DAYS * k)
        end = start + timedelta(days=PERIOD_LENGTH_DAYS - 1)
        if end > horizon_end:
            break
        periods.append(PayPeriod(id=period_id(k + 1), start_date=start, end_date=end))
        k += 1
    return periods


class PayPeriodCalendar:
    """Queries over a generated set of pay periods.

    Lookups return None rather than raising; callers render "N/A".
    """

    def __init__(
        self,
        anchor_start: date,
        horizon_end: date,
        grace_days: int = DEFAULT_GRACE_DAYS,
    ):
        self.anchor_start = anchor_start
        self.horizon_end = horizon_end
        self.grace_days = grace_days
        self._periods = tuple(generate_biweekly_periods(anchor_start, horizon_end))
        if not self._periods:
            raise ConfigurationError(
                f"No pay periods fit between {anchor_start} and {horizon_end}"
            )
        self._by_id = {p.id: p for p in self._periods}

    @classmethod
    def from_settings(cls, settings: Any) -> PayPeriodCalendar:
        return cls(
            settings.pay_period_anchor,
            settings.pay_period_horizon,
            settings.pay_period_grace_days,
        )

    @property
    def periods(self) -> list[PayPeriod]:
        return list(self._periods)

    def lookup_by_id(self, period_id: str | None) -> PayPeriod | None:
        if not period_id:
            return None
        return self._by_id.get(period_id)

    def available_periods(self, now: date) -> list[PayPeriod]:
        """Periods still visible: end date plus the grace window is not past."""
        grace = timedelta(days=self.grace_days)
        return [p for p in self._periods if p.end_date + grace >= now]

    def current_period(self, now: date) -> PayPeriod | None:
        for period in self._periods:
            if period.contains(now):
                return period
        return None

    def default_period(self, now: date) -> PayPeriod | None:
        """Pick the period a new statement should start with.

        Order: the period containing ``now``; the earliest visible period
        starting after ``now``; the last visible period. When every period
        is past its grace window the last generated period is returned.
        """
        visible = self.available_periods(now)

        for period in visible:
            if period.contains(now):
                return period

        for period in visible:
            if period.start_date > now:
                return period

        if visible:
            return visible[-1]
        return self._periods[-1] if self._periods else None
