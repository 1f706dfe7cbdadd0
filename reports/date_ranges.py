"""
Date-Range Resolver

Maps a filter token from the dashboard to a concrete, inclusive date range
anchored on the caller's current date:

    today  -> [today, today]
    week   -> [today - 7 days, today]        rolling window, not ISO week
    month  -> [same day last month, today]   calendar subtraction
    year   -> [same day last year, today]
    other  -> unbounded (all records)

Resolved on every request: nothing here is cached.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta
from django.db import models
from django.utils import timezone


class FilterToken(models.TextChoices):
    TODAY = 'today', 'Today'
    WEEK = 'week', 'Last 7 days'
    MONTH = 'month', 'Last month'
    YEAR = 'year', 'Last year'


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range. None on a side means unbounded."""
    since: Optional[date] = None
    until: Optional[date] = None

    @property
    def is_unbounded(self) -> bool:
        return self.since is None and self.until is None

    def contains(self, day: date) -> bool:
        if self.since is not None and day < self.since:
            return False
        if self.until is not None and day > self.until:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            'since': self.since.isoformat() if self.since else None,
            'until': self.until.isoformat() if self.until else None,
        }


UNBOUNDED = DateRange()


def _as_local_date(now: Union[date, datetime, None]) -> date:
    if now is None:
        return timezone.localdate()
    if isinstance(now, datetime):
        if timezone.is_aware(now):
            return timezone.localdate(now)
        return now.date()
    return now


def resolve_range(token: Optional[str], now: Union[date, datetime, None] = None) -> DateRange:
    """
    Resolve a filter token to a DateRange.

    Args:
        token: 'today', 'week', 'month', 'year'; anything else is unbounded
        now: Anchor date or datetime (default: current local date)

    Returns:
        DateRange with inclusive bounds
    """
    today = _as_local_date(now)
    token = (token or '').strip().lower()

    if token == FilterToken.TODAY:
        return DateRange(since=today, until=today)
    if token == FilterToken.WEEK:
        return DateRange(since=today - timedelta(days=7), until=today)
    if token == FilterToken.MONTH:
        return DateRange(since=today - relativedelta(months=1), until=today)
    if token == FilterToken.YEAR:
        return DateRange(since=today - relativedelta(years=1), until=today)
    return UNBOUNDED
