"""Reporting periods used by order and revenue queries."""

from datetime import UTC, datetime, timedelta

PERIODS = ("today", "week", "month")


def period_start(period: str | None, now: datetime | None = None) -> datetime | None:
    """Start of ``period`` relative to ``now``; None means all time.

    ``today`` starts at midnight, ``week`` is the trailing seven days and
    ``month`` starts on the first of the calendar month.
    """
    now = now or datetime.now(UTC)
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def as_aware(moment: datetime | None) -> datetime | None:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
