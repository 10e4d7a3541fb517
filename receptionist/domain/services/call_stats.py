"""Daily and weekly call statistics for the clinic dashboard.

Pure functions over ``CallRecord`` lists. All bucketing uses the server's
local calendar day; "now" is read once per computation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from receptionist.domain.models.call_record import CallRecord

WEEKLY_DAYS = 7


@dataclass(frozen=True)
class DailyCount:
    date: str  # YYYY-MM-DD
    count: int = 0


@dataclass(frozen=True)
class CallStats:
    """Dashboard summary for one clinic."""

    total_calls_today: int = 0
    new_patients_today: int = 0
    existing_patients_today: int = 0
    intake_links_sent: int = 0
    callbacks_needed: int = 0
    weekly_data: list[DailyCount] = field(default_factory=list)


def _local_date(timestamp: datetime, tz) -> date:
    """Calendar date of ``timestamp`` in the server's local zone."""
    if timestamp.tzinfo is None:
        return timestamp.date()
    return timestamp.astimezone(tz).date()


def weekly_keys(today: date) -> list[str]:
    """ISO dates from six days ago through today, oldest first."""
    return [
        (today - timedelta(days=offset)).isoformat()
        for offset in range(WEEKLY_DAYS - 1, -1, -1)
    ]


def compute_stats(records: list[CallRecord], now: datetime | None = None) -> CallStats:
    """Compute today's counts and the trailing seven-day series.

    Records without a parseable creation time are left out of every count.

    Args:
        records: Call records of a single clinic
        now: Reference instant; defaults to the current local time

    Returns:
        CallStats for the day containing ``now``
    """
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    local_tz = now.tzinfo
    today = now.date()

    dated = [
        (record, _local_date(record.created_at, local_tz))
        for record in records
        if record.created_at is not None
    ]
    today_records = [record for record, day in dated if day == today]

    weekly = {key: 0 for key in weekly_keys(today)}
    for _, day in dated:
        key = day.isoformat()
        if key in weekly:
            weekly[key] += 1

    return CallStats(
        total_calls_today=len(today_records),
        new_patients_today=sum(1 for r in today_records if r.patient_type == "new"),
        existing_patients_today=sum(1 for r in today_records if r.patient_type == "existing"),
        intake_links_sent=sum(1 for r in today_records if r.intake_url_sent),
        callbacks_needed=sum(1 for r in today_records if r.needs_callback),
        weekly_data=[DailyCount(date=key, count=count) for key, count in weekly.items()],
    )
