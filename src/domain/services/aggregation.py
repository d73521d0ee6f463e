"""Activity aggregation pipeline.

Turns one live-update snapshot of a user's activity collection into the
ordered list, today's view and the dashboard statistics. Each snapshot is a
full replacement, so the functions here are pure: same snapshot and same
``today`` string, same summary.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from domain.entities.activity import ActivityRecord
from domain.entities.view import ActivitySummary

logger = structlog.get_logger()

Snapshot = Mapping[str, Any] | None


def materialize(snapshot: Snapshot) -> list[ActivityRecord]:
    """Decode every entry of a snapshot into an ``ActivityRecord``.

    Entries that fail validation are dropped; an empty or missing snapshot
    yields an empty list.
    """
    if not snapshot:
        return []

    records: list[ActivityRecord] = []
    for key, raw in snapshot.items():
        try:
            records.append(ActivityRecord.decode(key, raw))
        except ValidationError as exc:
            logger.warning(
                "activity_record_rejected",
                record_id=key,
                errors=[".".join(str(x) for x in e["loc"]) for e in exc.errors()],
            )
    return records


def sort_by_recency(records: list[ActivityRecord]) -> list[ActivityRecord]:
    """Newest first. Equal timestamps keep their input order."""
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def filter_day(records: list[ActivityRecord], day: str) -> list[ActivityRecord]:
    """Records whose captured ``date`` string is exactly ``day``."""
    return [r for r in records if r.date == day]


def aggregate(snapshot: Snapshot, today: str) -> ActivitySummary:
    """Run the full pipeline.

    Args:
        snapshot: Mapping of record id to raw fields, or None for an empty
            collection.
        today: Calendar-day string for the current moment, in the same
            format the records' ``date`` field was captured in.

    Returns:
        The ordered records, today's subset and the three counters.
    """
    ordered_all = sort_by_recency(materialize(snapshot))
    todays = filter_day(ordered_all, today)

    return ActivitySummary(
        ordered_all=ordered_all,
        today=todays,
        activities_today=len(todays),
        total_activities=len(ordered_all),
        active_days=len({r.date for r in ordered_all}),
    )
