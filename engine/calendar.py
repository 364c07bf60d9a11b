"""
Calendar export.

Flattens tagged windows and bands into all-day calendar events.
Calendar widgets treat 'end' as exclusive, so every inclusive range
gets one day added on the way out.
"""

from datetime import timedelta
from typing import List, Sequence

from models import TaggedWindow, AvailabilityBand, CalendarEvent, DateRange

TIER_LABELS = {"full": "Full", "likely": "Likely"}


def _event(event_id: str, title: str, rng: DateRange, meta: dict) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        title=title,
        start=rng.start,
        end=rng.end + timedelta(days=1),
        all_day=True,
        meta=meta,
    )


def to_calendar_events(rows: Sequence[TaggedWindow], bands: Sequence[AvailabilityBand]) -> List[CalendarEvent]:
    events: List[CalendarEvent] = []

    for row in rows:
        w = row.data
        for tier, label in TIER_LABELS.items():
            events.append(_event(
                f"{row.owner_plan_id}:{w.key.value}:{tier}",
                f"{w.label} ({label})",
                getattr(w, tier),
                {"stage": w.key.value, "type": tier, "plan_id": row.owner_plan_id, "color": row.color_tag},
            ))

    for band in bands:
        b = band.data
        events.append(_event(
            f"{band.owner_plan_id}:availability:{b.kind.value}:{b.range.start.isoformat()}",
            b.label or f"Travel {b.kind.value.title()}",
            b.range,
            {"stage": "availability", "type": b.kind.value, "plan_id": band.owner_plan_id, "color": band.color_tag},
        ))

    return events
