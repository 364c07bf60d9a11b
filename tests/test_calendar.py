from datetime import date

from engine.aggregator import stage_rows_for_plan, availability_for_plan
from engine.calendar import to_calendar_events


def test_events_for_one_plan(dog_plan, wide_horizon):
    rows = stage_rows_for_plan(dog_plan)
    bands = availability_for_plan(dog_plan, rows, wide_horizon)

    events = to_calendar_events(rows, bands)
    by_id = {e.id: e for e in events}

    assert len(events) == 7 * 2 + 4
    whelping = by_id["plan_001:whelping:full"]
    assert whelping.title == "Whelping (Full)"
    # End is exclusive
    assert (whelping.start, whelping.end) == (date(2025, 3, 15), date(2025, 3, 20))
    assert whelping.all_day is True
    assert whelping.meta["plan_id"] == "plan_001"

    risky = by_id["plan_001:availability:risky:2025-01-08"]
    assert risky.end == date(2025, 1, 16)
    assert risky.meta["type"] == "risky"


def test_no_inputs_no_events():
    assert to_calendar_events([], []) == []
