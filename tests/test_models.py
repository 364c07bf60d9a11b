from datetime import date

import pytest
from pydantic import ValidationError

from models import (
    DateRange, StageKey, StageWindow, Species, PlanRow, ReproEvent, ReproEventKind,
    TaggedWindow, heat_starts
)


def test_date_range_rejects_reversed_endpoints():
    with pytest.raises(ValidationError):
        DateRange(start=date(2025, 1, 2), end=date(2025, 1, 1))


def test_date_range_between_swaps_and_counts_inclusive_days():
    rng = DateRange.between(date(2025, 1, 10), date(2025, 1, 1))
    assert rng.start == date(2025, 1, 1)
    assert rng.days == 10


def test_clamp_into_pulls_both_ends_inside():
    outer = DateRange(start=date(2025, 1, 5), end=date(2025, 1, 10))
    clamped = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 7)).clamp_into(outer)
    assert (clamped.start, clamped.end) == (date(2025, 1, 5), date(2025, 1, 7))


def test_stage_window_requires_likely_inside_full():
    with pytest.raises(ValidationError):
        StageWindow(
            key=StageKey.BREEDING,
            full=DateRange(start=date(2025, 1, 5), end=date(2025, 1, 8)),
            likely=DateRange(start=date(2025, 1, 4), end=date(2025, 1, 6)),
        )


@pytest.mark.parametrize("raw", ["Dog", "dog", "DOG", " dog "])
def test_species_parse_is_case_insensitive(raw):
    assert Species.parse(raw) is Species.DOG


def test_species_parse_unknown_falls_back_to_other():
    assert Species.parse("unicorn") is Species.OTHER
    assert Species.parse(None) is Species.OTHER


def test_heat_starts_sorted_and_deduplicated():
    events = [
        ReproEvent(kind=ReproEventKind.HEAT_START, date=date(2025, 1, 1)),
        ReproEvent(kind=ReproEventKind.BIRTH, date=date(2024, 9, 1)),
        ReproEvent(kind=ReproEventKind.HEAT_START, date=date(2024, 7, 1)),
        ReproEvent(kind=ReproEventKind.HEAT_START, date=date(2025, 1, 1)),
    ]
    assert heat_starts(events) == [date(2024, 7, 1), date(2025, 1, 1)]


def test_plan_row_accepts_camel_case_and_numeric_id():
    plan = PlanRow(**{"id": 7, "species": "cat", "lockedCycleStart": "2025-01-01", "lockedDueDate": "2025-03-08"})
    assert plan.id == "7"
    assert plan.species is Species.CAT
    assert plan.locked_cycle_start == date(2025, 1, 1)
    assert plan.locked_due_date == date(2025, 3, 8)


def test_plan_row_rejects_inverted_cycle_range():
    with pytest.raises(ValidationError):
        PlanRow(id="p", earliest_cycle_start=date(2025, 2, 1), latest_cycle_start=date(2025, 1, 1))


def test_tagged_requires_owner(dog_windows):
    with pytest.raises(ValidationError):
        TaggedWindow(data=dog_windows.rows()[0], owner_plan_id="", color_tag="hsl(0, 65%, 50%)")
