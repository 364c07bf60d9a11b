from datetime import date, timedelta

import pytest

from engine.projector import CycleProjector, project_upcoming_cycles
from models import Species, SeedType, CycleLengthSource


def test_projects_from_last_known_start():
    got = project_upcoming_cycles(Species.DOG, date(2025, 1, 1), [], 3, today=date(2025, 6, 1))
    assert got[0] == date(2025, 6, 30)
    assert got[1] - got[0] == timedelta(days=180)
    assert got[2] - got[1] == timedelta(days=180)


def test_horse_without_history_uses_buffered_today_and_default_length():
    got = project_upcoming_cycles(Species.HORSE, None, [], 2, today=date(2025, 3, 1))
    # seed = today + 7 day buffer, step = 21
    assert got == [date(2025, 3, 29), date(2025, 4, 19)]


def test_history_average_drives_step():
    history = [date(2024, 1, 1), date(2024, 7, 1), date(2025, 1, 1)]
    got = project_upcoming_cycles(Species.DOG, history[-1], history, 2, today=date(2025, 2, 1))
    assert got == [date(2025, 7, 3), date(2026, 1, 2)]


def test_zero_count_is_empty():
    assert project_upcoming_cycles(Species.DOG, date(2025, 1, 1), [], 0, today=date(2025, 1, 1)) == []


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        project_upcoming_cycles(Species.DOG, date(2025, 1, 1), [], -1, today=date(2025, 1, 1))


def test_details_explain_seed_and_source():
    details = CycleProjector().project_cycle_details(Species.CAT, None, [], 2, today=date(2025, 1, 1))
    assert len(details) == 2
    assert details[0].source == CycleLengthSource.BIOLOGY
    assert details[0].explain.seed_type == SeedType.BUFFERED_TODAY
    assert details[0].explain.cycle_length_days == 60
    assert details[0].date == date(2025, 1, 1) + timedelta(days=7 + 60)


def test_override_sets_step():
    got = project_upcoming_cycles(Species.DOG, date(2025, 1, 1), [], 2, today=date(2025, 1, 1), override_days=150)
    assert got == [date(2025, 5, 31), date(2025, 10, 28)]
