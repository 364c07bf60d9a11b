from datetime import date

import pytest

from engine.stages import (
    StageWindowDeriver, derive_windows, derive_windows_for_plan, derive_windows_from_birth, expected_milestones
)
from models import PlanRow, Species, StageKey, STAGE_ORDER


def span(window, tier="full"):
    rng = getattr(window, tier)
    return rng.start, rng.end


def test_dog_scenario(dog_windows):
    w = dog_windows
    assert w.cycle_start == date(2025, 1, 1)
    assert w.ovulation == date(2025, 1, 13)
    assert span(w.get(StageKey.WHELPING)) == (date(2025, 3, 15), date(2025, 3, 19))
    assert span(w.get(StageKey.WHELPING), "likely") == (date(2025, 3, 16), date(2025, 3, 18))
    assert span(w.get(StageKey.PUPPY_CARE)) == (date(2025, 3, 15), date(2025, 5, 14))


def test_dog_pre_birth_stages(dog_windows):
    w = dog_windows
    assert span(w.get(StageKey.PRE_BREEDING)) == (date(2025, 1, 1), date(2025, 1, 12))
    assert span(w.get(StageKey.PRE_BREEDING), "likely") == (date(2025, 1, 1), date(2025, 1, 6))
    assert span(w.get(StageKey.HORMONE_TESTING)) == (date(2025, 1, 8), date(2025, 1, 13))
    assert span(w.get(StageKey.BREEDING)) == (date(2025, 1, 12), date(2025, 1, 15))
    assert span(w.get(StageKey.BREEDING), "likely") == (date(2025, 1, 13), date(2025, 1, 14))


def test_dog_placement_stages(dog_windows):
    w = dog_windows
    assert span(w.get(StageKey.PLACEMENT_NORMAL)) == (date(2025, 5, 10), date(2025, 5, 14))
    assert span(w.get(StageKey.PLACEMENT_NORMAL), "likely") == (date(2025, 5, 10), date(2025, 5, 14))
    assert span(w.get(StageKey.PLACEMENT_EXTENDED)) == (date(2025, 5, 15), date(2025, 6, 4))


def test_rows_in_display_order(dog_windows):
    assert [r.key for r in dog_windows.rows()] == STAGE_ORDER


@pytest.mark.parametrize("species", list(Species))
def test_likely_inside_full_for_every_species(species):
    for row in derive_windows(species, date(2025, 1, 1)).rows():
        assert row.full.contains(row.likely), row.key


def test_heat_range_widens_pre_birth_windows_only():
    w = StageWindowDeriver().derive_windows_for_range(Species.DOG, date(2025, 1, 1), date(2025, 1, 11))
    assert w.ovulation == date(2025, 1, 18)
    assert span(w.get(StageKey.PRE_BREEDING)) == (date(2025, 1, 1), date(2025, 1, 22))
    assert span(w.get(StageKey.BREEDING)) == (date(2025, 1, 12), date(2025, 1, 25))
    # Whelping centers on the mid-heat ovulation, it does not stretch with the range
    assert span(w.get(StageKey.WHELPING)) == (date(2025, 3, 20), date(2025, 3, 24))
    assert span(w.get(StageKey.WHELPING), "likely") == (date(2025, 3, 21), date(2025, 3, 23))
    assert span(w.get(StageKey.PUPPY_CARE)) == (date(2025, 3, 20), date(2025, 5, 19))
    assert span(w.get(StageKey.PLACEMENT_NORMAL)) == (date(2025, 5, 15), date(2025, 5, 19))
    assert span(w.get(StageKey.PLACEMENT_EXTENDED)) == (date(2025, 5, 20), date(2025, 6, 9))


def test_from_birth_only_has_post_birth_stages():
    w = derive_windows_from_birth(Species.DOG, date(2025, 3, 17))
    assert set(w.stages) == {
        StageKey.WHELPING, StageKey.PUPPY_CARE, StageKey.PLACEMENT_NORMAL, StageKey.PLACEMENT_EXTENDED
    }
    assert span(w.get(StageKey.WHELPING)) == (date(2025, 3, 15), date(2025, 3, 19))


def test_plan_without_anchor_has_no_windows():
    w = derive_windows_for_plan(PlanRow(id="p", expected_next_cycle_start=date(2025, 6, 1)))
    assert w.is_empty
    assert w.rows() == []


def test_locked_cycle_beats_expected_cycle():
    plan = PlanRow(id="p", locked_cycle_start=date(2025, 1, 1), expected_cycle_start=date(2025, 2, 1))
    assert derive_windows_for_plan(plan).cycle_start == date(2025, 1, 1)


def test_expected_cycle_used_when_nothing_locked():
    plan = PlanRow(id="p", expected_cycle_start=date(2025, 2, 1))
    assert derive_windows_for_plan(plan).cycle_start == date(2025, 2, 1)


def test_locked_ovulation_back_derives_cycle_start():
    w = derive_windows_for_plan(PlanRow(id="p", locked_ovulation_date=date(2025, 1, 15)))
    assert w.cycle_start == date(2025, 1, 3)
    assert w.ovulation == date(2025, 1, 15)
    assert span(w.get(StageKey.BREEDING)) == (date(2025, 1, 14), date(2025, 1, 17))


def test_locked_due_date_only_gives_post_birth_stages():
    w = derive_windows_for_plan(PlanRow(id="p", locked_due_date=date(2025, 3, 17)))
    assert w.get(StageKey.BREEDING) is None
    assert w.cycle_start is None
    assert span(w.get(StageKey.WHELPING)) == (date(2025, 3, 15), date(2025, 3, 19))


def test_locked_due_date_recenters_whelping():
    plan = PlanRow(id="p", locked_cycle_start=date(2025, 1, 1), locked_due_date=date(2025, 3, 20))
    w = derive_windows_for_plan(plan)
    assert span(w.get(StageKey.BREEDING)) == (date(2025, 1, 12), date(2025, 1, 15))
    assert span(w.get(StageKey.WHELPING)) == (date(2025, 3, 18), date(2025, 3, 22))


def test_locked_placement_overrides_normal_and_reanchors_extended():
    plan = PlanRow(
        id="p",
        locked_cycle_start=date(2025, 1, 1),
        locked_placement_start_date=date(2025, 5, 20),
        locked_placement_completed_date=date(2025, 6, 1),
    )
    w = derive_windows_for_plan(plan)
    normal = w.get(StageKey.PLACEMENT_NORMAL)
    assert span(normal) == span(normal, "likely") == (date(2025, 5, 20), date(2025, 6, 1))
    assert span(w.get(StageKey.PLACEMENT_EXTENDED)) == (date(2025, 6, 2), date(2025, 6, 22))


def test_expected_milestones_dog():
    m = expected_milestones(Species.DOG, date(2025, 1, 1))
    assert m.testing_expected == date(2025, 1, 8)
    assert m.ovulation == m.breeding_expected == date(2025, 1, 13)
    assert m.birth_expected == date(2025, 3, 17)
    assert m.weaned_expected == date(2025, 4, 28)
    assert m.placement_start_expected == date(2025, 5, 12)
    assert m.placement_extended_end_expected == date(2025, 6, 2)
    assert m.placement_completed_expected is None


def test_expected_milestones_program_defaults():
    m = expected_milestones(
        Species.DOG, date(2025, 1, 1),
        {"weaned_from_birth_days": 49, "placement_start_from_birth_weeks": 10}
    )
    assert m.weaned_expected == date(2025, 5, 5)
    assert m.placement_start_expected == date(2025, 5, 26)
