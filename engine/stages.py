"""
Stage Window Derivation.

Turns an anchor (heat start, heat range, ovulation, due date or placement
dates) into overlapping stage windows, each in two tiers:
1. 'full'   - conservative outer bound
2. 'likely' - central estimate, always clamped inside 'full'

Everything is anchored to ovulation. Pre-birth stages need a heat or
ovulation anchor; post-birth stages can also hang off a due date alone.
"""

import logging
from datetime import date as date_type, timedelta
from typing import Dict, Optional, Tuple, Union

from models import (
    Species, SpeciesBiology, PlanRow, DateRange, StageKey, StageWindow,
    ExpectedWindows, ExpectedMilestones, ProgramDefaults
)
from .biology import SpeciesBiologyTable, DEFAULT_TABLE

logger = logging.getLogger(__name__)


def _days(n: int) -> timedelta:
    return timedelta(days=n)


def _window(key: StageKey, full: DateRange, likely: DateRange) -> StageWindow:
    return StageWindow(key=key, full=full, likely=likely.clamp_into(full))


class StageWindowDeriver:
    """
    Derives ExpectedWindows for a species from whatever anchors are known.
    Stateless apart from the biology table it reads.
    """

    def __init__(self, table: SpeciesBiologyTable = DEFAULT_TABLE):
        self.table = table

    # --- Public API ---

    def derive_windows(self, species: Union[Species, str], cycle_start: date_type) -> ExpectedWindows:
        """All seven stages for a single known heat start."""
        return self.derive_windows_for_range(species, cycle_start, cycle_start)

    def derive_windows_for_range(
        self,
        species: Union[Species, str],
        earliest: date_type,
        latest: date_type,
        ovulation: Optional[date_type] = None
    ) -> ExpectedWindows:
        """
        Stages for a heat that starts somewhere in [earliest, latest].
        A known ovulation date replaces the offset-derived one.
        """
        bio = self.table.biology_for(species)
        if latest < earliest:
            earliest, latest = latest, earliest

        heat_center = earliest + _days((latest - earliest).days // 2)
        if ovulation is not None:
            ov_early = ov_late = ov_center = ovulation
        else:
            ov_early = earliest + _days(bio.ovulation_offset_days)
            ov_late = latest + _days(bio.ovulation_offset_days)
            ov_center = heat_center + _days(bio.ovulation_offset_days)

        stages: Dict[StageKey, StageWindow] = {}

        # --- Pre-breeding ---
        pre_full = DateRange.between(earliest, ov_late - _days(bio.breeding_pre_ovulation_days))
        pre = _window(
            StageKey.PRE_BREEDING,
            pre_full,
            DateRange.around(heat_center, bio.pre_breeding_likely_half_width_days),
        )
        stages[StageKey.PRE_BREEDING] = pre

        # --- Hormone testing ---
        testing_full = DateRange.between(earliest + _days(bio.hormone_testing_from_cycle_start_days), ov_late)
        stages[StageKey.HORMONE_TESTING] = _window(
            StageKey.HORMONE_TESTING,
            testing_full,
            DateRange.between(pre.likely.end + _days(1), pre.likely.end + _days(7)),
        )

        # --- Breeding ---
        stages[StageKey.BREEDING] = _window(
            StageKey.BREEDING,
            DateRange.between(
                ov_early - _days(bio.breeding_pre_ovulation_days),
                ov_late + _days(bio.breeding_post_ovulation_days),
            ),
            DateRange.between(ov_center, ov_center + _days(1)),
        )

        # --- Whelping onwards ---
        gestation = _days(bio.gestation_days)
        whelp_full = DateRange.around(ov_center + gestation, bio.whelping_jitter_full_days)
        whelp_likely = DateRange.around(ov_center + gestation, bio.whelping_jitter_likely_days)
        stages.update(self._post_birth_stages(bio, whelp_full, whelp_likely))

        logger.debug(f"Derived {len(stages)} stages for heat {earliest}..{latest} (ovulation {ov_center})")
        return ExpectedWindows(stages=stages, cycle_start=earliest, ovulation=ov_center)

    def derive_windows_from_birth(self, species: Union[Species, str], birth: date_type) -> ExpectedWindows:
        """Post-birth stages only, centered on an actual or locked birth date."""
        bio = self.table.biology_for(species)
        stages = self._post_birth_stages(
            bio,
            DateRange.around(birth, bio.whelping_jitter_full_days),
            DateRange.around(birth, bio.whelping_jitter_likely_days),
        )
        return ExpectedWindows(stages=stages)

    def derive_windows_for_plan(self, plan: PlanRow) -> ExpectedWindows:
        """
        Anchor precedence:
        1. locked cycle start
        2. earliest/latest cycle range
        3. expected cycle start
        A locked ovulation overrides the derived one (and back-derives a cycle
        start when none exists). A locked due date re-centers whelping and
        everything after it. Locked placement dates replace placement outright.
        """
        bio = self.table.biology_for(plan.species)

        earliest, latest = self._cycle_anchor(plan)
        ovulation = plan.locked_ovulation_date
        if earliest is None and ovulation is not None:
            earliest = latest = ovulation - _days(bio.ovulation_offset_days)

        if earliest is not None:
            windows = self.derive_windows_for_range(plan.species, earliest, latest, ovulation)
            stages = dict(windows.stages)
            cycle_start, ov_anchor = windows.cycle_start, windows.ovulation
            if plan.locked_due_date is not None:
                stages.update(self.derive_windows_from_birth(plan.species, plan.locked_due_date).stages)
        else:
            birth = plan.locked_due_date or plan.expected_birth_date
            stages = dict(self.derive_windows_from_birth(plan.species, birth).stages) if birth else {}
            cycle_start = ov_anchor = None

        placement = self._locked_placement(plan)
        if placement is not None:
            stages[StageKey.PLACEMENT_NORMAL] = StageWindow(key=StageKey.PLACEMENT_NORMAL, full=placement, likely=placement)
            extended = self._extended_after(bio, placement)
            if extended is not None:
                stages[StageKey.PLACEMENT_EXTENDED] = extended
            else:
                stages.pop(StageKey.PLACEMENT_EXTENDED, None)

        if not stages:
            logger.debug(f"Plan {plan.id} has no anchor date; no windows derived")
            return ExpectedWindows()

        return ExpectedWindows(stages=stages, cycle_start=cycle_start, ovulation=ov_anchor)

    def expected_milestones(
        self,
        species: Union[Species, str],
        cycle_start: date_type,
        program_defaults: Optional[Union[ProgramDefaults, dict]] = None
    ) -> ExpectedMilestones:
        """Point estimates from a locked heat start; program defaults may move testing, weaning and placement."""
        bio = self.table.biology_for(species)
        if isinstance(program_defaults, dict):
            program_defaults = ProgramDefaults(**program_defaults)
        prefs = program_defaults or ProgramDefaults()

        testing_days = prefs.testing_from_cycle_start_days
        if testing_days is None:
            testing_days = bio.hormone_testing_from_cycle_start_days
        wean_days = prefs.weaned_from_birth_days
        if wean_days is None:
            wean_days = bio.wean_from_birth_days
        placement_weeks = prefs.placement_start_from_birth_weeks
        if placement_weeks is None:
            placement_weeks = bio.care_weeks

        ovulation = cycle_start + _days(bio.ovulation_offset_days)
        birth = ovulation + _days(bio.gestation_days)
        placement_start = birth + _days(placement_weeks * 7)

        return ExpectedMilestones(
            cycle_start=cycle_start,
            testing_expected=cycle_start + _days(testing_days),
            ovulation=ovulation,
            breeding_expected=ovulation,
            birth_expected=birth,
            weaned_expected=birth + _days(wean_days),
            placement_start_expected=placement_start,
            placement_extended_end_expected=placement_start + _days(bio.placement_extended_weeks * 7),
        )

    # --- Helpers ---

    def _post_birth_stages(
        self,
        bio: SpeciesBiology,
        whelp_full: DateRange,
        whelp_likely: DateRange
    ) -> Dict[StageKey, StageWindow]:
        care = _days(bio.care_weeks * 7)
        stages: Dict[StageKey, StageWindow] = {}

        whelping = _window(StageKey.WHELPING, whelp_full, whelp_likely)
        stages[StageKey.WHELPING] = whelping

        stages[StageKey.PUPPY_CARE] = _window(
            StageKey.PUPPY_CARE,
            DateRange(start=whelping.full.start, end=whelping.full.end + care),
            DateRange(start=whelping.likely.start, end=whelping.likely.end + care),
        )

        placement_full = whelping.full.shift(care.days)
        placement_likely = whelping.likely.shift(care.days)
        placement = _window(
            StageKey.PLACEMENT_NORMAL,
            placement_full,
            DateRange(start=placement_likely.start - _days(1), end=placement_likely.end + _days(1)),
        )
        stages[StageKey.PLACEMENT_NORMAL] = placement

        extended = self._extended_after(bio, placement.full)
        if extended is not None:
            stages[StageKey.PLACEMENT_EXTENDED] = extended
        return stages

    @staticmethod
    def _extended_after(bio: SpeciesBiology, placement: DateRange) -> Optional[StageWindow]:
        if bio.placement_extended_weeks <= 0:
            return None
        rng = DateRange(
            start=placement.end + _days(1),
            end=placement.end + _days(bio.placement_extended_weeks * 7),
        )
        return StageWindow(key=StageKey.PLACEMENT_EXTENDED, full=rng, likely=rng)

    @staticmethod
    def _cycle_anchor(plan: PlanRow) -> Tuple[Optional[date_type], Optional[date_type]]:
        if plan.locked_cycle_start is not None:
            return plan.locked_cycle_start, plan.locked_cycle_start
        if plan.earliest_cycle_start is not None or plan.latest_cycle_start is not None:
            earliest = plan.earliest_cycle_start or plan.latest_cycle_start
            latest = plan.latest_cycle_start or plan.earliest_cycle_start
            return earliest, latest
        if plan.expected_cycle_start is not None:
            return plan.expected_cycle_start, plan.expected_cycle_start
        return None, None

    @staticmethod
    def _locked_placement(plan: PlanRow) -> Optional[DateRange]:
        start = plan.locked_placement_start_date
        end = plan.locked_placement_completed_date
        if start is None and end is None:
            return None
        return DateRange.between(start or end, end or start)


DEFAULT_DERIVER = StageWindowDeriver()


def derive_windows(species: Union[Species, str], cycle_start: date_type) -> ExpectedWindows:
    return DEFAULT_DERIVER.derive_windows(species, cycle_start)


def derive_windows_for_plan(plan: PlanRow) -> ExpectedWindows:
    return DEFAULT_DERIVER.derive_windows_for_plan(plan)


def derive_windows_from_birth(species: Union[Species, str], birth: date_type) -> ExpectedWindows:
    return DEFAULT_DERIVER.derive_windows_from_birth(species, birth)


def expected_milestones(
    species: Union[Species, str],
    cycle_start: date_type,
    program_defaults: Optional[Union[ProgramDefaults, dict]] = None
) -> ExpectedMilestones:
    return DEFAULT_DERIVER.expected_milestones(species, cycle_start, program_defaults)
