"""
Per-Female Cycle Planner.

Composes biology, cycle statistics, projection and stage derivation for
one female, the way the plan-creation workflow needs them: how long her
cycles run, when the next ones fall, and what a locked cycle implies.
"""

import logging
from dataclasses import dataclass
from datetime import date as date_type
from typing import List, Optional, Sequence, Union

from models import (
    Species, ReproEvent, CycleDefaults, CycleLengthResolution, ProjectedCycle,
    ExpectedMilestones, ExpectedWindows, TravelBand, Horizon, heat_starts
)
from .biology import SpeciesBiologyTable, DEFAULT_TABLE
from .statistics import average_cycle_length, DEFAULT_LAST_N
from .projector import CycleProjector
from .stages import StageWindowDeriver
from .availability import AvailabilityBandComputer

logger = logging.getLogger(__name__)


@dataclass
class LockedCycleProjection:
    """Everything a locked heat start implies."""
    cycle_start: date_type
    milestones: ExpectedMilestones
    windows: ExpectedWindows
    bands: List[TravelBand]


class CyclePlanner:
    """
    Read-only view over one female's history.
    Every property is recomputed from the inputs; nothing is cached.
    """

    def __init__(
        self,
        species: Union[Species, str],
        events: Sequence[ReproEvent],
        last_actual_heat_start: Optional[date_type] = None,
        future_count: int = 12,
        override_days: Optional[float] = None,
        *,
        today: date_type,
        table: SpeciesBiologyTable = DEFAULT_TABLE,
        last_n: int = DEFAULT_LAST_N
    ):
        if future_count < 0:
            raise ValueError(f"future_count must be >= 0, got {future_count}")

        self.species = Species.parse(species)
        self.events = list(events)
        self.last_actual_heat_start = last_actual_heat_start
        self.future_count = future_count
        self.override_days = override_days
        self.today = today
        self.last_n = last_n

        self.table = table
        self.projector = CycleProjector(table, last_n)
        self.deriver = StageWindowDeriver(table)
        self.band_computer = AvailabilityBandComputer()

    # --- History ---

    @property
    def heat_starts(self) -> List[date_type]:
        return heat_starts(self.events)

    @property
    def last_known_start(self) -> Optional[date_type]:
        """Explicit last heat start, else the latest recorded one."""
        if self.last_actual_heat_start is not None:
            return self.last_actual_heat_start
        starts = self.heat_starts
        return starts[-1] if starts else None

    # --- Cycle length ---

    @property
    def defaults(self) -> CycleDefaults:
        return self.table.get_defaults(self.species)

    @property
    def average_cycle_length(self) -> Optional[int]:
        return average_cycle_length(self.heat_starts, self.last_n)

    @property
    def resolution(self) -> CycleLengthResolution:
        return self.projector.effective_cycle_length(self.species, self.heat_starts, self.override_days)

    @property
    def effective_cycle_length(self) -> int:
        return self.resolution.days

    # --- Projection ---

    @property
    def projected_cycles(self) -> List[ProjectedCycle]:
        return self.projector.project_cycle_details(
            self.species, self.last_known_start, self.heat_starts,
            self.future_count, self.today, self.override_days
        )

    def next_cycle_start(self) -> date_type:
        return self.projector.project_upcoming_cycles(
            self.species, self.last_known_start, self.heat_starts, 1, self.today, self.override_days
        )[0]

    def compute_from_locked(self, cycle_start: date_type) -> LockedCycleProjection:
        windows = self.deriver.derive_windows(self.species, cycle_start)
        rows = windows.rows()
        # Horizon only filters bands ending before it; open it at the earliest window
        horizon = Horizon(start=min(w.full.start for w in rows), end=max(w.full.end for w in rows))
        bands = self.band_computer.compute_bands(windows, horizon)

        logger.debug(f"Locked {self.species.value} cycle {cycle_start}: {len(rows)} stages, {len(bands)} bands")
        return LockedCycleProjection(
            cycle_start=cycle_start,
            milestones=self.deriver.expected_milestones(self.species, cycle_start),
            windows=windows,
            bands=bands,
        )
