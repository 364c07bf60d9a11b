"""
Cycle Projector.

Uniform-step projection of future heat starts. No seasonal or irregular
modeling: every projected date is the previous one plus the effective
cycle length.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from models import Species, ProjectedCycle, ProjectionExplain, SeedType, CycleLengthResolution
from .biology import SpeciesBiologyTable, DEFAULT_TABLE
from .statistics import CycleLengthResolver, DEFAULT_LAST_N

logger = logging.getLogger(__name__)


class CycleProjector:
    """
    Projects upcoming cycle starts for one species.
    'today' is always supplied by the caller so projections stay reproducible.
    """

    def __init__(self, table: SpeciesBiologyTable = DEFAULT_TABLE, last_n: int = DEFAULT_LAST_N):
        self.table = table
        self.resolver = CycleLengthResolver(table, last_n)

    def resolve_seed(self, species: Species, last_known_start: Optional[date], today: date) -> date:
        """Last known heat start, or today pushed out by the species start buffer."""
        if last_known_start is not None:
            return last_known_start
        return today + timedelta(days=self.table.get_defaults(species).start_buffer_days)

    def project_upcoming_cycles(
        self,
        species: Species,
        last_known_start: Optional[date],
        all_known_starts: Sequence[date],
        count: int,
        today: date,
        override_days: Optional[float] = None
    ) -> List[date]:
        return [p.date for p in self.project_cycle_details(
            species, last_known_start, all_known_starts, count, today, override_days
        )]

    def project_cycle_details(
        self,
        species: Species,
        last_known_start: Optional[date],
        all_known_starts: Sequence[date],
        count: int,
        today: date,
        override_days: Optional[float] = None
    ) -> List[ProjectedCycle]:
        """Same projection as project_upcoming_cycles, with source/explain metadata per date."""
        if count < 0:
            raise ValueError(f"Projection count must be >= 0, got {count}")

        species = Species.parse(species)
        resolution = self.resolver.resolve(species, all_known_starts, override_days)
        seed = self.resolve_seed(species, last_known_start, today)
        explain = ProjectionExplain(
            species=species,
            seed_type=SeedType.LAST_KNOWN if last_known_start is not None else SeedType.BUFFERED_TODAY,
            cycle_length_days=resolution.days,
        )

        step = timedelta(days=resolution.days)
        out: List[ProjectedCycle] = []
        current = seed
        for _ in range(count):
            current = current + step
            out.append(ProjectedCycle(date=current, source=resolution.source, explain=explain))

        logger.debug(
            f"Projected {count} cycles for {species.value} from {seed} "
            f"every {resolution.days}d ({resolution.source.value})"
        )
        return out

    def effective_cycle_length(
        self,
        species: Species,
        all_known_starts: Sequence[date],
        override_days: Optional[float] = None
    ) -> CycleLengthResolution:
        return self.resolver.resolve(species, all_known_starts, override_days)


def project_upcoming_cycles(
    species: Species,
    last_known_start: Optional[date],
    all_known_starts: Sequence[date],
    count: int,
    today: date,
    override_days: Optional[float] = None
) -> List[date]:
    return CycleProjector().project_upcoming_cycles(
        species, last_known_start, all_known_starts, count, today, override_days
    )
