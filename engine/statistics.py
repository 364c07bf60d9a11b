"""
Cycle Statistics.

Learns a female's cycle length from her recorded heat starts.
Too little history is a normal outcome (None), never an error.
"""

import logging
import math
from datetime import date
from typing import List, Optional, Sequence

from models import Species, CycleSummary, CycleLengthResolution, CycleLengthSource
from .biology import SpeciesBiologyTable, DEFAULT_TABLE

logger = logging.getLogger(__name__)

MIN_HEAT_STARTS = 3
DEFAULT_LAST_N = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def cycle_gaps(heat_starts_ascending: Sequence[date]) -> List[int]:
    """Day deltas between consecutive heat starts."""
    return [(b - a).days for a, b in zip(heat_starts_ascending, heat_starts_ascending[1:])]


def average_cycle_length(heat_starts_ascending: Sequence[date], last_n: int = DEFAULT_LAST_N) -> Optional[int]:
    """
    Average of the most recent `last_n` inter-cycle gaps, rounded to the nearest day.
    Returns None with fewer than 3 heat starts.
    The caller is responsible for sorting ascending and de-duplicating.
    """
    if last_n < 1:
        raise ValueError(f"last_n must be >= 1, got {last_n}")
    if len(heat_starts_ascending) < MIN_HEAT_STARTS:
        return None

    recent = cycle_gaps(heat_starts_ascending)[-last_n:]
    return _round_half_up(sum(recent) / len(recent))


def summarize_cycles(heat_starts_ascending: Sequence[date], last_n: int = DEFAULT_LAST_N) -> CycleSummary:
    """Gap list plus last-N and all-time averages."""
    gaps = cycle_gaps(heat_starts_ascending)
    avg_all = None
    if len(heat_starts_ascending) >= MIN_HEAT_STARTS:
        avg_all = _round_half_up(sum(gaps) / len(gaps))

    return CycleSummary(
        sample_size=len(heat_starts_ascending),
        gaps=gaps,
        avg_last_n=average_cycle_length(heat_starts_ascending, last_n),
        avg_all=avg_all,
    )


class CycleLengthResolver:
    """
    Picks the effective cycle length for one female.
    Precedence: positive per-female override -> learned history -> species default.
    """

    # Override vs. history disagreement that should be surfaced to the breeder
    CONFLICT_THRESHOLD = 0.20

    def __init__(self, table: SpeciesBiologyTable = DEFAULT_TABLE, last_n: int = DEFAULT_LAST_N):
        self.table = table
        self.last_n = last_n

    def resolve(
        self,
        species: Species,
        heat_starts_ascending: Sequence[date],
        override_days: Optional[float] = None
    ) -> CycleLengthResolution:
        gaps = cycle_gaps(heat_starts_ascending)
        learned = average_cycle_length(heat_starts_ascending, self.last_n)

        if override_days is not None and math.isfinite(override_days) and override_days > 0:
            days = max(1, _round_half_up(override_days))
            conflict = bool(learned) and abs(days - learned) / learned > self.CONFLICT_THRESHOLD
            if conflict:
                logger.info(f"Cycle override {days}d differs from learned {learned}d by more than 20%")
            return CycleLengthResolution(
                days=days, source=CycleLengthSource.OVERRIDE,
                gaps_used_days=gaps, warning_conflict=conflict
            )

        if learned is not None and learned > 0:
            return CycleLengthResolution(days=learned, source=CycleLengthSource.HISTORY, gaps_used_days=gaps)

        return CycleLengthResolution(
            days=self.table.get_defaults(species).cycle_length_days,
            source=CycleLengthSource.BIOLOGY,
            gaps_used_days=gaps,
        )


def resolve_cycle_length(
    species: Species,
    heat_starts_ascending: Sequence[date],
    override_days: Optional[float] = None,
    last_n: int = DEFAULT_LAST_N
) -> CycleLengthResolution:
    return CycleLengthResolver(last_n=last_n).resolve(species, heat_starts_ascending, override_days)
