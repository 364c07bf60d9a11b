"""
Cycle statistics and projection result models.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type

from .biology import Species


class CycleLengthSource(str, Enum):
    """Where an effective cycle length came from."""
    OVERRIDE = "OVERRIDE"
    HISTORY = "HISTORY"
    BIOLOGY = "BIOLOGY"


class SeedType(str, Enum):
    """What the first projected cycle was stepped from."""
    LAST_KNOWN = "LAST_KNOWN"
    BUFFERED_TODAY = "BUFFERED_TODAY"


class CycleSummary(BaseModel):
    """Inter-cycle statistics for one female."""
    model_config = ConfigDict(frozen=True)

    sample_size: int = Field(ge=0, description="Number of heat starts observed")
    gaps: List[int] = Field(default_factory=list, description="Day deltas between consecutive heat starts")
    avg_last_n: Optional[int] = None
    avg_all: Optional[int] = None


class CycleLengthResolution(BaseModel):
    """Effective cycle length and how it was chosen."""
    model_config = ConfigDict(frozen=True)

    days: int = Field(gt=0)
    source: CycleLengthSource
    gaps_used_days: List[int] = Field(default_factory=list)
    warning_conflict: bool = Field(
        default=False,
        description="True when an override disagrees with the observed history by more than the threshold"
    )


class ProjectionExplain(BaseModel):
    model_config = ConfigDict(frozen=True)

    species: Species
    seed_type: SeedType
    cycle_length_days: int


class ProjectedCycle(BaseModel):
    """A projected cycle start plus the reasoning behind it."""
    model_config = ConfigDict(frozen=True)

    date: date_type
    source: CycleLengthSource
    explain: ProjectionExplain


class ProgramDefaults(BaseModel):
    """Breeding-program level overrides for milestone timing. Unset fields fall back to species biology."""
    model_config = ConfigDict(frozen=True)

    placement_start_from_birth_weeks: Optional[int] = Field(default=None, ge=0)
    weaned_from_birth_days: Optional[int] = Field(default=None, ge=0)
    testing_from_cycle_start_days: Optional[int] = Field(default=None, ge=0)


class ExpectedMilestones(BaseModel):
    """Single expected dates derived from a locked cycle start."""
    model_config = ConfigDict(frozen=True)

    cycle_start: date_type
    testing_expected: date_type
    ovulation: date_type
    breeding_expected: date_type
    birth_expected: date_type
    weaned_expected: date_type
    placement_start_expected: date_type
    placement_completed_expected: Optional[date_type] = Field(
        default=None,
        description="Learned from placement history, never from biology alone"
    )
    placement_extended_end_expected: date_type
