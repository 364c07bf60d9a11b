"""
Timeline data models for the Breeding Timeline Engine.

This module defines the 'Output' of the engine:
1. Date ranges and the display Horizon
2. Stage windows in two confidence tiers (full / likely)
3. Availability (travel) bands
4. The Tagged wrapper that binds any output to its owning plan
"""

from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import date, timedelta


class DateRange(BaseModel):
    """Inclusive calendar range."""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self):
        if self.end < self.start:
            raise ValueError("Range end cannot be before range start")
        return self

    @classmethod
    def between(cls, a: date, b: date) -> "DateRange":
        """Build a range from two endpoints in either order."""
        return cls(start=a, end=b) if a <= b else cls(start=b, end=a)

    @classmethod
    def around(cls, center: date, half_width_days: int) -> "DateRange":
        return cls.between(center - timedelta(days=half_width_days), center + timedelta(days=half_width_days))

    @property
    def days(self) -> int:
        """Inclusive length in days."""
        return (self.end - self.start).days + 1

    def contains(self, other: "DateRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    def shift(self, days: int) -> "DateRange":
        delta = timedelta(days=days)
        return DateRange(start=self.start + delta, end=self.end + delta)

    def clamp_into(self, outer: "DateRange") -> "DateRange":
        """Pull both endpoints inside `outer`. Order is preserved because clamping is monotone."""
        lo, hi = outer.start, outer.end
        return DateRange(start=min(max(self.start, lo), hi), end=min(max(self.end, lo), hi))


class Horizon(DateRange):
    """The range actually rendered by the calendar. Display-only, never authoritative."""


class StageKey(str, Enum):
    """Named breeding stages, in display order."""
    PRE_BREEDING = "pre_breeding"
    HORMONE_TESTING = "hormone_testing"
    BREEDING = "breeding"
    WHELPING = "whelping"
    PUPPY_CARE = "puppy_care"
    PLACEMENT_NORMAL = "placement_normal"
    PLACEMENT_EXTENDED = "placement_extended"


STAGE_ORDER: List[StageKey] = list(StageKey)

STAGE_LABELS: Dict[StageKey, str] = {
    StageKey.PRE_BREEDING: "Pre-breeding Heat",
    StageKey.HORMONE_TESTING: "Hormone Testing",
    StageKey.BREEDING: "Breeding",
    StageKey.WHELPING: "Whelping",
    StageKey.PUPPY_CARE: "Puppy Care",
    StageKey.PLACEMENT_NORMAL: "Placement",
    StageKey.PLACEMENT_EXTENDED: "Placement (Extended)",
}


class StageWindow(BaseModel):
    """
    One stage in two confidence tiers.
    'full' is the conservative outer bound, 'likely' the central estimate.
    """
    model_config = ConfigDict(frozen=True)

    key: StageKey
    full: DateRange
    likely: DateRange

    @model_validator(mode='after')
    def validate_tiers(self):
        if not self.full.contains(self.likely):
            raise ValueError(f"Likely window must sit inside the full window for {self.key.value}")
        return self

    @property
    def label(self) -> str:
        return STAGE_LABELS[self.key]


class ExpectedWindows(BaseModel):
    """
    Stage windows derived for one cycle.
    May be partial (e.g. only post-birth stages when only a due date is known)
    or empty when no anchor date exists at all.
    """
    model_config = ConfigDict(frozen=True)

    stages: Dict[StageKey, StageWindow] = Field(default_factory=dict)
    cycle_start: Optional[date] = Field(default=None, description="Heat start the windows were anchored on")
    ovulation: Optional[date] = Field(default=None, description="Ovulation anchor")

    @model_validator(mode='after')
    def validate_keys(self):
        for key, window in self.stages.items():
            if window.key != key:
                raise ValueError(f"Stage stored under {key.value} carries key {window.key.value}")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.stages

    def get(self, key: StageKey) -> Optional[StageWindow]:
        return self.stages.get(key)

    def rows(self) -> List[StageWindow]:
        """Windows in display order."""
        return [self.stages[k] for k in STAGE_ORDER if k in self.stages]


class BandKind(str, Enum):
    """Severity of an availability band."""
    RISKY = "risky"
    UNLIKELY = "unlikely"


class TravelBand(BaseModel):
    """A derived caution range. Never hand-edited, always recomputable from windows."""
    model_config = ConfigDict(frozen=True)

    kind: BandKind
    range: DateRange
    label: str = ""


T = TypeVar("T")


class Tagged(BaseModel, Generic[T]):
    """
    Output bound to the plan that produced it.
    Only the plan aggregator creates these.
    """
    model_config = ConfigDict(frozen=True)

    data: T
    owner_plan_id: str = Field(min_length=1)
    color_tag: str = Field(description="Stable display color for the owning plan")
    tooltip: str = ""


TaggedWindow = Tagged[StageWindow]
AvailabilityBand = Tagged[TravelBand]


class CalendarEvent(BaseModel):
    """All-day calendar entry. 'end' is exclusive, as calendar widgets expect."""
    id: str
    title: str
    start: date
    end: date
    all_day: bool = True
    meta: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "plan_001:whelping:full",
            "title": "Whelping (Full)",
            "start": "2025-03-15",
            "end": "2025-03-20",
            "all_day": True,
            "meta": {"stage": "whelping", "type": "full", "plan_id": "plan_001"}
        }
    })
