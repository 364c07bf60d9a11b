"""
Data models package for the Breeding Timeline Engine.

This package exports the four pillars of the data architecture:
1. Biology (Species, CycleDefaults, SpeciesBiology)
2. Input (PlanRow, ReproEvent, AvailabilityPrefs)
3. Cycle results (CycleLengthResolution, ProjectedCycle, ExpectedMilestones)
4. Output (StageWindow, TravelBand, Tagged, CalendarEvent)
"""

from .biology import (
    Species,
    CycleDefaults,
    SpeciesBiology
)

from .events import (
    ReproEvent,
    ReproEventKind,
    heat_starts
)

from .plan import PlanRow

from .preferences import (
    AnchorKind,
    AnchorOffsets,
    AvailabilityPrefs,
    ANCHOR_LABELS
)

from .cycle import (
    CycleLengthSource,
    SeedType,
    CycleSummary,
    CycleLengthResolution,
    ProjectionExplain,
    ProjectedCycle,
    ExpectedMilestones,
    ProgramDefaults
)

from .timeline import (
    DateRange,
    Horizon,
    StageKey,
    STAGE_ORDER,
    STAGE_LABELS,
    StageWindow,
    ExpectedWindows,
    BandKind,
    TravelBand,
    Tagged,
    TaggedWindow,
    AvailabilityBand,
    CalendarEvent
)

__all__ = [
    # --- Biology Models ---
    "Species",
    "CycleDefaults",
    "SpeciesBiology",

    # --- Input Models ---
    "ReproEvent",
    "ReproEventKind",
    "heat_starts",
    "PlanRow",
    "AnchorKind",
    "AnchorOffsets",
    "AvailabilityPrefs",
    "ANCHOR_LABELS",

    # --- Cycle Result Models ---
    "CycleLengthSource",
    "SeedType",
    "CycleSummary",
    "CycleLengthResolution",
    "ProjectionExplain",
    "ProjectedCycle",
    "ExpectedMilestones",
    "ProgramDefaults",

    # --- Output Models ---
    "DateRange",
    "Horizon",
    "StageKey",
    "STAGE_ORDER",
    "STAGE_LABELS",
    "StageWindow",
    "ExpectedWindows",
    "BandKind",
    "TravelBand",
    "Tagged",
    "TaggedWindow",
    "AvailabilityBand",
    "CalendarEvent",
]
