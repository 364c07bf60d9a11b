"""
Breeding timeline engine.

Leaf-first: biology -> statistics -> projector -> stages -> availability
-> aggregator / horizon. CyclePlanner composes the per-female pieces.
"""

from .biology import SpeciesBiologyTable, biology_for, get_defaults
from .statistics import average_cycle_length, summarize_cycles, resolve_cycle_length, CycleLengthResolver
from .projector import CycleProjector, project_upcoming_cycles
from .stages import (
    StageWindowDeriver,
    derive_windows,
    derive_windows_for_plan,
    derive_windows_from_birth,
    expected_milestones
)
from .availability import (
    AvailabilityBandComputer,
    compute_bands,
    exact_date_bands,
    normalize_offsets,
    plan_color
)
from .state import PlanFault, PlanBandResult, PortfolioState
from .horizon import HorizonTightener, tighten, default_horizon
from .aggregator import PlanWindowAggregator, stage_rows_for_plan, availability_for_plan, build_portfolio
from .planner import CyclePlanner, LockedCycleProjection
from .calendar import to_calendar_events

__all__ = [
    # --- Biology & Statistics ---
    "SpeciesBiologyTable",
    "biology_for",
    "get_defaults",
    "average_cycle_length",
    "summarize_cycles",
    "resolve_cycle_length",
    "CycleLengthResolver",

    # --- Projection & Stages ---
    "CycleProjector",
    "project_upcoming_cycles",
    "StageWindowDeriver",
    "derive_windows",
    "derive_windows_for_plan",
    "derive_windows_from_birth",
    "expected_milestones",

    # --- Availability ---
    "AvailabilityBandComputer",
    "compute_bands",
    "exact_date_bands",
    "normalize_offsets",
    "plan_color",

    # --- Portfolio ---
    "PlanFault",
    "PlanBandResult",
    "PortfolioState",
    "HorizonTightener",
    "tighten",
    "default_horizon",
    "PlanWindowAggregator",
    "stage_rows_for_plan",
    "availability_for_plan",
    "build_portfolio",

    # --- Composition & Export ---
    "CyclePlanner",
    "LockedCycleProjection",
    "to_calendar_events",
]
