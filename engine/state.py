"""
Portfolio State Management.

This module acts as the 'Memory' of a portfolio run.
It tracks:
1. Tagged stage rows and availability bands, per owning plan.
2. Degraded plans (faults) and why they degraded.
3. The tightened display horizon for the whole portfolio.
"""

from typing import List, Dict, Any, Optional
from collections import defaultdict
from dataclasses import dataclass, field

from models import TaggedWindow, AvailabilityBand, Horizon, BandKind


@dataclass
class PlanFault:
    """Why a plan could not produce some of its outputs."""
    plan_id: str
    stage: str  # e.g. "windows", "bands"
    reason: str


@dataclass
class PlanBandResult:
    """Bands for one plan, or the fault that prevented them."""
    plan_id: str
    bands: List[AvailabilityBand] = field(default_factory=list)
    fault: Optional[PlanFault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None


class PortfolioState:
    """
    Collects the outputs of one portfolio run.
    Outputs are appended only through record_* methods; nothing is recomputed here.
    """

    def __init__(self):
        # The Master Timeline
        self.rows: List[TaggedWindow] = []
        self.bands: List[AvailabilityBand] = []

        # Per-plan indices
        self.rows_by_plan: Dict[str, List[TaggedWindow]] = defaultdict(list)
        self.bands_by_plan: Dict[str, List[AvailabilityBand]] = defaultdict(list)
        self.plan_ids: List[str] = []

        # Failure Tracking
        self.faults: Dict[str, List[PlanFault]] = {}

        self.horizon: Optional[Horizon] = None

    def record_plan(self, plan_id: str, rows: List[TaggedWindow], bands: List[AvailabilityBand]) -> None:
        if plan_id not in self.plan_ids:
            self.plan_ids.append(plan_id)
        self.rows.extend(rows)
        self.bands.extend(bands)
        self.rows_by_plan[plan_id].extend(rows)
        self.bands_by_plan[plan_id].extend(bands)

    def record_failure(self, fault: PlanFault) -> None:
        """A plan may fault at more than one stage; every fault is kept."""
        if fault.plan_id not in self.plan_ids:
            self.plan_ids.append(fault.plan_id)
        self.faults.setdefault(fault.plan_id, []).append(fault)

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        band_counts = defaultdict(int)
        for b in self.bands:
            band_counts[b.data.kind.value] += 1

        plans_with_rows = sum(1 for pid in self.plan_ids if self.rows_by_plan.get(pid))

        return {
            "total_plans": len(self.plan_ids),
            "plans_with_windows": plans_with_rows,
            "plans_without_anchor": sum(
                1 for pid in self.plan_ids if not self.rows_by_plan.get(pid) and pid not in self.faults
            ),
            "faulted_plans": len(self.faults),
            "total_rows": len(self.rows),
            "total_bands": len(self.bands),
            "risky_bands": band_counts[BandKind.RISKY.value],
            "unlikely_bands": band_counts[BandKind.UNLIKELY.value],
            "horizon": (self.horizon.start, self.horizon.end) if self.horizon else None,
        }

    def get_failure_report(self) -> List[Dict]:
        """Human-readable list of degraded plans, most faults first."""
        report = []
        for plan_id, faults in self.faults.items():
            report.append({
                "plan_id": plan_id,
                "fault_count": len(faults),
                "stages": sorted({f.stage for f in faults}),
                "latest_reason": faults[-1].reason,
            })
        report.sort(key=lambda x: (-x["fault_count"], x["plan_id"]))
        return report

    def clear(self) -> None:
        self.rows.clear()
        self.bands.clear()
        self.rows_by_plan.clear()
        self.bands_by_plan.clear()
        self.plan_ids.clear()
        self.faults.clear()
        self.horizon = None
