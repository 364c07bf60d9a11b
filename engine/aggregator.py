"""
The Plan Window Aggregator.

This module is the only place where per-plan outputs get an owner.
It combines three concerns:
1. Ownership - every row and band is cloned and tagged with its plan id and color.
2. Fault isolation - one broken plan degrades alone, the portfolio carries on.
3. Portfolio assembly - rows, bands, faults and the tightened horizon in one state.
"""

import logging
from typing import List, Optional, Sequence, Union

from models import (
    PlanRow, ExpectedWindows, ExpectedMilestones, Horizon,
    TaggedWindow, AvailabilityBand, AvailabilityPrefs
)
from .stages import StageWindowDeriver, DEFAULT_DERIVER
from .availability import AvailabilityBandComputer, DEFAULT_COMPUTER, plan_color
from .horizon import HorizonTightener, DEFAULT_LEAD_MONTHS
from .state import PlanFault, PlanBandResult, PortfolioState

logger = logging.getLogger(__name__)


class PlanWindowAggregator:
    """
    Plans in, tagged outputs out.
    Stateless between calls: the same plan always yields deep-equal outputs.
    """

    def __init__(
        self,
        deriver: StageWindowDeriver = DEFAULT_DERIVER,
        band_computer: AvailabilityBandComputer = DEFAULT_COMPUTER,
        prefs: Optional[AvailabilityPrefs] = None,
        lead_months: int = DEFAULT_LEAD_MONTHS
    ):
        self.deriver = deriver
        self.band_computer = band_computer
        # Exact-date bands are only produced when preferences are supplied
        self.prefs = prefs
        self.tightener = HorizonTightener(lead_months)

    # --- Per-plan outputs ---

    def stage_rows_for_plan(self, plan: PlanRow) -> List[TaggedWindow]:
        windows = self.deriver.derive_windows_for_plan(plan)
        color = plan_color(plan.id)
        return [
            TaggedWindow(
                data=w.model_copy(deep=True),
                owner_plan_id=plan.id,
                color_tag=color,
                tooltip=f"[{plan.display_name}] {w.label}",
            )
            for w in windows.rows()
        ]

    def availability_for_plan(
        self,
        plan: PlanRow,
        windows: Union[ExpectedWindows, Sequence[TaggedWindow]],
        horizon: Horizon
    ) -> List[AvailabilityBand]:
        """Bands for one plan; a faulted plan yields no bands."""
        return self.band_result_for_plan(plan, windows, horizon).bands

    def band_result_for_plan(
        self,
        plan: PlanRow,
        windows: Union[ExpectedWindows, Sequence[TaggedWindow]],
        horizon: Horizon
    ) -> PlanBandResult:
        try:
            expected = self._as_expected_windows(plan, windows)
            bands = self.band_computer.compute_bands(expected, horizon, plan.expected_next_cycle_start)
            if self.prefs is not None:
                milestones = self.milestones_for_plan(plan, expected)
                if milestones is not None:
                    bands.extend(self.band_computer.exact_date_bands(milestones, self.prefs))
        except Exception as e:
            logger.warning(f"Availability bands failed for plan {plan.id}: {e}")
            return PlanBandResult(plan_id=plan.id, fault=PlanFault(plan_id=plan.id, stage="bands", reason=str(e)))

        color = plan_color(plan.id)
        tagged = [
            AvailabilityBand(
                data=b.model_copy(deep=True),
                owner_plan_id=plan.id,
                color_tag=color,
                tooltip=f"[{plan.display_name}] {b.label or b.kind.value.title()}",
            )
            for b in bands
        ]
        return PlanBandResult(plan_id=plan.id, bands=tagged)

    def milestones_for_plan(self, plan: PlanRow, windows: ExpectedWindows) -> Optional[ExpectedMilestones]:
        """Biology milestones from the plan's cycle anchor, with locked then expected dates laid over them."""
        if windows.cycle_start is None:
            return None

        milestones = self.deriver.expected_milestones(plan.species, windows.cycle_start)
        update = {}
        birth = plan.locked_due_date or plan.expected_birth_date
        if birth:
            update["birth_expected"] = birth
        placement_start = plan.locked_placement_start_date or plan.expected_placement_start_date
        if placement_start:
            update["placement_start_expected"] = placement_start
        placement_done = plan.locked_placement_completed_date or plan.expected_placement_completed_date
        if placement_done:
            update["placement_completed_expected"] = placement_done
        if plan.locked_ovulation_date:
            update["ovulation"] = plan.locked_ovulation_date
            update["breeding_expected"] = plan.locked_ovulation_date

        return milestones.model_copy(update=update) if update else milestones

    # --- Portfolio ---

    def build_portfolio(self, plans: Sequence[PlanRow], base_horizon: Horizon) -> PortfolioState:
        """
        Run every plan. A plan that faults is recorded and skipped for that stage;
        the remaining plans are unaffected.
        """
        logger.info(f"Building portfolio for {len(plans)} plans...")
        state = PortfolioState()

        for plan in plans:
            try:
                rows = self.stage_rows_for_plan(plan)
            except Exception as e:
                logger.warning(f"Stage windows failed for plan {plan.id}: {e}")
                state.record_failure(PlanFault(plan_id=plan.id, stage="windows", reason=str(e)))
                rows = []

            result = self.band_result_for_plan(plan, rows, base_horizon)
            if not result.ok:
                state.record_failure(result.fault)

            state.record_plan(plan.id, rows, result.bands)

        state.horizon = self.tightener.tighten(base_horizon, state.rows, state.bands)
        logger.info(
            f"Portfolio ready: {len(state.rows)} rows, {len(state.bands)} bands, "
            f"{len(state.faults)} faulted plans"
        )
        return state

    # --- Helpers ---

    def _as_expected_windows(
        self,
        plan: PlanRow,
        windows: Union[ExpectedWindows, Sequence[TaggedWindow]]
    ) -> ExpectedWindows:
        if isinstance(windows, ExpectedWindows):
            return windows

        stages = {}
        for row in windows:
            if row.owner_plan_id != plan.id:
                raise ValueError(f"Row owned by plan {row.owner_plan_id} passed for plan {plan.id}")
            stages[row.data.key] = row.data

        if not stages:
            return ExpectedWindows()

        # Anchors are not carried on tagged rows; re-derive them from the plan
        anchors = self.deriver.derive_windows_for_plan(plan)
        return ExpectedWindows(stages=stages, cycle_start=anchors.cycle_start, ovulation=anchors.ovulation)


DEFAULT_AGGREGATOR = PlanWindowAggregator()


def stage_rows_for_plan(plan: PlanRow) -> List[TaggedWindow]:
    return DEFAULT_AGGREGATOR.stage_rows_for_plan(plan)


def availability_for_plan(
    plan: PlanRow,
    windows: Union[ExpectedWindows, Sequence[TaggedWindow]],
    horizon: Horizon
) -> List[AvailabilityBand]:
    return DEFAULT_AGGREGATOR.availability_for_plan(plan, windows, horizon)


def build_portfolio(plans: Sequence[PlanRow], base_horizon: Horizon) -> PortfolioState:
    return DEFAULT_AGGREGATOR.build_portfolio(plans, base_horizon)
