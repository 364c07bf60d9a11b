"""
Availability (Travel) Band Computation.

Bands are a secondary output derived from stage windows:
- RISKY:    the breeder is very likely needed on site
- UNLIKELY: travel is possible but could collide with a late or early stage

Bands are never hand-edited; they are recomputed from windows on every call.
"""

import hashlib
import logging
from datetime import date as date_type, timedelta
from typing import Dict, List, Optional

from models import (
    ExpectedWindows, Horizon, DateRange, StageKey, BandKind, TravelBand,
    ExpectedMilestones, AvailabilityPrefs, AnchorKind, AnchorOffsets, ANCHOR_LABELS
)

logger = logging.getLogger(__name__)

NEXT_CYCLE_LABEL = "Projected next cycle start"

# (kind, label, start stage + tier, end stage + tier)
WINDOW_BAND_RULES = [
    (BandKind.RISKY, "Testing & Breeding",
     (StageKey.HORMONE_TESTING, "full", "start"), (StageKey.BREEDING, "full", "end")),
    (BandKind.RISKY, "Whelping & Placement",
     (StageKey.WHELPING, "full", "start"), (StageKey.PLACEMENT_EXTENDED, "full", "end")),
    (BandKind.UNLIKELY, "Pre-breeding to Breeding",
     (StageKey.PRE_BREEDING, "full", "end"), (StageKey.BREEDING, "likely", "end")),
    (BandKind.UNLIKELY, "Puppy Care to Placement",
     (StageKey.PUPPY_CARE, "likely", "start"), (StageKey.PLACEMENT_NORMAL, "likely", "end")),
]


def plan_color(plan_id: str) -> str:
    """Stable per-plan display color. Same id, same color, on every run and machine."""
    digest = hashlib.md5(str(plan_id).encode("utf-8")).hexdigest()
    hue = int(digest[:8], 16) % 360
    return f"hsl({hue}, 65%, 50%)"


def normalize_offsets(offsets: AnchorOffsets, auto_widen: bool = True) -> AnchorOffsets:
    """
    Magnitudes only, then signed: 'from' reaches back, 'to' reaches forward.
    With auto_widen, an unlikely offset equal to a non-zero risky offset grows by one day
    so the unlikely band stays visible around the risky one.
    """
    rf, rt = abs(offsets.risky_from), abs(offsets.risky_to)
    uf, ut = abs(offsets.unlikely_from), abs(offsets.unlikely_to)

    if auto_widen:
        if uf == rf and rf != 0:
            uf = rf + 1
        if ut == rt and rt != 0:
            ut = rt + 1

    return AnchorOffsets(risky_from=-rf, risky_to=rt, unlikely_from=-uf, unlikely_to=ut)


def _anchor_band(kind: BandKind, anchor: date_type, start_offset: int, end_offset: int, label: str) -> TravelBand:
    start = anchor + timedelta(days=start_offset)
    end = anchor + timedelta(days=end_offset)
    # Zero-width bands would disappear on a calendar
    if end == start:
        end = start + timedelta(days=1)
    return TravelBand(kind=kind, range=DateRange(start=start, end=end), label=label)


class AvailabilityBandComputer:
    """Derives travel bands from stage windows or from exact milestone dates."""

    def compute_bands(
        self,
        windows: ExpectedWindows,
        horizon: Horizon,
        next_cycle_start: Optional[date_type] = None
    ) -> List[TravelBand]:
        """
        Window-derived bands. With no windows at all, a projected next cycle
        start still yields a one-day UNLIKELY marker.
        Bands ending before the horizon start are dropped, never clipped.
        """
        bands: List[TravelBand] = []

        if windows.is_empty:
            if next_cycle_start is not None:
                bands.append(TravelBand(
                    kind=BandKind.UNLIKELY,
                    range=DateRange(start=next_cycle_start, end=next_cycle_start + timedelta(days=1)),
                    label=NEXT_CYCLE_LABEL,
                ))
        else:
            for kind, label, start_ref, end_ref in WINDOW_BAND_RULES:
                start = self._endpoint(windows, start_ref)
                end = self._endpoint(windows, end_ref)
                if start is None or end is None:
                    continue
                bands.append(TravelBand(kind=kind, range=DateRange.between(start, end), label=label))

        visible = [b for b in bands if b.range.end >= horizon.start]
        if len(visible) != len(bands):
            logger.debug(f"Dropped {len(bands) - len(visible)} bands ending before {horizon.start}")
        return visible

    def exact_date_bands(self, milestones: ExpectedMilestones, prefs: AvailabilityPrefs) -> List[TravelBand]:
        """Per-anchor UNLIKELY then RISKY band around every known milestone date."""
        bands: List[TravelBand] = []
        for anchor, day in self._anchor_dates(milestones).items():
            if day is None:
                continue
            o = normalize_offsets(prefs.offsets_for(anchor), prefs.auto_widen_unlikely)
            label = ANCHOR_LABELS[anchor]
            bands.append(_anchor_band(BandKind.UNLIKELY, day, o.unlikely_from, o.unlikely_to, f"{label} (Unlikely)"))
            bands.append(_anchor_band(BandKind.RISKY, day, o.risky_from, o.risky_to, f"{label} (Risky)"))
        return bands

    @staticmethod
    def _endpoint(windows: ExpectedWindows, ref) -> Optional[date_type]:
        key, tier, side = ref
        window = windows.get(key)
        if window is None:
            return None
        return getattr(getattr(window, tier), side)

    @staticmethod
    def _anchor_dates(m: ExpectedMilestones) -> Dict[AnchorKind, Optional[date_type]]:
        return {
            AnchorKind.CYCLE: m.cycle_start,
            AnchorKind.TESTING: m.testing_expected,
            AnchorKind.BREEDING: m.breeding_expected,
            AnchorKind.BIRTH: m.birth_expected,
            AnchorKind.WEANED: m.weaned_expected,
            AnchorKind.PLACEMENT_START: m.placement_start_expected,
            AnchorKind.PLACEMENT_COMPLETED: m.placement_completed_expected or m.placement_extended_end_expected,
        }


DEFAULT_COMPUTER = AvailabilityBandComputer()


def compute_bands(
    windows: ExpectedWindows,
    horizon: Horizon,
    next_cycle_start: Optional[date_type] = None
) -> List[TravelBand]:
    return DEFAULT_COMPUTER.compute_bands(windows, horizon, next_cycle_start)


def exact_date_bands(milestones: ExpectedMilestones, prefs: AvailabilityPrefs) -> List[TravelBand]:
    return DEFAULT_COMPUTER.exact_date_bands(milestones, prefs)
