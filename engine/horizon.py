"""
Display Horizon Tightening.

Narrows the calendar's start toward the data (never before the base
start) and stretches its end to cover the latest window or band.
"""

import logging
from datetime import date as date_type
from typing import Iterable, List, Union

from dateutil.relativedelta import relativedelta

from models import Horizon, StageWindow, TravelBand, Tagged

logger = logging.getLogger(__name__)

DEFAULT_LEAD_MONTHS = 1


def _unwrap(item):
    return item.data if isinstance(item, Tagged) else item


class HorizonTightener:

    def __init__(self, lead_months: int = DEFAULT_LEAD_MONTHS):
        if lead_months < 0:
            raise ValueError(f"lead_months must be >= 0, got {lead_months}")
        self.lead_months = lead_months

    def tighten(
        self,
        base: Horizon,
        all_windows: Iterable[Union[StageWindow, Tagged]],
        all_bands: Iterable[Union[TravelBand, Tagged]]
    ) -> Horizon:
        """
        start = max(base.start, earliest - lead months)
        end   = max(base.end, latest)
        No data leaves the base horizon unchanged.
        """
        starts: List[date_type] = []
        ends: List[date_type] = []
        for w in map(_unwrap, all_windows):
            starts.append(w.full.start)
            ends.append(w.full.end)
        for b in map(_unwrap, all_bands):
            starts.append(b.range.start)
            ends.append(b.range.end)

        if not starts:
            return base

        earliest, latest = min(starts), max(ends)
        start = max(base.start, earliest - relativedelta(months=self.lead_months))
        end = max(base.end, latest)

        logger.debug(f"Horizon {base.start}..{base.end} tightened to {start}..{end}")
        return Horizon(start=start, end=end)


def tighten(
    base: Horizon,
    all_windows: Iterable[Union[StageWindow, Tagged]],
    all_bands: Iterable[Union[TravelBand, Tagged]],
    lead_months: int = DEFAULT_LEAD_MONTHS
) -> Horizon:
    return HorizonTightener(lead_months).tighten(base, all_windows, all_bands)


def default_horizon(today: date_type, months: int) -> Horizon:
    """Base horizon: today through `months` months ahead."""
    return Horizon(start=today, end=today + relativedelta(months=months))
