from datetime import date

import pytest

from engine.horizon import tighten, default_horizon
from engine.stages import derive_windows
from models import Horizon, Species, TravelBand, BandKind, DateRange

BASE = Horizon(start=date(2025, 1, 1), end=date(2025, 12, 31))


def band(start, end):
    return TravelBand(kind=BandKind.RISKY, range=DateRange(start=start, end=end))


def test_no_data_leaves_base_unchanged():
    assert tighten(BASE, [], []) == BASE


def test_start_moves_up_to_one_month_before_data():
    result = tighten(BASE, [], [band(date(2025, 6, 15), date(2025, 6, 20))])
    assert result.start == date(2025, 5, 15)
    assert result.end == BASE.end


def test_end_extends_to_cover_data():
    rows = derive_windows(Species.DOG, date(2025, 11, 1)).rows()
    result = tighten(BASE, rows, [])
    assert result.end == max(r.full.end for r in rows)
    assert result.end > BASE.end


def test_start_never_before_base_start():
    result = tighten(BASE, [], [band(date(2024, 12, 10), date(2025, 1, 5))])
    assert result.start == date(2025, 1, 1)
    assert result.end == BASE.end


def test_month_math_clamps_to_month_end():
    result = tighten(BASE, [], [band(date(2025, 3, 31), date(2025, 4, 2))])
    assert result.start == date(2025, 2, 28)


def test_zero_lead_starts_at_data():
    result = tighten(BASE, [], [band(date(2025, 6, 15), date(2025, 6, 20))], lead_months=0)
    assert result.start == date(2025, 6, 15)


def test_negative_lead_rejected():
    with pytest.raises(ValueError):
        tighten(BASE, [], [], lead_months=-1)


def test_default_horizon_spans_months():
    h = default_horizon(date(2025, 1, 31), 1)
    assert (h.start, h.end) == (date(2025, 1, 31), date(2025, 2, 28))
