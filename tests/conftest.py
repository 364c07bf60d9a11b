from datetime import date

import pytest

from engine.stages import derive_windows
from models import Horizon, PlanRow, Species


@pytest.fixture
def dog_plan():
    return PlanRow(id="plan_001", name="Luna x Atlas", species="DOG", locked_cycle_start=date(2025, 1, 1))


@pytest.fixture
def dog_windows():
    return derive_windows(Species.DOG, date(2025, 1, 1))


@pytest.fixture
def wide_horizon():
    return Horizon(start=date(2024, 12, 1), end=date(2025, 12, 31))
