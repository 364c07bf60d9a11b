"""
Species Biology Table.

Single source of truth for the reproductive constants the engine uses.
DOG is the baseline; other species override only what differs.
"""

import logging
from typing import Dict, Optional, Union

from models import Species, SpeciesBiology, CycleDefaults

logger = logging.getLogger(__name__)

# Dog baseline (AKC / veterinary conventions)
_BASELINE = dict(
    cycle_length_days=180,
    start_buffer_days=14,
    ovulation_offset_days=12,
    hormone_testing_from_cycle_start_days=7,
    gestation_days=63,
    whelping_jitter_full_days=2,
    whelping_jitter_likely_days=1,
    pre_breeding_likely_half_width_days=5,
    breeding_pre_ovulation_days=1,
    breeding_post_ovulation_days=2,
    care_weeks=8,
    wean_from_birth_days=42,
    placement_extended_weeks=3,
)

_OVERRIDES: Dict[Species, dict] = {
    Species.DOG: {},
    Species.CAT: dict(
        cycle_length_days=60,
        ovulation_offset_days=3,
        start_buffer_days=7,
        wean_from_birth_days=56,     # 8 weeks
    ),
    Species.HORSE: dict(
        cycle_length_days=21,
        ovulation_offset_days=5,
        start_buffer_days=7,
        gestation_days=340,          # about 11 months
        wean_from_birth_days=150,    # about 5 months
        care_weeks=36,
    ),
    Species.GOAT: dict(
        cycle_length_days=21,
        ovulation_offset_days=1,
        start_buffer_days=7,
        gestation_days=150,
        wean_from_birth_days=70,
        care_weeks=10,
    ),
    # Induced ovulator: values model receptivity windows, not true estrous cycles
    Species.RABBIT: dict(
        cycle_length_days=14,
        ovulation_offset_days=0,
        start_buffer_days=3,
        gestation_days=31,
        wean_from_birth_days=42,
    ),
    Species.OTHER: {},
}

_missing = set(Species) - set(_OVERRIDES)
if _missing:
    raise RuntimeError(f"Species without a biology entry: {sorted(s.value for s in _missing)}")


class SpeciesBiologyTable:
    """
    Species -> biology lookup.
    Total: unknown identifiers resolve to Species.OTHER (dog baseline).
    """

    def __init__(self, overrides: Optional[Dict[Species, dict]] = None):
        merged = {s: dict(_OVERRIDES[s]) for s in Species}
        for species, values in (overrides or {}).items():
            merged[Species.parse(species)].update(values)

        self._table: Dict[Species, SpeciesBiology] = {
            s: SpeciesBiology(**{**_BASELINE, **values}) for s, values in merged.items()
        }

    def biology_for(self, species: Union[Species, str, None]) -> SpeciesBiology:
        key = Species.parse(species)
        if key == Species.OTHER and isinstance(species, str) and species.strip().upper() != Species.OTHER.value:
            logger.debug(f"Unknown species {species!r}, using generic defaults")
        return self._table[key]

    def get_defaults(self, species: Union[Species, str, None]) -> CycleDefaults:
        return self.biology_for(species).cycle_defaults


DEFAULT_TABLE = SpeciesBiologyTable()


def biology_for(species: Union[Species, str, None]) -> SpeciesBiology:
    return DEFAULT_TABLE.biology_for(species)


def get_defaults(species: Union[Species, str, None]) -> CycleDefaults:
    return DEFAULT_TABLE.get_defaults(species)
