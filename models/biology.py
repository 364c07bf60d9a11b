"""
Species and reproductive biology data models.

This module defines the 'Biology' side of the engine:
1. Species (closed enumeration that drives every default)
2. CycleDefaults (the three numbers needed to project cycles)
3. SpeciesBiology (the full set of offsets used to derive stage windows)
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator, ConfigDict


class Species(str, Enum):
    """Species supported by the timeline engine."""
    DOG = "DOG"
    CAT = "CAT"
    HORSE = "HORSE"
    GOAT = "GOAT"
    RABBIT = "RABBIT"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value):
        # "Dog", "dog " and friends resolve to their member; anything else is OTHER
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if member.value == key:
                    return member
        return cls.OTHER

    @classmethod
    def parse(cls, value: Optional[str]) -> "Species":
        """Lenient conversion used for external plan payloads."""
        if value is None:
            return cls.OTHER
        if isinstance(value, cls):
            return value
        return cls(value)


class CycleDefaults(BaseModel):
    """Defaults needed to project cycles for a species."""
    model_config = ConfigDict(frozen=True)

    cycle_length_days: int = Field(gt=0, description="Average days between heat starts")
    start_buffer_days: int = Field(ge=0, description="Guard days added to 'today' when no heat start is known")
    ovulation_offset_days: int = Field(ge=0, description="Days from heat start to ovulation")


class SpeciesBiology(CycleDefaults):
    """
    Full biology profile used by the stage window deriver.
    All values are whole days unless the name says weeks.
    """

    # --- Pre-breeding & Testing ---
    hormone_testing_from_cycle_start_days: int = Field(default=7, ge=0)
    pre_breeding_likely_half_width_days: int = Field(default=5, ge=0)

    # --- Breeding ---
    breeding_pre_ovulation_days: int = Field(default=1, ge=0, description="Full breeding window opens this many days before ovulation")
    breeding_post_ovulation_days: int = Field(default=2, ge=0, description="Full breeding window closes this many days after ovulation")

    # --- Whelping ---
    gestation_days: int = Field(gt=0, description="Days from ovulation to birth")
    whelping_jitter_full_days: int = Field(default=2, ge=0)
    whelping_jitter_likely_days: int = Field(default=1, ge=0)

    # --- Offspring care & Placement ---
    care_weeks: int = Field(gt=0, description="Offspring care after birth; also drives placement timing")
    wean_from_birth_days: int = Field(gt=0)
    placement_extended_weeks: int = Field(default=3, ge=0)

    @model_validator(mode='after')
    def validate_jitter(self):
        """The conservative tier can never be narrower than the likely tier."""
        if self.whelping_jitter_full_days < self.whelping_jitter_likely_days:
            raise ValueError("Full whelping jitter must be >= likely whelping jitter")
        return self

    @property
    def cycle_defaults(self) -> CycleDefaults:
        return CycleDefaults(
            cycle_length_days=self.cycle_length_days,
            start_buffer_days=self.start_buffer_days,
            ovulation_offset_days=self.ovulation_offset_days,
        )

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "cycle_length_days": 180,
            "start_buffer_days": 14,
            "ovulation_offset_days": 12,
            "gestation_days": 63,
            "care_weeks": 8,
            "wean_from_birth_days": 42,
            "placement_extended_weeks": 3
        }
    })
