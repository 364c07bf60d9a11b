"""
Breeding plan data models.

A PlanRow is owned by the external plan store; the engine only reads it.
Locked dates are user-confirmed and authoritative. Expected dates are
computed elsewhere and advisory. Where both exist, locked wins.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator, model_validator
from datetime import date

from .biology import Species


def _alias(snake: str, camel: str) -> AliasChoices:
    return AliasChoices(snake, camel)


class PlanRow(BaseModel):
    """
    Read-only view of a breeding plan as consumed by the timeline engine.
    Accepts both snake_case and camelCase payload keys.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, json_schema_extra={
        "example": {
            "id": "plan_001",
            "name": "Luna x Atlas",
            "species": "DOG",
            "lockedCycleStart": "2025-01-01",
            "expectedNextCycleStart": None
        }
    })

    # --- Core Identity ---
    id: str = Field(min_length=1, description="Plan identifier; owner tag for every derived output")
    name: str = Field(default="", description="Human-readable plan name")
    species: Species = Field(default=Species.DOG)

    # --- Locked (authoritative) ---
    locked_cycle_start: Optional[date] = Field(default=None, validation_alias=_alias("locked_cycle_start", "lockedCycleStart"))
    locked_ovulation_date: Optional[date] = Field(default=None, validation_alias=_alias("locked_ovulation_date", "lockedOvulationDate"))
    locked_due_date: Optional[date] = Field(default=None, validation_alias=_alias("locked_due_date", "lockedDueDate"))
    locked_placement_start_date: Optional[date] = Field(
        default=None, validation_alias=_alias("locked_placement_start_date", "lockedPlacementStartDate")
    )
    locked_placement_completed_date: Optional[date] = Field(
        default=None, validation_alias=_alias("locked_placement_completed_date", "lockedPlacementCompletedDate")
    )

    # --- Range planning ---
    earliest_cycle_start: Optional[date] = Field(default=None, validation_alias=_alias("earliest_cycle_start", "earliestCycleStart"))
    latest_cycle_start: Optional[date] = Field(default=None, validation_alias=_alias("latest_cycle_start", "latestCycleStart"))

    # --- Expected (advisory) ---
    expected_cycle_start: Optional[date] = Field(default=None, validation_alias=_alias("expected_cycle_start", "expectedCycleStart"))
    expected_next_cycle_start: Optional[date] = Field(
        default=None, validation_alias=_alias("expected_next_cycle_start", "expectedNextCycleStart")
    )
    expected_birth_date: Optional[date] = Field(default=None, validation_alias=_alias("expected_birth_date", "expectedBirthDate"))
    expected_placement_start_date: Optional[date] = Field(
        default=None, validation_alias=_alias("expected_placement_start_date", "expectedPlacementStartDate")
    )
    expected_placement_completed_date: Optional[date] = Field(
        default=None, validation_alias=_alias("expected_placement_completed_date", "expectedPlacementCompletedDate")
    )

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Plan stores hand out numeric ids too."""
        return str(v) if isinstance(v, int) else v

    @field_validator('species', mode='before')
    @classmethod
    def coerce_species(cls, v):
        return Species.parse(v) if not isinstance(v, Species) else v

    @model_validator(mode='after')
    def validate_ranges(self):
        if self.earliest_cycle_start and self.latest_cycle_start:
            if self.latest_cycle_start < self.earliest_cycle_start:
                raise ValueError("latest_cycle_start cannot be before earliest_cycle_start")
        if self.locked_placement_start_date and self.locked_placement_completed_date:
            if self.locked_placement_completed_date < self.locked_placement_start_date:
                raise ValueError("Placement completed cannot be before placement start")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id
