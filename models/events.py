"""
Reproductive event history models.

Events are recorded by external workflows and are read-only here:
the engine never mutates a female's history, it only reads it.
"""

from enum import Enum
from typing import Iterable, List, Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type


class ReproEventKind(str, Enum):
    """Kinds of recorded reproductive events."""
    HEAT_START = "heat_start"
    OVULATION = "ovulation"
    INSEMINATION = "insemination"
    BIRTH = "birth"


class ReproEvent(BaseModel):
    """A single dated entry in a female's reproductive history."""
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {"kind": "heat_start", "date": "2025-01-01", "note": "Observed swelling"}
    })

    kind: ReproEventKind
    date: date_type
    note: Optional[str] = Field(default=None, description="Free text from the breeder")


def heat_starts(events: Iterable[ReproEvent]) -> List[date_type]:
    """Ascending, de-duplicated heat-start dates from an event history."""
    return sorted({e.date for e in events if e.kind == ReproEventKind.HEAT_START})
