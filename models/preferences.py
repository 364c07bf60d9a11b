"""
Availability preference models.

Breeders tune how far around each exact milestone date they consider
travel risky or unlikely. Offsets are whole days; 'from' values reach
backwards from the anchor and 'to' values forwards.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class AnchorKind(str, Enum):
    """Exact milestone dates that can carry their own bands."""
    CYCLE = "cycle"
    TESTING = "testing"
    BREEDING = "breeding"
    BIRTH = "birth"
    WEANED = "weaned"
    PLACEMENT_START = "placement_start"
    PLACEMENT_COMPLETED = "placement_completed"


ANCHOR_LABELS: Dict[AnchorKind, str] = {
    AnchorKind.CYCLE: "Cycle Start",
    AnchorKind.TESTING: "Hormone Testing",
    AnchorKind.BREEDING: "Breeding",
    AnchorKind.BIRTH: "Birth",
    AnchorKind.WEANED: "Weaning",
    AnchorKind.PLACEMENT_START: "Placement Start",
    AnchorKind.PLACEMENT_COMPLETED: "Placement Completed",
}


class AnchorOffsets(BaseModel):
    """Signed-or-unsigned day offsets around one anchor. Signs are normalized when used."""
    model_config = ConfigDict(frozen=True)

    risky_from: int = 0
    risky_to: int = 0
    unlikely_from: int = 0
    unlikely_to: int = 0


def _symmetric(risky: int, unlikely: int) -> AnchorOffsets:
    return AnchorOffsets(risky_from=-risky, risky_to=risky, unlikely_from=-unlikely, unlikely_to=unlikely)


def _default_anchor_offsets() -> Dict[AnchorKind, AnchorOffsets]:
    return {
        AnchorKind.CYCLE: _symmetric(5, 10),
        AnchorKind.TESTING: _symmetric(5, 10),
        AnchorKind.BREEDING: _symmetric(5, 10),
        AnchorKind.BIRTH: _symmetric(5, 10),
        AnchorKind.WEANED: _symmetric(5, 10),
        AnchorKind.PLACEMENT_START: AnchorOffsets(),
        AnchorKind.PLACEMENT_COMPLETED: AnchorOffsets(risky_to=5, unlikely_to=10),
    }


class AvailabilityPrefs(BaseModel):
    """Tenant-level availability preferences for exact-date bands."""
    model_config = ConfigDict(frozen=True)

    anchors: Dict[AnchorKind, AnchorOffsets] = Field(default_factory=_default_anchor_offsets)
    auto_widen_unlikely: bool = Field(
        default=True,
        description="Widen an unlikely offset by one day when it equals the risky offset"
    )

    def offsets_for(self, anchor: AnchorKind) -> AnchorOffsets:
        return self.anchors.get(anchor, AnchorOffsets())

    @classmethod
    def from_payload(cls, raw: Optional[Dict[str, Any]]) -> "AvailabilityPrefs":
        """
        Build prefs from the flat tenant payload
        (e.g. {"date_birth_risky_from": -5, ...}), optionally wrapped in {"data": ...}.
        Missing or non-numeric values keep their defaults.
        """
        if not raw:
            return cls()
        if isinstance(raw.get("data"), dict):
            raw = raw["data"]

        anchors = _default_anchor_offsets()
        for anchor in AnchorKind:
            current = anchors[anchor].model_dump()
            for field_name in current:
                value = _as_int(raw.get(f"date_{anchor.value}_{field_name}"))
                if value is not None:
                    current[field_name] = value
            anchors[anchor] = AnchorOffsets(**current)

        auto_widen = raw.get("auto_widen_unlikely", raw.get("autoWidenUnlikely"))
        return cls(anchors=anchors, auto_widen_unlikely=auto_widen if isinstance(auto_widen, bool) else True)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
