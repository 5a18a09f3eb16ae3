"""
Soccer formation catalog used when participants submit a final team.

Each formation lists eleven slots. ``x``/``y`` are pitch coordinates in
percent (0,0 top-left) for clients that draw the lineup.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FormationSlot:
    id: str
    label: str
    x: int
    y: int

    def to_dict(self) -> Dict:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}


@dataclass(frozen=True)
class Formation:
    code: str
    label: str
    slots: Tuple[FormationSlot, ...]

    @property
    def slot_ids(self) -> List[str]:
        return [slot.id for slot in self.slots]

    def to_dict(self) -> Dict:
        return {
            "code": self.code,
            "label": self.label,
            "slots": [slot.to_dict() for slot in self.slots],
        }


_BACK_FOUR = (
    FormationSlot("GK", "GK", 50, 94),
    FormationSlot("LB", "LB", 18, 82),
    FormationSlot("LCB", "LCB", 38, 78),
    FormationSlot("RCB", "RCB", 62, 78),
    FormationSlot("RB", "RB", 82, 82),
)

SOCCER_FORMATIONS: Tuple[Formation, ...] = (
    Formation("433-cam", "4-3-3 (CAM, CM, CM)", _BACK_FOUR + (
        FormationSlot("LCM", "LCM", 36, 54),
        FormationSlot("CAM", "CAM", 50, 40),
        FormationSlot("RCM", "RCM", 64, 54),
        FormationSlot("LW", "LW", 18, 24),
        FormationSlot("ST", "ST", 50, 12),
        FormationSlot("RW", "RW", 82, 24),
    )),
    Formation("433-cdm", "4-3-3 (CM, CM, CDM)", _BACK_FOUR + (
        FormationSlot("LCM", "LCM", 36, 50),
        FormationSlot("CDM", "CDM", 50, 62),
        FormationSlot("RCM", "RCM", 64, 50),
        FormationSlot("LW", "LW", 18, 24),
        FormationSlot("ST", "ST", 50, 12),
        FormationSlot("RW", "RW", 82, 24),
    )),
    Formation("442", "4-4-2", _BACK_FOUR + (
        FormationSlot("LM", "LM", 18, 34),
        FormationSlot("LCM", "LCM", 40, 54),
        FormationSlot("RCM", "RCM", 60, 54),
        FormationSlot("RM", "RM", 82, 34),
        FormationSlot("STL", "ST", 44, 14),
        FormationSlot("STR", "CF", 56, 14),
    )),
    Formation("4231", "4-2-3-1", _BACK_FOUR + (
        FormationSlot("LCDM", "CDM", 40, 58),
        FormationSlot("RCDM", "CDM", 60, 58),
        FormationSlot("LW", "LW", 18, 24),
        FormationSlot("CAM", "CAM", 50, 36),
        FormationSlot("RW", "RW", 82, 24),
        FormationSlot("ST", "ST", 50, 12),
    )),
    Formation("343", "3-4-3", (
        FormationSlot("GK", "GK", 50, 94),
        FormationSlot("LCB", "LCB", 34, 78),
        FormationSlot("CB", "CB", 50, 76),
        FormationSlot("RCB", "RCB", 66, 78),
        FormationSlot("LWB", "LWB", 18, 46),
        FormationSlot("LCM", "CM", 40, 54),
        FormationSlot("RCM", "CM", 60, 54),
        FormationSlot("RWB", "RWB", 82, 46),
        FormationSlot("LW", "LW", 18, 24),
        FormationSlot("CF", "CF", 50, 12),
        FormationSlot("RW", "RW", 82, 24),
    )),
)

_BY_CODE: Dict[str, Formation] = {f.code: f for f in SOCCER_FORMATIONS}


def get_formation_by_code(code: Optional[str]) -> Optional[Formation]:
    """Look up a formation; unknown or empty codes return None."""
    if not code:
        return None
    return _BY_CODE.get(code)
