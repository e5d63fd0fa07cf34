from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TurnPhase(Enum):
    """Input gating phases for the selection state machine."""
    IDLE = auto()
    AWAITING_SECOND = auto()
    RESOLVING = auto()


@dataclass(slots=True)
class TurnState:
    """Tracks current turn-level state shared across systems."""

    phase: TurnPhase = TurnPhase.IDLE
    selected: Optional[int] = None
    cascade_depth: int = 0
    turns_played: int = 0
