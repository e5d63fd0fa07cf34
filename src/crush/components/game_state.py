"""Game state resource describing session-wide flags."""
from dataclasses import dataclass


@dataclass
class GameState:
    """Singleton component; ``paused`` blocks input and the elapsed-time clock."""
    paused: bool = False
