from dataclasses import dataclass


@dataclass(slots=True)
class HighScoreTracker:
    """Best score seen for one player key; mirrored to disk by HighScoreSystem."""
    player_key: str
    best_score: int = 0
