from dataclasses import dataclass


@dataclass(slots=True)
class ScoreReport:
    """One outbound score submission and its delivery status."""
    report_id: str
    score: int
    matched_count: int
    combo_bonus: int
    timestamp: float
    status: str = 'pending'  # 'pending', 'success', 'failed'
