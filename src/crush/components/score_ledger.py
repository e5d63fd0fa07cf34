from __future__ import annotations

from dataclasses import dataclass

from crush.components.turn_summary import TurnSummary


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    total_score: int = 0
    combo_streak: int = 0
    elapsed_seconds: int = 0


@dataclass(slots=True)
class ScoreLedger:
    """Cumulative score, combo streak and elapsed time for one game session.

    The combo streak resets when a swap is attempted and grows by one for each
    cascade step that matched during that swap's resolution.
    """
    total_score: int = 0
    combo_streak: int = 0
    elapsed_seconds: int = 0

    def begin_turn(self) -> None:
        self.combo_streak = 0

    def apply_turn(self, summary: TurnSummary) -> None:
        if summary.score_delta < 0:
            raise ValueError("score delta cannot be negative")
        self.total_score += summary.score_delta
        self.combo_streak += summary.cascade_steps

    def tick(self) -> None:
        self.elapsed_seconds += 1

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            total_score=self.total_score,
            combo_streak=self.combo_streak,
            elapsed_seconds=self.elapsed_seconds,
        )

    def reset(self) -> None:
        self.total_score = 0
        self.combo_streak = 0
        self.elapsed_seconds = 0
