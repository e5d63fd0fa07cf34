from __future__ import annotations

import logging
import time
from itertools import count
from typing import Callable, List, Optional

from esper import World

from crush.components.score_ledger import LedgerSnapshot
from crush.components.score_report import ScoreReport
from crush.components.turn_summary import TurnSummary
from crush.constants import POINTS_PER_TOKEN, REPORT_HISTORY_LIMIT
from crush.events.bus import (
    EVENT_SCORE_CHANGED,
    EVENT_SCORE_REPORTED,
    EVENT_SESSION_EXIT,
    EventBus,
)

logger = logging.getLogger(__name__)

Submitter = Callable[[ScoreReport], None]


def log_submitter(report: ScoreReport) -> None:
    logger.info(
        "Score ready for submission: score=%d matches=%d combo=%d id=%s",
        report.score, report.matched_count, report.combo_bonus, report.report_id,
    )


class ScoreReportSystem:
    """Fire-and-forget reporting of scores to an external submitter.

    A report is built for every turn that matched and once more when the
    session exits with a positive score. Submitter exceptions mark the report
    failed and are logged; nothing is retried.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        submitter: Optional[Submitter] = None,
        clock: Callable[[], float] = time.time,
        history_limit: int = REPORT_HISTORY_LIMIT,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.submitter = submitter or log_submitter
        self._clock = clock
        self._history_limit = max(1, history_limit)
        self._sequence = count(1)
        self.reports: List[ScoreReport] = []
        self.event_bus.subscribe(EVENT_SCORE_CHANGED, self._on_score_changed, isolated=True)
        self.event_bus.subscribe(EVENT_SESSION_EXIT, self._on_session_exit, isolated=True)

    def _on_score_changed(self, sender, **payload) -> None:
        snapshot: LedgerSnapshot | None = payload.get("snapshot")
        summary: TurnSummary | None = payload.get("summary")
        if snapshot is None or summary is None:
            return
        self.submit(snapshot.total_score, summary.tokens_cleared, summary.combo_bonus_applied)

    def _on_session_exit(self, sender, **payload) -> None:
        snapshot: LedgerSnapshot | None = payload.get("snapshot")
        if snapshot is None or snapshot.total_score <= 0:
            return
        self.submit(
            snapshot.total_score,
            snapshot.total_score // POINTS_PER_TOKEN,
            snapshot.combo_streak,
        )

    def submit(self, score: int, matched_count: int, combo_bonus: int) -> ScoreReport:
        now = self._clock()
        report = ScoreReport(
            report_id=f"{int(now * 1000)}-{next(self._sequence)}",
            score=score,
            matched_count=matched_count,
            combo_bonus=combo_bonus,
            timestamp=now,
        )
        self.reports.insert(0, report)
        del self.reports[self._history_limit:]
        try:
            self.submitter(report)
        except Exception as exc:
            report.status = 'failed'
            logger.warning("Score submission %s failed: %s", report.report_id, exc)
        else:
            report.status = 'success'
        self.event_bus.emit(EVENT_SCORE_REPORTED, report=report)
        return report
