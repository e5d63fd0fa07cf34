from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from esper import World

from crush.components.high_score import HighScoreTracker
from crush.components.score_ledger import LedgerSnapshot
from crush.constants import DATA_DIR_ENV, DEFAULT_DATA_DIR, DEFAULT_PLAYER_KEY, HIGH_SCORE_FILENAME
from crush.events.bus import (
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_EXIT,
    EventBus,
)

logger = logging.getLogger(__name__)


class HighScoreSystem:
    """Tracks and persists the best score per player key.

    The save file maps player keys to integers. Read and write failures are
    logged and otherwise ignored; the game keeps running with the in-memory
    value.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        player_key: str = DEFAULT_PLAYER_KEY,
        save_path: Path | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._save_path = Path(save_path) if save_path is not None else self._default_save_path()
        self._tracker_entity = self._ensure_tracker_entity(player_key)

        self.event_bus.subscribe(EVENT_SCORE_CHANGED, self._on_score_changed, isolated=True)
        self.event_bus.subscribe(EVENT_SESSION_EXIT, self._on_session_exit, isolated=True)

        if load_existing:
            self.load()

    @staticmethod
    def _default_save_path() -> Path:
        data_dir = os.environ.get(DATA_DIR_ENV)
        return (Path(data_dir) if data_dir else DEFAULT_DATA_DIR) / HIGH_SCORE_FILENAME

    def _ensure_tracker_entity(self, player_key: str) -> int:
        existing = list(self.world.get_component(HighScoreTracker))
        if existing:
            entity, tracker = existing[0]
            tracker.player_key = player_key
            return entity
        return self.world.create_entity(HighScoreTracker(player_key=player_key))

    def _tracker(self) -> HighScoreTracker:
        return self.world.component_for_entity(self._tracker_entity, HighScoreTracker)

    @property
    def save_path(self) -> Path:
        return self._save_path

    @property
    def best_score(self) -> int:
        return self._tracker().best_score

    def _read_all(self) -> dict:
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read high scores from %s: %s", self._save_path, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        scores = payload.get("best_scores", {})
        return scores if isinstance(scores, dict) else {}

    def load(self) -> int:
        tracker = self._tracker()
        stored = self._read_all().get(tracker.player_key, 0)
        try:
            tracker.best_score = max(0, int(stored))
        except (TypeError, ValueError):
            tracker.best_score = 0
        return tracker.best_score

    def save(self) -> bool:
        tracker = self._tracker()
        scores = self._read_all()
        scores[tracker.player_key] = tracker.best_score
        try:
            self._save_path.parent.mkdir(parents=True, exist_ok=True)
            with self._save_path.open("w", encoding="utf-8") as handle:
                json.dump({"best_scores": scores}, handle, indent=2)
        except OSError as exc:
            logger.warning("Could not write high scores to %s: %s", self._save_path, exc)
            return False
        return True

    def record(self, score: int) -> bool:
        """Store ``score`` when it beats the current best. Returns True on a new best."""
        tracker = self._tracker()
        if score <= tracker.best_score:
            return False
        tracker.best_score = score
        self.save()
        self.event_bus.emit(
            EVENT_HIGH_SCORE_CHANGED,
            player_key=tracker.player_key,
            best_score=tracker.best_score,
        )
        return True

    # Event handlers -----------------------------------------------------

    def _on_score_changed(self, sender, **payload) -> None:
        snapshot: LedgerSnapshot | None = payload.get("snapshot")
        if snapshot is not None:
            self.record(snapshot.total_score)

    def _on_session_exit(self, sender, **payload) -> None:
        snapshot: LedgerSnapshot | None = payload.get("snapshot")
        if snapshot is not None:
            self.record(snapshot.total_score)
