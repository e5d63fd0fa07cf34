"""Game session: the single owner of board, ledger and turn controller.

Consumers (renderers, reporters) talk to the engine only through this object:
``select`` for input, ``subscribe`` for observation, and the session control
methods for new games and pausing.
"""
from __future__ import annotations

import random
from pathlib import Path
from typing import Optional, Sequence

from crush.components.grid import Grid
from crush.components.score_ledger import LedgerSnapshot
from crush.components.turn_state import TurnPhase
from crush.constants import DEFAULT_PLAYER_KEY, GRID_WIDTH, MAX_CASCADE_STEPS, PALETTE
from crush.events.bus import EVENT_NEW_GAME, EVENT_SESSION_EXIT, EVENT_TICK, EventBus
from crush.systems.board import BoardSystem
from crush.systems.board_ops import generate_board
from crush.systems.high_score_system import HighScoreSystem
from crush.systems.match_resolution import MatchResolutionSystem
from crush.systems.score_report_system import ScoreReportSystem, Submitter
from crush.systems.score_system import ScoreSystem
from crush.utils.world_state import get_board, get_game_state, get_turn_state, set_paused
from crush.world import create_world


class GameSession:
    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        *,
        width: int = GRID_WIDTH,
        palette: Sequence[str] = PALETTE,
        rng: Optional[random.Random] = None,
        stage_delay: float = 0.0,
        max_cascade_steps: int = MAX_CASCADE_STEPS,
        player_key: str = DEFAULT_PLAYER_KEY,
        save_path: Optional[Path] = None,
        submitter: Optional[Submitter] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.width = width
        self.palette = list(palette)
        self.world = create_world(width=width, palette=self.palette, rng=rng)
        self.rng: random.Random = self.world.random

        # Engine systems
        self.score_system = ScoreSystem(self.world, self.event_bus)
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(
            self.world,
            self.event_bus,
            rng=self.rng,
            palette=self.palette,
            stage_delay=stage_delay,
            max_cascade_steps=max_cascade_steps,
        )

        # Collaborators
        self.high_score_system = HighScoreSystem(
            self.world,
            self.event_bus,
            player_key=player_key,
            save_path=save_path,
        )
        self.score_report_system = ScoreReportSystem(self.world, self.event_bus, submitter=submitter)

    # Input ----------------------------------------------------------------

    def select(self, position: int) -> None:
        self.board_system.select(position)

    def attempt_swap(self, src: int, dst: int) -> bool:
        return self.board_system.attempt_swap(src, dst)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def advance(self) -> bool:
        """Release the next staged board state of an in-flight turn."""
        return self.match_resolution_system.advance()

    def finish_turn(self) -> None:
        self.match_resolution_system.finish()

    # Observation ----------------------------------------------------------

    def subscribe(self, name: str, fn) -> None:
        """Register an observer whose failures are logged, never propagated."""
        self.event_bus.subscribe(name, fn, isolated=True)

    @property
    def grid(self) -> Grid:
        return get_board(self.world).grid.clone()

    @property
    def phase(self) -> TurnPhase:
        return get_turn_state(self.world).phase

    @property
    def selected(self) -> Optional[int]:
        return get_turn_state(self.world).selected

    @property
    def cascade_depth(self) -> int:
        """Cascade step of the stage last released; 0 outside a resolution."""
        return get_turn_state(self.world).cascade_depth

    @property
    def paused(self) -> bool:
        return get_game_state(self.world).paused

    @property
    def best_score(self) -> int:
        return self.high_score_system.best_score

    def snapshot(self) -> LedgerSnapshot:
        return self.score_system.snapshot()

    # Session control ------------------------------------------------------

    def new_game(self, *, restart: bool = False) -> None:
        self.match_resolution_system.cancel_pending()
        self.board_system.reset()
        get_board(self.world).grid = generate_board(self.width, self.palette, self.rng)
        self.event_bus.emit(EVENT_NEW_GAME, restart=restart)

    def restart(self) -> None:
        self.new_game(restart=True)
        set_paused(self.world, self.event_bus, False)

    def pause(self) -> None:
        set_paused(self.world, self.event_bus, True)

    def resume(self) -> None:
        set_paused(self.world, self.event_bus, False)

    def toggle_pause(self) -> None:
        set_paused(self.world, self.event_bus, not self.paused)

    def exit_game(self) -> LedgerSnapshot:
        """Publish the final score for persistence and reporting."""
        snapshot = self.snapshot()
        self.event_bus.emit(EVENT_SESSION_EXIT, snapshot=snapshot)
        return snapshot
