from __future__ import annotations

import logging
import random
from typing import Generator, Optional, Sequence

from esper import World

from crush.components.board import Board
from crush.components.grid import Grid
from crush.components.turn_summary import CascadeStage, TurnSummary
from crush.constants import MAX_CASCADE_STEPS, PALETTE
from crush.errors import InvalidSwap
from crush.events.bus import (
    EVENT_BOARD_STAGE,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_TICK,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TURN_ACTION_STARTED,
    EVENT_TURN_RESOLVED,
    EventBus,
)
from crush.systems.board_ops import (
    apply_gravity_moves,
    cascade_step_points,
    clear_positions,
    compute_gravity_moves,
    find_matches,
    generate_board,
    matched_positions,
    refill_empty,
)
from crush.utils.world_state import get_board, get_turn_state

logger = logging.getLogger(__name__)

TurnResolution = Generator[CascadeStage, None, TurnSummary]


def iter_resolve_turn(
    grid: Grid,
    src: int,
    dst: int,
    *,
    rng: Optional[random.Random] = None,
    palette: Sequence[str] = PALETTE,
    max_cascade_steps: int = MAX_CASCADE_STEPS,
) -> TurnResolution:
    """Resolve one swap as a sequence of stages.

    Yields a ``CascadeStage`` after the swap and after every clear, drop and
    refill, then returns the ``TurnSummary``. The input grid is never mutated;
    all work happens on a clone. Bad positions and non-adjacent swaps raise
    before the first stage.
    """
    if not grid.is_adjacent(src, dst):
        raise InvalidSwap(src, dst)
    return _stages(grid, src, dst, rng or random.Random(), palette, max_cascade_steps)


def _stages(
    grid: Grid,
    src: int,
    dst: int,
    rng: random.Random,
    palette: Sequence[str],
    max_cascade_steps: int,
) -> TurnResolution:
    working = grid.clone()
    working.swap(src, dst)
    yield CascadeStage(kind='swap', depth=0, positions=(src, dst), grid=working.clone())

    tokens_cleared = 0
    score_delta = 0
    combo_bonus = 0
    combo_streak = 0
    while True:
        matches = find_matches(working)
        if not matches:
            break
        if combo_streak >= max_cascade_steps:
            logger.warning("Cascade exceeded %d steps; respawning board", max_cascade_steps)
            working.fill(generate_board(working.width, palette, rng, require_valid_move=False).cells)
            yield CascadeStage(kind='refill', depth=combo_streak, positions=tuple(range(working.size)), grid=working.clone())
            break
        depth = combo_streak + 1
        positions = matched_positions(matches)
        clear_positions(working, positions)
        # A cell shared by a row run and a column run counts once per run.
        matched = sum(len(run) for run in matches)
        points, bonus = cascade_step_points(matched, combo_streak)
        tokens_cleared += matched
        score_delta += points
        combo_bonus += bonus
        combo_streak += 1
        yield CascadeStage(kind='clear', depth=depth, positions=tuple(positions), grid=working.clone())

        moves = compute_gravity_moves(working)
        apply_gravity_moves(working, moves)
        yield CascadeStage(kind='drop', depth=depth, positions=tuple(m.target for m in moves), grid=working.clone())

        spawned = refill_empty(working, palette, rng)
        yield CascadeStage(kind='refill', depth=depth, positions=tuple(spawned), grid=working.clone())

    if combo_streak == 0:
        # The swap made no match: hand back the pre-swap board untouched.
        yield CascadeStage(kind='revert', depth=0, positions=(src, dst), grid=grid.clone())
        return TurnSummary(
            tokens_cleared=0,
            score_delta=0,
            combo_bonus_applied=0,
            final_grid=grid.clone(),
            had_any_match=False,
            cascade_steps=0,
            swap=(src, dst),
        )
    return TurnSummary(
        tokens_cleared=tokens_cleared,
        score_delta=score_delta,
        combo_bonus_applied=combo_bonus,
        final_grid=working,
        had_any_match=True,
        cascade_steps=combo_streak,
        swap=(src, dst),
    )


def resolve_turn(grid: Grid, src: int, dst: int, **kwargs) -> TurnSummary:
    """Run ``iter_resolve_turn`` to completion, discarding intermediate stages."""
    resolution = iter_resolve_turn(grid, src, dst, **kwargs)
    while True:
        try:
            next(resolution)
        except StopIteration as done:
            return done.value


class MatchResolutionSystem:
    """Drives a staged turn resolution and publishes each stage.

    With ``stage_delay`` at 0 a swap request resolves synchronously. Otherwise
    one stage is released per ``stage_delay`` seconds of tick time so a renderer
    can animate between them; input stays locked until the turn completes.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: Optional[random.Random] = None,
        palette: Sequence[str] = PALETTE,
        stage_delay: float = 0.0,
        max_cascade_steps: int = MAX_CASCADE_STEPS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.palette = list(palette)
        self.stage_delay = max(0.0, float(stage_delay))
        self.max_cascade_steps = max_cascade_steps
        self._resolution: Optional[TurnResolution] = None
        self._elapsed = 0.0
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def resolving(self) -> bool:
        return self._resolution is not None

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if src is None or dst is None or self.resolving:
            return
        board: Board = get_board(self.world)
        resolution = iter_resolve_turn(
            board.grid,
            src,
            dst,
            rng=self.rng,
            palette=self.palette,
            max_cascade_steps=self.max_cascade_steps,
        )
        get_turn_state(self.world).cascade_depth = 0
        self.event_bus.emit(EVENT_TURN_ACTION_STARTED, src=src, dst=dst)
        self._resolution = resolution
        self._elapsed = 0.0
        if self.stage_delay <= 0.0:
            self.finish()

    def on_tick(self, sender, **kwargs):
        if not self.resolving or self.stage_delay <= 0.0:
            return
        self._elapsed += float(kwargs.get('dt', 0.0))
        while self.resolving and self._elapsed >= self.stage_delay:
            self._elapsed -= self.stage_delay
            self.advance()

    def advance(self) -> bool:
        """Release the next stage. Returns False once the turn has completed."""
        if self._resolution is None:
            return False
        try:
            stage = next(self._resolution)
        except StopIteration as done:
            self._resolution = None
            self._complete(done.value)
            return False
        self._publish(stage)
        return True

    def finish(self) -> None:
        while self.advance():
            pass

    def _publish(self, stage: CascadeStage) -> None:
        state = get_turn_state(self.world)
        state.cascade_depth = stage.depth
        self.event_bus.emit(EVENT_BOARD_STAGE, stage=stage)
        if stage.kind == 'clear':
            self.event_bus.emit(
                EVENT_CASCADE_STEP,
                depth=stage.depth,
                positions=stage.positions,
            )

    def _complete(self, summary: TurnSummary) -> None:
        board: Board = get_board(self.world)
        board.grid = summary.final_grid.clone()
        state = get_turn_state(self.world)
        depth = summary.cascade_steps
        logger.debug(
            "Swap %s resolved: matched=%s cleared=%d score=%d depth=%d",
            summary.swap, summary.had_any_match, summary.tokens_cleared, summary.score_delta, depth,
        )
        state.cascade_depth = 0
        self.event_bus.emit(EVENT_TURN_RESOLVED, summary=summary)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)

    def cancel_pending(self) -> None:
        """Drop an unfinished resolution; used when a new game replaces the board."""
        if self._resolution is not None:
            self._resolution.close()
        self._resolution = None
        self._elapsed = 0.0
