from esper import World

from crush.components.score_ledger import LedgerSnapshot, ScoreLedger
from crush.components.turn_state import TurnPhase
from crush.components.turn_summary import TurnSummary
from crush.events.bus import (
    EVENT_CLOCK_TICK,
    EVENT_NEW_GAME,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EVENT_TURN_ACTION_STARTED,
    EVENT_TURN_RESOLVED,
    EventBus,
)
from crush.utils.world_state import get_game_state, get_ledger, get_turn_state


class ScoreSystem:
    """Keeps the ScoreLedger in step with turns and the game clock.

    Elapsed time only advances while the game is neither paused nor resolving;
    partial seconds carry over between ticks.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self._clock_accumulator = 0.0
        if not list(self.world.get_component(ScoreLedger)):
            self.world.create_entity(ScoreLedger())
        self.event_bus.subscribe(EVENT_TURN_ACTION_STARTED, self.on_turn_action_started)
        self.event_bus.subscribe(EVENT_TURN_RESOLVED, self.on_turn_resolved)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_new_game)

    @property
    def ledger(self) -> ScoreLedger:
        return get_ledger(self.world)

    def snapshot(self) -> LedgerSnapshot:
        return self.ledger.snapshot()

    def on_turn_action_started(self, sender, **kwargs):
        self.ledger.begin_turn()

    def on_turn_resolved(self, sender, **kwargs):
        summary: TurnSummary = kwargs.get('summary')
        if summary is None:
            return
        ledger = self.ledger
        ledger.apply_turn(summary)
        if summary.had_any_match:
            self.event_bus.emit(
                EVENT_SCORE_CHANGED,
                snapshot=ledger.snapshot(),
                delta=summary.score_delta,
                summary=summary,
            )

    def on_tick(self, sender, **kwargs):
        if get_game_state(self.world).paused:
            return
        if get_turn_state(self.world).phase is TurnPhase.RESOLVING:
            return
        self._clock_accumulator += float(kwargs.get('dt', 0.0))
        ledger = self.ledger
        while self._clock_accumulator >= 1.0:
            self._clock_accumulator -= 1.0
            ledger.tick()
            self.event_bus.emit(EVENT_CLOCK_TICK, elapsed_seconds=ledger.elapsed_seconds)

    def on_new_game(self, sender, **kwargs):
        self._clock_accumulator = 0.0
        self.ledger.reset()
