import random

from esper import World

from crush.components.score_ledger import LedgerSnapshot
from crush.components.turn_state import TurnPhase
from crush.events.bus import EVENT_SCORE_REPORTED, EventBus
from crush.session import GameSession
from crush.systems.score_report_system import ScoreReportSystem
from tests.helpers import ScriptedRandom, load_grid, striped_grid


def make_system(**kwargs):
    bus = EventBus()
    times = iter(range(1000, 2000))
    system = ScoreReportSystem(World(), bus, clock=lambda: float(next(times)), **kwargs)
    return bus, system


def test_successful_submission_is_marked_success():
    sent = []
    _, system = make_system(submitter=sent.append)
    report = system.submit(120, 12, 10)
    assert sent == [report]
    assert report.status == 'success'
    assert report.score == 120
    assert report.matched_count == 12
    assert report.combo_bonus == 10
    assert report.report_id == "1000000-1"


def test_failing_submitter_marks_report_failed():
    def offline(report):
        raise ConnectionError("leaderboard offline")

    bus, system = make_system(submitter=offline)
    reported = []
    bus.subscribe(EVENT_SCORE_REPORTED, lambda sender, **payload: reported.append(payload['report']))
    report = system.submit(30, 3, 0)
    assert report.status == 'failed'
    assert reported == [report]


def test_history_keeps_most_recent_reports_first():
    _, system = make_system(submitter=lambda report: None)
    for score in range(1, 13):
        system.submit(score * 10, score, 0)
    assert len(system.reports) == 10
    assert [r.score for r in system.reports[:3]] == [120, 110, 100]
    assert system.reports[-1].score == 30
    assert len({r.report_id for r in system.reports}) == 10


def test_history_limit_is_configurable():
    _, system = make_system(submitter=lambda report: None, history_limit=2)
    for score in (10, 20, 30):
        system.submit(score, 1, 0)
    assert [r.score for r in system.reports] == [30, 20]


def test_exit_reports_final_score_in_token_units():
    bus, system = make_system(submitter=lambda report: None)
    system._on_session_exit(bus, snapshot=LedgerSnapshot(total_score=250, combo_streak=3))
    report = system.reports[0]
    assert report.score == 250
    assert report.matched_count == 25
    assert report.combo_bonus == 3


def test_exit_with_zero_score_sends_nothing():
    bus, system = make_system(submitter=lambda report: None)
    system._on_session_exit(bus, snapshot=LedgerSnapshot())
    assert system.reports == []


def test_submitter_failure_leaves_engine_intact(save_path):
    def offline(report):
        raise ConnectionError("leaderboard offline")

    grid = striped_grid()
    grid.set(1, 'red')
    grid.set(10, 'red')
    session = GameSession(rng=random.Random(8), save_path=save_path, submitter=offline)
    load_grid(session, grid)
    session.match_resolution_system.rng = ScriptedRandom(['blue', 'purple', 'blue'])
    session.select(2)
    session.select(10)
    assert session.phase is TurnPhase.IDLE
    assert session.snapshot().total_score == 30
    reports = session.score_report_system.reports
    assert [r.status for r in reports] == ['failed']
    assert reports[0].matched_count == 3

    session.exit_game()
    assert [r.matched_count for r in reports] == [3, 3]
    assert reports[0].score == 30
