"""Tests for the Session state machine."""

from snake_arcade.config import GameConfig, SpeedSetting
from snake_arcade.engine import TickOutcome
from snake_arcade.scheduler import AsyncioScheduler
from snake_arcade.session import Session, SessionEvent, SessionPhase
from snake_arcade.snake import Direction


def _start(session, speed=SpeedSetting.MEDIUM):
    session.select_speed(speed)
    session.confirm()
    return session


def _crash(session, scheduler):
    session.engine.food = (14, 0)
    session.request_direction(Direction.UP)
    while session.phase is SessionPhase.RUNNING:
        scheduler.fire()


class FailingScheduler:
    def __init__(self):
        self.calls = 0

    def schedule_repeating(self, period_ms, callback):
        self.calls += 1
        raise RuntimeError("no running event loop")


class TestSessionTransitions:
    def test_initial_phase(self, make_session):
        session = make_session()
        assert session.phase is SessionPhase.SELECT_SPEED

    def test_select_speed_then_ready(self, make_session):
        session = make_session()
        assert session.select_speed(SpeedSetting.FAST)
        assert session.phase is SessionPhase.READY
        assert session.speed is SpeedSetting.FAST

    def test_speed_accepts_names(self, make_session):
        session = make_session()
        assert session.select_speed("SLOW")
        assert session.speed is SpeedSetting.SLOW

    def test_unknown_speed_ignored(self, make_session):
        session = make_session()
        assert not session.select_speed("ludicrous")
        assert session.phase is SessionPhase.SELECT_SPEED

    def test_reselect_while_ready(self, make_session):
        session = make_session()
        session.select_speed(SpeedSetting.SLOW)
        session.select_speed(SpeedSetting.FAST)
        assert session.phase is SessionPhase.READY
        assert session.speed is SpeedSetting.FAST

    def test_confirm_starts_ticking_at_speed_period(self, make_session, scheduler):
        session = _start(make_session(), SpeedSetting.FAST)
        assert session.phase is SessionPhase.RUNNING
        assert len(scheduler.active_tasks) == 1
        assert scheduler.active_tasks[0].period_ms == session.config.speeds.fast_ms

    def test_confirm_ignored_before_speed(self, make_session, scheduler):
        session = make_session()
        assert not session.confirm()
        assert session.phase is SessionPhase.SELECT_SPEED
        assert scheduler.tasks == []

    def test_select_speed_ignored_while_running(self, make_session):
        session = _start(make_session(), SpeedSetting.SLOW)
        assert not session.select_speed(SpeedSetting.FAST)
        assert session.speed is SpeedSetting.SLOW


class TestSessionPause:
    def test_pause_alternates(self, make_session, scheduler):
        session = _start(make_session())
        expected = [SessionPhase.PAUSED, SessionPhase.RUNNING] * 3
        for phase in expected:
            assert session.toggle_pause()
            assert session.phase is phase
            running = phase is SessionPhase.RUNNING
            assert len(scheduler.active_tasks) == (1 if running else 0)

    def test_pause_noop_outside_play(self, make_session):
        session = make_session()
        assert not session.toggle_pause()
        session.select_speed(SpeedSetting.SLOW)
        assert not session.toggle_pause()
        assert session.phase is SessionPhase.READY

    def test_paused_session_does_not_move(self, make_session, scheduler):
        session = _start(make_session())
        session.toggle_pause()
        assert session.tick() is TickOutcome.IDLE
        assert session.engine.snake.head == (7, 7)

    def test_never_two_active_tasks(self, make_session, scheduler):
        session = _start(make_session())
        for _ in range(5):
            session.toggle_pause()
            assert len(scheduler.active_tasks) <= 1


class TestSessionInput:
    def test_direction_ignored_outside_running(self, make_session):
        session = make_session()
        assert not session.request_direction(Direction.DOWN)
        session.select_speed(SpeedSetting.MEDIUM)
        assert not session.request_direction(Direction.DOWN)

    def test_direction_by_name(self, make_session, scheduler):
        session = _start(make_session())
        assert session.request_direction("down")
        scheduler.fire()
        assert session.engine.snake.head == (8, 7)

    def test_reversal_rejected(self, make_session, scheduler):
        session = _start(make_session())
        assert not session.request_direction(Direction.LEFT)
        scheduler.fire()
        assert session.engine.direction is Direction.RIGHT

    def test_handle_key(self, make_session, scheduler):
        session = make_session()
        session.select_speed(SpeedSetting.MEDIUM)
        assert session.handle_key("Enter")
        assert session.phase is SessionPhase.RUNNING
        assert session.handle_key("ArrowUp")
        assert session.handle_key(" ")
        assert session.phase is SessionPhase.PAUSED
        assert not session.handle_key("F5")

    def test_set_player(self, make_session):
        session = make_session()
        assert session.player == "Guest"
        session.set_player("  ada ")
        assert session.player == "ada"
        session.set_player("   ")
        assert session.player == "ada"

    def test_player_name_capped(self, make_session):
        session = make_session()
        session.set_player("x" * 40)
        assert session.player == "x" * 32

    def test_constructor_player_capped(self, scheduler):
        session = Session(GameConfig(seed=0), scheduler=scheduler, player="y" * 50)
        assert session.player == "y" * 32


class TestSessionGameOver:
    def test_collision_ends_session(self, make_session, scheduler):
        session = _start(make_session())
        _crash(session, scheduler)
        assert session.phase is SessionPhase.GAME_OVER
        assert scheduler.active_tasks == []

    def test_game_over_event_carries_submission(self, make_session, scheduler):
        session = _start(make_session())
        session.set_player("ada")
        received = []
        session.add_listener(
            SessionEvent.GAME_OVER,
            lambda event, snap, sub: received.append((event, snap, sub)),
        )
        session.engine.food = (7, 8)
        scheduler.fire()
        _crash(session, scheduler)
        assert len(received) == 1
        event, snap, submission = received[0]
        assert event is SessionEvent.GAME_OVER
        assert snap.phase is SessionPhase.GAME_OVER
        assert submission.player == "ada"
        assert submission.score == 1

    def test_food_event(self, make_session, scheduler):
        session = _start(make_session())
        events = []
        session.add_listener(
            SessionEvent.FOOD_CONSUMED,
            lambda event, snap, sub: events.append(snap.score),
        )
        session.engine.food = (7, 8)
        scheduler.fire()
        assert events == [1]

    def test_reset_only_from_game_over(self, make_session, scheduler):
        session = _start(make_session())
        assert not session.reset()
        _crash(session, scheduler)
        assert session.reset()
        assert session.phase is SessionPhase.SELECT_SPEED
        assert session.engine.snake.cells == ((7, 7),)
        assert session.engine.score == 0
        assert session.engine.direction is Direction.RIGHT

    def test_high_score_across_sessions(self, make_session, scheduler, high_scores):
        high_scores.set(5)
        high_scores.writes.clear()
        session = _start(make_session())
        for col in range(8, 15):
            session.engine.food = (7, col)
            scheduler.fire()
        _crash(session, scheduler)
        assert session.engine.high_score == 7
        assert high_scores.writes == [7]

        session.reset()
        _start(session)
        for col in range(8, 11):
            session.engine.food = (7, col)
            scheduler.fire()
        _crash(session, scheduler)
        assert session.engine.high_score == 7
        assert high_scores.writes == [7]


class TestSessionSnapshots:
    def test_first_tick_snapshot(self, make_session, scheduler):
        session = _start(make_session())
        snaps = []
        session.subscribe(snaps.append)
        scheduler.fire()
        snap = snaps[-1]
        assert snap.snake == ((7, 8),)
        assert snap.food == (5, 5)
        assert snap.score == 0
        assert snap.phase is SessionPhase.RUNNING

    def test_snapshot_on_every_transition(self, make_session):
        session = make_session()
        phases = []
        session.subscribe(lambda snap: phases.append(snap.phase))
        _start(session)
        session.toggle_pause()
        assert phases == [
            SessionPhase.READY, SessionPhase.RUNNING, SessionPhase.PAUSED,
        ]

    def test_unsubscribe(self, make_session):
        session = make_session()
        snaps = []
        unsubscribe = session.subscribe(snaps.append)
        unsubscribe()
        session.select_speed(SpeedSetting.FAST)
        assert snaps == []

    def test_failing_subscriber_does_not_stop_play(self, make_session, scheduler):
        session = _start(make_session())

        def boom(snap):
            raise RuntimeError("renderer crashed")

        session.subscribe(boom)
        scheduler.fire()
        assert session.engine.snake.head == (7, 8)

    def test_snapshot_dict(self, make_session):
        data = make_session().snapshot().to_dict()
        assert data["phase"] == "select_speed"
        assert data["snake"] == [[7, 7]]
        assert data["food"] == [5, 5]
        assert len(data["cells"]) == 15

    def test_close_cancels_task(self, make_session, scheduler):
        session = _start(make_session())
        session.close()
        assert scheduler.active_tasks == []


class TestSessionSchedulingFailure:
    def test_confirm_stays_ready(self):
        scheduler = FailingScheduler()
        session = Session(GameConfig(seed=0), scheduler=scheduler)
        session.select_speed(SpeedSetting.FAST)
        snapshots = []
        session.subscribe(snapshots.append)
        assert not session.confirm()
        assert scheduler.calls == 1
        assert session.phase is SessionPhase.READY
        assert snapshots == []

    def test_retry_after_failure(self, scheduler):
        session = Session(GameConfig(seed=0), scheduler=FailingScheduler())
        session.select_speed(SpeedSetting.SLOW)
        session.confirm()
        session.scheduler = scheduler
        assert session.confirm()
        assert session.phase is SessionPhase.RUNNING
        assert len(scheduler.active_tasks) == 1

    def test_resume_stays_paused(self, make_session, scheduler):
        session = _start(make_session())
        session.toggle_pause()
        session.scheduler = FailingScheduler()
        assert not session.toggle_pause()
        assert session.phase is SessionPhase.PAUSED
        assert scheduler.active_tasks == []

    def test_asyncio_scheduler_without_loop(self):
        session = Session(GameConfig(seed=0), scheduler=AsyncioScheduler())
        session.select_speed(SpeedSetting.MEDIUM)
        assert not session.confirm()
        assert session.phase is SessionPhase.READY
        assert session.tick() is TickOutcome.IDLE
