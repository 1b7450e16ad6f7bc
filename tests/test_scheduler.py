from wavescopelib.scheduler import RenderScheduler, SchedulerState


def _scheduler(clock, transport):
    draws = []
    scheduler = RenderScheduler(clock, transport, lambda: draws.append(1))
    return scheduler, draws


def test_start_twice_keeps_one_pending_tick(clock, transport):
    transport.is_playing = True
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    scheduler.start()
    assert scheduler.state is SchedulerState.RUNNING
    assert scheduler.has_pending_tick
    assert len(clock.pending) == 1
    clock.tick()
    assert len(draws) == 1
    assert len(clock.pending) == 1
    scheduler.stop()
    assert not scheduler.has_pending_tick


def test_draws_once_per_tick_while_playing(clock, transport):
    transport.is_playing = True
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    clock.tick(5)
    assert len(draws) == 5
    assert scheduler.frames_drawn == 5


def test_pause_is_noticed_on_next_tick(clock, transport):
    transport.is_playing = True
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    clock.tick(2)
    transport.is_playing = False
    clock.tick()
    assert len(draws) == 2
    assert scheduler.state is SchedulerState.IDLE
    assert not clock.pending


def test_stop_cancels_pending_tick(clock, transport):
    transport.is_playing = True
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    scheduler.stop()
    assert not clock.pending
    assert clock.tick() == 0
    assert draws == []


def test_tick_delivered_after_stop_does_nothing(clock, transport):
    transport.is_playing = True
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    (stale,) = clock.pending.values()
    scheduler.stop()
    clock.deliver_stale(stale)
    assert draws == []
    assert not clock.pending
    assert scheduler.state is SchedulerState.IDLE


def test_stop_is_idempotent(clock, transport):
    scheduler, _ = _scheduler(clock, transport)
    scheduler.stop()
    scheduler.stop()
    assert scheduler.state is SchedulerState.IDLE


def test_stop_from_inside_draw_does_not_reschedule(clock, transport):
    transport.is_playing = True
    holder = {}

    def draw():
        holder["scheduler"].stop()

    scheduler = RenderScheduler(clock, transport, draw)
    holder["scheduler"] = scheduler
    scheduler.start()
    clock.tick()
    assert not scheduler.is_running
    assert not clock.pending


def test_restart_after_idle(clock, transport):
    scheduler, draws = _scheduler(clock, transport)
    scheduler.start()
    clock.tick()  # not playing: goes idle without drawing
    assert draws == []
    transport.is_playing = True
    scheduler.start()
    clock.tick()
    assert draws == [1]


def test_transport_stopping_on_its_own_reports_once(clock, transport):
    transport.is_playing = True
    stopped = []
    draws = []
    scheduler = RenderScheduler(clock, transport, lambda: draws.append(1),
                                lambda: stopped.append(scheduler.state))
    scheduler.start()
    clock.tick()
    transport.is_playing = False
    clock.tick(3)
    assert draws == [1]
    assert stopped == [SchedulerState.IDLE]


def test_explicit_stop_does_not_report(clock, transport):
    transport.is_playing = True
    stopped = []
    scheduler = RenderScheduler(clock, transport, lambda: None,
                                lambda: stopped.append(1))
    scheduler.start()
    scheduler.stop()
    transport.is_playing = False
    clock.tick()
    assert stopped == []
