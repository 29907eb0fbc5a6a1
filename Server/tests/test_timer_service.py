from wordzy.models.event import Outgoing
from wordzy.services.room_service import RoomOutbox, RoomService
from wordzy.services.timer_service import RoundTimer


class FakeSpawner:
    """Collects spawned tasks instead of running them."""

    def __init__(self):
        self.tasks = []

    def __call__(self, target, *args):
        self.tasks.append((target, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)


class ScriptedRooms:
    """Room service double whose tick results are scripted."""

    def __init__(self, results):
        self.results = list(results)
        self.outbox = RoomOutbox()
        self.ticks = []
        self.terminated = []

    def find_outbox(self, room_id):
        return self.outbox

    def tick(self, room_id, session_id):
        self.ticks.append((room_id, session_id))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        time_left, keep_running = result
        events = [Outgoing.broadcast(['p1'], 'timer-update', {'timeLeft': time_left})]
        self.outbox.put(events)
        return events, keep_running

    def terminate(self, room_id):
        self.terminated.append(room_id)
        events = [Outgoing.broadcast(['p1'], 'room-disbanded', {'roomId': room_id, 'reason': 'internal-error'})]
        self.outbox.put(events)
        return events


def make_timer(rooms, sleeps=None):
    spawner = FakeSpawner()
    timer = RoundTimer(spawner, (sleeps.append if sleeps is not None else lambda s: None), interval_ms=250)
    delivered = []
    timer.bind(rooms, delivered.append)
    return timer, spawner, delivered


def test_ticks_until_round_ends():
    rooms = ScriptedRooms([(2_000, True), (1_000, True), (0, False)])
    sleeps = []
    timer, spawner, delivered = make_timer(rooms, sleeps)

    timer.start('ROOM1', 's1')
    assert timer.is_running('ROOM1', 's1')
    spawner.run_all()

    assert [e.payload['timeLeft'] for e in delivered] == [2_000, 1_000, 0]
    assert sleeps == [0.25, 0.25, 0.25]
    assert not timer.is_running('ROOM1', 's1')


def test_cancel_stops_before_next_tick():
    rooms = ScriptedRooms([(5_000, True)])
    timer, spawner, delivered = make_timer(rooms)

    timer.start('ROOM1', 's1')
    timer.cancel('ROOM1')
    spawner.run_all()

    assert rooms.ticks == []
    assert delivered == []


def test_new_round_supersedes_old_countdown():
    rooms = ScriptedRooms([(1_000, False)])
    timer, spawner, _ = make_timer(rooms)

    timer.start('ROOM1', 'old')
    timer.start('ROOM1', 'new')
    spawner.run_all()

    # Only the current round's task ticks
    assert rooms.ticks == [('ROOM1', 'new')]


def test_cancel_with_other_session_is_ignored():
    timer, _, _ = make_timer(ScriptedRooms([]))
    timer.start('ROOM1', 's2')
    timer.cancel('ROOM1', 's1')
    assert timer.is_running('ROOM1', 's2')
    assert timer.active_count() == 1


def test_tick_failure_closes_room():
    rooms = ScriptedRooms([RuntimeError('boom')])
    timer, spawner, delivered = make_timer(rooms)

    timer.start('ROOM1', 's1')
    spawner.run_all()

    assert not timer.is_running('ROOM1', 's1')
    assert rooms.terminated == ['ROOM1']
    assert [e.event for e in delivered] == ['room-disbanded']
    assert delivered[0].payload == {'roomId': 'ROOM1', 'reason': 'internal-error'}


def test_tick_failure_does_not_leave_round_active(game_service, clock, monkeypatch):
    spawner = FakeSpawner()
    timer = RoundTimer(spawner, lambda s: None)
    rooms = RoomService(game_service, timer=timer, clock=clock)
    delivered = []
    timer.bind(rooms, delivered.append)

    room_id = rooms.create_room('p1', 'alice')
    rooms.join(room_id, 'p2', 'bob')
    rooms.start_game(room_id, 'p1')
    rooms.find_outbox(room_id).flush(lambda event: None)

    def broken_tick(*args):
        raise RuntimeError('boom')

    monkeypatch.setattr(rooms, 'tick', broken_tick)
    spawner.run_all()

    assert not rooms.room_exists(room_id)
    assert timer.active_count() == 0
    disbanded = [e for e in delivered if e.event == 'room-disbanded']
    assert len(disbanded) == 1
    assert set(disbanded[0].recipients) == {'p1', 'p2'}
