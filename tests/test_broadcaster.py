from types import SimpleNamespace

from tictactoe.models import GameState
from tictactoe.services.games.broadcaster import UpdateBroadcaster


class FakeManager:
    def __init__(self):
        self.connected = set()

    def is_connected(self, sid, namespace):
        return sid in self.connected


class FakeSocketIO:
    def __init__(self, failing=()):
        self.server = SimpleNamespace(manager=FakeManager())
        self.sent = []
        self.tasks = []
        self.failing = set(failing)

    def emit(self, event, data, to=None, namespace=None):
        if to in self.failing:
            raise ConnectionError('socket write failed')
        self.sent.append((event, data, to, namespace))

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))


def _state(game_id='g-1'):
    return GameState(
        id=game_id, board=(None,) * 9, current_player='X', winner=None,
        player_x_name='Alice', player_o_name='Bob', status='playing',
        reset_requested_by=None, version=1,
    )


def _broadcaster(sio, background=False):
    return UpdateBroadcaster(sio, namespace='/ws', background=background)


def test_publish_reaches_every_open_subscriber():
    sio = FakeSocketIO()
    sio.server.manager.connected.update({'a', 'b', 'c'})
    b = _broadcaster(sio)
    b.subscribe('a', 'g-1')
    b.subscribe('b', 'g-1')
    b.subscribe('c', 'g-2')

    b.publish('g-1', _state())

    assert sorted(to for _, _, to, _ in sio.sent) == ['a', 'b']
    event, payload, _, namespace = sio.sent[0]
    assert event == 'game_update'
    assert namespace == '/ws'
    assert payload['type'] == 'game_update'
    assert payload['gameId'] == 'g-1'
    assert payload['data']['playerOName'] == 'Bob'


def test_publish_without_subscribers_is_a_no_op():
    sio = FakeSocketIO()
    _broadcaster(sio).publish('g-1', _state())
    assert sio.sent == []


def test_closed_connection_is_skipped_and_pruned():
    sio = FakeSocketIO()
    sio.server.manager.connected.add('live')
    b = _broadcaster(sio)
    b.subscribe('live', 'g-1')
    b.subscribe('gone', 'g-1')

    b.publish('g-1', _state())

    assert [to for _, _, to, _ in sio.sent] == ['live']
    assert b.subscribers('g-1') == {'live'}


def test_failing_send_does_not_stop_fan_out():
    sio = FakeSocketIO(failing={'bad'})
    sio.server.manager.connected.update({'bad', 'good'})
    b = _broadcaster(sio)
    b.subscribe('bad', 'g-1')
    b.subscribe('good', 'g-1')

    b.publish('g-1', _state())

    assert [to for _, _, to, _ in sio.sent] == ['good']


def test_unsubscribe_and_drop_prune_empty_games():
    b = _broadcaster(FakeSocketIO())
    b.subscribe('a', 'g-1')
    b.subscribe('a', 'g-2')
    b.subscribe('b', 'g-2')

    b.unsubscribe('a', 'g-1')
    assert b.subscribers('g-1') == set()
    assert 'g-1' not in b._subscriptions

    b.drop('a')
    assert b.subscribers('g-2') == {'b'}
    b.drop('b')
    assert b._subscriptions == {}


def test_unsubscribe_unknown_is_harmless():
    b = _broadcaster(FakeSocketIO())
    b.unsubscribe('a', 'g-1')
    b.drop('a')
    assert b._subscriptions == {}


def test_background_publish_hands_off_to_socketio_task():
    sio = FakeSocketIO()
    sio.server.manager.connected.add('a')
    b = _broadcaster(sio, background=True)
    b.subscribe('a', 'g-1')

    b.publish('g-1', _state())
    assert sio.sent == []
    assert len(sio.tasks) == 1

    target, args = sio.tasks[0]
    target(*args)
    assert [to for _, _, to, _ in sio.sent] == ['a']


def test_close_clears_everything():
    b = _broadcaster(FakeSocketIO())
    b.subscribe('a', 'g-1')
    b.close()
    assert b.subscribers('g-1') == set()
