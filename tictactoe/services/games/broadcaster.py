from tictactoe.models import GameState
from collections import defaultdict
from typing import Dict, Set
import logging
import threading


class UpdateBroadcaster:
    """Fan out game state to the Socket.IO connections subscribed to each game.

    Delivery is best-effort and at most once: a connection that has gone
    away by send time is skipped and forgotten, and a failing send is
    logged without affecting the request that triggered it. Clients poll
    ``GET /api/games/<id>`` to recover anything they missed.
    """

    event = 'game_update'

    def __init__(self, socketio, namespace: str = '/ws', background: bool = True, logger=None):
        self._socketio = socketio
        self.namespace = namespace
        self.background = background
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, Set[str]] = defaultdict(set)

    def subscribe(self, sid: str, game_id: str) -> None:
        with self._lock:
            self._subscriptions[game_id].add(sid)

    def unsubscribe(self, sid: str, game_id: str) -> None:
        with self._lock:
            self._discard(sid, game_id)

    def drop(self, sid: str) -> None:
        """Forget ``sid`` everywhere; called when its connection closes."""
        with self._lock:
            for game_id in list(self._subscriptions):
                self._discard(sid, game_id)

    def subscribers(self, game_id: str) -> Set[str]:
        with self._lock:
            return set(self._subscriptions.get(game_id, ()))

    def publish(self, game_id: str, state: GameState) -> None:
        payload = {'type': 'game_update', 'gameId': game_id, 'data': state.to_dict()}
        if self.background:
            self._socketio.start_background_task(self._fan_out, game_id, payload)
        else:
            self._fan_out(game_id, payload)

    def close(self) -> None:
        with self._lock:
            self._subscriptions.clear()

    def _fan_out(self, game_id: str, payload: dict) -> int:
        sent = 0
        for sid in self.subscribers(game_id):
            if not self._is_open(sid):
                self.drop(sid)
                continue
            try:
                self._socketio.emit(self.event, payload, to=sid, namespace=self.namespace)
                sent += 1
            except Exception:
                self.logger.exception(f"[broadcast-fail] game={game_id} sid={sid}")
        self.logger.info(f"[broadcast] game={game_id} delivered={sent}")
        return sent

    def _is_open(self, sid: str) -> bool:
        return self._socketio.server.manager.is_connected(sid, self.namespace)

    def _discard(self, sid: str, game_id: str) -> None:
        sids = self._subscriptions.get(game_id)
        if sids is None:
            return
        sids.discard(sid)
        if not sids:
            del self._subscriptions[game_id]
