from flask import current_app, request
from flask_socketio import emit
from tictactoe import WS_NAMESPACE, socketio
from tictactoe.services.games.broadcaster import UpdateBroadcaster
import json


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def make_handlers(broadcaster: UpdateBroadcaster):
    """Build the /ws event handlers bound to one app's broadcaster."""

    def handle_connect(auth=None):
        emit('connected', {'message': f'Connected to {WS_NAMESPACE}'})

    def handle_disconnect(reason=None):
        broadcaster.drop(_get_sid())
        current_app.logger.info(f"[ws-disconnect] sid={_get_sid()}")

    def subscribe(game_id: str) -> None:
        broadcaster.subscribe(_get_sid(), game_id)
        current_app.logger.info(f"[subscribe] game={game_id} sid={_get_sid()}")
        emit('subscribed', {'gameId': game_id})

    def unsubscribe(game_id: str) -> None:
        broadcaster.unsubscribe(_get_sid(), game_id)
        current_app.logger.info(f"[unsubscribe] game={game_id} sid={_get_sid()}")
        emit('unsubscribed', {'gameId': game_id})

    def handle_subscribe(data=None):
        game_id = data.get('gameId') if isinstance(data, dict) else None
        if not game_id:
            emit('error', {'message': 'gameId is required'})
            return
        subscribe(game_id)

    def handle_unsubscribe(data=None):
        game_id = data.get('gameId') if isinstance(data, dict) else None
        if not game_id:
            emit('error', {'message': 'gameId is required'})
            return
        unsubscribe(game_id)

    def handle_message(data=None):
        # Plain messages carry {"type": ..., "gameId": ...}; anything else is ignored
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except ValueError:
                return
        if not isinstance(data, dict) or not data.get('gameId'):
            return
        if data.get('type') == 'subscribe':
            subscribe(data['gameId'])
        elif data.get('type') == 'unsubscribe':
            unsubscribe(data['gameId'])

    def handle_ping(data=None):
        emit('pong', data or {})

    return {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'subscribe': handle_subscribe,
        'unsubscribe': handle_unsubscribe,
        'message': handle_message,
        'ping': handle_ping,
    }


def register_socketio_handlers(broadcaster: UpdateBroadcaster) -> None:
    """Register the /ws event handlers on the shared Socket.IO server."""
    for event, handler in make_handlers(broadcaster).items():
        socketio.on_event(event, handler, namespace=WS_NAMESPACE)
