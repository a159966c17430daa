from flask import Blueprint, current_app, jsonify, request
from tictactoe.models import GameState


games = Blueprint('games', __name__)


def _sessions():
    return current_app.extensions['game_sessions']


def _body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _published(state: GameState):
    """Push ``state`` to subscribers of its game and return it as the response body."""
    current_app.extensions['update_broadcaster'].publish(state.id, state)
    return jsonify(state.to_dict())


@games.route('', methods=['POST'])
def create_game():
    data = _body()
    state = _sessions().create_game(data.get('playerName'))
    return jsonify(state.to_dict()), 201


@games.route('/<string:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(_sessions().get_game(game_id).to_dict())


@games.route('/<string:game_id>/join', methods=['POST'])
def join_game(game_id):
    data = _body()
    return _published(_sessions().join_game(game_id, data.get('playerName')))


@games.route('/<string:game_id>/move', methods=['POST'])
def make_move(game_id):
    data = _body()
    return _published(_sessions().make_move(game_id, data.get('position'), data.get('player')))


@games.route('/<string:game_id>/reset-request', methods=['POST'])
def request_reset(game_id):
    data = _body()
    return _published(_sessions().request_reset(game_id, data.get('player')))


@games.route('/<string:game_id>/reset-confirm', methods=['POST'])
def confirm_reset(game_id):
    return _published(_sessions().confirm_reset(game_id))


@games.route('/<string:game_id>/reset-deny', methods=['POST'])
def deny_reset(game_id):
    return _published(_sessions().deny_reset(game_id))
