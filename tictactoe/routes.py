from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tic-tac-toe game server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok'})

@main.route('/api/players/<string:player_name>/stats')
def player_stats(player_name):
    return jsonify(current_app.extensions['game_sessions'].player_stats(player_name))
