from flask import current_app
from tictactoe.errors import Conflict, RuleViolation, ValidationError
from tictactoe.models import GameState
from tictactoe.services.games import rules
from tictactoe.services.games.stats import tally_player_stats
from tictactoe.services.games.store import GameStore
from typing import Any
import random
import uuid


class SessionService:
    """Join, move and reset-negotiation transitions for one game at a time.

    Each operation reads the current row, validates against the rules, writes
    the next state and returns it. Publishing that state to subscribers is
    the caller's job.
    """

    def __init__(self, store: GameStore, max_name_length: int = 64):
        self.store = store
        self.max_name_length = max_name_length

    def create_game(self, player_name: Any, rng=random) -> GameState:
        name = self._clean_name(player_name)
        seat = rules.X if rng.random() < 0.5 else rules.O
        state = self.store.create({
            'id': str(uuid.uuid4()),
            'board': rules.new_board(),
            'current_player': rules.X,
            'winner': None,
            'player_x_name': name if seat == rules.X else None,
            'player_o_name': name if seat == rules.O else None,
            'status': rules.WAITING,
            'reset_requested_by': None,
            'version': 0,
        })
        current_app.logger.info(f"[create] game={state.id} creator_seat={seat}")
        return state

    def get_game(self, game_id: str) -> GameState:
        return self.store.get(game_id)

    def join_game(self, game_id: str, player_name: Any) -> GameState:
        name = self._clean_name(player_name)
        game = self.store.get(game_id)
        if game.both_seats_filled:
            raise RuleViolation('Game is full')
        existing = game.player_x_name or game.player_o_name
        if existing and existing.lower() == name.lower():
            raise RuleViolation('Player name must be different from the existing player')

        seat_column = 'player_x_name' if not game.player_x_name else 'player_o_name'
        x_name = name if seat_column == 'player_x_name' else game.player_x_name
        o_name = name if seat_column == 'player_o_name' else game.player_o_name
        try:
            state = self.store.conditional_update(game_id, {seat_column: None}, {
                seat_column: name,
                'status': rules.derive_status(x_name, o_name, game.winner),
            })
        except Conflict:
            current_app.logger.warning(f"[join-race] game={game_id} seat={seat_column} already taken")
            raise RuleViolation('Game is full')
        current_app.logger.info(f"[join] game={game_id} seat={seat_column} status={state.status}")
        return state

    def make_move(self, game_id: str, position: Any, player: Any) -> GameState:
        mark = self._require_mark(player)
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValidationError('Invalid position')
        game = self.store.get(game_id)
        if not game.both_seats_filled:
            raise RuleViolation('Waiting for both players to join')
        reason = rules.validate_move(game.board, position, mark, game.current_player, game.winner)
        if reason:
            raise RuleViolation(reason)

        board = list(game.board)
        board[position] = mark
        winner = rules.evaluate(board)
        state = self.store.conditional_update(game_id, {'version': game.version}, {
            'board': board,
            'current_player': rules.other_mark(mark),
            'winner': winner,
            'status': rules.DONE if winner else rules.PLAYING,
        })
        current_app.logger.info(f"[move] game={game_id} player={mark} position={position} winner={winner}")
        return state

    def request_reset(self, game_id: str, player: Any) -> GameState:
        mark = self._require_mark(player)
        game = self.store.get(game_id)
        if not game.both_seats_filled:
            raise RuleViolation('Need both players to request reset')
        if game.reset_requested_by == mark:
            return game
        if game.reset_requested_by is not None:
            raise RuleViolation(f'Reset already requested by {game.reset_requested_by}')
        state = self.store.conditional_update(game_id, {'version': game.version}, {
            'reset_requested_by': mark,
        })
        current_app.logger.info(f"[reset-request] game={game_id} player={mark}")
        return state

    def confirm_reset(self, game_id: str) -> GameState:
        game = self.store.get(game_id)
        state = self.store.conditional_update(game_id, {'version': game.version}, {
            'board': rules.new_board(),
            'current_player': rules.X,
            'winner': None,
            'status': rules.derive_status(game.player_x_name, game.player_o_name, None),
            'reset_requested_by': None,
        })
        current_app.logger.info(f"[reset-confirm] game={game_id} requested_by={game.reset_requested_by}")
        return state

    def deny_reset(self, game_id: str) -> GameState:
        state = self.store.unconditional_update(game_id, {'reset_requested_by': None})
        current_app.logger.info(f"[reset-deny] game={game_id}")
        return state

    def player_stats(self, player_name: Any) -> dict:
        name = self._clean_name(player_name)
        return tally_player_stats(name, self.store.finished_games_for(name))

    def _clean_name(self, value: Any) -> str:
        name = value.strip() if isinstance(value, str) else ''
        if not name:
            raise ValidationError('Player name is required')
        if len(name) > self.max_name_length:
            raise ValidationError(f'Player name must be at most {self.max_name_length} characters')
        return name

    @staticmethod
    def _require_mark(value: Any) -> str:
        if value not in rules.MARKS:
            raise ValidationError('Invalid player')
        return value
