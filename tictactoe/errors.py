from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError


class GameError(Exception):
    """Base class for failures reported back to the caller as ``{"error": ...}``."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """Malformed input: missing name, unknown player mark, non-integer position."""


class RuleViolation(GameError):
    """Well-formed request that the current game state does not allow."""


class Conflict(RuleViolation):
    """A conditional write lost its race against another writer."""


class GameNotFound(GameError):
    status_code = 404

    def __init__(self, game_id: str):
        super().__init__('Game not found')
        self.game_id = game_id


class TransportError(GameError):
    """The store returned something unusable or could not be reached."""

    status_code = 500


def register_error_handlers(flask_app) -> None:
    @flask_app.errorhandler(GameError)
    def handle_game_error(exc: GameError):
        if exc.status_code >= 500:
            current_app.logger.error(f"[error] {exc.message}")
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_store_error(exc: SQLAlchemyError):
        from tictactoe import db
        db.session.rollback()
        current_app.logger.exception(f"[store-error] {exc.__class__.__name__}")
        return jsonify({'error': 'Game store unavailable'}), 500
