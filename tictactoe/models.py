from tictactoe import db
from tictactoe.errors import TransportError
from tictactoe.services.games.rules import DRAW, MARKS, X, derive_status
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple
import json


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameRecord(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.String(36), primary_key=True)
    board = db.Column(db.JSON, nullable=False)
    current_player = db.Column(db.String(1), nullable=False, default=X)
    winner = db.Column(db.String(10), nullable=True)  # X, O, draw
    player_x_name = db.Column(db.String(255), nullable=True)
    player_o_name = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='waiting', index=True)  # waiting, playing, done
    reset_requested_by = db.Column(db.String(1), nullable=True)
    # Bumped on every write; moves and resets compare against it
    version = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_state(self) -> 'GameState':
        return GameState.from_record(self)


@dataclass(frozen=True)
class GameState:
    """Validated, immutable snapshot of one game row."""

    id: str
    board: Tuple[Optional[str], ...]
    current_player: str
    winner: Optional[str]
    player_x_name: Optional[str]
    player_o_name: Optional[str]
    status: str
    reset_requested_by: Optional[str]
    version: int
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: GameRecord) -> 'GameState':
        board = record.board
        if isinstance(board, str):
            try:
                board = json.loads(board)
            except ValueError:
                raise TransportError(f'Stored game {record.id} has an unreadable board')
        if not isinstance(board, list) or len(board) != 9 or any(c not in (None,) + MARKS for c in board):
            raise TransportError(f'Stored game {record.id} has a malformed board')
        if record.current_player not in MARKS:
            raise TransportError(f'Stored game {record.id} has an invalid current player')
        if record.winner not in (None, DRAW) + MARKS:
            raise TransportError(f'Stored game {record.id} has an invalid winner')
        reset_requested_by = record.reset_requested_by if record.reset_requested_by in MARKS else None
        return cls(
            id=record.id,
            board=tuple(board),
            current_player=record.current_player,
            winner=record.winner,
            player_x_name=record.player_x_name,
            player_o_name=record.player_o_name,
            status=derive_status(record.player_x_name, record.player_o_name, record.winner),
            reset_requested_by=reset_requested_by,
            version=int(record.version or 0),
            updated_at=record.updated_at,
        )

    @property
    def both_seats_filled(self) -> bool:
        return bool(self.player_x_name and self.player_o_name)

    def name_for(self, mark: str) -> Optional[str]:
        return self.player_x_name if mark == X else self.player_o_name

    def to_dict(self):
        return {
            'id': self.id,
            'board': list(self.board),
            'currentPlayer': self.current_player,
            'winner': self.winner,
            'status': self.status,
            'playerXName': self.player_x_name,
            'playerOName': self.player_o_name,
            'playerXId': 'X',
            'playerOId': 'O',
            'resetRequestedBy': self.reset_requested_by,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
