from tictactoe import db
from tictactoe.errors import Conflict, GameNotFound, TransportError
from tictactoe.models import GameRecord, GameState, utcnow
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import FlushError
from typing import Any, Dict, List


class GameStore:
    """Durable game rows keyed by id.

    Reads come back as validated ``GameState`` values. Writes go through
    single UPDATE statements so a precondition is checked by the database at
    write time, not by a prior read.
    """

    def create(self, fields: Dict[str, Any]) -> GameState:
        record = GameRecord(**fields)
        db.session.add(record)
        try:
            db.session.commit()
        except (IntegrityError, FlushError):
            db.session.rollback()
            raise TransportError(f"Game id {fields.get('id')} already exists")
        return self._fetch(record.id)

    def get(self, game_id: str) -> GameState:
        return self._fetch(game_id)

    def conditional_update(self, game_id: str, expected: Dict[str, Any], fields: Dict[str, Any]) -> GameState:
        """Apply ``fields`` only if every column in ``expected`` still holds its value.

        ``None`` in ``expected`` means the column must be NULL. Raises
        ``Conflict`` when another writer got there first.
        """
        query = GameRecord.query.filter(GameRecord.id == game_id)
        for column, value in expected.items():
            attr = getattr(GameRecord, column)
            query = query.filter(attr.is_(None) if value is None else attr == value)
        if self._write(query, fields) == 0:
            if db.session.get(GameRecord, game_id) is None:
                raise GameNotFound(game_id)
            raise Conflict('Game was updated by another request, refresh and try again')
        return self._fetch(game_id)

    def unconditional_update(self, game_id: str, fields: Dict[str, Any]) -> GameState:
        query = GameRecord.query.filter(GameRecord.id == game_id)
        if self._write(query, fields) == 0:
            raise GameNotFound(game_id)
        return self._fetch(game_id)

    def finished_games_for(self, name: str) -> List[GameState]:
        lowered = name.lower()
        records = GameRecord.query.filter(
            GameRecord.status == 'done',
            or_(func.lower(GameRecord.player_x_name) == lowered,
                func.lower(GameRecord.player_o_name) == lowered),
        ).all()
        return [r.to_state() for r in records]

    def _write(self, query, fields: Dict[str, Any]) -> int:
        values = dict(fields)
        values['updated_at'] = utcnow()
        values['version'] = GameRecord.version + 1
        try:
            count = query.update(values, synchronize_session=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return count

    def _fetch(self, game_id: str) -> GameState:
        record = db.session.get(GameRecord, game_id)
        if record is None:
            raise GameNotFound(game_id)
        return record.to_state()
