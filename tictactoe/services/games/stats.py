from tictactoe.models import GameState
from tictactoe.services.games.rules import DRAW, MARKS
from typing import Iterable


def tally_player_stats(name: str, games: Iterable[GameState]) -> dict:
    """Count wins, losses and draws for ``name`` over finished games.

    A game counts as a win when the seat ``name`` occupied matches the
    winner, a draw when the winner is ``'draw'``, and a loss otherwise.
    Names compare case-insensitively.
    """
    lowered = name.lower()
    wins = losses = draws = 0
    for game in games:
        if game.winner == DRAW:
            draws += 1
            continue
        seat_name = game.name_for(game.winner) if game.winner in MARKS else None
        if seat_name and seat_name.lower() == lowered:
            wins += 1
        else:
            losses += 1
    return {
        'playerName': name,
        'wins': wins,
        'losses': losses,
        'draws': draws,
        'totalGames': wins + losses + draws,
    }
