"""Pure tic-tac-toe rules over a 9-cell, row-major board snapshot."""

from typing import List, Optional, Sequence

X = 'X'
O = 'O'
DRAW = 'draw'
MARKS = (X, O)

WAITING = 'waiting'
PLAYING = 'playing'
DONE = 'done'

WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)


def new_board() -> List[Optional[str]]:
    return [None] * 9


def other_mark(mark: str) -> str:
    return O if mark == X else X


def evaluate(board: Sequence[Optional[str]]) -> Optional[str]:
    """Return the winning mark, ``'draw'`` for a full board, or None while undecided."""
    for a, b, c in WIN_LINES:
        if board[a] and board[a] == board[b] == board[c]:
            return board[a]
    if all(cell is not None for cell in board):
        return DRAW
    return None


def validate_move(board: Sequence[Optional[str]], position: int, player: str,
                  current_player: str, winner: Optional[str]) -> Optional[str]:
    """Check a move without applying it.

    Returns None when the move is legal, otherwise the reason it is not.
    Checks run in a fixed order: finished game, turn, range, occupancy.
    """
    if winner:
        return 'Game is already finished'
    if player != current_player:
        return 'Not your turn'
    if position < 0 or position > 8:
        return 'Invalid position'
    if board[position] is not None:
        return 'Cell already occupied'
    return None


def derive_status(player_x_name: Optional[str], player_o_name: Optional[str],
                  winner: Optional[str]) -> str:
    if not (player_x_name and player_o_name):
        return WAITING
    return DONE if winner else PLAYING
