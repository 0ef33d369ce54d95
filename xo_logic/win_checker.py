"""
Win checker for the XO match engine.
Decides whether the last move ended the game.
"""

from typing import Optional, Sequence, Tuple

from .game_state import CellValue, Outcome

# All possible winning lines (cell indices)
WINNING_LINES = [
    # Rows
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    # Columns
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    # Diagonals
    (0, 4, 8), (2, 4, 6),
]

MAIN_DIAGONAL = (0, 4, 8)
ANTI_DIAGONAL = (2, 4, 6)

# The counter starts at 1, so it reads 10 once all 9 cells are taken
FULL_BOARD_TURN = 10


def _line_complete(cells: Sequence[int], line: Tuple[int, int, int]) -> bool:
    a, b, c = line
    return cells[a] != CellValue.EMPTY and cells[a] == cells[b] == cells[c]


def evaluate_outcome(cells: Sequence[int], last_move: int, turn: int) -> Outcome:
    """
    Check whether the move at last_move ended the game.

    Only the lines through last_move are checked: row, then column,
    then the diagonals the cell lies on. A single move can complete
    at most one line owner, so the order only affects speed.

    Args:
        cells: The 9 cell values (live grid or a simulated copy).
        last_move: Index of the move just made.
        turn: Turn counter after the move was recorded.

    Returns:
        The winning player's Outcome, DRAW, or NONE.
    """
    row_start = (last_move // 3) * 3
    column = last_move % 3

    lines = [(row_start, row_start + 1, row_start + 2), (column, column + 3, column + 6)]
    if last_move in MAIN_DIAGONAL:
        lines.append(MAIN_DIAGONAL)
    if last_move in ANTI_DIAGONAL:
        lines.append(ANTI_DIAGONAL)

    for line in lines:
        if _line_complete(cells, line):
            return Outcome(int(cells[last_move]))

    if turn == FULL_BOARD_TURN or CellValue.EMPTY not in cells:
        return Outcome.DRAW

    return Outcome.NONE


def get_winning_line(cells: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    """
    Get the winning line if there is one.

    Args:
        cells: The 9 cell values.

    Returns:
        The completed line as a tuple of indices, or None.
    """
    for line in WINNING_LINES:
        if _line_complete(cells, line):
            return line
    return None
