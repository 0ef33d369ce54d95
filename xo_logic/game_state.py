"""
Grid state for the XO match engine.
Holds the 9 cells of the board and the enums shared by the engine.

Board representation: 9 ints, row-major (index = row * 3 + col)
  - 0: empty
  - 1: player one
  - 2: player two
"""

from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidMoveError
from .move_validator import BOARD_CELLS, validate_move

# Returned wherever a move is asked for but none is left
NO_MOVE = -1


class CellValue(IntEnum):
    """What a grid cell holds. Player values double as player ids."""
    EMPTY = 0
    PLAYER_ONE = 1
    PLAYER_TWO = 2

    def opposite(self) -> "CellValue":
        """Get the opposite player."""
        if self == CellValue.EMPTY:
            raise ValueError("EMPTY has no opposite player")
        return CellValue.PLAYER_TWO if self == CellValue.PLAYER_ONE else CellValue.PLAYER_ONE


class Outcome(IntEnum):
    """
    Result of a move. Win values match CellValue, so
    Outcome(cells[winning_index]) names the winner.
    """
    NONE = 0
    PLAYER_ONE_WIN = 1
    PLAYER_TWO_WIN = 2
    DRAW = 3

    @property
    def is_terminal(self) -> bool:
        return self != Outcome.NONE

    @property
    def winner(self) -> Optional[CellValue]:
        """The winning player, or None for NONE and DRAW."""
        if self in (Outcome.PLAYER_ONE_WIN, Outcome.PLAYER_TWO_WIN):
            return CellValue(int(self))
        return None


class Mark(Enum):
    """Symbol drawn for a player. CROSS always moves first."""
    CROSS = "X"
    CIRCLE = "O"


class GridState:
    """
    The 3x3 board.

    Only place() and clear() change cells. Everything that needs a
    what-if copy (the search, the outcome evaluator) works on the
    `cells` tuple instead of the live grid.
    """

    def __init__(self, cells: Optional[Sequence[int]] = None):
        """
        Initialize the grid.

        Args:
            cells: Optional starting cells (9 values). Empty board if omitted.
        """
        if cells is None:
            self._cells: List[CellValue] = [CellValue.EMPTY] * BOARD_CELLS
        else:
            if len(cells) != BOARD_CELLS:
                raise ValueError(f"Grid needs {BOARD_CELLS} cells, got {len(cells)}")
            self._cells = [CellValue(value) for value in cells]

    @property
    def cells(self) -> Tuple[CellValue, ...]:
        """Immutable snapshot of the 9 cells."""
        return tuple(self._cells)

    def value_at(self, index: int) -> CellValue:
        """Get the value of one cell."""
        if not 0 <= index < BOARD_CELLS:
            raise InvalidMoveError(f"Invalid cell {index}. Must be 0-8.")
        return self._cells[index]

    def place(self, index: int, player: CellValue) -> None:
        """
        Put a player's mark on an empty cell.

        Args:
            index: Cell index (0-8).
            player: PLAYER_ONE or PLAYER_TWO.

        Raises:
            InvalidMoveError: If the index is out of range, the cell is
                occupied or player is not a player value.
        """
        result = validate_move(self._cells, index)
        if not result.is_valid:
            raise InvalidMoveError(result.error_message)
        if player not in (CellValue.PLAYER_ONE, CellValue.PLAYER_TWO):
            raise InvalidMoveError(f"Cannot place {player!r}, not a player")

        self._cells[int(index)] = CellValue(player)

    def clear(self, index: int) -> None:
        """Reset a cell to EMPTY (used by undo)."""
        if not 0 <= index < BOARD_CELLS:
            raise InvalidMoveError(f"Invalid cell {index}. Must be 0-8.")
        self._cells[index] = CellValue.EMPTY

    def is_full(self) -> bool:
        return CellValue.EMPTY not in self._cells

    def empty_indices(self) -> List[int]:
        return empty_indices(self._cells)

    def filled_count(self) -> int:
        return sum(1 for value in self._cells if value != CellValue.EMPTY)

    def copy(self) -> "GridState":
        return GridState(self._cells)

    def format_board(self) -> str:
        return format_board(self._cells)

    def __repr__(self) -> str:
        return f"GridState({[int(value) for value in self._cells]})"


def empty_indices(cells: Sequence[int]) -> List[int]:
    """Return the indices of all empty cells, in ascending order."""
    return [i for i, value in enumerate(cells) if value == CellValue.EMPTY]


def format_board(
    cells: Sequence[int],
    marks: Optional[dict] = None
) -> str:
    """
    Render a grid as text.

    Args:
        cells: The 9 cell values.
        marks: Optional {CellValue: Mark} map. Without it player one
            is drawn as X and player two as O.

    Returns:
        A multi-line string. Empty cells show their index.
    """
    if marks is None:
        marks = {CellValue.PLAYER_ONE: Mark.CROSS, CellValue.PLAYER_TWO: Mark.CIRCLE}

    lines = []
    for row in range(3):
        symbols = []
        for col in range(3):
            index = row * 3 + col
            value = cells[index]
            if value == CellValue.EMPTY:
                symbols.append(str(index))
            else:
                symbols.append(marks[CellValue(value)].value)
        lines.append(" " + " | ".join(symbols))
        if row < 2:
            lines.append("---+---+---")
    return "\n".join(lines)


# Quick test
if __name__ == "__main__":
    print("Testing GridState...")

    grid = GridState()
    for index, player in [(4, CellValue.PLAYER_ONE), (0, CellValue.PLAYER_TWO), (8, CellValue.PLAYER_ONE)]:
        grid.place(index, player)
        print(f"\n{player.name} moves to {index}")
        print(grid.format_board())

    try:
        grid.place(4, CellValue.PLAYER_TWO)
    except InvalidMoveError as e:
        print(f"\nRejected as expected: {e}")

    print("\nGridState test done!")
