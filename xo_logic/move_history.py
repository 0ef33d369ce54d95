"""
Move history for the XO match engine.
Tracks the move stack and turn counter, and undoes whole rounds.
"""

from typing import List, Optional, Tuple

from .game_state import GridState


class MoveHistory:
    """
    Ordered log of the moves made on a grid.

    The turn counter starts at 1 and goes up by one per move, so it is
    always len(history) + 1. Undo works on rounds of two moves: the
    human's move and the reply to it.
    """

    def __init__(self, grid: GridState):
        """
        Initialize the history.

        Args:
            grid: The grid whose cells undo clears.
        """
        self.grid = grid
        self.turn = 1
        self._moves: List[int] = []

    @property
    def moves(self) -> Tuple[int, ...]:
        """All moves, oldest first."""
        return tuple(self._moves)

    @property
    def last_move(self) -> Optional[int]:
        return self._moves[-1] if self._moves else None

    def record_move(self, index: int) -> None:
        """Append a move that was just placed on the grid."""
        self._moves.append(int(index))
        self.turn += 1

    def undo_last_round(self) -> List[int]:
        """
        Undo the last two moves.

        Returns:
            The undone indices, most recent first. Empty (and nothing
            changed) if fewer than two moves were made.
        """
        if len(self._moves) < 2:
            return []

        undone = []
        for _ in range(2):
            index = self._moves.pop()
            self.grid.clear(index)
            undone.append(index)
        self.turn -= 2

        return undone

    def __len__(self) -> int:
        return len(self._moves)
