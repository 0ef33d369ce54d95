"""
Minimax search for the XO match engine.
Finds the optimal move for a player and scores every candidate.
"""

import logging
from typing import Dict, Sequence, Tuple

from .game_state import CellValue, NO_MOVE, Outcome, empty_indices
from .win_checker import evaluate_outcome

logger = logging.getLogger(__name__)

WIN_SCORE = 10


def _with_move(cells: Tuple[int, ...], index: int, player: int) -> Tuple[int, ...]:
    """Return a new board with player's mark at index."""
    return cells[:index] + (player,) + cells[index + 1:]


class MinimaxSearch:
    """
    Exhaustive minimax over the remaining empty cells.

    Wins are worth WIN_SCORE // depth, so faster wins and slower
    losses score better. Alpha-beta pruning cuts branches that cannot
    change the result; the chosen move and its tie-break (lowest index
    among the best scores) are the same as plain minimax.
    """

    def __init__(self):
        # How many positions the last search looked at (for debugging)
        self.positions_evaluated = 0

    def best_move(self, cells: Sequence[int], turn: int, player: CellValue) -> int:
        """
        Get the best move for player.

        Args:
            cells: The 9 cell values.
            turn: Current turn counter (before the move).
            player: The player to move.

        Returns:
            Index of the best move, or NO_MOVE if the board is full.
        """
        self.positions_evaluated = 0
        board = tuple(int(value) for value in cells)
        opponent = int(CellValue(player).opposite())

        best_score = float('-inf')
        best_index = NO_MOVE

        for index in empty_indices(board):
            child = _with_move(board, index, int(player))
            # Scores <= best_score may come back as bounds, not exact values
            score = self.minimax_value(
                child, 1, False, index, opponent, int(player), turn,
                alpha=best_score
            )
            if score > best_score:
                best_score = score
                best_index = index

        logger.debug(
            "Searched %d positions for player %d on turn %d: best move %d (score %s)",
            self.positions_evaluated, int(player), turn, best_index, best_score
        )
        return best_index

    def score_moves(self, cells: Sequence[int], turn: int, player: CellValue) -> Dict[int, int]:
        """
        Score every legal move for player.

        Args:
            cells: The 9 cell values.
            turn: Current turn counter (before the move).
            player: The player to move.

        Returns:
            {index: score} for each empty cell. Positive is good for player.
        """
        self.positions_evaluated = 0
        board = tuple(int(value) for value in cells)
        opponent = int(CellValue(player).opposite())

        return {
            index: self.minimax_value(
                _with_move(board, index, int(player)), 1, False, index,
                opponent, int(player), turn
            )
            for index in empty_indices(board)
        }

    def minimax_value(
        self,
        cells: Tuple[int, ...],
        depth: int,
        maximizing: bool,
        last_move: int,
        player_to_move: int,
        original_player: int,
        turn: int,
        alpha: float = float('-inf'),
        beta: float = float('inf')
    ) -> int:
        """
        Score a position reached by a simulated move.

        Args:
            cells: Board after the simulated move. Never modified.
            depth: Number of simulated plies so far (1 for the first).
            maximizing: True if original_player moves next.
            last_move: Index of the simulated move just made.
            player_to_move: Player who moves next in the simulation.
            original_player: Player the score is computed for.
            turn: Live turn counter the search started from.
            alpha: Best score the maximizer can already force.
            beta: Best score the minimizer can already force.

        Returns:
            0 for a draw, WIN_SCORE // depth for a win by
            original_player, minus that for a loss.
        """
        self.positions_evaluated += 1

        outcome = evaluate_outcome(cells, last_move, turn + depth)
        if outcome == Outcome.DRAW:
            return 0
        if outcome != Outcome.NONE:
            score = WIN_SCORE // depth
            return score if int(outcome) == original_player else -score

        next_player = 3 - player_to_move

        if maximizing:
            best = float('-inf')
            for index in empty_indices(cells):
                score = self.minimax_value(
                    _with_move(cells, index, player_to_move), depth + 1, False,
                    index, next_player, original_player, turn, alpha, beta
                )
                best = max(best, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Prune
            return best
        else:
            best = float('inf')
            for index in empty_indices(cells):
                score = self.minimax_value(
                    _with_move(cells, index, player_to_move), depth + 1, True,
                    index, next_player, original_player, turn, alpha, beta
                )
                best = min(best, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # Prune
            return best
