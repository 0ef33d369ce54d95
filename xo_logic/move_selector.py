"""
Move selection for automated players.
Blends the minimax search with random moves based on difficulty.
"""

import logging
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .game_state import CellValue, NO_MOVE, empty_indices
from .minimax import MinimaxSearch

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "easy"              # Random moves
    MEDIUM = "medium"          # Half random, half minimax
    HARD = "hard"              # Mostly minimax
    UNBEATABLE = "unbeatable"  # Full minimax

    @property
    def random_move_chance(self) -> float:
        """Percent chance (0-100) of ignoring the search and moving at random."""
        return RANDOM_MOVE_CHANCE[self]


RANDOM_MOVE_CHANCE = {
    Difficulty.EASY: 100.0,
    Difficulty.MEDIUM: 50.0,
    Difficulty.HARD: 10.0,
    Difficulty.UNBEATABLE: 0.0,
}


class MoveSelector:
    """
    Chooses moves for computer players and hints for humans.

    All randomness comes from one numpy Generator, so a seeded
    selector always plays the same match.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        search: Optional[MinimaxSearch] = None
    ):
        """
        Initialize the selector.

        Args:
            rng: Random source. A fresh unseeded Generator if omitted.
            search: Search engine to use for optimal moves.
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.search = search or MinimaxSearch()

    def random_empty_index(self, cells: Sequence[int]) -> int:
        """Pick a uniformly random empty cell, or NO_MOVE if there is none."""
        options = empty_indices(cells)
        if not options:
            return NO_MOVE
        return options[int(self.rng.integers(len(options)))]

    def choose_automated_move(
        self,
        cells: Sequence[int],
        turn: int,
        player: CellValue,
        difficulty: Difficulty
    ) -> int:
        """
        Choose the move an automated player makes.

        The opening move of a match is always random. After that a
        percentage roll not greater than the difficulty's chance picks
        a random cell; otherwise the search picks the best one.

        Args:
            cells: The 9 cell values.
            turn: Current turn counter.
            player: The player to move.
            difficulty: Strength of the automated player.

        Returns:
            A cell index, or NO_MOVE if the board is full.
        """
        if turn == 1:
            move = self.random_empty_index(cells)
            logger.debug("Opening move for player %d: %d (random)", int(player), move)
            return move

        move = NO_MOVE
        if self._rolls_random(difficulty):
            logger.debug("Player %d plays a random move (%s)", int(player), difficulty.value)
        else:
            move = self.search.best_move(cells, turn, player)

        if move == NO_MOVE:
            move = self.random_empty_index(cells)

        return move

    def suggest_move(self, cells: Sequence[int], turn: int, player: CellValue) -> int:
        """
        Get a hint for player: the move an unbeatable AI would make.
        Does not touch any live game state.
        """
        return self.choose_automated_move(cells, turn, player, Difficulty.UNBEATABLE)

    def _rolls_random(self, difficulty: Difficulty) -> bool:
        chance = difficulty.random_move_chance
        if chance <= 0:
            return False
        roll = float(self.rng.random()) * 100.0
        return roll <= chance
