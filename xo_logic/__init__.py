"""
Logic module for the XO match engine.
Handles the grid, rules, move history and computer opponent.
"""

from .errors import XOError, InvalidMoveError, InvalidStateTransitionError
from .game_state import GridState, CellValue, Outcome, Mark, NO_MOVE
from .move_validator import ValidationResult, validate_move
from .win_checker import evaluate_outcome, get_winning_line, WINNING_LINES
from .minimax import MinimaxSearch
from .move_selector import MoveSelector, Difficulty
from .move_history import MoveHistory

__version__ = "1.0.0"
