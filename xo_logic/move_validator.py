"""
Move validator for the XO grid.
Checks that a cell index can receive a mark.
"""

from numbers import Integral
from typing import Optional, Sequence
from dataclasses import dataclass

BOARD_CELLS = 9


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


def validate_move(cells: Sequence[int], index: int) -> ValidationResult:
    """
    Validate a move on a grid.

    Rules:
    1. Index must be an integer in 0-8
    2. The cell must be empty

    Args:
        cells: The 9 cell values, row-major.
        index: Cell to place a mark on.

    Returns:
        ValidationResult with is_valid and error_message.
    """
    if isinstance(index, bool) or not isinstance(index, Integral):
        return ValidationResult(
            is_valid=False,
            error_message=f"Cell index must be an int, got {index!r}"
        )

    if not 0 <= index < BOARD_CELLS:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid cell {index}. Must be 0-8."
        )

    if cells[index] != 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Cell {index} is already occupied by player {int(cells[index])}"
        )

    return ValidationResult(is_valid=True)
