"""
Match module for the XO match engine.
Handles the match lifecycle, timers and computer turns.
"""

from .config import MatchConfig
from .match_controller import (
    MatchController,
    MatchMode,
    MatchPhase,
    MatchSnapshot,
    HUMAN_PLAYER,
    COMPUTER_PLAYER,
)
