"""
Match controller for the XO match engine.
Runs the match lifecycle: start, intro, play, end.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from xo_logic.errors import InvalidStateTransitionError
from xo_logic.game_state import CellValue, GridState, Mark, NO_MOVE, Outcome
from xo_logic.move_history import MoveHistory
from xo_logic.move_selector import Difficulty, MoveSelector
from xo_logic.win_checker import evaluate_outcome, get_winning_line
from .config import MatchConfig

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    """Where the match is in its lifecycle."""
    NOT_STARTED = "not_started"
    INTROING = "introing"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class MatchMode(Enum):
    """Who controls each player."""
    LOCAL_TWO_PLAYER = "local"
    HUMAN_VS_COMPUTER = "vs_computer"
    COMPUTER_VS_COMPUTER = "computer_match"


# Seats in a human vs computer match
HUMAN_PLAYER = CellValue.PLAYER_ONE
COMPUTER_PLAYER = CellValue.PLAYER_TWO


@dataclass(frozen=True)
class MatchSnapshot:
    """Read-only view of a match, for display."""
    cells: Tuple[CellValue, ...]
    active_player: CellValue
    turn: int
    phase: MatchPhase
    time_remaining: float
    outcome: Outcome
    mode: MatchMode
    difficulty: Difficulty
    marks: Dict[CellValue, Mark]
    moves: Tuple[int, ...]


class MatchController:
    """
    Owns and drives one match at a time.

    Game flow:
    1. start_match() builds a fresh grid, history and timers
    2. tick() plays the intro, then counts down the turn timer
    3. Humans call submit_move(); computer players move from tick()
    4. A win, a draw or a timeout ends the match

    Every entry point is meant to be called from one thread, once per
    frame at most. Calls that arrive in the wrong phase are ignored
    (or raised, with MatchConfig.STRICT_PHASE_CHECKS).
    """

    def __init__(
        self,
        mode: MatchMode = MatchMode.HUMAN_VS_COMPUTER,
        difficulty: Difficulty = Difficulty.EASY,
        config: Optional[MatchConfig] = None,
        rng: Optional[np.random.Generator] = None,
        on_intro: Optional[Callable[[CellValue], None]] = None,
        on_outcome: Optional[Callable[[Outcome], None]] = None,
        on_move: Optional[Callable[[int, CellValue], None]] = None
    ):
        """
        Initialize the controller.

        Args:
            mode: Who controls each player.
            difficulty: Strength of computer players.
            config: Match configuration.
            rng: Random source for the first player and computer moves.
            on_intro: Called with the starting player when the intro shows it.
            on_outcome: Called with the outcome when the match ends.
            on_move: Called with (index, player) after every accepted move.
        """
        self.config = config or MatchConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.selector = MoveSelector(self.rng)

        self.on_intro = on_intro
        self.on_outcome = on_outcome
        self.on_move = on_move

        self._mode = mode
        self._difficulty = difficulty
        self._phase = MatchPhase.NOT_STARTED
        self._outcome = Outcome.NONE

        self._grid = GridState()
        self._history = MoveHistory(self._grid)
        self._active_player = CellValue.PLAYER_ONE
        self._marks = {CellValue.PLAYER_ONE: Mark.CROSS, CellValue.PLAYER_TWO: Mark.CIRCLE}

        # Timers
        self._turn_timer = self.config.TIME_LIMIT
        self._ai_delay = self.config.AI_TURN_DELAY
        self._intro_elapsed = 0.0
        self._intro_shown = False

    # ==================== ACCESSORS ====================

    @property
    def cells(self) -> Tuple[CellValue, ...]:
        return self._grid.cells

    @property
    def active_player(self) -> CellValue:
        return self._active_player

    @property
    def turn(self) -> int:
        return self._history.turn

    @property
    def moves(self) -> Tuple[int, ...]:
        return self._history.moves

    @property
    def phase(self) -> MatchPhase:
        return self._phase

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def mode(self) -> MatchMode:
        return self._mode

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def time_remaining(self) -> float:
        """Seconds the active player has left, never below zero."""
        return max(0.0, self._turn_timer)

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return get_winning_line(self._grid.cells)

    @property
    def is_defeat(self) -> bool:
        """True if the match ended with the computer beating the human."""
        return (
            self._phase == MatchPhase.ENDED
            and self._mode == MatchMode.HUMAN_VS_COMPUTER
            and self._outcome.winner == COMPUTER_PLAYER
        )

    def mark_for(self, player: CellValue) -> Mark:
        """Get the mark a player draws with in this match."""
        return self._marks[player]

    def is_automated(self, player: CellValue) -> bool:
        """Check whether the computer controls a player in the current mode."""
        if self._mode == MatchMode.COMPUTER_VS_COMPUTER:
            return True
        if self._mode == MatchMode.HUMAN_VS_COMPUTER:
            return player == COMPUTER_PLAYER
        return False

    def snapshot(self) -> MatchSnapshot:
        return MatchSnapshot(
            cells=self._grid.cells,
            active_player=self._active_player,
            turn=self._history.turn,
            phase=self._phase,
            time_remaining=self.time_remaining,
            outcome=self._outcome,
            mode=self._mode,
            difficulty=self._difficulty,
            marks=dict(self._marks),
            moves=self._history.moves,
        )

    # ==================== LIFECYCLE ====================

    def configure(self, mode: MatchMode, difficulty: Difficulty) -> bool:
        """
        Set the mode and difficulty used by the next match.

        Returns:
            True if applied, False if a match is running.
        """
        if self._phase in (MatchPhase.INTROING, MatchPhase.IN_PROGRESS):
            self._reject(f"configure() while {self._phase.value}")
            return False

        self._mode = mode
        self._difficulty = difficulty
        return True

    def start_match(self, randomize_first_player: bool = False, skip_intro: bool = False):
        """
        Start a new match, discarding any current one.

        Args:
            randomize_first_player: Pick the starting player 50/50.
                Otherwise player one always starts.
            skip_intro: Go straight to play without the intro.
        """
        # Fresh objects, so nothing keeps pointing at the old match
        self._grid = GridState()
        self._history = MoveHistory(self._grid)
        self._outcome = Outcome.NONE

        self._turn_timer = self.config.TIME_LIMIT
        self._ai_delay = self.config.AI_TURN_DELAY
        self._intro_elapsed = 0.0
        self._intro_shown = False

        # The starting player always plays CROSS
        first = CellValue.PLAYER_ONE
        if randomize_first_player:
            if float(self.rng.random()) * 100.0 < self.config.FIRST_PLAYER_CHANCE:
                first = CellValue.PLAYER_TWO
        self._active_player = first
        self._marks = {first: Mark.CROSS, first.opposite(): Mark.CIRCLE}

        self._phase = MatchPhase.IN_PROGRESS if skip_intro else MatchPhase.INTROING

        logger.info(
            "Match started: %s, %s, player %d starts as %s",
            self._mode.value, self._difficulty.value, int(first), Mark.CROSS.value
        )

    def abandon(self) -> None:
        """Leave a running match. It ends with no outcome and no notification."""
        if self._phase not in (MatchPhase.INTROING, MatchPhase.IN_PROGRESS):
            self._reject(f"abandon() while {self._phase.value}")
            return

        self._phase = MatchPhase.ENDED
        logger.info("Match abandoned on turn %d", self._history.turn)

    # ==================== PLAY ====================

    def submit_move(self, index: int) -> bool:
        """
        Place the active player's mark.

        Args:
            index: Cell index (0-8).

        Returns:
            True if the move was made, False if the match is not in play.

        Raises:
            InvalidMoveError: If the cell is occupied or out of range.
                Nothing is changed.
        """
        if self._phase != MatchPhase.IN_PROGRESS:
            self._reject(f"submit_move({index}) while {self._phase.value}")
            return False

        player = self._active_player
        self._grid.place(index, player)
        index = int(index)
        self._history.record_move(index)

        if self.on_move:
            self.on_move(index, player)

        outcome = evaluate_outcome(self._grid.cells, index, self._history.turn)
        if outcome.is_terminal:
            self._end_match(outcome)
        else:
            self._swap_player()

        return True

    def tick(self, elapsed: float) -> None:
        """
        Advance the match by elapsed seconds. Call once per frame.

        Args:
            elapsed: Seconds since the previous tick.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be >= 0, got {elapsed}")

        if self._phase == MatchPhase.INTROING:
            self._update_intro(elapsed)
            return

        if self._phase != MatchPhase.IN_PROGRESS:
            return

        self._turn_timer -= elapsed
        if self._turn_timer <= 0:
            # Running out of time forfeits the match
            loser = self._active_player
            logger.info("Player %d ran out of time", int(loser))
            self._end_match(Outcome(int(loser.opposite())))
            return

        if self.is_automated(self._active_player):
            self._update_automated_player(elapsed)

    def undo(self) -> List[int]:
        """
        Undo the last round (two moves).

        Returns:
            The undone indices, most recent first. Empty if nothing was undone.
        """
        if self._phase != MatchPhase.IN_PROGRESS:
            self._reject(f"undo() while {self._phase.value}")
            return []

        undone = self._history.undo_last_round()
        if undone:
            self._turn_timer = self.config.TIME_LIMIT
            logger.debug("Undid moves %s, back to turn %d", undone, self._history.turn)

        return undone

    def hint(self) -> int:
        """
        Get the best move for the active player without making it.

        Returns:
            A cell index, or NO_MOVE if the match is not in play.
        """
        if self._phase != MatchPhase.IN_PROGRESS:
            self._reject(f"hint() while {self._phase.value}")
            return NO_MOVE

        return self.selector.suggest_move(
            self._grid.cells, self._history.turn, self._active_player
        )

    def request_hint(self) -> int:
        """Hint for the human in a vs-computer match, on their turn only."""
        if not self._human_may_act():
            logger.debug("Hint request ignored")
            return NO_MOVE
        return self.hint()

    def request_undo(self) -> List[int]:
        """Undo for the human in a vs-computer match, on their turn only."""
        if not self._human_may_act():
            logger.debug("Undo request ignored")
            return []
        return self.undo()

    # ==================== INTERNALS ====================

    def _human_may_act(self) -> bool:
        return (
            self._phase == MatchPhase.IN_PROGRESS
            and self._mode == MatchMode.HUMAN_VS_COMPUTER
            and self._active_player == HUMAN_PLAYER
        )

    def _update_intro(self, elapsed: float):
        self._intro_elapsed += elapsed

        if not self._intro_shown and self._intro_elapsed >= self.config.INTRO_DISPLAY_DELAY:
            self._intro_shown = True
            if self.on_intro:
                self.on_intro(self._active_player)

        if self._intro_elapsed >= self.config.intro_total:
            self._phase = MatchPhase.IN_PROGRESS

    def _update_automated_player(self, elapsed: float):
        self._ai_delay -= elapsed
        if self._ai_delay > 0:
            return

        move = self.selector.choose_automated_move(
            self._grid.cells, self._history.turn, self._active_player, self._difficulty
        )
        if move == NO_MOVE:
            logger.debug("No move left for player %d", int(self._active_player))
            return

        logger.debug("Player %d (computer) moves to %d", int(self._active_player), move)
        self.submit_move(move)

    def _swap_player(self):
        self._active_player = self._active_player.opposite()
        self._turn_timer = self.config.TIME_LIMIT

        if self._mode != MatchMode.LOCAL_TWO_PLAYER:
            self._ai_delay = self.config.AI_TURN_DELAY

    def _end_match(self, outcome: Outcome):
        self._phase = MatchPhase.ENDED
        self._outcome = outcome
        logger.info("Match ended on turn %d: %s", self._history.turn, outcome.name)

        if self.on_outcome:
            self.on_outcome(outcome)

    def _reject(self, message: str):
        if self.config.STRICT_PHASE_CHECKS:
            raise InvalidStateTransitionError(message)
        logger.debug("Ignored: %s", message)
