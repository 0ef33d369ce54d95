"""
Console driver for the XO match engine.

This script ties together:
- The match controller (timers, turns, computer players)
- A text board on the terminal
- Keyboard input for human players

Run this script to play XO in a terminal!
"""

import logging
import time
from typing import Optional

import numpy as np

from xo_logic.errors import InvalidMoveError
from xo_logic.game_state import CellValue, NO_MOVE, Outcome, format_board
from xo_logic.move_selector import Difficulty
from xo_match.config import MatchConfig
from xo_match.match_controller import MatchController, MatchMode, MatchPhase

# Seconds between ticks while no human input is awaited
FRAME_TIME = 1 / 30


class ConsoleMatch:
    """
    Plays one or more matches on the terminal.

    The console is the tick-driving collaborator: it measures real
    elapsed time, feeds it to the controller and turns typed cell
    numbers into moves. Typing is blocking, so time spent thinking is
    charged on the next tick and a slow move forfeits.
    """

    def __init__(
        self,
        mode: MatchMode,
        difficulty: Difficulty,
        config: Optional[MatchConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the console match.

        Args:
            mode: Who controls each player.
            difficulty: Strength of computer players.
            config: Match configuration.
            seed: Seed for reproducible computer play.
        """
        self.controller = MatchController(
            mode=mode,
            difficulty=difficulty,
            config=config,
            rng=np.random.default_rng(seed),
            on_intro=self._show_intro,
            on_outcome=self._show_outcome,
            on_move=self._show_move,
        )
        self._last_tick = time.monotonic()

    def play(self, randomize_first_player: bool, skip_intro: bool):
        """Run a match until it ends or the user quits."""
        print("\n" + "=" * 60)
        print("   XO Match")
        print(f"   Mode: {self.controller.mode.value}   Difficulty: {self.controller.difficulty.value}")
        print("=" * 60)
        print("Type a cell number (0-8) to move, 'h' for a hint, 'u' to undo, 'q' to quit\n")

        self.controller.start_match(randomize_first_player, skip_intro)
        self._last_tick = time.monotonic()

        while self.controller.phase != MatchPhase.ENDED:
            self._tick()

            if self._awaiting_human():
                self._read_human_input()
            else:
                time.sleep(FRAME_TIME)

    def _tick(self):
        now = time.monotonic()
        self.controller.tick(now - self._last_tick)
        self._last_tick = now

    def _awaiting_human(self) -> bool:
        controller = self.controller
        return (
            controller.phase == MatchPhase.IN_PROGRESS
            and not controller.is_automated(controller.active_player)
        )

    def _read_human_input(self):
        controller = self.controller
        player = controller.active_player
        mark = controller.mark_for(player).value

        print(self._board())
        command = input(
            f"Player {int(player)} ({mark}), {controller.time_remaining:.1f}s left > "
        ).strip().lower()

        # Thinking time counts against the player
        self._tick()
        if controller.phase != MatchPhase.IN_PROGRESS or controller.active_player != player:
            return

        if command == "q":
            controller.abandon()
            print("\nMatch quit by user.")
        elif command == "h":
            hint = controller.request_hint()
            if hint == NO_MOVE:
                print("Hints are only available against the computer, on your turn.")
            else:
                print(f"Hint: try cell {hint}")
        elif command == "u":
            undone = controller.request_undo()
            if undone:
                print(f"Undid moves at {undone}")
            else:
                print("Nothing to undo.")
        elif command.isdigit():
            try:
                controller.submit_move(int(command))
            except InvalidMoveError as e:
                print(f"Invalid move: {e}")
        else:
            print(f"Unknown command: {command!r}")

    def _board(self) -> str:
        marks = {
            CellValue.PLAYER_ONE: self.controller.mark_for(CellValue.PLAYER_ONE),
            CellValue.PLAYER_TWO: self.controller.mark_for(CellValue.PLAYER_TWO),
        }
        return "\n" + format_board(self.controller.cells, marks) + "\n"

    def _show_intro(self, player: CellValue):
        print(f">>> Player {int(player)} starts as {self.controller.mark_for(player).value}")

    def _show_move(self, index: int, player: CellValue):
        if self.controller.is_automated(player):
            print(f">>> Computer (player {int(player)}) moves to {index}")

    def _show_outcome(self, outcome: Outcome):
        print(self._board())
        print("=" * 60)
        print("   GAME OVER!")
        print("=" * 60)

        if outcome == Outcome.DRAW:
            print("\nIt's a draw! Good game!")
        elif self.controller.is_defeat:
            print("\nComputer wins! Better luck next time!")
        else:
            print(f"\nPlayer {int(outcome.winner)} wins!")

        line = self.controller.winning_line
        if line:
            print(f"Winning line: {line}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="XO Match")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in MatchMode],
        default=MatchMode.HUMAN_VS_COMPUTER.value,
        help="Who controls each player"
    )
    parser.add_argument(
        "--difficulty",
        choices=[level.value for level in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Computer strength"
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=30.0,
        help="Seconds per turn before forfeiting"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible computer play"
    )
    parser.add_argument(
        "--random-first",
        action="store_true",
        help="Pick the starting player at random"
    )
    parser.add_argument(
        "--skip-intro",
        action="store_true",
        help="Start playing without the intro"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show engine debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    config = MatchConfig()
    config.TIME_LIMIT = args.time_limit

    match = ConsoleMatch(
        mode=MatchMode(args.mode),
        difficulty=Difficulty(args.difficulty),
        config=config,
        seed=args.seed
    )

    try:
        match.play(args.random_first, args.skip_intro)
    except (KeyboardInterrupt, EOFError):
        print("\n\nMatch interrupted by user.")
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
