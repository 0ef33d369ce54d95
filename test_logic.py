"""
Tests for the XO logic module: grid, outcome checks, history,
minimax search and move selection.

Run with pytest, or directly: python test_logic.py
"""

import itertools
import sys

import numpy as np
import pytest

from xo_logic.errors import InvalidMoveError
from xo_logic.game_state import CellValue, GridState, NO_MOVE, Outcome, empty_indices
from xo_logic.minimax import MinimaxSearch
from xo_logic.move_history import MoveHistory
from xo_logic.move_selector import Difficulty, MoveSelector
from xo_logic.move_validator import validate_move
from xo_logic.win_checker import WINNING_LINES, evaluate_outcome, get_winning_line

P1 = CellValue.PLAYER_ONE
P2 = CellValue.PLAYER_TWO

# Lines to complete, and where the other player sits meanwhile (no line of their own)
WIN_CONDITIONS = [(0, 1, 2), (3, 4, 5), (6, 7, 8), (0, 3, 6), (1, 4, 7), (2, 5, 8), (0, 4, 8), (2, 4, 6)]
LOSE_SETUPS = [(3, 6, 7), (0, 6, 1), (0, 3, 1), (2, 1, 5), (0, 2, 8), (0, 1, 7), (1, 3, 2), (0, 1, 3)]


def board(*rows: str):
    """Build cells from rows like "X O _"."""
    symbols = {"X": P1, "O": P2, "_": CellValue.EMPTY}
    return tuple(symbols[s] for row in rows for s in row.split())


def play(moves):
    """Play alternating moves from player one. Returns (grid, history, outcomes)."""
    grid = GridState()
    history = MoveHistory(grid)
    player = P1
    outcomes = []
    for index in moves:
        grid.place(index, player)
        history.record_move(index)
        outcomes.append(evaluate_outcome(grid.cells, index, history.turn))
        player = player.opposite()
    return grid, history, outcomes


def drawn_boards():
    """Every full board (5 marks for player one, 4 for player two) with no line."""
    for ones in itertools.combinations(range(9), 5):
        cells = [P2] * 9
        for index in ones:
            cells[index] = P1
        if get_winning_line(cells) is None:
            yield cells


# ==================== GRID ====================

def test_grid_place_and_clear():
    grid = GridState()
    grid.place(4, P1)
    assert grid.value_at(4) == P1
    assert grid.filled_count() == 1
    assert 4 not in grid.empty_indices()

    grid.clear(4)
    assert grid.value_at(4) == CellValue.EMPTY
    assert grid.filled_count() == 0


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_grid_rejects_out_of_range(index):
    grid = GridState()
    with pytest.raises(InvalidMoveError):
        grid.place(index, P1)
    assert grid.cells == GridState().cells


def test_grid_rejects_occupied_cell():
    grid = GridState()
    grid.place(0, P1)
    with pytest.raises(InvalidMoveError):
        grid.place(0, P2)
    assert grid.value_at(0) == P1


def test_grid_rejects_empty_as_player():
    with pytest.raises(InvalidMoveError):
        GridState().place(0, CellValue.EMPTY)


def test_grid_is_full():
    grid = GridState(next(drawn_boards()))
    assert grid.is_full()
    grid.clear(3)
    assert not grid.is_full()


def test_grid_cells_is_a_snapshot():
    grid = GridState()
    before = grid.cells
    grid.place(2, P2)
    assert before[2] == CellValue.EMPTY
    assert grid.cells[2] == P2


def test_validate_move_messages():
    cells = board("X _ _", "_ _ _", "_ _ _")
    assert validate_move(cells, 1).is_valid
    assert "occupied" in validate_move(cells, 0).error_message
    assert "0-8" in validate_move(cells, 9).error_message
    assert not validate_move(cells, "4").is_valid


def test_cell_and_outcome_values_line_up():
    assert Outcome(int(P1)) == Outcome.PLAYER_ONE_WIN
    assert Outcome(int(P2)) == Outcome.PLAYER_TWO_WIN
    assert Outcome.DRAW not in (0, 1, 2)
    assert Outcome.PLAYER_TWO_WIN.winner == P2
    assert Outcome.DRAW.winner is None


# ==================== OUTCOME ====================

@pytest.mark.parametrize("player", [P1, P2])
@pytest.mark.parametrize("line", WINNING_LINES)
def test_completing_any_line_wins(line, player):
    for last in line:
        cells = [CellValue.EMPTY] * 9
        for index in line:
            cells[index] = player
        assert evaluate_outcome(cells, last, 7) == Outcome(int(player))


def test_win_is_checked_after_the_triggering_move():
    for line, setup in zip(WIN_CONDITIONS, LOSE_SETUPS):
        moves = [line[0], setup[0], line[1], setup[1], line[2]]
        _, _, outcomes = play(moves)
        assert outcomes[:-1] == [Outcome.NONE] * 4
        assert outcomes[-1] == Outcome.PLAYER_ONE_WIN


def test_player_two_wins():
    for line, setup in zip(WIN_CONDITIONS, LOSE_SETUPS):
        moves = [setup[0], line[0], setup[1], line[1], setup[2], line[2]]
        _, _, outcomes = play(moves)
        assert Outcome.PLAYER_ONE_WIN not in outcomes
        assert outcomes[:-1] == [Outcome.NONE] * 5
        assert outcomes[-1] == Outcome.PLAYER_TWO_WIN


def test_every_drawn_filling_ends_in_draw_on_ninth_move():
    boards = list(drawn_boards())
    assert boards

    for cells in boards:
        ones = [i for i, v in enumerate(cells) if v == P1]
        twos = [i for i, v in enumerate(cells) if v == P2]
        moves = [m for pair in itertools.zip_longest(ones, twos) for m in pair if m is not None]

        _, history, outcomes = play(moves)
        assert outcomes[:8] == [Outcome.NONE] * 8
        assert outcomes[8] == Outcome.DRAW
        assert history.turn == 10


def test_turn_ten_is_a_draw_without_a_line():
    cells = board("X O X", "X O O", "O X _")
    assert evaluate_outcome(cells, 7, 10) == Outcome.DRAW
    assert evaluate_outcome(cells, 7, 9) == Outcome.NONE


def test_winning_ninth_move_is_a_win_not_a_draw():
    cells = board("X O X", "O X O", "O X X")
    assert evaluate_outcome(cells, 8, 10) == Outcome.PLAYER_ONE_WIN


def test_get_winning_line():
    assert get_winning_line(board("O _ X", "_ X _", "X _ O")) == (2, 4, 6)
    assert get_winning_line(board("O _ X", "_ _ _", "X _ O")) is None


# ==================== HISTORY ====================

def test_undo_restores_two_moves():
    grid, history, _ = play([4, 0])
    undone = history.undo_last_round()

    assert undone == [0, 4]
    assert grid.cells == GridState().cells
    assert history.turn == 1
    assert len(history) == 0


def test_undo_is_a_left_inverse_of_two_moves():
    grid, history, _ = play([4, 0, 8])
    before_cells, before_turn = grid.cells, history.turn

    for a, b in [(2, 6), (1, 7), (5, 3)]:
        grid.place(a, P2)
        history.record_move(a)
        grid.place(b, P1)
        history.record_move(b)

        assert history.undo_last_round() == [b, a]
        assert grid.cells == before_cells
        assert history.turn == before_turn


@pytest.mark.parametrize("moves", [[], [4]])
def test_undo_needs_two_moves(moves):
    grid, history, _ = play(moves)
    cells, turn = grid.cells, history.turn

    assert history.undo_last_round() == []
    assert grid.cells == cells
    assert history.turn == turn


def test_undo_whole_board_round_by_round():
    grid, history, _ = play([0, 6, 3, 5, 7, 1, 4, 8])

    assert history.undo_last_round() == [8, 4]
    assert grid.filled_count() == 6
    assert history.undo_last_round() == [1, 7]
    assert history.undo_last_round() == [5, 3]
    assert history.undo_last_round() == [6, 0]
    assert grid.filled_count() == 0
    assert history.turn == 1


def test_history_length_matches_filled_cells():
    grid, history, _ = play([0, 6, 3, 5])
    assert len(history) == grid.filled_count()
    assert history.moves == (0, 6, 3, 5)
    assert history.last_move == 5


# ==================== SEARCH ====================

def random_positions(count, seed=7):
    """Non-terminal positions reached by random play: (cells, turn, player to move)."""
    rng = np.random.default_rng(seed)
    positions = []
    while len(positions) < count:
        grid = GridState()
        player = P1
        turn = 1
        while True:
            options = grid.empty_indices()
            positions.append((grid.cells, turn, player))
            index = options[int(rng.integers(len(options)))]
            grid.place(index, player)
            turn += 1
            if evaluate_outcome(grid.cells, index, turn).is_terminal:
                break
            player = player.opposite()
    return positions[:count]


def test_best_move_is_always_empty():
    search = MinimaxSearch()
    for cells, turn, player in random_positions(60):
        if turn == 1:
            continue
        move = search.best_move(cells, turn, player)
        assert move in empty_indices(cells)


def test_best_move_on_full_board():
    assert MinimaxSearch().best_move(next(drawn_boards()), 10, P2) == NO_MOVE


def test_best_move_takes_win_in_one():
    cells = board("X X _", "O O _", "_ _ _")
    assert MinimaxSearch().best_move(cells, 5, P1) == 2
    # O to move (if it were) wins on its own row
    assert MinimaxSearch().best_move(cells, 5, P2) == 5


def test_best_move_win_or_block():
    cells = board("X _ _", "_ X _", "O O _")
    assert MinimaxSearch().best_move(cells, 5, P1) == 8


def test_best_move_blocks_forced_loss():
    cells = board("X X _", "_ O _", "_ _ _")
    assert MinimaxSearch().best_move(cells, 4, P2) == 2


def test_hint_wins_and_blocks_for_every_line():
    search = MinimaxSearch()
    for line, setup in zip(WIN_CONDITIONS, LOSE_SETUPS):
        grid, history, _ = play([line[0], setup[0], line[1], setup[1]])
        assert search.best_move(grid.cells, history.turn, P1) == line[2]

        grid, history, _ = play([setup[0], line[0], setup[1], line[1]])
        assert search.best_move(grid.cells, history.turn, P1) == line[2]


def test_scores_discount_by_depth():
    cells = board("X _ _", "O O _", "_ _ X")
    scores = MinimaxSearch().score_moves(cells, 5, P1)

    assert set(scores) == set(empty_indices(cells))
    assert all(scores[index] == -5 for index in scores if index != 5)
    assert scores[5] > -5


def test_win_in_one_scores_ten():
    scores = MinimaxSearch().score_moves(board("X X _", "O O _", "_ _ _"), 5, P1)
    assert scores[2] == 10


def test_search_does_not_touch_input():
    grid = GridState(board("X _ _", "_ O _", "_ _ _"))
    before = grid.cells
    MinimaxSearch().best_move(grid.cells, 3, P1)
    assert grid.cells == before


def test_best_move_matches_plain_minimax_tie_break():
    search = MinimaxSearch()
    for cells, turn, player in random_positions(40, seed=11):
        if turn < 3:
            continue
        scores = search.score_moves(cells, turn, player)
        best = max(scores.values())
        first_best = min(index for index, score in scores.items() if score == best)
        assert search.best_move(cells, turn, player) == first_best


# ==================== SELECTION ====================

def test_opening_move_is_uniform():
    selector = MoveSelector(np.random.default_rng(1234))
    empty = GridState().cells

    picks = [
        selector.choose_automated_move(empty, 1, P1, Difficulty.UNBEATABLE)
        for _ in range(9000)
    ]
    counts = np.bincount(picks, minlength=9)

    assert counts.sum() == 9000
    assert counts.min() > 850
    assert counts.max() < 1150


def test_unbeatable_takes_the_win():
    selector = MoveSelector(np.random.default_rng(5))
    cells = board("X X _", "O O _", "_ _ _")
    for _ in range(20):
        assert selector.choose_automated_move(cells, 5, P1, Difficulty.UNBEATABLE) == 2


def test_easy_plays_random_moves():
    selector = MoveSelector(np.random.default_rng(5))
    cells = board("X X _", "O O _", "_ _ _")
    picks = {selector.choose_automated_move(cells, 5, P1, Difficulty.EASY) for _ in range(200)}

    assert picks <= set(empty_indices(cells))
    assert len(picks) > 1


def test_medium_mixes_random_and_best():
    selector = MoveSelector(np.random.default_rng(9))
    cells = board("X X _", "O O _", "_ _ _")
    picks = [selector.choose_automated_move(cells, 5, P1, Difficulty.MEDIUM) for _ in range(400)]

    winning = picks.count(2)
    # 50% search plus 1 in 5 of the random half
    assert 200 < winning < 280


def test_selector_on_full_board():
    selector = MoveSelector(np.random.default_rng(0))
    cells = next(drawn_boards())
    assert selector.random_empty_index(cells) == NO_MOVE
    for level in Difficulty:
        assert selector.choose_automated_move(cells, 10, P1, level) == NO_MOVE


def test_seeded_selectors_agree():
    cells = board("X _ _", "_ _ _", "_ _ _")
    a = MoveSelector(np.random.default_rng(42))
    b = MoveSelector(np.random.default_rng(42))
    for _ in range(30):
        assert (a.choose_automated_move(cells, 2, P2, Difficulty.HARD)
                == b.choose_automated_move(cells, 2, P2, Difficulty.HARD))


def test_suggest_move_does_not_mutate():
    grid = GridState(board("X _ _", "_ O _", "_ _ X"))
    before = grid.cells
    move = MoveSelector(np.random.default_rng(3)).suggest_move(grid.cells, 4, P2)
    assert move in empty_indices(before)
    assert grid.cells == before


@pytest.mark.parametrize("seed", range(4))
def test_unbeatable_self_play_always_draws(seed):
    selector = MoveSelector(np.random.default_rng(seed))
    grid = GridState()
    history = MoveHistory(grid)
    player = P1
    outcome = Outcome.NONE

    while not outcome.is_terminal:
        move = selector.choose_automated_move(grid.cells, history.turn, player, Difficulty.UNBEATABLE)
        grid.place(move, player)
        history.record_move(move)
        outcome = evaluate_outcome(grid.cells, move, history.turn)
        player = player.opposite()

    assert outcome == Outcome.DRAW


def test_difficulty_chances():
    assert [level.random_move_chance for level in Difficulty] == [100.0, 50.0, 10.0, 0.0]


def run_all_tests():
    """Run every test in this module without pytest."""
    return pytest.main([__file__, "-q"])


if __name__ == "__main__":
    sys.exit(run_all_tests())
