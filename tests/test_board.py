import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest

from board import Board
from constraints import EMPTY_CELL, Cell, CellState, ConstraintError
from dictionary import Dictionary


@pytest.fixture
def dictionary():
    return Dictionary.from_words(["quart", "hoard", "board", "brass", "sugar", "crane"])


def type_word(board, word):
    for ch in word:
        assert board.add(ch)


def test_add_fills_rows(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    assert board.row == 1 and board.col == 0
    assert board.cells[0] == [Cell.gray(ch) for ch in "crane"]
    assert board.cells[1][0] is EMPTY_CELL


def test_add_rejects_non_letters(dictionary):
    board = Board(dictionary)
    with pytest.raises(ValueError):
        board.add('1')
    for bad in ("", "AB", "\u00e9"):
        with pytest.raises(ValueError):
            board.add(bad)
    assert board.row == 0 and board.col == 0
    assert board.cells[0][0] is EMPTY_CELL


def test_add_when_full(dictionary):
    board = Board(dictionary, rows=1, cols=2)
    type_word(board, "ab")
    assert not board.add('c')


def test_add_copies_known_colour_in_column(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    board.toggle(0, 0)
    board.toggle(0, 0)
    assert board.cells[0][0] == Cell.green('C')
    board.add('c')
    board.add('x')
    assert board.cells[1][0] == Cell.green('C')
    assert board.cells[1][1] == Cell.gray('X')


def test_remove(dictionary):
    board = Board(dictionary)
    assert not board.remove()
    type_word(board, "crane")
    assert board.remove()
    assert board.row == 0 and board.col == 4
    assert board.cells[0][4] is EMPTY_CELL


def test_toggle_cycles(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    seen = []
    for _ in range(3):
        board.toggle(0, 2)
        seen.append(board.cells[0][2].state)
    assert seen == [CellState.YELLOW, CellState.GREEN, CellState.GRAY]
    assert not board.toggle(1, 0)


def test_yellow_goes_gray_when_column_has_green(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    type_word(board, "slate")
    board.toggle(1, 0)
    board.toggle(1, 0)
    assert board.cells[1][0] == Cell.green('S')
    board.toggle(0, 0)
    assert board.cells[0][0] == Cell.yellow('C')
    board.toggle(0, 0)
    assert board.cells[0][0] == Cell.gray('C')


def test_toggle_propagates_down_column(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    type_word(board, "trace")
    board.toggle(0, 2)
    assert board.cells[0][2] == Cell.yellow('A')
    assert board.cells[1][2] == Cell.yellow('A')


def test_toggle_skips_rows_marking_letter_elsewhere(dictionary):
    board = Board(dictionary)
    type_word(board, "crane")
    type_word(board, "aback")
    board.toggle(1, 0)
    assert board.cells[1][0] == Cell.yellow('A')
    board.toggle(0, 2)
    assert board.cells[0][2] == Cell.yellow('A')
    # row 1 holds a yellow A in column 0, so its A in column 2 is left alone
    assert board.cells[1][2] == Cell.gray('A')


def test_toggle_col(dictionary):
    board = Board(dictionary)
    assert not board.toggle_col(0)
    type_word(board, "crane")
    assert board.toggle_col(2)
    assert board.cells[0][2] == Cell.yellow('A')
    board.add('x')
    assert board.toggle_col(0)
    assert board.cells[1][0] == Cell.yellow('X')
    assert not board.toggle_col(9)


def test_guess_and_calculate(dictionary):
    board = Board(dictionary)
    assert board.calculate() is None
    assert board.word_count() == 0
    board.add_guess("crane", ".YG..")
    assert board.cells[0][1] == Cell.yellow('R')
    board.calculate()
    assert board.word_count() == 3
    assert [board.get_word(i) for i in range(3)] == ["BOARD", "HOARD", "QUART"]
    assert board.get_word(3) is None


def test_calculate_ignores_partial_row(dictionary):
    board = Board(dictionary)
    board.add_guess("crane", ".YG..")
    type_word(board, "zz")
    board.calculate()
    assert board.word_count() == 3


@pytest.mark.parametrize("word, feedback", [
    ("crane", ".YZ.."),
    ("cran", ".YG."),
    ("crane", ".YG."),
])
def test_add_guess_rejects_bad_input(dictionary, word, feedback):
    board = Board(dictionary)
    with pytest.raises(ConstraintError):
        board.add_guess(word, feedback)


def test_print_board(dictionary, capsys):
    board = Board(dictionary, rows=2)
    board.add_guess("crane", ".YG..")
    board.print_board()
    out = capsys.readouterr().out
    for ch in "CRANE":
        assert f" {ch} " in out
    assert " · " in out


def test_rejected_guess_leaves_board_unchanged(dictionary):
    board = Board(dictionary)
    board.add_guess("crane", ".YG..")
    before = [list(r) for r in board.cells]
    with pytest.raises(ConstraintError):
        board.add_guess("cr1ne", ".....")
    assert board.row == 1 and board.col == 0
    assert board.cells == before
    board.calculate()
    assert board.word_count() == 3
