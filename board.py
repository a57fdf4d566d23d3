from colorama import Back, Fore, Style

from constraints import EMPTY_CELL, Cell, CellState, ConstraintError, extract_constraints, is_complete_row
from dictionary import letter_index
from search import find_words
from utils import BOARD_ROWS, PRINT_LOCK, WORD_LEN

# Feedback characters accepted by add_guess
FEEDBACK = {
    'G': CellState.GREEN,
    'Y': CellState.YELLOW,
    '.': CellState.GRAY,
    '_': CellState.GRAY,
    'X': CellState.GRAY,
}

CELL_COLORS = {
    CellState.EMPTY: Style.DIM,
    CellState.GRAY: Back.LIGHTBLACK_EX + Fore.WHITE,
    CellState.YELLOW: Back.YELLOW + Fore.BLACK,
    CellState.GREEN: Back.GREEN + Fore.BLACK,
}


class Board:
    """
    A grid of coloured guesses, filled left to right, top to bottom.
    Letters start gray unless the same letter is already yellow or green in
    that column on an earlier row, and are cycled gray -> yellow -> green.
    """

    def __init__(self, dictionary, rows=BOARD_ROWS, cols=WORD_LEN):
        self.dictionary = dictionary
        self.rows = rows
        self.cols = cols
        self.cells = [[EMPTY_CELL for _ in range(cols)] for _ in range(rows)]
        self.row = 0
        self.col = 0
        self.words = None

    def add(self, ch):
        """Add a letter at the cursor. Returns False when the board is full."""
        if self.row >= self.rows:
            return False
        letter_index(ch)
        ch = ch.upper()

        cell = Cell.gray(ch)
        for row in self.cells:
            prev = row[self.col]
            if prev.letter == ch and prev.state in (CellState.GREEN, CellState.YELLOW):
                cell = prev
                break
        self.cells[self.row][self.col] = cell

        self.col += 1
        if self.col == self.cols:
            self.col = 0
            self.row += 1
        return True

    def remove(self):
        """Remove the last letter. Returns False when the board is empty."""
        if self.col > 0:
            self.col -= 1
        elif self.row > 0:
            self.row -= 1
            self.col = self.cols - 1
        else:
            return False
        self.cells[self.row][self.col] = EMPTY_CELL
        return True

    def toggle_col(self, col):
        """Toggle a column of the row being typed, or of the last full row."""
        if col >= self.cols:
            return False
        if col >= self.col:
            if self.row == 0:
                return False
            row = self.row - 1
        else:
            row = self.row
        return self.toggle(row, col)

    def toggle(self, row, col):
        """
        Cycle a cell gray -> yellow -> green -> gray. Yellow goes straight back
        to gray when the column already has a green. The new state is copied to
        the same letter in the same column on other rows, unless that row
        already marks the letter yellow or green in another column.
        """
        cell = self.cells[row][col]
        if cell.state is CellState.EMPTY:
            return False
        ch = cell.letter

        if cell.state is CellState.GRAY:
            new = Cell.yellow(ch)
        elif cell.state is CellState.YELLOW:
            if any(r[col].state is CellState.GREEN for r in self.cells):
                new = Cell.gray(ch)
            else:
                new = Cell.green(ch)
        else:
            new = Cell.gray(ch)

        for rn, r in enumerate(self.cells):
            if r[col].letter != ch:
                continue
            elsewhere = any(
                cn != col and other.letter == ch and other.state in (CellState.YELLOW, CellState.GREEN)
                for cn, other in enumerate(r)
            )
            if rn == row or not elsewhere:
                r[col] = new
        return True

    def add_guess(self, word, feedback):
        """Append a whole row, e.g. ``add_guess("crane", ".YG..")``."""
        if len(word) != self.cols or len(feedback) != self.cols:
            raise ConstraintError(f"guess and feedback must both be {self.cols} characters")
        if self.col != 0 or self.row >= self.rows:
            raise ConstraintError("no free row for another guess")
        states = []
        for f in feedback.upper():
            if f not in FEEDBACK:
                raise ConstraintError(f"feedback must be G, Y or . (got {f!r})")
            states.append(FEEDBACK[f])
        for ch in word:
            try:
                letter_index(ch)
            except ValueError as e:
                raise ConstraintError(f"guess must be letters A-Z only (got {word!r})") from e
        for ch in word:
            self.add(ch)
        self.cells[self.row - 1] = [Cell(st, ch.upper()) for st, ch in zip(states, word)]

    def complete_rows(self):
        return [r for r in self.cells if is_complete_row(r)]

    def constraints(self):
        return extract_constraints(self.complete_rows())

    def calculate(self, debug=False):
        """Recompute the matching words once at least one row is complete."""
        if self.row > 0:
            self.words = find_words(self.dictionary, self.constraints(), debug=debug)
        else:
            self.words = None
        return self.words

    def word_count(self):
        return len(self.words) if self.words else 0

    def get_word(self, i):
        if self.words is None or not 0 <= i < len(self.words):
            return None
        return self.dictionary.word_at(self.words[i])

    def print_board(self):
        print_board(self.cells)


def print_board(cells):
    """Thread-safe coloured printing of a board of cells."""
    with PRINT_LOCK:
        lines = []
        for row in cells:
            line = []
            for cell in row:
                color = CELL_COLORS[cell.state]
                text = f' {cell.letter} ' if cell.letter else ' · '
                line.append(color + text + Style.RESET_ALL)
            lines.append(' '.join(line))
        print('\n'.join(lines), flush=True)
        print(flush=True)
