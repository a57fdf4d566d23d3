# constraints.py
# Canonical search constraints, and the ways of deriving them from a board.

from collections import Counter
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Set

from utils import ALPHABET

_LETTERS = frozenset(ALPHABET + ALPHABET.lower())


class ConstraintError(ValueError):
    """A constraint set that no word can satisfy, or malformed input."""


class CellState(Enum):
    EMPTY = 0
    GRAY = 1
    YELLOW = 2
    GREEN = 3


class Cell(NamedTuple):
    state: CellState = CellState.EMPTY
    letter: Optional[str] = None

    @classmethod
    def gray(cls, letter):
        return cls(CellState.GRAY, letter.upper())

    @classmethod
    def yellow(cls, letter):
        return cls(CellState.YELLOW, letter.upper())

    @classmethod
    def green(cls, letter):
        return cls(CellState.GREEN, letter.upper())


EMPTY_CELL = Cell()


class Requirement(NamedTuple):
    """The solution holds ``count`` of a letter: at least, or exactly when ``exact``."""

    count: int
    exact: bool = False

    @classmethod
    def at_least(cls, n):
        return cls(n, False)

    @classmethod
    def exactly(cls, n):
        return cls(n, True)

    def satisfied_by(self, count):
        return count == self.count if self.exact else count >= self.count

    def __repr__(self):
        return f"{'Exactly' if self.exact else 'AtLeast'}({self.count})"


def _check_letters(s, what):
    bad = [ch for ch in s if ch not in _LETTERS]
    if bad:
        raise ConstraintError(f"{what} letters must be A-Z only (got {''.join(bad)!r})")
    return s.upper()


class Constraints:
    """
    Search input for words of ``length`` letters.
      correct[pos]      -> forced letter or None
      excluded[pos]     -> letters that cannot sit at pos
      unused            -> letters absent from the solution
      multiplicity[L]   -> Requirement on the number of L's
    """

    def __init__(self, length):
        if length < 1:
            raise ConstraintError("word length must be at least 1")
        self.correct: List[Optional[str]] = [None] * length
        self.excluded: List[Set[str]] = [set() for _ in range(length)]
        self.unused: Set[str] = set()
        self.multiplicity: Dict[str, Requirement] = {}

    def __len__(self):
        return len(self.correct)

    def __eq__(self, other):
        if not isinstance(other, Constraints):
            return NotImplemented
        return (self.correct == other.correct and self.excluded == other.excluded
                and self.unused == other.unused and self.multiplicity == other.multiplicity)

    def __repr__(self):
        board = "".join(ch or "." for ch in self.correct)
        return (f"Constraints(correct={board!r}, excluded={self.excluded!r}, "
                f"unused={''.join(sorted(self.unused))!r}, multiplicity={self.multiplicity!r})")

    def force(self, pos, letter):
        letter = letter.upper()
        if self.correct[pos] is not None and self.correct[pos] != letter:
            raise ConstraintError(
                f"position {pos + 1} cannot be both {self.correct[pos]} and {letter}")
        self.correct[pos] = letter

    def validate(self):
        """Reject constraint sets that contradict themselves."""
        forced = Counter(ch for ch in self.correct if ch is not None)
        for pos, ch in enumerate(self.correct):
            if ch is not None and ch in self.excluded[pos]:
                raise ConstraintError(f"{ch} is both correct and excluded at position {pos + 1}")
        for ch in forced:
            if ch in self.unused:
                raise ConstraintError(f"{ch} is both correct and unused")
        for ch, req in self.multiplicity.items():
            if ch in self.unused:
                raise ConstraintError(f"{ch} is both required and unused")
            if req.exact and forced[ch] > req.count:
                raise ConstraintError(f"{ch} is forced {forced[ch]} times but allowed {req.count}")
        if sum(req.count for req in self.multiplicity.values()) > len(self):
            raise ConstraintError(f"more letters are required than fit in {len(self)} positions")
        return self

    @classmethod
    def from_pattern(cls, board, unused="", unplaced=""):
        """
        Build constraints from a pattern such as ``".A..E"`` (``.`` = unknown),
        letters known to be absent, and letters known to be present somewhere.
        A letter that is both forced and listed as unused is allowed only where forced.
        Unplaced letters count the whole word, greens included: ``("s....", "", "s")``
        asks for at least one S, which the forced S already supplies.
        """
        bad = [ch for ch in board if ch != "." and ch not in _LETTERS]
        if bad:
            raise ConstraintError("Board letters must be A-Z or . only")
        board = board.upper()
        unused = _check_letters(unused, "Unused")
        unplaced = _check_letters(unplaced or "", "Unplaced")

        c = cls(len(board))
        for pos, ch in enumerate(board):
            if ch != ".":
                c.correct[pos] = ch
        forced = Counter(ch for ch in c.correct if ch is not None)

        for ch, n in sorted(Counter(unplaced).items()):
            c.multiplicity[ch] = Requirement.at_least(n)
        for ch in sorted(set(unused)):
            if ch in forced:
                if ch in c.multiplicity and c.multiplicity[ch].count > forced[ch]:
                    raise ConstraintError(f"{ch} is both unplaced and unused")
                c.multiplicity[ch] = Requirement.exactly(forced[ch])
            else:
                c.unused.add(ch)
        return c.validate()


def is_complete_row(row):
    return bool(row) and all(cell.state is not CellState.EMPTY for cell in row)


def extract_constraints(board: Sequence[Sequence[Cell]]) -> Constraints:
    """
    Derive constraints from a board of coloured guesses. Only complete rows count.

    Green fixes a position, yellow and gray exclude the letter from their
    position. In one row the green+yellow cells of a letter give a lower bound
    on its count; a gray cell of the same letter in that row makes the bound
    exact. Bounds from separate rows are merged, and a letter with an exact
    count of zero is unused.
    """
    if not board:
        raise ConstraintError("board has no rows")
    cols = len(board[0])
    c = Constraints(cols)

    lower: Dict[str, int] = {}
    exact: Dict[str, int] = {}

    for row in board:
        if len(row) != cols:
            raise ConstraintError("board rows differ in length")
        if not is_complete_row(row):
            continue

        used = Counter()
        gray = set()
        for pos, cell in enumerate(row):
            letter = cell.letter.upper()
            if cell.state is CellState.GREEN:
                c.force(pos, letter)
                used[letter] += 1
            elif cell.state is CellState.YELLOW:
                c.excluded[pos].add(letter)
                used[letter] += 1
            else:
                c.excluded[pos].add(letter)
                gray.add(letter)

        for letter in set(used) | gray:
            n = used[letter]
            if letter in gray:
                if exact.get(letter, n) != n:
                    raise ConstraintError(
                        f"{letter} appears exactly {exact[letter]} and exactly {n} times")
                exact[letter] = n
            lower[letter] = max(lower.get(letter, 0), n)

    for letter in sorted(lower):
        if letter in exact:
            n = exact[letter]
            if lower[letter] > n:
                raise ConstraintError(
                    f"{letter} appears exactly {n} times but at least {lower[letter]} times")
            if n == 0:
                c.unused.add(letter)
            else:
                c.multiplicity[letter] = Requirement.exactly(n)
        elif lower[letter]:
            c.multiplicity[letter] = Requirement.at_least(lower[letter])

    return c.validate()
