# search.py
# Constrained depth-first search over the dictionary trie.

from collections import Counter

from colorama import Style

from dictionary import SlotKind, letter_char, letter_index
from utils import ALPHABET_SIZE, PRINT_LOCK


# ============== Helper utilities ==============
def _candidate_letters(constraints):
    """Per position, the letter numbers worth trying, ascending."""
    unused = {letter_index(ch) for ch in constraints.unused}
    out = []
    for forced, excluded in zip(constraints.correct, constraints.excluded):
        if forced is not None:
            out.append((letter_index(forced),))
        else:
            banned = unused | {letter_index(ch) for ch in excluded}
            out.append(tuple(n for n in range(ALPHABET_SIZE) if n not in banned))
    return out


def _requirements(constraints):
    return [
        (letter_index(ch), req.count, req.exact)
        for ch, req in sorted(constraints.multiplicity.items())
    ]


def _chosen_string(chosen):
    return "".join(letter_char(n) for n in chosen)


def _debug_lookup(chosen, slot):
    s = _chosen_string(chosen)
    with PRINT_LOCK:
        print(f"{' ' * len(s)}{s} {Style.DIM}({slot!r}){Style.RESET_ALL}", flush=True)


# ============== Wordle-style search ==============
def find_words(dictionary, constraints, debug=False):
    """
    Return identifiers of every word matching ``constraints``, in discovery
    order (letter-ascending at each branch point).

    Letter counts are carried down each branch, so multiplicity requirements
    are checked without walking back up the trie. Branches that already break
    an exact count, or cannot fit the outstanding required letters in the
    positions left, are cut early.
    """
    length = len(constraints)
    candidates = _candidate_letters(constraints)
    reqs = _requirements(constraints)
    lookup = dictionary.lookup

    counts = [0] * ALPHABET_SIZE
    chosen = []
    result = []

    def feasible(filled):
        outstanding = 0
        for letter, need, exact in reqs:
            have = counts[letter]
            if exact and have > need:
                return False
            if have < need:
                outstanding += need - have
        return outstanding <= length - filled

    def rec(pos, node):
        last = pos == length - 1
        for letter in candidates[pos]:
            slot = lookup(node, letter)
            chosen.append(letter)
            if debug:
                _debug_lookup(chosen, slot)

            if slot.kind is not SlotKind.EMPTY:
                counts[letter] += 1
                if feasible(pos + 1):
                    if last:
                        if slot.is_terminal:
                            result.append(node * ALPHABET_SIZE + letter)
                    elif slot.index is not None:
                        rec(pos + 1, slot.index)
                counts[letter] -= 1

            chosen.pop()

    rec(0, 0)
    return result


# ============== Letter bag search ==============
def find_anagrams(dictionary, letters, min_length=1):
    """
    Return identifiers of every word that can be spelled from the multiset
    ``letters`` (each tile used at most once), shorter words before their
    extensions.
    """
    remaining = Counter(letter_index(ch) for ch in letters)
    lookup = dictionary.lookup
    result = []

    def rec(node, depth):
        for letter in sorted(remaining):
            if remaining[letter] == 0:
                continue
            slot = lookup(node, letter)
            if slot.kind is SlotKind.EMPTY:
                continue
            if slot.is_terminal and depth + 1 >= min_length:
                result.append(node * ALPHABET_SIZE + letter)
            if slot.index is not None:
                remaining[letter] -= 1
                rec(slot.index, depth + 1)
                remaining[letter] += 1

    rec(0, 0)
    return result


def words_for(dictionary, ids):
    """Materialise word identifiers as strings."""
    return [dictionary.word_at(i) for i in ids]
