# dictionary.py
# Arena trie over A-Z with tagged slots. Node 0 is the root (empty prefix).

import gzip
import io
import os
import sys
import time
import zlib
from enum import IntEnum
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union

from colorama import Fore

from utils import ALPHABET, ALPHABET_SIZE, log_with_time, num_format, vlog
import utils

GZIP_MAGIC = b"\x1f\x8b"


class DictionaryError(Exception):
    """Base class for word list loading errors."""


class WordSourceError(DictionaryError):
    """A gzip-framed word source could not be decompressed."""


class DuplicateWordError(DictionaryError):
    """A word was inserted that is already a complete entry in the trie."""

    def __init__(self, word: str):
        super().__init__(f"duplicate word in word list: {word!r}")
        self.word = word


# ---------- Slots ----------
class SlotKind(IntEnum):
    EMPTY = 0
    CONTINUES = 1
    TERMINAL = 2
    TERMINAL_CONTINUES = 3


class Slot(NamedTuple):
    """
    One per-letter entry of a trie node.
      EMPTY                -> no word continues with this letter
      CONTINUES(i)         -> longer words continue via node i
      TERMINAL             -> a word ends here, nothing continues
      TERMINAL_CONTINUES(i)-> a word ends here and longer words continue via node i
    """

    kind: SlotKind
    index: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind in (SlotKind.TERMINAL, SlotKind.TERMINAL_CONTINUES)

    @property
    def next(self) -> Optional[int]:
        """Child node index, or None when nothing continues."""
        return self.index

    def __repr__(self):
        name = self.kind.name.title().replace("_", "")
        if self.index is None:
            return name
        return f"{name}({self.index})"


EMPTY = Slot(SlotKind.EMPTY)
TERMINAL = Slot(SlotKind.TERMINAL)


def continues(index: int) -> Slot:
    return Slot(SlotKind.CONTINUES, index)


def terminal_continues(index: int) -> Slot:
    return Slot(SlotKind.TERMINAL_CONTINUES, index)


# ---------- Letters ----------
def letter_index(ch: str) -> int:
    """Map 'A'..'Z' (or 'a'..'z') to 0..25."""
    if not isinstance(ch, str) or len(ch) != 1 or not ch.isascii():
        raise ValueError(f"Unsupported char: {ch!r} (use A-Z)")
    o = ord(ch.upper()) - 65
    if not 0 <= o < ALPHABET_SIZE:
        raise ValueError(f"Unsupported char: {ch!r} (use A-Z)")
    return o


def letter_char(n: int) -> str:
    return ALPHABET[n]


def _as_letter(letter: Union[int, str]) -> int:
    return letter if isinstance(letter, int) else letter_index(letter)


class WordSizeConstraint(NamedTuple):
    """Inclusive word length bounds applied while loading. ``max=None`` is unbounded."""

    min: int = 1
    max: Optional[int] = None

    @classmethod
    def exactly(cls, n: int) -> "WordSizeConstraint":
        return cls(n, n)

    def accepts(self, length: int) -> bool:
        if length < max(self.min, 1):
            return False
        return self.max is None or length <= self.max


# ---------- Word sources ----------
class WordSource:
    """A readable, line-oriented byte stream."""

    def __init__(self, stream):
        self._stream = stream

    def _reader(self):
        return self._stream

    def lines(self) -> Iterator[bytes]:
        for raw in self._reader():
            yield raw.rstrip(b"\n").rstrip(b"\r")


class PlainSource(WordSource):
    pass


class GzipSource(WordSource):
    """Gzip-decoding word source."""

    def _reader(self):
        return gzip.GzipFile(fileobj=self._stream, mode="rb")

    def lines(self) -> Iterator[bytes]:
        try:
            yield from super().lines()
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            raise WordSourceError(f"could not decompress word list: {e}") from e


def open_source(stream) -> WordSource:
    """Pick a plain or gzip source by peeking at the first two bytes of ``stream``."""
    if not hasattr(stream, "peek"):
        stream = io.BufferedReader(stream)
    if stream.peek(2)[:2] == GZIP_MAGIC:
        vlog("Decompressing word list")
        return GzipSource(stream)
    return PlainSource(stream)


# ---------- Trie ----------
class TrieNode:
    __slots__ = ("slots", "letter", "parent")

    def __init__(self, letter: int = -1, parent: int = -1):
        self.slots: List[Slot] = [EMPTY] * ALPHABET_SIZE
        self.letter = letter
        self.parent = parent


class LoadStats:
    """Counters gathered while loading a word list."""

    __slots__ = ("lines", "words", "wrong_length", "wrong_case", "duplicates",
                 "nodes", "mem_usage", "mem_alloc")

    def __init__(self):
        self.lines = 0
        self.words = 0
        self.wrong_length = 0
        self.wrong_case = 0
        self.duplicates = 0
        self.nodes = 0
        self.mem_usage = 0
        self.mem_alloc = 0

    def as_dict(self):
        return {name: getattr(self, name) for name in self.__slots__}


def _is_ascii_lower(line: bytes) -> bool:
    return all(97 <= b <= 122 for b in line)


class Dictionary:
    """
    Append-only prefix trie:
      - Dictionary.build(stream, size) -> Dictionary
      - lookup(node, letter) -> Slot
      - word_at(word_id) -> str
      - word_contains(word_id, letter, required_count, exact) -> bool
    A word is identified by the terminal slot it ends in: node * 26 + letter.
    """

    __slots__ = ("_nodes", "_words", "stats")

    def __init__(self):
        self._nodes: List[TrieNode] = [TrieNode()]  # root at 0
        self._words = 0
        self.stats = LoadStats()

    # ---------- Construction ----------
    @classmethod
    def build(cls, stream, size: WordSizeConstraint = WordSizeConstraint(),
              allow_duplicates: bool = False) -> "Dictionary":
        """
        Load a newline-delimited word list from a binary stream, gzip or plain.
        Lines outside ``size`` or with anything but a-z are counted and skipped.
        """
        t0 = time.time()
        d = cls()
        st = d.stats

        for line in open_source(stream).lines():
            st.lines += 1
            if not size.accepts(len(line)):
                st.wrong_length += 1
                continue
            if not _is_ascii_lower(line):
                st.wrong_case += 1
                continue
            try:
                d.insert(line.decode("ascii"))
            except DuplicateWordError:
                if not allow_duplicates:
                    raise
                st.duplicates += 1
                continue
            st.words += 1

        d._update_stats()
        vlog(f"{num_format(st.lines)} total words ({num_format(st.wrong_length)} wrong length, "
             f"{num_format(st.wrong_case)} not all lower case)")
        vlog(f"Dictionary words {num_format(d.word_count)}, tree nodes {num_format(d.node_count)} "
             f"({num_format(d.mem_usage)} bytes of {num_format(d.mem_alloc)} allocated)", t0)
        return d

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike], size: WordSizeConstraint = WordSizeConstraint(),
                  allow_duplicates: bool = False) -> "Dictionary":
        if utils.VERBOSE:
            log_with_time(f"Loading words from file {file_spec(path)}", color=Fore.CYAN)
        with open(path, "rb") as f:
            return cls.build(f, size, allow_duplicates)

    @classmethod
    def from_bytes(cls, data: bytes, size: WordSizeConstraint = WordSizeConstraint(),
                   allow_duplicates: bool = False) -> "Dictionary":
        vlog(f"Loading words from byte array (length {num_format(len(data))})")
        return cls.build(io.BytesIO(data), size, allow_duplicates)

    @classmethod
    def from_string(cls, text: str, size: WordSizeConstraint = WordSizeConstraint(),
                    allow_duplicates: bool = False) -> "Dictionary":
        return cls.build(io.BytesIO(text.encode("utf-8")), size, allow_duplicates)

    @classmethod
    def from_words(cls, words: Iterable[str], size: WordSizeConstraint = WordSizeConstraint(),
                   allow_duplicates: bool = False) -> "Dictionary":
        return cls.from_string("\n".join(words), size, allow_duplicates)

    def insert(self, word: str) -> int:
        """Insert a lower case word and return its identifier."""
        if not word:
            raise ValueError("cannot insert an empty word")
        nodes = self._nodes
        cur = 0
        last = len(word) - 1
        for i, ch in enumerate(word):
            letter = letter_index(ch)
            slots = nodes[cur].slots
            slot = slots[letter]

            if i == last:
                if slot.kind is SlotKind.EMPTY:
                    slots[letter] = TERMINAL
                elif slot.kind is SlotKind.CONTINUES:
                    slots[letter] = terminal_continues(slot.index)
                else:
                    raise DuplicateWordError(word)
                self._words += 1
                return cur * ALPHABET_SIZE + letter

            if slot.index is None:
                nodes.append(TrieNode(letter, cur))
                nxt = len(nodes) - 1
                slots[letter] = continues(nxt) if slot.kind is SlotKind.EMPTY else terminal_continues(nxt)
                cur = nxt
            else:
                cur = slot.index
        raise AssertionError("unreachable")

    def _update_stats(self):
        st = self.stats
        st.nodes = self.node_count
        st.mem_usage = self.mem_usage
        st.mem_alloc = self.mem_alloc

    # ---------- Queries ----------
    def lookup(self, node: int, letter: Union[int, str]) -> Slot:
        return self._nodes[node].slots[_as_letter(letter)]

    def word_at(self, word_id: int) -> str:
        """Rebuild the upper case word ending in the terminal slot ``word_id``."""
        node, letter = divmod(word_id, ALPHABET_SIZE)
        chars = [letter_char(letter)]
        while node != 0:
            n = self._nodes[node]
            chars.append(letter_char(n.letter))
            node = n.parent
        return "".join(reversed(chars))

    def word_contains(self, word_id: int, letter: Union[int, str], required_count: int = 1,
                      exact: bool = False) -> bool:
        """True if the word holds ``letter`` at least (or exactly) ``required_count`` times."""
        letter = _as_letter(letter)
        node, last = divmod(word_id, ALPHABET_SIZE)
        count = 1 if last == letter else 0
        while node != 0:
            n = self._nodes[node]
            if n.letter == letter:
                count += 1
            node = n.parent
        return count == required_count if exact else count >= required_count

    def contains(self, word: str) -> bool:
        if not word:
            return False
        cur = 0
        for ch in word[:-1]:
            try:
                nxt = self.lookup(cur, ch).next
            except ValueError:
                return False
            if nxt is None:
                return False
            cur = nxt
        try:
            return self.lookup(cur, word[-1]).is_terminal
        except ValueError:
            return False

    def __contains__(self, word):
        return self.contains(word)

    def __len__(self):
        return self._words

    @property
    def word_count(self) -> int:
        return self._words

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def mem_usage(self) -> int:
        """Bytes held by the node slot tables in use."""
        return self.node_count * _NODE_SIZE

    @property
    def mem_alloc(self) -> int:
        """Bytes reserved by the node table, counting list over-allocation."""
        capacity = (sys.getsizeof(self._nodes) - _EMPTY_LIST_SIZE) // _PTR_SIZE
        return max(capacity, self.node_count) * _NODE_SIZE


_EMPTY_LIST_SIZE = sys.getsizeof([])
_PTR_SIZE = sys.getsizeof([None]) - _EMPTY_LIST_SIZE
_NODE_SIZE = sys.getsizeof(TrieNode()) + sys.getsizeof([EMPTY] * ALPHABET_SIZE)


def file_spec(path) -> str:
    """Describe ``path``, following symlink chains ('a -> b -> c')."""
    path = os.fspath(path)
    if os.path.islink(path):
        target = os.path.join(os.path.dirname(path), os.readlink(path))
        return f"{path} -> {file_spec(target)}"
    return path
