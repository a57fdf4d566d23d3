import argparse
import os
import sys
import time

import requests
from colorama import Fore

import utils
from board import Board
from constraints import ConstraintError, Constraints
from dictionary import Dictionary, DictionaryError, WordSizeConstraint
from results import print_results
from search import find_anagrams, find_words, words_for
from utils import log_with_time, num_format, num_format_sigdig, vlog

# Default word lists, first existing one wins
DICTS = [
    "words.txt",
    "words.txt.gz",
    "/usr/share/dict/words",
]

DOWNLOAD_TIMEOUT = 30


def default_dict():
    for d in DICTS:
        if os.path.isfile(d):
            return d
    return ""


def validate_board(s):
    ustring = s.upper()
    if not ustring:
        raise argparse.ArgumentTypeError("Board should contain at least one character")
    if not all(ch in utils.ALPHABET or ch == "." for ch in ustring):
        raise argparse.ArgumentTypeError("Board letters must be A-Z or . only")
    return ustring


def validate_letters(s):
    ustring = s.upper()
    if not all(ch in utils.ALPHABET for ch in ustring):
        raise argparse.ArgumentTypeError("Letters must be A-Z only")
    return ustring


def validate_guess(s):
    word, sep, feedback = s.partition(":")
    if not sep or len(word) != len(feedback) or not word:
        raise argparse.ArgumentTypeError('Guess should look like "crane:.YG.."')
    return validate_letters(word), feedback.upper()


def download_dictionary(url, size):
    """Fetch a word list over HTTP. Gzip bodies are detected by their magic bytes."""
    t0 = time.time()
    log_with_time(f"⟳ Downloading dictionary from {url}…")
    resp = requests.get(url, timeout=DOWNLOAD_TIMEOUT)
    resp.raise_for_status()
    vlog(f"Downloaded {num_format(len(resp.content))} bytes", t0)
    return Dictionary.from_bytes(resp.content, size, allow_duplicates=True)


def load_dictionary(args, size):
    if args.url:
        return download_dictionary(args.url, size)
    return Dictionary.from_file(args.dictionary_file, size, allow_duplicates=True)


def build_parser():
    parser = argparse.ArgumentParser(description="Word puzzle solver")
    parser.add_argument("board", nargs="?", type=validate_board,
                        help='Current board, known letters and "." for unknown, e.g. ".RA.E"')
    parser.add_argument("unused", nargs="?", type=validate_letters, default="",
                        help="Letters not in the solution")
    parser.add_argument("unplaced", nargs="?", type=validate_letters, default="",
                        help="Letters in the solution but not yet placed")
    parser.add_argument("--guess", "-g", action="append", type=validate_guess, default=[],
                        help='A guess and its feedback, G=green Y=yellow .=gray, e.g. "crane:.YG.." (repeatable)')
    parser.add_argument("--letters", "-l", type=validate_letters, default=None,
                        help="Find every word that can be made from these letters")
    parser.add_argument("--min-length", type=int, default=1,
                        help="Shortest word to report with --letters (default: 1)")
    parser.add_argument("--dictionary", "-d", dest="dictionary_file", default=default_dict(),
                        help="Word list file, plain or gzip compressed")
    parser.add_argument("--url", type=str, default=None, help="Download the word list from this URL instead")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--debug", action="store_true", help="Trace every trie lookup made by the search")
    return parser


def run_solver(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    utils.start_time = time.time()
    utils.VERBOSE = args.verbose

    if args.letters is not None:
        mode = "letters"
        size = WordSizeConstraint(max(args.min_length, 1), len(args.letters))
    elif args.guess:
        mode = "guess"
        lengths = {len(word) for word, _ in args.guess}
        if len(lengths) != 1:
            parser.error("all guesses must be the same length")
        size = WordSizeConstraint.exactly(lengths.pop())
    elif args.board:
        mode = "board"
        size = WordSizeConstraint.exactly(len(args.board))
    else:
        parser.error("give a board, one or more --guess options, or --letters")

    if not args.url and not args.dictionary_file:
        log_with_time("No dictionary file given and none of the default dictionaries could be found.",
                      color=Fore.RED)
        log_with_time("Default dictionaries are:", color=Fore.RED)
        for d in DICTS:
            log_with_time(f"  {d}", color=Fore.RED)
        return 1

    try:
        dictionary = load_dictionary(args, size)
    except (OSError, DictionaryError, requests.RequestException) as e:
        log_with_time(f"Could not load dictionary: {e}", color=Fore.RED)
        return 1

    t0 = time.time()
    try:
        if mode == "letters":
            ids = find_anagrams(dictionary, args.letters, min_length=args.min_length)
        elif mode == "guess":
            board = Board(dictionary, rows=len(args.guess), cols=size.min)
            for word, feedback in args.guess:
                board.add_guess(word, feedback)
            if utils.VERBOSE:
                board.print_board()
            ids = board.calculate(debug=args.debug)
        else:
            constraints = Constraints.from_pattern(args.board, args.unused, args.unplaced)
            ids = find_words(dictionary, constraints, debug=args.debug)
    except ConstraintError as e:
        log_with_time(f"Invalid constraints: {e}", color=Fore.RED)
        return 1

    if utils.VERBOSE:
        log_with_time(f"Search took {num_format_sigdig(time.time() - t0, 2)} seconds")

    print_results(words_for(dictionary, ids))
    return 0


if __name__ == "__main__":
    sys.exit(run_solver(sys.argv[1:]))
