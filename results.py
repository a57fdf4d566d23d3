import shutil

from utils import num_format

COL_GAP = 2


def terminal_width():
    """Terminal width in characters, or 0 when it cannot be determined."""
    return shutil.get_terminal_size(fallback=(0, 0)).columns


def format_results(words, width=None):
    """Sort ``words`` and lay them out as lines, as many columns as fit ``width``."""
    words = sorted(words)
    lines = [f"{num_format(len(words))} {'word' if len(words) == 1 else 'words'} found"]

    if width is None:
        width = terminal_width()
    longest = max((len(w) for w in words), default=0)
    cols = max(1, width // (longest + COL_GAP)) if width > 0 and longest else 1

    for i in range(0, len(words), cols):
        lines.append((" " * COL_GAP).join(w.ljust(longest) for w in words[i:i + cols]).rstrip())
    return lines


def print_results(words, width=None):
    for line in format_results(words, width):
        print(line)
