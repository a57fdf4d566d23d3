# --- utils.py ---

import time
import threading
import string
from colorama import Fore, Style, init

init()

# Puzzle dimensions
WORD_LEN = 5
BOARD_ROWS = 6

ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)

VERBOSE = False
start_time = time.time()

# Lock used for synchronized printing
PRINT_LOCK = threading.Lock()

def log_with_time(msg, color=Fore.LIGHTBLUE_EX):
    """Print ``msg`` with a timestamp."""
    elapsed = time.time() - start_time
    mins = int(elapsed // 60)
    secs = elapsed % 60
    timestamp = Style.DIM + f"[{mins:02}:{secs:06.3f}]" + Style.RESET_ALL
    with PRINT_LOCK:
        print(f"{timestamp} {color}{msg}{Style.RESET_ALL}", flush=True)

def vlog(msg, t0=None):
    if VERBOSE:
        if t0 is not None:
            elapsed = time.time() - t0
            log_with_time(f"{msg} (took {elapsed:.3f}s)")
        else:
            log_with_time(msg)

def num_format(n):
    """Format a count with thousands separators."""
    return f"{n:,}"

def num_format_sigdig(x, sig_dig):
    """Format a float to ``sig_dig`` significant digits, with separators."""
    if x == 0:
        return "0"
    rounded = float(f"{x:.{sig_dig}g}")
    if rounded.is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,}"
