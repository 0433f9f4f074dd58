# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import sys

# Only set a color if we have an interactive tty
if sys.stdout.isatty():
    BOLD = "\033[1m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    NORMAL = "\033[0m"
else:
    BOLD = RED = YELLOW = NORMAL = ""

_verbosity = 0


def set_verbosity(level):
    global _verbosity
    _verbosity = level


def get_verbosity():
    return _verbosity


def eprint(*args, **kwargs):
    """
    Print to stderr.
    """
    print(*args, file=sys.stderr, **kwargs)


def fail(*args, **kwargs):
    """
    Print to stderr and exit.
    """
    eprint(*args, **kwargs)
    sys.exit(1)


def section(message):
    print(f"{BOLD}--- {message}{NORMAL}")


def info(message):
    print(f"  - {message}")


def warn(message):
    eprint(f"{YELLOW}!!! {message}{NORMAL}")


def error(message):
    eprint(f"{RED}{BOLD}xxx {message}{NORMAL}")


def debug(message):
    """
    Print only when running with -v or more.
    """
    if _verbosity >= 1:
        eprint(f"    debug: {message}")


def output(text, file=None):
    """
    Print captured command output, indented below the step it belongs to.
    """
    for line in text.splitlines():
        print(f"        {line}", file=file or sys.stdout)


def eoutput(text):
    output(text, file=sys.stderr)
