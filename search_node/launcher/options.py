"""Options file parsing.

One JVM flag per line.  Blank lines and lines whose first non-blank
character is ``#`` are skipped; every other line is passed on in file
order with its surrounding whitespace trimmed (internal whitespace is
kept).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from search_node.errors import OptionsFileNotFoundError

_COMMENT_RE = re.compile(r"^\s*#")


def parse_options(text: str) -> List[str]:
    """Return the option lines of *text* in order.

    A final line without a trailing newline is kept.
    """
    options: List[str] = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if not line.strip() or _COMMENT_RE.match(line):
            continue
        options.append(line.strip())
    return options


def parse_options_file(path: str | Path) -> List[str]:
    """Read and parse the options file at *path*."""
    path = Path(path)
    if not path.is_file():
        raise OptionsFileNotFoundError(str(path))
    return parse_options(path.read_text(encoding="utf-8"))
