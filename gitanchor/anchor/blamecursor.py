# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from gitanchor.exceptions import StreamDesyncError
from gitanchor.gitdriver.parsers import parseBlameLine


class BlameCursor:
    """
    Walks the output of one blame query, one source line at a time.

    The hunk body decides when to advance. Running dry early, or having lines
    left over when the hunk ends, means the blame output and the diff no
    longer describe the same lines.
    """

    def __init__(self, label: str, lines: list[str]):
        self.label = label
        self.lines = lines
        self.position = 0

    @classmethod
    def empty(cls, label: str) -> BlameCursor:
        return cls(label, [])

    def __repr__(self):
        return f"BlameCursor({self.label}, {self.position}/{len(self.lines)})"

    @property
    def remaining(self) -> int:
        return len(self.lines) - self.position

    def next(self) -> str:
        """ Return the commit id that owns the next line. """
        try:
            line = self.lines[self.position]
        except IndexError:
            raise StreamDesyncError(f"{self.label}: blame output ran out after {self.position} lines") from None
        self.position += 1
        return parseBlameLine(line, self.position)

    def close(self):
        if self.position != len(self.lines):
            raise StreamDesyncError(
                f"{self.label}: hunk ended with {self.remaining} blame lines unconsumed")
