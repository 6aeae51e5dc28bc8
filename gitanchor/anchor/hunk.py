# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import re

from gitanchor.exceptions import InputFormatError

_hunkHeaderPattern = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclasses.dataclass(frozen=True)
class Hunk:
    oldStart: int
    oldCount: int
    newStart: int
    newCount: int

    def __str__(self):
        return f"@@ -{self.oldStart},{self.oldCount} +{self.newStart},{self.newCount} @@"


def parseHunkHeader(line: str, lineNumber: int = 0) -> Hunk:
    """
    Parse '@@ -oldStart[,oldCount] +newStart[,newCount] @@'.
    Omitted counts default to 1. Anything after the closing '@@' (function
    context) is ignored.
    """
    match = _hunkHeaderPattern.match(line)
    if match is None:
        raise InputFormatError("hunk header", line, lineNumber)

    oldStart, oldCount, newStart, newCount = match.groups()
    return Hunk(
        oldStart=int(oldStart),
        oldCount=int(oldCount) if oldCount is not None else 1,
        newStart=int(newStart),
        newCount=int(newCount) if newCount is not None else 1,
    )
