# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from gitanchor.anchor import Hunk, parseHunkHeader
from gitanchor.exceptions import InputFormatError


@pytest.mark.parametrize("header, expected", [
    ("@@ -1,2 +3,4 @@", (1, 2, 3, 4)),
    ("@@ -10,0 +11,3 @@", (10, 0, 11, 3)),
    ("@@ -7,5 +0,0 @@", (7, 5, 0, 0)),
    ("@@ -5 +6 @@", (5, 1, 6, 1)),
    ("@@ -5,3 +6 @@", (5, 3, 6, 1)),
    ("@@ -5 +6,2 @@", (5, 1, 6, 2)),
    ("@@ -120,11 +120,12 @@ def someFunction(self):", (120, 11, 120, 12)),
])
def testParseHunkHeader(header, expected):
    hunk = parseHunkHeader(header)
    assert (hunk.oldStart, hunk.oldCount, hunk.newStart, hunk.newCount) == expected


@pytest.mark.parametrize("header", [
    "",
    "@@ -a,b +c,d @@",
    "@@ 1,2 3,4 @@",
    "@@ -1,2 +3,4",
    "@@@ -1,2 -1,2 +1,3 @@@",
    " @@ -1,2 +3,4 @@",
])
def testParseHunkHeaderRejectsGarbage(header):
    with pytest.raises(InputFormatError):
        parseHunkHeader(header, 42)


def testHunkHeaderRoundTripsThroughStr():
    hunk = Hunk(3, 4, 5, 6)
    assert parseHunkHeader(str(hunk)) == hunk


def testHunkHeaderErrorMentionsLineNumber():
    with pytest.raises(InputFormatError, match="line 42"):
        parseHunkHeader("@@ nope @@", 42)
