# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Parsers for the text that vanilla git prints.

Any line that doesn't match its expected shape raises InputFormatError:
callers correlate these outputs line by line, so guessing is never safe.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import re
from collections.abc import Iterable, Iterator

from gitanchor.exceptions import InputFormatError

_logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

_blamePattern = re.compile(r"^\^?([0-9a-f]{7,64}) [^(]*\(")
_cherryPattern = re.compile(r"^([+-]) ([0-9a-f]{7,64})(?: .*)?$")

_commitPattern = re.compile(r"^commit ([0-9a-f]{40,64})(?: .*)?$")
_identPattern = re.compile(r"^(author|committer) (.*) <(.*)> (\d+) ([+-]\d{4})$")
_headerPattern = re.compile(r"^[a-z][a-z0-9-]* ")
_changeIdPattern = re.compile(r"^ {4}Change-Id: (\S+)\s*$")
_fileStatPattern = re.compile(r"^ (.+?) +\| +(?:\d+(?: ([+-]+))?|Bin\b.*)$")
_statSummaryPattern = re.compile(r"^ \d+ files? changed")
_statRenameBracesPattern = re.compile(r"\{[^{}]* => ([^{}]*)\}")

UNQUOTE_PATH_ESCAPES = {
    'a': '\a',
    'b': '\b',
    't': '\t',
    'n': '\n',
    'v': '\v',
    'f': '\f',
    'r': '\r',
    '"': '"',
    '\\': '\\',
}


def splitLines(text: str) -> list[str]:
    """
    Split on LF only. str.splitlines() would also break on CR, form feeds and
    other separators that may legitimately appear inside a source line.
    """
    if not text:
        return []
    return text.removesuffix("\n").split("\n")


def unquotePath(quoted: str) -> str:
    """ Decode a path that git has wrapped in C-style double quotes. """

    assert quoted.startswith('"') and quoted.endswith('"'), "not a quoted path"
    inner = quoted[1:-1]
    raw = bytearray()
    i = 0

    while i < len(inner):
        c = inner[i]
        if c != '\\':
            raw += c.encode("utf-8")
            i += 1
            continue

        escape = inner[i + 1: i + 2]
        if escape in UNQUOTE_PATH_ESCAPES:
            raw += UNQUOTE_PATH_ESCAPES[escape].encode("utf-8")
            i += 2
        elif re.match(r"[0-7]{3}", inner[i + 1: i + 4]):
            raw.append(int(inner[i + 1: i + 4], 8))
            i += 4
        else:
            raise InputFormatError("quoted path", quoted)

    return raw.decode("utf-8", errors="replace")


def parseDiffPath(token: str) -> str | None:
    """
    Parse the path after '--- ' or '+++ ' in a diff header.
    Returns None for /dev/null (the file doesn't exist on that side).
    """
    # git appends a tab to names that contain spaces
    token = token.removesuffix("\t")

    if token == DEV_NULL:
        return None

    if token.startswith('"'):
        token = unquotePath(token)

    if token.startswith(("a/", "b/")):
        token = token[2:]

    return token


def statDestinationPath(statPath: str) -> str:
    """
    Recover the new path from a renamed entry in a diffstat, e.g.
    "src/{old.idl => new.idl}" -> "src/new.idl", "a.idl => b.idl" -> "b.idl".
    """
    braceMatch = _statRenameBracesPattern.search(statPath)
    if braceMatch:
        start, end = braceMatch.span()
        return (statPath[:start] + braceMatch.group(1) + statPath[end:]).replace("//", "/")
    if " => " in statPath:
        return statPath.rsplit(" => ", 1)[1]
    return statPath


def parseBlameLine(line: str, lineNumber: int = 0) -> str:
    match = _blamePattern.match(line)
    if match is None:
        raise InputFormatError("blame line", line, lineNumber)
    return match.group(1)


def parseCherryLine(line: str, lineNumber: int = 0) -> tuple[str, bool]:
    """ Returns (commit id, True if an equivalent commit exists upstream). """
    match = _cherryPattern.match(line)
    if match is None:
        raise InputFormatError("cherry line", line, lineNumber)
    sign, commitId = match.groups()
    return commitId, sign == "-"


class LogDeltaKind(enum.Enum):
    NewCommit = enum.auto()
    Author = enum.auto()
    Committer = enum.auto()
    Subject = enum.auto()
    ChangeId = enum.auto()
    FileStat = enum.auto()


@dataclasses.dataclass(frozen=True)
class LogDelta:
    kind: LogDeltaKind
    commitId: str
    text: str = ""
    """ Subject line, change identifier, or file path (depending on kind). """

    timestamp: int = 0
    insertions: bool = False
    deletions: bool = False


def _logLineError(line: str, lineNumber: int) -> InputFormatError:
    return InputFormatError("commit-log line", line, lineNumber)


class _LogPhase(enum.Enum):
    Preamble = enum.auto()
    Header = enum.auto()
    Message = enum.auto()
    Stat = enum.auto()


def parseLogRaw(lines: Iterable[str]) -> Iterator[LogDelta]:
    """
    Turn the output of 'git log --format=raw --stat' into a flat stream of
    LogDelta records.
    """

    phase = _LogPhase.Preamble
    commitId = ""
    haveSubject = False

    for lineNumber, line in enumerate(lines, 1):
        commitMatch = _commitPattern.match(line)
        if commitMatch:
            commitId = commitMatch.group(1)
            haveSubject = False
            phase = _LogPhase.Header
            yield LogDelta(LogDeltaKind.NewCommit, commitId)
            continue

        if phase == _LogPhase.Preamble:
            if line.strip():
                raise _logLineError(line, lineNumber)

        elif phase == _LogPhase.Header:
            if not line:
                phase = _LogPhase.Message
            elif line.startswith(("author ", "committer ")):
                identMatch = _identPattern.match(line)
                if identMatch is None:
                    raise _logLineError(line, lineNumber)
                kind = LogDeltaKind.Author if identMatch.group(1) == "author" else LogDeltaKind.Committer
                yield LogDelta(kind, commitId, timestamp=int(identMatch.group(4)))
            elif line.startswith(" ") or _headerPattern.match(line):
                # tree, parent, gpgsig, encoding... or a continuation line
                pass
            else:
                raise _logLineError(line, lineNumber)

        elif line.startswith("    ") or not line.strip():
            if phase == _LogPhase.Stat:
                if line.strip():
                    raise _logLineError(line, lineNumber)
                continue

            if not line.strip():
                continue

            if not haveSubject:
                haveSubject = True
                yield LogDelta(LogDeltaKind.Subject, commitId, text=line.strip())

            changeIdMatch = _changeIdPattern.match(line)
            if changeIdMatch:
                yield LogDelta(LogDeltaKind.ChangeId, commitId, text=changeIdMatch.group(1))

        elif line.startswith(" "):
            phase = _LogPhase.Stat
            statMatch = _fileStatPattern.match(line)
            if statMatch:
                path, graph = statMatch.groups()
                graph = graph or ""
                yield LogDelta(LogDeltaKind.FileStat, commitId, text=path,
                               insertions="+" in graph, deletions="-" in graph)
            elif not _statSummaryPattern.match(line):
                raise _logLineError(line, lineNumber)

        else:
            raise _logLineError(line, lineNumber)
