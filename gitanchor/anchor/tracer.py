# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Find the anchor commits of a commit: the earlier commits that last owned the
lines that the commit removes, or keeps as context around its changes.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Container, Iterable

from gitanchor.anchor.blamecursor import BlameCursor
from gitanchor.anchor.hunk import Hunk, parseHunkHeader
from gitanchor.appconsts import APP_DEBUG, DEFAULT_CONTEXT_LINES
from gitanchor.exceptions import InputFormatError, StreamDesyncError
from gitanchor.gitdriver import GitDriver, parseDiffPath
from gitanchor.porcelain import id7

_logger = logging.getLogger(__name__)

WORKTREE_LABEL = "worktree"


@dataclasses.dataclass
class AnchorSet:
    commitId: str
    anchors: list[str]
    """ Sorted, distinct anchors that belong to the commit range. """

    candidates: list[str]
    """ Sorted, distinct anchors before filtering by range. """

    numHunks: int = 0
    numBlameQueries: int = 0

    @property
    def outOfRange(self) -> list[str]:
        kept = set(self.anchors)
        return [c for c in self.candidates if c not in kept]


@dataclasses.dataclass
class _FileDiff:
    oldPath: str | None = None
    newPath: str | None = None
    created: bool = False
    deleted: bool = False

    def __str__(self):
        if self.oldPath and self.newPath and self.oldPath != self.newPath:
            return f"{self.oldPath} -> {self.newPath}"
        return self.newPath or self.oldPath or "?"


class AnchorTracer:
    def __init__(self, driver: GitDriver, contextLines: int = DEFAULT_CONTEXT_LINES):
        self.driver = driver
        self.contextLines = contextLines

    def trace(
            self,
            commitId: str | None,
            parentId: str | None,
            inRange: Container[str] | None = None,
    ) -> AnchorSet:
        """
        Compute the anchors of commitId, diffed against parentId.

        commitId=None traces the uncommitted changes in the working tree.
        parentId=None treats commitId as a root commit (diffed against the
        empty tree, so it can't have anchors).

        If inRange is given, only anchors found in it are kept.
        """
        label = id7(commitId) if commitId else WORKTREE_LABEL
        diff = self.driver.diffLines(parentId, commitId, self.contextLines)
        anchorSet = self.traceDiff(diff, commitId, parentId, label)

        if inRange is not None:
            anchorSet.anchors = [a for a in anchorSet.candidates if a in inRange]

        _logger.debug(f"{label}: {len(anchorSet.anchors)} anchors, "
                      f"{len(anchorSet.outOfRange)} out of range, "
                      f"{anchorSet.numHunks} hunks, {anchorSet.numBlameQueries} blame queries")
        return anchorSet

    def traceDiff(
            self,
            diffLines: Iterable[str],
            commitId: str | None,
            parentId: str | None,
            label: str = "",
    ) -> AnchorSet:
        label = label or (id7(commitId) if commitId else WORKTREE_LABEL)
        candidates: list[str] = []
        numHunks = 0
        numQueries = 0

        fileDiff: _FileDiff | None = None
        oldLeft = 0
        newLeft = 0
        oldCursor = BlameCursor.empty(label)
        newCursor = BlameCursor.empty(label)

        for lineNumber, line in enumerate(diffLines, 1):
            # "\ No newline at end of file" may trail the last line of a hunk
            if line.startswith("\\"):
                continue

            # Inside a hunk body: the hunk's line counts drive both cursors
            if oldLeft or newLeft:
                origin = line[:1]

                if origin == " ":
                    if not oldLeft or not newLeft:
                        raise StreamDesyncError(f"{label}: context line overflows hunk (diff line {lineNumber})")
                    # Context lines count toward the lineage of the code as it was before the change
                    candidates.append(oldCursor.next())
                    newCursor.next()
                    oldLeft -= 1
                    newLeft -= 1
                elif origin == "-":
                    if not oldLeft:
                        raise StreamDesyncError(f"{label}: removed line overflows hunk (diff line {lineNumber})")
                    candidates.append(oldCursor.next())
                    oldLeft -= 1
                elif origin == "+":
                    if not newLeft:
                        raise StreamDesyncError(f"{label}: added line overflows hunk (diff line {lineNumber})")
                    # New content has no prior owner
                    newCursor.next()
                    newLeft -= 1
                elif line.startswith(("@@", "diff --git ")):
                    raise StreamDesyncError(f"{label}: hunk body cut short (diff line {lineNumber})")
                else:
                    raise InputFormatError("diff body line", line, lineNumber)

                if not oldLeft and not newLeft:
                    oldCursor.close()
                    newCursor.close()
                continue

            if line.startswith("diff --git "):
                fileDiff = _FileDiff()
                continue

            if fileDiff is None:
                raise InputFormatError("diff header", line, lineNumber)

            if line.startswith("@@"):
                hunk = parseHunkHeader(line, lineNumber)
                numHunks += 1
                oldCursor, newCursor, queries = self._openHunk(hunk, fileDiff, commitId, parentId, label)
                numQueries += queries
                oldLeft = hunk.oldCount
                newLeft = hunk.newCount
                if not oldLeft and not newLeft:
                    oldCursor.close()
                    newCursor.close()
            elif line.startswith("--- "):
                fileDiff.oldPath = parseDiffPath(line[4:])
                fileDiff.created = fileDiff.created or fileDiff.oldPath is None
            elif line.startswith("+++ "):
                fileDiff.newPath = parseDiffPath(line[4:])
                fileDiff.deleted = fileDiff.deleted or fileDiff.newPath is None
            elif line.startswith("new file mode "):
                fileDiff.created = True
            elif line.startswith("deleted file mode "):
                fileDiff.deleted = True
            elif line.startswith("Binary files ") or line == "GIT binary patch":
                # Binary files come without hunks, so they never reach blame
                _logger.debug(f"{label}: skipping binary file")
            elif line[:1] in (" ", "+", "-"):
                raise StreamDesyncError(f"{label}: body line outside any hunk (diff line {lineNumber})")
            else:
                # index, similarity index, rename from/to, old/new mode...
                pass

        if oldLeft or newLeft:
            raise StreamDesyncError(f"{label}: diff ended inside a hunk")

        distinct = sorted(set(candidates))
        if APP_DEBUG and commitId:
            assert commitId not in distinct, f"{label} is its own anchor"

        return AnchorSet(
            commitId=commitId or "",
            anchors=list(distinct),
            candidates=distinct,
            numHunks=numHunks,
            numBlameQueries=numQueries,
        )

    def _openHunk(
            self,
            hunk: Hunk,
            fileDiff: _FileDiff,
            commitId: str | None,
            parentId: str | None,
            label: str,
    ) -> tuple[BlameCursor, BlameCursor, int]:
        queries = 0

        if fileDiff.oldPath and fileDiff.newPath and fileDiff.oldPath != fileDiff.newPath:
            _logger.debug(f"{label}: renamed {fileDiff}")

        # Pre-image: skip if the file is being created
        if fileDiff.created or fileDiff.oldPath is None or hunk.oldCount == 0:
            oldCursor = BlameCursor.empty(f"{label} {hunk} (pre-image)")
        else:
            assert parentId is not None, "only created files may appear in a root commit"
            oldLines = self.driver.blameLines(parentId, fileDiff.oldPath, hunk.oldStart, hunk.oldCount)
            oldCursor = BlameCursor(f"{label} {hunk} {fileDiff.oldPath} (pre-image)", oldLines)
            queries += 1

        # Post-image: skip if the file is being deleted
        if fileDiff.deleted or fileDiff.newPath is None or hunk.newCount == 0:
            newCursor = BlameCursor.empty(f"{label} {hunk} (post-image)")
        else:
            newLines = self.driver.blameLines(commitId, fileDiff.newPath, hunk.newStart, hunk.newCount)
            newCursor = BlameCursor(f"{label} {hunk} {fileDiff.newPath} (post-image)", newLines)
            queries += 1

        return oldCursor, newCursor, queries
