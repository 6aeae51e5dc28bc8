# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator

from gitanchor.appconsts import DEFAULT_INTERFACE_SUFFIX
from gitanchor.gitdriver import GitDriver, LogDelta, LogDeltaKind, parseLogRaw, statDestinationPath
from gitanchor.porcelain import id7
from gitanchor.toolbox import benchmark

_logger = logging.getLogger(__name__)


@dataclasses.dataclass
class CommitInfo:
    id: str
    description: str = ""
    authorTime: int = 0
    committerTime: int = 0
    changeId: str = ""

    touchesInterface: bool = False
    touchesInterfaceDestructively: bool = False
    """ At least one interface file loses lines in this commit. """

    def __repr__(self):
        return f"CommitInfo({id7(self.id)}, {self.description!r})"


class CommitIndex:
    """
    Metadata for every commit in the working range, in log order (newest
    first). Filled in by a single pass over LogDelta records.
    """

    commits: dict[str, CommitInfo]

    def __init__(self, interfaceSuffix: str = DEFAULT_INTERFACE_SUFFIX):
        assert interfaceSuffix, "interface suffix can't be empty"
        self.interfaceSuffix = interfaceSuffix
        self.commits = {}
        self._current: CommitInfo | None = None

    @classmethod
    def fromLog(cls, lines: Iterable[str], interfaceSuffix: str = DEFAULT_INTERFACE_SUFFIX) -> CommitIndex:
        index = cls(interfaceSuffix)
        for delta in parseLogRaw(lines):
            index.apply(delta)
        return index

    def isInterfaceFile(self, path: str) -> bool:
        return statDestinationPath(path).endswith(self.interfaceSuffix)

    def apply(self, delta: LogDelta):
        kind = delta.kind

        if kind == LogDeltaKind.NewCommit:
            if delta.commitId in self.commits:
                # Already seen (e.g. same commit listed twice); keep the first record
                _logger.warning(f"commit {id7(delta.commitId)} listed twice in log")
                self._current = self.commits[delta.commitId]
            else:
                self._current = CommitInfo(delta.commitId)
                self.commits[delta.commitId] = self._current
            return

        info = self._current
        assert info is not None, "delta before any commit"
        assert info.id == delta.commitId

        if kind == LogDeltaKind.Author:
            info.authorTime = delta.timestamp
        elif kind == LogDeltaKind.Committer:
            info.committerTime = delta.timestamp
        elif kind == LogDeltaKind.Subject:
            info.description = delta.text
        elif kind == LogDeltaKind.ChangeId:
            if not info.changeId:
                info.changeId = delta.text
            elif info.changeId != delta.text:
                _logger.warning(f"{id7(info.id)} carries several change ids; keeping {info.changeId}")
        elif kind == LogDeltaKind.FileStat:
            if self.isInterfaceFile(delta.text):
                info.touchesInterface = True
                if delta.deletions:
                    info.touchesInterfaceDestructively = True
        else:
            raise NotImplementedError(f"unsupported delta kind {kind}")

    def __contains__(self, commitId: str) -> bool:
        return commitId in self.commits

    def __getitem__(self, commitId: str) -> CommitInfo:
        return self.commits[commitId]

    def __len__(self):
        return len(self.commits)

    def __iter__(self) -> Iterator[CommitInfo]:
        return iter(self.commits.values())

    def ids(self) -> list[str]:
        return list(self.commits.keys())

    @property
    def newest(self) -> CommitInfo:
        try:
            return next(iter(self.commits.values()))
        except StopIteration:
            raise IndexError("empty commit range") from None


class ChangeIdLookup:
    """ Maps change identifiers to the commits that carry them on the maintenance branch. """

    byChangeId: dict[str, str]

    def __init__(self):
        self.byChangeId = {}

    @classmethod
    def fromLog(cls, lines: Iterable[str]) -> ChangeIdLookup:
        lookup = cls()
        for delta in parseLogRaw(lines):
            lookup.apply(delta)
        return lookup

    def apply(self, delta: LogDelta):
        if delta.kind != LogDeltaKind.ChangeId:
            return
        # Log order is newest first; keep the newest carrier of a change id
        self.byChangeId.setdefault(delta.text, delta.commitId)

    def get(self, changeId: str) -> str | None:
        if not changeId:
            return None
        return self.byChangeId.get(changeId)

    def __contains__(self, changeId: str) -> bool:
        return bool(changeId) and changeId in self.byChangeId

    def __len__(self):
        return len(self.byChangeId)


@benchmark
def buildCommitIndex(driver: GitDriver, revRange: str, interfaceSuffix: str = DEFAULT_INTERFACE_SUFFIX) -> CommitIndex:
    index = CommitIndex.fromLog(driver.logRaw(revRange, withStat=True), interfaceSuffix)
    numChangeIds = sum(1 for info in index if info.changeId)
    numInterface = sum(1 for info in index if info.touchesInterface)
    _logger.info(f"{revRange}: {len(index)} commits, {numChangeIds} with change ids, "
                 f"{numInterface} touching *{interfaceSuffix}")
    return index


@benchmark
def buildChangeIdLookup(driver: GitDriver, revRange: str) -> ChangeIdLookup:
    lookup = ChangeIdLookup.fromLog(driver.logRaw(revRange, withStat=False))
    _logger.info(f"{revRange}: {len(lookup)} change ids on maintenance branch")
    return lookup
