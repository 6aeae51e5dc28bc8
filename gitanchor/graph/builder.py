# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from gitanchor.anchor import AnchorSet, AnchorTracer
from gitanchor.anchor.tracer import WORKTREE_LABEL
from gitanchor.commitindex import CommitIndex
from gitanchor.porcelain import id7
from gitanchor.toolbox import Benchmark

_logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, float, float], None]
ParentLookup = Callable[[str], "str | None"]


class AnchorGraph:
    """
    Commits and their anchors. Forward maps a commit to its anchors; reverse
    maps an anchor to the commits that it anchors. Both are append-only.
    """

    forward: dict[str, list[str]]
    reverse: dict[str, list[str]]
    outOfRange: dict[str, int]

    def __init__(self):
        self.forward = {}
        self.reverse = {}
        self.outOfRange = {}

    def add(self, nodeId: str, anchorSet: AnchorSet):
        assert nodeId not in self.forward, f"{id7(nodeId)} traced twice"
        self.forward[nodeId] = list(anchorSet.anchors)
        for anchor in anchorSet.anchors:
            self.reverse.setdefault(anchor, []).append(nodeId)
        self.outOfRange[nodeId] = len(anchorSet.outOfRange)

    def anchorsOf(self, nodeId: str) -> list[str]:
        return self.forward.get(nodeId, [])

    def dependentsOf(self, nodeId: str) -> list[str]:
        return self.reverse.get(nodeId, [])

    def isSolo(self, nodeId: str) -> bool:
        return not self.anchorsOf(nodeId) and not self.dependentsOf(nodeId)

    def edges(self) -> Iterator[tuple[str, str]]:
        for nodeId, anchors in self.forward.items():
            for anchor in anchors:
                yield nodeId, anchor

    def referencedNodes(self) -> set[str]:
        nodes = set()
        for nodeId, anchor in self.edges():
            nodes.add(nodeId)
            nodes.add(anchor)
        return nodes

    def __len__(self):
        return sum(len(anchors) for anchors in self.forward.values())


class GraphBuilder:
    def __init__(self, tracer: AnchorTracer, index: CommitIndex, parentOf: ParentLookup):
        self.tracer = tracer
        self.index = index
        self.parentOf = parentOf
        self.graph = AnchorGraph()
        self.tracingTime = 0.0
        """ Seconds spent tracing commits so far. """

    @staticmethod
    def dummyProgressCallback(done: int, total: int, elapsed: float, remaining: float):
        pass

    def traceCommit(self, commitId: str) -> AnchorSet:
        parentId = self.parentOf(commitId)
        with Benchmark(f"Trace {id7(commitId)}") as bench:
            anchorSet = self.tracer.trace(commitId, parentId, self.index)
        self.tracingTime += bench.elapsed
        self.graph.add(commitId, anchorSet)
        return anchorSet

    def traceNewest(self) -> AnchorGraph:
        """ Single-target mode: direct anchors of the newest commit in the range. """
        newest = self.index.newest
        anchorSet = self.traceCommit(newest.id)
        _logger.info(f"{id7(newest.id)} has {len(anchorSet.anchors)} anchors in range")
        return self.graph

    def traceWorktree(self, headId: str) -> AnchorGraph:
        """ Single-target mode, tracing the uncommitted changes on top of headId. """
        with Benchmark("Trace worktree") as bench:
            anchorSet = self.tracer.trace(None, headId, self.index)
        self.tracingTime += bench.elapsed
        self.graph.add(WORKTREE_LABEL, anchorSet)
        return self.graph

    def traceAll(self, progressCallback: ProgressCallback = dummyProgressCallback) -> AnchorGraph:
        """ Full-range mode: trace every commit in the range, oldest first. """
        commitIds = list(reversed(self.index.ids()))
        total = len(commitIds)

        progressCallback(0, total, 0.0, 0.0)

        for done, commitId in enumerate(commitIds, 1):
            self.traceCommit(commitId)

            # Linear projection from the average cost per commit so far
            remaining = self.tracingTime / done * (total - done)
            progressCallback(done, total, self.tracingTime, remaining)

        numDropped = sum(self.graph.outOfRange.values())
        _logger.info(f"Traced {total} commits: {len(self.graph)} edges in range, "
                     f"{numDropped} anchors outside the range dropped "
                     f"({self.tracingTime:.1f} s)")
        return self.graph
