# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from gitanchor.anchor import AnchorSet
from gitanchor.classifier import CherryStatus, Classifier
from gitanchor.commitindex import ChangeIdLookup, CommitIndex, CommitInfo
from gitanchor.graph import AnchorGraph, GraphBuilder, formatDot, formatEdgeList
from .util import ONE_DAY

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40
HASH_D = "d" * 40
HASH_OUT = "e" * 40
HASH_STABLE = "5" * 40


class FakeTracer:
    def __init__(self, candidates: dict[str | None, list[str]]):
        self.candidates = candidates
        self.calls = []

    def trace(self, commitId, parentId, inRange=None):
        self.calls.append((commitId, parentId))
        candidates = sorted(self.candidates[commitId])
        anchors = [c for c in candidates if inRange is None or c in inRange]
        return AnchorSet(commitId or "", anchors, candidates)


def makeIndex() -> CommitIndex:
    index = CommitIndex()
    # Log order: newest first
    for info in [
        CommitInfo(HASH_D, 'Say "hi"', committerTime=5 * ONE_DAY, touchesInterface=True,
                   touchesInterfaceDestructively=True),
        CommitInfo(HASH_C, "Unrelated", committerTime=3 * ONE_DAY),
        CommitInfo(HASH_B, "Second", committerTime=2 * ONE_DAY + 100),
        CommitInfo(HASH_A, "First", committerTime=0, changeId="Ia"),
    ]:
        index.commits[info.id] = info
    return index


def makeClassifier() -> Classifier:
    cherry = CherryStatus.fromLines([f"+ {HASH_A}", f"- {HASH_B}", f"+ {HASH_D}"])
    changeIds = ChangeIdLookup()
    changeIds.byChangeId["Ia"] = HASH_STABLE
    return Classifier(cherry, changeIds)


TRACES = {
    HASH_A: [],
    HASH_B: [HASH_A],
    HASH_C: [],
    HASH_D: [HASH_A, HASH_B, HASH_OUT],
    None: [HASH_B, HASH_OUT],
}


def buildFullGraph(progressCalls=None) -> AnchorGraph:
    index = makeIndex()
    tracer = FakeTracer(TRACES)
    builder = GraphBuilder(tracer, index, lambda c: "parent-of-" + c)
    if progressCalls is None:
        return builder.traceAll()
    return builder.traceAll(lambda *args: progressCalls.append(args))


def testTraceAllGoesOldestFirst():
    index = makeIndex()
    tracer = FakeTracer(TRACES)
    builder = GraphBuilder(tracer, index, lambda c: "parent-of-" + c)
    graph = builder.traceAll()

    assert [c for c, _p in tracer.calls] == [HASH_A, HASH_B, HASH_C, HASH_D]
    assert all(p == "parent-of-" + c for c, p in tracer.calls)

    assert list(graph.edges()) == [(HASH_B, HASH_A), (HASH_D, HASH_A), (HASH_D, HASH_B)]
    assert graph.dependentsOf(HASH_A) == [HASH_B, HASH_D]
    assert graph.anchorsOf(HASH_D) == [HASH_A, HASH_B]
    assert graph.isSolo(HASH_C)
    assert not graph.isSolo(HASH_A)
    assert graph.outOfRange[HASH_D] == 1
    assert len(graph) == 3


def testTraceAllReportsProgress():
    calls = []
    buildFullGraph(calls)

    assert [(done, total) for done, total, _e, _r in calls] == [(0, 4), (1, 4), (2, 4), (3, 4), (4, 4)]
    assert calls[-1][3] == 0


def testProgressElapsedIsTimeSpentTracing():
    calls = []
    builder = GraphBuilder(FakeTracer(TRACES), makeIndex(), lambda c: None)
    builder.traceAll(lambda *args: calls.append(args))

    elapsed = [e for _d, _t, e, _r in calls]
    assert elapsed == sorted(elapsed)
    assert elapsed[-1] == builder.tracingTime >= 0

    # Remaining time is projected from the average cost per commit
    done, total, elapsedAtTwo, remainingAtTwo = calls[2]
    assert remainingAtTwo == pytest.approx(elapsedAtTwo / done * (total - done))


def testTraceNewestOnlyTracesNewestCommit():
    index = makeIndex()
    tracer = FakeTracer(TRACES)
    graph = GraphBuilder(tracer, index, lambda c: None).traceNewest()

    assert tracer.calls == [(HASH_D, None)]
    assert list(graph.edges()) == [(HASH_D, HASH_A), (HASH_D, HASH_B)]


def testEdgeList():
    graph = buildFullGraph()
    index = makeIndex()

    assert formatEdgeList(graph, index) == (
        f"{HASH_B} {HASH_A}\n"
        f"{HASH_D} {HASH_A}\n"
        f"{HASH_D} {HASH_B}\n")


def testEdgeListWithAgeInWholeDays():
    graph = buildFullGraph()
    index = makeIndex()

    assert formatEdgeList(graph, index, withAge=True) == (
        f"{HASH_B} {HASH_A} 2\n"
        f"{HASH_D} {HASH_A} 5\n"
        f"{HASH_D} {HASH_B} 2\n")


def testEdgeListOfEmptyGraph():
    assert formatEdgeList(AnchorGraph(), makeIndex()) == ""


def testDot():
    graph = buildFullGraph()
    text = formatDot(graph, makeIndex(), makeClassifier())

    assert text == "".join(line + "\n" for line in [
        "digraph anchors {",
        '    node [shape=box fontname="monospace"];',
        rf'    "{HASH_D}" [label="ddddddd\nSay \"hi\"\nAPI change (intrusive)" style=filled fillcolor=salmon];',
        rf'    "{HASH_B}" [label="bbbbbbb\nSecond\npicked" style=filled fillcolor=palegreen];',
        rf'    "{HASH_A}" [label="aaaaaaa\nFirst\nIa\npicked (change id) as 5555555" style=filled fillcolor=lightblue];',
        f'    "{HASH_B}" -> "{HASH_A}";',
        f'    "{HASH_D}" -> "{HASH_A}";',
        f'    "{HASH_D}" -> "{HASH_B}";',
        "}",
    ])


def testDotWithoutColors():
    graph = buildFullGraph()
    text = formatDot(graph, makeIndex(), makeClassifier(), colors=False)

    assert "fillcolor" not in text
    assert "style=filled" not in text
    assert rf'    "{HASH_B}" [label="bbbbbbb\nSecond\npicked"];' + "\n" in text


def testDotSoloNodes():
    graph = buildFullGraph()

    assert HASH_C not in formatDot(graph, makeIndex(), makeClassifier())

    text = formatDot(graph, makeIndex(), makeClassifier(), includeSolo=True)
    lines = text.splitlines()
    assert rf'    "{HASH_C}" [label="ccccccc\nUnrelated"];' in lines
    # Solo node keeps its place in log order
    assert [line[5:12] for line in lines if "label=" in line] == ["ddddddd", "ccccccc", "bbbbbbb", "aaaaaaa"]


def testDotElidesLongDescriptions():
    graph = buildFullGraph()
    text = formatDot(graph, makeIndex(), makeClassifier(), descriptionWidth=4)
    assert r'label="bbbbbbb\nSec…\npicked"' in text


def testDotWorktreeNodeComesFirst():
    index = makeIndex()
    tracer = FakeTracer(TRACES)
    graph = GraphBuilder(tracer, index, lambda c: None).traceWorktree(HASH_D)

    assert tracer.calls == [(None, HASH_D)]
    assert list(graph.edges()) == [("worktree", HASH_B)]

    text = formatDot(graph, index, makeClassifier())
    lines = text.splitlines()
    assert lines[2] == '    "worktree" [label="worktree"];'
    assert lines[3].startswith(f'    "{HASH_B}" ')
    assert lines[4] == f'    "worktree" -> "{HASH_B}";'
