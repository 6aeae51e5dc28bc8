# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Text renditions of an AnchorGraph: a plain edge list, or a Graphviz document
for external rendering.
"""

from __future__ import annotations

from gitanchor.appconsts import DEFAULT_DESCRIPTION_WIDTH, SECONDS_PER_DAY
from gitanchor.classifier import Classifier, Tier
from gitanchor.commitindex import CommitIndex
from gitanchor.graph.builder import AnchorGraph
from gitanchor.porcelain import id7
from gitanchor.toolbox import dotEscape, dotQuote, elide


def ageInDays(index: CommitIndex, commitId: str, anchorId: str) -> int:
    delta = index[commitId].committerTime - index[anchorId].committerTime
    return delta // SECONDS_PER_DAY


def formatEdgeList(graph: AnchorGraph, index: CommitIndex, withAge: bool = False) -> str:
    lines = []
    for commitId, anchorId in graph.edges():
        line = f"{commitId} {anchorId}"
        if withAge and commitId in index:
            line += f" {ageInDays(index, commitId, anchorId)}"
        lines.append(line)
    return "".join(line + "\n" for line in lines)


def nodeLabel(
        nodeId: str,
        index: CommitIndex,
        classifier: Classifier,
        descriptionWidth: int = DEFAULT_DESCRIPTION_WIDTH,
) -> tuple[str, Tier]:
    """ Returns the escaped label text (without quotes) and the node's tier. """

    if nodeId not in index:
        # Working tree, or anything else we don't have metadata for
        return dotEscape(nodeId), Tier.Unknown

    info = index[nodeId]
    tier = classifier.tier(info)

    caption = tier.caption
    if tier == Tier.PickedByChangeId:
        pickedAs = classifier.pickedAs(info)
        if pickedAs:
            caption += f" as {id7(pickedAs)}"

    parts = [
        id7(info.id),
        elide(info.description, descriptionWidth),
        elide(info.changeId, descriptionWidth),
        caption,
    ]
    return "\\n".join(dotEscape(part) for part in parts if part), tier


def formatDot(
        graph: AnchorGraph,
        index: CommitIndex,
        classifier: Classifier,
        colors: bool = True,
        includeSolo: bool = False,
        descriptionWidth: int = DEFAULT_DESCRIPTION_WIDTH,
) -> str:
    referenced = graph.referencedNodes()

    # Nodes outside the index (the working tree) go on top, then log order
    nodeIds = sorted(n for n in referenced if n not in index)
    nodeIds += [info.id for info in index
                if info.id in referenced or (includeSolo and info.id in graph.forward)]

    lines = [
        "digraph anchors {",
        '    node [shape=box fontname="monospace"];',
    ]

    for nodeId in nodeIds:
        label, tier = nodeLabel(nodeId, index, classifier, descriptionWidth)
        attributes = f'label="{label}"'
        if colors and tier.fillColor:
            attributes += f" style=filled fillcolor={tier.fillColor}"
        lines.append(f"    {dotQuote(nodeId)} [{attributes}];")

    for commitId, anchorId in graph.edges():
        lines.append(f"    {dotQuote(commitId)} -> {dotQuote(anchorId)};")

    lines.append("}")
    return "".join(line + "\n" for line in lines)
