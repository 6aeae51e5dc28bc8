# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Decide how confident we are that a commit has already been (or can safely
be) ported to the maintenance branch.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Callable, Iterable

from gitanchor.commitindex import ChangeIdLookup, CommitInfo
from gitanchor.gitdriver import GitDriver, parseCherryLine

_logger = logging.getLogger(__name__)


class Tier(enum.Enum):
    DefinitelyPicked = "definitely-picked"
    PickedByChangeId = "picked-by-change-id"
    IntrusiveApiChange = "intrusive-api-change"
    AddOnlyApiChange = "add-only-api-change"
    Unknown = "unknown"

    @property
    def fillColor(self) -> str:
        return TIER_COLORS[self]

    @property
    def caption(self) -> str:
        return TIER_CAPTIONS[self]


TIER_COLORS = {
    Tier.DefinitelyPicked: "palegreen",
    Tier.PickedByChangeId: "lightblue",
    Tier.IntrusiveApiChange: "salmon",
    Tier.AddOnlyApiChange: "khaki",
    Tier.Unknown: "",
}

TIER_CAPTIONS = {
    Tier.DefinitelyPicked: "picked",
    Tier.PickedByChangeId: "picked (change id)",
    Tier.IntrusiveApiChange: "API change (intrusive)",
    Tier.AddOnlyApiChange: "API change (add-only)",
    Tier.Unknown: "",
}


class CherryStatus:
    """
    Output of 'git cherry': for each commit in the working range, whether an
    equivalent patch already exists upstream.
    """

    presentUpstream: dict[str, bool]

    def __init__(self):
        self.presentUpstream = {}

    @classmethod
    def fromLines(cls, lines: Iterable[str]) -> CherryStatus:
        status = cls()
        for lineNumber, line in enumerate(lines, 1):
            commitId, present = parseCherryLine(line, lineNumber)
            status.presentUpstream[commitId] = present
        return status

    @classmethod
    def load(cls, driver: GitDriver, upstream: str, head: str, limit: str = "") -> CherryStatus:
        status = cls.fromLines(driver.cherry(upstream, head, limit))
        numPicked = sum(status.presentUpstream.values())
        _logger.info(f"cherry: {numPicked} of {len(status.presentUpstream)} commits already upstream")
        return status

    def hasRecord(self, commitId: str) -> bool:
        return commitId in self.presentUpstream

    def isPicked(self, commitId: str) -> bool:
        return self.presentUpstream.get(commitId, False)


@dataclasses.dataclass(frozen=True)
class ClassificationInput:
    info: CommitInfo
    cherry: CherryStatus
    changeIds: ChangeIdLookup


ClassificationRule = tuple[Tier, Callable[[ClassificationInput], bool]]

# Evaluated top to bottom; the first rule that matches wins.
CLASSIFICATION_RULES: list[ClassificationRule] = [
    # No cherry record: inconclusive, treat conservatively
    (Tier.Unknown, lambda x: not x.cherry.hasRecord(x.info.id)),
    (Tier.DefinitelyPicked, lambda x: x.cherry.isPicked(x.info.id)),
    # git cherry misses patches whose content was rewritten while picking
    (Tier.PickedByChangeId, lambda x: x.info.changeId in x.changeIds),
    (Tier.IntrusiveApiChange, lambda x: x.info.touchesInterfaceDestructively),
    (Tier.AddOnlyApiChange, lambda x: x.info.touchesInterface),
]


def classify(info: CommitInfo, cherry: CherryStatus, changeIds: ChangeIdLookup) -> Tier:
    x = ClassificationInput(info, cherry, changeIds)
    for tier, predicate in CLASSIFICATION_RULES:
        if predicate(x):
            return tier
    return Tier.Unknown


class Classifier:
    """ Assigns each commit a tier on first request, then sticks to it. """

    def __init__(self, cherry: CherryStatus, changeIds: ChangeIdLookup):
        self.cherry = cherry
        self.changeIds = changeIds
        self.tiers: dict[str, Tier] = {}

    def tier(self, info: CommitInfo) -> Tier:
        try:
            return self.tiers[info.id]
        except KeyError:
            pass
        tier = classify(info, self.cherry, self.changeIds)
        self.tiers[info.id] = tier
        return tier

    def pickedAs(self, info: CommitInfo) -> str | None:
        """ Maintenance-branch commit carrying the same change id, if any. """
        return self.changeIds.get(info.changeId)
