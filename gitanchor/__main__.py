# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, Namespace

from gitanchor.anchor import AnchorTracer
from gitanchor.appconsts import APP_DISPLAY_NAME, APP_SYSTEM_NAME, APP_VERSION
from gitanchor.classifier import CherryStatus, Classifier
from gitanchor.commitindex import buildChangeIdLookup, buildCommitIndex
from gitanchor.exceptions import ConfigError, GitAnchorError
from gitanchor.gitdriver import GitDriver
from gitanchor.graph import GraphBuilder, formatDot, formatEdgeList
from gitanchor.porcelain import Repo, RepoContext, id7
from gitanchor.settings import LoggingLevel, Prefs
from gitanchor.toolbox import formatDuration

_logger = logging.getLogger(APP_SYSTEM_NAME)


def makeParser() -> ArgumentParser:
    parser = ArgumentParser(
        prog=APP_SYSTEM_NAME,
        description=f"{APP_DISPLAY_NAME}: find the anchor commits that each commit in a range depends on, "
                    "to help decide what can be ported to a maintenance branch")

    parser.add_argument("old", nargs="?", help="Oldest revision, excluded from the range (default: fork point)")
    parser.add_argument("new", nargs="?", help="Newest revision (default: source branch head)")

    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    parser.add_argument("-C", "--repo", default=".", help="Path to the repository")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-a", "--all", action="store_true", help="Trace every commit in the range (slow)")
    mode.add_argument("-w", "--worktree", action="store_true", help="Trace uncommitted changes in the working tree")

    parser.add_argument("-g", "--graph", action="store_true", help="Print a Graphviz document instead of an edge list")
    parser.add_argument("-n", "--no-color", action="store_true", help="Don't color graph nodes by cherry-pick status")
    parser.add_argument("-s", "--solo", action="store_true", help="Keep commits without anchors or dependents in the graph")

    parser.add_argument("-f", "--fork-point", help="Where the source branch forked off the maintenance branch")
    parser.add_argument("-S", "--source", help="Head of the fast-moving source branch")
    parser.add_argument("-d", "--dest", help="Maintenance branch to port commits to")
    parser.add_argument("--interface-suffix", help="File name suffix of interface definition files")

    parser.add_argument("--version", action="version", version=f"{APP_DISPLAY_NAME} {APP_VERSION}")
    return parser


def setUpLogging(verbosity: int):
    logging.basicConfig(
        stream=sys.stderr,
        level=LoggingLevel.fromVerbosity(verbosity),
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.captureWarnings(True)


def printProgress(done: int, total: int, elapsed: float, remaining: float):
    print(f"\rTraced {done}/{total} commits, {formatDuration(elapsed)} elapsed, "
          f"~{formatDuration(remaining)} left ", end="", file=sys.stderr)
    if done == total:
        print(file=sys.stderr)


def resolveRange(repo: Repo, prefs: Prefs, args: Namespace) -> tuple[str, str, str]:
    """ Returns (old, new, dest) commit ids. """
    newId = repo.resolve_commit_id(args.new or prefs.sourceBranch)
    destId = repo.resolve_commit_id(prefs.destBranch)

    oldRef = args.old or prefs.forkPoint
    if oldRef:
        oldId = repo.resolve_commit_id(oldRef)
    else:
        oldId = repo.merge_base_id(newId, destId)

    _logger.info(f"Range {id7(oldId)}..{id7(newId)}, maintenance branch {prefs.destBranch} ({id7(destId)})")
    return oldId, newId, destId


def run(repo: Repo, args: Namespace, stdout=None) -> int:
    stdout = stdout or sys.stdout
    prefs = Prefs.load(repo.config)
    prefs.applyArguments(args)

    driver = GitDriver(repo.workdir or repo.path, prefs.gitPath)
    oldId, newId, destId = resolveRange(repo, prefs, args)

    headId = ""
    if args.worktree:
        # The working tree sits on top of HEAD, so the range has to end there
        headId = repo.resolve_commit_id("HEAD")
        if headId != newId:
            raise ConfigError(f"--worktree traces changes on top of HEAD ({id7(headId)}), "
                              f"but the range ends at {id7(newId)}")

    index = buildCommitIndex(driver, f"{oldId}..{newId}", prefs.interfaceSuffix)
    if not index and not args.worktree:
        _logger.warning(f"No commits between {id7(oldId)} and {id7(newId)}")
        return 0

    classifier = None
    if args.graph:
        changeIds = buildChangeIdLookup(driver, f"{oldId}..{destId}")
        cherry = CherryStatus.load(driver, destId, newId, oldId)
        classifier = Classifier(cherry, changeIds)

    tracer = AnchorTracer(driver, prefs.contextLines)
    builder = GraphBuilder(tracer, index, repo.first_parent_id)

    if args.all:
        graph = builder.traceAll(printProgress)
    elif args.worktree:
        graph = builder.traceWorktree(headId)
    else:
        graph = builder.traceNewest()

    if classifier is not None:
        text = formatDot(graph, index, classifier,
                         colors=not args.no_color,
                         includeSolo=args.solo,
                         descriptionWidth=prefs.descriptionWidth)
    else:
        text = formatEdgeList(graph, index, withAge=args.all)

    stdout.write(text)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = makeParser()
    args = parser.parse_args(argv)

    setUpLogging(args.verbose)

    try:
        with RepoContext(args.repo) as repo:
            return run(repo, args)
    except GitAnchorError as exc:
        _logger.critical(f"fatal: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
