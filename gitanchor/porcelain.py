# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Thin layer over pygit2 for the few questions GitAnchor asks the object
database directly (resolving revisions, walking to the first parent).
Text queries that must match git's exact output go through GitDriver.
"""

from __future__ import annotations

import logging

import pygit2
from pygit2 import Commit, Oid

from gitanchor.exceptions import RevisionError

_logger = logging.getLogger(__name__)


def id7(obj: Oid | Commit | str) -> str:
    if isinstance(obj, Commit):
        obj = obj.id
    return str(obj)[:7]


class Repo(pygit2.Repository):
    def resolve_commit_id(self, ref: str) -> str:
        try:
            obj = self.revparse_single(ref)
            commit = obj.peel(Commit)
        except (KeyError, ValueError, pygit2.GitError) as exc:
            raise RevisionError(f"cannot resolve revision '{ref}' to a commit") from exc
        return str(commit.id)

    def first_parent_id(self, commitId: str) -> str | None:
        commit = self[commitId].peel(Commit)
        try:
            return str(commit.parent_ids[0])
        except IndexError:
            # Root commit
            return None

    def merge_base_id(self, a: str, b: str) -> str:
        base = self.merge_base(a, b)
        if base is None:
            raise RevisionError(f"'{id7(a)}' and '{id7(b)}' have no common ancestor")
        return str(base)


def openRepo(path: str = ".") -> Repo:
    discovered = pygit2.discover_repository(path)
    if discovered is None:
        raise RevisionError(f"not a git repository: {path}")
    repo = Repo(discovered)
    _logger.debug(f"Opened repository {repo.workdir or repo.path}")
    return repo


class RepoContext:
    def __init__(self, path: str = "."):
        self.repo = openRepo(path)

    def __enter__(self) -> Repo:
        return self.repo

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.repo.free()
