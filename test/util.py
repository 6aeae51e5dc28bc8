# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import shutil
import tempfile

import pygit2
import pytest
from pygit2 import Signature
from pygit2.enums import FileMode

from gitanchor.porcelain import Repo

TEST_SIGNATURE = Signature("Test Person", "toto@example.com", 1672600000, 0)

ONE_DAY = 86400

requiresGit = pytest.mark.skipif(
    not shutil.which("git"),
    reason="Requires vanilla git")


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))


def numberedLines(count: int, overrides: dict[int, str] | None = None) -> str:
    """ Text made of 'line 1'...'line N', with some lines replaced (1-based). """
    overrides = overrides or {}
    return "".join(overrides.get(i, f"line {i}") + "\n" for i in range(1, count + 1))


def makeRepo(tempDir: tempfile.TemporaryDirectory | str, name="TestAnchorRepository") -> Repo:
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    path = os.path.realpath(os.path.join(tempDirPath, name))
    pygit2.init_repository(path, initial_head="main")
    return Repo(path)


def signatureAt(offset: int) -> Signature:
    return Signature(TEST_SIGNATURE.name, TEST_SIGNATURE.email, TEST_SIGNATURE.time + offset, 0)


def commitTree(
        repo: Repo,
        files: dict[str, str],
        message: str,
        parents: list[str],
        branch: str = "main",
        offset: int = 0,
) -> str:
    """
    Commit a tree made of the given files on top of parents, without touching
    the working directory. Moves refs/heads/<branch> to the new commit.
    """
    signature = signatureAt(offset)
    oid = repo.create_commit(None, signature, signature, message, writeTree(repo, files), parents)
    repo.references.create(f"refs/heads/{branch}", oid, force=True)
    return str(oid)


def writeTree(repo: Repo, files: dict[str, str]):
    """ Write a tree object from {"dir/file": text}, recursing into subdirectories. """
    builder = repo.TreeBuilder()
    subdirs: dict[str, dict[str, str]] = {}

    for path, text in files.items():
        head, slash, rest = path.partition("/")
        if slash:
            subdirs.setdefault(head, {})[rest] = text
        else:
            builder.insert(path, repo.create_blob(text.encode("utf-8")), FileMode.BLOB)

    for name, subFiles in subdirs.items():
        builder.insert(name, writeTree(repo, subFiles), FileMode.TREE)

    return builder.write()
