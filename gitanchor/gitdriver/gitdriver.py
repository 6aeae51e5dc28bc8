# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import shlex
import signal
import subprocess

from gitanchor.appconsts import DEFAULT_GIT_PATH, EMPTY_TREE_HASH
from gitanchor.exceptions import GitDriverError
from gitanchor.gitdriver.parsers import splitLines

_logger = logging.getLogger(__name__)


def argsIf(condition: bool, *args: str) -> tuple[str, ...]:
    if condition:
        return args
    else:
        return ()


class GitDriver:
    """
    Runs vanilla git in a repository and hands back its output as lines.

    Every query is a blocking child process that runs to completion before
    the caller moves on. A non-zero exit code raises GitDriverError.
    """

    # Keep output stable regardless of the user's config
    _configOverrides = [
        "-c", "core.abbrev=no",
        "-c", "core.quotePath=false",
        "-c", "color.ui=never",
        "-c", "diff.noprefix=false",
        "-c", "diff.mnemonicPrefix=false",
        "-c", "diff.relative=false",
        "-c", "diff.suppressBlankEmpty=false",
        "-c", "log.showSignature=false",
        "-c", "blame.markUnblamableLines=false",
        "-c", "blame.markIgnoredLines=false",
        "-c", "blame.coloring=none",
    ]

    def __init__(self, directory: str = "", gitPath: str = DEFAULT_GIT_PATH):
        self.directory = directory
        self.setGitPath(gitPath)

    def setGitPath(self, gitPath: str):
        self.commandStem = shlex.split(gitPath)

    @staticmethod
    def formatExitCode(code: int) -> str:
        # subprocess reports death by signal N as -N
        if code < 0:
            try:
                s = signal.Signals(-code)
                return f"{code} ({s.name})"
            except ValueError:
                pass
        return f"{code}"

    def buildCommand(self, *args: str) -> list[str]:
        return [*self.commandStem, *self._configOverrides, *args]

    def runSync(self, *args: str) -> str:
        tokens = self.buildCommand(*args)
        commandLine = shlex.join(tokens)
        _logger.info(f"runSync: {commandLine}")

        try:
            process = subprocess.run(
                tokens,
                cwd=self.directory or None,
                stdin=subprocess.DEVNULL,
                capture_output=True)
        except OSError as exc:
            raise GitDriverError(commandLine, "(not started)", str(exc)) from exc

        if process.returncode != 0:
            stderr = process.stderr.decode("utf-8", errors="replace").strip()
            raise GitDriverError(commandLine, self.formatExitCode(process.returncode), stderr)

        return process.stdout.decode("utf-8", errors="replace")

    def runLines(self, *args: str) -> list[str]:
        return splitLines(self.runSync(*args))

    def diffLines(self, old: str | None, new: str | None, contextLines: int) -> list[str]:
        """
        Unified diff from old to new. If old is None, diff against the empty
        tree (root commit). If new is None, diff against the working tree.
        """
        return self.runLines(
            "diff",
            f"-U{contextLines}",
            "-M",
            "--no-ext-diff",
            "--no-textconv",
            "--no-color",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            old or EMPTY_TREE_HASH,
            *argsIf(new is not None, new or ""),
        )

    def blameLines(self, rev: str | None, path: str, start: int, count: int) -> list[str]:
        """
        Line-history attribution for lines [start, start+count) of path as of
        rev. If rev is None, blame the working tree copy.
        """
        assert start >= 1
        assert count >= 1, "don't issue empty blame queries"
        return self.runLines(
            "blame",
            "-l",
            "--root",
            "--no-textconv",
            # Blank value clears any blame.ignoreRevsFile list
            "--ignore-revs-file=",
            "-L", f"{start},+{count}",
            *argsIf(rev is not None, rev or ""),
            "--",
            path,
        )

    def logRaw(self, revRange: str, withStat: bool = True) -> list[str]:
        return self.runLines(
            "log",
            "--format=raw",
            "--no-show-signature",
            "--no-notes",
            "--no-decorate",
            "--no-abbrev-commit",
            "--no-color",
            *argsIf(withStat, "--stat=1000,1000"),
            revRange,
            "--",
        )

    def cherry(self, upstream: str, head: str, limit: str = "") -> list[str]:
        return self.runLines(
            "cherry",
            upstream,
            head,
            *argsIf(bool(limit), limit),
        )
