# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Errors that abort an anchor computation.

There is no partial output: once the diff and its blame queries fall out of
step, every anchor computed afterwards would be wrong.
"""


class GitAnchorError(Exception):
    pass


class InputFormatError(GitAnchorError):
    """ A collaborator produced a line that doesn't match its expected format. """

    def __init__(self, what: str, line: str, lineNumber: int = 0):
        self.what = what
        self.line = line
        self.lineNumber = lineNumber
        where = f" (line {lineNumber})" if lineNumber else ""
        super().__init__(f"unparseable {what}{where}: {line!r}")


class StreamDesyncError(GitAnchorError):
    """ A blame stream and the hunk it parallels disagree on line counts. """


class RevisionError(GitAnchorError):
    """ A reference could not be resolved to a commit. """


class GitDriverError(GitAnchorError):
    """ A git child process failed. """

    def __init__(self, commandLine: str, exitText: str, stderr: str):
        self.commandLine = commandLine
        self.exitText = exitText
        self.stderr = stderr
        message = f"git command exited with code {exitText}: {commandLine}"
        if stderr:
            message += "\n" + stderr
        super().__init__(message)


class ConfigError(GitAnchorError):
    """ A preference holds a value that can't be used. """
