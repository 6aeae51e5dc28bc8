# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import argparse
import dataclasses
import enum
import logging

import pygit2

from gitanchor.appconsts import *
from gitanchor.exceptions import ConfigError
from gitanchor.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL

logger = logging.getLogger(__name__)


class LoggingLevel(enum.IntEnum):
    Benchmark = BENCHMARK_LOGGING_LEVEL
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING

    @classmethod
    def fromVerbosity(cls, verbosity: int):
        levels = [cls.Warning, cls.Info, cls.Debug, cls.Benchmark]
        return levels[max(0, min(verbosity, len(levels) - 1))]


@dataclasses.dataclass
class Prefs:
    """
    Repository-level preferences. Defaults can be overridden in git config
    (e.g. 'git config anchor.destBranch release-2.x'), and command line
    flags override both.
    """

    sourceBranch                : str                   = DEFAULT_SOURCE_BRANCH
    destBranch                  : str                   = DEFAULT_DEST_BRANCH
    forkPoint                   : str                   = ""  # blank: merge base of source and dest
    interfaceSuffix             : str                   = DEFAULT_INTERFACE_SUFFIX
    contextLines                : int                   = DEFAULT_CONTEXT_LINES
    descriptionWidth            : int                   = DEFAULT_DESCRIPTION_WIDTH
    gitPath                     : str                   = DEFAULT_GIT_PATH

    @classmethod
    def configKey(cls, fieldName: str) -> str:
        return f"{CONFIG_SECTION}.{fieldName}"

    @classmethod
    def load(cls, config: pygit2.Config):
        prefs = cls()

        for field in dataclasses.fields(cls):
            key = cls.configKey(field.name)
            if key not in config:
                continue

            try:
                if field.type is int:
                    value = config.get_int(key)
                else:
                    value = config[key]
            except (ValueError, pygit2.GitError) as exc:
                logger.warning(f"Ignoring bad value for {key} in git config: {exc}")
                continue

            logger.debug(f"{key} = {value} (from git config)")
            setattr(prefs, field.name, value)

        prefs.validate()
        return prefs

    def applyArguments(self, args: argparse.Namespace):
        overrides = {
            "sourceBranch": args.source,
            "destBranch": args.dest,
            "forkPoint": args.fork_point,
            "interfaceSuffix": args.interface_suffix,
        }
        for name, value in overrides.items():
            if value is not None:
                setattr(self, name, value)
        self.validate()

    def validate(self):
        if not self.interfaceSuffix:
            raise ConfigError("interface suffix can't be empty")
        if self.contextLines < 1:
            raise ConfigError(f"contextLines must be at least 1 (got {self.contextLines})")
