# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import sys as _sys
import os as _os


def _envBool(key: str) -> bool:
    return _os.environ.get(key, "") not in ["", "0"]


APP_VERSION = "1.0.0"
APP_SYSTEM_NAME = "gitanchor"
APP_DISPLAY_NAME = "GitAnchor"

APP_TESTMODE = _envBool("APP_TESTMODE") or "pytest" in _sys.modules
"""
Unit testing mode.
Can be forced with environment variable APP_TESTMODE.
"""

APP_DEBUG = APP_TESTMODE or _envBool("APP_DEBUG")
"""
Enable expensive consistency assertions.
Can be forced with environment variable APP_DEBUG.
Implied by APP_TESTMODE.
"""

# Section in git config files where repository-level preferences live
CONFIG_SECTION = "anchor"

DEFAULT_SOURCE_BRANCH = "HEAD"
DEFAULT_DEST_BRANCH = "stable"
DEFAULT_INTERFACE_SUFFIX = ".idl"
DEFAULT_CONTEXT_LINES = 5
DEFAULT_DESCRIPTION_WIDTH = 40
DEFAULT_GIT_PATH = "git"

# Hash of the empty tree object
EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

SECONDS_PER_DAY = 86400
