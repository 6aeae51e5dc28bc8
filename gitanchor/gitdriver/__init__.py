# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .gitdriver import GitDriver
from .gitdriver import argsIf
from .parsers import LogDelta, LogDeltaKind
from .parsers import parseBlameLine, parseCherryLine, parseDiffPath, parseLogRaw
from .parsers import splitLines, statDestinationPath
