# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Anchor tracing: for each line a commit removes or keeps as context, find the
commit that last introduced that line.
"""

from gitanchor.anchor.blamecursor import BlameCursor
from gitanchor.anchor.hunk import Hunk, parseHunkHeader
from gitanchor.anchor.tracer import AnchorSet, AnchorTracer
