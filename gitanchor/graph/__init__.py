# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from gitanchor.graph.builder import AnchorGraph, GraphBuilder
from gitanchor.graph.emitters import formatDot, formatEdgeList
