# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnchor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import re

_unprintable = re.compile(r"[\x00-\x1f\x7f]")


def elide(text: str, width: int, ellipsis="…") -> str:
    if width <= 0 or len(text) <= width:
        return text
    return text[:max(0, width - len(ellipsis))] + ellipsis


def dotEscape(text: str) -> str:
    """ Make text safe to place inside a double-quoted Graphviz string. """
    text = _unprintable.sub(" ", text)
    return text.replace("\\", "\\\\").replace('"', '\\"')


def dotQuote(text: str) -> str:
    return f'"{dotEscape(text)}"'


def formatDuration(seconds: float) -> str:
    seconds = int(seconds)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
