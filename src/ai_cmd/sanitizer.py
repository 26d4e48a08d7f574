#!/usr/bin/env python

"""
Markdown clean-up for model replies.

Models are told to answer with a bare command but regularly wrap it in a
fenced code block or inline backticks anyway. Only the wrapping is removed;
the lines in between are returned untouched.
"""

import re
from typing import List, Sequence

FENCE_OPENER = re.compile(r"^\s*```\s*[\w+#.-]*\s*$")
FENCE_CLOSER = re.compile(r"^\s*```\s*$")


def _trim_blank_lines(lines: List[str]) -> List[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _strip_inline_backticks(line: str) -> str:
    stripped = line.strip()
    if len(stripped) >= 2 and stripped.startswith("`") and stripped.endswith("`"):
        inner = stripped[1:-1]
        if inner and "`" not in inner:
            return inner
    return line


def sanitize(lines: Sequence[str]) -> List[str]:
    """Strip code fences, inline backticks and surrounding blank lines.

    Sanitizing already clean output returns it unchanged.
    """
    result = _trim_blank_lines(list(lines))

    # Repeat until stable so a doubly fenced reply is fully unwrapped in one call
    while True:
        before = len(result)
        if result and FENCE_OPENER.match(result[0]):
            result = result[1:]
        if result and FENCE_CLOSER.match(result[-1]):
            result = result[:-1]
        result = _trim_blank_lines(result)
        if len(result) == before:
            break

    if len(result) == 1:
        # Backticks around nothing but spaces leave an empty reply
        result = _trim_blank_lines([_strip_inline_backticks(result[0])])

    return result
