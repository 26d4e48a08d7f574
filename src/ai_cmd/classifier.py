#!/usr/bin/env python

"""
Heuristic failure detection for executed commands.

A non-zero exit status is always a failure. Commands that exit 0 but print
diagnostics are caught by a fixed list of textual patterns. The list is a
soft heuristic: unrelated output can trigger it and silent failures slip
through.
"""

import re
from typing import List, Optional, Tuple

ERROR_PATTERNS: List[Tuple[str, re.Pattern]] = [
    (label, re.compile(pattern, re.IGNORECASE | re.MULTILINE))
    for label, pattern in [
        ("error:", r"(?:^|\b)error:"),
        ("command not found", r"command not found"),
        ("no such file or directory", r"no such file or directory"),
        ("permission denied", r"permission denied"),
        ("fatal:", r"(?:^|\b)fatal:"),
        ("failed to", r"failed to"),
        ("cannot", r"cannot "),
        ("unable to", r"unable to"),
        ("not found", r"not found[ \t]*$"),
        ("unknown option", r"unknown option"),
        ("invalid option", r"invalid option"),
        ("unrecognized option", r"unrecognized option"),
        ("syntax error", r"syntax error"),
        ("undefined variable", r"undefined variable"),
    ]
]


def matched_pattern(output: str) -> Optional[str]:
    """Return the label of the first error pattern found in the output"""
    for label, pattern in ERROR_PATTERNS:
        if pattern.search(output):
            return label
    return None


def failure_reason(exit_status: int, output: str) -> Optional[str]:
    """Describe why a run counts as failed, or None when it succeeded"""
    if exit_status != 0:
        return f"exit status {exit_status}"
    label = matched_pattern(output or "")
    if label:
        return f"output contains '{label}'"
    return None


def is_failure(exit_status: int, output: str) -> bool:
    return failure_reason(exit_status, output) is not None
