#!/usr/bin/env python

"""Values passed between the lifecycle controller and its collaborators."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .constants import COMMENT_MARKER
from .sanitizer import sanitize


class State(Enum):
    GENERATING = "generating"
    PRESENTING_COMMENT = "presenting_comment"
    AWAITING_DECISION = "awaiting_decision"
    EXECUTING = "executing"
    AWAITING_FIX_DECISION = "awaiting_fix_decision"
    FIXING = "fixing"
    REFINING = "refining"
    DONE = "done"


@dataclass(frozen=True)
class Candidate:
    """The proposed command currently awaiting a decision."""

    lines: Tuple[str, ...]
    is_comment: bool

    @classmethod
    def from_output(cls, text: str) -> "Candidate":
        """Sanitize raw model output and classify it"""
        lines = tuple(sanitize(text.splitlines()))
        # Nothing left to run is reported like an informational reply
        is_comment = not lines or lines[0].lstrip().startswith(COMMENT_MARKER)
        return cls(lines=lines, is_comment=is_comment)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class RequestContext:
    """Per-invocation inputs; never changed once the controller starts."""

    prompt: str
    model: str
    system_prompt: str
    yolo: bool = False
    fix: bool = False
    verbose: bool = False
    interactive: bool = True


@dataclass(frozen=True)
class ExecutionResult:
    exit_status: int
    output: str
    elapsed: float


@dataclass
class Session:
    """Loop state owned by one controller run."""

    candidate: Optional[Candidate] = None
    elapsed: float = 0.0
    pending_prompt: Optional[str] = None
    last_result: Optional[ExecutionResult] = None
    status: int = 0

    def replace_candidate(self, candidate: Candidate) -> None:
        # Whole-value swap; candidates are frozen so nothing can merge into the old one
        self.candidate = candidate
