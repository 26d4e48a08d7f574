#!/usr/bin/env python

"""
Command lifecycle: generate a command, let the user decide, run it, and
optionally feed a failure back to the model for a fix.

The loop is an explicit state machine. Each handler performs one step and
returns the next State, so refine and fix cycles iterate instead of nesting
calls however often the user repeats them.
"""

import sys
import time
from typing import Callable, Dict, Optional, TextIO, Tuple

from .classifier import failure_reason
from .constants import ACCEPT_CHOICES, REJECT_CHOICES, REFINE_CHOICES, FIX_CHOICES, ERROR_EXIT_CODE
from .logger import logger
from .prompts import build_refine_prompt, build_fix_prompt
from .session import Candidate, RequestContext, Session, State


class LifecycleController:
    """Drives one request from prompt to final exit status"""

    def __init__(self, context: RequestContext, client, runner, ui, terminal_input=None, out: Optional[TextIO] = None):
        self.context = context
        self.client = client
        self.runner = runner
        self.ui = ui
        self.terminal_input = terminal_input
        self.out = out or sys.stdout
        self.session = Session()
        self._handlers: Dict[State, Callable[[], State]] = {
            State.GENERATING: self._generate,
            State.PRESENTING_COMMENT: self._present_comment,
            State.AWAITING_DECISION: self._await_decision,
            State.EXECUTING: self._execute,
            State.AWAITING_FIX_DECISION: self._await_fix_decision,
            State.FIXING: self._fix,
            State.REFINING: self._refine,
        }

    def run(self) -> int:
        """Run the state machine to completion and return the exit status"""
        state = State.GENERATING
        while state is not State.DONE:
            next_state = self._handlers[state]()
            logger.log_transition(state.value, next_state.value)
            state = next_state
        return self.session.status

    # ─── Helpers ───────────────────────────────────────────────────────

    def _finish(self, status: int) -> State:
        self.session.status = status
        return State.DONE

    def _invoke(self, user_prompt: str) -> Tuple[str, int]:
        started = time.monotonic()
        text, status = self.client.invoke(self.context.system_prompt, user_prompt, self.context.yolo)
        self.session.elapsed += time.monotonic() - started
        logger.debug(f"Model replied with status {status}: {text!r}")
        return text, status

    def _write(self, text: str):
        self.out.write(text + "\n")
        self.out.flush()

    # ─── States ────────────────────────────────────────────────────────

    def _generate(self) -> State:
        logger.debug(f"System prompt:\n{self.context.system_prompt}")
        text, status = self._invoke(self.context.prompt)
        if status != 0:
            self.ui.show_raw_error(text)
            return self._finish(status)

        candidate = Candidate.from_output(text)
        self.session.replace_candidate(candidate)

        if candidate.is_comment:
            return State.PRESENTING_COMMENT
        if self.context.yolo:
            return State.EXECUTING
        if not self.context.interactive:
            self._write(candidate.text)
            return self._finish(0)
        return State.AWAITING_DECISION

    def _present_comment(self) -> State:
        candidate = self.session.candidate
        if candidate.lines:
            self._write(candidate.text)
        else:
            self.ui.show_warning("The model returned an empty reply")
        return self._finish(0)

    def _await_decision(self) -> State:
        candidate = self.session.candidate
        if candidate.is_comment:
            self.ui.show_comment_notice(candidate)
        else:
            self.ui.show_candidate(candidate, self.session.elapsed)

        choice = self.terminal_input.get_choice(self.ui.decision_menu(candidate.is_comment))

        if choice in ACCEPT_CHOICES:
            if candidate.is_comment:
                self.ui.show_warning("Nothing to execute; refine the request or cancel")
                return State.AWAITING_DECISION
            return State.EXECUTING

        if choice in REJECT_CHOICES:
            self.ui.show_cancelled()
            return self._finish(ERROR_EXIT_CODE)

        if choice in REFINE_CHOICES:
            refinement = self.terminal_input.get_text("Refine")
            if not refinement:
                return State.AWAITING_DECISION
            self.session.pending_prompt = build_refine_prompt(self.context.prompt, candidate.text, refinement)
            return State.REFINING

        self.ui.show_invalid_choice(choice)
        return State.AWAITING_DECISION

    def _refine(self) -> State:
        user_prompt, self.session.pending_prompt = self.session.pending_prompt, None
        text, status = self._invoke(user_prompt)
        if status != 0:
            # Keep the previous candidate; the user can retry or decide
            self.ui.show_error(f"Refinement failed (status {status})")
            self.ui.show_raw_error(text)
            return State.AWAITING_DECISION

        self.session.replace_candidate(Candidate.from_output(text))
        return State.AWAITING_DECISION

    def _execute(self) -> State:
        candidate = self.session.candidate
        if candidate.is_comment:
            return State.PRESENTING_COMMENT

        if self.context.yolo:
            self.ui.show_candidate(candidate, self.session.elapsed)
        self.ui.show_executing()

        result = self.runner.run(candidate.lines)
        reason = failure_reason(result.exit_status, result.output)
        if reason is None:
            return self._finish(result.exit_status)

        logger.info(f"Command failed: {reason}")
        if not (self.context.fix and self.context.interactive):
            return self._finish(result.exit_status)

        self.session.last_result = result
        return State.AWAITING_FIX_DECISION

    def _await_fix_decision(self) -> State:
        result = self.session.last_result
        candidate = self.session.candidate
        reason = failure_reason(result.exit_status, result.output)

        choice = self.terminal_input.get_choice(self.ui.fix_menu(reason))
        if choice in FIX_CHOICES:
            self.session.pending_prompt = build_fix_prompt(
                self.context.prompt, candidate.text, reason, result.output
            )
            return State.FIXING

        # Ignoring the failure is a normal way to end the session
        self.session.last_result = None
        return self._finish(result.exit_status)

    def _fix(self) -> State:
        user_prompt, self.session.pending_prompt = self.session.pending_prompt, None
        original_status = self.session.last_result.exit_status
        self.session.last_result = None

        text, status = self._invoke(user_prompt)
        if status != 0:
            self.ui.show_error(f"Fix request failed (status {status})")
            self.ui.show_raw_error(text)
            return self._finish(original_status)

        self.session.replace_candidate(Candidate.from_output(text))
        return State.AWAITING_DECISION
