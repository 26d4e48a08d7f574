#!/usr/bin/env python

"""Prompt text sent to the model for generation, refinement and fixes."""

from pathlib import Path
from typing import Optional

from .constants import CONTEXT_FILE_PATH, MAX_CONTEXT_FILE_SIZE
from .environment import EnvironmentFacts
from .logger import logger

SYSTEM_PROMPT_TEMPLATE = """You translate natural-language requests into shell commands.

Reply with the command only: no explanations, no Markdown, no code fences, no backticks.
The command may span several lines when the shell syntax needs it.
If the request cannot be expressed as a command, or is unclear, reply with a single
line starting with "# " that explains why.

Environment:
- OS: {os_triple}
- User: {user} (uid {uid})
- Group: {group} (gid {gid})
- Home directory: {home}
- Working directory: {cwd}
- Running as root: {is_root}{additional_instructions}
"""

REFINE_PROMPT_TEMPLATE = """Original request:
{prompt}

Previously suggested command:
{command}

Adjust the command according to these instructions:
{refinement}

Reply with the complete updated command only."""

FIX_PROMPT_TEMPLATE = """Original request:
{prompt}

This command was executed:
{command}

It failed ({reason}). Captured output:
{output}

Reply with a corrected command that accomplishes the original request."""


def load_additional_instructions(context_path: Path = CONTEXT_FILE_PATH) -> str:
    """Load user guidelines from context.md in ~/.config/ai-cmd/"""
    try:
        if not context_path.is_file():
            return ""
        if context_path.stat().st_size > MAX_CONTEXT_FILE_SIZE:
            logger.warning(f"Context file {context_path} is larger than {MAX_CONTEXT_FILE_SIZE} bytes, ignoring it")
            return ""
        content = context_path.read_text(encoding="utf-8").strip()
    except OSError as e:
        # Unreadable guidelines degrade the prompt, they don't stop the request
        logger.warning(f"Could not load context file: {e}")
        return ""

    if content:
        return f"\n\nAdditional guidelines from the user:\n{content}"
    return ""


def build_system_prompt(facts: EnvironmentFacts, context_path: Optional[Path] = None) -> str:
    additional = load_additional_instructions(context_path or CONTEXT_FILE_PATH)
    return SYSTEM_PROMPT_TEMPLATE.format(
        os_triple=facts.os_triple,
        user=facts.user,
        uid=facts.uid,
        group=facts.group,
        gid=facts.gid,
        home=facts.home,
        cwd=facts.cwd,
        is_root="yes" if facts.is_root else "no",
        additional_instructions=additional,
    )


def build_refine_prompt(prompt: str, command: str, refinement: str) -> str:
    return REFINE_PROMPT_TEMPLATE.format(prompt=prompt, command=command, refinement=refinement)


def build_fix_prompt(prompt: str, command: str, reason: str, output: str) -> str:
    """Feed the failed run back to the model, output included verbatim"""
    return FIX_PROMPT_TEMPLATE.format(prompt=prompt, command=command, reason=reason, output=output)
