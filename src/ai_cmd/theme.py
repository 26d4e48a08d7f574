#!/usr/bin/env python

"""
Colour palette shared by every console ai-cmd prints to.

Values come from the 'theme' key of config.yaml, layered over the defaults.
"""

from rich.console import Console
from rich.theme import Theme as RichTheme

DEFAULT_THEME = {
    "accent": "#0066cc",
    "command": "cyan",
    "comment": "#aaaaaa",
    "muted": "#555555",
    "error": "#ff5555",
    "warning": "#e5c07b",
    "success": "#00cc66",
}


def get_theme(config: dict | None) -> dict:
    """Merge the configured colours over the defaults."""
    theme = dict(DEFAULT_THEME)
    theme.update((config or {}).get("theme") or {})
    return theme


def create_console(config: dict | None = None, stderr: bool = False, **kwargs) -> Console:
    """Create a Rich Console with the application theme applied.

    Diagnostics (menus, errors, panels) go to stderr so that stdout only ever
    carries the generated command when ai-cmd is used inside a pipeline.
    """
    theme = get_theme(config)
    return Console(theme=RichTheme(theme), stderr=stderr, **kwargs)
