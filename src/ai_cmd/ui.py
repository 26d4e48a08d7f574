#!/usr/bin/env python

from rich.panel import Panel
from rich.text import Text

from .theme import create_console, get_theme


class UIManager:
    """Menus, panels and diagnostics. Everything here is written to stderr."""

    def __init__(self, config=None, console=None):
        self.theme = get_theme(config or {})
        self.console = console or create_console(config, stderr=True)
        self._t = self.theme

    def show_candidate(self, candidate, elapsed=0.0):
        """Display the proposed command"""
        subtitle = f"{elapsed:.1f}s" if elapsed else None
        panel = Panel(
            Text(candidate.text, style=f"bold {self._t['command']}"),
            title="Command",
            title_align="left",
            subtitle=subtitle,
            subtitle_align="right",
            border_style=self._t["accent"]
        )
        self.console.print(panel)

    def show_comment_notice(self, candidate):
        """Shown when a refined or fixed reply is informational only"""
        self.console.print(Panel(
            Text(candidate.text or "(empty reply)", style=self._t["comment"]),
            title="No command",
            title_align="left",
            border_style=self._t["muted"]
        ))

    def decision_menu(self, candidate_is_comment=False):
        """Text of the main decision prompt"""
        if candidate_is_comment:
            return "[r]efine  [n]o (cancel) >"
        return "Run it? [y]es  [n]o  [r]efine >"

    def fix_menu(self, reason):
        return f"Command failed ({reason}). [f]ix  [Enter] ignore >"

    def show_executing(self):
        self.console.print(f"[{self._t['muted']}]Running...[/{self._t['muted']}]")

    def show_cancelled(self):
        self.console.print("[warning]Cancelled[/warning]")

    def show_invalid_choice(self, choice):
        self.console.print(f"[warning]Invalid choice:[/warning] {choice!r}", highlight=False)

    def show_raw_error(self, text):
        """Print backend output verbatim (no markup interpretation)"""
        self.console.print(text.rstrip("\n"), markup=False, highlight=False, style=self._t["error"])

    def show_error(self, error_message):
        """Display error message"""
        panel = Panel(
            Text(error_message, style=self._t["error"]),
            title="Error",
            title_align="left",
            border_style=self._t["error"]
        )
        self.console.print(panel)

    def show_warning(self, warning_message):
        """Display warning message"""
        self.console.print(f"[warning]{warning_message}[/warning]")
