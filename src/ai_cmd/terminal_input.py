#!/usr/bin/env python

"""
Interactive input for the decision menus, built on prompt_toolkit.
"""

import html

from prompt_toolkit import prompt
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from .theme import get_theme


class TerminalInput:
    """Reads menu choices and free-text refinements from the terminal"""

    def __init__(self, config: dict):
        self.theme = get_theme(config)
        self.style = Style.from_dict({
            'prompt.menu': f"{self.theme['warning']} bold",
            'prompt.text': f"{self.theme['accent']} bold",
        })
        # Refinements typed earlier in this session are reachable with the up arrow
        self.history = InMemoryHistory()

    def get_choice(self, message: str) -> str:
        """Read a menu answer; returns it lower-cased, '' for a bare Enter"""
        result = prompt(
            HTML(f'<prompt.menu>{html.escape(message)} </prompt.menu>'),
            style=self.style
        )
        return result.strip().lower()

    def get_text(self, prompt_text: str) -> str:
        """Read a free-text line such as refinement instructions"""
        return prompt(
            HTML(f'<prompt.text>{html.escape(prompt_text)}: </prompt.text>'),
            style=self.style,
            history=self.history,
            multiline=False
        ).strip()
