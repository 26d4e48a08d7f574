#!/usr/bin/env python

from rich.table import Table

from .theme import create_console, get_theme


class ModelManager:
    """Resolves model aliases from the 'models' config section"""

    def __init__(self, config):
        self.config = config
        self.theme = get_theme(config)
        self.console = create_console(config)
        self.available = config.get("models", {}).get("available", {}) or {}
        self.default_model = config.get("models", {}).get("default", "")

    def get_model_display_name(self, model_alias):
        """Get human-readable display name for a model alias"""
        if model_alias in self.available:
            return self.available[model_alias].get("display_name", model_alias)
        return model_alias

    def get_api_model_name(self, model_alias):
        """Get the name that is sent to the backend.

        Unknown aliases are passed through unchanged so any model id the
        backend accepts can be given on the command line.
        """
        entry = self.available.get(model_alias)
        if isinstance(entry, dict) and entry.get("name"):
            return entry["name"]
        return model_alias

    def list_models(self, current_model=None):
        """Display available models in a table"""
        t = self.theme
        current_model = current_model or self.default_model
        table = Table(title="Available Models")
        table.add_column("Alias", style=t["accent"])
        table.add_column("Display Name", style=t["command"])
        table.add_column("API Name", style=t["warning"])
        table.add_column("Current", style=t["success"])

        for alias, model_info in self.available.items():
            current_marker = "✓" if alias == current_model else ""
            table.add_row(
                alias,
                model_info.get("display_name", alias),
                model_info.get("name", "N/A"),
                current_marker
            )

        self.console.print(table)
