#!/usr/bin/env python

import logging
import os
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler

from .constants import APP_NAME, LOGS_DIR, LOG_DIR_ENV, LOG_FORMAT


class AICmdLogger:
    """Centralized logging system for ai-cmd"""

    _instance: Optional['AICmdLogger'] = None

    def __new__(cls) -> 'AICmdLogger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, '_initialized'):
            return

        self._initialized = True
        self.console = Console(stderr=True)
        self.logger = logging.getLogger(APP_NAME)
        self.console_handler: Optional[RichHandler] = None
        self._setup_logging()

    def _setup_logging(self):
        """Setup file and console handlers"""
        log_dir = Path(os.environ.get(LOG_DIR_ENV) or LOGS_DIR)

        # The file log is best effort; a read-only home must not stop the tool
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / f"{APP_NAME}.log")
        except OSError:
            file_handler = None

        if file_handler is not None:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(file_handler)

        self.console_handler = RichHandler(
            console=self.console,
            show_time=False,
            show_path=False,
            markup=False
        )
        self.console_handler.setLevel(logging.WARNING)  # Only warnings/errors unless verbose
        self.logger.addHandler(self.console_handler)

        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

    def set_verbose(self, verbose: bool):
        """Show debug records on the console when --verbose is given"""
        if self.console_handler is not None:
            self.console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    def debug(self, message: str, **kwargs):
        """Log debug message"""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message"""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message"""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message"""
        self.logger.error(message, **kwargs)

    def log_command_execution(self, command: str, exit_status: int, elapsed: float, output: str):
        """Log command execution details"""
        status = "SUCCESS" if exit_status == 0 else f"EXIT {exit_status}"
        self.info(f"Command {status} in {elapsed:.2f}s: {command}")
        if exit_status != 0:
            self.debug(f"Command output: {output[:200]}")

    def log_model_request(self, backend: str, model: str, prompt_length: int, response_length: int, status: int):
        """Log model request details"""
        self.debug(
            f"Model request - Backend: {backend}, Model: {model}, Prompt: {prompt_length} chars, "
            f"Response: {response_length} chars, Status: {status}"
        )

    def log_transition(self, source: str, target: str):
        """Log a lifecycle state change"""
        self.debug(f"State {source} -> {target}")


# Global logger instance
logger = AICmdLogger()
