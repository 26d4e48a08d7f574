"""ai-cmd: natural-language requests to shell commands."""

from .constants import APP_VERSION

__version__ = APP_VERSION
