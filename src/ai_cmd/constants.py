#!/usr/bin/env python

"""Constants and configuration values for ai-cmd"""

from pathlib import Path

# Application Information
APP_NAME = "ai-cmd"
APP_VERSION = "0.1.0"

# File and Directory Constants
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_CONTEXT_FILE = "context.md"
HOME_DIR = Path.home()
CONFIG_DIR = HOME_DIR / ".config" / "ai-cmd"
APP_DATA_DIR = HOME_DIR / ".ai-cmd"
LOGS_DIR = APP_DATA_DIR / "logs"

# Full paths to config files
CONFIG_FILE_PATH = CONFIG_DIR / DEFAULT_CONFIG_FILE
CONTEXT_FILE_PATH = CONFIG_DIR / DEFAULT_CONTEXT_FILE

# Environment overrides
CONFIG_PATH_ENV = "AI_CMD_CONFIG"
LOG_DIR_ENV = "AI_CMD_LOG_DIR"
API_KEY_ENVS = ("AI_CMD_API_KEY", "OPENAI_API_KEY")

# Command Exit Codes
SUCCESS_EXIT_CODE = 0
ERROR_EXIT_CODE = 1
LAUNCH_FAILURE_EXIT_CODE = 127
INTERRUPTED_EXIT_CODE = 130

# Timeouts (in seconds)
API_TIMEOUT = 60
PROCESS_CLEANUP_TIMEOUT = 2

# File Size Limits
MAX_CONFIG_FILE_SIZE = 1024 * 1024  # 1MB
MAX_CONTEXT_FILE_SIZE = 1024 * 100  # 100KB

# Environment variables for commands run through the pty bridge
ENV_VARS = {
    'TERM': 'xterm-256color',
    'FORCE_COLOR': '1',
    'COLORTERM': 'truecolor'
}

# Logging Configuration
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marker that turns a model reply into an informational, non-executable comment
COMMENT_MARKER = "#"

# Keys accepted by the settings store
SETTING_KEYS = ("model", "yolo", "fix")

DEFAULT_SETTINGS = {
    "model": "default",
    "yolo": False,
    "fix": True,
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}

# Menu answers
ACCEPT_CHOICES = {"y", "yes"}
REJECT_CHOICES = {"", "n", "no"}
REFINE_CHOICES = {"r", "refine"}
FIX_CHOICES = {"f", "fix"}

# Default backend configuration (OpenAI-compatible endpoint)
DEFAULT_API_URL = "https://api.openai.com/v1"

DEFAULT_MODELS_CONFIG = {
    "default": "default",
    "available": {
        "default": {
            "name": "gpt-4.1-mini",
            "display_name": "GPT 4.1 Mini"
        }
    }
}

DEFAULT_BACKEND_CONFIG = {
    "type": "openai",
    "command": [],
    "model_flag": "--model",
    "system_prompt_flag": "--system-prompt",
    "unrestricted_args": [],
    "timeout": None,
}
