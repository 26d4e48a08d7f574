#!/usr/bin/env python

import copy
import os
import sys
import yaml
from typing import Dict, Any, Optional
from pathlib import Path
from rich.console import Console

from .constants import (
    CONFIG_FILE_PATH, CONFIG_PATH_ENV, API_KEY_ENVS, MAX_CONFIG_FILE_SIZE,
    DEFAULT_API_URL, DEFAULT_MODELS_CONFIG, DEFAULT_BACKEND_CONFIG,
    DEFAULT_SETTINGS, SETTING_KEYS, TRUE_VALUES, FALSE_VALUES,
)
from .theme import create_console


class SettingsError(ValueError):
    """Raised for an unknown setting key or an unparseable value"""


def resolve_config_path() -> Path:
    """Config location, honouring the AI_CMD_CONFIG override"""
    explicit = os.environ.get(CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return CONFIG_FILE_PATH


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and validate configuration from YAML file"""
    console = create_console(stderr=True)
    config_path = config_path or resolve_config_path()

    if not config_path.exists():
        return _validate_and_normalize_config({}, console)

    # Check if file is readable
    if not config_path.is_file() or not os.access(config_path, os.R_OK):
        console.print(f"[error]Error: Config file '{config_path}' is not readable![/error]")
        sys.exit(1)

    # Check file size (prevent loading massive files)
    try:
        file_size = config_path.stat().st_size
        if file_size > MAX_CONFIG_FILE_SIZE:
            console.print(f"[error]Error: Config file '{config_path}' is too large (>1MB)![/error]")
            sys.exit(1)
    except OSError as e:
        console.print(f"[error]Error accessing config file '{config_path}': {e}[/error]")
        sys.exit(1)

    try:
        with open(config_path, 'r', encoding='utf-8') as file:
            config = yaml.safe_load(file)
    except yaml.YAMLError as e:
        console.print(f"[error]Error: Invalid YAML in config file: {e}[/error]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[error]Error loading config: {e}[/error]")
        sys.exit(1)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        console.print(f"[error]Error: Config file '{config_path}' must contain a mapping[/error]")
        sys.exit(1)

    return _validate_and_normalize_config(config, console)


def _validate_and_normalize_config(config: Dict[str, Any], console: Console) -> Dict[str, Any]:
    """Fill in defaults for every section the rest of the package reads"""
    api = config.setdefault("api", {})
    if not isinstance(api, dict):
        console.print("[error]Error: 'api' must be a mapping[/error]")
        sys.exit(1)
    api.setdefault("url", DEFAULT_API_URL)
    api.setdefault("api_key", "")

    backend = config.setdefault("backend", {})
    if not isinstance(backend, dict):
        console.print("[error]Error: 'backend' must be a mapping[/error]")
        sys.exit(1)
    for key, value in DEFAULT_BACKEND_CONFIG.items():
        backend.setdefault(key, copy.deepcopy(value))
    if backend["type"] not in ("openai", "command"):
        console.print(f"[error]Error: Unknown backend type '{backend['type']}' (expected openai or command)[/error]")
        sys.exit(1)
    if backend["type"] == "command" and not backend["command"]:
        console.print("[error]Error: backend.command must list the executable to run[/error]")
        sys.exit(1)

    models = config.setdefault("models", copy.deepcopy(DEFAULT_MODELS_CONFIG))
    if not isinstance(models, dict):
        console.print("[error]Error: Invalid models configuration format[/error]")
        sys.exit(1)
    models.setdefault("available", {})
    models.setdefault("default", next(iter(models["available"]), DEFAULT_SETTINGS["model"]))

    defaults = config.setdefault("defaults", {})
    if not isinstance(defaults, dict):
        console.print("[error]Error: 'defaults' must be a mapping[/error]")
        sys.exit(1)
    defaults.setdefault("model", models["default"])
    defaults.setdefault("yolo", DEFAULT_SETTINGS["yolo"])
    defaults.setdefault("fix", DEFAULT_SETTINGS["fix"])

    config.setdefault("theme", {})
    return config


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise SettingsError(f"Expected a boolean (true/false, yes/no, on/off, 1/0), got '{value}'")


class SettingsStore:
    """Persisted defaults (model, yolo, fix) kept in the 'defaults' config section.

    Loaded once at start-up; only the --set-default path writes it back.
    """

    def __init__(self, config: Dict[str, Any], config_path: Optional[Path] = None):
        self.config = config
        self.config_path = config_path or resolve_config_path()

    @property
    def defaults(self) -> Dict[str, Any]:
        return self.config.setdefault("defaults", {})

    def get(self, key: str) -> Any:
        if key not in SETTING_KEYS:
            raise SettingsError(f"Unknown setting '{key}' (expected one of: {', '.join(SETTING_KEYS)})")
        value = self.defaults.get(key, DEFAULT_SETTINGS[key])
        if key != "model" and isinstance(value, str):
            return parse_bool(value)
        return value

    def set_default(self, key: str, raw_value: str) -> Any:
        """Validate, store and persist a single default"""
        if key not in SETTING_KEYS:
            raise SettingsError(f"Unknown setting '{key}' (expected one of: {', '.join(SETTING_KEYS)})")

        if key == "model":
            value: Any = raw_value.strip()
            if not value:
                raise SettingsError("Model name must not be empty")
        else:
            value = parse_bool(raw_value)

        self.defaults[key] = value
        self.save()
        return value

    def save(self):
        """Write the defaults back into the config file, keeping its other sections"""
        raw: Dict[str, Any] = {}
        if self.config_path.is_file():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
            if isinstance(loaded, dict):
                raw = loaded
        raw["defaults"] = dict(self.defaults)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(raw, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def resolve_api_key(config: Dict[str, Any]) -> str:
    """Environment variables win over the key stored in config.yaml"""
    for env_name in API_KEY_ENVS:
        if os.environ.get(env_name):
            return os.environ[env_name]
    return config.get("api", {}).get("api_key", "")
