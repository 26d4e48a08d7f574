#!/usr/bin/env python
"""
ai-cmd - Entry Point

Turns a natural-language request into a shell command, shows it, and runs
it once confirmed.

Usage:
    ai list the five largest files here
    ai -y -m fast show disk usage
    ai --set-default fix=false

Configuration:
    - ~/.config/ai-cmd/config.yaml: backend, models, defaults and theme
    - ~/.config/ai-cmd/context.md: extra guidelines appended to the system prompt
"""

import sys
from typing import Optional, Tuple

import click
from click.core import ParameterSource

from .app import LifecycleController
from .chat import create_chat_client
from .commands import CommandRunner
from .config import SettingsError, SettingsStore, load_config
from .constants import APP_VERSION, ERROR_EXIT_CODE, INTERRUPTED_EXIT_CODE, SETTING_KEYS, SUCCESS_EXIT_CODE
from .environment import collect_environment
from .logger import logger
from .models import ModelManager
from .prompts import build_system_prompt
from .session import RequestContext
from .terminal_input import TerminalInput
from .ui import UIManager


def _usage_error(ctx: click.Context, message: str):
    click.echo(ctx.get_usage(), err=True)
    click.echo(f"Error: {message}", err=True)
    ctx.exit(ERROR_EXIT_CODE)


def _flag_or_default(ctx: click.Context, name: str, value: bool, store: SettingsStore) -> bool:
    """Command-line flags win; otherwise the stored default applies"""
    if ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE:
        return value
    return store.get(name)


def _set_default(ctx: click.Context, store: SettingsStore, assignment: str):
    key, sep, raw_value = assignment.partition("=")
    key = key.strip()
    if not sep or not key:
        _usage_error(ctx, f"--set-default expects KEY=VALUE with KEY one of: {', '.join(SETTING_KEYS)}")
    try:
        value = store.set_default(key, raw_value)
    except SettingsError as e:
        _usage_error(ctx, str(e))
    except OSError as e:
        click.echo(f"Error: could not save settings to {store.config_path}: {e}", err=True)
        ctx.exit(ERROR_EXIT_CODE)
    logger.info(f"Default {key} set to {value!r}")
    click.echo(f"Default {key} set to {value}")


def _show_defaults(store: SettingsStore):
    for key in SETTING_KEYS:
        click.echo(f"{key}={store.get(key)}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("prompt", nargs=-1, type=str)
@click.option("-m", "--model", type=str, default=None, help="Model alias or backend model name.")
@click.option("-y", "--yolo/--no-yolo", default=False, help="Run the generated command without asking.")
@click.option("-f", "--fix/--no-fix", default=False, help="Offer to fix commands that fail.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on stderr.")
@click.option("--set-default", "set_default", metavar="KEY=VALUE", default=None,
              help=f"Persist a default ({', '.join(SETTING_KEYS)}) and exit.")
@click.option("--show-defaults", is_flag=True, help="Print the stored defaults and exit.")
@click.option("--list-models", is_flag=True, help="List configured model aliases and exit.")
@click.version_option(APP_VERSION, prog_name="ai")
@click.pass_context
def cli(ctx: click.Context, prompt: Tuple[str, ...], model: Optional[str], yolo: bool, fix: bool,
        verbose: bool, set_default: Optional[str], show_defaults: bool, list_models: bool):
    """Translate PROMPT into a shell command, confirm it, and run it."""
    logger.set_verbose(verbose)
    config = load_config()
    store = SettingsStore(config)

    if set_default is not None:
        _set_default(ctx, store, set_default)
        ctx.exit(SUCCESS_EXIT_CODE)
    if show_defaults:
        try:
            _show_defaults(store)
        except SettingsError as e:
            click.echo(f"Error: invalid stored default: {e}", err=True)
            ctx.exit(ERROR_EXIT_CODE)
        ctx.exit(SUCCESS_EXIT_CODE)

    manager = ModelManager(config)
    model_alias = model or store.get("model")
    if list_models:
        manager.list_models(current_model=model_alias)
        ctx.exit(SUCCESS_EXIT_CODE)

    request = " ".join(prompt).strip()
    if not request:
        _usage_error(ctx, "Missing PROMPT")

    try:
        yolo = _flag_or_default(ctx, "yolo", yolo, store)
        fix = _flag_or_default(ctx, "fix", fix, store)
    except SettingsError as e:
        click.echo(f"Error: invalid stored default: {e}", err=True)
        ctx.exit(ERROR_EXIT_CODE)

    api_model = manager.get_api_model_name(model_alias)
    interactive = sys.stdin.isatty() and sys.stdout.isatty()
    context = RequestContext(
        prompt=request,
        model=api_model,
        system_prompt=build_system_prompt(collect_environment()),
        yolo=yolo,
        fix=fix,
        verbose=verbose,
        interactive=interactive,
    )
    logger.debug(
        f"Request - Model: {manager.get_model_display_name(model_alias)} ({api_model}), "
        f"yolo={context.yolo}, fix={context.fix}, interactive={interactive}"
    )

    ui = UIManager(config)
    controller = LifecycleController(
        context,
        client=create_chat_client(config, api_model),
        runner=CommandRunner(),
        ui=ui,
        terminal_input=TerminalInput(config) if interactive else None,
    )

    try:
        status = controller.run()
    except KeyboardInterrupt:
        ui.show_cancelled()
        status = INTERRUPTED_EXIT_CODE
    except EOFError:
        # Ctrl-D at a menu
        ui.show_cancelled()
        status = ERROR_EXIT_CODE
    ctx.exit(status)


def main() -> None:
    """Console script entry point"""
    try:
        status = cli.main(prog_name="ai", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(ERROR_EXIT_CODE)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        sys.exit(INTERRUPTED_EXIT_CODE)
    sys.exit(status or 0)


if __name__ == "__main__":
    main()
