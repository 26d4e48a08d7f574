#!/usr/bin/env python

"""
Model backends.

Every backend exposes ``invoke(system_prompt, user_prompt, allow_unrestricted)``
and returns ``(output_text, exit_status)``. A non-zero status is a transport or
backend failure and the text then carries the error message. Backends never
retry; the lifecycle controller decides what happens next.
"""

import subprocess
import time
from typing import Any, Dict, List, Optional, Tuple

from openai import AuthenticationError, OpenAI, OpenAIError

from .config import resolve_api_key
from .constants import API_KEY_ENVS, API_TIMEOUT, DEFAULT_API_URL, ERROR_EXIT_CODE, LAUNCH_FAILURE_EXIT_CODE
from .logger import logger
from .theme import create_console


def _missing_key_message() -> str:
    return (
        f"No usable API key. Set {' or '.join(API_KEY_ENVS)}, "
        "or api.api_key in the config file."
    )


class OpenAIChatClient:
    """OpenAI-compatible chat completions endpoint"""

    backend_name = "openai"

    def __init__(self, config: Dict[str, Any], model: str, client: Optional[OpenAI] = None):
        self.config = config
        self.model = model
        self.console = create_console(config, stderr=True)
        self.api_key = resolve_api_key(config)
        self.base_url = config["api"]["url"]
        # Local OpenAI-compatible servers accept any key
        self.client = client or OpenAI(
            api_key=self.api_key or "missing-api-key",
            base_url=self.base_url,
            timeout=API_TIMEOUT,
            max_retries=0,
        )

    def invoke(self, system_prompt: str, user_prompt: str, allow_unrestricted: bool = False) -> Tuple[str, int]:
        """Request a single completion"""
        if not self.api_key and self.base_url.rstrip("/") == DEFAULT_API_URL:
            return _missing_key_message(), ERROR_EXIT_CODE

        # Plain chat endpoints have no permission prompts to bypass
        if allow_unrestricted:
            logger.debug("Unrestricted mode requested; openai backend has no permission gate")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            with self.console.status("[bold accent]Thinking...[/bold accent]"):
                response = self.client.chat.completions.create(model=self.model, messages=messages)
        except AuthenticationError as e:
            logger.log_model_request(self.backend_name, self.model, len(user_prompt), 0, ERROR_EXIT_CODE)
            return f"Model request failed: {e}\n{_missing_key_message()}", ERROR_EXIT_CODE
        except OpenAIError as e:
            logger.log_model_request(self.backend_name, self.model, len(user_prompt), 0, ERROR_EXIT_CODE)
            return f"Model request failed: {e}", ERROR_EXIT_CODE

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        logger.log_model_request(self.backend_name, self.model, len(user_prompt), len(text), 0)
        return text, 0


class CommandChatClient:
    """Runs an external agent CLI that prints the completion on stdout"""

    backend_name = "command"

    def __init__(self, config: Dict[str, Any], model: str):
        backend = config["backend"]
        self.model = model
        self.command: List[str] = [str(part) for part in backend["command"]]
        self.model_flag: Optional[str] = backend.get("model_flag")
        self.system_prompt_flag: Optional[str] = backend.get("system_prompt_flag")
        self.unrestricted_args: List[str] = [str(part) for part in backend.get("unrestricted_args") or []]
        self.timeout = backend.get("timeout")
        self.console = create_console(config, stderr=True)

    def build_argv(self, system_prompt: str, user_prompt: str, allow_unrestricted: bool) -> List[str]:
        argv = list(self.command)
        if self.model_flag and self.model:
            argv += [self.model_flag, self.model]
        if self.system_prompt_flag:
            argv += [self.system_prompt_flag, system_prompt]
        if allow_unrestricted:
            argv += self.unrestricted_args
        argv.append(user_prompt)
        return argv

    def invoke(self, system_prompt: str, user_prompt: str, allow_unrestricted: bool = False) -> Tuple[str, int]:
        argv = self.build_argv(system_prompt, user_prompt, allow_unrestricted)
        started = time.monotonic()
        try:
            with self.console.status("[bold accent]Thinking...[/bold accent]"):
                proc = subprocess.run(
                    argv,
                    stdin=subprocess.DEVNULL,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
        except FileNotFoundError:
            return f"Model command not found: {argv[0]}", LAUNCH_FAILURE_EXIT_CODE
        except subprocess.TimeoutExpired:
            return f"Model command timed out after {self.timeout}s", ERROR_EXIT_CODE
        except OSError as e:
            return f"Error starting model command: {e}", ERROR_EXIT_CODE

        logger.debug(f"Model command finished in {time.monotonic() - started:.2f}s")
        logger.log_model_request(self.backend_name, self.model, len(user_prompt), len(proc.stdout), proc.returncode)
        if proc.returncode != 0:
            return proc.stderr or proc.stdout, proc.returncode
        return proc.stdout, 0


def create_chat_client(config: Dict[str, Any], model: str):
    """Pick the backend named in backend.type"""
    if config["backend"]["type"] == "command":
        return CommandChatClient(config, model)
    return OpenAIChatClient(config, model)
