#!/usr/bin/env python

"""
Command execution with output capture.

Commands run through the host shell with the real terminal attached, so
pagers, prompts and progress bars behave as usual, while everything they
print is also recorded in a temporary capture file for failure detection.
How the capture is wired depends on the platform:

- util-linux ``script``: ``script -q -e -c CMD FILE``
- BSD / macOS ``script``: ``script -q FILE SHELL -c CMD``
- no ``script`` available: an in-process pseudo-terminal bridge
"""

import io
import os
import select
import shutil
import signal
import subprocess
import sys
import tempfile
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .constants import ENV_VARS, LAUNCH_FAILURE_EXIT_CODE, PROCESS_CLEANUP_TIMEOUT
from .environment import platform_tag
from .logger import logger
from .session import ExecutionResult

BSD_PLATFORMS = {"darwin", "freebsd", "openbsd", "netbsd", "dragonfly"}
SCRIPT_BANNER_PREFIXES = ("Script started on", "Script done on")


@contextmanager
def capture_file() -> Iterator[Path]:
    """Temporary capture file that is removed however the block exits"""
    fd, name = tempfile.mkstemp(prefix="ai-cmd-", suffix=".log")
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def read_capture(path: Path) -> str:
    """Decode a capture file, normalising line endings and dropping script banners"""
    try:
        raw = path.read_bytes()
    except OSError:
        return ""
    text = raw.decode("utf-8", errors="replace").replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in text.split("\n") if not line.startswith(SCRIPT_BANNER_PREFIXES)]
    return "\n".join(lines)


def _normalize_status(returncode: int) -> int:
    # Killed by a signal: report it the way shells do
    if returncode < 0:
        return 128 - returncode
    return returncode


def default_shell() -> str:
    shell = os.environ.get("SHELL")
    if shell and os.path.exists(shell):
        return shell
    return "/bin/sh"


class ScriptStrategy(ABC):
    """Runs the command under the script(1) utility"""

    name = "script"

    def __init__(self, script_path: str, shell: str):
        self.script_path = script_path
        self.shell = shell

    @abstractmethod
    def argv(self, command: str, capture: Path) -> List[str]:
        """Command line that runs COMMAND while recording to CAPTURE"""

    def execute(self, command: str, capture: Path) -> int:
        env = dict(os.environ)
        # util-linux script runs -c commands through $SHELL
        env["SHELL"] = self.shell
        completed = subprocess.run(self.argv(command, capture), env=env)
        return _normalize_status(completed.returncode)


class LinuxScriptStrategy(ScriptStrategy):
    name = "script-linux"

    def argv(self, command: str, capture: Path) -> List[str]:
        return [self.script_path, "-q", "-e", "-c", command, str(capture)]


class BsdScriptStrategy(ScriptStrategy):
    name = "script-bsd"

    def argv(self, command: str, capture: Path) -> List[str]:
        return [self.script_path, "-q", str(capture), self.shell, "-c", command]


class PtyStrategy:
    """Bridges the command through a pseudo-terminal we drive ourselves"""

    name = "pty"

    def __init__(self, shell: str):
        self.shell = shell

    def execute(self, command: str, capture: Path) -> int:
        import pty
        import termios
        import tty

        # stdin may be replaced by an object without a descriptor
        try:
            stdin_fd: Optional[int] = sys.stdin.fileno()
        except (AttributeError, ValueError, io.UnsupportedOperation):
            stdin_fd = None
        stdin_is_tty = stdin_fd is not None and os.isatty(stdin_fd)

        # Save current terminal settings
        old_settings = None
        if stdin_is_tty:
            try:
                old_settings = termios.tcgetattr(stdin_fd)
            except termios.error as e:
                logger.warning(f"Could not save terminal settings: {e}")

        master_fd, slave_fd = pty.openpty()

        env = dict(os.environ)
        env.update(ENV_VARS)

        try:
            process = subprocess.Popen(
                [self.shell, "-c", command],
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                env=env,
                start_new_session=True,
            )
        except OSError:
            os.close(master_fd)
            raise
        finally:
            # Close the slave end in the parent process
            os.close(slave_fd)

        watch_stdin = stdin_fd is not None
        try:
            if stdin_is_tty:
                try:
                    tty.setraw(stdin_fd)
                except termios.error as e:
                    logger.warning(f"Could not set terminal to raw mode: {e}")

            with open(capture, "wb") as sink:
                while process.poll() is None:
                    sources = [master_fd, stdin_fd] if watch_stdin else [master_fd]
                    ready, _, _ = select.select(sources, [], [], 0.1)

                    if watch_stdin and stdin_fd in ready:
                        data = os.read(stdin_fd, 1024)
                        if data:
                            os.write(master_fd, data)
                        else:
                            watch_stdin = False

                    if master_fd in ready:
                        if not self._pump(master_fd, sink):
                            break

                exit_code = process.wait()

                # Read any remaining output
                while select.select([master_fd], [], [], 0.1)[0]:
                    if not self._pump(master_fd, sink):
                        break
        finally:
            # Restore terminal settings
            if old_settings is not None:
                try:
                    termios.tcsetattr(stdin_fd, termios.TCSADRAIN, old_settings)
                except termios.error:
                    pass

            os.close(master_fd)

            if process.poll() is None:
                try:
                    os.killpg(os.getpgid(process.pid), signal.SIGTERM)
                    process.wait(timeout=PROCESS_CLEANUP_TIMEOUT)
                except (OSError, subprocess.TimeoutExpired):
                    try:
                        os.killpg(os.getpgid(process.pid), signal.SIGKILL)
                    except OSError:
                        pass

        return _normalize_status(exit_code)

    @staticmethod
    def _pump(master_fd: int, sink) -> bool:
        """Copy one chunk from the pty to the terminal and the capture file"""
        try:
            data = os.read(master_fd, 1024)
        except OSError:
            # EIO once the child side is closed
            return False
        if not data:
            return False
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
        sink.write(data)
        return True


def select_strategy(tag: str, script_path: Optional[str], shell: str):
    """Pick the capture wiring for a platform tag"""
    if script_path:
        if tag == "linux":
            return LinuxScriptStrategy(script_path, shell)
        if tag in BSD_PLATFORMS:
            return BsdScriptStrategy(script_path, shell)
    return PtyStrategy(shell)


class CommandRunner:
    """Executes candidate commands and reports status plus captured output"""

    def __init__(self, shell: Optional[str] = None, tag: Optional[str] = None, strategy=None):
        self.shell = shell or default_shell()
        self.strategy = strategy or select_strategy(tag or platform_tag(), shutil.which("script"), self.shell)

    def run(self, lines: Sequence[str]) -> ExecutionResult:
        command = "\n".join(lines)
        started = time.monotonic()

        with capture_file() as capture:
            try:
                exit_status = self.strategy.execute(command, capture)
            except OSError as e:
                logger.error(f"Error starting command: {e}")
                exit_status = LAUNCH_FAILURE_EXIT_CODE
                output = f"Error starting command: {e}"
            else:
                output = read_capture(capture)

        elapsed = time.monotonic() - started
        logger.log_command_execution(command, exit_status, elapsed, output)
        return ExecutionResult(exit_status=exit_status, output=output, elapsed=elapsed)
