from __future__ import annotations

import yaml
from click.testing import CliRunner

from ai_cmd import cli as cli_module
from ai_cmd.cli import cli
from ai_cmd.session import ExecutionResult


class FakeClient:
    def __init__(self, reply: str, status: int = 0) -> None:
        self.reply = reply
        self.status = status
        self.calls: list[tuple[str, str, bool]] = []

    def invoke(self, system_prompt: str, user_prompt: str, allow_unrestricted: bool = False):
        self.calls.append((system_prompt, user_prompt, allow_unrestricted))
        return self.reply, self.status


class FakeRunner:
    def __init__(self, status: int = 0) -> None:
        self.status = status
        self.commands: list[tuple[str, ...]] = []

    def run(self, lines) -> ExecutionResult:
        self.commands.append(tuple(lines))
        return ExecutionResult(exit_status=self.status, output="", elapsed=0.0)


def install_fakes(monkeypatch, client: FakeClient, runner: FakeRunner | None = None) -> dict:
    seen = {}

    def fake_create_chat_client(config, model):
        seen["model"] = model
        return client

    monkeypatch.setattr(cli_module, "create_chat_client", fake_create_chat_client)
    monkeypatch.setattr(cli_module, "CommandRunner", lambda: runner or FakeRunner())
    return seen


def test_missing_prompt_is_a_usage_error() -> None:
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 1


def test_pipe_mode_prints_only_the_command(monkeypatch) -> None:
    client = FakeClient("```bash\nls -la\n```\n")
    seen = install_fakes(monkeypatch, client)

    result = CliRunner().invoke(cli, ["list", "files"])

    assert result.exit_code == 0
    assert result.stdout == "ls -la\n"
    assert client.calls[0][1] == "list files"
    assert seen["model"] == "gpt-4.1-mini"


def test_unknown_model_alias_is_passed_through(monkeypatch) -> None:
    seen = install_fakes(monkeypatch, FakeClient("ls"))
    result = CliRunner().invoke(cli, ["-m", "my-local-model", "list", "files"])
    assert result.exit_code == 0
    assert seen["model"] == "my-local-model"


def test_transport_failure_exit_status_is_propagated(monkeypatch) -> None:
    install_fakes(monkeypatch, FakeClient("Model request failed: boom", 5))
    result = CliRunner().invoke(cli, ["list", "files"])
    assert result.exit_code == 5
    assert result.stdout == ""


def test_set_default_writes_config(isolated_config) -> None:
    result = CliRunner().invoke(cli, ["--set-default", "fix=false"])
    assert result.exit_code == 0
    assert yaml.safe_load(isolated_config.read_text())["defaults"]["fix"] is False


def test_set_default_rejects_unknown_key(isolated_config) -> None:
    result = CliRunner().invoke(cli, ["--set-default", "colour=blue"])
    assert result.exit_code == 1
    assert not isolated_config.exists()


def test_set_default_rejects_malformed_assignment() -> None:
    assert CliRunner().invoke(cli, ["--set-default", "yolo"]).exit_code == 1
    assert CliRunner().invoke(cli, ["--set-default", "yolo=perhaps"]).exit_code == 1


def test_show_defaults_lists_every_key() -> None:
    result = CliRunner().invoke(cli, ["--show-defaults"])
    assert result.exit_code == 0
    assert "model=default" in result.stdout
    assert "yolo=False" in result.stdout
    assert "fix=True" in result.stdout


def test_stored_yolo_default_runs_command(monkeypatch, isolated_config) -> None:
    isolated_config.write_text("defaults:\n  yolo: true\n  fix: false\n")
    runner = FakeRunner(status=3)
    client = FakeClient("make test")
    install_fakes(monkeypatch, client, runner)

    result = CliRunner().invoke(cli, ["run", "the", "tests"])

    assert result.exit_code == 3
    assert runner.commands == [("make test",)]
    assert client.calls[0][2] is True


def test_no_yolo_flag_overrides_stored_default(monkeypatch, isolated_config) -> None:
    isolated_config.write_text("defaults:\n  yolo: true\n")
    runner = FakeRunner()
    install_fakes(monkeypatch, FakeClient("make test"), runner)

    result = CliRunner().invoke(cli, ["--no-yolo", "run", "the", "tests"])

    assert result.exit_code == 0
    assert result.stdout == "make test\n"
    assert runner.commands == []
