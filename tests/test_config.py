import pytest
import yaml

from ai_cmd.config import SettingsError, SettingsStore, load_config, parse_bool, resolve_api_key


def test_missing_file_gives_defaults(isolated_config) -> None:
    config = load_config()
    assert config["backend"]["type"] == "openai"
    assert config["defaults"] == {"model": "default", "yolo": False, "fix": True}
    assert not isolated_config.exists()


def test_invalid_yaml_exits(isolated_config) -> None:
    isolated_config.write_text("api: [unclosed\n")
    with pytest.raises(SystemExit) as excinfo:
        load_config()
    assert excinfo.value.code == 1


def test_unknown_backend_type_exits(isolated_config) -> None:
    isolated_config.write_text("backend:\n  type: carrier-pigeon\n")
    with pytest.raises(SystemExit):
        load_config()


def test_command_backend_needs_a_command(isolated_config) -> None:
    isolated_config.write_text("backend:\n  type: command\n")
    with pytest.raises(SystemExit):
        load_config()


def test_set_default_persists_and_keeps_other_sections(isolated_config, monkeypatch) -> None:
    isolated_config.write_text("api:\n  url: http://localhost:11434/v1\n")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
    store = SettingsStore(load_config())

    assert store.set_default("yolo", "yes") is True
    assert store.set_default("model", "fast") == "fast"

    saved = yaml.safe_load(isolated_config.read_text())
    assert saved["api"] == {"url": "http://localhost:11434/v1"}
    assert saved["defaults"]["yolo"] is True
    assert "sk-secret" not in isolated_config.read_text()

    reloaded = SettingsStore(load_config())
    assert reloaded.get("yolo") is True
    assert reloaded.get("model") == "fast"


def test_unknown_key_is_rejected() -> None:
    store = SettingsStore(load_config())
    with pytest.raises(SettingsError):
        store.set_default("colour", "blue")
    with pytest.raises(SettingsError):
        store.get("colour")


def test_invalid_boolean_is_rejected(isolated_config) -> None:
    store = SettingsStore(load_config())
    with pytest.raises(SettingsError):
        store.set_default("fix", "sometimes")
    assert not isolated_config.exists()


def test_string_booleans_in_file_are_parsed(isolated_config) -> None:
    isolated_config.write_text("defaults:\n  fix: 'off'\n")
    assert SettingsStore(load_config()).get("fix") is False


def test_parse_bool_accepts_common_spellings() -> None:
    assert parse_bool("On") is True
    assert parse_bool(" 0 ") is False


def test_environment_api_key_wins(monkeypatch) -> None:
    config = {"api": {"api_key": "from-file"}}
    assert resolve_api_key(config) == "from-file"
    monkeypatch.setenv("AI_CMD_API_KEY", "from-env")
    assert resolve_api_key(config) == "from-env"
