import os
import tempfile

# The logger attaches its file handler on import; keep test runs out of ~/.ai-cmd
os.environ.setdefault("AI_CMD_LOG_DIR", tempfile.mkdtemp(prefix="ai-cmd-test-logs-"))

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    monkeypatch.setenv("AI_CMD_CONFIG", str(config_path))
    monkeypatch.delenv("AI_CMD_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return config_path
