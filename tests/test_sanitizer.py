import pytest

from ai_cmd.sanitizer import sanitize


def test_fenced_block_with_language_tag_is_unwrapped() -> None:
    assert sanitize(["```bash", "ls -la", "```"]) == ["ls -la"]


def test_fenced_block_without_language_tag_is_unwrapped() -> None:
    assert sanitize(["```", "df -h", "```"]) == ["df -h"]


def test_inline_backticks_are_removed_from_single_line() -> None:
    assert sanitize(["`git status`"]) == ["git status"]


def test_surrounding_blank_lines_are_trimmed() -> None:
    assert sanitize(["", "  ", "```sh", "", "echo hi", "", "```", ""]) == ["echo hi"]


def test_multi_line_body_is_left_untouched() -> None:
    body = ["for f in *.log; do", "  gzip \"$f\"", "done"]
    assert sanitize(["```bash"] + body + ["```"]) == body


def test_backticks_inside_multi_line_output_are_kept() -> None:
    lines = ["echo `date`", "echo done"]
    assert sanitize(lines) == lines


def test_command_substitution_with_backticks_is_kept() -> None:
    assert sanitize(["`date` `whoami`"]) == ["`date` `whoami`"]


def test_clean_output_is_unchanged() -> None:
    assert sanitize(["ls -la"]) == ["ls -la"]


@pytest.mark.parametrize("sample", [
    ["```bash", "ls", "```"],
    ["```", "```bash", "ls", "```", "```"],
    ["`uname -a`"],
    ["", "# no command for that", ""],
    [],
    ["`   `"],
    ["``"],
    ["```"],
    ["```python"],
    ["   ", "\t", ""],
    ["  `  ls -la  `  "],
    ["``` bash", "`ls`", "```"],
    ["````"],
    ["echo `date`"],
    ["```", "  ", "```"],
])
def test_sanitize_is_idempotent(sample) -> None:
    once = sanitize(sample)
    assert sanitize(once) == once


def test_backticks_around_blank_text_yield_nothing() -> None:
    assert sanitize(["`   `"]) == []


def test_fence_opener_with_space_before_language_tag() -> None:
    assert sanitize(["``` bash", "ls -la", "```"]) == ["ls -la"]


def test_empty_fence_yields_nothing() -> None:
    assert sanitize(["```", "```"]) == []
