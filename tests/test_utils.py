"""Unit tests for utility functions (node_starter.utils).

Tests cover:
- run_command (success, failure, missing program, cwd, env vars, capture=False)
- load_json / dump_json / save_json (use tmp_path)
- directory_exists / file_exists
- Rich output helpers
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from node_starter.utils import (
    directory_exists,
    dump_json,
    file_exists,
    load_json,
    print_error,
    print_info,
    print_panel,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    save_json,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello"
        assert stderr == ""

    async def test_failing_command(self):
        returncode, _, _ = await run_command(["sh", "-c", "exit 3"])
        assert returncode == 3

    async def test_stderr_is_captured(self):
        returncode, _, stderr = await run_command(["sh", "-c", "echo oops >&2; exit 1"])
        assert returncode == 1
        assert stderr == "oops"

    async def test_missing_program(self):
        returncode, stdout, stderr = await run_command(["definitely-not-a-real-binary-xyz"])
        assert returncode == 127
        assert stdout == ""
        assert "definitely-not-a-real-binary-xyz" in stderr

    async def test_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(["pwd"], cwd=tmp_path)
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    async def test_env_is_merged(self):
        returncode, stdout, _ = await run_command(
            ["sh", "-c", "echo $NODE_STARTER_TEST_VAR"], env={"NODE_STARTER_TEST_VAR": "42"}
        )
        assert returncode == 0
        assert stdout == "42"

    async def test_timeout(self):
        returncode, _, stderr = await run_command(["sleep", "5"], timeout=0.2)
        assert returncode == -1
        assert "timed out" in stderr

    async def test_no_capture(self):
        returncode, stdout, stderr = await run_command(["true"], capture=False)
        assert returncode == 0
        assert stdout == ""
        assert stderr == ""


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJson:
    def test_load_json(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert load_json(path) == {"a": 1}

    def test_load_json_non_object(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_json(path) == {"_root": [1, 2]}

    def test_load_json_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

    def test_dump_json_format(self):
        assert dump_json({"name": "café", "n": 1}) == '{\n  "name": "café",\n  "n": 1\n}\n'

    async def test_save_json_creates_parents(self, tmp_path: Path):
        path = tmp_path / "nested" / "dir" / "out.json"
        await save_json({"b": [1, 2]}, path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": [1, 2]}


# ---------------------------------------------------------------------------
# File-system probes
# ---------------------------------------------------------------------------


class TestFileSystem:
    def test_directory_exists(self, tmp_path: Path):
        assert directory_exists(tmp_path)
        assert not directory_exists(tmp_path / "nope")

    def test_file_exists(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("x", encoding="utf-8")
        assert file_exists(path)
        assert not file_exists(tmp_path)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    def test_messages(self, capsys: pytest.CaptureFixture[str]):
        print_info("info line")
        print_step("step line")
        print_success("success line")
        print_warning("warning line")
        print_error("error line")
        out = capsys.readouterr().out
        for text in ("info line", "step line", "success line", "warning line", "error line"):
            assert text in out

    def test_summary_table(self, capsys: pytest.CaptureFixture[str]):
        print_summary_table({"Project": "app1", "Runtime": "bun"}, title="Plan")
        out = capsys.readouterr().out
        assert "Plan" in out
        assert "app1" in out
        assert "bun" in out

    def test_panel(self, capsys: pytest.CaptureFixture[str]):
        print_panel("cd app1", title="Project created!")
        out = capsys.readouterr().out
        assert "Project created!" in out
        assert "cd app1" in out
