from __future__ import annotations

import io
import json

import pytest

from dockwrap.core.output import CommandOutput, ParsedOutput
from dockwrap.errors import CommandFailed, CommandTimeout, InvalidConfiguration, ParseError, SpawnFailed
from dockwrap.exit_codes import ERR_COMMAND, ERR_PARSE, ERR_SPAWN
from dockwrap.logging import format_event, log_event


@pytest.mark.unit
def test_output_helpers() -> None:
    out = CommandOutput(stdout="a\nb\n", stderr="", exit_code=0)
    assert out.success
    assert out.stdout_lines() == ["a", "b"]
    assert out.stderr_is_empty()
    assert not out.stdout_is_empty()
    assert out.combined_output == "a\nb\n"
    both = CommandOutput(stdout="o", stderr="e", exit_code=2)
    assert not both.success
    assert both.combined_output == "o\ne"


@pytest.mark.unit
def test_parsed_output_keeps_raw_streams() -> None:
    raw = CommandOutput(stdout="x", stderr="y", exit_code=0)
    parsed = ParsedOutput(output=raw)
    assert (parsed.stdout, parsed.stderr, parsed.exit_code, parsed.success) == ("x", "y", 0, True)


@pytest.mark.unit
def test_error_kinds_and_messages() -> None:
    spawn = SpawnFailed("docker", "No such file or directory")
    assert str(spawn) == "failed to execute docker: No such file or directory"
    assert spawn.code == ERR_SPAWN
    assert spawn.category == "prerequisites"
    failed = CommandFailed("docker ps", 1, "", "")
    assert "exit code 1" in str(failed)
    assert failed.code == ERR_COMMAND
    assert failed.is_retryable
    assert str(CommandTimeout(2.5)) == "operation timed out after 2.5 seconds"
    assert ParseError("bad json").code == ERR_PARSE
    assert str(InvalidConfiguration("x")) == "invalid configuration: x"
    assert not InvalidConfiguration("x").is_retryable


@pytest.mark.unit
def test_log_event_writes_to_stderr_only(capsys: pytest.CaptureFixture[str]) -> None:
    log_event("info", "executor", "spawn", "r1", command="docker ps")
    log_event("warn", "executor", "timeout", "r1", json_output=False, timeout_seconds=2)
    captured = capsys.readouterr()
    assert captured.out == ""
    first, second = captured.err.splitlines()
    payload = json.loads(first)
    assert payload["action"] == "spawn"
    assert payload["command"] == "docker ps"
    assert second.startswith("[warn] executor:timeout run_id=r1")
    assert "timeout_seconds=2" in second


@pytest.mark.unit
def test_format_event_orders_extra_fields() -> None:
    line = format_event("debug", "executor", "complete", "r2", json_output=False, duration_ms=5, code=0)
    assert line == "[debug] executor:complete run_id=r2 code=0 duration_ms=5"
    payload = json.loads(format_event("debug", "executor", "complete", "r2", code=0))
    assert set(payload) == {"ts", "level", "component", "action", "run_id", "code"}


@pytest.mark.unit
def test_log_event_honours_explicit_stream(capsys: pytest.CaptureFixture[str]) -> None:
    sink = io.StringIO()
    log_event("info", "cli", "start", "r3", json_output=False, stream=sink)
    assert sink.getvalue() == "[info] cli:start run_id=r3\n"
    assert capsys.readouterr().err == ""
