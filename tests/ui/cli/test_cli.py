"""Tests for CLI functionality."""

from __future__ import annotations

import re
import sys
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from deja.ui.cli import CommandProcessor

HEX_KEY = re.compile(r"^[0-9a-f]{64}$")


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from a scratch working directory."""

    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def counter(tmp_path: Path) -> Path:
    return tmp_path / "counter.txt"


@pytest.fixture
def mock_logger(mocker: MockerFixture) -> MagicMock:
    """Create a mock logger.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MagicMock: Mock logger instance.
    """
    return mocker.patch("deja.ui.cli.cli.logger")


def counting_script(counter: Path, output: str = "hi") -> list[str]:
    """Command line that appends a line to ``counter`` and prints ``output``."""

    script = (
        "import sys\n"
        f"with open({str(counter)!r}, 'a') as handle:\n"
        "    handle.write('x\\n')\n"
        f"print({output!r})\n"
    )
    return [sys.executable, "-c", script]


def runs(counter: Path) -> int:
    return len(counter.read_text().splitlines()) if counter.exists() else 0


def deja(*args: str) -> int:
    return CommandProcessor.process_command(list(args))


def test_run_replays_second_invocation(
    workdir: Path, counter: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The second identical run is served from the cache."""

    _ = workdir
    command = counting_script(counter)

    assert deja("run", "--", *command) == 0
    first = capsys.readouterr()
    assert deja("run", "--", *command) == 0
    second = capsys.readouterr()

    assert first.out == "hi\n"
    assert second.out == first.out
    assert runs(counter) == 1


def test_run_without_separator(workdir: Path, counter: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _ = workdir

    assert deja("run", *counting_script(counter, "plain")) == 0
    assert capsys.readouterr().out == "plain\n"


def test_default_cache_lives_under_xdg_cache_home(
    workdir: Path, counter: Path, isolated_environment: Path
) -> None:
    _ = workdir

    assert deja("run", "--", *counting_script(counter)) == 0

    cache_root = isolated_environment / ".cache" / "deja"
    assert len(list(cache_root.glob("*/*.json"))) == 1


def test_cache_flag_overrides_environment(
    workdir: Path, counter: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _ = workdir
    from_env = tmp_path / "from-env"
    from_flag = tmp_path / "from-flag"
    monkeypatch.setenv("DEJA_CACHE", str(from_env))

    assert deja("run", "--", *counting_script(counter)) == 0
    assert deja("run", "--cache", str(from_flag), "--", *counting_script(counter)) == 0

    assert len(list(from_env.glob("*/*.json"))) == 1
    assert len(list(from_flag.glob("*/*.json"))) == 1
    assert runs(counter) == 2


def test_cache_for_expires_entry(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A fresh value is produced once the recorded expiry passes."""

    _ = workdir
    command = [sys.executable, "-c", "import uuid; print(uuid.uuid4())"]

    assert deja("run", "--cache-for", "1s", "--", *command) == 0
    first = capsys.readouterr().out
    assert deja("run", "--cache-for", "1s", "--", *command) == 0
    second = capsys.readouterr().out
    time.sleep(1.2)
    assert deja("run", "--cache-for", "1s", "--", *command) == 0
    third = capsys.readouterr().out

    assert first == second
    assert third != first


def test_watch_path_change_invalidates(
    workdir: Path, counter: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    lock = workdir / "deps.lock"
    _ = lock.write_text("one")
    command = ["run", "--watch-path", "deps.lock", "--", *counting_script(counter)]

    assert deja(*command) == 0
    assert deja(*command) == 0
    assert runs(counter) == 1

    _ = lock.write_text("two")
    assert deja(*command) == 0
    assert runs(counter) == 2
    _ = capsys.readouterr()


def test_exclude_pwd_shares_entry_across_directories(
    tmp_path: Path, counter: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Excluding the directory is asymmetric: only excluded lookups share entries."""

    first_dir = tmp_path / "a"
    second_dir = tmp_path / "b"
    first_dir.mkdir()
    second_dir.mkdir()
    command = counting_script(counter)

    monkeypatch.chdir(first_dir)
    assert deja("run", "--exclude-pwd", "--", *command) == 0
    monkeypatch.chdir(second_dir)
    assert deja("run", "--exclude-pwd", "--", *command) == 0
    assert runs(counter) == 1

    assert deja("run", "--", *command) == 0
    assert runs(counter) == 2


def test_ignore_pwd_environment_variable(
    tmp_path: Path, counter: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    first_dir = tmp_path / "a"
    second_dir = tmp_path / "b"
    first_dir.mkdir()
    second_dir.mkdir()
    monkeypatch.setenv("DEJA_IGNORE_PWD", "yes")
    command = counting_script(counter)

    monkeypatch.chdir(first_dir)
    assert deja("run", "--", *command) == 0
    monkeypatch.chdir(second_dir)
    assert deja("run", "--", *command) == 0

    assert runs(counter) == 1


def test_failing_command_is_not_cached_by_default(workdir: Path, counter: Path) -> None:
    _ = workdir
    script = f"open({str(counter)!r}, 'a').write('x\\n'); raise SystemExit(3)"

    assert deja("run", "--", sys.executable, "-c", script) == 3
    assert deja("run", "--", sys.executable, "-c", script) == 3
    assert runs(counter) == 2

    assert deja("run", "--record-exit-codes", "0,3", "--", sys.executable, "-c", script) == 3
    assert deja("run", "--record-exit-codes", "0,3", "--", sys.executable, "-c", script) == 3
    assert runs(counter) == 3


def test_test_read_force_and_remove(
    workdir: Path, counter: Path, capsys: pytest.CaptureFixture[str], mock_logger: MagicMock
) -> None:
    _ = workdir
    command = counting_script(counter)

    assert deja("test", "--", *command) == 1
    assert deja("read", "--", *command) == 1
    assert deja("read", "--cache-miss-exit-code", "7", "--", *command) == 7
    assert runs(counter) == 0

    assert deja("force", "--", *command) == 0
    assert deja("force", "--", *command) == 0
    assert runs(counter) == 2
    assert deja("test", "--", *command) == 0
    _ = capsys.readouterr()
    assert deja("read", "--", *command) == 0
    assert capsys.readouterr().out == "hi\n"

    assert deja("remove", "--", *command) == 0
    assert deja("test", "--", *command) == 1
    assert deja("remove", "--", *command) == 1
    message = mock_logger.error.call_args.args[1]
    assert str(message).startswith("no cache entry for ")


def test_hash_prints_stable_key(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _ = workdir

    assert deja("hash", "--", "echo", "hello") == 0
    first = capsys.readouterr().out.strip()
    assert deja("hash", "--", "echo", "hello") == 0
    second = capsys.readouterr().out.strip()
    assert deja("hash", "--watch-scope", "v2", "--", "echo", "hello") == 0
    scoped = capsys.readouterr().out.strip()

    assert HEX_KEY.match(first)
    assert first == second
    assert scoped != first


def test_watch_scope_environment_variable_changes_key(
    workdir: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _ = workdir

    assert deja("hash", "--", "echo") == 0
    plain = capsys.readouterr().out
    monkeypatch.setenv("DEJA_WATCH_SCOPE", "nightly")
    assert deja("hash", "--", "echo") == 0
    from_env = capsys.readouterr().out
    monkeypatch.delenv("DEJA_WATCH_SCOPE")
    assert deja("hash", "--watch-scope", "nightly", "--", "echo") == 0
    from_flag = capsys.readouterr().out

    assert from_env != plain
    assert from_env == from_flag


def test_explain_reports_inputs_and_state(
    workdir: Path, counter: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DEPLOY_TARGET", "staging")
    command = counting_script(counter)
    flags = ["--watch-env", "DEPLOY_TARGET", "--watch-env", "MISSING_VAR", "--watch-scope", "ci"]

    assert deja("explain", *flags, "--", *command) == 0
    missing = capsys.readouterr().out
    assert deja("hash", *flags, "--", *command) == 0
    key = capsys.readouterr().out.strip()
    assert deja("run", *flags, "--", *command) == 0
    _ = capsys.readouterr()
    assert deja("explain", *flags, "--", *command) == 0
    fresh = capsys.readouterr().out

    assert f"pwd: {workdir}" in missing
    assert 'scope: "ci"' in missing
    assert "DEPLOY_TARGET: staging" in missing
    assert "MISSING_VAR: <unset>" in missing
    assert f"key: {key}" in missing
    assert f"Missing: no entry found in cache for {key}" in missing
    assert f"Fresh: entry for {key} available in cache" in fresh
    assert runs(counter) == 1


def test_missing_watch_path_fails_without_running(
    workdir: Path, counter: Path, mock_logger: MagicMock
) -> None:
    _ = workdir

    assert deja("run", "--watch-path", "absent.txt", "--", *counting_script(counter)) == 1

    assert runs(counter) == 0
    mock_logger.error.assert_called_once()
    assert str(mock_logger.error.call_args.args[1]) == "watch path 'absent.txt' not found"


def test_unknown_command_fails(workdir: Path, mock_logger: MagicMock) -> None:
    _ = workdir

    assert deja("run", "--", "deja-no-such-program-xyz") == 1
    assert str(mock_logger.error.call_args.args[1]) == "command not found: deja-no-such-program-xyz"


def test_invalid_duration_fails(workdir: Path, mock_logger: MagicMock) -> None:
    _ = workdir

    assert deja("run", "--cache-for", "soon", "--", "echo") == 1
    assert "invalid duration 'soon'" in str(mock_logger.error.call_args.args[1])


def test_unwritable_cache_fails(workdir: Path, tmp_path: Path, mock_logger: MagicMock) -> None:
    _ = workdir
    root = tmp_path / "missing-parent" / "cache"

    assert deja("run", "--cache", str(root), "--", sys.executable, "-c", "pass") == 1
    assert str(mock_logger.error.call_args.args[1]).startswith("unable to write to cache")


def test_unexpected_errors_are_reported(
    workdir: Path, mocker: MockerFixture, mock_logger: MagicMock
) -> None:
    _ = workdir
    _ = mocker.patch(
        "deja.ui.cli.cli.CacheCommand.execute", side_effect=RuntimeError("kaboom")
    )

    assert deja("hash", "--", "echo") == 1
    mock_logger.error.assert_called_once_with("deja: unexpected error: %s", mocker.ANY)


def test_keyboard_interrupt_exits_130(workdir: Path, mocker: MockerFixture) -> None:
    _ = workdir
    _ = mocker.patch("deja.ui.cli.cli.CacheCommand.execute", side_effect=KeyboardInterrupt)

    assert deja("hash", "--", "echo") == 130


def test_missing_command_is_a_usage_error(workdir: Path) -> None:
    _ = workdir

    with pytest.raises(SystemExit) as exc_info:
        _ = deja("run")
    assert exc_info.value.code == 2


def test_errors_are_reported_on_a_single_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Error messages wider than the terminal are not wrapped."""

    monkeypatch.setenv("COLUMNS", "80")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.chdir(tmp_path)
    watched = tmp_path / ("a" * 60) / ("b" * 60) / "watched.txt"

    assert deja("run", "--watch-path", str(watched), "--", sys.executable, "-c", "pass") == 1

    assert capsys.readouterr().err == f"deja: watch path '{watched}' not found\n"


def test_closed_stdout_exits_quietly(
    workdir: Path, mocker: MockerFixture, mock_logger: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    """A reader that goes away ends the run with the shell's SIGPIPE status."""

    _ = workdir
    _ = mocker.patch("deja.ui.cli.cli.CacheCommand.execute", side_effect=BrokenPipeError)

    assert deja("run", "--", "yes") == 141
    mock_logger.error.assert_not_called()
    _ = capsys.readouterr()
