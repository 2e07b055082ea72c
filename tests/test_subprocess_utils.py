from __future__ import annotations

import sys

import pytest

from cloudrun_kit.errors import CommandError
from cloudrun_kit.subprocess_utils import command_exists, run_command


def test_capture_mode_returns_stdout_lines() -> None:
    result = run_command([sys.executable, "-c", "print('a'); print(); print(' b ')"], timeout=30)

    assert result.returncode == 0
    assert result.lines() == ["a", "b"]


def test_failure_keeps_exit_code_and_stderr() -> None:
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(4)"]

    with pytest.raises(CommandError) as excinfo:
        run_command(cmd, timeout=30)

    assert excinfo.value.returncode == 4
    assert excinfo.value.exit_code == 4
    assert "boom" in str(excinfo.value)


def test_stream_mode_failure_keeps_exit_code() -> None:
    with pytest.raises(CommandError) as excinfo:
        run_command([sys.executable, "-c", "import sys; sys.exit(5)"], stream_output=True, timeout=30)

    assert excinfo.value.exit_code == 5


def test_missing_executable_is_command_error() -> None:
    with pytest.raises(CommandError) as excinfo:
        run_command(["definitely-not-a-real-binary-xyz"])

    assert excinfo.value.returncode is None
    assert excinfo.value.exit_code == 1


def test_command_exists() -> None:
    assert command_exists(sys.executable)
    assert not command_exists("definitely-not-a-real-binary-xyz")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX 시그널 전용")
def test_stream_mode_killed_by_signal_maps_to_shell_exit_code() -> None:
    cmd = [sys.executable, "-c", "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"]

    with pytest.raises(CommandError) as excinfo:
        run_command(cmd, stream_output=True, timeout=30)

    assert excinfo.value.returncode == -15
    assert excinfo.value.exit_code == 143
