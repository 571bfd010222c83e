"""Tests for the external process runner."""

import subprocess
import time
from unittest.mock import patch

import pytest

from media_filter.exceptions import ProcessLaunchError, ProcessTimeoutError
from media_filter.process import ProcessResult, run_process


class TestRunProcess:
    """Tests for run_process()."""

    def test_captures_exit_code_and_output(self):
        """stdout and stderr are captured separately."""
        result = run_process(["/bin/sh", "-c", "printf hello; printf oops >&2; exit 4"])

        assert isinstance(result, ProcessResult)
        assert result.returncode == 4
        assert result.stdout == b"hello"
        assert result.stderr == b"oops"

    def test_argv_is_recorded_as_strings(self, tmp_path):
        result = run_process(["/bin/sh", "-c", "exit 0", tmp_path])

        assert result.argv == ("/bin/sh", "-c", "exit 0", str(tmp_path))

    def test_drains_output_larger_than_pipe_buffer(self):
        """Large stdout and stderr do not block the child."""
        result = run_process(
            ["/bin/sh", "-c", "head -c 1048576 /dev/zero; head -c 262144 /dev/zero >&2"],
            timeout=30,
        )

        assert len(result.stdout) == 1048576
        assert len(result.stderr) == 262144

    def test_missing_executable_raises_launch_error(self, tmp_path):
        missing = tmp_path / "pdftotext"

        with pytest.raises(ProcessLaunchError) as exc_info:
            run_process([missing, "-"])

        assert exc_info.value.command == str(missing)

    def test_non_executable_file_raises_launch_error(self, tmp_path):
        script = tmp_path / "pdftotext"
        script.write_text("#!/bin/sh\nexit 0\n")
        script.chmod(0o644)

        with pytest.raises(ProcessLaunchError):
            run_process([script])

    def test_timeout_kills_process(self):
        """A process still running at the timeout is killed."""
        start = time.monotonic()

        with pytest.raises(ProcessTimeoutError) as exc_info:
            run_process(["sleep", "30"], timeout=0.2)

        assert exc_info.value.timeout == 0.2
        assert time.monotonic() - start < 10

    def test_timeout_kills_children_holding_pipes(self):
        """Children of the tool that inherited stdout are killed with it."""
        start = time.monotonic()

        with pytest.raises(ProcessTimeoutError):
            run_process(["/bin/sh", "-c", "sleep 30; exit 0"], timeout=0.5)

        assert time.monotonic() - start < 10

    def test_lingering_child_after_exit_times_out(self):
        """A background child keeping stdout open cannot outlast the timeout."""
        start = time.monotonic()

        with pytest.raises(ProcessTimeoutError):
            run_process(["/bin/sh", "-c", "sleep 30 & exit 0"], timeout=0.5)

        assert time.monotonic() - start < 10

    def test_interrupted_wait_kills_process(self):
        """An exception during the wait kills the child and propagates."""
        real_wait = subprocess.Popen.wait
        calls = []

        def interrupted_wait(self, timeout=None):
            calls.append(timeout)
            if len(calls) == 1:
                raise KeyboardInterrupt
            return real_wait(self, timeout=timeout)

        start = time.monotonic()
        with patch.object(subprocess.Popen, "wait", interrupted_wait):
            with pytest.raises(KeyboardInterrupt):
                run_process(["sleep", "30"])

        assert len(calls) == 2
        assert time.monotonic() - start < 10
