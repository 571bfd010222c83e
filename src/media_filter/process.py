"""Run an external tool while draining its output streams.

The child's stdout and stderr are read on separate threads while the calling
thread waits for the exit status. Waiting without draining can deadlock once
the child fills the OS pipe buffer.
"""

import logging
import os
import signal
import subprocess
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import BinaryIO

from .exceptions import ProcessLaunchError, ProcessTimeoutError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# Seconds to wait for the reader threads once the process group is dead.
READER_GRACE = 5.0


@dataclass(frozen=True)
class ProcessResult:
    """Exit code and captured output of a finished process."""

    argv: tuple[str, ...]
    returncode: int
    stdout: bytes
    stderr: bytes


class _StreamReader(threading.Thread):
    """Reads a pipe to EOF into memory, then closes it."""

    def __init__(self, stream: BinaryIO, name: str):
        super().__init__(name=name, daemon=True)
        self.stream = stream
        self.chunks: list[bytes] = []

    def run(self) -> None:
        try:
            for chunk in iter(lambda: self.stream.read(CHUNK_SIZE), b""):
                self.chunks.append(chunk)
        finally:
            self.stream.close()

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the process group led by proc, including any children it forked."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _join_readers(readers: list[_StreamReader], timeout: float | None) -> bool:
    """Join the reader threads, returning False if any is still running."""
    deadline = None if timeout is None else time.monotonic() + timeout
    for reader in readers:
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        reader.join(remaining)
    return not any(reader.is_alive() for reader in readers)


def _terminate(proc: subprocess.Popen, readers: list[_StreamReader]) -> None:
    """Kill the tool and its children and reap it.

    The tool runs in its own session, so killing its process group also
    kills children that inherited the output pipes. Readers that still have
    not reached EOF after READER_GRACE seconds are left behind as daemon
    threads; they close their pipe once it does.
    """
    logger.warning(f"Killing process group {proc.pid}")
    _kill_group(proc)
    proc.wait()
    if not _join_readers(readers, READER_GRACE):
        logger.error(f"Output pipes of process {proc.pid} still open after kill")


def run_process(argv: Sequence[str], timeout: float | None = None) -> ProcessResult:
    """Run a command to completion and capture its output.

    The timeout covers both the process exit and draining its output, so a
    child of the tool that holds the pipes open cannot block the call.

    Args:
        argv: Command and arguments; no shell is involved
        timeout: Seconds to wait for the process to exit (None waits forever)

    Returns:
        ProcessResult with the exit code and the complete stdout/stderr bytes

    Raises:
        ProcessLaunchError: If the executable cannot be started
        ProcessTimeoutError: If the process or its output was still open after
                             timeout seconds; its process group is killed
                             before this is raised
    """
    argv = tuple(str(arg) for arg in argv)

    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise ProcessLaunchError(
            f"Unable to start {argv[0]}: {e}", command=argv[0]
        ) from e

    readers = [
        _StreamReader(proc.stdout, name=f"stdout-{proc.pid}"),
        _StreamReader(proc.stderr, name=f"stderr-{proc.pid}"),
    ]
    for reader in readers:
        reader.start()

    started = time.monotonic()
    try:
        returncode = proc.wait(timeout=timeout)
        remaining = None if timeout is None else max(0.0, timeout - (time.monotonic() - started))
        if not _join_readers(readers, remaining):
            raise subprocess.TimeoutExpired(argv, timeout)
    except subprocess.TimeoutExpired as e:
        _terminate(proc, readers)
        raise ProcessTimeoutError(
            f"{argv[0]} did not finish within {timeout} seconds", timeout=timeout
        ) from e
    except BaseException:
        _terminate(proc, readers)
        raise

    stdout, stderr = (reader.data for reader in readers)
    logger.debug(f"Process {proc.pid} exited with {returncode}, {len(stdout)} bytes on stdout")
    return ProcessResult(argv=argv, returncode=returncode, stdout=stdout, stderr=stderr)
