"""
Run clang-format as a subprocess over stdin/stdout.

One call spawns exactly one process. The input is written on its own thread
while stdout and stderr are drained on two others, so payloads larger than the
OS pipe buffers cannot deadlock the exchange. stdin is always closed once the
input is written; clang-format reads until end-of-input and would otherwise
block forever.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shlex
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import IO

from .config import FormatterConfig, get_default_style
from .errors import (
    EncodingFailure,
    FormatTimeout,
    NonZeroExit,
    PipeUnavailable,
    SpawnFailure,
    WaitFailure,
    WriteFailure,
)
from .style import Style

logger = logging.getLogger(__name__)

# Seconds allowed for reaping a child that has already closed its pipes
_REAP_GRACE = 5.0


@dataclass(frozen=True)
class FormatResult:
    """Outcome of a completed clang-format run.

    Attributes:
        output: Decoded stdout, exactly as written by clang-format
        returncode: Exit status of the process
        stderr: Decoded stderr (invalid bytes replaced)
    """

    output: str
    returncode: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _feed(stream: IO[bytes], payload: bytes, errors: list[OSError]) -> None:
    try:
        stream.write(payload)
    except OSError as e:
        errors.append(e)
    finally:
        try:
            stream.close()
        except OSError as e:
            errors.append(e)


def _drain(stream: IO[bytes], chunks: list[bytes], errors: list[OSError]) -> None:
    try:
        chunks.append(stream.read())
    except OSError as e:
        errors.append(e)
    finally:
        stream.close()


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


class ClangFormatter:
    """Formats source text by piping it through clang-format."""

    def __init__(self, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()
        self._available = None
        self._version = None

    def build_command(self, style: Style | None = None) -> list[str]:
        """Build the argument list for one invocation.

        The ``--style`` flag is omitted when the style renders to an empty string,
        leaving the choice entirely to clang-format.
        """
        style = self.config.style if style is None else style
        command = [self.config.binary]
        argument = style.to_argument()
        if argument:
            command.append(f"--style={argument}")
        return command

    def run(self, input: str, style: Style | None = None) -> FormatResult:
        """
        Pipe ``input`` through clang-format and collect the result.

        The exit status is reported in the returned FormatResult and never raised,
        so callers can apply their own policy. Use format() for the checked variant.

        Args:
            input: Source text to format (may be empty)
            style: Style to request, defaults to the configured style

        Returns:
            FormatResult with the decoded output

        Raises:
            SpawnFailure: If the process cannot be launched
            PipeUnavailable: If the child's stdin is missing
            WriteFailure: If the input cannot be written to the child
            WaitFailure: If waiting for the child or reading its output fails
            EncodingFailure: If the input or output is not valid UTF-8
            FormatTimeout: If the configured timeout expires
        """
        try:
            payload = input.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingFailure(f"Input is not encodable as UTF-8: {e}") from e

        command = self.build_command(style)
        logger.debug("Running %s on %d bytes", shlex.join(command), len(payload))

        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._child_env(),
            )
        except OSError as e:
            raise SpawnFailure(command[0], str(e)) from e

        if process.stdin is None or process.stdout is None or process.stderr is None:
            self._kill(process)
            self._close_pipes(process)
            raise PipeUnavailable(f"No stdin/stdout pipe for {command[0]!r}")

        write_errors: list[OSError] = []
        read_errors: list[OSError] = []
        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        threads = [
            threading.Thread(target=_feed, args=(process.stdin, payload, write_errors), daemon=True),
            threading.Thread(target=_drain, args=(process.stdout, stdout_chunks, read_errors), daemon=True),
            threading.Thread(target=_drain, args=(process.stderr, stderr_chunks, read_errors), daemon=True),
        ]
        for thread in threads:
            thread.start()

        timeout = self.config.timeout
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in threads:
            thread.join(_remaining(deadline))
            if thread.is_alive():
                self._kill(process, threads)
                raise FormatTimeout(timeout)

        # All pipes are closed here, so the child is exiting; a late reap is not a timeout
        reap_timeout = None if deadline is None else max(_remaining(deadline), _REAP_GRACE)
        try:
            returncode = process.wait(timeout=reap_timeout)
        except subprocess.TimeoutExpired as e:
            self._kill(process, threads)
            raise FormatTimeout(timeout) from e
        except OSError as e:
            self._abandon(process)
            raise WaitFailure(f"Failed to wait for {command[0]!r}: {e}") from e
        logger.debug("%s exited with status %d", command[0], returncode)

        if read_errors:
            raise WaitFailure(f"Failed to read output of {command[0]!r}: {read_errors[0]}") from read_errors[0]

        stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
        if write_errors:
            raise WriteFailure(
                f"Failed to write input to {command[0]!r}: {write_errors[0]}",
                returncode=returncode,
                stderr=stderr,
            ) from write_errors[0]

        try:
            output = b"".join(stdout_chunks).decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingFailure(f"Output of {command[0]!r} is not valid UTF-8: {e}") from e

        return FormatResult(output=output, returncode=returncode, stderr=stderr)

    def format(self, input: str, style: Style | None = None) -> str:
        """
        Format ``input`` and return the formatted text.

        When ``check_exit_status`` is enabled a non-zero exit status raises
        NonZeroExit, including the case where clang-format exited before reading
        all of its input. Otherwise the output is returned regardless of status.

        Args:
            input: Source text to format
            style: Style to request, defaults to the configured style

        Returns:
            Formatted text
        """
        check = self.config.check_exit_status
        try:
            result = self.run(input, style)
        except WriteFailure as e:
            if check and e.returncode:
                raise NonZeroExit(e.returncode, "", e.stderr) from e
            raise
        if check and not result.ok:
            raise NonZeroExit(result.returncode, result.output, result.stderr)
        return result.output

    def is_available(self) -> bool:
        """Check if the configured clang-format binary runs."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.config.binary, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                    env=self._child_env(),
                )
                self._available = result.returncode == 0
                self._version = result.stdout.strip()
            except (subprocess.SubprocessError, OSError):
                self._available = False
        return self._available

    def version(self) -> str:
        """Return the version banner printed by ``clang-format --version``.

        Raises:
            SpawnFailure: If the binary is not available
        """
        if not self.is_available():
            raise SpawnFailure(self.config.binary, "--version did not succeed")
        return self._version

    def _child_env(self) -> dict[str, str] | None:
        if not self.config.env:
            return None
        return {**os.environ, **self.config.env}

    @staticmethod
    def _kill(process: subprocess.Popen, threads: list[threading.Thread] = ()) -> None:
        logger.debug("Killing process %d", process.pid)
        process.kill()
        # Killing the child closes its pipe ends, which unblocks the I/O threads
        for thread in threads:
            thread.join()
        process.wait()

    @staticmethod
    def _close_pipes(process: subprocess.Popen) -> None:
        for stream in (process.stdin, process.stdout, process.stderr):
            if stream is not None:
                stream.close()

    @staticmethod
    def _abandon(process: subprocess.Popen) -> None:
        # The wait already failed; reap errors here are secondary to it
        logger.debug("Killing process %d after failed wait", process.pid)
        with contextlib.suppress(OSError):
            process.kill()
            process.wait(timeout=_REAP_GRACE)


def clang_format_with_style(input: str, style: Style) -> str:
    """
    Format ``input`` with clang-format using the given style.

    The binary is resolved from the CLANG_FORMAT_BINARY environment variable,
    falling back to "clang-format".
    """
    return ClangFormatter(FormatterConfig.from_env()).format(input, style)


def clang_format(input: str) -> str:
    """Format ``input`` using the process-wide default style (ClangFormatStyle.DEFAULT unless set)."""
    return clang_format_with_style(input, get_default_style())
