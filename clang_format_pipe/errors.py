"""
Errors raised while running clang-format.

Every failure of a formatting call surfaces as one of these; nothing is retried
or swallowed. The underlying OS error, when there is one, is chained as
``__cause__``.
"""

from __future__ import annotations


class ClangFormatError(Exception):
    """Base class for all failures of a clang-format invocation."""

    pass


class SpawnFailure(ClangFormatError):
    """The clang-format binary could not be launched (not found, not executable, ...)."""

    def __init__(self, binary: str, reason: str):
        super().__init__(f"Failed to spawn {binary!r}: {reason}")
        self.binary = binary


class PipeUnavailable(ClangFormatError):
    """The stdin handle of the spawned process could not be retrieved."""

    pass


class WriteFailure(ClangFormatError):
    """Writing the input to clang-format's stdin failed.

    Usually a broken pipe: the process exited before reading all of its input.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class WaitFailure(ClangFormatError):
    """Waiting for the process or collecting its output failed at the OS level."""

    pass


class EncodingFailure(ClangFormatError):
    """clang-format wrote output that is not valid UTF-8."""

    pass


class NonZeroExit(ClangFormatError):
    """clang-format ran to completion but reported failure through its exit status.

    Attributes:
        returncode: Exit status of the process
        stdout: Whatever the process wrote to stdout (decoded)
        stderr: Diagnostics written to stderr (decoded, lossy)
    """

    def __init__(self, returncode: int, stdout: str = "", stderr: str = ""):
        message = f"clang-format exited with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class FormatTimeout(ClangFormatError):
    """clang-format did not finish within the configured timeout and was killed."""

    def __init__(self, timeout: float):
        super().__init__(f"clang-format did not finish within {timeout} seconds")
        self.timeout = timeout


class DefaultStyleAlreadySet(ClangFormatError):
    """The process-wide default style was initialised more than once."""

    pass
