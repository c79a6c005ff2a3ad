"""clang-format pipe

A small wrapper that formats text by piping it through the system's
clang-format binary, with typed styles and typed errors.
"""

__version__ = "1.0.1"

from .config import BINARY_ENV_VAR, DEFAULT_BINARY, FormatterConfig, get_default_style, set_default_style
from .errors import (
    ClangFormatError,
    DefaultStyleAlreadySet,
    EncodingFailure,
    FormatTimeout,
    NonZeroExit,
    PipeUnavailable,
    SpawnFailure,
    WaitFailure,
    WriteFailure,
)
from .formatter import ClangFormatter, FormatResult, clang_format, clang_format_with_style
from .style import ClangFormatStyle, CustomStyle, Style, parse_style

__all__ = [
    "clang_format",
    "clang_format_with_style",
    "ClangFormatter",
    "FormatResult",
    "FormatterConfig",
    "ClangFormatStyle",
    "CustomStyle",
    "Style",
    "parse_style",
    "get_default_style",
    "set_default_style",
    "BINARY_ENV_VAR",
    "DEFAULT_BINARY",
    "ClangFormatError",
    "SpawnFailure",
    "PipeUnavailable",
    "WriteFailure",
    "WaitFailure",
    "EncodingFailure",
    "NonZeroExit",
    "FormatTimeout",
    "DefaultStyleAlreadySet",
]
