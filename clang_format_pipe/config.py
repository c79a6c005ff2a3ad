"""
Configuration for running clang-format.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, fields

from .errors import DefaultStyleAlreadySet
from .style import ClangFormatStyle, CustomStyle, Style, parse_style

DEFAULT_BINARY = "clang-format"
BINARY_ENV_VAR = "CLANG_FORMAT_BINARY"


@dataclass
class FormatterConfig:
    """Configuration options for a clang-format invocation."""

    # Name or path of the clang-format executable
    binary: str = DEFAULT_BINARY

    # Style used when a call does not pass one
    style: Style = ClangFormatStyle.DEFAULT

    # Seconds to wait before killing clang-format (None = wait forever)
    timeout: float | None = None

    # Whether a non-zero exit status is an error for format()
    check_exit_status: bool = True

    # Extra variables layered over os.environ for the child process
    env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict) -> FormatterConfig:
        """Create a config from a dictionary (e.g. a loaded JSON file).

        The "style" key accepts either a style name / inline style string, or a
        mapping of clang-format options.
        """
        config = FormatterConfig()
        known = {f.name for f in fields(FormatterConfig)}
        for k, v in d.items():
            if k not in known:
                raise ValueError(f"Unknown formatter config key: {k}")
            if k == "style":
                v = _style_from_value(v)
            setattr(config, k, v)
        return config

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None, **overrides) -> FormatterConfig:
        """Create a config whose binary is read from CLANG_FORMAT_BINARY.

        Args:
            environ: Mapping to read from, defaults to os.environ
            **overrides: Field values applied after the environment lookup

        Returns:
            FormatterConfig
        """
        environ = os.environ if environ is None else environ
        config = FormatterConfig(binary=environ.get(BINARY_ENV_VAR) or DEFAULT_BINARY)
        for k, v in overrides.items():
            if not hasattr(config, k):
                raise ValueError(f"Unknown formatter config key: {k}")
            setattr(config, k, v)
        return config


def _style_from_value(value) -> Style:
    if isinstance(value, (ClangFormatStyle, CustomStyle)):
        return value
    if isinstance(value, Mapping):
        return CustomStyle.from_options(value)
    if isinstance(value, str):
        return parse_style(value)
    raise ValueError(f"Invalid style value: {value!r}")


# Process-wide default style, set at most once
_default_style: Style | None = None
_default_style_lock = threading.Lock()


def set_default_style(style: Style) -> None:
    """Set the style used by clang_format() for the rest of the process.

    Raises:
        DefaultStyleAlreadySet: If a default style was already set
    """
    global _default_style
    with _default_style_lock:
        if _default_style is not None:
            raise DefaultStyleAlreadySet(f"Default style already set to {_default_style.to_argument()!r}")
        _default_style = style


def get_default_style() -> Style:
    """Return the process-wide default style, ClangFormatStyle.DEFAULT if never set."""
    with _default_style_lock:
        return ClangFormatStyle.DEFAULT if _default_style is None else _default_style
