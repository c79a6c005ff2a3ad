"""
Style selectors passed to clang-format through its ``--style`` flag.

Preset names come from
https://clang.llvm.org/docs/ClangFormatStyleOptions.html#basedonstyle
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import jinja2

# Characters that force a YAML flow scalar to be quoted
_NEEDS_QUOTING = re.compile(r"[\s,:{}\[\]#&*!|>'\"%@`]|^[-?]")

# Plain scalars YAML would read as something other than a string
_RESERVED_WORDS = frozenset({"true", "false", "yes", "no", "y", "n", "on", "off", "null", "~"})
_NUMERIC = re.compile(
    r"^[-+]?(\d[\d_]*(\.\d*)?|\.\d+)([eE][-+]?\d+)?$"
    r"|^0x[0-9a-fA-F]+$|^0o[0-7]+$"
    r"|^[-+]?\.(inf|Inf|INF)$|^\.(nan|NaN|NAN)$"
)

_jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True, autoescape=False)


def _yaml_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Style option values must be scalars, got {type(value).__name__}: {value!r}")
    text = value
    if not text or _NEEDS_QUOTING.search(text) or text.lower() in _RESERVED_WORDS or _NUMERIC.match(text):
        return "'" + text.replace("'", "''") + "'"
    return text


_jinja_env.filters["yaml_scalar"] = _yaml_scalar

_INLINE_OPTIONS = _jinja_env.from_string(
    "{{ '{' }}"
    "{% for key, value in options %}"
    "{{ key }}: {{ value | yaml_scalar }}{% if not loop.last %}, {% endif %}"
    "{% endfor %}"
    "{{ '}' }}"
)


class ClangFormatStyle(str, Enum):
    """Built-in styles understood by clang-format.

    Each value is the exact string clang-format expects after ``--style=``.
    """

    CHROMIUM = "Chromium"
    DEFAULT = "{}"  # Empty options object: clang-format defaults
    FILE = "file"  # Nearest .clang-format in the parent directories
    GNU = "GNU"  # Since clang-format 11
    GOOGLE = "Google"
    LLVM = "LLVM"
    MICROSOFT = "Microsoft"  # Since clang-format 9
    MOZILLA = "Mozilla"
    WEBKIT = "WebKit"

    def to_argument(self) -> str:
        """Render the preset as the value of clang-format's ``--style`` flag."""
        return self.value


@dataclass(frozen=True)
class CustomStyle:
    """A custom ``--style`` value passed to clang-format verbatim.

    The caller is responsible for well-formed syntax, usually a brace-delimited
    list such as ``{BasedOnStyle: Mozilla, IndentWidth: 8}``. Nothing is
    validated here; clang-format rejects malformed styles when it runs.
    """

    value: str

    def to_argument(self) -> str:
        return self.value

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> CustomStyle:
        """Build an inline style from a mapping of clang-format options.

        Examples:
            {"BasedOnStyle": "Mozilla", "IndentWidth": 8} -> "{BasedOnStyle: Mozilla, IndentWidth: 8}"
            {"SortIncludes": False} -> "{SortIncludes: false}"

        Args:
            options: Option names mapped to scalar values, rendered in iteration order

        Returns:
            CustomStyle wrapping the rendered text

        Raises:
            ValueError: If a value is not a string, number or boolean
        """
        return cls(_INLINE_OPTIONS.render(options=list(options.items())))


Style = ClangFormatStyle | CustomStyle

_PRESETS_BY_NAME = {preset.name.lower(): preset for preset in ClangFormatStyle}


def parse_style(text: str) -> Style:
    """Map a user-supplied style name to a preset, falling back to a custom style.

    Preset names are matched case-insensitively against both the enum name and
    the value clang-format expects, so "mozilla", "Mozilla" and "webkit" all
    resolve to presets. Any other text is kept verbatim as a CustomStyle.
    """
    key = text.strip().lower()
    if key in _PRESETS_BY_NAME:
        return _PRESETS_BY_NAME[key]
    for preset in ClangFormatStyle:
        if preset.value.lower() == key:
            return preset
    return CustomStyle(text)
