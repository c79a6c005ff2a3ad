import shlex
import stat
import sys
import textwrap

import pytest

from clang_format_pipe import config as config_module


@pytest.fixture
def fake_tool(tmp_path):
    """Factory writing an executable that stands in for clang-format.

    The body is Python run with ``sys`` imported; ``args`` holds the command line
    arguments. The executable is a /bin/sh launcher so long interpreter paths do
    not hit the shebang length limit.
    """

    def make(body: str, name: str = "fake-clang-format") -> str:
        script = tmp_path / f"{name}.py"
        script.write_text("import sys\nargs = sys.argv[1:]\n" + textwrap.dedent(body))
        launcher = tmp_path / name
        launcher.write_text(f'#!/bin/sh\nexec {shlex.quote(sys.executable)} {shlex.quote(str(script))} "$@"\n')
        launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(launcher)

    return make


@pytest.fixture
def echo_tool(fake_tool):
    """A fake clang-format that prints its arguments on stderr and echoes stdin to stdout."""
    return fake_tool(
        """
        sys.stderr.write(" ".join(args))
        sys.stdout.buffer.write(sys.stdin.buffer.read())
        """
    )


@pytest.fixture
def reset_default_style(monkeypatch):
    monkeypatch.setattr(config_module, "_default_style", None)
