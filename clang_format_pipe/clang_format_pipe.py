import json
import logging

import click

from .config import FormatterConfig
from .errors import ClangFormatError, EncodingFailure
from .formatter import ClangFormatter
from .style import CustomStyle, parse_style


def _parse_options(options: tuple[str, ...]) -> dict[str, object]:
    parsed = {}
    for option in options:
        key, sep, value = option.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got {option!r}", param_hint="--option")
        value = value.strip()
        if value.lower() in ("true", "false"):
            parsed[key.strip()] = value.lower() == "true"
        elif value.lstrip("-").isdigit():
            parsed[key.strip()] = int(value)
        else:
            parsed[key.strip()] = value
    return parsed


@click.command()
@click.option("--style", "-s", default=None, type=str, help="Preset name (Mozilla, Google, file, ...) or inline style")
@click.option("--option", "-O", "options", multiple=True, help="clang-format option as KEY=VALUE, may be repeated")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--binary", default=None, type=str, help="clang-format executable (default: $CLANG_FORMAT_BINARY or clang-format)")
@click.option("--timeout", default=None, type=float, help="Kill clang-format after this many seconds")
@click.option("--no-check", is_flag=True, default=False, help="Return output even when clang-format exits non-zero")
@click.option("--output", "-o", default="-", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", default="-", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
def clang_format_pipe(style, options, config, binary, timeout, no_check, output, verbose, path):
    """Format PATH (or stdin) with clang-format and write the result to OUTPUT (or stdout)."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if style is not None and options:
        raise click.UsageError("--style and --option cannot be combined")

    formatter_config = FormatterConfig.from_env()
    if config is not None:
        with open(config, encoding="utf-8") as f:
            try:
                loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("Config file must contain a JSON object")
                formatter_config = FormatterConfig.from_dict({"binary": formatter_config.binary, **loaded})
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--config") from e

    # CLI flags override the config file
    if binary is not None:
        formatter_config.binary = binary
    if timeout is not None:
        formatter_config.timeout = timeout
    if no_check:
        formatter_config.check_exit_status = False
    if style is not None:
        formatter_config.style = parse_style(style)
    elif options:
        formatter_config.style = CustomStyle.from_options(_parse_options(options))

    # Bytes in and out so line endings reach clang-format untouched
    with click.open_file(path, "rb") as f:
        data = f.read()

    try:
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingFailure(f"Input {path!r} is not valid UTF-8: {e}") from e
        out = ClangFormatter(formatter_config).format(source)
    except ClangFormatError as e:
        raise click.ClickException(str(e)) from e

    if output == "-":
        click.echo(out.encode("utf-8"), nl=False)
    else:
        with open(output, "wb") as f:
            f.write(out.encode("utf-8"))
