from __future__ import annotations

from pathlib import Path

import click

from filesize.config_loader import AppConfig, load_config
from filesize.env_loader import load_env_file
from filesize.logging_setup import get_logger, setup_logging
from filesize.size_parser import parse

LOGGER = get_logger(__name__, "CLI")


@click.group()
@click.option("--env-file", type=click.Path(path_type=Path), default=None, help="KEY=VALUE file with FILESIZE_* settings.")
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path), default=None, help="YAML config file.")
@click.pass_context
def main(ctx: click.Context, env_file: Path | None, config_path: Path | None) -> None:
    """filesize commands."""
    if env_file is not None:
        load_env_file(env_file)
    cfg = AppConfig()
    if config_path is not None:
        try:
            cfg = load_config(config_path)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
    setup_logging(cfg.logging)
    LOGGER.debug("CLI bootstrap completed config=%s", config_path or "-")
    ctx.obj = cfg


@main.command("parse")
@click.argument("values", nargs=-1, required=True)
@click.option("--default", "default_value", type=int, default=None, help="Bytes to print when a value cannot be parsed.")
@click.pass_obj
def parse_command(cfg: AppConfig, values: tuple[str, ...], default_value: int | None) -> None:
    """Print the byte count of each VALUE (for example 10MB, 1.5G, 2048)."""
    fallback = cfg.parser.default_size if default_value is None else default_value
    LOGGER.debug("CLI parse command count=%s default=%s", len(values), fallback)
    for value in values:
        click.echo(f"{value}\t{parse(value, fallback)}")


if __name__ == "__main__":
    main()
