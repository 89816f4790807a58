"""CLI for sgacrawl configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
import yaml

from .config import ConfigValidationError, default_config, example_yaml, load_store, save_config
from .gate import GateResult, validate_store
from .logging_utils import setup_logging
from .paths import default_config_path, find_config, log_path

app = typer.Typer(
    help=(
        "Crawls SGA! Configure with a .sgacrawl.yaml file.\n\n"
        "Run `sgacrawl example` to print a starting configuration."
    )
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Config file. Defaults to .sgacrawl.yaml in the working directory, then in home.",
)


def load_checked(config: Path | None) -> GateResult:
    """Load the layered configuration and run it through the gate."""
    setup_logging()
    path = find_config(config)
    store = load_store(path)
    if path.exists():
        typer.echo(f"Using config file: {path}")
    result = validate_store(store)
    logger = setup_logging(log_path() if result.settings.log.to_file else None)
    for warning in result.warnings:
        logger.warning("[warn] %s", warning)
    logger.info("finished processing config file successfully")
    return result


def _checked_or_exit(config: Path | None) -> GateResult:
    try:
        return load_checked(config)
    except (ConfigValidationError, yaml.YAMLError, OSError) as exc:
        typer.secho(f"[ERR] {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("validate")
def validate_cmd(config: Path | None = CONFIG_OPTION) -> None:
    """Validate the configuration and report repairs."""
    _checked_or_exit(config)
    typer.echo("OK")


@app.command("show-config")
def show_config(config: Path | None = CONFIG_OPTION) -> None:
    """Print the normalized configuration as JSON."""
    result = _checked_or_exit(config)
    payload = result.settings.model_dump(by_alias=True)
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def init(
    config: Path | None = CONFIG_OPTION,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write an example config file if missing."""
    setup_logging()
    path = config or default_config_path()
    if path.exists() and not force:
        typer.echo(f"{path} already exists, use --force to overwrite.")
        return
    save_config(default_config(), path)
    logging.getLogger("sgacrawl").info("Wrote example config to %s", path)
    typer.echo(f"Wrote {path}")


@app.command()
def example() -> None:
    """Print an example .sgacrawl.yaml."""
    typer.echo(example_yaml())
    typer.echo("# You can copy the text above to a text editor and save it as .sgacrawl.yaml.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
