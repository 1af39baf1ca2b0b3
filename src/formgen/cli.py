from __future__ import annotations

import logging
from pathlib import Path

import typer

from formgen.config import Settings, load_config
from formgen.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

cli = typer.Typer(add_completion=False)


def configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(
    config: Path | None,
    output: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    import uvicorn

    from formgen.app import create_app

    settings = Settings()
    configure_logging(settings.log_level, verbose)
    if config is not None:
        settings.config_path = config
    if output is not None:
        settings.output_path = output

    try:
        app = create_app(settings)
    except (ConfigurationError, StorageError) as exc:
        logger.error("Refusing to start: %s", exc)
        raise typer.Exit(code=1) from exc

    resolved_host = host or settings.host
    resolved_port = port if port is not None else settings.port
    uvicorn.run(
        app,
        host=resolved_host,
        port=resolved_port,
        log_level="debug" if verbose else settings.log_level.lower(),
    )


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to the TOML form config"),
    output: Path | None = typer.Option(None, "--output", "-o", help="JSON file receiving the answers"),
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    ctx.obj = {"config": config, "output": output, "host": host, "port": port, "verbose": verbose}
    if ctx.invoked_subcommand is None:
        run_server(config, output, host, port, verbose)


@cli.command()
def run(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to the TOML form config"),
    output: Path | None = typer.Option(None, "--output", "-o", help="JSON file receiving the answers"),
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    base = ctx.obj or {}
    run_server(
        config or base.get("config"),
        output or base.get("output"),
        host or base.get("host"),
        port if port is not None else base.get("port"),
        verbose or bool(base.get("verbose")),
    )


@cli.command()
def check(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to the TOML form config"),
) -> None:
    """Validate a form config and print a summary."""
    base = ctx.obj or {}
    settings = Settings()
    resolved = config or base.get("config") or settings.config_path
    try:
        schema = load_config(resolved, output_override=base.get("output") or settings.output_path)
    except ConfigurationError as exc:
        for message in exc.messages:
            typer.echo(f"error: {message}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"{schema.title}: {len(schema.fields)} fields, answers go to {schema.output_path}")
    for field in schema.fields:
        marker = "*" if field.is_required else " "
        typer.echo(f" {marker} {field.name} ({field.answer_type.value})")


if __name__ == "__main__":
    cli()
