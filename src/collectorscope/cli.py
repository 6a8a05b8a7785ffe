# src/collectorscope/cli.py
"""collectorscope Command Line Interface.

Reports the service ports and RBAC policies implied by the exporters of an
OpenTelemetry Collector configuration file.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Literal

import typer
from pydantic import ValidationError

from collectorscope import __version__
from collectorscope.config_tree import ConfigTree, load_collector_config
from collectorscope.errors import CollectorConfigError, PluginRegistrationError
from collectorscope.factory import Registries, create_registries
from collectorscope.settings import CollectorscopeSettings, load_settings

app = typer.Typer(
    name="collectorscope",
    help="Discover ports and RBAC rules implied by collector exporters.",
    no_args_is_help=True,
)

OutputFormat = Literal["console", "json"]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"collectorscope version {__version__}")
        raise typer.Exit()


def _settings(ctx: typer.Context) -> CollectorscopeSettings:
    settings: CollectorscopeSettings = ctx.obj
    return settings


def _registries(settings: CollectorscopeSettings) -> Registries:
    try:
        return create_registries(load_entrypoints=True, seal=settings.seal_registries)
    except PluginRegistrationError as e:
        typer.echo(f"Error loading exporter plugins: {e}", err=True)
        raise typer.Exit(1) from None


def _load_config(config: Path) -> ConfigTree:
    try:
        return load_collector_config(config.expanduser())
    except FileNotFoundError:
        typer.echo(f"Error: Collector config not found: {config}", err=True)
        raise typer.Exit(1) from None
    except CollectorConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    settings_file: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to a collectorscope settings YAML file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """collectorscope: exporter ports and RBAC rules from collector configs."""
    from collectorscope.logging import configure_logging

    try:
        settings = load_settings(settings_file)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_file}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Settings errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(json_output=json_logs or settings.json_logs, level=log_level)
    ctx.obj = settings


@app.command()
def ports(
    ctx: typer.Context,
    config: Path = typer.Argument(..., help="Path to the collector configuration YAML."),
    output_format: OutputFormat | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: 'console' or 'json' (defaults to settings).",
    ),
) -> None:
    """List the service ports the configured exporters expose."""
    from collectorscope.discovery import exporter_ports
    from collectorscope.logging import get_logger

    settings = _settings(ctx)
    registries = _registries(settings)
    tree = _load_config(config)

    found = exporter_ports(get_logger("collectorscope.ports"), registries.ports, tree)

    if (output_format or settings.output_format) == "json":
        typer.echo(json.dumps([asdict(p) for p in found], indent=2))
        return

    if not found:
        typer.echo("No exporter ports found.")
        return
    for port in found:
        typer.echo(f"{port.name}\t{port.port}/{port.protocol}")


@app.command()
def rbac(
    ctx: typer.Context,
    config: Path = typer.Argument(..., help="Path to the collector configuration YAML."),
    output_format: OutputFormat | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: 'console' or 'json' (defaults to settings).",
    ),
) -> None:
    """List the RBAC policies the configured exporters require."""
    from collectorscope.discovery import exporter_rbac_policies
    from collectorscope.logging import get_logger

    settings = _settings(ctx)
    registries = _registries(settings)
    tree = _load_config(config)

    policies = exporter_rbac_policies(get_logger("collectorscope.rbac"), registries.authz, tree)

    if (output_format or settings.output_format) == "json":
        typer.echo(json.dumps([asdict(p) for p in policies], indent=2))
        return

    if not policies:
        typer.echo("No exporter RBAC rules found.")
        return
    for policy in policies:
        scope = ", ".join(policy.namespaces) if policy.namespaces else "cluster"
        for rule in policy.rules:
            groups = ",".join(g or "core" for g in rule.api_groups)
            typer.echo(f"[{scope}] {groups}: {','.join(rule.resources)} ({','.join(rule.verbs)})")


@app.command("parsers")
def list_parsers(ctx: typer.Context) -> None:
    """List exporter types with a registered port or authz parser."""
    registries = _registries(_settings(ctx))
    typer.echo("Port parsers: " + (", ".join(registries.ports.names()) or "(none)"))
    typer.echo("Authz parsers: " + (", ".join(registries.authz.names()) or "(none)"))


if __name__ == "__main__":
    app()
