"""Command-line check of a ledger gateway configuration."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, Field, ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .domain.enums import IntegrationStatus
from .infrastructure.bootstrap import start_ledger_integration
from .infrastructure.config import GatewaySettings
from .infrastructure.simple_logger import SimpleLogger


class CheckReport(BaseModel):
    """Result of bootstrapping the gateway once."""

    status: IntegrationStatus
    msp_id: str | None = None
    user: str | None = None
    endpoint: str | None = None
    server_name: str | None = None
    timeouts: dict[str, float] = Field(default_factory=dict)
    error: str | None = None
    error_details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        return self.status == IntegrationStatus.READY


async def run_check(settings: GatewaySettings, log_level: int = logging.WARNING) -> CheckReport:
    """Bootstrap the gateway, describe the outcome and release the channel."""
    integration = await start_ledger_integration(
        settings, logger=SimpleLogger(name="ledger_gateway.cli", level=log_level)
    )
    report = CheckReport(
        status=integration.status,
        msp_id=str(settings.msp_id) if settings.msp_id else None,
        user=settings.user,
        timeouts=settings.timeouts.model_dump(),
    )
    try:
        if integration.session is not None:
            channel = integration.session.channel
            report.endpoint = channel.target
            report.server_name = getattr(channel, "server_name", None)
        if integration.error is not None:
            report.error = integration.error.message
            report.error_details = integration.error.details
    finally:
        await integration.close()
    return report


def display_report(report: CheckReport, console: Console) -> None:
    style = "green" if report.is_ready else "red" if report.error else "yellow"
    console.print(Panel(f"Ledger integration: {report.status.value}", style=f"bold {style}"))

    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("MSP ID", report.msp_id or "-")
    table.add_row("User", report.user or "-")
    table.add_row("Peer endpoint", report.endpoint or "-")
    table.add_row("TLS server name", report.server_name or "-")
    for category, seconds in report.timeouts.items():
        table.add_row(f"{category} timeout", f"{seconds:g}s")
    console.print(table)

    if report.error:
        console.print(f"[red]Error:[/red] {report.error}")
        for key, value in report.error_details.items():
            console.print(f"  • {key}: {value}")


@click.command()
@click.option(
    "--network-config",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="LEDGER_GATEWAY_NETWORK_CONFIG",
    help="Network configuration (connection profile) file",
)
@click.option("--msp-id", "-m", envvar="LEDGER_GATEWAY_MSP_ID", help="Organization MSP ID")
@click.option("--user", "-u", envvar="LEDGER_GATEWAY_USER", help="User within the organization")
@click.option("--server-name", envvar="LEDGER_GATEWAY_SERVER_NAME", help="TLS server name override")
@click.option(
    "--wait-ready",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for the TLS handshake with the peer",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level for bootstrap diagnostics",
)
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
def main(
    network_config: Path | None,
    msp_id: str | None,
    user: str | None,
    server_name: str | None,
    wait_ready: float | None,
    log_level: str,
    as_json: bool,
):
    """Bootstrap the ledger gateway once and report whether it is ready."""
    try:
        settings = GatewaySettings(
            network_config=network_config,
            msp_id=msp_id,
            user=user,
            server_name=server_name,
            wait_for_ready=wait_ready,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    report = asyncio.run(run_check(settings, getattr(logging, log_level.upper())))

    if as_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        display_report(report, Console())

    sys.exit(0 if report.is_ready else 1)


if __name__ == "__main__":
    main()
