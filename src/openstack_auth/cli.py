"""CLI for openstack-auth."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .auth.base import AuthMethod
from .auth.factory import from_config, from_env
from .exceptions import AuthError
from .logger import sanitize_token, setup_logging


console = Console()
err_console = Console(stderr=True, soft_wrap=True)


def _load_auth(cloud: Optional[str], config: Optional[Path]) -> AuthMethod:
    if cloud:
        return from_config(cloud, config_path=config)
    if config:
        return from_config(config)
    return from_env()


def _fail(error: AuthError) -> None:
    err_console.print(f"[red]Error:[/red] {error.message}")
    sys.exit(1)


cloud_option = click.option(
    '--cloud',
    help='Cloud name in clouds.yaml (defaults to OS_* environment variables)'
)
config_option = click.option(
    '--config', '-c',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to clouds.yaml (or a file holding a single cloud entry)'
)


@click.group()
@click.version_option(version=__version__, prog_name="openstack-auth")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def main(verbose: bool):
    """OpenStack Identity v3 authentication.

    Authenticate with credentials from clouds.yaml or OS_* environment
    variables and inspect the resulting token and service catalog.
    """
    if verbose:
        setup_logging('DEBUG')


@main.command()
@cloud_option
@config_option
@click.option('--show', is_flag=True, help='Print the full token value')
def token(cloud: Optional[str], config: Optional[Path], show: bool):
    """Authenticate and print the issued token."""
    try:
        auth = _load_auth(cloud, config)
        issued = auth.acquire_token()
    except AuthError as e:
        _fail(e)

    if not issued.value:
        console.print("[yellow]No authentication configured; empty token[/yellow]")
        return

    value = issued.value if show else sanitize_token(issued.value)
    expires = issued.expires_at.isoformat() if issued.expires_at else 'never'

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Token", value)
    table.add_row("Expires", expires)
    if issued.project_id:
        table.add_row("Project", issued.project_id)
    if issued.user_id:
        table.add_row("User", issued.user_id)
    table.add_row("Services", str(len(issued.catalog)))
    console.print(table)


@main.command()
@click.argument('service')
@cloud_option
@config_option
@click.option(
    '--interface',
    type=click.Choice(['public', 'internal', 'admin']),
    default=None,
    help='Endpoint interface (defaults to the configured interface)'
)
def endpoint(service: str, cloud: Optional[str], config: Optional[Path], interface: Optional[str]):
    """Print the endpoint URL for SERVICE."""
    try:
        auth = _load_auth(cloud, config)
        url = auth.get_endpoint(service, interface)
    except AuthError as e:
        _fail(e)

    click.echo(url)


@main.command()
@cloud_option
@config_option
def catalog(cloud: Optional[str], config: Optional[Path]):
    """List the service catalog returned with the token."""
    try:
        auth = _load_auth(cloud, config)
        issued = auth.acquire_token()
    except AuthError as e:
        _fail(e)

    if not issued.catalog:
        console.print("[yellow]Service catalog is empty[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Interface")
    table.add_column("Region")
    table.add_column("URL")

    for entry in issued.catalog:
        for ep in entry.endpoints:
            table.add_row(
                entry.type,
                entry.name or '',
                ep.interface,
                ep.region or ep.region_id or '',
                ep.url,
            )

    console.print(table)


if __name__ == '__main__':
    main()
