"""Inventory CLI commands - scan, installers, compat."""
import json
from typing import Any, Dict, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from macutils.cli_support import handle_cli_error, load_config, print_info, print_warning
from macutils.compat.model_year import ModelCompatibilityEngine
from macutils.core.errors import MacUtilsError
from macutils.discovery.hwdetect import SystemDetector
from macutils.discovery.scanner import build_scanner
from macutils.inventory.repository import ItemRepository
from macutils.models.versions import VersionCatalog

# Module-level console instance (will be set by register function)
console: Console = Console()

OUTPUT_FORMATS = ("table", "json", "yaml")


def inventory_to_dict(repository: ItemRepository) -> Dict[str, Any]:
    """Plain-data view of the repository for JSON/YAML output."""
    return {
        "disks": [
            {
                "device_identifier": disk.device_identifier,
                "content": disk.content,
                "size": disk.size,
                "unit": disk.measurement_unit.value,
                "installable": disk.is_installable,
                "fake": disk.is_fake,
            }
            for disk in repository.get_disks()
        ],
        "volumes": [
            {
                "name": volume.volume_name,
                "device_identifier": volume.device_identifier,
                "mount_point": volume.mount_point,
                "content": volume.content,
                "size": volume.size,
                "unit": volume.measurement_unit.value,
                "installable": volume.is_installable,
                "contains_installer": volume.contains_installer,
                "disk": volume.parent_disk.device_identifier,
            }
            for volume in repository.get_volumes()
        ],
        "installers": [
            {
                "name": installer.version_name,
                "version": installer.version_number,
                "app": str(installer.app_path),
                "valid": installer.is_valid,
                "can_install": installer.can_install,
            }
            for installer in repository.get_installers()
        ],
    }


def _scan(config_path: Optional[str], model: Optional[str], mock: bool) -> ItemRepository:
    config = load_config(config_path, model=model, mock=mock)
    repository = ItemRepository(sort_installers_numerically=config.sort_installers_numerically)
    scanner = build_scanner(repository, config)
    scanner.scan()
    if not config.mock:
        scanner.discover_network_volumes()
    return repository


def _render_tables(repository: ItemRepository) -> None:
    disks = Table(title="Disks")
    disks.add_column("Device")
    disks.add_column("Content")
    disks.add_column("Size", justify="right")
    disks.add_column("Installable")
    for disk in repository.get_disks():
        disks.add_row(
            disk.device_identifier,
            disk.content,
            f"{disk.size:g} {disk.measurement_unit.value}",
            "[green]yes[/green]" if disk.is_installable else "[dim]no[/dim]",
        )
    console.print(disks)

    volumes = Table(title="Volumes")
    volumes.add_column("Name")
    volumes.add_column("Device")
    volumes.add_column("Mount Point")
    volumes.add_column("Size", justify="right")
    volumes.add_column("Installer")
    for volume in repository.get_volumes():
        volumes.add_row(
            volume.volume_name,
            volume.device_identifier,
            volume.mount_point,
            f"{volume.size:g} {volume.measurement_unit.value}",
            volume.installer.version_number if volume.contains_installer else "",
        )
    console.print(volumes)

    _render_installers(repository)


def _render_installers(repository: ItemRepository) -> None:
    installers = repository.get_installers()
    if not installers:
        print_warning(console, "No installers found")
        return

    table = Table(title="Installers")
    table.add_column("Version")
    table.add_column("Name")
    table.add_column("Location")
    table.add_column("Can Install")
    for installer in installers:
        table.add_row(
            installer.version_number,
            installer.version_name,
            str(installer.app_path),
            "[green]yes[/green]" if installer.can_install else "[red]no[/red]",
        )
    console.print(table)


def register_inventory_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register scan, installers and compat commands with the main app."""
    global console
    console = shared_console

    @app.command()
    def scan(
        output_format: str = typer.Option("table", "--format", "-f", help="table, json or yaml"),
        model: Optional[str] = typer.Option(None, "--model", "-m", help="Model identifier override"),
        mock: bool = typer.Option(False, "--mock", help="Use canned disk records"),
        config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to macutils.yml"),
    ):
        """Scan disks and volumes and list what was found."""
        if output_format not in OUTPUT_FORMATS:
            console.print(f"[red]Unknown format '{output_format}'. Use one of: {', '.join(OUTPUT_FORMATS)}[/red]")
            raise typer.Exit(2)

        try:
            repository = _scan(config_path, model, mock)
        except MacUtilsError as e:
            handle_cli_error(e, console)

        if output_format == "json":
            typer.echo(json.dumps(inventory_to_dict(repository), indent=2))
        elif output_format == "yaml":
            typer.echo(yaml.safe_dump(inventory_to_dict(repository), sort_keys=False))
        else:
            _render_tables(repository)

    @app.command()
    def installers(
        model: Optional[str] = typer.Option(None, "--model", "-m", help="Model identifier override"),
        mock: bool = typer.Option(False, "--mock", help="Use canned disk records"),
        config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to macutils.yml"),
    ):
        """List installer volumes and whether this Mac can run them."""
        try:
            repository = _scan(config_path, model, mock)
        except MacUtilsError as e:
            handle_cli_error(e, console)
        _render_installers(repository)

    @app.command()
    def compat(
        model: Optional[str] = typer.Argument(None, help="Model identifier, e.g. MacBookPro15,1 (default: this Mac)"),
        config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to macutils.yml"),
    ):
        """Show which macOS installers a model may run."""
        if model is None:
            try:
                config = load_config(config_path)
            except MacUtilsError as e:
                handle_cli_error(e, console)
            model = SystemDetector(config=config).detect_model_identifier()

        versions = ModelCompatibilityEngine(model).determine_installable_versions()
        print_info(console, f"{model} can install:")
        for version in versions:
            console.print(f"  {version}  {VersionCatalog.name_for_version(version)}")
