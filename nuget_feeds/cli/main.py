"""Main CLI entry point for nuget-feeds."""

import json
import os
import sys
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import click
import yaml
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..core.configuration import ConfigurationManager, StaticSourcesHelper
from ..core.exceptions import ConfigurationError, NuGetFeedsError
from ..core.interfaces import InstalledPackage, ManagerSource, Package
from ..core.manager import NuGetManager

# Initialize rich console for better output formatting
console = Console()


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    # Check environment variable for log level override
    env_log_level = os.getenv('NUGET_FEEDS_LOG_LEVEL', '').upper()
    if env_log_level in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
        level = getattr(logging, env_log_level)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    log_format = os.getenv('NUGET_FEEDS_LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logging.basicConfig(
        level=level,
        format=log_format
    )


def parse_source_option(value: str) -> ManagerSource:
    """Parse a ``NAME=URL`` source option."""
    name, sep, url = value.partition('=')
    if not sep or not name.strip() or not url.strip():
        raise click.BadParameter(f"expected NAME=URL, got '{value}'")
    return ManagerSource(name=name.strip(), url=url.strip())


def load_installed_packages(file_path: Path, sources: List[ManagerSource]) -> List[InstalledPackage]:
    """
    Load installed packages from a YAML or JSON file.

    Each entry needs ``id``, ``version`` and ``source``; ``source`` names a
    configured source unless ``source_url`` is given as well.
    """
    try:
        entries = yaml.safe_load(file_path.read_text(encoding='utf-8')) or []
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing installed packages file: {e}")
    if not isinstance(entries, list):
        raise ConfigurationError("Installed packages file must contain a list")

    by_name = {source.name: source for source in sources}
    installed = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get('id') or not entry.get('version'):
            raise ConfigurationError(f"Installed package entries need an id and a version, got: {entry!r}")
        source_name = str(entry.get('source', ''))
        if entry.get('source_url'):
            source = ManagerSource(name=source_name or entry['source_url'], url=str(entry['source_url']))
        elif source_name in by_name:
            source = by_name[source_name]
        else:
            raise ConfigurationError(f"Unknown source '{source_name}' for package {entry['id']}")
        installed.append(InstalledPackage(id=str(entry['id']), version=str(entry['version']), source=source))
    return installed


def build_manager(config_path: Optional[str], extra_sources: List[ManagerSource] = None,
                  workers: Optional[int] = None,
                  installed: Optional[List[InstalledPackage]] = None) -> NuGetManager:
    """Build a NuGet manager from the configuration file and CLI overrides."""
    config_manager = ConfigurationManager(config_path)
    feed_config = config_manager.get_feed_config()
    if workers is not None:
        feed_config = replace(feed_config, max_workers=max(workers, 1))

    sources = list(extra_sources) if extra_sources else config_manager.get_sources()
    return NuGetManager(
        properties=config_manager.get_manager_properties(),
        sources_helper=StaticSourcesHelper(sources),
        installed_provider=lambda: list(installed or []),
        config=feed_config
    )


def display_packages(packages: List[Package], title: str, output_format: str = "table"):
    """Display packages as a table or as JSON."""
    if output_format == "json":
        click.echo(json.dumps([package.to_dict() for package in packages], indent=2))
        return

    if not packages:
        console.print(f"[yellow]No packages found for:[/yellow] {title}")
        return

    show_installed = any(package.is_upgradable for package in packages)
    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Id", style="white")
    if show_installed:
        table.add_column("Installed", style="yellow")
    table.add_column("Version", style="green")
    table.add_column("Source", style="magenta")

    for package in packages:
        row = [package.name, package.id]
        if show_installed:
            row.append(package.installed_version or "N/A")
        row.extend([package.version, package.source.name])
        table.add_row(*row)

    console.print(table)


# Global options that apply to all commands
@click.group()
@click.option('--config', '-c', type=click.Path(),
              default=lambda: os.getenv('NUGET_FEEDS_CONFIG'),
              help='Path to configuration file (env: NUGET_FEEDS_CONFIG)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose logging (env: NUGET_FEEDS_VERBOSE)')
@click.pass_context
def cli(ctx, config, verbose):
    """
    Search NuGet feeds and check installed packages for updates.

    \b
    Examples:

      # Search the configured feeds
      nuget-feeds search newtonsoft

      # Search a specific feed
      nuget-feeds search serilog --source nuget.org=https://www.nuget.org/api/v2

      # Check installed packages for updates
      nuget-feeds updates --installed installed.yaml
    """
    ctx.ensure_object(dict)
    ctx.obj['config'] = config

    if not verbose and os.getenv('NUGET_FEEDS_VERBOSE', '').lower() in ['true', '1', 'yes']:
        verbose = True

    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@cli.command()
@click.argument('term')
@click.option('--source', '-s', 'sources', multiple=True,
              help='Feed to search as NAME=URL; repeat for several feeds. Overrides configured sources.')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of feeds queried in parallel')
@click.option('--timeout', '-t', type=float, default=None,
              help='Give up on feeds that have not answered after this many seconds')
@click.option('--format', '-f', 'output_format', default='table', type=click.Choice(['table', 'json']),
              help='Output format')
@click.pass_context
def search(ctx, term, sources, workers, timeout, output_format):
    """
    Search NuGet feeds for packages.

    Feeds that fail are reported and skipped; packages from the other feeds
    are still shown.
    """
    try:
        extra_sources = [parse_source_option(value) for value in sources]
        manager = build_manager(ctx.obj['config'], extra_sources=extra_sources, workers=workers)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
            disable=output_format == 'json',
        ) as progress:
            task = progress.add_task(f"Searching for '{term}'...", total=None)
            packages = manager.find_packages(term, deadline=timeout)
            progress.update(task, completed=True)

        display_packages(packages, f"Search Results for '{term}'", output_format)

    except NuGetFeedsError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@cli.command()
@click.option('--installed', '-i', required=True, type=click.Path(exists=True, dir_okay=False),
              help='YAML or JSON file listing installed packages (id, version, source)')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of feeds queried in parallel')
@click.option('--timeout', '-t', type=float, default=None,
              help='Give up on feeds that have not answered after this many seconds')
@click.option('--format', '-f', 'output_format', default='table', type=click.Choice(['table', 'json']),
              help='Output format')
@click.pass_context
def updates(ctx, installed, workers, timeout, output_format):
    """
    List available updates for installed packages.
    """
    try:
        config_manager = ConfigurationManager(ctx.obj['config'])
        installed_packages = load_installed_packages(Path(installed), config_manager.get_sources())
        manager = build_manager(ctx.obj['config'], workers=workers, installed=installed_packages)

        packages = manager.get_available_updates(deadline=timeout)
        display_packages(packages, "Available Updates", output_format)

    except NuGetFeedsError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def main() -> int:
    """Main CLI entry point."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except SystemExit as e:
        return e.code


if __name__ == '__main__':
    sys.exit(main())
