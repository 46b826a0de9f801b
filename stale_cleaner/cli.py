"""Command-line interface for stale cleaner."""

import logging
import os
import sys
import tempfile
from datetime import datetime
import click
from typing import Optional

from .config.config_manager import ConfigManager
from .core.cleaner import StaleFileCleaner
from .core.exceptions import InvalidTargetError, StaleCleanerError
from .core.guard import PathGuard
from .core.models import ScanTarget
from .reporters.run_log import RunLog
from .utils.formatters import format_date, format_duration, format_file_size


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def _load_config(ctx) -> ConfigManager:
    config_manager = ConfigManager(ctx.obj.get('config_path'))
    config_manager.load_config()

    # Configured level applies unless --log-level was given explicitly
    if not ctx.obj.get('log_level_explicit'):
        level = config_manager.get_logging_config().get('level', 'INFO')
        logging.getLogger().setLevel(getattr(logging, str(level).upper()))
    return config_manager


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--log-file',
              help='Console log mirror file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: str, log_file: Optional[str]):
    """Stale Cleaner - Remove stale files and empty directories."""

    ctx.ensure_object(dict)

    # Set up logging first
    setup_logging(log_level, log_file)

    ctx.obj['config_path'] = config_path
    ctx.obj['log_level_explicit'] = (
        ctx.get_parameter_source('log_level') != click.core.ParameterSource.DEFAULT
    )


@cli.command()
@click.option('--path', '-p', help='Directory to clean (default: platform temp directory)')
@click.option('--age', '-a', 'age_days', type=click.IntRange(min=0),
              help='Remove entries last modified more than this many days ago')
@click.option('--extension', '-e', help='Only remove files with this exact extension, e.g. .log')
@click.option('--force', '-f', is_flag=True, help='Do not ask for confirmation')
@click.option('--dry-run', is_flag=True, help='Report what would be removed without deleting')
@click.option('--log-retention-days', type=click.IntRange(min=0),
              help='Days of run logs to keep (default: 7)')
@click.option('--allow-system-paths', is_flag=True, help='Permit cleaning protected system paths')
@click.option('--verbose', '-v', is_flag=True, help='List every item found and removed')
@click.pass_context
def clean(ctx, path: Optional[str], age_days: Optional[int], extension: Optional[str],
          force: bool, dry_run: bool, log_retention_days: Optional[int],
          allow_system_paths: bool, verbose: bool):
    """Remove stale files and stale empty directories."""
    try:
        config_manager = _load_config(ctx)
        cleanup_config = config_manager.get_cleanup_config()
        logging_config = config_manager.get_logging_config()

        if age_days is None:
            age_days = cleanup_config.get('age_days')
        if age_days is None:
            message = "Missing option '--age' (not set in configuration either)."
            _run_log_for(logging_config).error(message)
            raise click.UsageError(message)

        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        try:
            target = ScanTarget(
                path=path or cleanup_config.get('path') or _default_path(),
                age_days=age_days,
                extension=extension or cleanup_config.get('extension'),
                force=force,
                dry_run=dry_run,
                allow_system_paths=allow_system_paths or cleanup_config.get('allow_system_paths', False),
                log_retention_days=(log_retention_days if log_retention_days is not None
                                    else logging_config.get('retention_days', 7)),
            )
        except InvalidTargetError as e:
            _run_log_for(logging_config).error(str(e))
            raise

        cleaner = StaleFileCleaner.from_config(config_manager)
        summary = cleaner.run(target)

    except (StaleCleanerError, FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("\nCleanup Summary:")
    click.echo("=" * 50)
    if summary.aborted:
        click.echo("⚠️  Scan aborted: the target directory could not be listed")
    elif summary.found == 0:
        click.echo("✅ No stale files found")
    elif summary.dry_run:
        click.echo(f"🔎 Dry run: would remove {summary.found} item(s)")
        if verbose:
            for candidate in summary.candidates:
                click.echo(f"   • {candidate.item_type}: {candidate.path}")
    elif summary.cancelled:
        click.echo(f"❌ Cancelled: {summary.found} item(s) left in place")
    else:
        click.echo(f"  Items found: {summary.found}")
        click.echo(f"  Items removed: {summary.removed} ({format_file_size(summary.bytes_removed)})")
        click.echo(f"  Items failed: {summary.failed}")
        for failure in summary.failures:
            click.echo(f"   • {failure.path}: {failure.message}")
    click.echo(f"  Duration: {format_duration(summary.duration)}")
    click.echo(f"  Log file: {cleaner.run_log.log_path}")


@cli.command()
def protected_paths():
    """Show the protected system paths for this platform."""
    guard = PathGuard()
    click.echo(f"Protected paths ({guard.provider.name}):")
    for path in guard.provider.protected_paths():
        click.echo(f"   • {path}")


@cli.command()
@click.pass_context
def logs(ctx):
    """List the daily run log files."""
    try:
        config_manager = _load_config(ctx)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(1)

    logging_config = config_manager.get_logging_config()
    run_log = _run_log_for(logging_config)
    log_files = run_log.list_log_files()

    click.echo(f"Log directory: {run_log.log_dir}")
    if not log_files:
        click.echo("   No log files found")
        return

    for log_file in log_files:
        try:
            stat = os.stat(log_file)
        except OSError as e:
            click.echo(f"   ⚠️  {os.path.basename(log_file)}: {e}")
            continue
        modified = datetime.fromtimestamp(stat.st_mtime)
        click.echo(f"   📄 {os.path.basename(log_file)}  {format_file_size(stat.st_size)}  "
                   f"{format_date(modified, short=True)}")


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    try:
        config_manager = _load_config(ctx)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)

    if config_manager.config_file:
        click.echo(f"✅ Configuration loaded successfully from {config_manager.config_file}")
    else:
        click.echo("✅ No configuration file found, using defaults")

    cleanup_config = config_manager.get_cleanup_config()
    logging_config = config_manager.get_logging_config()

    click.echo(f"\n📊 Configuration Summary:")
    click.echo(f"   Path: {cleanup_config.get('path') or _default_path()}")
    click.echo(f"   Age (days): {cleanup_config.get('age_days') if cleanup_config.get('age_days') is not None else 'not set'}")
    click.echo(f"   Extension: {cleanup_config.get('extension') or '(any)'}")
    click.echo(f"   Allow system paths: {cleanup_config.get('allow_system_paths')}")
    click.echo(f"   Log directory: {logging_config.get('directory')}")
    click.echo(f"   Log retention (days): {logging_config.get('retention_days')}")


def _run_log_for(logging_config) -> RunLog:
    return RunLog(log_dir=logging_config.get('directory'), log_name=logging_config.get('name'))


def _default_path() -> str:
    return tempfile.gettempdir()


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
