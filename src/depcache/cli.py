import click
import functools
import logging
import traceback
from pathlib import Path
from typing import Tuple

from .config import Config
from .cache import CacheResult, DependencyCache
from .dependency import VersionlessDependency
from .resolver import StaticResolver
from .utils import setup_logger, parse_module_levels
from .io import DiskFileSystem
from .exceptions import (
    DepCacheError,
    ConfigurationError,
    DefinitionError,
    CacheError,
)
from . import __version__


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) if log_levels else None
    setup_logger(debug=debug, module_levels=module_levels, log_file=log_file)


def _abort(message: str):
    logging.error(message)
    ctx = click.get_current_context()
    if ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort(f"Configuration error: {e}")
        except DefinitionError as e:
            _abort(f"Definition error: {e}")
        except CacheError as e:
            _abort(f"Cache error: {e}")
        except DepCacheError as e:
            _abort(f"An unexpected application error occurred: {e}")
    return wrapper


def load_cache(manifest: str) -> Tuple[DependencyCache, CacheResult]:
    """Load a manifest and build the dependency cache it describes"""
    fs = DiskFileSystem()
    config = Config(str(Path(manifest).absolute()), fs)
    cache = DependencyCache(config.project_dir, config.options, fs=fs)
    result = cache.build_from(StaticResolver.from_config(config))
    for warning in result.warnings:
        click.echo(f"warning: {warning}", err=True)
    return cache, result


@handle_errors
def do_build(manifest: str):
    """Execute build command"""
    cache, result = load_cache(manifest)
    click.echo(f"Cache '{result.name}' at {result.cache_dir}")
    click.echo(f"  dependencies: {len(result.dependencies)}")
    click.echo(f"  copied:       {len(result.copied)}")
    click.echo(f"  lint jars:    {len(result.lint_jars)}")
    click.echo(f"  sources:      {len(result.sources)}")
    click.echo(f"  evicted:      {len(result.evicted)}")


@handle_errors
def do_processors(manifest: str, coordinate: str):
    """Execute processors command"""
    parts = coordinate.split(":")
    if len(parts) < 2:
        raise click.BadParameter(f"expected 'group:name', got '{coordinate}'", param_hint="COORDINATE")

    cache, _ = load_cache(manifest)
    wanted = VersionlessDependency(group=parts[0], name=parts[1])
    matches = [dep for dep in cache.dependencies() if dep.versionless == wanted]
    if not matches:
        logging.error(f"No dependency '{wanted}' in the manifest.")
        raise click.Abort()
    for processor in sorted(cache.annotation_processors_for(matches[-1])):
        click.echo(processor)


@handle_errors
def do_stats(manifest: str):
    """Execute stats command"""
    cache, _ = load_cache(manifest)
    stats = cache.stats()
    click.echo(f"{'KIND':<12} {'COUNT':>6}")
    click.echo("-" * 19)
    for kind, count in stats["files"].items():
        click.echo(f"{kind:<12} {count:>6}")
    click.echo(f"Total size: {stats['total_size']} bytes")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'engine=DEBUG,zip=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='depcache')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """depcache - Materialize resolved dependencies into a build cache

    \b
    Examples:
      depcache build deps.yml                        Build the cache
      depcache processors deps.yml com.google:auto   List annotation processors
      depcache stats deps.yml                        Show cache contents
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.argument('manifest', type=click.Path(dir_okay=False))
@click.pass_context
def build(ctx, manifest):
    """Build the dependency cache described by a manifest"""
    do_build(manifest)


@cli.command()
@click.argument('manifest', type=click.Path(dir_okay=False))
@click.argument('coordinate')
@click.pass_context
def processors(ctx, manifest, coordinate):
    """List annotation processors declared by a dependency

    \b
    Examples:
      depcache processors deps.yml com.google.auto.value:auto-value
    """
    do_processors(manifest, coordinate)


@cli.command()
@click.argument('manifest', type=click.Path(dir_okay=False))
@click.pass_context
def stats(ctx, manifest):
    """Build the cache, then show what the cache directory holds"""
    do_stats(manifest)
