"""
CLI interface for dbseed.

Provides commands to inspect how a test class's declarations are bound,
without connecting to any database.
"""

import click
from pathlib import Path
from rich.table import Table

from dbseed import __version__
from dbseed.config import ConfigError, load_config
from dbseed.errors import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="dbseed")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Path of a dbseed.yaml file")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def main(ctx, config_path, log_level):
    """
    dbseed - Seed databases before each test.

    Inspect resource bindings declared on test classes.
    """
    from dbseed.utils import setup_logging

    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
        if log_level:
            config = config.override(log_level=log_level.upper())
    except ConfigError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    ctx.obj["config"] = config
    setup_logging(config.log_level)


@main.command("inspect")
@click.argument("target")
@click.pass_context
def inspect_cmd(ctx, target: str):
    """
    Show the resource bindings of a test class.

    TARGET is path/to/test_file.py::Class or package.module:Class.
    """
    from dbseed.bindings import introspect
    from dbseed.utils import console, load_class

    config = ctx.obj["config"]

    try:
        test_class = load_class(target)
        bindings = introspect(test_class)
        config.get_default_binder()
    except (ValueError, ImportError, ConfigurationError, ConfigError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    table = Table(title=f"{test_class.__qualname__} ({config.lifecycle})")
    table.add_column("Resource", style="cyan")
    table.add_column("Declared by")
    table.add_column("Operations (order)")
    table.add_column("Binder configuration")

    for binding in bindings:
        info = binding.describe()
        operations = "\n".join(f"{op['order']}: {op['name']}" for op in info["operations"]) or "-"
        table.add_row(info["resource"], info["declared_by"], operations, info["binder_configuration"])

    console.print(table)


if __name__ == "__main__":
    main()
