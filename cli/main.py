# cli/main.py
"""Main CLI entry point for AppFlow Builder."""

from typing import Optional

import click

from appflow import __version__
from appflow.config import get_settings
from appflow.logging_config import configure_logging


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None, help='Override APPFLOW_LOG_LEVEL')
@click.option('--json-logs', is_flag=True, help='Emit logs as JSON lines')
def cli(log_level: Optional[str], json_logs: bool):
    """AppFlow Builder CLI - Edit, validate and preview app projects."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_logs=json_logs or settings.json_logs,
    )


# Import and register command groups
def register_commands():
    """Register all CLI command groups."""
    from cli.commands.project import project
    cli.add_command(project)

    from cli.commands.graph import node, edge
    cli.add_command(node)
    cli.add_command(edge)

    from cli.commands.component import component
    cli.add_command(component)

    from cli.commands.preview import preview
    cli.add_command(preview)

    from cli.commands.store import store
    cli.add_command(store)


# Register all commands
register_commands()


if __name__ == '__main__':
    cli()
