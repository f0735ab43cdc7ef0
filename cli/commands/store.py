# cli/commands/store.py
"""Commands for the configured project store."""

import asyncio
import sys
from pathlib import Path
from typing import Tuple

import click

from appflow.config import get_settings
from appflow.errors import AppFlowError
from appflow.io import write_project_file
from appflow.storage import create_store
from cli.commands.common import load_or_exit


@click.group()
def store():
    """Move project documents in and out of the project store."""
    pass


def _run(coro):
    try:
        return asyncio.run(coro)
    except AppFlowError as e:
        click.echo(f"❌ Storage error: {e}", err=True)
        sys.exit(1)


@store.command('list')
def list_projects():
    """List stored projects."""
    async def load():
        async with create_store(get_settings()) as backend:
            return await backend.load()

    projects = _run(load())
    if not projects:
        click.echo("📭 No projects stored")
        return

    click.echo(f"📚 {len(projects)} stored projects:")
    for proj in projects:
        click.echo(f"   • {proj.id}  {proj.name}  ({len(proj.screens)} nodes)")


@store.command('import')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
def import_projects(files: Tuple[Path, ...]):
    """Add or replace projects from document files."""
    projects = [load_or_exit(path) for path in files]

    async def upsert():
        async with create_store(get_settings()) as backend:
            for proj in projects:
                await backend.upsert(proj)

    _run(upsert())
    for proj in projects:
        click.echo(f"✅ Imported '{proj.name}' ({proj.id})")


@store.command('export')
@click.argument('project_id')
@click.argument('output', type=click.Path(path_type=Path))
def export_project(project_id: str, output: Path):
    """Write a stored project to a document file."""
    async def fetch():
        async with create_store(get_settings()) as backend:
            return await backend.get(project_id)

    proj = _run(fetch())
    if proj is None:
        click.echo(f"❌ Project {project_id} not found", err=True)
        sys.exit(1)

    try:
        write_project_file(proj, output)
    except AppFlowError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    click.echo(f"✅ Exported '{proj.name}' to {output}")
