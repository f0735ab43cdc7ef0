# cli/commands/graph.py
"""Node and edge editing commands."""

from pathlib import Path
from typing import Optional

import click

from appflow.config import get_settings
from appflow.graph.navigation import NavigationGraph
from appflow.model.project import NodeKind
from cli.commands.common import load_or_exit, report, save


def _open(path: Path):
    proj = load_or_exit(path)
    return proj, NavigationGraph(proj, settings=get_settings())


@click.group()
def node():
    """Add, move, rename and remove screens and gateways."""
    pass


@node.command('add')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--kind', '-k', type=click.Choice(['screen', 'gateway']), default='screen')
@click.option('--name', '-n', default=None, help='Node name (defaults to "Screen N"/"Gateway N")')
@click.option('--x', type=float, default=None)
@click.option('--y', type=float, default=None)
def add_node(path: Path, kind: str, name: Optional[str], x: Optional[float], y: Optional[float]):
    """Add a node to a project."""
    proj, graph = _open(path)
    position = (x or 0.0, y or 0.0) if x is not None or y is not None else None
    created = graph.add_node(NodeKind(kind), position=position, name=name)
    save(proj, path)
    click.echo(f"✅ Added {kind} '{created.name}': {created.id}")


@node.command('move')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.argument('x', type=float)
@click.argument('y', type=float)
def move_node(path: Path, node_id: str, x: float, y: float):
    """Move a node on the canvas."""
    proj, graph = _open(path)
    if report(graph.move(node_id, x, y), f"Moved {node_id} to ({x:g}, {y:g})"):
        save(proj, path)


@node.command('rename')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.argument('name')
def rename_node(path: Path, node_id: str, name: str):
    """Rename a node."""
    proj, graph = _open(path)
    if report(graph.rename(node_id, name), f"Renamed {node_id} to '{name}'"):
        save(proj, path)


@node.command('remove')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
def remove_node(path: Path, node_id: str):
    """Remove a node; actions that navigated to it become no-ops."""
    proj, graph = _open(path)
    if report(graph.remove_node(node_id), f"Removed {node_id}"):
        save(proj, path)


@click.group()
def edge():
    """Connect and disconnect nodes."""
    pass


@edge.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('source_id')
@click.argument('target_id')
def connect(path: Path, source_id: str, target_id: str):
    """Connect two nodes and add the matching navigation UI."""
    proj, graph = _open(path)
    result = graph.connect(source_id, target_id)
    if not report(result, f"Connected {source_id} → {target_id}"):
        return

    wiring = result.value
    if wiring is not None:
        if wiring.header_id:
            click.echo(f"   ➕ Header bar with back button on {target_id}")
        if wiring.button_id:
            click.echo(f"   ➕ Button {wiring.button_id} on {source_id}")
        if wiring.rule_added:
            click.echo(f"   ➕ Default rule on gateway {source_id}")
    save(proj, path)


@edge.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('source_id')
@click.argument('target_id')
def disconnect(path: Path, source_id: str, target_id: str):
    """Remove the edge between two nodes."""
    proj, graph = _open(path)
    if report(graph.disconnect(source_id, target_id), f"Disconnected {source_id} → {target_id}"):
        save(proj, path)
