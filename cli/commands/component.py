# cli/commands/component.py
"""Component tree editing commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from appflow.config import get_settings
from appflow.errors import UnknownNodeError
from appflow.graph.navigation import NavigationGraph
from appflow.model.components import ButtonProps, ComponentType, UIComponent
from appflow.resources import resolve_text
from appflow.tree.engine import Placement, make_component
from cli.commands.common import load_or_exit, report, save

PLACEMENTS = [p.value for p in Placement]


def _open_tree(path: Path, node_id: str):
    proj = load_or_exit(path)
    graph = NavigationGraph(proj, settings=get_settings())
    try:
        node = graph.require(node_id)
    except UnknownNodeError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    return proj, node, graph.tree(node_id)


@click.group()
def component():
    """Edit and print a screen's component tree."""
    pass


@component.command('add')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.argument('component_type', type=click.Choice([t.value for t in ComponentType]))
@click.option('--label', '-l', default=None, help='Component label')
@click.option('--target', '-t', default=None, help='Component to place relative to')
@click.option('--placement', '-p', type=click.Choice(PLACEMENTS), default='after')
def add_component(path: Path, node_id: str, component_type: str, label: Optional[str],
                  target: Optional[str], placement: str):
    """Add a palette component to a screen."""
    proj, node, tree = _open_tree(path, node_id)
    created = make_component(ComponentType(component_type), label=label, screen_name=node.name)
    if report(tree.insert(target, created, Placement(placement)), f"Added {component_type}: {created.id}"):
        save(proj, path)


@component.command('move')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.argument('component_id')
@click.option('--target', '-t', default=None, help='Component to place relative to (root if omitted)')
@click.option('--placement', '-p', type=click.Choice(PLACEMENTS), default='after')
def move_component(path: Path, node_id: str, component_id: str, target: Optional[str], placement: str):
    """Move a component within a screen."""
    proj, node, tree = _open_tree(path, node_id)
    if report(tree.move(component_id, target, Placement(placement)), f"Moved {component_id}"):
        save(proj, path)


@component.command('remove')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.argument('component_id')
def remove_component(path: Path, node_id: str, component_id: str):
    """Remove a component and everything inside it."""
    proj, node, tree = _open_tree(path, node_id)
    if report(tree.delete(component_id), f"Removed {component_id}"):
        save(proj, path)


def _describe(comp: UIComponent, text: str) -> str:
    line = f"{comp.type.value} {comp.id} \"{text}\""
    props = comp.props
    if isinstance(props, ButtonProps):
        rules = props.rules()
        if len(rules) == 1 and rules[0].is_default:
            action = rules[0].action
            line += f" → {action.type.value}"
            if action.target_id:
                line += f" {action.target_id}"
        elif rules:
            line += f" → {len(rules)} rules"
    return line


@component.command('tree')
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.argument('node_id')
@click.option('--language', default=None, help='Language used to resolve translated labels')
def print_tree(path: Path, node_id: str, language: Optional[str]):
    """Print a screen's component tree."""
    proj, node, tree = _open_tree(path, node_id)
    click.echo(f"📱 {node.name} ({node.id})")
    if not tree.roots:
        click.echo("   (empty)")
        return

    def walk(components, depth):
        for comp in components:
            text = resolve_text(comp, proj.resources, language)
            click.echo(f"{'   ' * (depth + 1)}{_describe(comp, text)}")
            if comp.children:
                walk(comp.children, depth + 1)

    walk(tree.roots, 0)
