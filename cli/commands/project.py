# cli/commands/project.py
"""Project document commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from appflow.config import get_settings
from appflow.graph.analysis import to_mermaid, validate_project
from appflow.graph.navigation import NavigationGraph
from appflow.io import dump_project
from appflow.model.project import NodeKind, Project
from appflow.tree.engine import iter_components
from cli.commands.common import load_or_exit, save


@click.group()
def project():
    """Create, inspect, validate and export project documents."""
    pass


@project.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.option('--name', '-n', default='Untitled App', help='Project name')
@click.option('--description', '-d', default='', help='Project description')
@click.option('--platform', '-p', type=click.Choice(['web', 'mobile']), default=None,
              help='Target platform (defaults to APPFLOW_DEFAULT_PLATFORM)')
@click.option('--blank', is_flag=True, help='Start without a first screen')
@click.option('--force', is_flag=True, help='Overwrite an existing file')
def new(path: Path, name: str, description: str, platform: Optional[str], blank: bool, force: bool):
    """Create a new project document (.json, .yaml or .yml)."""
    if path.exists() and not force:
        click.echo(f"❌ {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    settings = get_settings()
    proj = Project(name=name, description=description, platform=platform or settings.default_platform)
    if not blank:
        NavigationGraph(proj, settings=settings).add_node(NodeKind.SCREEN, name='Home')

    save(proj, path)
    click.echo(f"✅ Created project '{proj.name}' at {path}")


@project.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
def info(path: Path):
    """Summarize a project document."""
    proj = load_or_exit(path)
    screens = list(proj.iter_nodes(NodeKind.SCREEN))
    gateways = list(proj.iter_nodes(NodeKind.GATEWAY))
    edges = sum(len(node.outgoing_connections) for node in proj.screens)

    click.echo(f"📱 {proj.name} ({proj.platform.value})")
    if proj.description:
        click.echo(f"   {proj.description}")
    click.echo(f"   Screens: {len(screens)}  Gateways: {len(gateways)}  Edges: {edges}")
    click.echo(f"   Languages: {', '.join(proj.resources.languages)}")

    for node in proj.screens:
        marker = "◆" if node.is_gateway else "■"
        if node.is_gateway:
            detail = f"{len(node.rules)} rules"
        else:
            detail = f"{sum(1 for _ in iter_components(node.component_tree))} components"
        targets = ", ".join(node.outgoing_connections) or "-"
        click.echo(f"   {marker} {node.id}  {node.name}  [{detail}]  → {targets}")


@project.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--strict', is_flag=True, help='Treat warnings as failures')
def validate(path: Path, strict: bool):
    """Validate a project document."""
    proj = load_or_exit(path)
    click.echo(f"🔍 Validating project: {path}")

    issues = validate_project(proj)
    for issue in issues:
        icon = "❌" if issue.is_error else "⚠️ "
        click.echo(f"   {icon} {issue.code}: {issue.message}")

    failed = [i for i in issues if i.is_error or strict]
    if failed:
        click.echo(f"❌ Project validation failed ({len(failed)} issues)", err=True)
        sys.exit(1)
    click.echo("✅ Project validation passed!")


@project.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(['json', 'yaml', 'mermaid']),
              default='json', help='Output format')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file')
def export(path: Path, fmt: str, output: Optional[Path]):
    """Export a project as JSON, YAML or a Mermaid flow diagram."""
    proj = load_or_exit(path)
    content = to_mermaid(proj) if fmt == 'mermaid' else dump_project(proj, fmt)

    if output:
        output.write_text(content, encoding='utf-8')
        click.echo(f"✅ Exported to: {output}")
    else:
        click.echo(content)
