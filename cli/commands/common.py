# cli/commands/common.py
"""Helpers shared by the command modules."""

import sys
from pathlib import Path

import click

from appflow.errors import AppFlowError
from appflow.io import read_project_file, write_project_file
from appflow.model.project import Project
from appflow.results import NoopReason, OpResult


def load_or_exit(path: Path) -> Project:
    try:
        return read_project_file(path)
    except AppFlowError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


def save(project: Project, path: Path) -> None:
    try:
        write_project_file(project, path)
    except AppFlowError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


def report(result: OpResult, success: str) -> bool:
    """Echo the outcome of an editing call; exits 1 when the target is missing."""
    if result:
        click.echo(f"✅ {success}")
        return True
    if result.reason == NoopReason.NOT_FOUND:
        click.echo("❌ Not found", err=True)
        sys.exit(1)
    click.echo(f"⚠️  Nothing changed ({result.reason.value})")
    return False
