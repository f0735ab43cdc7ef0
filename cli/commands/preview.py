# cli/commands/preview.py
"""Preview commands."""

import sys
from pathlib import Path

import click
import yaml

from appflow.model.actions import Action, ActionType
from appflow.runtime.preview import OutcomeKind, PreviewSession
from cli.commands.common import load_or_exit

STEP_KINDS = ('set', 'press', 'navigate', 'back', 'submit')


@click.group()
def preview():
    """Play a project without building it."""
    pass


def _load_steps(script: Path):
    with open(script, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    steps = data.get('steps', []) if isinstance(data, dict) else data
    if not isinstance(steps, list):
        raise click.BadParameter("script must be a list of steps or contain a 'steps' list")
    return steps


def _run_step(session: PreviewSession, step):
    if isinstance(step, str):
        step = {step: True}
    if not isinstance(step, dict) or len(step) != 1:
        raise click.BadParameter(f"invalid step: {step!r}")

    kind, arg = next(iter(step.items()))
    if kind == 'set':
        error = session.set_value(arg['field'], arg.get('value'))
        return f"set {arg['field']} = {arg.get('value')!r}" + (f" ({error})" if error else "")
    elif kind == 'press':
        outcome = session.press(str(arg))
        return f"press {arg} → {outcome.kind.value}"
    elif kind == 'navigate':
        outcome = session.execute(Action.navigate(str(arg)))
        return f"navigate {arg} → {outcome.kind.value}"
    elif kind == 'back':
        outcome = session.execute(Action.back())
        return f"back → {outcome.kind.value}"
    elif kind == 'submit':
        outcome = session.execute(Action(type=ActionType.SUBMIT))
        if outcome.kind == OutcomeKind.INVALID:
            return "submit → invalid: " + ", ".join(f"{k}: {v}" for k, v in outcome.errors.items())
        return f"submit → {outcome.kind.value}"
    raise click.BadParameter(f"unknown step '{kind}' (expected one of {', '.join(STEP_KINDS)})")


@preview.command()
@click.argument('project_file', type=click.Path(exists=True, path_type=Path))
@click.argument('script', type=click.Path(exists=True, path_type=Path))
@click.option('--verbose', '-v', is_flag=True, help='Print every step')
def run(project_file: Path, script: Path, verbose: bool):
    """Replay a YAML script of preview steps and print the visited screens."""
    proj = load_or_exit(project_file)
    submitted = []
    opened = []
    session = PreviewSession(proj, on_submit=submitted.append, on_open_link=opened.append)

    if not proj.screens:
        click.echo("❌ Project has no nodes to preview", err=True)
        sys.exit(1)
    session.start()

    click.echo(f"🚀 Previewing: {proj.name}")
    for index, step in enumerate(_load_steps(script), start=1):
        line = _run_step(session, step)
        if verbose:
            click.echo(f"   {index}. {line}")

    names = [proj.get_node(node_id).name or node_id for node_id in session.history]
    click.echo(f"📋 History: {' → '.join(names)}")
    click.echo(f"📍 Current: {session.current.name if session.current else '-'}")
    for values in submitted:
        click.echo(f"📨 Submitted: {values}")
    for url in opened:
        click.echo(f"🔗 Opened: {url}")
    if session.errors:
        for field_id, message in session.errors.items():
            click.echo(f"⚠️  {field_id}: {message}")
