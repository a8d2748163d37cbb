"""Display utilities and interactive prompts."""

import sys
import time

import click

from .config import MAX_SUBJECT_LENGTH
from .errors import EmptyMessageError, UserAbort
from .validation import lint_commit_message

ACTIONS = {"a": "accept", "e": "edit", "q": "abort"}


def display_spinning_animation(message, spin_cycles=12):
    """Display a short spinning animation with a message (plain line when not a tty)."""
    if not sys.stdout.isatty():
        click.secho(message, dim=True)
        return
    animation = "|/-\\"
    for i in range(spin_cycles):
        frame = animation[i % len(animation)]
        click.echo(f"\r{message} {frame}", nl=False)
        time.sleep(0.05)
    click.echo(f"\r{message}  ")


def format_workspace_summary(status):
    """Format the workspace status as a short summary block."""
    branch = status.branch or "(detached HEAD)"
    if status.tracking:
        branch += f" -> {status.tracking}"
        if status.ahead or status.behind:
            branch += f" [ahead {status.ahead}, behind {status.behind}]"

    lines = [
        click.style("Workspace Summary", bold=True, underline=True),
        f"  Branch:   {branch}",
        click.style(f"  Modified: {len(status.modified)}", fg="yellow"),
        click.style(f"  Created:  {len(status.created)}", fg="green"),
        click.style(f"  Deleted:  {len(status.deleted)}", fg="red"),
        click.style(f"  Staged:   {len(status.staged)}", fg="blue"),
    ]
    if status.conflicted:
        lines.append(click.style(f"  Conflicted: {len(status.conflicted)}", fg="red", bold=True))
    return "\n".join(lines)


def format_message_box(message, title):
    """Frame a commit message between rules with a title."""
    width = max([len(line) for line in message.splitlines()] + [len(title) + 4, 40])
    divider = "─" * width
    return "\n".join([
        click.style(f"── {title} ".ljust(width, "─"), fg="blue"),
        message,
        click.style(divider, fg="blue"),
    ])


def _edit_message(message, prompt, edit):
    if "\n" in message:
        edited = edit(message, extension=".gitcommit")
        # editor closed without saving
        if edited is None:
            return message
        # same as git's default cleanup mode
        return "\n".join(line for line in edited.splitlines() if not line.startswith("#"))
    return prompt("Commit message", default=message, show_default=False)


def ask_commit_message(message, prompt=None, edit=None):
    """
    Ask the operator to accept, edit or abort the proposed message.

    Returns the stripped final message. Raises UserAbort when the operator
    aborts and EmptyMessageError when the edited text is blank.
    """
    prompt = prompt or click.prompt
    edit = edit or click.edit

    click.echo(format_message_box(message, "Proposed Message"))
    choice = prompt(
        "Accept (a), edit (e) or abort (q)?",
        type=click.Choice(list(ACTIONS)),
        default="a",
    )
    if ACTIONS[choice] == "abort":
        raise UserAbort("Commit aborted by user.")
    if ACTIONS[choice] == "accept":
        return message.strip()

    current = message
    while True:
        edited = _edit_message(current, prompt, edit)
        if not edited or not edited.strip():
            raise EmptyMessageError("Commit message cannot be empty.")
        edited = edited.strip()
        try:
            lint_commit_message(edited, max_length=MAX_SUBJECT_LENGTH)
        except ValueError as exc:
            click.secho(f"✗ {exc}", fg="yellow", err=True)
            click.secho("  Use <type>(<scope>): <description>, e.g. 'feat: add login'", dim=True, err=True)
            current = edited
            continue
        return edited
