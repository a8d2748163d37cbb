"""CLI command and entry point."""

import logging
import sys
import traceback

import click

from . import ui
from .config import PROVIDER_IDS, __version__, load_settings
from .errors import AicommError, UserAbort
from .git import (
    commit_changes,
    get_diff,
    get_workspace_status,
    push_to_remote,
    stage_all,
)
from .ui import format_message_box, format_workspace_summary

logger = logging.getLogger("aicomm")


class _StderrHandler(logging.StreamHandler):
    """StreamHandler that looks up sys.stderr on every write."""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(verbose=False):
    """Send diagnostics to stderr; DEBUG when verbose, warnings otherwise."""
    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _progress(message):
    ui.display_spinning_animation(message)


def run_pipeline(dry_run, show_diff, no_ai, push, stage_all_first, model, provider, yes):
    """
    Run one status -> diff -> generate -> confirm -> commit -> push pass.

    Returns normally on success or a clean no-op; raises AicommError otherwise.
    """
    import aicomm as ac

    settings = load_settings().with_overrides(provider=provider, model=model)
    generator = ac.build_generator(settings, progress=_progress, disable_ai=no_ai)

    status = get_workspace_status()
    if not status.has_changes:
        click.secho("✔ No changes to commit. Clean as a whistle!", fg="green")
        return

    if (stage_all_first or settings.auto_stage) and status.has_unstaged_changes:
        if dry_run:
            click.secho("Dry run: skipping stage-all", fg="yellow")
        else:
            stage_all()
            click.secho("✔ All changes staged", fg="green")
            status = get_workspace_status()

    click.echo(format_workspace_summary(status))
    click.echo()

    diff = get_diff(
        staged=True,
        unstaged=not status.has_staged_changes,
        max_lines=settings.max_diff_lines,
        ignore_lock_files=settings.ignore_lock_files,
        include_untracked=True,
        untracked_files=status.created,
    )
    if not diff.strip():
        click.secho("No meaningful diff detected. Try staging changes manually.", fg="yellow")
        return

    if show_diff:
        click.secho("Diff used for generation:", fg="yellow")
        click.echo(diff)
        click.echo()

    if no_ai:
        click.secho("AI disabled. Using fallback commit message.", fg="yellow")
        message = generator.generate(diff, disable_ai=True)
    else:
        _progress(f"Consulting {generator.model}...")
        message = generator.generate(diff)
        click.secho("✔ AI suggestion ready", fg="green")

    if dry_run:
        click.secho("\nDry run: no commit made", fg="yellow", bold=True)
        click.echo(format_message_box(message, "Proposed Message"))
        return

    final_message = message.strip() if yes else ac.ask_commit_message(message)

    committed = commit_changes(final_message)
    click.secho(f"✔ Committed {len(committed)} file(s)", fg="green", bold=True)
    click.echo(format_message_box(final_message, "Final Commit"))

    if push:
        click.secho("Pushing to remote...", fg="blue")
        branch = push_to_remote()
        click.secho(f"✔ Pushed {branch} to origin", fg="blue")


@click.command()
@click.version_option(version=__version__)
@click.option("-d", "--dry-run", is_flag=True, help="Generate the message without committing")
@click.option("--diff", "show_diff", is_flag=True, help="Print the collected diff")
@click.option("--no-ai", is_flag=True, help="Skip AI generation and use the fallback message")
@click.option("-p", "--push", is_flag=True, help="Push to origin after committing")
@click.option("-s", "--stage-all", "stage_all_first", is_flag=True, help="Stage all changes before diffing")
@click.option("-m", "--model", default=None, help="Override the configured model")
@click.option(
    "--provider",
    type=click.Choice(PROVIDER_IDS),
    default=None,
    help="Override the configured provider",
)
@click.option("-y", "--yes", is_flag=True, help="Accept the generated message without prompting")
@click.option("-v", "--verbose", is_flag=True, help="Show stack traces and diagnostics")
@click.pass_context
def cli(ctx, dry_run, show_diff, no_ai, push, stage_all_first, model, provider, yes, verbose):
    """aicomm: AI-powered git commit assistant."""
    setup_logging(verbose)
    try:
        run_pipeline(dry_run, show_diff, no_ai, push, stage_all_first, model, provider, yes)
    except UserAbort as exc:
        click.secho(f"✗ {exc}", fg="yellow")
        ctx.exit(0)
    except AicommError as exc:
        click.secho(f"Error: {exc}", fg="red", err=True)
        if verbose:
            click.secho(traceback.format_exc(), dim=True, err=True)
        ctx.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
