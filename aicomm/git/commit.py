"""Staging, committing and pushing."""

import logging
import subprocess

from ..errors import CommitError, PushError
from .core import error_output, get_current_branch, get_remotes, run
from .status import get_workspace_status

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


def _top_pathspec(path):
    # porcelain paths are relative to the repository root, not the cwd
    return f":(top,literal){path}"


def stage_files(files):
    """
    Stage specific files, including deletions.

    Args:
        files: Paths relative to the repository root
    """
    if not files:
        raise CommitError("No files specified to stage")
    try:
        # Use -A to ensure deletions are staged too; plain git add errors on removed paths
        run(["git", "add", "-A", "--", *(_top_pathspec(f) for f in files)])
    except subprocess.CalledProcessError as exc:
        raise CommitError(f"Failed to stage files: {error_output(exc)}") from exc


def stage_all():
    """Stage every change in the work tree."""
    try:
        run(["git", "add", "-A", "--", ":/"])
    except subprocess.CalledProcessError as exc:
        raise CommitError(f"Failed to stage files: {error_output(exc)}") from exc


def commit_changes(message, status=None):
    """
    Commit with the given message.

    Already-staged files are committed as they are; nothing else is added.
    When nothing is staged, every modified, created and deleted file is
    staged first. A clean tree raises CommitError without running git commit.

    Returns:
        The list of paths that were committed
    """
    if not message or not message.strip():
        raise CommitError("Refusing to commit with an empty message")

    if status is None:
        status = get_workspace_status()

    if status.has_staged_changes:
        committed = list(status.staged)
    elif status.has_unstaged_changes:
        committed = status.unstaged_paths
        logger.debug("Nothing staged; staging %d file(s)", len(committed))
        stage_files(committed)
    else:
        raise CommitError("No changes to commit")

    try:
        run(["git", "commit", "-m", message.strip()])
    except subprocess.CalledProcessError as exc:
        output = error_output(exc)
        if "nothing to commit" in output or "no changes added to commit" in output:
            raise CommitError(
                "No changes to commit. All changes may already be committed."
            ) from exc
        raise CommitError(f"Git commit failed: {output}") from exc
    return committed


def push_to_remote(remote=DEFAULT_REMOTE):
    """
    Push the current branch to the remote.

    Raises PushError with a remediation hint when the branch, the remote or
    its upstream is missing.
    """
    branch = get_current_branch()
    if not branch:
        raise PushError(
            "Cannot determine current branch (HEAD is detached). "
            "Check out a branch before pushing."
        )

    try:
        remotes = get_remotes()
    except subprocess.CalledProcessError as exc:
        raise PushError(f"Failed to list remotes: {error_output(exc)}") from exc
    if not remotes:
        raise PushError(
            "No remote repository configured. "
            f"Run: git remote add {remote} <url>"
        )
    if remote not in remotes:
        raise PushError(
            f"Remote '{remote}' is not configured (found: {', '.join(remotes)}). "
            f"Run: git remote add {remote} <url>"
        )

    try:
        run(["git", "push", remote, branch])
    except subprocess.CalledProcessError as exc:
        output = error_output(exc)
        if "no upstream branch" in output:
            raise PushError(
                f"No upstream branch set. Run: git push --set-upstream {remote} {branch}"
            ) from exc
        raise PushError(f"Git push failed: {output}") from exc
    return branch
