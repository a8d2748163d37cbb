"""Diff collection and truncation."""

import logging
import subprocess

from ..errors import DiffError
from .core import error_output, run

logger = logging.getLogger(__name__)

# Large and semantically uninformative for message generation.
LOCK_FILES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "Cargo.lock",
    "Gemfile.lock",
    "composer.lock",
    "uv.lock",
)

TRUNCATION_MARKER = "[... {omitted} more lines truncated ...]"


def get_untracked_files():
    """Get untracked files relative to the repository root (excluding ignored files)."""
    try:
        out = run("git ls-files --others --exclude-standard --full-name :/", stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as exc:
        raise DiffError(f"Failed to list untracked files: {error_output(exc)}") from exc
    if not out:
        return []
    return [f for f in out.splitlines() if f.strip()]


def lock_file_pathspecs():
    """Pathspecs that exclude lock files at any depth."""
    return [f":(top,exclude,glob)**/{name}" for name in LOCK_FILES]


def truncate_diff(diff, max_lines):
    """
    Keep the first max_lines lines and append one marker line.

    Diffs at or under the cap are returned unchanged.
    """
    lines = diff.split("\n")
    if len(lines) <= max_lines:
        return diff
    omitted = len(lines) - max_lines
    return "\n".join(lines[:max_lines] + [TRUNCATION_MARKER.format(omitted=omitted)])


def _git_diff(args):
    try:
        return run(["git", "diff", *args], stderr=subprocess.PIPE, strip=False)
    except subprocess.CalledProcessError as exc:
        raise DiffError(f"Failed to get git diff: {error_output(exc)}") from exc


def _untracked_diff(path, context_lines, toplevel):
    # --no-index exits 1 when the files differ, which is always the case here
    result = subprocess.run(
        ["git", "diff", "--no-index", f"--unified={context_lines}", "--", "/dev/null", path],
        cwd=toplevel,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    if result.returncode not in (0, 1):
        raise DiffError(
            f"Failed to diff untracked file {path}: "
            f"{result.stderr.decode('utf-8', errors='ignore').strip()}"
        )
    return result.stdout.decode("utf-8", errors="ignore")


def get_diff(
    staged=True,
    unstaged=False,
    context_lines=3,
    max_lines=500,
    ignore_lock_files=True,
    include_untracked=False,
    untracked_files=None,
):
    """
    Get the diff to summarize.

    Args:
        staged: Diff the index against HEAD
        unstaged: Diff the working tree; used as a fallback when the staged
            diff is empty, or on its own when staged is False
        context_lines: Lines of context around each hunk
        max_lines: Cap on the returned diff's line count
        ignore_lock_files: Exclude lock files by pathspec
        include_untracked: Append untracked files when the working tree diff is used
        untracked_files: Pre-computed list of untracked files (optional)

    Returns:
        Diff string, or "" when there is nothing to show
    """
    base_args = [f"--unified={context_lines}"]
    pathspecs = ["--", ":/", *lock_file_pathspecs()] if ignore_lock_files else []

    diff = ""
    if staged:
        diff = _git_diff([*base_args, "--staged", *pathspecs])
        if diff.strip():
            return truncate_diff(diff.rstrip("\n"), max_lines)
        if not unstaged:
            return ""
        logger.debug("No staged diff; falling back to the working tree diff")

    if unstaged:
        parts = [_git_diff([*base_args, *pathspecs])]
        if include_untracked:
            if untracked_files is None:
                untracked_files = get_untracked_files()
            try:
                toplevel = run("git rev-parse --show-toplevel", stderr=subprocess.PIPE)
            except subprocess.CalledProcessError as exc:
                raise DiffError(f"Failed to locate repository root: {error_output(exc)}") from exc
            for path in untracked_files:
                if ignore_lock_files and path.rsplit("/", 1)[-1] in LOCK_FILES:
                    continue
                parts.append(_untracked_diff(path, context_lines, toplevel))
        diff = "".join(p if p.endswith("\n") or not p else p + "\n" for p in parts)

    if not diff.strip():
        return ""
    return truncate_diff(diff.rstrip("\n"), max_lines)
