"""Workspace status inspection."""

import re
import subprocess
from dataclasses import dataclass, field

from ..errors import DiffError
from .core import ensure_repository, error_output, run

_UNMERGED = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}
_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")


@dataclass
class WorkspaceStatus:
    """Snapshot of the working tree, grouped by change kind."""

    modified: list = field(default_factory=list)
    created: list = field(default_factory=list)
    deleted: list = field(default_factory=list)
    staged: list = field(default_factory=list)
    conflicted: list = field(default_factory=list)
    branch: str = None
    tracking: str = None
    ahead: int = 0
    behind: int = 0
    detached: bool = False

    @property
    def has_staged_changes(self):
        return bool(self.staged)

    @property
    def has_unstaged_changes(self):
        return bool(self.modified or self.created or self.deleted)

    @property
    def is_detached(self):
        return self.detached

    @property
    def has_changes(self):
        return self.has_staged_changes or self.has_unstaged_changes or bool(self.conflicted)

    @property
    def unstaged_paths(self):
        """Modified, created and deleted paths in status order, without duplicates."""
        paths = []
        for p in self.modified + self.created + self.deleted:
            if p not in paths:
                paths.append(p)
        return paths


def parse_branch_header(header, status):
    """Fill branch fields of status from a '## ...' porcelain header."""
    text = header[3:] if header.startswith("## ") else header
    if text.startswith("HEAD (no branch)"):
        status.detached = True
        return
    for prefix in ("No commits yet on ", "Initial commit on "):
        if text.startswith(prefix):
            status.branch = text[len(prefix):].strip() or None
            return

    counts = ""
    if " [" in text and text.endswith("]"):
        text, counts = text[:-1].split(" [", 1)
    if "..." in text:
        branch, tracking = text.split("...", 1)
        status.tracking = tracking or None
    else:
        branch = text
    status.branch = branch.strip() or None

    ahead = _AHEAD_RE.search(counts)
    behind = _BEHIND_RE.search(counts)
    status.ahead = int(ahead.group(1)) if ahead else 0
    status.behind = int(behind.group(1)) if behind else 0


def parse_porcelain(output):
    """
    Parse `git status --porcelain=v1 --branch -z` output.

    Args:
        output: Raw NUL-separated output

    Returns:
        WorkspaceStatus
    """
    status = WorkspaceStatus()
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if not entry:
            continue
        if entry.startswith("## "):
            parse_branch_header(entry, status)
            continue

        code, path = entry[:2], entry[3:]
        index, worktree = code[0], code[1]
        if index in "RC":
            # -z puts the source path of a rename/copy in its own entry
            i += 1

        if code == "??":
            status.created.append(path)
            continue
        if code in _UNMERGED:
            status.conflicted.append(path)
            continue
        if index in "MADRCT":
            status.staged.append(path)
        if worktree in "MT":
            status.modified.append(path)
        elif worktree == "D":
            status.deleted.append(path)
    return status


def get_workspace_status():
    """
    Query the repository for its current status.

    Raises EnvironmentCheckError outside a repository, DiffError if git fails.
    """
    ensure_repository()
    try:
        out = run(
            ["git", "status", "--porcelain=v1", "--branch", "-z", "--untracked-files=all"],
            stderr=subprocess.PIPE,
            strip=False,
        )
    except subprocess.CalledProcessError as exc:
        raise DiffError(f"Failed to get git status: {error_output(exc)}") from exc
    return parse_porcelain(out)


@dataclass
class BranchInfo:
    current: str = None
    tracking: str = None
    ahead: int = 0
    behind: int = 0
    branches: list = field(default_factory=list)


def get_branch_info():
    """Current branch, its upstream and ahead/behind counts, plus all local branches."""
    status = get_workspace_status()
    try:
        out = run(["git", "branch", "--format=%(refname:short)"], stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as exc:
        raise DiffError(f"Failed to get branch info: {error_output(exc)}") from exc
    return BranchInfo(
        current=status.branch,
        tracking=status.tracking,
        ahead=status.ahead,
        behind=status.behind,
        # a detached HEAD is listed as "(HEAD detached at ...)"
        branches=[b.strip() for b in out.splitlines() if b.strip() and not b.startswith("(")],
    )
