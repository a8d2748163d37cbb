"""Git utilities package."""

from .commit import (
    commit_changes,
    push_to_remote,
    stage_all,
    stage_files,
)
from .core import (
    ensure_repository,
    get_current_branch,
    get_remotes,
    run,
)
from .diff import (
    get_diff,
    get_untracked_files,
    truncate_diff,
)
from .status import BranchInfo, WorkspaceStatus, get_branch_info, get_workspace_status

__all__ = [
    "run",
    "ensure_repository",
    "get_current_branch",
    "get_remotes",
    "WorkspaceStatus",
    "get_workspace_status",
    "BranchInfo",
    "get_branch_info",
    "get_untracked_files",
    "get_diff",
    "truncate_diff",
    "stage_files",
    "stage_all",
    "commit_changes",
    "push_to_remote",
]
