"""aicomm: AI-powered git commit assistant."""

import warnings

import urllib3

# Suppress urllib3 warnings about OpenSSL
warnings.filterwarnings("ignore", category=urllib3.exceptions.NotOpenSSLWarning)

# Re-export the public API for library-style usage (and tests).
from .ai import (  # noqa: F401
    PROVIDERS,
    CommitMessageGenerator,
    build_generator,
    check_local_engine,
    get_api_key,
    get_openai_client,
    get_provider,
)
from .cli import cli, main
from .config import FALLBACK_MESSAGE, Settings, __version__, load_settings
from .errors import (  # noqa: F401
    AicommError,
    CommitError,
    ConfigError,
    DiffError,
    EmptyMessageError,
    EnvironmentCheckError,
    GenerationError,
    PushError,
    UserAbort,
)
from .git import (  # noqa: F401
    BranchInfo,
    WorkspaceStatus,
    commit_changes,
    get_branch_info,
    get_current_branch,
    get_diff,
    get_workspace_status,
    push_to_remote,
    run,
    stage_all,
    stage_files,
)
from .ui import ask_commit_message, format_workspace_summary  # noqa: F401
from .validation import clean_commit_message, lint_commit_message, lint_git_commit_subject  # noqa: F401

__all__ = [
    "__version__",
    # CLI
    "cli",
    "main",
    # Settings
    "Settings",
    "load_settings",
    "FALLBACK_MESSAGE",
    # Git
    "run",
    "get_current_branch",
    "WorkspaceStatus",
    "get_workspace_status",
    "BranchInfo",
    "get_branch_info",
    "get_diff",
    "stage_files",
    "stage_all",
    "commit_changes",
    "push_to_remote",
    # AI
    "PROVIDERS",
    "get_provider",
    "get_api_key",
    "check_local_engine",
    "get_openai_client",
    "CommitMessageGenerator",
    "build_generator",
    # Validation/UI
    "clean_commit_message",
    "lint_commit_message",
    "lint_git_commit_subject",
    "ask_commit_message",
    "format_workspace_summary",
    # Errors
    "AicommError",
    "EnvironmentCheckError",
    "ConfigError",
    "DiffError",
    "GenerationError",
    "UserAbort",
    "EmptyMessageError",
    "CommitError",
    "PushError",
]
