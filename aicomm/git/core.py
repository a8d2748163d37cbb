"""Core git utilities and subprocess wrappers."""

import logging
import shlex
import subprocess

from ..errors import EnvironmentCheckError

logger = logging.getLogger(__name__)


def run(cmd, stderr=subprocess.STDOUT, strip=True):
    """
    Run a command and return its decoded output.

    Accepts either a string (split using shlex) or an argv list. We avoid invoking
    a shell so file paths containing characters like '(' and ')' are handled
    safely. Pass stderr=subprocess.PIPE to keep git warnings out of the output.
    """
    args = cmd if isinstance(cmd, (list, tuple)) else shlex.split(cmd)
    logger.debug("Running: %s", shlex.join(args))
    out = subprocess.check_output(args, stderr=stderr).decode("utf-8", errors="ignore")
    return out.strip() if strip else out


def error_output(exc):
    """Decode whatever a failed git command printed."""
    parts = []
    for stream in (getattr(exc, "output", None), getattr(exc, "stderr", None)):
        if isinstance(stream, (bytes, bytearray)):
            stream = stream.decode("utf-8", errors="ignore")
        if stream:
            parts.append(str(stream).strip())
    return "\n".join(p for p in parts if p) or str(exc)


def ensure_repository():
    """Raise EnvironmentCheckError unless the cwd is inside a git work tree."""
    try:
        inside = run("git rev-parse --is-inside-work-tree", stderr=subprocess.DEVNULL)
    except FileNotFoundError as exc:
        raise EnvironmentCheckError("Git is not installed or not in PATH") from exc
    except subprocess.CalledProcessError as exc:
        raise EnvironmentCheckError(
            "Not a git repository. Please run this command inside a git project."
        ) from exc
    if inside != "true":
        raise EnvironmentCheckError(
            "Not inside a git work tree. Please run this command inside a git project."
        )


def get_current_branch():
    """Get the current branch name, or None when HEAD is detached."""
    try:
        branch = run(["git", "symbolic-ref", "--quiet", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except subprocess.CalledProcessError:
        return None
    return branch or None


def get_remotes():
    """List configured remote names."""
    out = run("git remote")
    return [r for r in out.splitlines() if r.strip()]
