"""Cleaning and linting of commit messages."""

import re

from .config import COMMIT_SUBJECT_RE, MAX_DETAILED_MESSAGE_LENGTH, MAX_SUBJECT_LENGTH
from .errors import GenerationError

_FENCE_RE = re.compile(r"^\s*```")
_WRAPPING_QUOTES_RE = re.compile(r"^[\"'`]+|[\"'`]+$")
_LABEL_RE = re.compile(r"^commit message:\s*", flags=re.IGNORECASE)

ELLIPSIS = "..."


def lint_git_commit_subject(subject, max_length=MAX_SUBJECT_LENGTH):
    """
    Validate a git commit subject line.

    Raises ValueError if validation fails.
    """
    if not COMMIT_SUBJECT_RE.match(subject):
        raise ValueError("Commit subject must match the format: <type>(<scope>): <subject>")
    if len(subject) > max_length:
        raise ValueError(
            f"Commit subject is {len(subject)} characters (maximum {max_length})"
        )


def lint_commit_message(message, max_length=MAX_SUBJECT_LENGTH):
    """Validate a full message: non-blank, valid subject, blank line before body."""
    stripped = (message or "").strip()
    if not stripped:
        raise ValueError("Commit message cannot be empty")
    lines = stripped.splitlines()
    lint_git_commit_subject(lines[0].strip(), max_length=max_length)
    if len(lines) > 1 and lines[1].strip():
        raise ValueError("Separate the subject from the body with a blank line")


def truncate_subject(subject, max_length=MAX_SUBJECT_LENGTH):
    """Cut an over-long subject and mark the cut with an ellipsis."""
    if len(subject) <= max_length:
        return subject
    return subject[: max_length - len(ELLIPSIS)].rstrip() + ELLIPSIS


def clean_commit_message(text, multiline=False, max_length=MAX_SUBJECT_LENGTH):
    """
    Turn raw model output into a commit message.

    Strips code fences, wrapping quotes and a leading "commit message:" label,
    keeps the first non-empty line as the subject (and the remaining lines as
    the body when multiline is set), then validates the subject.

    Raises GenerationError when no valid subject can be recovered.
    """
    lines = [line for line in (text or "").strip().splitlines() if not _FENCE_RE.match(line)]
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise GenerationError("Model returned an empty response")

    subject = lines[0].strip()
    subject = _WRAPPING_QUOTES_RE.sub("", subject).strip()
    subject = _LABEL_RE.sub("", subject)
    subject = _WRAPPING_QUOTES_RE.sub("", subject).strip()

    if not COMMIT_SUBJECT_RE.match(subject):
        raise GenerationError(f"Subject is not a conventional commit: {subject[:80]!r}")

    subject = truncate_subject(subject, max_length)
    # Cutting inside a very long scope can break the pattern.
    if not COMMIT_SUBJECT_RE.match(subject):
        raise GenerationError("Subject could not be shortened to a valid conventional commit")

    if not multiline:
        return subject

    body = "\n".join(line.rstrip() for line in lines[1:]).strip()
    if lines[0].lstrip()[:1] in ("\"", "'", "`"):
        # the closing quote of a wrapped message lands at the end of the body
        body = body.rstrip("\"'`").rstrip()
    if not body:
        return subject

    message = f"{subject}\n\n{body}"
    if len(message) > MAX_DETAILED_MESSAGE_LENGTH:
        message = message[: MAX_DETAILED_MESSAGE_LENGTH - len(ELLIPSIS)].rstrip() + ELLIPSIS
    return message
