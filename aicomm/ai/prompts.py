"""Prompt templates for commit message generation."""

from textwrap import dedent

from ..config import COMMIT_TYPES, MAX_SUBJECT_LENGTH

COMMIT_MESSAGE_PROMPT = dedent("""
    You are an expert software engineer creating git commit messages.

    Analyze the following git diff and generate a concise, meaningful commit message.

    STRICT RULES:
    1. Use conventional commits format: <type>(<optional scope>): <description>
    2. Valid types: {types}
    3. Subject line at most {max_length} characters
    4. Be specific about what changed (not just "update files")
    5. No emojis, no quotes, no markdown, no code fences
    6. Use imperative mood (e.g., "add feature" not "added feature")
    {style_rules}

    EXAMPLES:
    {examples}

    Git diff:
    {diff}

    Output ONLY the commit message, nothing else.
""").strip()

STYLE_RULES = {
    "conventional": dedent("""
        7. One line only
        8. Add a scope in parentheses when the change is confined to one area
    """).strip(),
    "simple": dedent("""
        7. One line only
        8. Do not use a scope; keep the description short and lowercase
    """).strip(),
    "detailed": dedent("""
        7. First line is the subject, then one blank line, then a body
        8. The body is 2-5 lines starting with "- " explaining what changed and why
    """).strip(),
}

STYLE_EXAMPLES = {
    "conventional": dedent("""
        - feat(auth): add user authentication with JWT
        - fix(worker): resolve memory leak in worker threads
        - refactor: simplify database query logic
        - docs(api): update documentation for v2 endpoints
        - test: add unit tests for payment processing
    """).strip(),
    "simple": dedent("""
        - feat: add user authentication
        - fix: resolve memory leak in workers
        - docs: update api documentation
    """).strip(),
    "detailed": dedent("""
        feat(auth): add user authentication with JWT

        - issue signed tokens on login and verify them per request
        - store refresh tokens so sessions survive restarts
    """).strip(),
}

TRUNCATION_NOTICE = "[Note: Diff truncated to {kept} of {total} lines]"
CHAR_TRUNCATION_NOTICE = "[Note: Diff truncated to {kept} of {total} characters]"


def clamp_diff(diff, max_lines, max_chars):
    """
    Clamp the diff to the provider's prompt budget.

    Lines are cut first, then characters; each cut appends a notice.
    """
    lines = diff.split("\n")
    if len(lines) > max_lines:
        diff = "\n".join(lines[:max_lines])
        diff += "\n" + TRUNCATION_NOTICE.format(kept=max_lines, total=len(lines))
    if len(diff) > max_chars:
        total = len(diff)
        diff = diff[:max_chars].rsplit("\n", 1)[0]
        diff += "\n" + CHAR_TRUNCATION_NOTICE.format(kept=len(diff), total=total)
    return diff


def build_commit_prompt(diff, style="conventional", max_length=MAX_SUBJECT_LENGTH):
    """Fill the commit prompt for a style with an already-clamped diff."""
    return COMMIT_MESSAGE_PROMPT.format(
        types=", ".join(COMMIT_TYPES),
        max_length=max_length,
        style_rules=STYLE_RULES[style],
        examples=STYLE_EXAMPLES[style],
        diff=diff,
    )
