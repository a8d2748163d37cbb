"""Configuration constants and settings loading for aicomm."""

import json
import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import ConfigError

__version__ = "1.1.0"

logger = logging.getLogger(__name__)

COMMIT_TYPES = (
    "feat", "fix", "chore", "docs", "refactor", "test", "style", "perf", "ci", "build"
)

COMMIT_SUBJECT_RE = re.compile(
    r"^(feat|fix|chore|docs|refactor|test|style|perf|ci|build)(\(.+\))?: .+"
)

FALLBACK_MESSAGE = "chore: update files"

MAX_SUBJECT_LENGTH = 72
MAX_DETAILED_MESSAGE_LENGTH = 1000

CONFIG_FILENAME = ".aicommrc"

COMMIT_STYLES = ("conventional", "simple", "detailed")
PROVIDER_IDS = ("openrouter", "gemini", "ollama", "openai")

MIN_DIFF_LINES = 10
MAX_DIFF_LINES = 10000
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0

# JSON key -> Settings field
CONFIG_KEYS = {
    "provider": "provider",
    "model": "model",
    "maxDiffLines": "max_diff_lines",
    "temperature": "temperature",
    "commitStyle": "commit_style",
    "autoStage": "auto_stage",
    "ignoreLockFiles": "ignore_lock_files",
}


@dataclass(frozen=True)
class Settings:
    """Run settings; immutable once loaded."""

    provider: str = "openrouter"
    model: str = None
    max_diff_lines: int = 500
    temperature: float = 0.2
    commit_style: str = "conventional"
    auto_stage: bool = False
    ignore_lock_files: bool = True

    def with_overrides(self, **overrides):
        """Return a copy with the non-None overrides applied (CLI flags)."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        updated = replace(self, **values)
        validate_settings(updated, source="command line")
        return updated


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_settings(settings, source="settings"):
    """
    Check every field of a Settings instance.

    Raises ConfigError naming the source and the offending key.
    """
    if settings.provider not in PROVIDER_IDS:
        raise ConfigError(
            f"{source}: provider must be one of {', '.join(PROVIDER_IDS)} "
            f"(got {settings.provider!r})"
        )
    if settings.model is not None and (
        not isinstance(settings.model, str) or not settings.model.strip()
    ):
        raise ConfigError(f"{source}: model must be a non-empty string")
    if not _is_int(settings.max_diff_lines) or not (
        MIN_DIFF_LINES <= settings.max_diff_lines <= MAX_DIFF_LINES
    ):
        raise ConfigError(
            f"{source}: maxDiffLines must be an integer between "
            f"{MIN_DIFF_LINES} and {MAX_DIFF_LINES} (got {settings.max_diff_lines!r})"
        )
    if not _is_number(settings.temperature) or not (
        MIN_TEMPERATURE <= settings.temperature <= MAX_TEMPERATURE
    ):
        raise ConfigError(
            f"{source}: temperature must be a number between "
            f"{MIN_TEMPERATURE:g} and {MAX_TEMPERATURE:g} (got {settings.temperature!r})"
        )
    if settings.commit_style not in COMMIT_STYLES:
        raise ConfigError(
            f"{source}: commitStyle must be one of {', '.join(COMMIT_STYLES)} "
            f"(got {settings.commit_style!r})"
        )
    if not isinstance(settings.auto_stage, bool):
        raise ConfigError(f"{source}: autoStage must be true or false")
    if not isinstance(settings.ignore_lock_files, bool):
        raise ConfigError(f"{source}: ignoreLockFiles must be true or false")


def read_config_file(path):
    """
    Read one JSON settings file.

    Args:
        path: Path to the file

    Returns:
        Dict of Settings field names to values (unknown keys dropped)
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid {path}: {exc}. Please check JSON formatting.") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {path}: expected a JSON object at the top level")

    values = {}
    for key, value in data.items():
        field_name = CONFIG_KEYS.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown key %r in %s", key, path)
            continue
        values[field_name] = value
    return values


def load_settings(project_dir=None, home_dir=None):
    """
    Load settings, merging defaults < user file < project file.

    Args:
        project_dir: Directory holding the project .aicommrc (default: cwd)
        home_dir: Directory holding the user .aicommrc (default: home)

    Returns:
        Validated Settings
    """
    project_dir = Path(project_dir) if project_dir is not None else Path.cwd()
    home_dir = Path(home_dir) if home_dir is not None else Path.home()

    merged = {}
    seen = set()
    for path in (home_dir / CONFIG_FILENAME, project_dir / CONFIG_FILENAME):
        resolved = path.resolve()
        if resolved in seen or not path.is_file():
            continue
        seen.add(resolved)
        logger.debug("Loading settings from %s", path)
        file_values = read_config_file(path)
        validate_settings(Settings(**{**merged, **file_values}), source=str(path))
        merged.update(file_values)

    settings = Settings(**merged)
    validate_settings(settings)
    return settings
