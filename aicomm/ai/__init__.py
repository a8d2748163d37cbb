"""AI integration package."""

from .client import (
    PROVIDERS,
    Provider,
    check_local_engine,
    get_api_key,
    get_openai_client,
    get_provider,
)
from .commits import CommitMessageGenerator, build_generator
from .prompts import build_commit_prompt, clamp_diff

__all__ = [
    "PROVIDERS",
    "Provider",
    "get_provider",
    "get_api_key",
    "check_local_engine",
    "get_openai_client",
    "CommitMessageGenerator",
    "build_generator",
    "build_commit_prompt",
    "clamp_diff",
]
