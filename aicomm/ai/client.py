"""Model providers and client construction."""

import logging
import os
from dataclasses import dataclass, field

import openai
import urllib3

from ..errors import EnvironmentCheckError

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


@dataclass(frozen=True)
class Provider:
    """How to reach one OpenAI-compatible chat completions endpoint."""

    name: str
    base_url: str
    default_model: str
    api_key_env: tuple = ()
    headers: dict = field(default_factory=dict)
    # prompt clamp applied just before the remote call
    max_prompt_lines: int = 500
    max_prompt_chars: int = 16000
    local: bool = False


PROVIDERS = {
    "openrouter": Provider(
        name="openrouter",
        base_url="https://openrouter.ai/api/v1",
        default_model="google/gemini-2.0-flash-exp:free",
        api_key_env=("OPENROUTER_API_KEY",),
        headers={"HTTP-Referer": "http://localhost", "X-Title": "aicomm"},
    ),
    "gemini": Provider(
        name="gemini",
        base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
        default_model="gemini-1.5-flash",
        api_key_env=("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        max_prompt_lines=1000,
        max_prompt_chars=30000,
    ),
    "ollama": Provider(
        name="ollama",
        base_url=DEFAULT_OLLAMA_HOST + "/v1",
        default_model="llama3.2:3b",
        max_prompt_lines=300,
        max_prompt_chars=8000,
        local=True,
    ),
    "openai": Provider(
        name="openai",
        base_url="https://api.openai.com/v1",
        default_model="gpt-4.1-mini",
        api_key_env=("OPENAI_API_KEY", "OPEN_AI_API_KEY"),
    ),
}


def get_provider(name):
    """Look up a provider by id."""
    try:
        return PROVIDERS[name]
    except KeyError:
        raise EnvironmentCheckError(
            f"Unknown provider: {name}. Use one of: {', '.join(PROVIDERS)}"
        ) from None


def ollama_host():
    return os.environ.get("OLLAMA_HOST", DEFAULT_OLLAMA_HOST).rstrip("/")


def _read_dotenv(keys, env_path=".env"):
    if not os.path.exists(env_path):
        return None
    with open(env_path, "r") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            if key in keys:
                return value.strip().strip('"').strip("'")
    return None


def get_api_key(provider, env_path=".env"):
    """
    Find the provider's API key in the environment or a .env file.

    Local providers need no key and get a placeholder. Raises
    EnvironmentCheckError if a required key is missing.
    """
    if provider.local:
        return provider.name

    for var in provider.api_key_env:
        value = os.environ.get(var)
        if value:
            return value

    value = _read_dotenv(provider.api_key_env, env_path)
    if value:
        return value

    names = " or ".join(provider.api_key_env)
    raise EnvironmentCheckError(
        f"API key missing: set {names} in the environment or a .env file, "
        "or run with --no-ai."
    )


def check_local_engine(provider, timeout=3.0):
    """
    Make sure a local model server answers before generating.

    Raises EnvironmentCheckError when the engine is offline.
    """
    if not provider.local:
        return
    url = f"{ollama_host()}/api/tags"
    http = urllib3.PoolManager(timeout=urllib3.Timeout(total=timeout), retries=False)
    try:
        response = http.request("GET", url)
    except urllib3.exceptions.HTTPError as exc:
        raise EnvironmentCheckError(
            f"Local model engine offline at {ollama_host()}. Start it with: ollama serve"
        ) from exc
    if response.status >= 500:
        raise EnvironmentCheckError(
            f"Local model engine at {ollama_host()} answered with HTTP {response.status}"
        )
    logger.debug("Local engine at %s is up", url)


def get_openai_client(provider, api_key):
    """Build an OpenAI-compatible client for the provider."""
    base_url = f"{ollama_host()}/v1" if provider.local else provider.base_url
    logger.debug("Using provider %s at %s", provider.name, base_url)
    return openai.OpenAI(
        api_key=api_key,
        base_url=base_url,
        default_headers=provider.headers or None,
    )
