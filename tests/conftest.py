import subprocess
from pathlib import Path
from types import SimpleNamespace

import httpx
import openai
import pytest

API_KEY_VARS = (
    "OPENROUTER_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "OPEN_AI_API_KEY",
    "OLLAMA_HOST",
)


@pytest.fixture
def tmp_git_repo(tmp_path):
    """Create a temporary git repository on branch main with user config set."""
    repo = tmp_path / "repo"
    repo.mkdir()

    def git(cmd):
        subprocess.check_call(f"git -C {repo} {cmd}", shell=True)

    git("init -q")
    git("symbolic-ref HEAD refs/heads/main")
    git('config user.email "test@example.com"')
    git('config user.name "Test User"')
    git("config commit.gpgsign false")
    return repo, git


@pytest.fixture
def git_output(tmp_git_repo):
    repo, _ = tmp_git_repo

    def _out(cmd):
        return subprocess.check_output(f"git -C {repo} {cmd}", shell=True, text=True).strip()

    return _out


@pytest.fixture(autouse=True)
def clear_api_keys(monkeypatch, tmp_path):
    """Ensure provider keys are absent and ~/.aicommrc is isolated during tests."""
    for var in API_KEY_VARS:
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def write_file():
    def _write(base: Path, name: str, content: str = "sample"):
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


def completion(content):
    """Shape of an openai chat completion, as far as the generator reads it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeClient:
    """Stands in for openai.OpenAI; replays outcomes in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return completion(outcome)


_REQUEST = httpx.Request("POST", "https://example.test/v1/chat/completions")


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def api_errors():
    """Builders for the openai exceptions a provider can raise."""

    def status(cls, code):
        return cls(f"HTTP {code}", response=httpx.Response(code, request=_REQUEST), body=None)

    return SimpleNamespace(
        rate_limit=lambda: status(openai.RateLimitError, 429),
        auth=lambda: status(openai.AuthenticationError, 401),
        forbidden=lambda: status(openai.PermissionDeniedError, 403),
        server=lambda: status(openai.InternalServerError, 500),
        timeout=lambda: openai.APITimeoutError(request=_REQUEST),
    )


@pytest.fixture
def repo_with_commit(monkeypatch, tmp_git_repo, write_file):
    """A repository with one commit of a.py and b.py; cwd is the repo."""
    repo, git = tmp_git_repo
    write_file(repo, "a.py", "a = 1\n")
    write_file(repo, "b.py", "b = 1\n")
    git("add a.py b.py")
    git('commit -q -m "feat: initial"')
    monkeypatch.chdir(repo)
    return repo, git
