"""AI commit message generation."""

import logging
import time

import openai

from ..config import FALLBACK_MESSAGE, MAX_SUBJECT_LENGTH
from ..errors import GenerationError
from ..validation import clean_commit_message
from .client import check_local_engine, get_api_key, get_openai_client, get_provider
from .prompts import build_commit_prompt, clamp_diff

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
INITIAL_DELAY = 1.0
MAX_TOKENS = {"conventional": 100, "simple": 100, "detailed": 400}


class CommitMessageGenerator:
    """
    Draft commit messages from a diff with an OpenAI-compatible client.

    generate() always returns a usable message: any remote failure or
    malformed answer is replaced by FALLBACK_MESSAGE.
    """

    def __init__(
        self,
        client,
        model,
        temperature=0.2,
        style="conventional",
        max_prompt_lines=500,
        max_prompt_chars=16000,
        max_attempts=MAX_ATTEMPTS,
        initial_delay=INITIAL_DELAY,
        sleep=None,
        progress=None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.style = style
        self.max_prompt_lines = max_prompt_lines
        self.max_prompt_chars = max_prompt_chars
        self.max_attempts = max(1, max_attempts)
        self.initial_delay = initial_delay
        self.sleep = sleep or time.sleep
        self.progress = progress

    def _report(self, message):
        logger.info(message)
        if self.progress is not None:
            self.progress(message)

    def build_prompt(self, diff):
        clamped = clamp_diff(diff, self.max_prompt_lines, self.max_prompt_chars)
        return build_commit_prompt(clamped, style=self.style, max_length=MAX_SUBJECT_LENGTH)

    def _request(self, prompt):
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=MAX_TOKENS.get(self.style, 100),
        )
        try:
            return completion.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as exc:
            raise GenerationError(f"Unexpected response shape from model: {exc}") from exc

    def generate(self, diff, disable_ai=False):
        """
        Produce a commit message for the diff.

        Args:
            diff: Diff text from the collector
            disable_ai: Skip the model and return the fallback

        Returns:
            Commit message string (never blank)
        """
        if disable_ai or not (diff or "").strip():
            return FALLBACK_MESSAGE

        prompt = self.build_prompt(diff)
        delay = self.initial_delay
        for attempt in range(1, self.max_attempts + 1):
            try:
                raw = self._request(prompt)
            except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
                self._report(f"Model access denied ({exc.status_code}); using fallback message")
                return FALLBACK_MESSAGE
            except openai.RateLimitError:
                if attempt == self.max_attempts:
                    self._report("Still rate limited; using fallback message")
                    return FALLBACK_MESSAGE
                self._report(
                    f"Rate limited. Retrying in {delay:g}s... "
                    f"({self.max_attempts - attempt} attempts left)"
                )
            except openai.APIError as exc:
                if attempt == self.max_attempts:
                    self._report(f"AI commit generation failed: {exc}; using fallback message")
                    return FALLBACK_MESSAGE
                self._report(f"Request failed: {exc}. Retrying in {delay:g}s...")
            except GenerationError as exc:
                self._report(f"{exc}; using fallback message")
                return FALLBACK_MESSAGE
            else:
                try:
                    return clean_commit_message(raw, multiline=self.style == "detailed")
                except GenerationError as exc:
                    self._report(
                        f"AI message doesn't match conventional format ({exc}); using fallback"
                    )
                    return FALLBACK_MESSAGE

            self.sleep(delay)
            delay *= 2

        return FALLBACK_MESSAGE


def build_generator(settings, model=None, progress=None, disable_ai=False):
    """
    Construct a generator from run settings.

    Checks credentials and, for local providers, that the engine answers.
    With disable_ai no client is built and no check is made.
    """
    provider = get_provider(settings.provider)
    model = model or settings.model or provider.default_model
    client = None
    if not disable_ai:
        api_key = get_api_key(provider)
        check_local_engine(provider)
        client = get_openai_client(provider, api_key)
    return CommitMessageGenerator(
        client,
        model,
        temperature=settings.temperature,
        style=settings.commit_style,
        max_prompt_lines=min(provider.max_prompt_lines, settings.max_diff_lines),
        max_prompt_chars=provider.max_prompt_chars,
        progress=progress,
    )
