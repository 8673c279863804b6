"""
Client for the external text generator (OpenAI-compatible chat completions).

This module owns the boundary with the generator:
- ``build_prompt(profile)``: the instruction sent for one learner.
- ``ChatCompletionGenerator.generate(prompt)``: one async request/response.
- ``GenerationError``: typed exception carrying a status code.

No retries happen here; a failed call raises and the caller decides.
"""

import logging
import os
import time
from typing import Any, Dict, Optional

import httpx

from learnpath.config import GeneratorSettings
from learnpath.models import LearnerProfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------


class GenerationError(Exception):
    """Raised when the generator cannot produce a response.

    Attributes:
        status: One of ``'timeout'``, ``'network_error'``,
                ``'rate_limited'``, ``'http_error'``, ``'bad_response'``,
                ``'missing_api_key'``.
        original: The underlying exception (may be ``None``).
    """

    def __init__(self, status: str, original: Optional[Exception] = None) -> None:
        self.status = status
        self.original = original
        super().__init__(f"status={status}: {original}")


def _classify_exception(exc: Exception) -> str:
    """Map an ``httpx`` exception to a status string."""
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, httpx.HTTPStatusError):
        if exc.response.status_code == 429:
            return "rate_limited"
        return "http_error"
    if isinstance(exc, httpx.RequestError):
        return "network_error"
    return "bad_response"


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

_PROMPT_TEMPLATE = """\
Generate a personalized learning path for a student with the following profile:
- Current Skill Level: {level}
- Learning Style: {style}
- Interests: {interests}
- Learning Goals: {goals}
- Completed Courses: {courses}

Create a detailed, step-by-step learning path that:
1. Matches their current skill level and gradually progresses
2. Aligns with their preferred learning style ({style})
3. Incorporates their specific interests and goals
4. Builds upon their completed courses
5. Includes practical exercises and assessments
6. Provides clear learning outcomes for each step

Format each step as follows:
Step [number]:
Title: [concise title]
Description: [detailed description]
Difficulty: [beginner/intermediate/advanced]
Duration: [estimated time]
Key Modules:
- [module 1]
- [module 2]
Prerequisites:
- [prerequisite 1]
- [prerequisite 2]
Learning Outcomes:
- [outcome 1]
- [outcome 2]
"""


def build_prompt(profile: LearnerProfile) -> str:
    """Interpolate *profile* into the step-format instruction."""
    return _PROMPT_TEMPLATE.format(
        level=profile.current_skill_level,
        style=profile.preferred_learning_style or "any",
        interests=", ".join(profile.interests) or "none specified",
        goals=", ".join(profile.learning_goals) or "none specified",
        courses=", ".join(profile.completed_courses) or "none",
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ChatCompletionGenerator:
    """Single-shot chat-completion caller.

    Args:
        settings: Endpoint, model and sampling settings.
        client: Optional pre-built ``httpx.AsyncClient`` (for testing).
                If ``None``, a client is opened per request.
    """

    def __init__(
        self,
        settings: Optional[GeneratorSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or GeneratorSettings()
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        api_key = os.environ.get(self.settings.api_key_env)
        if not api_key:
            raise GenerationError(
                "missing_api_key",
                KeyError(f"environment variable {self.settings.api_key_env} is not set"),
            )
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": self.settings.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        response = await client.post(
            self.endpoint,
            json=self._payload(prompt),
            headers=self._headers(),
            timeout=self.settings.timeout,
        )
        response.raise_for_status()
        return response

    async def generate(self, prompt: str) -> str:
        """Send *prompt* and return the generated text.

        Raises:
            GenerationError: The endpoint is unreachable, times out,
                answers with an HTTP error, or returns a body without a
                chat-completion message.
        """
        t0 = time.monotonic()
        try:
            if self._client is not None:
                response = await self._post(self._client, prompt)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, prompt)
            content = response.json()["choices"][0]["message"]["content"]
            if content is not None and not isinstance(content, str):
                raise TypeError(f"message content is {type(content).__name__}, not str")
        except GenerationError:
            raise
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
            status = _classify_exception(exc)
            elapsed_ms = (time.monotonic() - t0) * 1000
            logger.error(
                "generation_failed | endpoint=%s | model=%s | status=%s | "
                "elapsed_ms=%.0f | exception=%r",
                self.endpoint, self.settings.model, status, elapsed_ms, exc,
            )
            raise GenerationError(status, exc) from exc

        elapsed_ms = (time.monotonic() - t0) * 1000
        text = content or ""
        logger.info(
            "generation_ok | model=%s | chars=%d | elapsed_ms=%.0f",
            self.settings.model, len(text), elapsed_ms,
        )
        return text
