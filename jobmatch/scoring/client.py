"""AI service clients used by the scoring stage."""

from abc import ABC, abstractmethod
from typing import Optional

from openai import OpenAI, OpenAIError

from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.exceptions import ConfigurationError
from jobmatch.config.models import ScoringConfig
from jobmatch.logging import get_logger

from .exceptions import ScoringClientError, ScoringResponseError

logger = get_logger(__name__, component="scoring")


class ScoringClient(ABC):
    """Minimal contract the scoring stage needs from an AI service."""

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Send one prompt pair and return the raw response text.

        Raises:
            ScoringClientError: If the request fails
            ScoringResponseError: If the service returns no text
        """


class OpenAIScoringClient(ScoringClient):
    """
    ScoringClient backed by the OpenAI chat completions API.

    The SDK's own retries are disabled: a failed request fails its batch,
    which then receives the fallback score.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        max_tokens: int = 2048,
        timeout: float = 60,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            max_tokens: Response token limit per request
            timeout: Request timeout in seconds
            client: Optional pre-built OpenAI client (tests inject one)

        Raises:
            ConfigurationError: If api_key is missing
        """
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is not set",
                suggestions=[
                    "Add OPENAI_API_KEY to your .env file",
                    "Run with --no-score to skip AI scoring",
                ],
            )

        self.model = model
        self.max_tokens = max_tokens
        self._client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    @classmethod
    def from_config(cls, scoring_config: ScoringConfig, env_config: EnvironmentConfig) -> "OpenAIScoringClient":
        return cls(
            api_key=env_config.openai_api_key,
            model=scoring_config.model,
            max_tokens=scoring_config.max_tokens,
            timeout=scoring_config.request_timeout,
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        logger.debug(
            "Sending scoring request",
            extra={"event": "scoring.request", "model": self.model, "prompt_chars": len(user_prompt)},
        )

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except OpenAIError as e:
            raise ScoringClientError(f"AI request failed: {type(e).__name__}: {e}") from e

        if not response.choices:
            raise ScoringResponseError("AI response contained no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ScoringResponseError("No text content in AI scoring response")

        return content
