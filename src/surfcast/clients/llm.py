"""Language-model report generator (OpenAI chat completions)."""

import logging
from typing import Optional

import openai
from openai import OpenAI

from surfcast.errors import UpstreamError, UpstreamMalformed, UpstreamTimeout

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
REQUEST_TIMEOUT = 30
MAX_TOKENS = 300

SOURCE = "llm"


class ReportGenerator:
    """Generate raw report text from a prompt.

    The returned text is unparsed; see surfcast.reports.parsing.

    Example:
        >>> generator = ReportGenerator(api_key="sk-...", timeout=30)
        >>> generator.generate(SYSTEM_MESSAGE, prompt)
        '{"title": "Head high, offshore", ...}'
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout: float = REQUEST_TIMEOUT,
        max_tokens: int = MAX_TOKENS,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._client = None

    def _get_client(self) -> OpenAI:
        """Lazy create the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise UpstreamError(SOURCE, "no OpenAI API key configured")
            # No SDK retries: the timeout is the whole budget for this call
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def generate(self, system: str, prompt: str) -> str:
        """Run one chat completion.

        Raises:
            UpstreamTimeout: If the call exceeds the timeout
            UpstreamMalformed: If the completion has no text
            UpstreamError: Missing API key or any other API error
        """
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                max_completion_tokens=self.max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
            )
        except openai.APITimeoutError as e:
            raise UpstreamTimeout(SOURCE, f"completion timed out after {self.timeout}s") from e
        except openai.OpenAIError as e:
            raise UpstreamError(SOURCE, f"completion failed: {e}") from e

        if not response.choices:
            raise UpstreamMalformed(SOURCE, "completion returned no choices")

        choice = response.choices[0]
        text = (choice.message.content or "").strip()
        logger.info(
            f"Completion from {response.model}: {len(text)} chars, "
            f"finish_reason={choice.finish_reason}"
        )
        if not text:
            raise UpstreamMalformed(SOURCE, "completion returned empty content")
        return text
