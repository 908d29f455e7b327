"""LLM-backed company profile extraction.

Implements the Template Method pattern: the base class owns the prompt
and error translation, while each provider subclass only implements the
raw completion call. The extractor returns completion *text*; decoding
and normalization happen in ``profile_normalizer``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import anthropic
import openai
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings
from app.errors import AiUnavailableError
from app.services.company_profiler.constants import LLM_RETRY_ATTEMPTS

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You extract structured company intelligence from website content. "
    "Always reply with strict JSON using the required keys. "
    "Return null for unknown strings and an empty array for lists when data "
    "is unavailable."
)

USER_PROMPT_TEMPLATE = (
    "Given the company website below, infer and return:\n"
    "{{\n"
    '  "company_name": string | null,\n'
    '  "company_description": string | null,\n'
    '  "service_lines": string[],\n'
    '  "tier1_keywords": string[],\n'
    '  "tier2_keywords": string[],\n'
    '  "emails": string[],\n'
    '  "poc": string | null\n'
    "}}\n"
    "Use simple language and keep description under 70 words. "
    "Extract company emails and representative names when explicitly available.\n\n"
    "Website URL: {url}\n\n"
    'Website Content:\n"""{content}"""'
)


class ProfileExtractor(ABC):
    """Template base for provider-specific profile extractors.

    Subclasses must implement:
        - ``_call_llm()``: send the prompt and return the completion text
        - ``PROVIDER_ERRORS``: SDK exception types to report as unavailable
    """

    PROVIDER_NAME: str = "LLM"
    PROVIDER_ERRORS: tuple[type[BaseException], ...] = ()

    def __init__(
        self,
        client: Any,
        model: str,
        *,
        temperature: float = 0.2,
        max_tokens: int = 2000,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_user_prompt(self, url: str, content: str) -> str:
        return USER_PROMPT_TEMPLATE.format(url=url, content=content)

    async def complete(self, url: str, content: str) -> Optional[str]:
        """Ask the model for a profile of *url*; return the raw completion.

        Returns ``None`` (or an empty string) when the model produced no
        content.

        Raises:
            AiUnavailableError: If the provider call fails after retries.
        """
        user_prompt = self.build_user_prompt(url, content)
        try:
            return await self._call_llm(user_prompt)
        except self.PROVIDER_ERRORS as e:
            logger.error(f"{self.__class__.__name__} LLM call failed: {e}")
            raise AiUnavailableError(
                f"{self.PROVIDER_NAME} API request failed.", str(e)
            ) from e

    @abstractmethod
    async def _call_llm(self, user_content: str) -> Optional[str]:
        """Send the extraction prompt and return the completion text."""


class OpenAIProfileExtractor(ProfileExtractor):
    """Chat Completions in JSON mode."""

    PROVIDER_NAME = "OpenAI"
    PROVIDER_ERRORS = (openai.OpenAIError,)

    @retry(
        retry=retry_if_exception_type((openai.RateLimitError, openai.APITimeoutError)),
        stop=stop_after_attempt(LLM_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def _call_llm(self, user_content: str) -> Optional[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_content},
            ],
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class AnthropicProfileExtractor(ProfileExtractor):
    """Messages API; JSON is requested through the prompt only."""

    PROVIDER_NAME = "Anthropic"
    PROVIDER_ERRORS = (anthropic.AnthropicError,)

    @retry(
        retry=retry_if_exception_type(
            (anthropic.RateLimitError, anthropic.APITimeoutError)
        ),
        stop=stop_after_attempt(LLM_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def _call_llm(self, user_content: str) -> Optional[str]:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": user_content}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )


def create_profile_extractor(settings: Settings) -> ProfileExtractor:
    """Build the extractor for ``settings.llm_provider``.

    Raises:
        ValueError: If the provider is unknown or its API key is missing.
    """
    provider = settings.llm_provider.lower()

    if provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the openai provider")
        return OpenAIProfileExtractor(
            openai.AsyncOpenAI(api_key=settings.openai_api_key),
            settings.openai_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )

    if provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for the anthropic provider")
        return AnthropicProfileExtractor(
            anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key),
            settings.claude_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )

    raise ValueError(f"Unsupported LLM_PROVIDER: {settings.llm_provider}")
