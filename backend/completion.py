import logging
from abc import ABC, abstractmethod

import anthropic

import config
from errors import NotConfiguredError, RateLimitedError, UpstreamError

logger = logging.getLogger(__name__)


class CompletionService(ABC):
    """Text-in/text-out access to a hosted language model."""

    @abstractmethod
    async def complete(self, system: str, message: str, *, max_tokens: int, temperature: float) -> str:
        """
        Send one system instruction plus one user message.

        Returns the reply text. Raises RateLimitedError when the provider
        throttles us and UpstreamError for any other provider failure.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the service."""


class AnthropicCompletionService(CompletionService):
    def __init__(self, api_key: str, model: str, timeout: float):
        self.model = model
        # No automatic retries; a failed call surfaces to the caller.
        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(self, system: str, message: str, *, max_tokens: int, temperature: float) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": message}],
            )
        except anthropic.RateLimitError as e:
            raise RateLimitedError(details=str(e)) from e
        except anthropic.APITimeoutError as e:
            raise UpstreamError(details=f"timeout: {e}") from e
        except anthropic.APIError as e:
            raise UpstreamError(details=f"API error: {e}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug("Completion response: %s", text)
        return text

    async def aclose(self) -> None:
        await self.client.close()


class UnconfiguredCompletionService(CompletionService):
    """Stands in when no API key is set so the AI endpoints fail cleanly."""

    async def complete(self, system: str, message: str, *, max_tokens: int, temperature: float) -> str:
        raise NotConfiguredError()


def build_completion_service() -> CompletionService:
    if not config.is_completion_configured():
        logger.warning("ANTHROPIC_API_KEY is not set; AI endpoints are disabled")
        return UnconfiguredCompletionService()
    return AnthropicCompletionService(
        api_key=config.ANTHROPIC_API_KEY,
        model=config.COMPLETION_MODEL,
        timeout=config.COMPLETION_TIMEOUT_SECONDS,
    )
