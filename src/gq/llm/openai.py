"""OpenAI chat-completions provider."""

import httpx

from gq.core.config import OpenAISettings, require
from gq.core.logging import get_logger
from gq.llm.base import (
    LLMConfig,
    LLMProvider,
    LLMResponse,
    ProviderError,
    ProviderType,
    UnsupportedModelError,
)

logger = get_logger("llm.openai")

OPENAI_BASE = "https://api.openai.com/v1"

SUPPORTED_MODELS = ("gpt-3.5-turbo", "gpt-4-turbo", "gpt-4")


def parse_chat_completion(data: dict) -> tuple[str, int, int]:
    """Pull (content, prompt_tokens, completion_tokens) out of a chat completion body."""
    try:
        content = data["choices"][0]["message"].get("content") or ""
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"Unexpected chat completion response: {data}") from e
    usage = data.get("usage") or {}
    return content, usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0)


class OpenAIProvider(LLMProvider):
    """OpenAI API provider."""

    provider_type = ProviderType.OPENAI

    def __init__(self, settings: OpenAISettings, transport: httpx.AsyncBaseTransport | None = None):
        if settings.model_name not in SUPPORTED_MODELS:
            raise UnsupportedModelError(
                f"Unsupported model {settings.model_name!r}. "
                f"Supported: {', '.join(SUPPORTED_MODELS)}"
            )
        self.api_key = require(settings.api_key, "openAI.apiKey")
        self.config = LLMConfig(
            model=settings.model_name,
            max_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=OPENAI_BASE,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=120.0,
                transport=self._transport,
            )
        return self._client

    def describe(self) -> dict[str, str]:
        return {
            "Model Name": self.config.model,
            "Temperature": str(self.config.temperature),
            "Max Output Tokens": str(self.config.max_tokens),
        }

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate completion via OpenAI."""
        model = self.config.model
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        logger.debug(f"OpenAI request: model={model}, max_tokens={self.config.max_tokens}")

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"OpenAI HTTP error: {e.response.status_code} - {e.response.text}")
            raise ProviderError(f"OpenAI chat completion failed ({e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.error(f"OpenAI error: {e}")
            raise ProviderError(f"OpenAI chat completion failed: {e}") from e
        except ValueError as e:
            logger.error(f"OpenAI returned a non-JSON body: {response.text[:200]}")
            raise ProviderError("OpenAI chat completion failed: response was not JSON") from e

        content, input_tokens, output_tokens = parse_chat_completion(data)
        logger.debug(f"OpenAI response ({output_tokens} tokens): {content[:200]}...")

        return LLMResponse(
            content=content,
            model=data.get("model", model),
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"openai_id": data.get("id")},
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
