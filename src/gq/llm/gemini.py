"""Google Gemini provider via the Generative Language REST API."""

import httpx

from gq.core.config import GeminiSettings, require
from gq.core.logging import get_logger
from gq.llm.base import LLMConfig, LLMProvider, LLMResponse, ProviderError, ProviderType

logger = get_logger("llm.gemini")

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"

NO_CONTENT_MESSAGE = "Failed to generate message. Try again"


class GeminiProvider(LLMProvider):
    """Gemini generateContent provider."""

    provider_type = ProviderType.GEMINI

    def __init__(self, settings: GeminiSettings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = require(settings.api_key, "gemini.apiKey")
        self.config = LLMConfig(
            model=require(settings.model_name, "gemini.modelName"),
            max_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=GEMINI_BASE,
                headers={"x-goog-api-key": self.api_key},
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

    def build_payload(self, prompt: str) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_tokens,
            },
        }

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate content via Gemini."""
        model = self.config.model
        logger.debug(f"Gemini request: model={model}, max_tokens={self.config.max_tokens}")
        logger.debug(f"Gemini prompt ({len(prompt)} chars)")

        try:
            response = await self.client.post(
                f"/models/{model}:generateContent", json=self.build_payload(prompt)
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini HTTP error: {e.response.status_code} - {e.response.text}")
            raise ProviderError(f"Gemini request failed ({e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini error: {e}")
            raise ProviderError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Gemini returned a non-JSON body: {response.text[:200]}")
            raise ProviderError("Gemini request failed: response was not JSON") from e

        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason")
            detail = f" (blocked: {reason})" if reason else ""
            raise ProviderError(f"Gemini returned no candidates{detail}")

        content = candidates[0].get("content")
        if content and content.get("parts"):
            text = content["parts"][0].get("text", "")
        else:
            # e.g. finishReason SAFETY with no parts
            logger.warning(f"Gemini candidate without content: {candidates[0].get('finishReason')}")
            text = NO_CONTENT_MESSAGE

        usage = data.get("usageMetadata", {})
        input_tokens = usage.get("promptTokenCount", 0)
        output_tokens = usage.get("candidatesTokenCount", 0)
        logger.debug(f"Gemini response ({output_tokens} tokens): {text[:200]}...")

        return LLMResponse(
            content=text,
            model=model,
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"finish_reason": candidates[0].get("finishReason")},
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
