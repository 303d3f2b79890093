"""Azure OpenAI chat-completions provider."""

import httpx

from gq.core.config import AzureOpenAISettings, require
from gq.core.logging import get_logger
from gq.llm.base import LLMConfig, LLMProvider, LLMResponse, ProviderError, ProviderType
from gq.llm.openai import parse_chat_completion

logger = get_logger("llm.azure_openai")


class AzureOpenAIProvider(LLMProvider):
    """Azure OpenAI deployment provider (key credential auth)."""

    provider_type = ProviderType.AZURE_OPENAI

    def __init__(self, settings: AzureOpenAISettings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = require(settings.api_key, "azureOpenAI.apiKey")
        self.endpoint = require(settings.model_endpoint, "azureOpenAI.modelEndpoint").rstrip("/")
        self.deployment = require(settings.model_deployment_id, "azureOpenAI.modelDeploymentID")
        self.api_version = settings.api_version
        self.config = LLMConfig(
            model=self.deployment,
            max_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.endpoint,
                headers={"api-key": self.api_key},
                timeout=120.0,
                transport=self._transport,
            )
        return self._client

    def describe(self) -> dict[str, str]:
        return {
            "Model Deployment ID": self.deployment,
            "Model Endpoint": self.endpoint,
            "Temperature": str(self.config.temperature),
            "Max Output Tokens": str(self.config.max_tokens),
        }

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate completion via an Azure OpenAI deployment."""
        # The deployment picks the model, so no "model" field
        payload = {
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        logger.debug(
            f"Azure OpenAI request: deployment={self.deployment}, endpoint={self.endpoint}, "
            f"api_version={self.api_version}"
        )

        try:
            response = await self.client.post(
                f"/openai/deployments/{self.deployment}/chat/completions",
                params={"api-version": self.api_version},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Azure OpenAI HTTP error: {e.response.status_code} - {e.response.text}")
            raise ProviderError(
                f"Azure OpenAI chat completion failed ({e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Azure OpenAI error: {e}")
            raise ProviderError(f"Azure OpenAI chat completion failed: {e}") from e
        except ValueError as e:
            logger.error(f"Azure OpenAI returned a non-JSON body: {response.text[:200]}")
            raise ProviderError("Azure OpenAI chat completion failed: response was not JSON") from e

        content, input_tokens, output_tokens = parse_chat_completion(data)
        logger.debug(f"Azure OpenAI response ({output_tokens} tokens): {content[:200]}...")

        return LLMResponse(
            content=content,
            model=data.get("model", self.deployment),
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"deployment": self.deployment},
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
