"""
AWS Bedrock provider.

Each foundation model on Bedrock has its own request and response JSON.
Model-specific bodies are described in the Bedrock user guide
("Inference parameters for foundation models").
"""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from gq.core.config import BedrockSettings, ConfigError, require
from gq.core.logging import get_logger
from gq.llm.base import (
    LLMProvider,
    LLMResponse,
    ProviderError,
    ProviderType,
    UnsupportedModelError,
)

logger = get_logger("llm.bedrock")

CLAUDE_MODEL_ID = "anthropic.claude-v2"
JURASSIC2_MODEL_ID = "ai21.j2-mid-v1"
LLAMA2_MODEL_ID = "meta.llama2-13b-chat-v1"
TITAN_IMAGE_MODEL_ID = "amazon.titan-image-generator-v1"
TITAN_TEXT_EXPRESS_MODEL_ID = "amazon.titan-text-express-v1"


@dataclass
class BedrockModel:
    """Request/response shape for one Bedrock model."""

    model_id: str
    build_body: Callable[[str, float | None, int | None], dict[str, Any]]
    extract: Callable[[dict[str, Any]], str]
    default_temperature: float | None = None
    default_max_tokens: int | None = None


def _claude_body(prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
    # Claude text completions require the Human/Assistant framing
    return {
        "prompt": f"Human: {prompt}\n\nAssistant:",
        "max_tokens_to_sample": max_tokens,
        "temperature": temperature,
        "stop_sequences": ["\n\nHuman:"],
    }


def _jurassic2_body(prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
    return {"prompt": prompt, "maxTokens": max_tokens, "temperature": temperature}


def _llama2_body(prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
    return {"prompt": prompt, "max_gen_len": max_tokens, "temperature": temperature}


def _titan_image_body(prompt: str, temperature: float | None, max_tokens: int | None) -> dict[str, Any]:
    return {
        "taskType": "TEXT_IMAGE",
        "textToImageParams": {"text": prompt},
        "imageGenerationConfig": {
            "numberOfImages": 1,
            "quality": "standard",
            "cfgScale": 8.0,
            "height": 512,
            "width": 512,
            "seed": 0,
        },
    }


def _titan_text_body(prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
    return {
        "inputText": prompt,
        "textGenerationConfig": {
            "temperature": temperature,
            "topP": 1,
            "maxTokenCount": max_tokens,
        },
    }


MODELS: dict[str, BedrockModel] = {
    CLAUDE_MODEL_ID: BedrockModel(
        model_id=CLAUDE_MODEL_ID,
        build_body=_claude_body,
        extract=lambda r: r["completion"],
        default_temperature=0.5,
        default_max_tokens=200,
    ),
    JURASSIC2_MODEL_ID: BedrockModel(
        model_id=JURASSIC2_MODEL_ID,
        build_body=_jurassic2_body,
        extract=lambda r: r["completions"][0]["data"]["text"],
        default_temperature=0.5,
        default_max_tokens=200,
    ),
    LLAMA2_MODEL_ID: BedrockModel(
        model_id=LLAMA2_MODEL_ID,
        build_body=_llama2_body,
        extract=lambda r: r["generation"],
        default_temperature=0.5,
        default_max_tokens=512,
    ),
    # Returns base64-encoded PNG data
    TITAN_IMAGE_MODEL_ID: BedrockModel(
        model_id=TITAN_IMAGE_MODEL_ID,
        build_body=_titan_image_body,
        extract=lambda r: r["images"][0],
    ),
    TITAN_TEXT_EXPRESS_MODEL_ID: BedrockModel(
        model_id=TITAN_TEXT_EXPRESS_MODEL_ID,
        build_body=_titan_text_body,
        extract=lambda r: r["results"][0]["outputText"],
        default_temperature=0.0,
        default_max_tokens=4096,
    ),
}


def describe_error(error: Exception, model_id: str) -> str:
    """Turn an SDK error into a message the user can act on."""
    message = str(error)
    if isinstance(error, EndpointConnectionError) or "no such host" in message:
        return (
            "The Bedrock service is not available in the selected region. "
            "Please double-check the service availability for your region at "
            "https://aws.amazon.com/about-aws/global-infrastructure/regional-product-services/."
        )
    if "Could not resolve the foundation model" in message:
        return (
            f'Could not resolve the foundation model from model identifier: "{model_id}". '
            "Please verify that the requested model exists and is accessible "
            "within the specified region."
        )
    return f'Couldn\'t invoke model: "{model_id}". Here\'s why: {message}'


class BedrockProvider(LLMProvider):
    """Bedrock Runtime InvokeModel provider."""

    provider_type = ProviderType.BEDROCK

    def __init__(self, settings: BedrockSettings, client: Any = None):
        model_id = require(settings.model_name, "bedrock.modelName")
        if model_id not in MODELS:
            raise UnsupportedModelError(f"modelID {model_id} not found")
        self.model = MODELS[model_id]
        self.aws_profile = settings.aws_profile
        self.aws_region = settings.aws_region
        self.temperature = (
            settings.temperature if settings.temperature is not None else self.model.default_temperature
        )
        self.max_tokens = (
            settings.max_output_tokens
            if settings.max_output_tokens is not None
            else self.model.default_max_tokens
        )
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            # Shared AWS config (~/.aws/config, ~/.aws/credentials)
            try:
                session = boto3.Session(
                    profile_name=self.aws_profile or None,
                    region_name=self.aws_region or None,
                )
                self._client = session.client("bedrock-runtime")
            except BotoCoreError as e:
                raise ConfigError(f"Unable to load AWS SDK config: {e}") from e
        return self._client

    def describe(self) -> dict[str, str]:
        return {
            "Model Name": self.model.model_id,
            "AWS Profile": self.aws_profile or "(default)",
            "AWS Region": self.aws_region or "(default)",
            "Temperature": str(self.temperature),
            "Max Output Tokens": str(self.max_tokens),
        }

    def build_body(self, prompt: str) -> dict[str, Any]:
        return self.model.build_body(prompt, self.temperature, self.max_tokens)

    def _invoke(self, body: dict[str, Any]) -> dict[str, Any]:
        output = self.client.invoke_model(
            modelId=self.model.model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(body),
        )
        return json.loads(output["body"].read())

    async def complete(self, prompt: str) -> LLMResponse:
        """Invoke the configured Bedrock model (blocking SDK call runs in a thread)."""
        model_id = self.model.model_id
        body = self.build_body(prompt)
        logger.debug(f"Bedrock request: model={model_id}, region={self.aws_region}")

        try:
            data = await asyncio.to_thread(self._invoke, body)
        except (ClientError, BotoCoreError) as e:
            message = describe_error(e, model_id)
            logger.error(message)
            raise ProviderError(message) from e

        try:
            content = self.model.extract(data)
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected response from {model_id}: {data}") from e

        logger.debug(f"Bedrock response: {content[:200]}...")

        return LLMResponse(
            content=content,
            model=model_id,
            provider=self.provider_type,
            input_tokens=data.get("inputTextTokenCount", 0),
            metadata={"region": self.aws_region},
        )
