"""Tests for the Bedrock adapter with a mocked runtime client."""

import io
import json
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from gq.core.config import BedrockSettings
from gq.llm.base import ProviderError, ProviderType, UnsupportedModelError
from gq.llm.bedrock import (
    CLAUDE_MODEL_ID,
    JURASSIC2_MODEL_ID,
    LLAMA2_MODEL_ID,
    TITAN_IMAGE_MODEL_ID,
    TITAN_TEXT_EXPRESS_MODEL_ID,
    BedrockProvider,
    describe_error,
)


def runtime_client(body: dict) -> Mock:
    """Mock bedrock-runtime client whose invoke_model returns body as a stream."""
    client = Mock()
    client.invoke_model.return_value = {"body": io.BytesIO(json.dumps(body).encode())}
    return client


def sent_body(client: Mock) -> dict:
    return json.loads(client.invoke_model.call_args.kwargs["body"])


def make_provider(model_name: str, client: Mock, **overrides) -> BedrockProvider:
    settings = BedrockSettings(model_name=model_name, aws_region="us-east-1", **overrides)
    return BedrockProvider(settings, client=client)


@pytest.mark.asyncio
async def test_titan_text():
    """Titan Text answer comes from results[0].outputText."""
    client = runtime_client({
        "inputTextTokenCount": 9,
        "results": [{"tokenCount": 3, "outputText": "Hello there", "completionReason": "FINISH"}],
    })
    provider = make_provider(TITAN_TEXT_EXPRESS_MODEL_ID, client)

    response = await provider.complete("greet me")

    assert response.content == "Hello there"
    assert response.provider == ProviderType.BEDROCK
    assert response.input_tokens == 9
    kwargs = client.invoke_model.call_args.kwargs
    assert kwargs["modelId"] == TITAN_TEXT_EXPRESS_MODEL_ID
    assert kwargs["contentType"] == "application/json"
    assert sent_body(client) == {
        "inputText": "greet me",
        "textGenerationConfig": {"temperature": 0.0, "topP": 1, "maxTokenCount": 4096},
    }


@pytest.mark.asyncio
async def test_claude():
    client = runtime_client({"completion": " Sure.", "stop_reason": "stop_sequence"})
    provider = make_provider(CLAUDE_MODEL_ID, client)

    response = await provider.complete("help")

    assert response.content == " Sure."
    assert sent_body(client) == {
        "prompt": "Human: help\n\nAssistant:",
        "max_tokens_to_sample": 200,
        "temperature": 0.5,
        "stop_sequences": ["\n\nHuman:"],
    }


@pytest.mark.asyncio
async def test_jurassic2():
    client = runtime_client({"completions": [{"data": {"text": "j2 says hi"}}]})
    provider = make_provider(JURASSIC2_MODEL_ID, client)

    response = await provider.complete("hi")

    assert response.content == "j2 says hi"
    assert sent_body(client) == {"prompt": "hi", "maxTokens": 200, "temperature": 0.5}


@pytest.mark.asyncio
async def test_llama2():
    client = runtime_client({"generation": "llama says hi"})
    provider = make_provider(LLAMA2_MODEL_ID, client)

    response = await provider.complete("hi")

    assert response.content == "llama says hi"
    assert sent_body(client) == {"prompt": "hi", "max_gen_len": 512, "temperature": 0.5}


@pytest.mark.asyncio
async def test_titan_image():
    """Titan Image returns the first base64 image."""
    client = runtime_client({"images": ["iVBORw0KGgo="]})
    provider = make_provider(TITAN_IMAGE_MODEL_ID, client)

    response = await provider.complete("a red fox")

    assert response.content == "iVBORw0KGgo="
    body = sent_body(client)
    assert body["taskType"] == "TEXT_IMAGE"
    assert body["textToImageParams"] == {"text": "a red fox"}
    assert body["imageGenerationConfig"]["width"] == 512


@pytest.mark.asyncio
async def test_config_overrides_model_defaults():
    client = runtime_client({"generation": "ok"})
    provider = make_provider(LLAMA2_MODEL_ID, client, temperature=0.9, max_output_tokens=64)

    await provider.complete("hi")

    assert sent_body(client) == {"prompt": "hi", "max_gen_len": 64, "temperature": 0.9}


def test_unknown_model():
    with pytest.raises(UnsupportedModelError, match="modelID cohere.command not found"):
        make_provider("cohere.command", Mock())


@pytest.mark.asyncio
async def test_client_error_becomes_provider_error():
    client = Mock()
    client.invoke_model.side_effect = ClientError(
        {"Error": {"Code": "ValidationException", "Message": "Could not resolve the foundation model"}},
        "InvokeModel",
    )
    provider = make_provider(CLAUDE_MODEL_ID, client)

    with pytest.raises(ProviderError, match="Could not resolve the foundation model"):
        await provider.complete("hi")


@pytest.mark.asyncio
async def test_unexpected_response_shape():
    client = runtime_client({"unexpected": True})
    provider = make_provider(TITAN_TEXT_EXPRESS_MODEL_ID, client)

    with pytest.raises(ProviderError, match="Unexpected response"):
        await provider.complete("hi")


def test_describe_error_region():
    error = EndpointConnectionError(endpoint_url="https://bedrock-runtime.xx-west-9.amazonaws.com")
    assert "not available in the selected region" in describe_error(error, CLAUDE_MODEL_ID)


def test_describe_error_generic():
    message = describe_error(RuntimeError("boom"), LLAMA2_MODEL_ID)
    assert message == f'Couldn\'t invoke model: "{LLAMA2_MODEL_ID}". Here\'s why: boom'


def test_describe():
    provider = make_provider(TITAN_TEXT_EXPRESS_MODEL_ID, Mock())
    params = provider.describe()
    assert params["Model Name"] == TITAN_TEXT_EXPRESS_MODEL_ID
    assert params["AWS Region"] == "us-east-1"
    assert params["Max Output Tokens"] == "4096"
