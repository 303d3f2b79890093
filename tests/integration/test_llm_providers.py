"""
Integration tests for LLM providers.

Run with: pytest tests/integration -v -m integration
Requires: $HOME/.config/gq/.gq.yaml (or GQ_CONFIG) with credentials
"""

import pytest

from gq.core.config import ConfigError, load_settings
from gq.llm.base import ProviderType
from gq.llm.registry import create_provider

# Mark all tests in this module as integration tests
pytestmark = pytest.mark.integration

PROMPT = "Say 'test ok' and nothing else."


@pytest.fixture
def settings():
    try:
        return load_settings()
    except ConfigError as e:
        pytest.skip(f"No gq config: {e}")


async def _complete(settings, provider_type: ProviderType):
    try:
        provider = create_provider(provider_type, settings)
    except ConfigError as e:
        pytest.skip(str(e))
    try:
        return await provider.complete(PROMPT)
    finally:
        await provider.close()


@pytest.mark.asyncio
async def test_gemini_completion(settings):
    """Gemini generates completion."""
    response = await _complete(settings, ProviderType.GEMINI)
    assert response.content
    assert response.provider == ProviderType.GEMINI


@pytest.mark.asyncio
async def test_openai_completion(settings):
    """OpenAI generates completion."""
    response = await _complete(settings, ProviderType.OPENAI)
    assert response.content
    assert response.provider == ProviderType.OPENAI


@pytest.mark.asyncio
async def test_azure_openai_completion(settings):
    """Azure OpenAI deployment generates completion."""
    response = await _complete(settings, ProviderType.AZURE_OPENAI)
    assert response.content


@pytest.mark.asyncio
async def test_bedrock_completion(settings):
    """Bedrock model generates completion."""
    if not settings.bedrock.aws_region:
        pytest.skip("bedrock.awsRegion not set")
    response = await _complete(settings, ProviderType.BEDROCK)
    assert response.content
