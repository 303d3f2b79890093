"""
Provider registry.

Maps each provider type to its adapter class and builds adapters from settings.
"""

from gq.core.config import Settings
from gq.core.logging import get_logger
from gq.llm.azure_openai import AzureOpenAIProvider
from gq.llm.base import LLMProvider, ProviderType
from gq.llm.bedrock import BedrockProvider
from gq.llm.gemini import GeminiProvider
from gq.llm.openai import OpenAIProvider

logger = get_logger("llm.registry")

PROVIDERS: dict[ProviderType, type[LLMProvider]] = {
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.AZURE_OPENAI: AzureOpenAIProvider,
    ProviderType.BEDROCK: BedrockProvider,
}


def available_providers() -> list[str]:
    """Provider names in declaration order."""
    return [p.value for p in PROVIDERS]


def create_provider(provider: ProviderType | str, settings: Settings) -> LLMProvider:
    """Build the adapter for a provider from its settings section.

    Args:
        provider: ProviderType or user-supplied name (e.g. "openAI", "azure")
        settings: Loaded settings

    Returns:
        Configured LLMProvider

    Raises:
        UnsupportedProviderError: Unknown provider name
        ConfigError: Required credentials missing
    """
    if isinstance(provider, str):
        provider = ProviderType.from_name(provider)
    section = getattr(settings, provider.value)
    logger.debug(f"Creating provider: {provider.value}")
    return PROVIDERS[provider](section)
