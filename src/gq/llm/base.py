"""
LLM provider interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from gq.core.config import GQError


class ProviderError(GQError):
    """Vendor call failed or its response lacked the expected field."""


class UnsupportedProviderError(GQError):
    """Provider name doesn't map to an adapter."""


class UnsupportedModelError(GQError):
    """Configured model isn't one the adapter knows how to call."""


class ProviderType(Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    AZURE_OPENAI = "azure_openai"
    BEDROCK = "bedrock"

    @classmethod
    def from_name(cls, name: str) -> "ProviderType":
        """Resolve a user-supplied provider name (case-insensitive, with aliases)."""
        key = name.strip().lower().replace("-", "_")
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedProviderError(f"unsupported provider: {name}") from None


_ALIASES = {
    "azure": ProviderType.AZURE_OPENAI,
    "azureopenai": ProviderType.AZURE_OPENAI,
    "amznbedrock": ProviderType.BEDROCK,
    "aws_bedrock": ProviderType.BEDROCK,
}


@dataclass
class LLMResponse:
    """Response from LLM provider."""

    content: str
    model: str
    provider: ProviderType
    input_tokens: int = 0
    output_tokens: int = 0
    metadata: dict | None = None


@dataclass
class LLMConfig:
    """Configuration for LLM call."""

    model: str
    max_tokens: int = 1024
    temperature: float = 0.5


class LLMProvider(ABC):
    """Abstract LLM provider."""

    provider_type: ProviderType

    @abstractmethod
    async def complete(self, prompt: str) -> LLMResponse:
        """
        Send a single user prompt and return the model's answer.

        Args:
            prompt: Question plus data, already joined

        Returns:
            LLMResponse with the extracted text

        Raises:
            ProviderError: On vendor failure or unexpected response shape
        """
        ...

    @abstractmethod
    def describe(self) -> dict[str, str]:
        """Model parameters shown in verbose mode."""
        ...

    async def close(self) -> None:
        """Release network resources."""
