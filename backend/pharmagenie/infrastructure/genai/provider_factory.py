"""Builds the configured GenAI provider once at startup."""

import logging

import httpx

from pharmagenie.application.interfaces.genai_provider import GenAIConfig, GenAIProvider
from pharmagenie.config import Settings
from pharmagenie.domain.exceptions import ProviderConfigurationError
from pharmagenie.infrastructure.genai.aicafe_provider import AICafeProvider
from pharmagenie.infrastructure.genai.mock_provider import MOCK_MODEL, MockProvider

logger = logging.getLogger(__name__)

_AICAFE_NAMES = frozenset({"hcl-aicafe", "hcl"})


def create_provider(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> GenAIProvider:
    """Select and validate the provider named by ``settings.genai_provider``.

    A missing AI Cafe API key falls back to the mock provider. Unknown
    provider names and invalid settings raise ProviderConfigurationError.
    """
    name = settings.genai_provider.strip().lower()
    api_key = settings.genai_api_key.strip()

    if name in _AICAFE_NAMES:
        if not api_key:
            logger.warning("AI Cafe API key missing, falling back to mock provider")
            provider: GenAIProvider = _build_mock(settings)
        else:
            provider = AICafeProvider(
                GenAIConfig(
                    model=settings.aicafe_deployment_name,
                    api_key=api_key,
                    temperature=settings.genai_temperature,
                    max_tokens=settings.genai_max_tokens,
                    top_p=settings.genai_top_p,
                ),
                endpoint=settings.aicafe_endpoint,
                api_version=settings.aicafe_api_version,
                http_client=http_client,
            )
    elif name == "mock":
        provider = _build_mock(settings)
    else:
        raise ProviderConfigurationError(
            f"Unsupported provider type: {settings.genai_provider}. "
            "Only 'hcl-aicafe' and 'mock' are supported."
        )

    provider.validate_config()
    logger.info(
        "GenAI provider initialized: %s (model=%s)",
        provider.provider_name,
        provider.config.model,
    )
    return provider


def _build_mock(settings: Settings) -> MockProvider:
    return MockProvider(
        GenAIConfig(
            model=MOCK_MODEL,
            temperature=settings.genai_temperature,
            max_tokens=settings.genai_max_tokens,
            top_p=settings.genai_top_p,
        ),
        delay_ms=settings.genai_mock_delay_ms,
    )
