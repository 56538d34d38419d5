"""Unit tests for GenAI provider selection."""

import httpx
import pytest

from pharmagenie.config import Settings
from pharmagenie.domain.exceptions import ProviderConfigurationError
from pharmagenie.infrastructure.genai import AICafeProvider, MockProvider, create_provider


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_mock_is_the_default():
    provider = create_provider(_settings(genai_provider="mock"))
    assert isinstance(provider, MockProvider)
    assert provider.provider_name == "mock"


@pytest.mark.parametrize("name", ["hcl-aicafe", "HCL", " hcl-aicafe "])
def test_aicafe_with_key(name):
    provider = create_provider(
        _settings(genai_provider=name, genai_api_key="secret", aicafe_deployment_name="gpt-4.1"),
        http_client=httpx.AsyncClient(),
    )
    assert isinstance(provider, AICafeProvider)
    assert provider.config.model == "gpt-4.1"
    assert provider.config.api_key == "secret"


def test_aicafe_without_key_falls_back_to_mock():
    provider = create_provider(_settings(genai_provider="hcl-aicafe", genai_api_key="  "))
    assert isinstance(provider, MockProvider)


def test_unknown_provider_is_rejected():
    with pytest.raises(ProviderConfigurationError, match="Unsupported provider type"):
        create_provider(_settings(genai_provider="openai"))


def test_out_of_range_settings_are_rejected():
    with pytest.raises(ProviderConfigurationError):
        create_provider(_settings(genai_provider="mock", genai_temperature=3.0))
