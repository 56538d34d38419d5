from .aicafe_provider import AICafeProvider
from .mock_provider import MockProvider
from .provider_factory import create_provider

__all__ = ["AICafeProvider", "MockProvider", "create_provider"]
