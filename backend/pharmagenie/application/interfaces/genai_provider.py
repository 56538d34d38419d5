"""Abstract GenAI provider interface — port for LLM backends.

The set of backends is closed (mock and the AI Cafe gateway) and chosen
once at startup by the provider factory. Shared behaviour that does not
depend on the backend (input sanitisation, config validation, system
prompt and context rendering) lives here.
"""

import json
import re
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from pharmagenie.domain.entities import GenAIRequest, GenAIResponse, StreamEvent
from pharmagenie.domain.exceptions import ProviderConfigurationError

MAX_MESSAGE_LENGTH = 4000

_SPECIAL_TOKEN_RE = re.compile(r"<\|.*?\|>")
_ROLE_HEADER_RE = re.compile(r"###\s*(?:System|Assistant|User)", re.IGNORECASE)
_INST_RE = re.compile(r"\[/?INST\]")

SYSTEM_PROMPT = """\
You are an AI assistant specialized in pharmaceutical and clinical research data analysis.
You have access to a comprehensive database including:
- Clinical trials data
- Drug information
- Adverse events
- Participant demographics
- Safety reports

Provide accurate, evidence-based responses focused on pharmaceutical research.
When uncertain, acknowledge limitations and suggest consulting primary sources.
Always prioritize patient safety and regulatory compliance in your guidance."""


@dataclass(frozen=True)
class GenAIConfig:
    """Provider settings, validated once when the provider is built."""

    model: str
    api_key: str = ""
    temperature: float = 0.7
    max_tokens: int = 2000
    top_p: float = 0.95


class GenAIProvider(ABC):
    """Port — what the application layer needs from any LLM backend."""

    requires_api_key: bool = True

    def __init__(self, config: GenAIConfig):
        self._config = config

    @property
    def config(self) -> GenAIConfig:
        return self._config

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'mock', 'hcl-aicafe')."""
        ...

    @abstractmethod
    async def generate(self, request: GenAIRequest) -> GenAIResponse:
        """Produce a complete reply.

        Raises:
            GenAIProviderError: If the backend returns an error.
        """
        ...

    @abstractmethod
    def stream_generate(self, request: GenAIRequest) -> AsyncIterator[StreamEvent]:
        """Yield ``chunk`` events, then one ``done`` event with the full reply.

        Raises:
            GenAIProviderError: If the backend refuses the request.
        """
        ...

    # ── Shared behaviour ────────────────────────────────────────────

    @staticmethod
    def sanitize_message(message: str) -> str:
        """Strip prompt-injection markers and cap the length."""
        if not isinstance(message, str):
            raise TypeError("Message must be a string")
        sanitized = message.strip()
        sanitized = _SPECIAL_TOKEN_RE.sub("", sanitized)
        sanitized = _ROLE_HEADER_RE.sub("", sanitized)
        sanitized = _INST_RE.sub("", sanitized)
        return sanitized[:MAX_MESSAGE_LENGTH]

    def validate_config(self) -> None:
        """Raise ProviderConfigurationError when settings are out of range."""
        cfg = self._config
        if self.requires_api_key and not cfg.api_key:
            raise ProviderConfigurationError("API key is required")
        if not cfg.model:
            raise ProviderConfigurationError("Model name is required")
        if not 0 <= cfg.temperature <= 2:
            raise ProviderConfigurationError("Temperature must be between 0 and 2")
        if not 1 <= cfg.max_tokens <= 100000:
            raise ProviderConfigurationError("Max tokens must be between 1 and 100000")

    @staticmethod
    def system_prompt() -> str:
        return SYSTEM_PROMPT

    @staticmethod
    def format_context(context: dict[str, Any] | None) -> str:
        """Render database context as a system message body ("" when empty)."""
        if not context:
            return ""
        parts = []
        stats = context.get("database_results")
        if stats:
            parts.append(f"Query Results: {json.dumps(stats, default=str)}")
        data = context.get("data") or {}
        trials = context.get("clinical_trials") or data.get("trials")
        if trials:
            parts.append(f"Clinical Trials: {json.dumps(trials, default=str)}")
        drugs = context.get("drugs") or data.get("drugs")
        if drugs:
            parts.append(f"Drug Information: {json.dumps(drugs, default=str)}")
        events = context.get("adverse_events") or data.get("adverseEvents")
        if events:
            parts.append(f"Adverse Events: {json.dumps(events, default=str)}")
        if not parts:
            return ""
        return "Context from database:\n" + "\n".join(parts)

    def build_messages(self, request: GenAIRequest) -> list[dict[str, str]]:
        """System prompt, optional context, history, then the sanitized message."""
        messages = [{"role": "system", "content": self.system_prompt()}]
        context_text = self.format_context(request.context)
        if context_text:
            messages.append({"role": "system", "content": context_text})
        messages.extend({"role": m.role, "content": m.content} for m in request.history)
        messages.append(
            {"role": "user", "content": self.sanitize_message(request.message)}
        )
        return messages
