"""Mock GenAI provider — canned, context-aware replies without any API calls."""

import asyncio
import math
from collections.abc import AsyncIterator
from typing import Any

from pharmagenie.application.interfaces.genai_provider import GenAIConfig, GenAIProvider
from pharmagenie.domain.entities import GenAIRequest, GenAIResponse, StreamEvent, TokenUsage

MOCK_MODEL = "mock-gpt-4o-mini"

_TRIALS_REPLY = """\
Based on our clinical trials database, I can help you find information about various studies. We track trials across different phases (I-IV), therapeutic areas like oncology, cardiovascular, and neurology, and monitor enrollment status, outcomes, and safety data.

What specific aspect of clinical trials would you like to explore? For example:
- Trial status and enrollment
- Drug efficacy and safety
- Participant demographics
- Adverse events reporting
- Trial site locations"""

_DRUGS_REPLY = """\
I can provide information about pharmaceutical compounds in our database. Our system tracks:
- Drug identification and classification
- Mechanism of action
- Clinical trial associations
- Approval status (FDA, EMA)
- Safety profiles

Which drug or therapeutic area would you like to know more about?"""

_SAFETY_REPLY = """\
Adverse event monitoring is critical in clinical research. Our database includes:
- Severity classifications (Mild, Moderate, Severe)
- Serious vs non-serious events
- Event onset, resolution and outcome

What specific safety information are you looking for?"""

_PARTICIPANTS_REPLY = """\
I can provide insights on clinical trial participants:
- Enrollment status and demographics
- Participant retention
- Safety monitoring

What aspect of participant data interests you?"""

_DEFAULT_REPLY = """\
I'm a pharmaceutical research assistant with access to clinical trials, drug information, and safety data.

I can help you with:
- Clinical trial information and analysis
- Drug profiles and mechanisms
- Adverse event monitoring
- Safety data interpretation

What would you like to know?"""

_KEYWORD_REPLIES = (
    (("clinical trial", "study"), _TRIALS_REPLY),
    (("drug", "medication", "pharmaceutical"), _DRUGS_REPLY),
    (("adverse", "side effect", "safety"), _SAFETY_REPLY),
    (("participant", "patient", "enrollment"), _PARTICIPANTS_REPLY),
)

_BREAKDOWN_LABELS = (
    ("trials", "clinical trial"),
    ("drugs", "drug"),
    ("sites", "trial site"),
    ("participants", "participant"),
    ("adverseEvents", "adverse event"),
)


def estimate_tokens(text: str) -> int:
    """Rough estimate: about four characters per token."""
    return math.ceil(len(text) / 4)


def _plural(count: int, label: str) -> str:
    return f"{count} {label}{'' if count == 1 else 's'}"


class MockProvider(GenAIProvider):
    """Deterministic stand-in for a real LLM backend."""

    requires_api_key = False

    def __init__(self, config: GenAIConfig | None = None, *, delay_ms: int = 0):
        super().__init__(config or GenAIConfig(model=MOCK_MODEL))
        self._delay = max(delay_ms, 0) / 1000

    @property
    def provider_name(self) -> str:
        return "mock"

    async def generate(self, request: GenAIRequest) -> GenAIResponse:
        message = self.sanitize_message(request.message)
        if self._delay:
            await asyncio.sleep(self._delay)
        reply = self.mock_reply(message, request.context)
        prompt_tokens = estimate_tokens(message)
        completion_tokens = estimate_tokens(reply)
        return GenAIResponse(
            content=reply,
            model=MOCK_MODEL,
            provider=self.provider_name,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    async def stream_generate(self, request: GenAIRequest) -> AsyncIterator[StreamEvent]:
        message = self.sanitize_message(request.message)
        reply = self.mock_reply(message, request.context)
        for index, word in enumerate(reply.split(" ")):
            if self._delay:
                await asyncio.sleep(self._delay / 10)
            yield StreamEvent(type="chunk", content=word if index == 0 else f" {word}")
        yield StreamEvent(
            type="done",
            content=reply,
            usage=TokenUsage(
                prompt_tokens=estimate_tokens(message),
                completion_tokens=estimate_tokens(reply),
                total_tokens=estimate_tokens(message) + estimate_tokens(reply),
            ),
        )

    def mock_reply(self, message: str, context: dict[str, Any] | None) -> str:
        if context:
            contextual = self._contextual_reply(context)
            if contextual:
                return contextual
        lowered = message.lower()
        for keywords, reply in _KEYWORD_REPLIES:
            if any(k in lowered for k in keywords):
                return reply
        return _DEFAULT_REPLY

    @staticmethod
    def _contextual_reply(context: dict[str, Any]) -> str:
        parts = []
        stats = context.get("database_results")
        if stats is not None:
            total = stats.get("total", 0)
            if total > 0:
                breakdown = [
                    _plural(stats[key], label)
                    for key, label in _BREAKDOWN_LABELS
                    if stats.get(key, 0) > 0
                ]
                parts.append(
                    f"Query Results: {_plural(total, 'total record')} found\n\n"
                    "Breakdown:\n- " + "\n- ".join(breakdown)
                )
            else:
                parts.append(
                    "Query Results: 0 records found\n\n"
                    "No matching data found in the database for your query."
                )

        data = context.get("data") or {}
        trials = data.get("trials") or []
        if trials:
            t = trials[0]
            parts.append(
                "Sample Clinical Trial:\n"
                f"- Trial ID: {t.get('trial_id', 'N/A')}\n"
                f"- Title: {t.get('title') or 'N/A'}\n"
                f"- Phase: {t.get('phase') or 'N/A'}\n"
                f"- Status: {t.get('status') or 'N/A'}\n"
                f"- Drug: {t.get('drug') or 'N/A'}"
            )
        drugs = data.get("drugs") or []
        if drugs:
            d = drugs[0]
            parts.append(
                "Sample Drug:\n"
                f"- Drug ID: {d.get('drug_id', 'N/A')}\n"
                f"- Name: {d.get('name') or 'N/A'}\n"
                f"- Class: {d.get('drug_class') or 'N/A'}"
            )
        sites = data.get("sites") or []
        if sites:
            s = sites[0]
            parts.append(
                "Sample Trial Site:\n"
                f"- Site ID: {s.get('site_id', 'N/A')}\n"
                f"- Name: {s.get('name') or 'N/A'}\n"
                f"- Location: {s.get('city') or 'N/A'}, {s.get('country') or 'N/A'}"
            )

        if not parts:
            return ""
        return "\n\n".join(parts) + "\n\nWould you like more detailed information about any of these findings?"
