"""
Text generation interface for the AI drafting features.

Services depend on ``LLMProvider`` only, so the OpenAI SDK stays in
``openai_provider`` and tests can hand in a stub.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

Message = Dict[str, str]


@dataclass
class LLMResponse:
    """First choice of a completion."""
    content: str
    model: str = ""
    tokens_out: int = 0
    finish_reason: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class LLMProvider(ABC):
    default_model = "gpt-4o-mini"

    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Run one chat completion. Provider errors propagate to the caller."""

    def complete(self, system_prompt: str, user_prompt: str, **kwargs) -> LLMResponse:
        """Single turn: one system message followed by one user message."""
        return self.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **kwargs,
        )
