"""
OpenAI-backed LLMProvider.
"""
import logging
from typing import List, Optional

from openai import APIError, OpenAI

from app.core.config import OPENAI_API_KEY
from app.llm.provider import LLMProvider, LLMResponse, Message

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1200


class OpenAIProvider(LLMProvider):

    def __init__(self, api_key: str):
        self.client = OpenAI(api_key=api_key)

    def chat(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        model = model or self.default_model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
            )
        except APIError as e:
            logger.error(f"OpenAI API error: model={model}, error={e}")
            raise

        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or model,
            tokens_out=response.usage.completion_tokens if response.usage else 0,
            finish_reason=choice.finish_reason,
        )


def get_llm_provider() -> Optional[LLMProvider]:
    """OpenAI provider when OPENAI_API_KEY is set, otherwise None."""
    if not OPENAI_API_KEY:
        return None
    return OpenAIProvider(api_key=OPENAI_API_KEY)
