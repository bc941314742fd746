"""
OpenAI chat completions provider.

Works against any OpenAI-compatible endpoint (set OPENAI_BASE_URL), e.g. Groq.
"""
import logging
from typing import Optional, Dict, List
from openai import (
    OpenAI,
    APIError,
    APIConnectionError,
    APIStatusError,
    NotFoundError,
    RateLimitError,
)

from app.core.config import OPENAI_API_KEY, OPENAI_BASE_URL, LLM_MAX_TOKENS
from app.llm.provider import LLMProvider, LLMResponse, LLMNotConfiguredError

logger = logging.getLogger(__name__)

# USD per 1M tokens (input, output); unknown models are priced as gpt-4o-mini
MODEL_PRICING = {
    "gpt-4o-mini": (0.15, 0.60),
    "gpt-4o": (2.50, 10.00),
    "gpt-4.1-mini": (0.40, 1.60),
}


class OpenAIProvider(LLMProvider):

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise LLMNotConfiguredError("OPENAI_API_KEY not configured")
        # One attempt per model; fallback happens across models in the runner
        self.client = OpenAI(
            api_key=self.api_key,
            base_url=base_url or OPENAI_BASE_URL,
            max_retries=0,
        )
        logger.info(f"OpenAI provider initialized (base_url={base_url or OPENAI_BASE_URL or 'default'})")

    def chat(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
        **kwargs
    ) -> LLMResponse:
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or LLM_MAX_TOKENS,
                **kwargs
            )
        except APIError as e:
            logger.warning(f"OpenAI API error for model {model}: {e}")
            raise

        choice = response.choices[0]
        usage = response.usage
        tokens_in = usage.prompt_tokens if usage else 0
        tokens_out = usage.completion_tokens if usage else 0

        return LLMResponse(
            content=choice.message.content or "",
            model=model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost_estimate=self.estimate_cost(tokens_in, tokens_out, model),
            finish_reason=choice.finish_reason,
        )

    def should_try_next_model(self, error: Exception) -> bool:
        if isinstance(error, (RateLimitError, NotFoundError, APIConnectionError)):
            return True
        if isinstance(error, APIStatusError):
            return error.status_code >= 500
        return False

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimated USD cost of one call."""
        price_in, price_out = MODEL_PRICING.get(model, MODEL_PRICING["gpt-4o-mini"])
        return (tokens_in * price_in + tokens_out * price_out) / 1_000_000
