"""
LLM Runner: builds messages, walks the model fallback chain, parses JSON output.
"""
import logging
import json
import re
from functools import lru_cache
from typing import Optional, Any, List

from app.core.config import LLM_TEMPERATURE
from app.llm.provider import LLMProvider, LLMNotConfiguredError
from app.llm.openai_provider import OpenAIProvider
from app.llm.router import get_model_chain

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```")


def extract_json(text: str) -> Any:
    """
    Parse JSON from an LLM response.

    Strips markdown code fences, then parses the outermost object or array.

    Raises:
        ValueError: if no JSON value can be decoded
    """
    cleaned = _FENCE_RE.sub("", text or "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        raise ValueError("No JSON found in LLM response")
    start = min(starts)
    closer = "}" if cleaned[start] == "{" else "]"
    end = cleaned.rfind(closer)
    if end <= start:
        raise ValueError("No JSON found in LLM response")

    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in LLM response: {e}") from e


class LLMRunner:
    """Runs prompts against the configured provider with model fallback."""

    def __init__(self, provider: Optional[LLMProvider] = None):
        """Initialize runner with provider."""
        self.provider = provider
        if not self.provider:
            try:
                self.provider = OpenAIProvider()
            except LLMNotConfiguredError:
                logger.warning("OPENAI_API_KEY not configured - LLM features disabled, rule-based fallbacks only")
                self.provider = None

    @property
    def available(self) -> bool:
        return self.provider is not None

    def _build_messages(self, prompt: str, system: Optional[str] = None) -> List[dict]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate(
        self,
        prompt: str,
        feature: str,
        json_mode: bool = False,
        system: Optional[str] = None,
        models: Optional[List[str]] = None,
    ) -> str:
        """
        Generate text, trying each model of the feature's chain in order.

        Moves to the next model only when the provider says the failure is a
        rate-limit, unavailable or not-found error. Stops at first success.

        Raises:
            LLMNotConfiguredError: no provider configured
            Exception: the provider error that ended the chain
        """
        if not self.provider:
            raise LLMNotConfiguredError("AI not configured")

        chain = get_model_chain(feature, models)
        messages = self._build_messages(prompt, system)
        last_error: Optional[Exception] = None

        for model in chain:
            try:
                response = self.provider.chat(
                    messages=messages,
                    model=model,
                    temperature=LLM_TEMPERATURE,
                    json_mode=json_mode,
                )
            except Exception as e:
                last_error = e
                if self.provider.should_try_next_model(e):
                    logger.warning(f"Model {model} failed for {feature}, trying next: {e}")
                    continue
                raise

            logger.info(
                f"LLM call completed: feature={feature}, model={model}, "
                f"tokens={response.total_tokens}, cost=${response.cost_estimate:.5f}"
            )
            return response.content

        if last_error is None:
            raise LLMNotConfiguredError("No LLM models configured")
        logger.error(f"All models failed for {feature}: {last_error}")
        raise last_error

    def generate_json(self, prompt: str, feature: str, **kwargs) -> Any:
        """Generate and parse a JSON response."""
        return extract_json(self.generate(prompt, feature, **kwargs))


@lru_cache(maxsize=1)
def get_llm_runner() -> LLMRunner:
    """Process-wide runner built from environment configuration."""
    return LLMRunner()
