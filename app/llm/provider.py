"""
Provider contract the LLM runner talks to.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, List


class LLMNotConfiguredError(ValueError):
    """No API key, so no provider can be built."""


@dataclass
class LLMResponse:
    content: str
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    cost_estimate: float = 0.0
    finish_reason: Optional[str] = None

    @property
    def total_tokens(self) -> int:
        return self.tokens_in + self.tokens_out


class LLMProvider(ABC):
    """
    One hosted LLM API.

    Implementations make a single attempt per `chat` call; the runner owns
    the model fallback walk and asks `should_try_next_model` after each failure.
    """

    @abstractmethod
    def chat(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
        **kwargs
    ) -> LLMResponse:
        """
        Args:
            messages: role/content dicts, system message first if any
            model: model identifier for this attempt
            json_mode: request a JSON object response
        """

    @abstractmethod
    def should_try_next_model(self, error: Exception) -> bool:
        """True for rate-limited, unavailable or unknown-model failures."""
