"""
Model router: which models, in which order, each feature is tried against.
"""
import logging
from typing import List, Optional

from app.core.config import LLM_MODELS, OPENAI_API_KEY

logger = logging.getLogger(__name__)

# Feature -> preferred first model (None keeps the configured order)
MODEL_ROUTING = {
    "ats_analysis": None,
    "quantify": None,
    "cover_letter": None,
    "interview_prep": None,
    "optimize": None,
    # Long structured output, larger model first
    "structure": "gpt-4o",
}


def get_model_chain(feature: str, models: Optional[List[str]] = None) -> List[str]:
    """
    Get the ordered model fallback list for a feature.

    Args:
        feature: Feature name (e.g., "ats_analysis", "cover_letter")
        models: Override for the configured model list

    Returns:
        Ordered, de-duplicated list of model identifiers
    """
    chain = list(models if models is not None else LLM_MODELS)
    preferred = MODEL_ROUTING.get(feature)

    if preferred and preferred in chain:
        chain.remove(preferred)
        chain.insert(0, preferred)

    ordered = []
    for model in chain:
        if model not in ordered:
            ordered.append(model)
    return ordered


def is_model_available() -> bool:
    """Check if an LLM is configured."""
    return bool(OPENAI_API_KEY)
