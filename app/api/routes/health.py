"""
Health check endpoint for deployment monitoring.
"""
from fastapi import APIRouter
from datetime import datetime, timezone

from app.llm.router import is_model_available

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Always 200 while the process is up. Reports "degraded" when no LLM is
    configured, since analysis then runs on the keyword fallback only.
    """
    llm_ok = is_model_available()

    return {
        "status": "healthy" if llm_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "llm": "configured" if llm_ok else "not configured",
        "version": "1.0.0",
    }
