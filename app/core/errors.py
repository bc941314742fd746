"""
HTTP error helpers shared by the routes.

Input problems become 400s; upstream (LLM, parsing library) failures become
500s carrying the cause's message.
"""
import logging
from typing import Optional
from fastapi import HTTPException, status

from app.llm.provider import LLMNotConfiguredError

logger = logging.getLogger(__name__)

TEXT_REQUIRED = "Resume text and job description are required"
RESUME_TEXT_REQUIRED = "Resume text is required"
FILE_REQUIRED = "No file provided"


def require_text(detail: str, *values: Optional[str]) -> None:
    """
    Raise 400 if any value is missing or blank.

    Raises:
        HTTPException: 400 with `detail`
    """
    if any(value is None or not value.strip() for value in values):
        logger.warning(f"Rejected request: {detail}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def upstream_failure(action: str, error: Exception) -> HTTPException:
    """Build the 500 response for a failed upstream call; logs the cause."""
    if isinstance(error, LLMNotConfiguredError):
        logger.error(f"Cannot {action}: LLM not configured")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="AI not configured"
        )

    logger.error(f"Failed to {action}: {type(error).__name__}: {error}", exc_info=error)
    message = str(error).strip()
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {message}" if message else f"Failed to {action}"
    )
