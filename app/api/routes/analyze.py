"""
Resume ATS analysis endpoint.
"""
import logging
from fastapi import APIRouter, Body, Depends, HTTPException

from app.core.errors import TEXT_REQUIRED, require_text, upstream_failure
from app.core.rate_limit import rate_limited
from app.schemas.ai import AnalyzeRequest
from app.schemas.ats import ATSAnalysis
from app.services.analysis_service import analyze_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ATS"])


@router.post(
    "/analyze",
    response_model=ATSAnalysis,
    dependencies=[Depends(rate_limited)],
)
async def analyze(request: AnalyzeRequest = Body(...)):
    """
    Score a resume against a job description.

    Returns the combined score, keyword matches, format issues, merged
    suggestions, per-ATS simulation verdicts and quantification suggestions.
    """
    require_text(TEXT_REQUIRED, request.resume_text, request.job_description)

    try:
        return await analyze_resume(request.resume_text, request.job_description)
    except HTTPException:
        raise
    except Exception as e:
        raise upstream_failure("analyze resume", e)
