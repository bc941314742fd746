import logging
from fastapi import APIRouter, Body, Depends

from app.core.errors import TEXT_REQUIRED, require_text, upstream_failure
from app.core.rate_limit import rate_limited
from app.schemas.ai import AnalyzeRequest, InterviewPrepResponse
from app.services.ai_service import generate_interview_questions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Interview"])


@router.post(
    "/interview-prep",
    response_model=InterviewPrepResponse,
    dependencies=[Depends(rate_limited)],
)
def interview_prep(request: AnalyzeRequest = Body(...)):
    """Five likely interview questions, each with a STAR answering tip."""
    require_text(TEXT_REQUIRED, request.resume_text, request.job_description)

    try:
        questions = generate_interview_questions(request.resume_text, request.job_description)
    except Exception as e:
        raise upstream_failure("generate interview prep", e)

    return InterviewPrepResponse(questions=questions)
