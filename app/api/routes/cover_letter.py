import logging
from fastapi import APIRouter, Body, Depends

from app.core.errors import TEXT_REQUIRED, require_text, upstream_failure
from app.core.rate_limit import rate_limited
from app.schemas.ai import AnalyzeRequest, CoverLetterResponse
from app.services.ai_service import generate_cover_letter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cover Letter"])


@router.post(
    "/generate-cover-letter",
    response_model=CoverLetterResponse,
    dependencies=[Depends(rate_limited)],
)
def generate(request: AnalyzeRequest = Body(...)):
    require_text(TEXT_REQUIRED, request.resume_text, request.job_description)
    logger.info(
        f"Cover letter request: resume_len={len(request.resume_text)}, "
        f"jd_len={len(request.job_description)}"
    )

    try:
        letter = generate_cover_letter(request.resume_text, request.job_description)
    except Exception as e:
        raise upstream_failure("generate cover letter", e)

    return CoverLetterResponse(cover_letter=letter)
