"""
Resume endpoints: text extraction from uploads, AI structuring and optimization.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status

from app.core.config import MAX_UPLOAD_BYTES
from app.core.errors import (
    FILE_REQUIRED,
    RESUME_TEXT_REQUIRED,
    TEXT_REQUIRED,
    require_text,
    upstream_failure,
)
from app.core.rate_limit import rate_limited
from app.schemas.ai import (
    OptimizeRequest,
    OptimizeResponse,
    ParseResumeResponse,
    StructureRequest,
)
from app.schemas.resume import ResumeData
from app.services.ai_service import optimize_resume_content, structure_resume
from app.services.resume_parser import (
    ResumeParseError,
    UnsupportedFileTypeError,
    extract_keywords,
    extract_sections,
    parse_resume,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Resume"])


@router.post("/parse-resume", response_model=ParseResumeResponse)
async def parse_resume_upload(file: Optional[UploadFile] = File(None)):
    """Extract plain text from an uploaded PDF or DOCX resume."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=FILE_REQUIRED)

    # Never buffer more than one byte past the cap
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=FILE_REQUIRED)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB."
        )

    try:
        text = parse_resume(content, filename=file.filename, content_type=file.content_type)
    except UnsupportedFileTypeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ResumeParseError as e:
        logger.error(f"Resume upload could not be parsed: filename={file.filename}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return ParseResumeResponse(
        text=text,
        sections=extract_sections(text),
        keywords=extract_keywords(text),
    )


@router.post(
    "/structure-resume",
    response_model=ResumeData,
    dependencies=[Depends(rate_limited)],
)
def structure(request: StructureRequest = Body(...)):
    """Convert resume text into structured resume data for the builder."""
    require_text(RESUME_TEXT_REQUIRED, request.resume_text)

    try:
        return structure_resume(request.resume_text)
    except Exception as e:
        raise upstream_failure("structure resume", e)


@router.post(
    "/optimize-resume",
    response_model=OptimizeResponse,
    dependencies=[Depends(rate_limited)],
)
def optimize(request: OptimizeRequest = Body(...)):
    """Rewrite the resume to work in missing keywords."""
    require_text(TEXT_REQUIRED, request.resume_text, request.job_description)

    try:
        output = optimize_resume_content(
            request.resume_text,
            request.job_description,
            request.missing_keywords,
        )
    except Exception as e:
        raise upstream_failure("optimize resume", e)

    return OptimizeResponse(optimized_text=output)
