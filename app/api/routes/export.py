"""
Resume document export (DOCX / PDF).
"""
import logging
from fastapi import APIRouter, Body
from fastapi.responses import Response

from app.core.errors import upstream_failure
from app.schemas.resume import ExportRequest
from app.services.resume_generator import generate_resume_docx, generate_resume_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["Export"])

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCX_FILENAME = "ATS_Optimized_Resume.docx"
PDF_FILENAME = "ATS_Optimized_Resume.pdf"


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/docx")
def export_docx(request: ExportRequest = Body(...)):
    try:
        content = generate_resume_docx(request.data, request.options)
    except Exception as e:
        raise upstream_failure("generate DOCX", e)
    return _attachment(content, DOCX_MEDIA_TYPE, DOCX_FILENAME)


@router.post("/pdf")
def export_pdf(request: ExportRequest = Body(...)):
    try:
        content = generate_resume_pdf(request.data, request.options)
    except Exception as e:
        raise upstream_failure("generate PDF", e)
    return _attachment(content, "application/pdf", PDF_FILENAME)
