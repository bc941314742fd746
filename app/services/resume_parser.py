"""
Resume text extraction and light-weight text analysis.
"""
import io
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

import fitz  # pymupdf
from docx import Document

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf"}
DOCX_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}


class ResumeParseError(Exception):
    """A supported file could not be read."""


class UnsupportedFileTypeError(ResumeParseError):
    """The upload is neither PDF nor DOCX."""


def detect_file_type(filename: Optional[str], content_type: Optional[str]) -> str:
    """Return "pdf" or "docx" from the content type, falling back to the extension."""
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type in PDF_CONTENT_TYPES:
        return "pdf"
    if content_type in DOCX_CONTENT_TYPES:
        return "docx"

    extension = Path(filename or "").suffix.lower()
    if extension == ".pdf":
        return "pdf"
    if extension in (".docx", ".doc"):
        return "docx"

    raise UnsupportedFileTypeError("Unsupported file type. Please upload a PDF or DOCX file.")


def parse_pdf(content: bytes) -> str:
    try:
        with fitz.open(stream=content, filetype="pdf") as doc:
            return "".join(page.get_text() for page in doc)
    except Exception as e:
        logger.error(f"Error parsing PDF: {e}", exc_info=True)
        raise ResumeParseError("Failed to parse PDF file") from e


def parse_docx(content: bytes) -> str:
    try:
        document = Document(io.BytesIO(content))
    except Exception as e:
        logger.error(f"Error parsing DOCX: {e}", exc_info=True)
        raise ResumeParseError("Failed to parse DOCX file") from e

    lines = [p.text for p in document.paragraphs]
    # Table cells hold text too; ATS readers see it, so do we
    for table in document.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def parse_resume(content: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Extract plain text from an uploaded resume.

    Raises:
        UnsupportedFileTypeError: not a PDF or DOCX
        ResumeParseError: the file could not be read
    """
    file_type = detect_file_type(filename, content_type)
    text = parse_pdf(content) if file_type == "pdf" else parse_docx(content)
    logger.info(f"Resume parsed: type={file_type}, bytes={len(content)}, text_len={len(text)}")
    return text


SECTION_MARKERS = [
    ("experience", ("experience", "work history")),
    ("education", ("education",)),
    ("skills", ("skill",)),
    ("certifications", ("certification", "license")),
    ("projects", ("project",)),
    ("summary", ("summary", "objective")),
]


def extract_sections(resume_text: str) -> Dict[str, str]:
    """
    Split resume text into sections by header lines.

    A line mentioning a section marker starts that section; lines before
    the first header are treated as contact details.
    """
    sections = {
        "contact": "",
        "summary": "",
        "experience": "",
        "education": "",
        "skills": "",
        "certifications": "",
        "projects": "",
    }
    current = ""

    for line in resume_text.split("\n"):
        lower = line.lower().strip()
        header = next(
            (name for name, markers in SECTION_MARKERS if any(m in lower for m in markers)),
            None,
        )
        if header:
            current = header
        elif current:
            sections[current] += line + "\n"
        else:
            sections["contact"] += line + "\n"

    return sections


STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "could", "may", "might", "must", "can", "this", "that", "these", "those",
}


def extract_keywords(text: str, limit: int = 50) -> List[str]:
    """Most frequent non-stop-words longer than 2 chars."""
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    counts = Counter(w for w in words if len(w) > 2 and w not in STOP_WORDS)
    return [word for word, _ in counts.most_common(limit)]
