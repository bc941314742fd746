"""
Resume document generation.

Renders ResumeData into ATS-friendly DOCX (python-docx) and PDF (reportlab)
documents: single column, standard headings, no tables in the DOCX body.
"""
import io
import logging
from typing import List
from xml.sax.saxutils import escape

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.shared import Inches, Pt, RGBColor
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_RIGHT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.schemas.resume import ResumeData, ResumeStyleOptions

logger = logging.getLogger(__name__)

# Point sizes per option: body, heading, title
SIZE_MAP = {
    "small": {"body": 10, "heading": 12, "title": 14},
    "medium": {"body": 11, "heading": 13, "title": 16},
    "large": {"body": 12, "heading": 14, "title": 18},
}

PDF_SIZE_MAP = {
    "small": {"body": 10, "heading": 12, "name": 18, "sub": 11, "meta": 9},
    "medium": {"body": 11, "heading": 14, "name": 20, "sub": 12, "meta": 10},
    "large": {"body": 12, "heading": 16, "name": 24, "sub": 13, "meta": 11},
}

# Standard PDF fonts only; reportlab ships no Arial or Calibri
PDF_FONT_MAP = {
    "Times New Roman": ("Times-Roman", "Times-Bold"),
    "Arial": ("Helvetica", "Helvetica-Bold"),
    "Calibri": ("Helvetica", "Helvetica-Bold"),
    "Helvetica": ("Helvetica", "Helvetica-Bold"),
}


def contact_parts(data: ResumeData) -> List[str]:
    info = data.personal_info
    parts = [info.email, info.phone, info.linkedin, info.location, info.portfolio]
    return [p for p in parts if p]


def date_range(start: str, end: str) -> str:
    if start and end:
        return f"{start} - {end}"
    return start or end


# ============================================
# DOCX
# ============================================

def _docx_run(paragraph, text: str, font: str, size: int, bold: bool = False, color: str = None):
    run = paragraph.add_run(text)
    run.font.name = font
    run.font.size = Pt(size)
    run.bold = bold
    if color:
        run.font.color.rgb = RGBColor.from_string(color)
    return run


def _docx_heading(doc, text: str, font: str, size: int, color: str):
    paragraph = doc.add_paragraph()
    paragraph.paragraph_format.space_before = Pt(10)
    paragraph.paragraph_format.space_after = Pt(5)
    _docx_run(paragraph, text, font, size, bold=True, color=color)
    return paragraph


def _docx_dated_line(doc, left: str, dates: str, font: str, size: int):
    paragraph = doc.add_paragraph()
    paragraph.paragraph_format.tab_stops.add_tab_stop(Inches(6.25), WD_TAB_ALIGNMENT.RIGHT)
    _docx_run(paragraph, left, font, size, bold=True)
    if dates:
        _docx_run(paragraph, f"\t{dates}", font, size)
    return paragraph


def generate_resume_docx(data: ResumeData, options: ResumeStyleOptions = None) -> bytes:
    """Render a resume as DOCX bytes."""
    options = options or ResumeStyleOptions()
    sizes = SIZE_MAP[options.font_size]
    font = options.font
    accent = options.accent_color

    doc = Document()
    for section in doc.sections:
        section.top_margin = section.bottom_margin = Inches(0.5)
        section.left_margin = section.right_margin = Inches(0.5)

    normal = doc.styles["Normal"]
    normal.font.name = font
    normal.font.size = Pt(sizes["body"])

    title = doc.add_paragraph()
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _docx_run(title, data.personal_info.full_name, font, sizes["title"], bold=True, color=accent)

    contact = doc.add_paragraph()
    contact.alignment = WD_ALIGN_PARAGRAPH.CENTER
    contact.paragraph_format.space_after = Pt(12)
    _docx_run(contact, " | ".join(contact_parts(data)), font, sizes["body"])

    if data.summary:
        _docx_heading(doc, "PROFESSIONAL SUMMARY", font, sizes["heading"], accent)
        _docx_run(doc.add_paragraph(), data.summary, font, sizes["body"])

    _docx_heading(doc, "WORK EXPERIENCE", font, sizes["heading"], accent)
    for exp in data.experience:
        position = doc.add_paragraph()
        _docx_run(position, exp.position, font, sizes["body"] + 1, bold=True)
        company = " | ".join(p for p in (exp.company, exp.location) if p)
        _docx_dated_line(doc, company, date_range(exp.start_date, exp.end_date), font, sizes["body"])
        if exp.description:
            _docx_run(doc.add_paragraph(), exp.description, font, sizes["body"])

    _docx_heading(doc, "EDUCATION", font, sizes["heading"], accent)
    for edu in data.education:
        _docx_dated_line(doc, edu.school, date_range(edu.start_date, edu.end_date), font, sizes["body"] + 1)
        degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
        _docx_run(doc.add_paragraph(), degree, font, sizes["body"])

    _docx_heading(doc, "SKILLS", font, sizes["heading"], accent)
    _docx_run(doc.add_paragraph(), " • ".join(data.skills), font, sizes["body"])

    if data.projects:
        _docx_heading(doc, "PROJECTS", font, sizes["heading"], accent)
        for project in data.projects:
            paragraph = doc.add_paragraph()
            _docx_run(paragraph, project.name, font, sizes["body"], bold=True)
            if project.link:
                _docx_run(paragraph, f" ({project.link})", font, sizes["body"])
            if project.description:
                _docx_run(doc.add_paragraph(), project.description, font, sizes["body"])

    if data.certifications:
        _docx_heading(doc, "CERTIFICATIONS", font, sizes["heading"], accent)
        for cert in data.certifications:
            doc.add_paragraph(cert, style="List Bullet")

    buffer = io.BytesIO()
    doc.save(buffer)
    logger.info(f"DOCX resume generated: bytes={buffer.tell()}, experience={len(data.experience)}")
    return buffer.getvalue()


# ============================================
# PDF
# ============================================

def _pdf_styles(options: ResumeStyleOptions) -> dict:
    regular, bold = PDF_FONT_MAP[options.font]
    sizes = PDF_SIZE_MAP[options.font_size]
    accent = HexColor(f"#{options.accent_color}")

    return {
        "name": ParagraphStyle(
            name="Name", fontName=bold, fontSize=sizes["name"], leading=sizes["name"] * 1.2,
            alignment=TA_CENTER, textColor=accent, spaceAfter=5,
        ),
        "contact": ParagraphStyle(
            name="Contact", fontName=regular, fontSize=sizes["meta"], leading=sizes["meta"] * 1.4,
            alignment=TA_CENTER, textColor=HexColor("#333333"),
        ),
        "heading": ParagraphStyle(
            name="Heading", fontName=bold, fontSize=sizes["heading"], leading=sizes["heading"] * 1.2,
            textColor=accent, spaceBefore=10, spaceAfter=2,
        ),
        "sub": ParagraphStyle(
            name="SubHeading", fontName=bold, fontSize=sizes["sub"], leading=sizes["sub"] * 1.3,
            textColor=HexColor("#222222"),
        ),
        "meta": ParagraphStyle(
            name="Meta", fontName=regular, fontSize=sizes["meta"], leading=sizes["meta"] * 1.3,
            textColor=HexColor("#666666"), alignment=TA_RIGHT,
        ),
        "body": ParagraphStyle(
            name="Body", fontName=regular, fontSize=sizes["body"], leading=sizes["body"] * 1.5,
            alignment=TA_JUSTIFY, spaceAfter=5,
        ),
        "accent": accent,
    }


def _pdf_text(text: str) -> str:
    return escape(text or "").replace("\n", "<br/>")


def _pdf_heading(story: list, title: str, styles: dict):
    story.append(Paragraph(_pdf_text(title.upper()), styles["heading"]))
    story.append(HRFlowable(width="100%", thickness=0.5, color=HexColor("#CCCCCC"), spaceAfter=6))


def _pdf_row(left: str, right: str, styles: dict, width: float) -> Table:
    table = Table(
        [[Paragraph(_pdf_text(left), styles["sub"]), Paragraph(_pdf_text(right), styles["meta"])]],
        colWidths=[width * 0.7, width * 0.3],
    )
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ("TOPPADDING", (0, 0), (-1, -1), 0),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]))
    return table


def generate_resume_pdf(data: ResumeData, options: ResumeStyleOptions = None) -> bytes:
    """Render a resume as PDF bytes."""
    options = options or ResumeStyleOptions()
    styles = _pdf_styles(options)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=LETTER,
        leftMargin=30, rightMargin=30, topMargin=30, bottomMargin=30,
        title=f"{data.personal_info.full_name or 'Resume'}",
    )
    width = doc.width

    story = [
        Paragraph(_pdf_text(data.personal_info.full_name), styles["name"]),
        Paragraph(_pdf_text("  |  ".join(contact_parts(data))), styles["contact"]),
        HRFlowable(width="100%", thickness=1, color=styles["accent"], spaceBefore=6, spaceAfter=10),
    ]

    if data.summary:
        _pdf_heading(story, "Professional Summary", styles)
        story.append(Paragraph(_pdf_text(data.summary), styles["body"]))

    if data.experience:
        _pdf_heading(story, "Experience", styles)
        for exp in data.experience:
            story.append(_pdf_row(exp.position, date_range(exp.start_date, exp.end_date), styles, width))
            company = " | ".join(p for p in (exp.company, exp.location) if p)
            story.append(Paragraph(_pdf_text(company), styles["body"]))
            if exp.description:
                story.append(Paragraph(_pdf_text(exp.description), styles["body"]))
            story.append(Spacer(1, 4))

    if data.education:
        _pdf_heading(story, "Education", styles)
        for edu in data.education:
            story.append(_pdf_row(edu.school, date_range(edu.start_date, edu.end_date), styles, width))
            degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
            story.append(Paragraph(_pdf_text(degree), styles["body"]))

    if data.skills:
        _pdf_heading(story, "Skills", styles)
        story.append(Paragraph(_pdf_text(" • ".join(data.skills)), styles["body"]))

    if data.projects:
        _pdf_heading(story, "Projects", styles)
        for project in data.projects:
            story.append(_pdf_row(project.name, project.link or "", styles, width))
            if project.description:
                story.append(Paragraph(_pdf_text(project.description), styles["body"]))

    if data.certifications:
        _pdf_heading(story, "Certifications", styles)
        for cert in data.certifications:
            story.append(Paragraph(_pdf_text(f"• {cert}"), styles["body"]))

    doc.build(story)
    logger.info(f"PDF resume generated: bytes={buffer.tell()}, experience={len(data.experience)}")
    return buffer.getvalue()
