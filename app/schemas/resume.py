"""
Pydantic schemas for structured resume data and document export.
"""
from typing import Optional, List, Literal
from pydantic import Field, field_validator

from app.schemas.base import CamelModel

FontName = Literal["Arial", "Times New Roman", "Calibri", "Helvetica"]
FontSize = Literal["small", "medium", "large"]


class PersonalInfo(CamelModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: Optional[str] = None
    location: Optional[str] = None
    portfolio: Optional[str] = None


class Experience(CamelModel):
    company: str = ""
    position: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class Education(CamelModel):
    school: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""


class Project(CamelModel):
    name: str = ""
    description: str = ""
    link: Optional[str] = None


class ResumeData(CamelModel):
    """Structured resume used by the document generators."""
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)

    @field_validator("experience", "education", "skills", "certifications", "projects", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []


class ResumeStyleOptions(CamelModel):
    """Visual options for exported documents."""
    font: FontName = "Arial"
    font_size: FontSize = "medium"
    accent_color: str = Field("000000", description="Hex color, with or without leading #")

    @field_validator("accent_color", mode="before")
    @classmethod
    def _normalize_color(cls, value):
        color = str(value or "000000").strip().lstrip("#").upper()
        if len(color) == 3:
            color = "".join(c * 2 for c in color)
        if len(color) != 6 or any(c not in "0123456789ABCDEF" for c in color):
            raise ValueError("accent_color must be a hex color like 1F4E79")
        return color


class ExportRequest(CamelModel):
    """Request model for document export."""
    data: ResumeData
    options: ResumeStyleOptions = Field(default_factory=ResumeStyleOptions)
