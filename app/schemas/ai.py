"""
Pydantic schemas for the analysis and AI endpoints.
"""
from typing import Dict, Optional, List
from pydantic import AliasChoices, Field

from app.schemas.base import CamelModel


def _text_field(*names: str, description: str):
    return Field(None, validation_alias=AliasChoices(*names), description=description)


class AnalyzeRequest(CamelModel):
    """Resume text + job description; shared by analyze, cover letter and interview prep."""
    resume_text: Optional[str] = _text_field(
        "resumeText", "resume_text", description="Plain resume text"
    )
    job_description: Optional[str] = _text_field(
        "jobDescription", "job_description", "jd_text", description="Job description text"
    )


class StructureRequest(CamelModel):
    resume_text: Optional[str] = _text_field(
        "resumeText", "resume_text", description="Plain resume text"
    )


class OptimizeRequest(AnalyzeRequest):
    missing_keywords: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("missingKeywords", "missing_keywords"),
        description="Keywords to work into the rewrite",
    )


class ParseResumeResponse(CamelModel):
    text: str
    sections: Dict[str, str] = Field(default_factory=dict, description="Text per detected section")
    keywords: List[str] = Field(default_factory=list, description="Most frequent resume terms")


class CoverLetterResponse(CamelModel):
    cover_letter: str


class InterviewQuestion(CamelModel):
    question: str
    answer_tip: str = ""


class InterviewPrepResponse(CamelModel):
    questions: List[InterviewQuestion] = Field(default_factory=list)


class OptimizeResponse(CamelModel):
    optimized_text: str
