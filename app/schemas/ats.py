"""
Pydantic schemas for ATS scoring, simulation and analysis.
"""
import logging
import math
import re
from typing import Optional, List, Literal
from pydantic import ConfigDict, Field, ValidationError, field_validator

from app.schemas.base import CamelModel

logger = logging.getLogger(__name__)

IssueCategory = Literal["formatting", "structure", "length", "content"]
Severity = Literal["critical", "warning", "info"]
SimulationStatus = Literal["passed", "warning", "failed"]
ProfileType = Literal["legacy", "modern", "semantic"]
ScoreLevel = Literal["excellent", "good", "fair", "poor"]


class Issue(CamelModel):
    """A single ATS compatibility problem and how to fix it."""
    model_config = ConfigDict(frozen=True)

    category: IssueCategory = Field(..., alias="type", description="Issue category")
    severity: Severity = Field(..., description="How badly this hurts parsing")
    message: str = Field(..., description="What is wrong")
    fix: str = Field(..., description="How to fix it")


class ScoreReport(CamelModel):
    """Rule checker result for one resume text."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100, description="Compatibility score 0-100")
    issues: List[Issue] = Field(default_factory=list, description="Triggered issues in check order")


class ATSProfile(CamelModel):
    """Static parsing tolerances of a simulated ATS."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: ProfileType
    description: str
    tables_allowed: bool
    columns_allowed: bool
    graphics_allowed: bool
    min_keyword_density: float
    standard_headings_only: bool
    date_formats: List[str] = Field(default_factory=list)


class SimulationVerdict(CamelModel):
    """Outcome of running a resume through one ATS profile."""
    system_name: str = Field(..., description="Profile name")
    compatibility_score: int = Field(..., ge=0, le=100)
    status: SimulationStatus
    issues: List[str] = Field(default_factory=list)


class QuantificationSuggestion(CamelModel):
    original: str
    suggestion: str


class MissingKeywordsByCategory(CamelModel):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)


_SCORE_SUFFIX_RE = re.compile(r"\s*(%|/\s*100)$")


def _as_str_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if v is not None and str(v).strip()]


class AIAnalysis(CamelModel):
    """
    Resume vs job description analysis from the LLM (or its fallback).

    Lenient on input: LLM output is coerced, clamped and filtered
    rather than rejected. A score that is missing or not a number is
    rejected so the caller can fall back to the keyword heuristic.
    """
    score: int = Field(..., ge=0, le=100)
    keyword_matches: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)
    missing_keywords_by_category: Optional[MissingKeywordsByCategory] = None
    format_issues: List[Issue] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, bool):
            raise ValueError("score must be a number")
        if isinstance(value, str):
            # "85%" and "85/100" both mean 85
            value = _SCORE_SUFFIX_RE.sub("", value.strip())
        try:
            score = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"score is not a number: {value!r}") from None
        if not math.isfinite(score):
            raise ValueError("score must be finite")
        return max(0, min(100, math.floor(score + 0.5)))

    @field_validator("keyword_matches", "missing_keywords", "suggestions", "strengths", mode="before")
    @classmethod
    def _coerce_str_list(cls, value):
        return _as_str_list(value)

    @field_validator("format_issues", mode="before")
    @classmethod
    def _drop_invalid_issues(cls, value):
        issues = []
        for item in value or []:
            try:
                issues.append(Issue.model_validate(item))
            except ValidationError:
                logger.debug(f"Dropping malformed format issue from AI output: {item!r}")
        return issues


class ATSAnalysis(CamelModel):
    """Response of the analyze endpoint."""
    score: int = Field(..., ge=0, le=100, description="Combined rule + AI score")
    keyword_matches: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)
    missing_keywords_by_category: Optional[MissingKeywordsByCategory] = None
    format_issues: List[Issue] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    score_level: ScoreLevel = Field(..., description="excellent, good, fair or poor")
    keyword_density: float = Field(0.0, ge=0, description="Percent of resume words that are matched keywords")
    ats_simulation: List[SimulationVerdict] = Field(default_factory=list)
    quantification_suggestions: List[QuantificationSuggestion] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "score": 78,
                "scoreLevel": "good",
                "keywordDensity": 1.2,
                "keywordMatches": ["python", "kubernetes"],
                "missingKeywords": ["terraform"],
                "formatIssues": [
                    {
                        "type": "structure",
                        "severity": "warning",
                        "message": "No phone number found",
                        "fix": "Add your phone number for better contact options"
                    }
                ],
                "suggestions": ["Quantify your achievements with numbers and percentages."],
                "strengths": ["Clear experience section"],
                "atsSimulation": [
                    {
                        "systemName": "Legacy ATS (Taleo/BrassRing)",
                        "compatibilityScore": 85,
                        "status": "passed",
                        "issues": []
                    }
                ],
                "quantificationSuggestions": []
            }
        }
    )
