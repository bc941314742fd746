"""
ATS Rule Checker.

Fixed, ordered heuristic checks over plain resume text. Each triggered check
emits one Issue and subtracts a fixed deduction from a baseline of 100.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from app.schemas.ats import Issue, ScoreReport, ScoreLevel

logger = logging.getLogger(__name__)

BASELINE_SCORE = 100
MIN_WORDS = 200
MAX_WORDS = 1000

BOX_DRAWING_GLYPHS = ("│", "┌", "─")
PAGE_NUMBER_RE = re.compile(r"page \d+ of \d+", re.IGNORECASE)
EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
EXPERIENCE_RE = re.compile(r"experience|work history|employment", re.IGNORECASE)
EDUCATION_RE = re.compile(r"education|academic", re.IGNORECASE)
SKILLS_RE = re.compile(r"skills|competencies|expertise", re.IGNORECASE)


def count_words(text: str) -> int:
    """Whitespace-separated token count."""
    return len(text.split())


@dataclass(frozen=True)
class Rule:
    """One check: when `triggered(text)` holds, `issue` is emitted and `deduction` applied."""
    name: str
    deduction: int
    issue: Issue
    triggered: Callable[[str], bool]


def _issue(category: str, severity: str, message: str, fix: str) -> Issue:
    return Issue(category=category, severity=severity, message=message, fix=fix)


RULES: List[Rule] = [
    Rule(
        name="complex_formatting",
        deduction=20,
        issue=_issue(
            "formatting", "critical",
            "Resume contains table borders or special characters",
            "Remove tables and use simple bullet points instead",
        ),
        triggered=lambda text: any(glyph in text for glyph in BOX_DRAWING_GLYPHS),
    ),
    Rule(
        name="header_footer",
        deduction=10,
        issue=_issue(
            "formatting", "warning",
            "Resume may contain headers or footers",
            "Remove headers and footers as ATS systems may not read them",
        ),
        triggered=lambda text: PAGE_NUMBER_RE.search(text) is not None,
    ),
    Rule(
        name="too_short",
        deduction=15,
        issue=_issue(
            "length", "warning",
            "Resume is too short",
            "Add more details about your experience and achievements",
        ),
        triggered=lambda text: count_words(text) < MIN_WORDS,
    ),
    Rule(
        name="too_long",
        deduction=5,
        issue=_issue(
            "length", "info",
            "Resume is quite long",
            "Consider condensing to 1-2 pages for better ATS performance",
        ),
        triggered=lambda text: count_words(text) > MAX_WORDS,
    ),
    Rule(
        name="missing_email",
        deduction=15,
        issue=_issue(
            "structure", "critical",
            "No email address found",
            "Add your email address at the top of your resume",
        ),
        triggered=lambda text: EMAIL_RE.search(text) is None,
    ),
    Rule(
        name="missing_phone",
        deduction=5,
        issue=_issue(
            "structure", "warning",
            "No phone number found",
            "Add your phone number for better contact options",
        ),
        triggered=lambda text: PHONE_RE.search(text) is None,
    ),
    Rule(
        name="missing_experience",
        deduction=20,
        issue=_issue(
            "structure", "critical",
            'No "Experience" section found',
            'Add a clearly labeled "Work Experience" or "Professional Experience" section',
        ),
        triggered=lambda text: EXPERIENCE_RE.search(text) is None,
    ),
    Rule(
        name="missing_education",
        deduction=10,
        issue=_issue(
            "structure", "warning",
            'No "Education" section found',
            'Add an "Education" section with your degrees and institutions',
        ),
        triggered=lambda text: EDUCATION_RE.search(text) is None,
    ),
    Rule(
        name="missing_skills",
        deduction=10,
        issue=_issue(
            "structure", "warning",
            'No "Skills" section found',
            'Add a "Skills" section to highlight your technical and soft skills',
        ),
        triggered=lambda text: SKILLS_RE.search(text) is None,
    ),
]


def check_ats_compatibility(resume_text: str) -> ScoreReport:
    """
    Run every rule against the resume text.

    Returns:
        ScoreReport with max(0, 100 - sum of triggered deductions) and the
        triggered issues in rule order.
    """
    text = resume_text or ""
    issues: List[Issue] = []
    score = BASELINE_SCORE

    for rule in RULES:
        if rule.triggered(text):
            issues.append(rule.issue)
            score -= rule.deduction

    score = max(0, score)
    logger.debug(f"Rule check: words={count_words(text)}, score={score}, issues={len(issues)}")
    return ScoreReport(score=score, issues=issues)


def get_score_level(score: int) -> ScoreLevel:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    return "poor"


def calculate_keyword_density(text: str, keywords: List[str]) -> float:
    """Percentage of words in `text` that are whole-word keyword hits."""
    total_words = count_words(text)
    if total_words == 0:
        return 0.0

    lower_text = text.lower()
    match_count = 0
    for keyword in keywords:
        if not keyword.strip():
            continue
        pattern = re.compile(rf"\b{re.escape(keyword.lower())}\b")
        match_count += len(pattern.findall(lower_text))

    return (match_count / total_words) * 100


def suggest_improvements(score: int, issues: Optional[List[Issue]] = None) -> List[str]:
    """Rule-based suggestions derived from the final score and triggered issues."""
    issues = issues or []
    suggestions: List[str] = []

    if score < 60:
        suggestions.append("Your resume needs significant improvements for ATS compatibility")

    if any(i.category == "formatting" for i in issues):
        suggestions.append("Use simple, clean formatting without tables or text boxes")
        suggestions.append("Stick to standard fonts like Arial, Calibri, or Times New Roman")

    if any(i.category == "structure" for i in issues):
        suggestions.append("Include all standard sections: Contact, Summary, Experience, Education, Skills")
        suggestions.append("Use clear section headings that ATS systems can recognize")

    if any("keyword" in i.message.lower() for i in issues):
        suggestions.append("Incorporate more relevant keywords from the job description")
        suggestions.append("Use industry-standard terminology and action verbs")

    suggestions.append("Save your resume as a .docx file for best ATS compatibility")
    suggestions.append("Avoid images, graphics, and fancy formatting")
    suggestions.append("Use bullet points to list achievements and responsibilities")

    return suggestions
