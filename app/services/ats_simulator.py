"""
Multi-ATS Simulation.

Re-scores a resume against three fixed ATS profiles, each with its own
parsing tolerances. Profiles are scored independently.
"""
import logging
from typing import List

from app.schemas.ats import ATSProfile, SimulationVerdict, SimulationStatus
from app.services.ats_checker import count_words

logger = logging.getLogger(__name__)

PASSED_THRESHOLD = 85
WARNING_THRESHOLD = 60

STANDARD_HEADINGS = ("experience", "education", "skills", "summary", "projects")

ATS_PROFILES: List[ATSProfile] = [
    ATSProfile(
        name="Legacy ATS (Taleo/BrassRing)",
        type="legacy",
        description="Strict older systems that struggle with formatting. Best to keep it simple.",
        tables_allowed=False,
        columns_allowed=False,
        graphics_allowed=False,
        min_keyword_density=0.05,
        standard_headings_only=True,
        date_formats=["MM/YYYY", "Month YYYY"],
    ),
    ATSProfile(
        name="Modern ATS (Greenhouse/Lever)",
        type="modern",
        description="Flexible systems that can parse PDF columns and simple tables.",
        tables_allowed=True,
        columns_allowed=True,
        graphics_allowed=False,
        min_keyword_density=0.02,
        standard_headings_only=False,
        date_formats=["MM/YYYY", "Month YYYY", "YYYY"],
    ),
    ATSProfile(
        name="AI-Powered Matcher (Eightfold/Daxtra)",
        type="semantic",
        description="Uses AI to understand context, not just keywords. Focuses on skills and impact.",
        tables_allowed=True,
        columns_allowed=True,
        graphics_allowed=True,
        min_keyword_density=0.0,
        standard_headings_only=False,
        date_formats=["MM/YYYY", "Month YYYY", "YYYY"],
    ),
]


def status_for_score(score: int) -> SimulationStatus:
    if score < WARNING_THRESHOLD:
        return "failed"
    if score < PASSED_THRESHOLD:
        return "warning"
    return "passed"


def has_complex_layout(resume_text: str) -> bool:
    """Column-like layout: a 3+ space run anywhere and a long line with a double space."""
    if "   " not in resume_text:
        return False
    return any(len(line) > 80 and "  " in line for line in resume_text.split("\n"))


def has_standard_headings(resume_text: str) -> bool:
    lower = resume_text.lower()
    return all(heading in lower for heading in STANDARD_HEADINGS)


def simulate_profile(resume_text: str, profile: ATSProfile) -> SimulationVerdict:
    issues: List[str] = []
    score = 100

    if not profile.columns_allowed and has_complex_layout(resume_text):
        score -= 20
        issues.append("Layout may be too complex (columns detected) for this legacy system.")

    if profile.standard_headings_only and not has_standard_headings(resume_text):
        score -= 15
        issues.append("Missing standard section headings required by this system.")

    if count_words(resume_text) < 200:
        score -= 10
        issues.append("Content length is too short for accurate parsing.")

    score = max(0, min(100, score))
    return SimulationVerdict(
        system_name=profile.name,
        compatibility_score=score,
        status=status_for_score(score),
        issues=issues,
    )


def simulate_ats_check(resume_text: str) -> List[SimulationVerdict]:
    """One verdict per profile, in ATS_PROFILES order."""
    text = resume_text or ""
    verdicts = [simulate_profile(text, profile) for profile in ATS_PROFILES]
    logger.debug(
        "ATS simulation: " + ", ".join(f"{v.system_name}={v.compatibility_score}" for v in verdicts)
    )
    return verdicts
