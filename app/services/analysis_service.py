"""
Resume analysis aggregator.

Fans out the AI analysis, the rule check and the quantification suggestions
concurrently with all-settled semantics: a failing branch is logged and
replaced by a safe default, never aborting the others. Then combines the
scores and merges suggestions.
"""
import asyncio
import logging
import math
from typing import Iterable, List, Optional

from fastapi.concurrency import run_in_threadpool

from app.schemas.ats import AIAnalysis, ATSAnalysis, ScoreReport
from app.services.ai_service import analyze_resume_with_ai, quantify_achievements
from app.services.ats_checker import (
    calculate_keyword_density,
    check_ats_compatibility,
    get_score_level,
    suggest_improvements,
)
from app.services.ats_simulator import simulate_ats_check

logger = logging.getLogger(__name__)

AI_FAILURE_SUGGESTION = "AI Analysis failed temporarily. Please try again."


def ai_branch_default() -> AIAnalysis:
    return AIAnalysis(score=0, suggestions=[AI_FAILURE_SUGGESTION])


def rule_branch_default() -> ScoreReport:
    return ScoreReport(score=0, issues=[])


def combine_scores(rule_score: int, ai_score: int) -> int:
    """Arithmetic mean, rounded half up, clamped to 0-100."""
    mean = (rule_score + ai_score) / 2
    return max(0, min(100, math.floor(mean + 0.5)))


def merge_suggestions(*suggestion_lists: Optional[Iterable[str]]) -> List[str]:
    """Concatenate lists, dropping blanks and repeats; first occurrence wins."""
    merged: List[str] = []
    seen = set()
    for suggestions in suggestion_lists:
        for suggestion in suggestions or []:
            if not suggestion or not suggestion.strip() or suggestion in seen:
                continue
            seen.add(suggestion)
            merged.append(suggestion)
    return merged


def _settled(result, default, branch: str):
    if isinstance(result, BaseException):
        logger.error(f"{branch} failed: {result!r}", exc_info=result)
        return default
    return result


async def analyze_resume(resume_text: str, jd_text: str) -> ATSAnalysis:
    """
    Full ATS analysis of a resume against a job description.

    No branch failure aborts the request; see the module docstring.
    """
    logger.info(f"Analysis started: resume_len={len(resume_text)}, jd_len={len(jd_text)}")

    ai_result, rule_result, quant_result = await asyncio.gather(
        run_in_threadpool(analyze_resume_with_ai, resume_text, jd_text),
        run_in_threadpool(check_ats_compatibility, resume_text),
        run_in_threadpool(quantify_achievements, resume_text),
        return_exceptions=True,
    )

    ai_analysis: AIAnalysis = _settled(ai_result, ai_branch_default(), "AI analysis")
    rule_report: ScoreReport = _settled(rule_result, rule_branch_default(), "Rule check")
    quantification = _settled(quant_result, [], "Quantification")

    simulation = simulate_ats_check(resume_text)

    final_score = combine_scores(rule_report.score, ai_analysis.score)
    improvements = suggest_improvements(final_score, rule_report.issues)

    analysis = ATSAnalysis(
        score=final_score,
        score_level=get_score_level(final_score),
        keyword_density=round(calculate_keyword_density(resume_text, ai_analysis.keyword_matches), 2),
        keyword_matches=ai_analysis.keyword_matches,
        missing_keywords=ai_analysis.missing_keywords,
        missing_keywords_by_category=ai_analysis.missing_keywords_by_category,
        format_issues=list(rule_report.issues) + list(ai_analysis.format_issues),
        suggestions=merge_suggestions(ai_analysis.suggestions, improvements),
        strengths=ai_analysis.strengths,
        ats_simulation=simulation,
        quantification_suggestions=quantification,
    )

    logger.info(
        f"Analysis completed: score={final_score}, rule_score={rule_report.score}, "
        f"ai_score={ai_analysis.score}, issues={len(analysis.format_issues)}"
    )
    return analysis
