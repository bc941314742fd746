"""
Tests for the analysis aggregator: score combination, suggestion merging
and branch isolation.
"""
import asyncio

from app.schemas.ats import AIAnalysis, Issue, QuantificationSuggestion
from app.services import analysis_service
from app.services.analysis_service import (
    AI_FAILURE_SUGGESTION,
    analyze_resume,
    combine_scores,
    merge_suggestions,
)
from app.services.ats_checker import calculate_keyword_density, check_ats_compatibility


def _boom(*args):
    raise RuntimeError("branch exploded")


def test_combine_scores():
    assert combine_scores(75, 80) == 78
    assert combine_scores(0, 85) == 43
    assert combine_scores(100, 100) == 100
    assert combine_scores(0, 0) == 0
    assert combine_scores(40, 41) == 41


def test_merge_suggestions_dedup_keeps_first_order():
    merged = merge_suggestions(["a", "b", ""], ["b", "c", "a"], None, ["  ", "d"])
    assert merged == ["a", "b", "c", "d"]


def test_analyze_offline(complete_resume, job_description):
    result = asyncio.run(analyze_resume(complete_resume, job_description))

    # rule 100, keyword overlap 4 of 6
    assert result.score == 84
    assert len(result.ats_simulation) == 3
    assert result.quantification_suggestions == []
    assert result.keyword_matches == ["python", "engineer", "kubernetes", "experience"]
    assert result.score_level == "excellent"
    assert result.keyword_density == round(
        calculate_keyword_density(complete_resume, result.keyword_matches), 2
    )
    assert result.keyword_density > 0


def test_analyze_combines_issues_and_suggestions(monkeypatch, marker_free_text, job_description):
    ai_issue = Issue(category="content", severity="info", message="Vague bullets", fix="Add metrics")
    monkeypatch.setattr(
        analysis_service,
        "analyze_resume_with_ai",
        lambda resume, jd: AIAnalysis(
            score=80,
            format_issues=[ai_issue],
            suggestions=["Add metrics", "Use bullet points to list achievements and responsibilities"],
        ),
    )

    result = asyncio.run(analyze_resume(marker_free_text, job_description))

    assert result.score == 60
    assert result.score_level == "good"
    rule_issues = check_ats_compatibility(marker_free_text).issues
    assert result.format_issues == rule_issues + [ai_issue]
    assert result.suggestions[0] == "Add metrics"
    assert result.suggestions.count("Use bullet points to list achievements and responsibilities") == 1


def test_ai_branch_failure_is_isolated(monkeypatch, complete_resume, job_description):
    monkeypatch.setattr(analysis_service, "analyze_resume_with_ai", _boom)

    result = asyncio.run(analyze_resume(complete_resume, job_description))

    assert result.score == combine_scores(100, 0)
    assert AI_FAILURE_SUGGESTION in result.suggestions
    assert result.keyword_matches == []
    assert len(result.ats_simulation) == 3


def test_rule_branch_failure_is_isolated(monkeypatch, complete_resume, job_description):
    monkeypatch.setattr(analysis_service, "check_ats_compatibility", _boom)

    result = asyncio.run(analyze_resume(complete_resume, job_description))

    assert result.score == combine_scores(0, 67)
    assert "kubernetes" in result.keyword_matches


def test_quantification_failure_is_isolated(monkeypatch, complete_resume, job_description):
    monkeypatch.setattr(analysis_service, "quantify_achievements", _boom)

    result = asyncio.run(analyze_resume(complete_resume, job_description))

    assert result.quantification_suggestions == []
    assert result.score == 84


def test_quantification_results_passed_through(monkeypatch, complete_resume, job_description):
    suggestion = QuantificationSuggestion(original="Led team", suggestion="Led team of [X]")
    monkeypatch.setattr(analysis_service, "quantify_achievements", lambda resume: [suggestion])

    result = asyncio.run(analyze_resume(complete_resume, job_description))

    assert result.quantification_suggestions == [suggestion]
