"""
Endpoint tests: request validation, error mapping and response shapes.
"""
import io
import json
import time
from collections import deque

import pytest
from docx import Document
from fastapi import HTTPException
from fastapi.testclient import TestClient
from starlette.requests import Request

from app.api.routes import resume as resume_routes
from app.core import rate_limit
from app.core.errors import upstream_failure
from app.core.rate_limit import check_rate_limit
from app.llm.provider import LLMNotConfiguredError
from app.main import app

client = TestClient(app)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

EXPORT_BODY = {
    "data": {
        "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
        "summary": "Engineer",
        "experience": [{"company": "Acme", "position": "Engineer", "startDate": "2020", "endDate": "Present"}],
        "skills": ["Python"],
    },
    "options": {"font": "Arial", "fontSize": "small", "accentColor": "#336699"},
}


@pytest.mark.parametrize("path", [
    "/api/analyze",
    "/api/generate-cover-letter",
    "/api/interview-prep",
    "/api/optimize-resume",
])
@pytest.mark.parametrize("body", [
    {},
    {"resumeText": "resume"},
    {"jobDescription": "jd"},
    {"resumeText": "   ", "jobDescription": "jd"},
])
def test_text_endpoints_require_both_fields(path, body):
    response = client.post(path, json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Resume text and job description are required"


def test_analyze_response_shape(complete_resume, job_description):
    response = client.post(
        "/api/analyze",
        json={"resumeText": complete_resume, "jobDescription": job_description},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 84
    assert data["scoreLevel"] == "excellent"
    assert data["keywordDensity"] > 0
    assert data["keywordMatches"] == ["python", "engineer", "kubernetes", "experience"]
    assert data["missingKeywords"] == ["seeking", "terraform"]
    assert len(data["atsSimulation"]) == 3
    assert data["atsSimulation"][0]["systemName"] == "Legacy ATS (Taleo/BrassRing)"
    assert data["quantificationSuggestions"] == []
    assert len(data["suggestions"]) == len(set(data["suggestions"]))


def test_analyze_accepts_snake_case(marker_free_text, job_description):
    response = client.post(
        "/api/analyze",
        json={"resume_text": marker_free_text, "jd_text": job_description},
    )

    assert response.status_code == 200
    issue = response.json()["formatIssues"][0]
    assert issue == {
        "type": "structure",
        "severity": "critical",
        "message": "No email address found",
        "fix": "Add your email address at the top of your resume",
    }


def test_cover_letter_without_llm():
    response = client.post("/api/generate-cover-letter", json={"resumeText": "r", "jobDescription": "j"})
    assert response.status_code == 500
    assert response.json()["detail"] == "AI not configured"


def test_cover_letter(fake_llm):
    fake_llm(responses={"cover_letter": "Dear Hiring Manager, ..."})
    response = client.post("/api/generate-cover-letter", json={"resumeText": "r", "jobDescription": "j"})

    assert response.status_code == 200
    assert response.json() == {"coverLetter": "Dear Hiring Manager, ..."}


def test_cover_letter_upstream_error(fake_llm):
    fake_llm(error=RuntimeError("model overloaded"))
    response = client.post("/api/generate-cover-letter", json={"resumeText": "r", "jobDescription": "j"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate cover letter: model overloaded"


def test_interview_prep(fake_llm):
    fake_llm(responses={"interview_prep": json.dumps({"questions": [
        {"question": "Describe a migration you led.", "answerTip": "Situation, task, action, result."},
    ]})})
    response = client.post("/api/interview-prep", json={"resumeText": "r", "jobDescription": "j"})

    assert response.status_code == 200
    assert response.json() == {"questions": [
        {"question": "Describe a migration you led.", "answerTip": "Situation, task, action, result."},
    ]}


def test_optimize_resume(fake_llm):
    fake_llm(responses={"optimize": "Better resume"})
    response = client.post(
        "/api/optimize-resume",
        json={"resumeText": "r", "jobDescription": "j", "missingKeywords": ["terraform"]},
    )

    assert response.status_code == 200
    assert response.json() == {"optimizedText": "Better resume"}


def test_structure_resume_requires_text():
    response = client.post("/api/structure-resume", json={"resumeText": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "Resume text is required"


def test_structure_resume_fallback():
    response = client.post("/api/structure-resume", json={"resumeText": "Jane Doe, engineer"})

    assert response.status_code == 200
    data = response.json()
    assert data["personalInfo"]["fullName"] == "Candidate"
    assert data["summary"] == "Jane Doe, engineer"


def test_parse_resume_requires_file():
    response = client.post("/api/parse-resume")
    assert response.status_code == 400
    assert response.json()["detail"] == "No file provided"


def test_parse_resume_empty_file():
    response = client.post("/api/parse-resume", files={"file": ("cv.pdf", b"", "application/pdf")})
    assert response.status_code == 400


def test_parse_resume_unsupported_type():
    response = client.post("/api/parse-resume", files={"file": ("cv.txt", b"plain text", "text/plain")})
    assert response.status_code == 400
    assert "PDF or DOCX" in response.json()["detail"]


def test_parse_resume_docx():
    document = Document()
    document.add_paragraph("Jane Doe")
    document.add_paragraph("Skills")
    document.add_paragraph("Python, Kubernetes, Python")
    buffer = io.BytesIO()
    document.save(buffer)

    response = client.post(
        "/api/parse-resume",
        files={"file": ("cv.docx", buffer.getvalue(), DOCX_TYPE)},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["text"] == "Jane Doe\nSkills\nPython, Kubernetes, Python"
    assert data["sections"]["contact"] == "Jane Doe\n"
    assert data["sections"]["skills"] == "Python, Kubernetes, Python\n"
    assert data["keywords"][0] == "python"
    assert "kubernetes" in data["keywords"]


def test_parse_resume_corrupt_pdf():
    response = client.post("/api/parse-resume", files={"file": ("cv.pdf", b"not a pdf", "application/pdf")})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to parse PDF file"


def test_export_docx():
    response = client.post("/api/export/docx", json=EXPORT_BODY)

    assert response.status_code == 200
    assert response.headers["content-type"] == DOCX_TYPE
    assert 'filename="ATS_Optimized_Resume.docx"' in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_export_pdf():
    response = client.post("/api/export/pdf", json=EXPORT_BODY)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="ATS_Optimized_Resume.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_export_rejects_bad_options():
    body = dict(EXPORT_BODY, options={"accentColor": "not-a-color"})
    assert client.post("/api/export/pdf", json=body).status_code == 422


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] in ("healthy", "degraded")


def test_upstream_failure_messages():
    assert upstream_failure("x", LLMNotConfiguredError("no key")).detail == "AI not configured"
    assert upstream_failure("parse", RuntimeError("")).detail == "Failed to parse"
    assert upstream_failure("parse", RuntimeError("boom")).status_code == 500


def test_rate_limit():
    request = Request({"type": "http", "headers": [], "client": ("10.0.0.1", 5000)})

    check_rate_limit(request, max_requests=2, window_seconds=60)
    check_rate_limit(request, max_requests=2, window_seconds=60)
    with pytest.raises(HTTPException) as exc_info:
        check_rate_limit(request, max_requests=2, window_seconds=60)
    assert exc_info.value.status_code == 429
    assert int(exc_info.value.headers["Retry-After"]) >= 1


def test_parse_resume_rejects_oversized_upload(monkeypatch):
    monkeypatch.setattr(resume_routes, "MAX_UPLOAD_BYTES", 16)

    at_cap = client.post("/api/parse-resume", files={"file": ("cv.pdf", b"x" * 16, "application/pdf")})
    over_cap = client.post("/api/parse-resume", files={"file": ("cv.pdf", b"x" * 17, "application/pdf")})

    assert at_cap.status_code == 500
    assert over_cap.status_code == 413


def test_rate_limit_forgets_idle_clients():
    now = time.monotonic()
    rate_limit.rate_limit_store["10.0.0.2"] = deque([now - 120])
    rate_limit.rate_limit_store["10.0.0.3"] = deque([now - 120, now - 1])
    request = Request({"type": "http", "headers": [], "client": ("10.0.0.1", 5000)})

    check_rate_limit(request, max_requests=5, window_seconds=60)

    assert "10.0.0.2" not in rate_limit.rate_limit_store
    assert len(rate_limit.rate_limit_store["10.0.0.3"]) == 1
    assert len(rate_limit.rate_limit_store["10.0.0.1"]) == 1


def test_prune_rate_limit_store():
    rate_limit.rate_limit_store["10.0.0.4"] = deque([100.0, 200.0])
    rate_limit.rate_limit_store["10.0.0.5"] = deque([100.0, 990.0])

    rate_limit.prune_rate_limit_store(now=1000.0, window_seconds=60)

    assert dict(rate_limit.rate_limit_store) == {"10.0.0.5": deque([990.0])}
