"""
AI Service layer for resume analysis and generation.

Every LLM-backed operation lives here. Analysis, quantification and
structuring fall back to deterministic results when the LLM is unavailable
or returns garbage; pure generation (cover letter, interview questions,
optimization) raises so the endpoint can report the failure.
"""
import logging
import math
import re
from typing import List

from pydantic import ValidationError

from app.llm.runner import get_llm_runner
from app.schemas.ats import AIAnalysis, MissingKeywordsByCategory, QuantificationSuggestion
from app.schemas.ai import InterviewQuestion
from app.schemas.resume import ResumeData, PersonalInfo, Experience

logger = logging.getLogger(__name__)

FALLBACK_MIN_SCORE = 40
FALLBACK_KEYWORD_LIMIT = 20

FALLBACK_SUGGESTIONS = [
    "Ensure your resume includes keywords from the job description.",
    "Use bullet points for readability.",
    "Quantify your achievements with numbers and percentages.",
    "Check for spelling and grammatical errors.",
]
FALLBACK_STRENGTHS = [
    "Resume content is machine-readable",
    "Contains some relevant keywords",
]


def _use_llm() -> bool:
    return get_llm_runner().available


# ============================================
# Keyword-overlap fallback
# ============================================

def extract_jd_keywords(jd_text: str, limit: int = FALLBACK_KEYWORD_LIMIT) -> List[str]:
    """Unique lowercased JD words longer than 4 chars, first-seen order."""
    words = re.sub(r"[^\w\s]", "", jd_text.lower()).split()
    keywords: List[str] = []
    for word in words:
        if len(word) > 4 and word not in keywords:
            keywords.append(word)
            if len(keywords) == limit:
                break
    return keywords


def fallback_analysis(resume_text: str, jd_text: str) -> AIAnalysis:
    """Deterministic analysis used when the LLM cannot be reached."""
    keywords = extract_jd_keywords(jd_text)
    resume_lower = resume_text.lower()

    found = [k for k in keywords if k in resume_lower]
    missing = [k for k in keywords if k not in resume_lower]

    score = math.floor(len(found) / len(keywords) * 100 + 0.5) if keywords else 0
    # Floor keeps the fallback from being needlessly discouraging
    score = max(score, FALLBACK_MIN_SCORE)

    return AIAnalysis(
        score=score,
        keyword_matches=found,
        missing_keywords=missing,
        missing_keywords_by_category=MissingKeywordsByCategory(),
        format_issues=[],
        suggestions=list(FALLBACK_SUGGESTIONS),
        strengths=list(FALLBACK_STRENGTHS),
    )


# ============================================
# Analysis
# ============================================

ANALYSIS_PROMPT = """
You are an expert ATS (Applicant Tracking System) optimizer and career coach.
Analyze the following resume against the provided job description.

Resume Text:
{resume_text}

Job Description:
{jd_text}

Return a JSON object with this EXACT structure:
{{
  "score": number (0-100, based on keyword matching and relevance),
  "keywordMatches": ["soft and hard skills found"],
  "missingKeywords": ["critical skills missing"],
  "missingKeywordsByCategory": {{
    "technical": ["string"],
    "soft": ["string"],
    "tools": ["string"]
  }},
  "formatIssues": [
    {{
      "type": "formatting" | "structure" | "content" | "length",
      "severity": "critical" | "warning" | "info",
      "message": "brief issue description",
      "fix": "how to fix it"
    }}
  ],
  "suggestions": ["specific actionable improvements"],
  "strengths": ["what the candidate did well"]
}}

Return ONLY the JSON. No preamble.
"""


def analyze_resume_with_ai(resume_text: str, jd_text: str) -> AIAnalysis:
    """
    Analyze a resume against a job description.
    Uses the LLM if available, otherwise the keyword-overlap fallback.
    """
    if not _use_llm():
        logger.info("LLM not configured - using fallback resume analysis")
        return fallback_analysis(resume_text, jd_text)

    prompt = ANALYSIS_PROMPT.format(
        resume_text=resume_text[:10000],
        jd_text=jd_text[:5000],
    )
    try:
        result = get_llm_runner().generate_json(prompt, "ats_analysis", json_mode=True)
        if not isinstance(result, dict):
            raise ValueError("AI analysis did not return a JSON object")
        return AIAnalysis.model_validate(result)
    except Exception as e:
        logger.warning(f"AI analysis failed, using fallback: {e}")
        return fallback_analysis(resume_text, jd_text)


QUANTIFY_PROMPT = """
Analyze the following resume content and identify 3-5 bullet points that are vague or lack
quantification (numbers, metrics, percentages). For each, provide a quantified version that
plausibly shows impact. Do not imply false data; use placeholders where needed
(e.g. "Increased sales by [X]%").

Resume Content:
{resume_text}

Return ONLY a JSON object of the form:
{{"suggestions": [{{"original": "Managed a team of developers.", "suggestion": "Led a team of 5 developers, increasing sprint velocity by 20% through agile implementation."}}]}}
"""


def _first_list(result, key: str) -> list:
    """`result[key]` when it is a list, else the first list value, else []."""
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        if isinstance(result.get(key), list):
            return result[key]
        for value in result.values():
            if isinstance(value, list):
                return value
    return []


def quantify_achievements(resume_text: str) -> List[QuantificationSuggestion]:
    """Suggest quantified rewrites of vague bullets. Returns [] on any failure."""
    if not _use_llm():
        return []

    prompt = QUANTIFY_PROMPT.format(resume_text=resume_text[:5000])
    try:
        result = get_llm_runner().generate_json(prompt, "quantify", json_mode=True)
    except Exception as e:
        logger.error(f"Error quantifying achievements: {e}")
        return []

    suggestions = []
    for item in _first_list(result, "suggestions"):
        try:
            suggestions.append(QuantificationSuggestion.model_validate(item))
        except ValidationError:
            logger.debug(f"Skipping malformed quantification item: {item!r}")
    return suggestions


# ============================================
# Generation
# ============================================

COVER_LETTER_PROMPT = """
You are an expert career coach and professional copywriter.
Write a compelling, professional cover letter based on the following resume and job description.

RESUME:
{resume_text}

JOB DESCRIPTION:
{jd_text}

Guidelines:
1. Use a professional yet engaging tone.
2. Highlight key achievements from the resume that match the job requirements.
3. Address the specific company (if found in the job description) or use "Hiring Manager".
4. Keep it concise (3-4 paragraphs).
5. Do not include placeholders like "[Your Name]"; use the name from the resume or a generic signature.

Output ONLY the body of the cover letter (no subject line or header blocks unless essential).
"""


def generate_cover_letter(resume_text: str, jd_text: str) -> str:
    """Raises if the LLM is unavailable or fails."""
    prompt = COVER_LETTER_PROMPT.format(
        resume_text=resume_text[:5000],
        jd_text=jd_text[:2000],
    )
    letter = get_llm_runner().generate(prompt, "cover_letter").strip()
    if not letter:
        raise ValueError("AI returned an empty cover letter")
    logger.info(f"Cover letter generated: output_len={len(letter)}")
    return letter


INTERVIEW_PROMPT = """
Based on the candidate's resume and the job description, generate 5 likely interview questions.
For each question, provide a "STAR Method" tip on how to answer it.

RESUME:
{resume_text}

JOB DESCRIPTION:
{jd_text}

Return ONLY a JSON object in this format:
{{"questions": [{{"question": "The interview question", "answerTip": "Tip on how to answer using STAR method"}}]}}
"""


def generate_interview_questions(resume_text: str, jd_text: str) -> List[InterviewQuestion]:
    """Raises if the LLM is unavailable, fails, or returns no usable questions."""
    prompt = INTERVIEW_PROMPT.format(
        resume_text=resume_text[:3000],
        jd_text=jd_text[:3000],
    )
    result = get_llm_runner().generate_json(prompt, "interview_prep", json_mode=True)
    questions = []
    for item in _first_list(result, "questions"):
        try:
            questions.append(InterviewQuestion.model_validate(item))
        except ValidationError:
            logger.debug(f"Skipping malformed interview question: {item!r}")

    if not questions:
        raise ValueError("AI returned no interview questions")
    return questions


OPTIMIZE_PROMPT = """You are an expert resume writer. Optimize the following resume to better match the job description while maintaining truthfulness and ATS compatibility.

ORIGINAL RESUME:
{resume_text}

JOB DESCRIPTION:
{jd_text}

MISSING KEYWORDS TO INCORPORATE:
{keywords}

Provide an optimized version that:
1. Incorporates missing keywords naturally
2. Uses ATS-friendly formatting
3. Maintains truthfulness (don't add fake experience)
4. Improves action verbs and quantifiable achievements
5. Keeps the same structure but enhances content

Return ONLY the optimized resume text, no additional commentary."""


def optimize_resume_content(resume_text: str, jd_text: str, missing_keywords: List[str]) -> str:
    """Raises if the LLM is unavailable or fails."""
    prompt = OPTIMIZE_PROMPT.format(
        resume_text=resume_text[:10000],
        jd_text=jd_text[:5000],
        keywords=", ".join(missing_keywords) or "(none)",
    )
    output = get_llm_runner().generate(prompt, "optimize").strip()
    if not output:
        raise ValueError("AI returned an empty resume")
    logger.info(f"Resume optimized: input_len={len(resume_text)}, output_len={len(output)}")
    return output


# ============================================
# Structuring
# ============================================

STRUCTURE_PROMPT = """
You are an expert resume parser. Convert the following resume text into a structured JSON object.

Resume Text:
{resume_text}

Return the data in this exact JSON structure:
{{
  "personalInfo": {{"fullName": "", "email": "", "phone": "", "linkedin": "", "location": "", "portfolio": ""}},
  "summary": "Professional summary text",
  "experience": [{{"company": "", "position": "", "location": "", "startDate": "", "endDate": "End date or Present", "description": ""}}],
  "education": [{{"school": "", "degree": "", "field": "", "startDate": "", "endDate": ""}}],
  "skills": ["string"],
  "certifications": ["string"],
  "projects": [{{"name": "", "description": "", "link": ""}}]
}}

Return ONLY valid JSON.
"""


def fallback_resume_data(resume_text: str) -> ResumeData:
    """Placeholder structure the user can edit by hand."""
    summary = resume_text[:300] + ("..." if len(resume_text) > 300 else "")
    return ResumeData(
        personal_info=PersonalInfo(full_name="Candidate"),
        summary=summary,
        experience=[
            Experience(
                company="Previous Role",
                position="Role",
                start_date="Date",
                end_date="Date",
                description="Could not structure automatically. Please edit.",
            )
        ],
        skills=["Professional Skills"],
    )


def structure_resume(resume_text: str) -> ResumeData:
    """Convert resume text to ResumeData, falling back to an editable placeholder."""
    if not _use_llm():
        logger.info("LLM not configured - returning placeholder resume structure")
        return fallback_resume_data(resume_text)

    prompt = STRUCTURE_PROMPT.format(resume_text=resume_text[:15000])
    try:
        result = get_llm_runner().generate_json(prompt, "structure", json_mode=True)
        return ResumeData.model_validate(result)
    except Exception as e:
        logger.error(f"Error structuring resume, using placeholder: {e}")
        return fallback_resume_data(resume_text)
