"""
ATS Scorer — heuristic 0-100 applicant-tracking-system compatibility score.

Five sub-scores (each 0-100) combined with fixed weights:
  keyword_match 40% · content 25% · structure 15% · format 10% · length 10%

All checks are lexical; the score is a proxy, not a real ATS verdict.
"""

from __future__ import annotations

import logging
import re

from resume_tailor.config import SCORING_THRESHOLDS
from resume_tailor.models.keyword_models import KeywordImportance
from resume_tailor.models.score_models import ATSScoreBreakdown, ATSScoreResult, ScoreDetails
from resume_tailor.services.keyword_analyzer import analyze_keyword_importance, extract_keywords
from resume_tailor.utils.synonym_map import are_synonyms
from resume_tailor.utils.text_cleanup import count_words

logger = logging.getLogger(__name__)

WEIGHTS = {
    "keyword_match": 0.40,
    "content_score": 0.25,
    "structure_score": 0.15,
    "format_score": 0.10,
    "length_score": 0.10,
}

# ── Issue labels and deductions ──────────────────────────────────────────────

COMPLEX_FORMATTING = "Complex formatting detected"
UNUSUAL_CHARACTERS = "Unusual characters found"
INCONSISTENT_SPACING = "Inconsistent spacing"
MISSING_SECTIONS = "Missing standard sections"

MISSING_METRICS = "Missing quantifiable achievements"
WEAK_VERBS = "Weak action verbs"
MISSING_SKILLS = "Missing skills section"
GENERIC_DESCRIPTIONS = "Generic job descriptions"

FORMAT_DEDUCTIONS = {
    COMPLEX_FORMATTING: 15,
    UNUSUAL_CHARACTERS: 10,
    INCONSISTENT_SPACING: 5,
    MISSING_SECTIONS: 20,
}

CONTENT_DEDUCTIONS = {
    MISSING_METRICS: 15,
    WEAK_VERBS: 10,
    MISSING_SKILLS: 20,
    GENERIC_DESCRIPTIONS: 12,
}

STRONG_ACTION_VERBS = [
    "achieved", "improved", "increased", "reduced", "developed",
    "implemented", "managed", "led", "created", "optimized",
]

GENERIC_PHRASES = ["responsible for", "duties included", "worked on"]

STANDARD_SECTIONS = ["experience", "education", "skills"]
BENEFICIAL_SECTIONS = ["summary", "projects", "certifications"]

SECTION_KEYWORDS = [
    "summary", "objective", "profile",
    "experience", "work history", "employment",
    "education", "academic",
    "skills", "technical skills", "competencies",
    "projects", "portfolio",
    "certifications", "licenses",
    "awards", "achievements",
    "publications", "research",
]

IDEAL_SECTION_ORDER = [
    "summary", "objective", "profile",
    "experience", "work history", "employment",
    "education", "academic",
    "skills", "technical skills", "competencies",
    "projects", "certifications", "awards",
]

MAX_HEADER_LENGTH = 50

_UNUSUAL_CHARS = re.compile(r"[^\w\s.,!?()\-]", re.ASCII)
_BOX_DRAWING = re.compile(r"[─-╿▀-▟]")

# (lower bound, upper bound, score), first band containing the word count wins
LENGTH_BANDS = [(400, 800, 100), (300, 1000, 85), (200, 1200, 70)]


# ── Public API ───────────────────────────────────────────────────────────────


def score_resume(resume_text: str, job_keywords: list[str]) -> ATSScoreResult:
    """Score a resume against a list of job keywords."""
    breakdown = calculate_score_breakdown(resume_text, job_keywords)
    score = overall_score(breakdown)
    result = ATSScoreResult(
        score=score,
        breakdown=breakdown,
        recommendations=generate_recommendations(breakdown),
        passes_ats=score >= SCORING_THRESHOLDS["passing_score"],
    )
    logger.debug(
        f"ATS score {score} (keywords={breakdown.keyword_match} content={breakdown.content_score} "
        f"structure={breakdown.structure_score} format={breakdown.format_score} length={breakdown.length_score})"
    )
    return result


def calculate_ats_score(resume_text: str, job_keywords: list[str]) -> int:
    """Overall score only."""
    return score_resume(resume_text, job_keywords).score


def overall_score(breakdown: ATSScoreBreakdown) -> int:
    weighted = sum(getattr(breakdown, field) * weight for field, weight in WEIGHTS.items())
    return _clamp(round(weighted))


def calculate_score_breakdown(resume_text: str, job_keywords: list[str]) -> ATSScoreBreakdown:
    resume_keywords = extract_keywords(resume_text)
    importance = analyze_keyword_importance(job_keywords, resume_text)
    format_issues = identify_format_issues(resume_text)
    content_issues = identify_content_issues(resume_text)

    matched = [kw for kw in job_keywords if _is_matched(kw, resume_keywords)]
    critical_missing = [
        kw.keyword for kw in importance
        if kw.importance >= SCORING_THRESHOLDS["critical_importance"]
        and not _is_matched(kw.keyword, resume_keywords)
    ]

    return ATSScoreBreakdown(
        keyword_match=keyword_match_score(importance, resume_keywords) if job_keywords else 100,
        format_score=_deduct(format_issues, FORMAT_DEDUCTIONS),
        content_score=_deduct(content_issues, CONTENT_DEDUCTIONS),
        length_score=length_score(resume_text),
        structure_score=structure_score(resume_text),
        details=ScoreDetails(
            total_keywords=len(job_keywords),
            matched_keywords=len(matched),
            missing_critical_keywords=critical_missing,
            format_issues=format_issues,
            content_issues=content_issues,
            word_count=count_words(resume_text),
        ),
    )


# ── Keyword match ────────────────────────────────────────────────────────────


def is_keyword_match(resume_keyword: str, job_keyword: str) -> bool:
    """Equal, contained either way, or listed as synonyms."""
    resume = resume_keyword.lower()
    job = job_keyword.lower()
    if resume == job or job in resume or resume in job:
        return True
    return are_synonyms(resume, job)


def _is_matched(job_keyword: str, resume_keywords: list[str]) -> bool:
    return any(is_keyword_match(rk, job_keyword) for rk in resume_keywords)


def keyword_match_score(importance: list[KeywordImportance], resume_keywords: list[str]) -> int:
    """Importance-weighted share of job keywords present in the resume."""
    total = sum(kw.importance for kw in importance)
    if total == 0:
        return 100
    matched = sum(kw.importance for kw in importance if _is_matched(kw.keyword, resume_keywords))
    return _clamp(round(matched / total * 100))


# ── Format & content ─────────────────────────────────────────────────────────


def identify_format_issues(resume_text: str) -> list[str]:
    issues: list[str] = []
    lines = resume_text.split("\n")

    if _BOX_DRAWING.search(resume_text) or any(
        line.count("|") >= 3 or line.count("\t") >= 2 for line in lines
    ):
        issues.append(COMPLEX_FORMATTING)

    if "\t" in resume_text or "  " in resume_text:
        issues.append(INCONSISTENT_SPACING)

    if _UNUSUAL_CHARS.search(resume_text):
        issues.append(UNUSUAL_CHARACTERS)

    lower = resume_text.lower()
    if not any(section in lower for section in STANDARD_SECTIONS):
        issues.append(MISSING_SECTIONS)

    return issues


def identify_content_issues(resume_text: str) -> list[str]:
    issues: list[str] = []
    lower = resume_text.lower()

    if not re.search(r"[\d%$]", resume_text):
        issues.append(MISSING_METRICS)

    if not any(verb in lower for verb in STRONG_ACTION_VERBS):
        issues.append(WEAK_VERBS)

    if "skill" not in lower:
        issues.append(MISSING_SKILLS)

    if any(phrase in lower for phrase in GENERIC_PHRASES):
        issues.append(GENERIC_DESCRIPTIONS)

    return issues


def _deduct(issues: list[str], deductions: dict[str, int]) -> int:
    return _clamp(100 - sum(deductions.get(issue, 5) for issue in issues))


# ── Length & structure ───────────────────────────────────────────────────────


def length_score(resume_text: str) -> int:
    words = count_words(resume_text)
    for low, high, score in LENGTH_BANDS:
        if low <= words <= high:
            return score
    return 40 if words < 200 else 50


def identify_resume_sections(resume_text: str) -> list[str]:
    """Section keywords found on short lines, in order of first appearance."""
    found: list[str] = []
    for line in resume_text.split("\n"):
        if len(line) >= MAX_HEADER_LENGTH:
            continue
        lower = line.strip().lower()
        for keyword in SECTION_KEYWORDS:
            if keyword in lower and keyword not in found:
                found.append(keyword)
    return found


def has_logical_section_order(sections: list[str]) -> bool:
    last = -1
    for section in sections:
        if section in IDEAL_SECTION_ORDER:
            index = IDEAL_SECTION_ORDER.index(section)
            if index < last:
                return False
            last = index
    return True


def structure_score(resume_text: str) -> int:
    sections = identify_resume_sections(resume_text)

    def present(name: str) -> bool:
        return any(name in s for s in sections)

    score = 0
    if all(present(s) for s in STANDARD_SECTIONS):
        score += 60
    score += 10 * sum(1 for s in BENEFICIAL_SECTIONS if present(s))
    if has_logical_section_order(sections):
        score += 20
    return _clamp(score)


# ── Recommendations ──────────────────────────────────────────────────────────


def generate_recommendations(breakdown: ATSScoreBreakdown) -> list[str]:
    keyword_cutoff = SCORING_THRESHOLDS["keyword_recommendation_cutoff"]
    section_cutoff = SCORING_THRESHOLDS["section_recommendation_cutoff"]
    details = breakdown.details
    recommendations: list[str] = []

    if breakdown.keyword_match < keyword_cutoff:
        recommendations.append("Add more relevant keywords from the job description")
        if details.missing_critical_keywords:
            recommendations.append(
                f"Include these critical keywords: {', '.join(details.missing_critical_keywords[:3])}"
            )

    if breakdown.format_score < section_cutoff:
        if MISSING_SECTIONS in details.format_issues:
            recommendations.append("Add standard resume sections: Experience, Education, Skills")
        if INCONSISTENT_SPACING in details.format_issues:
            recommendations.append("Use consistent spacing and formatting throughout")

    if breakdown.content_score < section_cutoff:
        if MISSING_METRICS in details.content_issues:
            recommendations.append("Add numbers, percentages, and metrics to quantify your achievements")
        if WEAK_VERBS in details.content_issues:
            recommendations.append('Use strong action verbs like "achieved," "improved," "developed"')

    if breakdown.structure_score < section_cutoff:
        recommendations.append("Organize sections in logical order: Summary, Experience, Education, Skills")

    if breakdown.length_score < section_cutoff:
        if details.word_count < 400:
            recommendations.append("Expand your resume with more detailed descriptions (aim for 400-800 words)")
        elif details.word_count > 800:
            recommendations.append("Condense your resume to focus on most relevant information (aim for 400-800 words)")

    return recommendations[: SCORING_THRESHOLDS["max_recommendations"]]


def _clamp(value: int) -> int:
    return max(0, min(100, value))
