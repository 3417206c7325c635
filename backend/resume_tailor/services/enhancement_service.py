"""
Enhancement Service — the AI-augmented path on top of the workflow executor.

Every function here degrades to the local heuristics: a missing executor,
a validation error, or an unsuccessful workflow reply all end in a local
result rather than an exception. optimize_resume_ai falls back to the
complete local pipeline (resume_optimizer.optimize_resume).
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Optional

from resume_tailor.models.keyword_models import (
    AIInsights,
    EnhancedKeywordReport,
    KeywordExtraction,
    SectionOptimization,
)
from resume_tailor.models.optimize_models import (
    OptimizationLevel,
    OptimizationRecommendation,
    OptimizationRequest,
    OptimizationResult,
    ScoreImprovement,
)
from resume_tailor.models.tailor_models import KeywordMatch, TailoringResult, TailorSuggestion
from resume_tailor.services.ats_scorer import score_resume
from resume_tailor.services.job_analyzer import analyze_job_posting
from resume_tailor.services.keyword_analyzer import (
    analyze_keyword_importance,
    build_keyword_report,
    calculate_keyword_density,
    extract_keywords,
    generate_keyword_report,
    generate_local_optimization_suggestions,
)
from resume_tailor.services.resume_optimizer import optimize_resume
from resume_tailor.services.workflow_executor import WorkflowError, WorkflowExecutor

logger = logging.getLogger(__name__)

MAX_TARGET_KEYWORDS = 25
MAX_SEMANTIC_BOOST = 10
SECTION_SUGGESTION_IMPACT = 7
MAX_HEADING_WORDS = 4

# Header words → section type, checked in order
_SECTION_MARKERS = [
    (("experience", "employment"), "experience"),
    (("education",), "education"),
    (("skills",), "skills"),
    (("summary", "objective"), "summary"),
]


# ── Keywords ─────────────────────────────────────────────────────────────────


async def extract_keywords_with_ai(
    job_text: str,
    executor: Optional[WorkflowExecutor] = None,
    *,
    use_ai: bool = True,
    industry_focus: Optional[str] = None,
    role_level: Optional[str] = None,
    fallback_to_local: bool = True,
) -> KeywordExtraction:
    """
    Grouped job keywords from the KEYWORD_EXTRACTION workflow.

    processing_method is "ai" for a remote answer, "hybrid" when AI was asked
    for but the local heuristics answered, "local" when AI was not asked for
    or no executor is available.
    """
    started = time.perf_counter()

    if use_ai and executor is not None:
        try:
            response = await executor.execute_workflow("KEYWORD_EXTRACTION", {
                "jobDescription": job_text,
                "industryFocus": industry_focus,
                "roleLevel": role_level,
            })
            if response.success and not response.fallback:
                data = response.data
                technical = list(data.get("technicalKeywords") or [])
                soft = list(data.get("softSkills") or [])
                requirements = list(data.get("requirements") or [])
                return KeywordExtraction(
                    keywords=list(dict.fromkeys(technical + soft + requirements)),
                    technical_keywords=technical,
                    soft_skills=soft,
                    requirements=requirements,
                    priorities=_numeric_priorities(data.get("priorities")),
                    processing_method="ai",
                    processing_time=response.processing_time,
                )
        except WorkflowError as e:
            logger.warning(f"AI keyword extraction failed: {e}")
            if not fallback_to_local:
                raise

    keywords = extract_keywords(job_text)
    analysis = analyze_keyword_importance(keywords, job_text)
    return KeywordExtraction(
        keywords=keywords,
        technical_keywords=[k.keyword for k in analysis if k.category == "technical"],
        soft_skills=[k.keyword for k in analysis if k.category == "soft"],
        requirements=[k.keyword for k in analysis if k.importance > 7],
        priorities={k.keyword: float(k.importance) for k in analysis},
        processing_method="hybrid" if use_ai and executor is not None else "local",
        processing_time=int((time.perf_counter() - started) * 1000),
    )


def _numeric_priorities(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(k): float(v) for k, v in raw.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    }


async def generate_enhanced_keyword_report(
    job_text: str,
    resume_text: str,
    executor: Optional[WorkflowExecutor] = None,
    *,
    use_ai: bool = True,
    industry_context: Optional[str] = None,
    role_level: Optional[str] = None,
) -> EnhancedKeywordReport:
    """Keyword report over AI-extracted job keywords, boosted by semantic skill matches (max +10)."""
    extraction = await extract_keywords_with_ai(
        job_text, executor, use_ai=use_ai, industry_focus=industry_context, role_level=role_level,
    )
    resume_keywords = extract_keywords(resume_text)
    report = build_keyword_report(analyze_keyword_importance(extraction.keywords, job_text), resume_keywords)

    insights: Optional[AIInsights] = None
    if use_ai and executor is not None:
        try:
            response = await executor.execute_workflow("SKILL_MATCHING", {
                "candidateSkills": resume_keywords,
                "jobRequirements": extraction.keywords,
                "industryContext": industry_context or "general",
            })
            if response.success and isinstance(response.data, dict):
                insights = AIInsights(
                    semantic_matches=response.data.get("matchedSkills") or [],
                    contextual_recommendations=response.data.get("recommendations") or [],
                    industry_specific_keywords=extraction.technical_keywords,
                )
        except WorkflowError as e:
            logger.warning(f"AI skill matching failed: {e}")

    overall = report.overall_match
    if insights and insights.semantic_matches:
        overall = min(overall + min(len(insights.semantic_matches) * 2, MAX_SEMANTIC_BOOST), 100)

    return EnhancedKeywordReport(
        **report.model_dump(exclude={"overall_match"}),
        overall_match=round(overall, 2),
        ai_insights=insights,
        processing_method=extraction.processing_method,
    )


# ── Sections ─────────────────────────────────────────────────────────────────


async def generate_optimization_suggestions(
    content: str,
    target_keywords: list[str],
    section_type: str,
    executor: Optional[WorkflowExecutor] = None,
    *,
    use_ai: bool = True,
    job_context: str = "",
) -> SectionOptimization:
    if use_ai and executor is not None:
        try:
            response = await executor.execute_workflow("CONTENT_OPTIMIZATION", {
                "sectionContent": content,
                "sectionType": section_type,
                "targetKeywords": target_keywords,
                "jobContext": job_context,
            })
            if response.success and not response.fallback:
                data = response.data
                return SectionOptimization(
                    section=section_type,
                    suggestions=data.get("suggestions") or [],
                    optimized_content=data.get("optimizedContent"),
                    keyword_density=data.get("keywordDensity") or 0.0,
                    readability_score=data.get("readabilityScore"),
                    processing_method="ai",
                )
        except WorkflowError as e:
            logger.warning(f"AI content optimization failed for {section_type}: {e}")

    density = sum(calculate_keyword_density(content, kw) for kw in target_keywords)
    return SectionOptimization(
        section=section_type,
        suggestions=generate_local_optimization_suggestions(content, target_keywords, section_type),
        keyword_density=round(density, 2),
    )


def extract_resume_sections(resume_text: str) -> dict[str, str]:
    """
    Coarse split into header / experience / education / skills / summary.

    A heading is a line of at most four words holding a marker word; repeated
    headings of the same type are merged.
    """
    sections: dict[str, str] = {}
    current = "header"
    lines: list[str] = []

    def flush() -> None:
        if lines:
            content = "\n".join(lines)
            sections[current] = f"{sections[current]}\n{content}" if current in sections else content

    for line in resume_text.split("\n"):
        lower = line.strip().lower()
        found = None
        if len(lower.split()) <= MAX_HEADING_WORDS:
            found = next((name for markers, name in _SECTION_MARKERS if any(m in lower for m in markers)), None)
        if found:
            flush()
            current, lines = found, []
        else:
            lines.append(line)

    flush()
    return sections


def map_section_type(section_name: str) -> str:
    name = section_name.lower()
    for markers, section_type in _SECTION_MARKERS:
        if any(m in name for m in markers):
            return section_type
    return "projects"


def extract_candidate_name(resume_text: str) -> str:
    """First short letters-only line among the top five, else "Candidate"."""
    for line in resume_text.split("\n")[:5]:
        stripped = line.strip()
        if 2 < len(stripped) < 50 and re.fullmatch(r"[A-Za-z\s]+", stripped):
            return stripped
    return "Candidate"


# ── Optimization ─────────────────────────────────────────────────────────────


async def optimize_resume_ai(request: OptimizationRequest, executor: WorkflowExecutor) -> OptimizationResult:
    """
    Enhance the resume through RESUME_ENHANCEMENT (plus a cover letter for
    aggressive requests). Any failure of the enhancement step falls back to
    the local pipeline.
    """
    started = time.perf_counter()
    level: OptimizationLevel = request.optimization_level
    job_analysis = analyze_job_posting(request.job_description)
    extraction = await extract_keywords_with_ai(
        request.job_description, executor, industry_focus=request.target_role,
    )

    try:
        response = await executor.execute_workflow("RESUME_ENHANCEMENT", {
            "resumeText": request.resume_text,
            "targetKeywords": extraction.keywords[:MAX_TARGET_KEYWORDS],
            "jobDescription": request.job_description,
            "enhancementLevel": level,
        })
        if not response.success:
            raise WorkflowError(response.error or "Resume enhancement failed")
    except Exception as e:
        logger.warning(f"AI enhancement failed, falling back to local optimization: {e}")
        return optimize_resume(request)

    optimized = response.data.get("enhancedResume") or request.resume_text
    changes: list[str] = list(response.data.get("improvements") or [])

    cover_letter: Optional[str] = None
    if level == "aggressive":
        cover_letter = await _generate_cover_letter(request, executor, optimized, job_analysis.company, job_analysis.job_title)

    keyword_report = generate_keyword_report(request.job_description, optimized)
    initial = score_resume(request.resume_text, job_analysis.keywords)
    final = score_resume(optimized, job_analysis.keywords)

    section_advice = [
        await generate_optimization_suggestions(
            content, extraction.keywords, map_section_type(name), executor, job_context=request.job_description,
        )
        for name, content in extract_resume_sections(optimized).items()
        if content.strip()
    ]

    elapsed = int((time.perf_counter() - started) * 1000)
    logger.info(f"AI optimization done in {elapsed}ms: score {initial.score} -> {final.score}")

    return OptimizationResult(
        original_resume=request.resume_text,
        optimized_resume=optimized,
        improvements=ScoreImprovement(
            before_score=initial.score,
            after_score=final.score,
            improvement=final.score - initial.score,
            key_changes=changes,
        ),
        ats_analysis=final,
        job_analysis=job_analysis,
        tailoring_results=TailoringResult(
            tailored_resume=optimized,
            ats_score=final.score,
            keyword_matches=[
                KeywordMatch(
                    keyword=k.keyword,
                    in_resume=True,
                    frequency=1,
                    importance="high" if k.importance > 7 else "medium" if k.importance > 4 else "low",
                )
                for k in keyword_report.matching_keywords
            ],
            suggestions=[
                TailorSuggestion(
                    section="general",
                    original="",
                    suggested=change,
                    reason="AI-powered enhancement for better job matching",
                    impact=max(1, 8 - index),
                    kind="advisory",
                    applied=True,
                )
                for index, change in enumerate(changes)
            ],
            improvements=changes,
            original_score=initial.score,
        ),
        keyword_report=keyword_report,
        recommendations=_ai_recommendations(changes, section_advice),
        processing_time=elapsed,
        processing_method="ai",
        cover_letter=cover_letter,
    )


async def _generate_cover_letter(
    request: OptimizationRequest,
    executor: WorkflowExecutor,
    resume_text: str,
    company: str,
    role: str,
) -> Optional[str]:
    try:
        response = await executor.execute_workflow("COVER_LETTER_GENERATOR", {
            "resumeText": resume_text,
            "jobDescription": request.job_description,
            "companyName": request.company or company,
            "roleTitle": request.target_role or role,
            "personalInfo": {"name": extract_candidate_name(request.resume_text)},
        })
    except WorkflowError as e:
        logger.warning(f"Cover letter generation failed: {e}")
        return None

    if response.success and isinstance(response.data, dict):
        return response.data.get("coverLetter") or None
    return None


def _ai_recommendations(
    changes: list[str],
    section_advice: list[SectionOptimization],
) -> list[OptimizationRecommendation]:
    recommendations = [
        OptimizationRecommendation(
            category="content",
            priority="medium",
            description=change,
            impact=max(1, 8 - index),
            implementation=f"Update resume content: {change}",
        )
        for index, change in enumerate(changes)
    ]
    recommendations += [
        OptimizationRecommendation(
            category="structure",
            priority="high",
            description=f"{advice.section}: {suggestion}",
            impact=SECTION_SUGGESTION_IMPACT,
            implementation=f"Improve {advice.section} section: {suggestion}",
        )
        for advice in section_advice
        for suggestion in advice.suggestions
    ]
    return recommendations
