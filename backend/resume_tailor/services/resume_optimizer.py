"""
Resume Optimizer — the local optimization pipeline.

  job analysis → initial ATS score → keyword report → tailoring
  → optimization-level policy → final ATS score → recommendations

Optimization levels decide which tailoring suggestions reach the text:
  • basic       impact strictly between 12 and 20
  • standard    impact above 8
  • aggressive  every rewrite, then weak → strong verb substitutions
"""

from __future__ import annotations

import logging
import re
import time

from resume_tailor.models.keyword_models import KeywordReport
from resume_tailor.models.optimize_models import (
    BatchOptimizationEntry,
    OptimizationLevel,
    OptimizationRecommendation,
    OptimizationRequest,
    OptimizationResult,
    QuickOptimization,
    ScoreImprovement,
    StrategyComparison,
)
from resume_tailor.models.score_models import ATSScoreResult
from resume_tailor.models.tailor_models import TailoringResult, TailorSuggestion
from resume_tailor.services.ats_scorer import score_resume
from resume_tailor.services.job_analyzer import analyze_job_posting
from resume_tailor.services.keyword_analyzer import generate_keyword_report
from resume_tailor.services.tailor_engine import apply_suggestions, tailor_resume

logger = logging.getLogger(__name__)

STRONGER_VERBS = {
    "worked on": "developed",
    "responsible for": "managed",
    "helped with": "contributed to",
    "involved in": "collaborated on",
    "used": "utilized",
    "made": "created",
}

MAX_KEY_CHANGES = 5


# ── Pipeline ─────────────────────────────────────────────────────────────────


def optimize_resume(request: OptimizationRequest) -> OptimizationResult:
    """Run the full local pipeline for one resume/job pair."""
    started = time.perf_counter()
    level = request.optimization_level

    logger.info(f"Optimizing resume ({len(request.resume_text)} chars) at level={level}")

    job_analysis = analyze_job_posting(request.job_description)
    job_keywords = job_analysis.keywords

    initial = score_resume(request.resume_text, job_keywords)
    keyword_report = generate_keyword_report(request.job_description, request.resume_text)

    tailoring = tailor_resume(
        request.resume_text,
        request.job_description,
        target_role=request.target_role or job_analysis.job_title,
        company=request.company or job_analysis.company,
    )

    applied = select_suggestions(tailoring.suggestions, level)
    optimized = apply_optimization_level(request.resume_text, level, applied)
    final = score_resume(optimized, job_keywords)

    recommendations = generate_recommendations(final, tailoring, keyword_report, level)
    elapsed = int((time.perf_counter() - started) * 1000)

    logger.info(
        f"Optimization done in {elapsed}ms: score {initial.score} -> {final.score}, "
        f"{sum(1 for s in applied if s.applied)}/{len(applied)} suggestions applied"
    )

    return OptimizationResult(
        original_resume=request.resume_text,
        optimized_resume=optimized,
        improvements=ScoreImprovement(
            before_score=initial.score,
            after_score=final.score,
            improvement=final.score - initial.score,
            key_changes=extract_key_changes(applied),
        ),
        ats_analysis=final,
        job_analysis=job_analysis,
        tailoring_results=tailoring,
        keyword_report=keyword_report,
        recommendations=recommendations,
        processing_time=elapsed,
    )


# ── Optimization levels ─────────────────────────────────────────────────────


def select_suggestions(suggestions: list[TailorSuggestion], level: OptimizationLevel) -> list[TailorSuggestion]:
    """Fresh copies of the rewrite suggestions the level allows, in impact order."""
    if level == "basic":
        keep = [s for s in suggestions if 12 < s.impact < 20]
    elif level == "standard":
        keep = [s for s in suggestions if s.impact > 8]
    else:
        keep = list(suggestions)
    return [s.model_copy(update={"applied": False}) for s in keep if s.kind == "rewrite"]


def apply_optimization_level(
    resume_text: str,
    level: OptimizationLevel,
    suggestions: list[TailorSuggestion],
) -> str:
    optimized = apply_suggestions(resume_text, suggestions)
    if level == "aggressive":
        optimized = strengthen_verbs(optimized)
    return optimized


def strengthen_verbs(text: str) -> str:
    """Replace weak phrasing with stronger verbs (whole words, case-insensitive, leading capital kept)."""
    for weak, strong in STRONGER_VERBS.items():
        text = re.sub(rf"\b{re.escape(weak)}\b", lambda m, s=strong: _match_capital(m.group(0), s), text, flags=re.I)
    return text


def _match_capital(found: str, replacement: str) -> str:
    if found[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def extract_key_changes(applied: list[TailorSuggestion]) -> list[str]:
    return [s.reason for s in applied if s.applied and s.impact > 10][:MAX_KEY_CHANGES]


# ── Recommendations ──────────────────────────────────────────────────────────


def generate_recommendations(
    score: ATSScoreResult,
    tailoring: TailoringResult,
    keyword_report: KeywordReport,
    level: OptimizationLevel,
) -> list[OptimizationRecommendation]:
    aggressive = level == "aggressive"
    breakdown = score.breakdown
    recommendations: list[OptimizationRecommendation] = []

    if keyword_report.missing_keywords:
        top = [kw.keyword for kw in keyword_report.missing_keywords[: 8 if aggressive else 5]]
        recommendations.append(OptimizationRecommendation(
            category="keywords",
            priority="high",
            description=f"Add these important keywords: {', '.join(top)}",
            impact=15,
            implementation="Naturally incorporate these keywords into your experience bullets and skills section",
        ))

    if score.score < 80:
        if breakdown.format_score < 80:
            recommendations.append(OptimizationRecommendation(
                category="format",
                priority="high",
                description="Improve ATS compatibility formatting",
                impact=12,
                implementation="Use standard section headers, consistent formatting, and avoid complex layouts",
            ))
        if breakdown.content_score < 80:
            recommendations.append(OptimizationRecommendation(
                category="content",
                priority="medium",
                description="Strengthen content with quantifiable achievements",
                impact=10,
                implementation="Add numbers, percentages, and metrics to demonstrate impact",
            ))

    if any(not km.in_resume and km.importance == "high" for km in tailoring.keyword_matches):
        recommendations.append(OptimizationRecommendation(
            category="skills",
            priority="high",
            description="Bridge critical skills gaps identified in job requirements",
            impact=18,
            implementation="Add missing technical skills to your skills section and provide examples in experience",
        ))

    if breakdown.structure_score < 85:
        recommendations.append(OptimizationRecommendation(
            category="structure",
            priority="medium",
            description="Optimize resume structure and section organization",
            impact=8,
            implementation="Reorganize sections in logical order: Summary, Experience, Skills, Education",
        ))

    if aggressive:
        recommendations.append(OptimizationRecommendation(
            category="content",
            priority="medium",
            description="Consider creating role-specific resume versions",
            impact=12,
            implementation="Create targeted versions emphasizing different skills based on job requirements",
        ))

    recommendations.sort(key=lambda r: r.impact, reverse=True)
    return recommendations[: 8 if aggressive else 6]


# ── Convenience entry points ────────────────────────────────────────────────


def quick_optimize(resume_text: str, job_description: str) -> QuickOptimization:
    result = optimize_resume(OptimizationRequest(resume_text=resume_text, job_description=job_description))
    return QuickOptimization(
        optimized_resume=result.optimized_resume,
        score=result.improvements.after_score,
        key_changes=result.improvements.key_changes,
    )


def batch_optimize(resume_text: str, job_descriptions: list[str]) -> list[BatchOptimizationEntry]:
    """Optimize one resume for several postings; a failing posting degrades only its own entry."""
    entries: list[BatchOptimizationEntry] = []
    for index, job_description in enumerate(job_descriptions):
        try:
            quick = quick_optimize(resume_text, job_description)
            report = generate_keyword_report(job_description, resume_text)
            entries.append(BatchOptimizationEntry(
                job_index=index,
                optimized_resume=quick.optimized_resume,
                score=quick.score,
                match_percentage=report.overall_match,
            ))
        except Exception as e:
            logger.error(f"Batch optimization failed for job {index}: {e}")
            entries.append(BatchOptimizationEntry(
                job_index=index,
                optimized_resume=resume_text,
                score=0,
                match_percentage=0.0,
                error=str(e),
            ))
    return entries


def compare_optimization_strategies(resume_text: str, job_description: str) -> StrategyComparison:
    """Run all three levels and recommend one by improvement versus risk."""
    results = {
        level: optimize_resume(OptimizationRequest(
            resume_text=resume_text,
            job_description=job_description,
            optimization_level=level,
        ))
        for level in ("basic", "standard", "aggressive")
    }

    basic = results["basic"].improvements.improvement
    standard = results["standard"].improvements.improvement
    aggressive = results["aggressive"].improvements.improvement

    recommended: OptimizationLevel = "standard"
    if aggressive > standard + 10:
        recommended = "aggressive"
    elif basic >= standard - 5:
        recommended = "basic"

    return StrategyComparison(
        basic=results["basic"],
        standard=results["standard"],
        aggressive=results["aggressive"],
        recommended_level=recommended,
        recommendation=f"Recommended strategy: {recommended} optimization",
    )
