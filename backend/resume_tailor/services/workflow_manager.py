"""
Workflow Manager — the operations the HTTP API exposes.

Thin facade over the optimizer, scorer and enhancement path; it decides
between the AI-augmented and the local pipeline for each request.
"""

from __future__ import annotations

import logging
from typing import Optional

from resume_tailor.config import settings
from resume_tailor.models.optimize_models import OptimizationLevel, OptimizationRequest, OptimizationResult
from resume_tailor.models.score_models import ATSScoreResult, OptimizationPreview
from resume_tailor.services.ats_scorer import score_resume
from resume_tailor.services.enhancement_service import optimize_resume_ai
from resume_tailor.services.keyword_analyzer import extract_keywords
from resume_tailor.services.resume_optimizer import optimize_resume
from resume_tailor.services.workflow_executor import WorkflowExecutor

logger = logging.getLogger(__name__)

MAX_PREVIEW_KEYWORDS = 10


async def optimize_resume_for_job(
    resume_text: str,
    job_description: str,
    level: OptimizationLevel = "standard",
    use_ai: Optional[bool] = None,
    executor: Optional[WorkflowExecutor] = None,
    target_role: Optional[str] = None,
    company: Optional[str] = None,
) -> OptimizationResult:
    """Optimize through the workflow service when asked (default from settings), else locally."""
    if use_ai is None:
        use_ai = settings.ai_enhancement_enabled

    request = OptimizationRequest(
        resume_text=resume_text,
        job_description=job_description,
        optimization_level=level,
        target_role=target_role,
        company=company,
        use_ai=use_ai,
    )

    if use_ai and executor is not None:
        return await optimize_resume_ai(request, executor)
    return optimize_resume(request)


def analyze_resume(resume_text: str, target_role: Optional[str] = None) -> ATSScoreResult:
    """
    Score a resume on its own. With a target role, the role's keywords are the
    job keywords; without one there is nothing to match and keyword match is 100.
    """
    job_keywords = extract_keywords(target_role) if target_role else []
    result = score_resume(resume_text, job_keywords)
    logger.info(f"Analyzed resume ({len(resume_text)} chars, role={target_role or '-'}): score={result.score}")
    return result


def get_optimization_preview(resume_text: str, job_description: str) -> OptimizationPreview:
    """Project the standard-level result without returning the rewritten resume."""
    result = optimize_resume(OptimizationRequest(resume_text=resume_text, job_description=job_description))
    return OptimizationPreview(
        current_score=result.improvements.before_score,
        projected_score=result.improvements.after_score,
        key_changes=result.improvements.key_changes,
        missing_keywords=[kw.keyword for kw in result.keyword_report.missing_keywords[:MAX_PREVIEW_KEYWORDS]],
        estimated_impact=result.improvements.after_score - result.improvements.before_score,
    )
