from pydantic import Field
from typing import Any, Optional

from resume_tailor.models.base import CamelModel
from resume_tailor.models.optimize_models import OptimizationLevel, OptimizationRecommendation
from resume_tailor.models.score_models import ATSScoreBreakdown, OptimizationPreview

# Request fields are optional so missing ones surface as the documented 400,
# not a framework validation error.


# ── Request Models ──────────────────────────────────────────────────────────


class OptimizeInput(CamelModel):
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    optimization_level: OptimizationLevel = "standard"
    target_role: Optional[str] = None
    company: Optional[str] = None
    use_ai: Optional[bool] = Field(default=None, alias="useAI")


class AnalyzeInput(CamelModel):
    resume_text: Optional[str] = None
    target_role: Optional[str] = None


class PreviewInput(CamelModel):
    resume_text: Optional[str] = None
    job_description: Optional[str] = None


# ── Response Models ─────────────────────────────────────────────────────────


class OptimizeData(CamelModel):
    optimized_resume: str
    ats_score: int
    improvement: int
    key_changes: list[str]
    processing_time: int
    recommendations: list[OptimizationRecommendation]


class OptimizeResponse(CamelModel):
    success: bool = True
    data: OptimizeData


class AnalyzeData(CamelModel):
    score: int
    breakdown: ATSScoreBreakdown
    recommendations: list[str]
    passes_ats: bool = Field(alias="passesATS")


class AnalyzeResponse(CamelModel):
    success: bool = True
    data: AnalyzeData


class PreviewResponse(CamelModel):
    success: bool = True
    data: OptimizationPreview


class ErrorResponse(CamelModel):
    error: str
    message: Optional[str] = None


def error_body(error: str, message: Optional[str] = None) -> dict[str, Any]:
    """JSON body for 400/500 responses ({"error"} or {"error", "message"})."""
    return ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
