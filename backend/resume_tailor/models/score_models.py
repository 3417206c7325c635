from pydantic import Field

from resume_tailor.models.base import CamelModel


class ScoreDetails(CamelModel):
    """Evidence behind the ATS sub-scores."""

    total_keywords: int
    matched_keywords: int
    missing_critical_keywords: list[str] = []
    format_issues: list[str] = []
    content_issues: list[str] = []
    word_count: int = 0


class ATSScoreBreakdown(CamelModel):
    """Per-dimension ATS sub-scores, each 0-100."""

    keyword_match: int
    format_score: int
    content_score: int
    length_score: int
    structure_score: int
    details: ScoreDetails


class ATSScoreResult(CamelModel):
    """Heuristic ATS compatibility score for one resume."""

    score: int  # 0-100 weighted
    breakdown: ATSScoreBreakdown
    recommendations: list[str] = []  # at most 5
    passes_ats: bool = Field(alias="passesATS")


class OptimizationPreview(CamelModel):
    """Before/after projection without returning the rewritten resume."""

    current_score: int
    projected_score: int
    key_changes: list[str]
    missing_keywords: list[str]
    estimated_impact: int
