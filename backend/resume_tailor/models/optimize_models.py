from pydantic import Field
from typing import Literal, Optional

from resume_tailor.models.base import CamelModel
from resume_tailor.models.jd_models import JobAnalysisResult
from resume_tailor.models.keyword_models import KeywordReport
from resume_tailor.models.score_models import ATSScoreResult
from resume_tailor.models.tailor_models import TailoringResult

OptimizationLevel = Literal["basic", "standard", "aggressive"]


class OptimizationRequest(CamelModel):
    """Everything the optimizer needs for one resume/job pair."""

    resume_text: str
    job_description: str
    job_url: Optional[str] = None
    target_role: Optional[str] = None
    company: Optional[str] = None
    optimization_level: OptimizationLevel = "standard"
    preserve_formatting: bool = True
    use_ai: bool = Field(default=False, alias="useAI")


class ScoreImprovement(CamelModel):
    before_score: int
    after_score: int
    improvement: int
    key_changes: list[str]


class OptimizationRecommendation(CamelModel):
    category: Literal["keywords", "format", "content", "structure", "skills"]
    priority: Literal["high", "medium", "low"]
    description: str
    impact: int
    actionable: bool = True
    implementation: str


class OptimizationResult(CamelModel):
    """Full optimizer output, before/after included."""

    original_resume: str
    optimized_resume: str
    improvements: ScoreImprovement
    ats_analysis: ATSScoreResult
    job_analysis: JobAnalysisResult
    tailoring_results: TailoringResult
    keyword_report: KeywordReport
    recommendations: list[OptimizationRecommendation]
    processing_time: int  # ms
    processing_method: Literal["local", "ai"] = "local"
    cover_letter: Optional[str] = None


class QuickOptimization(CamelModel):
    optimized_resume: str
    score: int
    key_changes: list[str]


class BatchOptimizationEntry(CamelModel):
    job_index: int
    optimized_resume: str
    score: int
    match_percentage: float
    error: Optional[str] = None


class StrategyComparison(CamelModel):
    basic: OptimizationResult
    standard: OptimizationResult
    aggressive: OptimizationResult
    recommended_level: OptimizationLevel
    recommendation: str
