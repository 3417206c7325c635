from typing import Literal, Optional

from resume_tailor.models.base import CamelModel

KeywordCategory = Literal["technical", "soft", "industry", "action", "certification"]


class KeywordImportance(CamelModel):
    """A job keyword with its synthetic weight (0-15)."""

    keyword: str
    importance: int
    category: KeywordCategory
    context: list[str] = []  # up to 3 source sentences


class KeywordReport(CamelModel):
    """Job-vs-resume keyword comparison."""

    job_keywords: list[KeywordImportance]
    resume_keywords: list[str]
    missing_keywords: list[KeywordImportance]
    matching_keywords: list[KeywordImportance]
    overall_match: float  # 0-100, importance weighted


class KeywordExtraction(CamelModel):
    """Keywords grouped for the AI-augmented path (or its local stand-in)."""

    keywords: list[str]
    technical_keywords: list[str]
    soft_skills: list[str]
    requirements: list[str]
    priorities: dict[str, float]
    processing_method: Literal["local", "ai", "hybrid"]
    processing_time: int  # ms


class AIInsights(CamelModel):
    semantic_matches: list[str] = []
    contextual_recommendations: list[str] = []
    industry_specific_keywords: list[str] = []


class EnhancedKeywordReport(KeywordReport):
    ai_insights: Optional[AIInsights] = None
    processing_method: Literal["local", "ai", "hybrid"] = "local"


class SectionOptimization(CamelModel):
    """Advice for one resume section."""

    section: str
    suggestions: list[str]
    optimized_content: Optional[str] = None
    keyword_density: float = 0.0
    readability_score: Optional[float] = None
    processing_method: Literal["local", "ai"] = "local"
