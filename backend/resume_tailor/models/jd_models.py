from pydantic import ConfigDict
from typing import Literal, Optional

from resume_tailor.models.base import CamelModel

RequirementPriority = Literal["required", "preferred", "nice-to-have"]
RequirementCategory = Literal["technical", "education", "experience", "soft-skill", "certification"]
ProficiencyLevel = Literal["beginner", "intermediate", "advanced", "expert"]
SeniorityLevel = Literal["entry", "mid", "senior", "lead", "executive"]


class JobRequirement(CamelModel):
    """One bulleted requirement line from a requirements section."""

    model_config = ConfigDict(frozen=True)

    requirement: str
    priority: RequirementPriority
    category: RequirementCategory


class JobSkill(CamelModel):
    """A catalog skill found in the posting."""

    model_config = ConfigDict(frozen=True)

    skill: str
    importance: int  # 0-15
    years_required: Optional[int] = None
    proficiency_level: Optional[ProficiencyLevel] = None


class ExperienceRequirement(CamelModel):
    model_config = ConfigDict(frozen=True)

    minimum_years: int = 0
    relevant_fields: list[str] = []
    seniority_level: SeniorityLevel = "mid"


class SalaryRange(CamelModel):
    model_config = ConfigDict(frozen=True)

    min: Optional[int] = None
    max: Optional[int] = None
    currency: str = "USD"
    period: Literal["hourly", "monthly", "yearly"] = "yearly"


class JobAnalysisResult(CamelModel):
    """Structured output from heuristic job posting analysis."""

    model_config = ConfigDict(frozen=True)

    job_title: str
    company: str
    location: str
    requirements: list[JobRequirement]
    skills: list[JobSkill]
    experience: ExperienceRequirement
    keywords: list[str]  # up to 50, most frequent first
    salary: Optional[SalaryRange] = None
    job_type: str
    benefits: list[str]
    description: str
    analysis_score: int  # 0-100
