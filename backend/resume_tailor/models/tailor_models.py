from typing import Literal

from resume_tailor.models.base import CamelModel


class KeywordMatch(CamelModel):
    """How one job keyword is represented in the resume."""

    keyword: str
    in_resume: bool
    frequency: int
    importance: Literal["high", "medium", "low"]
    suggested_placements: list[str] = []


class TailorSuggestion(CamelModel):
    """
    A proposed change to the resume.

    "rewrite" suggestions replace `original` with `suggested` verbatim;
    "advisory" ones (keyword density) are reported but never substituted.
    """

    section: str
    original: str
    suggested: str
    reason: str
    impact: int
    kind: Literal["rewrite", "advisory"] = "rewrite"
    applied: bool = False


class ResumeSection(CamelModel):
    """A labeled slice of the resume; `content` is an exact substring of it."""

    name: str
    content: str
    start_index: int  # line number of the section's first line


class TailoringResult(CamelModel):
    """Complete output of the tailoring engine."""

    tailored_resume: str
    ats_score: int
    keyword_matches: list[KeywordMatch]
    suggestions: list[TailorSuggestion]
    improvements: list[str]
    original_score: int
