"""
Job Analyzer — heuristic extraction of structured fields from a job posting.

Pipeline:
  1. Clean text (keep line breaks, drop unusual characters)
  2. Title / company / location via ordered matcher strategies
  3. Requirement sections → bulleted JobRequirement entries
  4. Catalog skills with importance, years and proficiency
  5. Experience, salary, job type, benefits, frequency-ranked keywords
  6. 0-100 analysis score for how complete the posting is

Best effort throughout: a field that can't be found gets its sentinel value,
analyze_job_posting never raises for string input.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Callable, Optional

from resume_tailor.config import SCORING_THRESHOLDS
from resume_tailor.models.jd_models import (
    ExperienceRequirement,
    JobAnalysisResult,
    JobRequirement,
    JobSkill,
    ProficiencyLevel,
    RequirementCategory,
    RequirementPriority,
    SalaryRange,
    SeniorityLevel,
)
from resume_tailor.utils.text_cleanup import clean_posting_text, split_sentences, strip_bullet_prefix

logger = logging.getLogger(__name__)

TITLE_NOT_FOUND = "Position Title Not Found"
COMPANY_NOT_FOUND = "Company Not Specified"
LOCATION_NOT_FOUND = "Location Not Specified"

Matcher = Callable[[str], Optional[str]]


def _regex_matcher(pattern: str, flags: int = 0) -> Matcher:
    """Strategy returning the first capture group of pattern, if any."""
    compiled = re.compile(pattern, flags)

    def match(text: str) -> Optional[str]:
        m = compiled.search(text)
        if m and m.group(1) and m.group(1).strip():
            return m.group(1).strip()
        return None

    return match


def _first_match(strategies: list[Matcher], text: str, default: str) -> str:
    for strategy in strategies:
        found = strategy(text)
        if found:
            return found
    return default


# ── Catalogs ─────────────────────────────────────────────────────────────────

COMMON_TITLES = [
    "software engineer", "developer", "programmer", "architect",
    "manager", "director", "analyst", "consultant", "specialist",
    "coordinator", "administrator", "technician", "designer",
]

REQUIREMENT_HEADERS = [
    "requirements", "qualifications", "must have", "required",
    "preferred", "nice to have", "ideal candidate", "you should have",
]

SECTION_TERMINATORS = ["responsibilities", "about us", "benefits"]

TECHNICAL_SKILLS = [
    "python", "javascript", "java", "c++", "react", "angular", "vue",
    "node.js", "django", "flask", "spring", "sql", "mongodb", "postgresql",
    "aws", "azure", "google cloud", "docker", "kubernetes", "git",
    "jenkins", "terraform", "ansible", "redis", "elasticsearch",
]

RELEVANT_FIELDS = [
    "software development", "web development", "mobile development",
    "data science", "machine learning", "artificial intelligence",
    "cybersecurity", "devops", "cloud computing", "database administration",
    "product management", "project management", "marketing", "sales",
]

JOB_TYPES = ["full-time", "part-time", "contract", "temporary", "internship", "freelance"]

BENEFITS = [
    "health insurance", "dental insurance", "vision insurance",
    "retirement plan", "401k", "pto", "paid time off", "vacation",
    "remote work", "flexible hours", "stock options", "equity",
    "professional development", "training", "conference", "learning budget",
]

KEYWORD_STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these", "those",
})

MAX_KEYWORDS = 50

_TITLE_STRATEGIES: list[Matcher] = [
    _regex_matcher(r"job title[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"position[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"role[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"^([^\n]{10,60})\s*$", re.M),  # first line of reasonable length
]

_COMPANY_STRATEGIES: list[Matcher] = [
    _regex_matcher(r"company[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"employer[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"organization[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"\bat\s+([A-Z][a-zA-Z &]{2,30})\s"),
    _regex_matcher(r"\b(?i:join)\s+([A-Z][a-zA-Z &]{2,30})\s"),
]

_LOCATION_STRATEGIES: list[Matcher] = [
    _regex_matcher(r"location[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"based in[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"office[:\s]+([^\n]+)", re.I),
    _regex_matcher(r"(remote|hybrid|on-site)", re.I),
    _regex_matcher(r"([A-Z][a-z]+,\s*[A-Z]{2})\b"),    # City, ST
    _regex_matcher(r"([A-Z][a-z]+,\s*[A-Z][a-z]+)"),   # City, Country
]

# (pattern, multiplier), tried in order
_SALARY_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"\$(\d{1,3}(?:,\d{3})*)\s*-\s*\$(\d{1,3}(?:,\d{3})*)\s*(?:per year|annually|yearly)", re.I), 1),
    (re.compile(r"\$(\d{1,3}(?:,\d{3})*)\s*k?\s*-\s*\$(\d{1,3}(?:,\d{3})*)\s*k", re.I), 1000),
    (re.compile(r"(\d{1,3})\s*k\s*-\s*(\d{1,3})\s*k", re.I), 1000),
]


# ── Public API ───────────────────────────────────────────────────────────────


def analyze_job_posting(job_text: str) -> JobAnalysisResult:
    """Extract every structured field from raw job posting text."""
    text = clean_posting_text(job_text or "")

    result = JobAnalysisResult(
        job_title=extract_job_title(text),
        company=extract_company(text),
        location=extract_location(text),
        requirements=extract_requirements(text),
        skills=extract_skills(text),
        experience=extract_experience_requirements(text),
        keywords=extract_job_keywords(text),
        salary=extract_salary_range(text),
        job_type=extract_job_type(text),
        benefits=extract_benefits(text),
        description=text,
        analysis_score=calculate_analysis_score(text),
    )
    logger.info(
        f"Analyzed job posting: title={result.job_title!r} company={result.company!r} "
        f"requirements={len(result.requirements)} skills={len(result.skills)} score={result.analysis_score}"
    )
    return result


def extract_job_title(text: str) -> str:
    title = _first_match(_TITLE_STRATEGIES, text, "")
    if title:
        return title

    lower = text.lower()
    for common in COMMON_TITLES:
        if common in lower:
            m = re.search(rf"([^\n]*{re.escape(common)}[^\n]*)", text, re.I)
            if m:
                return m.group(1).strip()

    return TITLE_NOT_FOUND


def extract_company(text: str) -> str:
    return _first_match(_COMPANY_STRATEGIES, text, COMPANY_NOT_FOUND)


def extract_location(text: str) -> str:
    return _first_match(_LOCATION_STRATEGIES, text, LOCATION_NOT_FOUND)


# ── Requirements ─────────────────────────────────────────────────────────────


def extract_requirements(text: str) -> list[JobRequirement]:
    requirements: list[JobRequirement] = []
    for header, body in find_requirement_sections(text):
        requirements.extend(parse_requirements(header, body))
    return requirements


def find_requirement_sections(text: str) -> list[tuple[str, list[str]]]:
    """
    Scan for requirement-style header lines and collect the lines under each
    until the next header or a terminating section (responsibilities, ...).
    """
    sections: list[tuple[str, list[str]]] = []
    header: Optional[str] = None
    body: list[str] = []

    for line in text.split("\n"):
        lower = line.lower().strip()
        is_header = len(line) < 100 and any(h in lower for h in REQUIREMENT_HEADERS)

        if is_header:
            if header is not None:
                sections.append((header, body))
            header, body = line, []
        elif header is not None:
            if any(t in lower for t in SECTION_TERMINATORS):
                sections.append((header, body))
                header, body = None, []
            else:
                body.append(line)

    if header is not None:
        sections.append((header, body))
    return sections


def requirement_priority(header: str) -> RequirementPriority:
    lower = header.lower()
    if "bonus" in lower or "plus" in lower:
        return "nice-to-have"
    if "preferred" in lower or "nice to have" in lower:
        return "preferred"
    return "required"


def parse_requirements(header: str, lines: list[str]) -> list[JobRequirement]:
    """Bulleted or numbered lines become requirements tagged with the header's priority."""
    priority = requirement_priority(header)
    requirements: list[JobRequirement] = []

    for line in lines:
        stripped = line.strip()
        if len(stripped) < 10 or not re.match(r"^[•\-\*\d]", stripped):
            continue
        requirement = strip_bullet_prefix(stripped).strip()
        if len(requirement) > 5:
            requirements.append(JobRequirement(
                requirement=requirement,
                priority=priority,
                category=categorize_requirement(requirement),
            ))

    return requirements


def categorize_requirement(requirement: str) -> RequirementCategory:
    lower = requirement.lower()
    rules: list[tuple[RequirementCategory, tuple[str, ...]]] = [
        ("technical", ("programming", "software", "coding", "development",
                       "python", "javascript", "database", "api")),
        ("education", ("degree", "bachelor", "master", "phd", "education", "university")),
        ("experience", ("years", "experience", "background", "worked")),
        ("certification", ("certified", "certification", "license", "aws",
                           "google cloud", "azure")),
    ]
    for category, markers in rules:
        if any(m in lower for m in markers):
            return category
    return "soft-skill"


# ── Skills ───────────────────────────────────────────────────────────────────


def _skill_pattern(skill: str) -> re.Pattern[str]:
    # \b fails next to "+" and ".", so use word-character lookarounds
    return re.compile(rf"(?<!\w){re.escape(skill)}(?!\w)", re.I)


def extract_skills(text: str) -> list[JobSkill]:
    skills: list[JobSkill] = []
    for skill in TECHNICAL_SKILLS:
        if _skill_pattern(skill).search(text):
            skills.append(JobSkill(
                skill=skill,
                importance=calculate_skill_importance(skill, text),
                years_required=extract_years_for_skill(skill, text),
                proficiency_level=determine_proficiency_level(skill, text),
            ))
    skills.sort(key=lambda s: s.importance, reverse=True)
    return skills


def skill_context(skill: str, text: str) -> str:
    """Lower-cased first sentence mentioning the skill ("" if none)."""
    lower = skill.lower()
    for sentence in split_sentences(text):
        if lower in sentence.lower():
            return sentence.lower()
    return ""


def calculate_skill_importance(skill: str, text: str) -> int:
    importance = 5
    context = skill_context(skill, text)

    if "required" in context or "must" in context:
        importance += 5
    if "preferred" in context or "desired" in context:
        importance += 3
    if "years" in context:
        importance += 2

    frequency = len(re.findall(re.escape(skill.lower()), text.lower()))
    importance += max(0, min(frequency - 1, 3))

    return min(importance, SCORING_THRESHOLDS["max_importance"])


def extract_years_for_skill(skill: str, text: str) -> Optional[int]:
    m = re.search(r"(\d+)\+?\s*years?", skill_context(skill, text), re.I)
    return int(m.group(1)) if m else None


def determine_proficiency_level(skill: str, text: str) -> Optional[ProficiencyLevel]:
    context = skill_context(skill, text)
    if "expert" in context or "advanced" in context:
        return "expert"
    if "senior" in context or "lead" in context:
        return "advanced"
    if "intermediate" in context or "mid" in context:
        return "intermediate"
    if "junior" in context or "entry" in context:
        return "beginner"
    return None


# ── Experience / Salary / Type / Benefits ───────────────────────────────────


def extract_experience_requirements(text: str) -> ExperienceRequirement:
    m = re.search(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", text, re.I)
    lower = text.lower()
    return ExperienceRequirement(
        minimum_years=int(m.group(1)) if m else 0,
        relevant_fields=[f for f in RELEVANT_FIELDS if f in lower],
        seniority_level=determine_seniority_level(text),
    )


def determine_seniority_level(text: str) -> SeniorityLevel:
    lower = text.lower()
    if "senior" in lower or "sr." in lower:
        return "senior"
    if "lead" in lower or "principal" in lower:
        return "lead"
    if "director" in lower or "vp" in lower or "executive" in lower:
        return "executive"
    if "junior" in lower or "entry" in lower or "graduate" in lower:
        return "entry"
    return "mid"


def extract_salary_range(text: str) -> Optional[SalaryRange]:
    for pattern, multiplier in _SALARY_PATTERNS:
        m = pattern.search(text)
        if m:
            low = int(m.group(1).replace(",", "")) * multiplier
            high = int(m.group(2).replace(",", "")) * multiplier
            return SalaryRange(min=low, max=high, currency="USD", period="yearly")
    return None


def extract_job_type(text: str) -> str:
    lower = text.lower()
    for job_type in JOB_TYPES:
        if job_type in lower:
            return job_type
    return "full-time"


def extract_benefits(text: str) -> list[str]:
    lower = text.lower()
    return [b for b in BENEFITS if b in lower]


def extract_job_keywords(text: str) -> list[str]:
    """Up to 50 non-stop-word tokens, most frequent first (ties keep text order)."""
    words = [
        w for w in re.sub(r"[^\w\s]", " ", text.lower()).split()
        if len(w) > 2 and w not in KEYWORD_STOP_WORDS
    ]
    counts = Counter(words)
    ranked = sorted(counts, key=lambda w: counts[w], reverse=True)
    return ranked[:MAX_KEYWORDS]


def calculate_analysis_score(text: str) -> int:
    """How complete the posting is: detail (30) + structure (30) + richness (40)."""
    score = 0
    lower = text.lower()

    word_count = len(text.split())
    for threshold in (100, 300, 500):
        if word_count > threshold:
            score += 10

    for marker in ("requirement", "responsibilit", "qualification"):
        if marker in lower:
            score += 10

    richness = [
        re.search(r"python|javascript|sql|aws|react", text, re.I),
        re.search(r"\d+\s*years?", text),
        re.search(r"degree|bachelor|master", text, re.I),
        re.search(r"benefit|insurance|401k|pto", text, re.I),
    ]
    score += 10 * sum(1 for hit in richness if hit)

    return min(score, 100)
