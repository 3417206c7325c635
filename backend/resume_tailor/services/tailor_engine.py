"""
Tailoring Engine — rewrite a resume toward one job description.

Steps:
  1. Extract job keywords, score the original resume
  2. KeywordMatch per job keyword (presence, frequency, importance tier)
  3. Split the resume into labeled sections (exact substrings of the text)
  4. Suggestions: add missing high-tier keywords (15), strengthen sparse
     sections (10), density advisories (8 / -5)
  5. Apply rewrite suggestions by literal replacement, highest impact first
  6. Re-score
"""

from __future__ import annotations

import logging
import re
from typing import Literal, Optional

from resume_tailor.config import SCORING_THRESHOLDS
from resume_tailor.models.tailor_models import (
    KeywordMatch,
    ResumeSection,
    TailoringResult,
    TailorSuggestion,
)
from resume_tailor.services.ats_scorer import calculate_ats_score
from resume_tailor.services.keyword_analyzer import (
    calculate_keyword_density,
    extract_keywords,
    keywords_overlap,
    suggest_keyword_placements,
)

logger = logging.getLogger(__name__)

MISSING_KEYWORD_IMPACT = 15
STRENGTHEN_IMPACT = 10
DENSITY_HIGH_IMPACT = -5
DENSITY_LOW_IMPACT = 8

SECTION_HEADERS = [
    "summary", "objective", "experience", "work experience", "employment",
    "skills", "technical skills", "education", "projects", "achievements",
    "certifications", "awards",
]

HEADER_SECTION = "header"

HIGH_PRIORITY_PATTERNS = [
    "required", "must have", "essential", "critical", "mandatory",
    "python", "javascript", "react", "aws", "sql", "docker",
]

MEDIUM_PRIORITY_PATTERNS = [
    "preferred", "desired", "nice to have", "bonus",
    "git", "agile", "scrum", "testing",
]

TECHNICAL_PATTERNS = [
    "python", "javascript", "react", "node", "sql", "aws", "docker",
    "kubernetes", "git", "api", "database", "cloud", "devops",
]

ACTION_PATTERNS = [
    "developed", "implemented", "managed", "led", "created",
    "designed", "optimized", "improved", "collaborated",
]

_BULLET_MARKERS = ("•", "-")


# ── Public API ───────────────────────────────────────────────────────────────


def tailor_resume(
    resume_text: str,
    job_description: str,
    target_role: str = "",
    company: Optional[str] = None,
) -> TailoringResult:
    """Generate and apply keyword suggestions for one resume/job pair."""
    job_keywords = extract_keywords(job_description)
    original_score = calculate_ats_score(resume_text, job_keywords)
    resume_keywords = extract_keywords(resume_text)

    matches = analyze_keyword_matches(job_keywords, resume_keywords, resume_text)
    sections = parse_resume_into_sections(resume_text)
    suggestions = generate_tailoring_suggestions(sections, matches)

    tailored = apply_suggestions(resume_text, suggestions)
    new_score = calculate_ats_score(tailored, job_keywords)

    applied = sum(1 for s in suggestions if s.applied)
    logger.info(
        f"Tailored resume for role={target_role or '-'} company={company or '-'}: "
        f"{len(suggestions)} suggestions, {applied} applied, score {original_score} -> {new_score}"
    )

    return TailoringResult(
        tailored_resume=tailored,
        ats_score=new_score,
        keyword_matches=matches,
        suggestions=suggestions,
        improvements=generate_improvements(matches, suggestions),
        original_score=original_score,
    )


def apply_suggestions(text: str, suggestions: list[TailorSuggestion]) -> str:
    """
    Substitute each rewrite suggestion's `original` with its `suggested` text
    (first occurrence), in list order. Suggestions whose `original` is no longer
    present are skipped; advisory suggestions are never substituted.
    Marks applied suggestions in place.
    """
    result = text
    for suggestion in suggestions:
        if suggestion.kind != "rewrite":
            continue
        if suggestion.original and suggestion.original in result:
            result = result.replace(suggestion.original, suggestion.suggested, 1)
            suggestion.applied = True
        else:
            logger.debug(f"Skipped suggestion for {suggestion.section!r}: original text not found")
    return result


# ── Keyword matches ──────────────────────────────────────────────────────────


def analyze_keyword_matches(
    job_keywords: list[str],
    resume_keywords: list[str],
    resume_text: str,
) -> list[KeywordMatch]:
    return [
        KeywordMatch(
            keyword=keyword,
            in_resume=any(keywords_overlap(rk, keyword) for rk in resume_keywords),
            frequency=count_keyword_frequency(resume_text, keyword),
            importance=keyword_tier(keyword),
            suggested_placements=suggest_keyword_placements(keyword, resume_text),
        )
        for keyword in job_keywords
    ]


def count_keyword_frequency(text: str, keyword: str) -> int:
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword), text, re.I))


def keyword_tier(keyword: str) -> Literal["high", "medium", "low"]:
    lower = keyword.lower()
    if any(p in lower for p in HIGH_PRIORITY_PATTERNS):
        return "high"
    if any(p in lower for p in MEDIUM_PRIORITY_PATTERNS):
        return "medium"
    return "low"


def is_technical_keyword(keyword: str) -> bool:
    lower = keyword.lower()
    return any(p in lower for p in TECHNICAL_PATTERNS)


def is_action_keyword(keyword: str) -> bool:
    lower = keyword.lower()
    return any(p in lower for p in ACTION_PATTERNS)


# ── Sections ─────────────────────────────────────────────────────────────────


def parse_resume_into_sections(resume_text: str) -> list[ResumeSection]:
    """
    Split on short lines containing a section header word.

    Each section's content is its lines joined with "\\n", so it is always an
    exact substring of resume_text. Lines before the first header form the
    "header" section. Blank-only sections are dropped.
    """
    sections: list[ResumeSection] = []
    name = HEADER_SECTION
    start = 0
    lines: list[str] = []

    def flush() -> None:
        content = "\n".join(lines)
        if content.strip():
            sections.append(ResumeSection(name=name, content=content, start_index=start))

    for index, line in enumerate(resume_text.split("\n")):
        lower = line.lower().strip()
        header = next((h for h in SECTION_HEADERS if h in lower and len(line) < 50), None)
        if header:
            flush()
            name, start, lines = header, index, [line]
        else:
            lines.append(line)

    flush()
    return sections


def find_best_section(keyword: str, sections: list[ResumeSection]) -> Optional[ResumeSection]:
    """Skills for technical keywords, experience for action keywords, else first real section."""
    if not sections:
        return None

    if is_technical_keyword(keyword):
        preferred = next((s for s in sections if "skill" in s.name), None)
    elif is_action_keyword(keyword):
        preferred = next((s for s in sections if "experience" in s.name or "employment" in s.name), None)
    else:
        preferred = next((s for s in sections if s.name != HEADER_SECTION), None)

    return preferred or sections[0]


# ── Rewriting ────────────────────────────────────────────────────────────────


def incorporate_keyword(content: str, keyword: str, skip_first_line: bool = True) -> str:
    """
    Work the keyword into one line of a section.

    Targets the first bullet line or line mentioning "experience" that does not
    already contain the keyword; falls back to the first non-blank line.
    The header line of a real section is left alone.
    """
    lines = content.split("\n")
    first = 1 if skip_first_line else 0
    lower_keyword = keyword.lower()

    candidates = [
        i for i in range(first, len(lines))
        if lower_keyword not in lines[i].lower() and lines[i].strip()
    ]
    target = next(
        (i for i in candidates
         if lines[i].strip().startswith(_BULLET_MARKERS) or "experience" in lines[i]),
        candidates[0] if candidates else None,
    )
    if target is None:
        return content

    line = lines[target]
    indent = line[: len(line) - len(line.lstrip())]
    lines[target] = indent + enhance_line_with_keyword(line.strip(), keyword)
    return "\n".join(lines)


def enhance_line_with_keyword(line: str, keyword: str) -> str:
    if "experience" in line:
        return line.replace("experience", f"experience with {keyword}", 1)
    if line.startswith(_BULLET_MARKERS):
        return f"{line} utilizing {keyword}"
    return f"{line} ({keyword})"


def generate_tailoring_suggestions(
    sections: list[ResumeSection],
    matches: list[KeywordMatch],
) -> list[TailorSuggestion]:
    """
    Build suggestions, highest impact first.

    Rewrites of the same section are chained: each one's `original` is the
    section text after the rewrites generated before it, so applying them
    in order composes.
    """
    working = {id(s): s.content for s in sections}
    suggestions: list[TailorSuggestion] = []

    def rewrite(section: ResumeSection, new_content: str, reason: str, impact: int) -> None:
        current = working[id(section)]
        if new_content == current:
            return
        suggestions.append(TailorSuggestion(
            section=section.name,
            original=current,
            suggested=new_content,
            reason=reason,
            impact=impact,
        ))
        working[id(section)] = new_content

    # Missing high-tier keywords
    for km in matches:
        if km.in_resume or km.importance != "high":
            continue
        section = find_best_section(km.keyword, sections)
        if section is None:
            continue
        rewrite(
            section,
            incorporate_keyword(working[id(section)], km.keyword, section.name != HEADER_SECTION),
            f'Add high-priority keyword "{km.keyword}" to improve ATS matching',
            MISSING_KEYWORD_IMPACT,
        )

    # Sections with fewer than two job keywords
    relevant = [km for km in matches if not km.in_resume and km.importance != "low"][:2]
    for section in sections:
        if section.name == HEADER_SECTION or not relevant:
            continue
        lower = section.content.lower()
        if sum(1 for km in matches if km.keyword.lower() in lower) >= 2:
            continue
        enhanced = working[id(section)]
        for km in relevant:
            enhanced = incorporate_keyword(enhanced, km.keyword)
        rewrite(section, enhanced, f"Strengthen {section.name} section with relevant keywords", STRENGTHEN_IMPACT)

    suggestions.extend(keyword_density_advisories(sections, matches))

    suggestions.sort(key=lambda s: s.impact, reverse=True)
    return suggestions


def keyword_density_advisories(
    sections: list[ResumeSection],
    matches: list[KeywordMatch],
) -> list[TailorSuggestion]:
    """Flag keyword stuffing and under-used high-tier keywords (never applied)."""
    text = " ".join(s.content for s in sections)
    advisories: list[TailorSuggestion] = []

    for km in matches:
        if not km.in_resume or km.frequency <= 0:
            continue
        density = calculate_keyword_density(text, km.keyword)
        if density > SCORING_THRESHOLDS["density_high_pct"]:
            advisories.append(TailorSuggestion(
                section="overall",
                original=km.keyword,
                suggested=f'Reduce repetition of "{km.keyword}"',
                reason="Avoid keyword stuffing which can hurt ATS scoring",
                impact=DENSITY_HIGH_IMPACT,
                kind="advisory",
            ))
        elif density < SCORING_THRESHOLDS["density_low_pct"] and km.importance == "high":
            advisories.append(TailorSuggestion(
                section="overall",
                original=km.keyword,
                suggested=f'Increase usage of "{km.keyword}"',
                reason="Important keyword needs more presence in resume",
                impact=DENSITY_LOW_IMPACT,
                kind="advisory",
            ))

    return advisories


def generate_improvements(matches: list[KeywordMatch], suggestions: list[TailorSuggestion]) -> list[str]:
    improvements: list[str] = []

    missing = sum(1 for km in matches if not km.in_resume)
    if missing:
        improvements.append(f"Add {missing} missing keywords to improve job match")

    high_impact = sum(1 for s in suggestions if s.impact > 10)
    if high_impact:
        improvements.append(f"{high_impact} high-impact changes identified")

    strengthened = sum(1 for s in suggestions if s.reason.startswith("Strengthen"))
    if strengthened:
        improvements.append(f"Strengthen {strengthened} sections with relevant keywords")

    return improvements
