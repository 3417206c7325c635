"""
Keyword Analyzer — lexical keyword extraction and importance weighting.

Everything here is rule based and English only:
  • extract_keywords: stop-word filtered tokens + a fixed catalog of phrases
  • analyze_keyword_importance: static category weights + context boosts (0-15)
  • generate_keyword_report: job keywords vs resume keywords, importance weighted
"""

from __future__ import annotations

import logging
import re

from resume_tailor.config import SCORING_THRESHOLDS
from resume_tailor.models.keyword_models import (
    KeywordCategory,
    KeywordImportance,
    KeywordReport,
)
from resume_tailor.utils.text_cleanup import split_sentences

logger = logging.getLogger(__name__)

# ── Weights ──────────────────────────────────────────────────────────────────

KEYWORD_WEIGHTS: dict[str, dict[str, int]] = {
    "technical": {
        "javascript": 10, "python": 10, "react": 9, "node.js": 9, "aws": 9,
        "sql": 8, "docker": 8, "kubernetes": 8, "git": 7, "mongodb": 7,
        "typescript": 8, "next.js": 8, "postgresql": 7, "redis": 6,
        "graphql": 7, "rest api": 8, "microservices": 8, "devops": 8,
        "ci/cd": 7, "jenkins": 6, "terraform": 7, "linux": 6,
    },
    "soft": {
        "leadership": 8, "communication": 7, "teamwork": 6, "problem solving": 8,
        "analytical": 7, "creative": 6, "detail oriented": 6, "organized": 5,
        "collaborative": 6, "adaptable": 6, "innovative": 7, "strategic": 7,
    },
    "action": {
        "developed": 8, "implemented": 8, "managed": 7, "led": 8, "created": 7,
        "designed": 7, "optimized": 8, "improved": 7, "built": 6, "delivered": 6,
        "achieved": 7, "increased": 8, "reduced": 8, "streamlined": 7,
    },
    "industry": {
        "agile": 7, "scrum": 6, "kanban": 5, "jira": 5, "confluence": 4,
        "startup": 6, "enterprise": 6, "b2b": 5, "b2c": 5, "saas": 7,
        "fintech": 6, "healthcare": 6, "e-commerce": 6, "mobile": 6,
    },
    "certification": {
        "aws certified": 9, "google cloud": 8, "azure": 7, "pmp": 6,
        "scrum master": 6, "certified": 5, "professional": 4,
    },
}

# Category lookup order; anything unmatched is "soft"
_CATEGORY_ORDER: tuple[KeywordCategory, ...] = ("technical", "action", "certification", "industry")

DEFAULT_IMPORTANCE = 5
PARTIAL_MATCH_FACTOR = 0.8

TECHNICAL_PHRASES = [
    "machine learning", "artificial intelligence", "data science",
    "full stack", "front end", "back end", "dev ops", "cloud computing",
    "rest api", "graphql api", "micro services", "distributed systems",
    "ci cd", "test driven development", "agile development",
    "version control", "code review", "pair programming",
]

BUSINESS_PHRASES = [
    "project management", "product management", "business analysis",
    "stakeholder management", "cross functional", "team leadership",
    "process improvement", "cost reduction", "revenue growth",
    "customer satisfaction", "user experience", "market research",
]

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "from", "up", "about", "into", "through", "during", "before", "after",
    "above", "below", "between", "among", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these", "those",
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "all", "any", "both",
    "each", "few", "more", "most", "other", "some", "such", "no", "nor", "not",
    "only", "own", "same", "so", "than", "too", "very", "one", "also", "just",
    "now", "here", "there", "when", "where", "why", "how",
})

JOB_PHRASE_PATTERNS = [
    # Experience levels
    re.compile(r"(\d+\+?\s*years?\s*(?:of\s*)?experience)", re.I),
    re.compile(r"(senior|junior|mid-level|entry-level)", re.I),
    # Requirements
    re.compile(r"(bachelor'?s?\s*degree|master'?s?\s*degree|phd)", re.I),
    re.compile(r"(required|must\s*have|essential|mandatory)", re.I),
    re.compile(r"(preferred|nice\s*to\s*have|bonus|desired)", re.I),
    # Technical skills
    re.compile(r"(full\s*stack|front\s*end|back\s*end|dev\s*ops)", re.I),
    re.compile(r"(machine\s*learning|artificial\s*intelligence|data\s*science)", re.I),
    re.compile(r"(cloud\s*computing|distributed\s*systems|micro\s*services)", re.I),
    # Soft skills
    re.compile(r"(team\s*player|self\s*motivated|detail\s*oriented)", re.I),
    re.compile(r"(problem\s*solving|critical\s*thinking|communication\s*skills)", re.I),
    # Work arrangements
    re.compile(r"(remote|hybrid|on-site|flexible)", re.I),
    re.compile(r"(full\s*time|part\s*time|contract|freelance)", re.I),
]

_REQUIRED_MARKERS = ("required", "must", "essential")


# ── Extraction ───────────────────────────────────────────────────────────────


def extract_keywords(text: str) -> list[str]:
    """
    Extract candidate keywords from free text.

    Catalog phrases found in the text come first, then single tokens longer
    than two characters that are not stop words. Deduplicated, first-seen order.
    """
    if not text or not text.strip():
        return []

    clean = re.sub(r"[^\w\s.-]", " ", text.lower())
    clean = re.sub(r"\s+", " ", clean).strip()

    phrases = [p for p in TECHNICAL_PHRASES + BUSINESS_PHRASES if p in clean]
    words = [w for w in clean.split(" ") if len(w) > 2 and w not in STOP_WORDS]

    return list(dict.fromkeys(phrases + words))


def extract_phrases_from_job_posting(job_text: str) -> list[str]:
    """Find common job-posting phrases (experience, degrees, arrangements...)."""
    found: list[str] = []
    for pattern in JOB_PHRASE_PATTERNS:
        found.extend(m.group(0).lower().strip() for m in pattern.finditer(job_text))
    return list(dict.fromkeys(found))


# ── Importance ───────────────────────────────────────────────────────────────


def analyze_keyword_importance(keywords: list[str], context: str) -> list[KeywordImportance]:
    """Weight each keyword against the context text, most important first."""
    analysis = [
        KeywordImportance(
            keyword=keyword,
            category=categorize_keyword(keyword),
            importance=calculate_keyword_importance(keyword, context),
            context=extract_keyword_context(keyword, context),
        )
        for keyword in keywords
    ]
    analysis.sort(key=lambda k: k.importance, reverse=True)
    return analysis


def categorize_keyword(keyword: str) -> KeywordCategory:
    """First category whose weight table has an entry contained in the keyword."""
    lower = keyword.lower()
    for category in _CATEGORY_ORDER:
        if any(entry in lower for entry in KEYWORD_WEIGHTS[category]):
            return category
    return "soft"


def calculate_keyword_importance(keyword: str, context: str) -> int:
    """
    Static weight (exact, else 0.8x best partial, else 5) plus context boosts:
      +3  context mentions required / must / essential
      +2  a sentence mentions both the keyword and "years"
      +min(frequency - 1, 3) for repeated mentions
    Capped at 15.
    """
    lower = keyword.lower()
    weights = KEYWORD_WEIGHTS.get(categorize_keyword(keyword), {})

    score: float = DEFAULT_IMPORTANCE
    if lower in weights:
        score = weights[lower]
    else:
        for entry, weight in weights.items():
            if entry in lower or lower in entry:
                score = max(score, weight * PARTIAL_MATCH_FACTOR)

    context_lower = context.lower()

    if any(marker in context_lower for marker in _REQUIRED_MARKERS):
        score += 3

    if any("years" in s and lower in s for s in split_sentences(context_lower)):
        score += 2

    frequency = len(re.findall(re.escape(lower), context_lower)) if lower else 0
    if frequency > 1:
        score += min(frequency - 1, 3)

    return min(int(round(score)), SCORING_THRESHOLDS["max_importance"])


def extract_keyword_context(keyword: str, text: str) -> list[str]:
    """Up to three sentences of text that mention the keyword."""
    lower = keyword.lower()
    return [s.strip() for s in split_sentences(text) if lower in s.lower()][:3]


# ── Density & Placement ──────────────────────────────────────────────────────


def calculate_keyword_density(text: str, keyword: str) -> float:
    """Percentage of whitespace tokens that contain the keyword."""
    if not text or not keyword:
        return 0.0
    words = text.lower().split()
    if not words:
        return 0.0
    lower = keyword.lower()
    hits = sum(1 for w in words if lower in w)
    return hits / len(words) * 100


def suggest_keyword_placements(keyword: str, resume_text: str) -> list[str]:
    """Where in the resume a missing keyword would read naturally."""
    suggestions: list[str] = []
    blocks = [b.lower() for b in re.split(r"\n\s*\n", resume_text)]
    lower = keyword.lower()
    category = categorize_keyword(keyword)

    if category == "technical":
        skills_block = next((b for b in blocks if "skill" in b or "technical" in b), None)
        if skills_block is not None and lower not in skills_block:
            suggestions.append("Add to Skills/Technical Skills section")

    if category == "action":
        experience_block = next((b for b in blocks if "experience" in b or "work history" in b), None)
        if experience_block is not None and lower not in experience_block:
            suggestions.append("Incorporate into job descriptions in Experience section")

    if not suggestions:
        suggestions = [
            "Add to relevant bullet points in Experience section",
            "Include in Skills section if applicable",
            "Mention in Summary/Objective section",
        ]
    return suggestions


# ── Reports ──────────────────────────────────────────────────────────────────


def keywords_overlap(keyword_a: str, keyword_b: str) -> bool:
    """Case-insensitive containment in either direction."""
    a = keyword_a.lower()
    b = keyword_b.lower()
    return a in b or b in a


def generate_keyword_report(job_text: str, resume_text: str) -> KeywordReport:
    """Compare job keywords (weighted by the job text) against resume keywords."""
    job_keywords = extract_keywords(job_text)
    resume_keywords = extract_keywords(resume_text)
    analysis = analyze_keyword_importance(job_keywords, job_text)
    return build_keyword_report(analysis, resume_keywords)


def build_keyword_report(analysis: list[KeywordImportance], resume_keywords: list[str]) -> KeywordReport:
    matching: list[KeywordImportance] = []
    missing: list[KeywordImportance] = []
    for kw in analysis:
        if any(keywords_overlap(rk, kw.keyword) for rk in resume_keywords):
            matching.append(kw)
        else:
            missing.append(kw)

    total = sum(kw.importance for kw in analysis)
    matched = sum(kw.importance for kw in matching)
    overall = matched / total * 100 if total > 0 else 0.0

    return KeywordReport(
        job_keywords=analysis,
        resume_keywords=resume_keywords,
        missing_keywords=missing,
        matching_keywords=matching,
        overall_match=round(overall, 2),
    )


def generate_local_optimization_suggestions(
    content: str,
    target_keywords: list[str],
    section_type: str,
) -> list[str]:
    """Per-section advice computed without the workflow service."""
    suggestions: list[str] = []
    content_lower = content.lower()

    missing = [kw for kw in target_keywords if kw.lower() not in content_lower]
    if missing:
        suggestions.append(f"Add these keywords: {', '.join(missing[:3])}")

    if section_type == "experience":
        if "•" not in content and "-" not in content:
            suggestions.append("Use bullet points for better readability")
        if not re.search(r"\d", content):
            suggestions.append("Add quantifiable metrics and achievements")
    elif section_type == "skills":
        if len(content) < 100:
            suggestions.append("Expand skills section with more technical details")
    elif section_type == "summary":
        if len(content) < 150:
            suggestions.append("Expand summary to 150-200 words for better impact")

    return suggestions
