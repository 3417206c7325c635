"""
Text cleanup utilities for pasted resume and job posting text.
"""

from __future__ import annotations

import re
import unicodedata

# Characters kept by clean_posting_text besides word characters and whitespace
_POSTING_ALLOWED = r"\w\s.,!?()\-$:/&+%#•*'"


# Typographic characters pasted from word processors and web pages
_PASTE_ARTIFACTS = str.maketrans({
    "\u2018": "'", "\u2019": "'",
    "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-",
    "\u2026": "...",
    "\u00a0": " ",
    "\u200b": None, "\ufeff": None,
})


def normalize_text(text: str) -> str:
    """NFKC-normalize pasted text, flatten typographic punctuation, trim every line."""
    text = unicodedata.normalize("NFKC", text).translate(_PASTE_ARTIFACTS)
    text = re.sub(r"[ \t]+", " ", text)
    text = "\n".join(line.strip() for line in text.splitlines())
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def clean_posting_text(text: str) -> str:
    """
    Normalize a job posting for regex extraction.

    Line breaks survive (section detection is line based); characters outside
    a small punctuation whitelist become spaces.
    """
    text = normalize_text(text)
    text = re.sub(rf"[^{_POSTING_ALLOWED}]", " ", text)
    text = re.sub(r"[ \t]+", " ", text)
    return "\n".join(line.strip() for line in text.splitlines()).strip()


def strip_bullet_prefix(text: str) -> str:
    """Remove a bullet marker (•, -, *, ●, ○, ▪) or "1." / "1)" numbering from the start of text."""
    return re.sub(r"^[\s]*(?:[•\-\*●○▪►▸‣⁃]+|\d+[.)])\s*", "", text)


def count_words(text: str) -> int:
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """Split on runs of sentence punctuation, the way keyword context is gathered."""
    return re.split(r"[.!?]+", text)
