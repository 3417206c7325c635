"""
Keyword synonym map — match job keywords against resume keywords via aliases.

Loads data/keyword_synonyms.json (canonical → [aliases]).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_SYNONYM_FILE = Path(__file__).resolve().parents[1] / "data" / "keyword_synonyms.json"

# Built on first call, cached forever after
_canonical_to_aliases: dict[str, list[str]] | None = None


def _load() -> None:
    """Load the synonym file and build the lookup table."""
    global _canonical_to_aliases

    _canonical_to_aliases = {}

    try:
        raw = json.loads(_SYNONYM_FILE.read_text())
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load keyword synonyms from {_SYNONYM_FILE}: {e}")
        return

    for canonical, aliases in raw.items():
        if canonical.startswith("_"):
            continue  # skip _comment
        _canonical_to_aliases[canonical.lower().strip()] = [a.lower().strip() for a in aliases]


def _ensure_loaded() -> None:
    if _canonical_to_aliases is None:
        _load()


def are_synonyms(keyword_a: str, keyword_b: str) -> bool:
    """
    True when one keyword is a canonical term and the other one of its aliases.

    Two aliases of the same canonical term are not synonyms of each other
    ("db" and "sql" both alias "database" but are different skills).
    """
    _ensure_loaded()
    assert _canonical_to_aliases is not None

    a = keyword_a.lower().strip()
    b = keyword_b.lower().strip()
    if a in _canonical_to_aliases and b in _canonical_to_aliases[a]:
        return True
    if b in _canonical_to_aliases and a in _canonical_to_aliases[b]:
        return True
    return False

