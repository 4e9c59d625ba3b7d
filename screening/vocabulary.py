"""
Term matching helpers shared by the extractors and the scoring engine.

Skill and certification identity is the exact name compared case-insensitively.
Matching in free text is whole-token: a term must not be glued to other word
characters on either side, so "Java" does not match inside "JavaScript".
"""

import re
from functools import lru_cache
from typing import Iterable, List, Optional

from .config import SKILL_NORMALIZATIONS


def term_key(term: str) -> str:
    """Identity key for a skill/certification name."""
    return re.sub(r"\s+", " ", term.strip()).lower()


def normalize_skill(skill: str) -> str:
    """Normalize skill name using predefined mappings."""
    skill_key = term_key(skill)
    return SKILL_NORMALIZATIONS.get(skill_key, skill.strip())


def dedupe_terms(terms: Iterable[str]) -> List[str]:
    """Strip, drop empties and remove case-insensitive duplicates, keeping first spelling."""
    seen = set()
    result = []
    for term in terms:
        if not isinstance(term, str):
            continue
        cleaned = re.sub(r"\s+", " ", term.strip())
        if not cleaned:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result


@lru_cache(maxsize=1024)
def _token_pattern(term: str) -> "re.Pattern[str]":
    parts = [re.escape(part) for part in term.split()]
    body = r"\s+".join(parts)
    return re.compile(r"(?<!\w)" + body + r"(?!\w)", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    """Case-insensitive whole-token search for ``term`` in ``text``."""
    cleaned = term.strip()
    if not text or not cleaned:
        return False
    return _token_pattern(cleaned).search(text) is not None


def find_terms(text: str, vocabulary: Iterable[str]) -> List[str]:
    """Return the vocabulary terms present in text, in vocabulary order."""
    return [term for term in vocabulary if contains_term(text, term)]


def restrict_to_vocabulary(found: Optional[Iterable[str]], vocabulary: Iterable[str]) -> List[str]:
    """
    Map extractor output onto the job's own spelling of each term.

    Terms outside the vocabulary are dropped. Aliases are resolved through
    SKILL_NORMALIZATIONS first, so "reactjs" counts as "React".

    Args:
        found: Terms reported by an extractor
        vocabulary: The job's terms (canonical spelling)

    Returns:
        Vocabulary terms that were found, in vocabulary order
    """
    found_keys = set()
    for term in found or []:
        if not isinstance(term, str) or not term.strip():
            continue
        found_keys.add(term_key(term))
        found_keys.add(term_key(normalize_skill(term)))
    return [term for term in vocabulary if term_key(term) in found_keys]
