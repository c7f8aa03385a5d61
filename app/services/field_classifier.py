"""Field classification for decision-maker discovery.

Requested fields are split into executive/role fields, which drive the
LinkedIn-first query tiers, and everything else, which gets plain
company-scoped keyword queries.
"""

import re
from collections.abc import Callable, Iterable

from app.models import EnrichmentField, FieldClass

# Role vocabulary matched as a substring of the lower-cased name or description
EXECUTIVE_KEYWORDS: tuple[str, ...] = (
    "ceo",
    "cto",
    "cfo",
    "coo",
    "cmo",
    "cpo",
    "chief",
    "founder",
    "president",
    "director",
)

# Words ignored when building search terms from a description
STOP_WORDS: frozenset[str] = frozenset(
    {"this", "that", "what", "when", "where", "which"}
)

MAX_DESCRIPTION_TERMS = 3
MIN_TERM_LENGTH = 4

_Predicate = Callable[[str, str], bool]


def _name_or_desc(name_token: str, desc_phrase: str) -> _Predicate:
    return lambda name, desc: name_token in name or desc_phrase in desc


def _name_only(name_token: str) -> _Predicate:
    return lambda name, desc: name_token in name


# Ordered (predicate, canonical title) rules; first match wins.
TITLE_RULES: tuple[tuple[_Predicate, str], ...] = (
    (_name_or_desc("ceo", "chief executive"), "CEO"),
    (_name_or_desc("cto", "chief technology"), "CTO"),
    (_name_or_desc("cfo", "chief financial"), "CFO"),
    (_name_or_desc("coo", "chief operating"), "COO"),
    (_name_or_desc("cmo", "chief marketing"), "CMO"),
    (_name_or_desc("cpo", "chief product"), "CPO"),
    (_name_only("founder"), "founder"),
    (_name_only("president"), "president"),
)


def _lowered(field: EnrichmentField) -> tuple[str, str]:
    return field.name.lower(), (field.description or "").lower()


def classify(field: EnrichmentField) -> FieldClass:
    """Classify a field as executive/role or other."""
    name, desc = _lowered(field)
    if any(keyword in name or keyword in desc for keyword in EXECUTIVE_KEYWORDS):
        return FieldClass.EXECUTIVE
    return FieldClass.OTHER


def is_executive_field(field: EnrichmentField) -> bool:
    return classify(field) is FieldClass.EXECUTIVE


def has_executive_fields(fields: Iterable[EnrichmentField]) -> bool:
    """Check whether any requested field asks for an executive/role."""
    return any(is_executive_field(f) for f in fields)


def canonical_title(field: EnrichmentField) -> str:
    """Map a field to a canonical title such as "CEO" or "founder".

    Falls back to the raw field name when no rule matches.
    """
    name, desc = _lowered(field)
    for predicate, title in TITLE_RULES:
        if predicate(name, desc):
            return title
    return field.name


def search_terms(field: EnrichmentField) -> str:
    """Build a bag-of-words query fragment for a non-executive field.

    Args:
        field: Field to describe.

    Returns:
        The field name followed by up to three significant description
        words, space separated.
    """
    terms = [field.name]

    if field.description:
        words = re.sub(r"[^\w\s]", " ", field.description.lower()).split()
        key_words = [
            word
            for word in words
            if len(word) >= MIN_TERM_LENGTH and word not in STOP_WORDS
        ]
        terms.extend(key_words[:MAX_DESCRIPTION_TERMS])

    return " ".join(terms)
