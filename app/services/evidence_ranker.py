"""Evidence ranking, deduplication and serialization.

Ranking policy:
1. LinkedIn individual/company profiles (TrustTier.PROFESSIONAL_NETWORK)
2. Pages on the company's own domain (TrustTier.COMPANY_SITE)
3. Everything else (TrustTier.GENERAL_WEB)

Sorting is stable, so records of equal tier keep collection order.
"""

from collections.abc import Iterable, Sequence

from app.models import EvidenceRecord, TrustTier

# Maximum number of records serialized for extraction
MAX_EVIDENCE_RECORDS = 10

PROFILE_URL_MARKERS: tuple[str, ...] = ("linkedin.com/in", "linkedin.com/company")
NETWORK_HOST_MARKER = "linkedin.com"

EVIDENCE_SEPARATOR = "\n\n---\n\n"
MISSING_TITLE = "No title"


def trust_tier(record: EvidenceRecord, company_domain: str | None = None) -> TrustTier:
    """Compute the trust tier of a record from its URL."""
    if any(marker in record.url for marker in PROFILE_URL_MARKERS):
        return TrustTier.PROFESSIONAL_NETWORK
    if company_domain and company_domain in record.url:
        return TrustTier.COMPANY_SITE
    return TrustTier.GENERAL_WEB


def is_network_hosted(record: EvidenceRecord) -> bool:
    return NETWORK_HOST_MARKER in record.url


def dedupe_by_url(records: Iterable[EvidenceRecord]) -> list[EvidenceRecord]:
    """Keep the first record seen for each URL."""
    seen: set[str] = set()
    unique: list[EvidenceRecord] = []
    for record in records:
        if record.url in seen:
            continue
        seen.add(record.url)
        unique.append(record)
    return unique


def rank(
    records: Sequence[EvidenceRecord],
    company_domain: str | None = None,
    limit: int = MAX_EVIDENCE_RECORDS,
) -> list[EvidenceRecord]:
    """Order records by trust, drop duplicate URLs and truncate.

    Args:
        records: Collected evidence in collection order.
        company_domain: Domain used to recognise company-site pages.
        limit: Maximum number of records returned.

    Returns:
        Unique records, LinkedIn-hosted first, at most ``limit`` long.
    """
    ranked = sorted(records, key=lambda r: trust_tier(r, company_domain))
    unique = dedupe_by_url(ranked)

    network = [r for r in unique if is_network_hosted(r)]
    others = [r for r in unique if not is_network_hosted(r)]
    return (network + others)[:limit]


def serialize(records: Iterable[EvidenceRecord]) -> str:
    """Render records as the evidence document passed to extraction."""
    blocks = [
        f"URL: {r.url}\n"
        f"Title: {r.title or MISSING_TITLE}\n"
        f"Content:\n{r.markdown or r.content or ''}"
        for r in records
    ]
    return EVIDENCE_SEPARATOR.join(blocks)
