from collections.abc import Iterable

from jobtracker.schemas.job import JobResult


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def identity_of(result: JobResult) -> str:
    """Stable key for a search hit: external id, then detail link, then employer|title|location."""
    hash_id = _clean(result.hash_id)
    if hash_id:
        return hash_id

    detail_url = _clean(result.detail_url)
    if detail_url:
        return detail_url

    parts = [_clean(result.employer).lower(), _clean(result.title).lower(), _clean(result.location).lower()]
    if not any(parts):
        return ""
    return "|".join(parts)


def dedupe(results: Iterable[JobResult]) -> list[JobResult]:
    """
    Drop later occurrences of an already-seen identity key, keeping first-seen order.
    Results with an empty key are always kept; an empty key proves nothing.
    """
    seen: set[str] = set()
    out: list[JobResult] = []
    for result in results:
        key = identity_of(result)
        if key:
            if key in seen:
                continue
            seen.add(key)
        out.append(result)
    return out


def merge_unique(existing: list[JobResult], incoming: Iterable[JobResult]) -> tuple[list[JobResult], int]:
    """Append incoming results to existing ones; returns the merged list and how many were new."""
    merged = dedupe([*existing, *incoming])
    return merged, len(merged) - len(existing)
