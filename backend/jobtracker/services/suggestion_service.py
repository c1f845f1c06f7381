"""
Autocomplete suggestions for the job title and location inputs.

Candidates come from small upstream lookups and are always re-ranked locally:
prefix matches first, then earlier matches, then shorter (more specific) strings.
"""
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from jobtracker.config import Settings, settings
from jobtracker.services.search_service import JobsucheClient, UpstreamError
from jobtracker.utils.text import collapse_whitespace, normalize_text

logger = logging.getLogger("jobtracker.suggest")

TITLE_FIELDS = ("titel", "bezeichnung", "stellenbezeichnung", "beruf", "headline")
NESTED_TITLE_FIELDS = ("titel", "bezeichnung")
OCCUPATION_FIELDS = ("kurzbezeichnung", "kurzBezeichnung", "bezeichnung", "name")


def rank(candidates: Iterable[str], query: str, max_results: int = 8) -> list[str]:
    nq = normalize_text(query or "")
    if not nq or max_results <= 0:
        return []

    seen: set[str] = set()
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        text = collapse_whitespace(candidate)
        if not text or text in seen:
            continue
        seen.add(text)

        normalized = normalize_text(text)
        idx = normalized.find(nq)
        if idx == -1:
            continue
        starts = 0 if idx == 0 else 1
        scored.append((starts * 1000 + idx * 10 + len(normalized), text))

    # sort is stable, so equal scores keep input order
    scored.sort(key=lambda item: item[0])
    return [text for _, text in scored[:max_results]]


def pluck_titles(job: Any) -> list[str]:
    """All title-like strings of one Jobsuche offer, in field order, without repeats."""
    if not isinstance(job, dict):
        return []
    out: dict[str, None] = {}

    def take(obj: Any, keys: tuple[str, ...]):
        if not isinstance(obj, dict):
            return
        for key in keys:
            value = obj.get(key)
            if isinstance(value, str):
                out[value] = None

    take(job, TITLE_FIELDS)
    take(job.get("aktuelleVeroeffentlichung"), NESTED_TITLE_FIELDS)
    take(job.get("stellenbeschreibung"), NESTED_TITLE_FIELDS)
    occupations = job.get("berufe")
    if isinstance(occupations, list):
        for occupation in occupations:
            if isinstance(occupation, str):
                out[occupation] = None
            elif isinstance(occupation, dict) and isinstance(occupation.get("bezeichnung"), str):
                out[occupation["bezeichnung"]] = None
    return list(out)


def location_label(feature: Any) -> str:
    props = feature.get("properties") if isinstance(feature, dict) else None
    if not isinstance(props, dict):
        return ""
    name = next((props[k] for k in ("name", "city", "town", "village", "state", "county") if props.get(k)), None)
    region = next((props[k] for k in ("state", "county", "district") if props.get(k)), None)
    return ", ".join(str(part) for part in (name, region) if part)


def is_german(feature: Any) -> bool:
    props = feature.get("properties") if isinstance(feature, dict) else None
    if not isinstance(props, dict):
        return False
    code = props.get("countrycode") or props.get("country_code") or ""
    return str(code).lower() == "de" or props.get("country") in ("Deutschland", "Germany")


class SuggestionService:
    def __init__(self, http: httpx.AsyncClient, jobsuche: JobsucheClient, config: Settings | None = None):
        self._http = http
        self._jobsuche = jobsuche
        self._config = config or settings

    async def _job_titles(self, q: str) -> list[str]:
        try:
            data = await self._jobsuche.search_raw({"was": q, "size": "25", "veroeffentlichtseit": "100"})
        except (httpx.HTTPError, UpstreamError) as exc:
            logger.debug("Job title lookup failed for %r: %s", q, exc)
            return []
        jobs = data.get("stellenangebote")
        if not isinstance(jobs, list):
            return []
        return [title for job in jobs for title in pluck_titles(job)]

    async def _occupations(self, q: str) -> list[str]:
        try:
            resp = await self._http.get(
                self._config.berufenet_base_url,
                params={"suchwoerter": f"{q}*", "page": "0"},
                headers={"Accept": "application/json", "X-API-Key": self._config.berufenet_api_key},
                timeout=self._config.upstream_timeout_seconds,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("Occupation lookup failed for %r: %s", q, exc)
            return []
        if not isinstance(data, dict):
            return []
        rows = data.get("berufe") or data.get("result") or []
        out = []
        for row in rows if isinstance(rows, list) else []:
            if not isinstance(row, dict):
                continue
            name = next((row[k] for k in OCCUPATION_FIELDS if row.get(k) is not None), None)
            if isinstance(name, str):
                out.append(name)
        return out

    async def keywords(self, q: str) -> list[str]:
        q = (q or "").strip()
        if not q:
            return []
        candidates = await self._job_titles(q)
        if len(candidates) < self._config.keyword_fallback_threshold:
            candidates.extend(await self._occupations(q))
        return rank(candidates, q, self._config.suggestion_limit)

    async def locations(self, q: str) -> list[str]:
        q = (q or "").strip()
        if not q:
            return []
        try:
            resp = await self._http.get(
                self._config.photon_base_url,
                params={"q": q, "lang": "de", "limit": "12"},
                headers={"User-Agent": self._config.user_agent},
                timeout=self._config.upstream_timeout_seconds,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("Location lookup failed for %r: %s", q, exc)
            return []

        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list):
            return []
        labels: dict[str, None] = {}
        for feature in features:
            if is_german(feature):
                label = location_label(feature)
                if label:
                    labels[label] = None
        return list(labels)[: self._config.suggestion_limit]
