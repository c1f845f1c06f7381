import logging
from typing import Any
from urllib.parse import quote

import httpx

from jobtracker.config import Settings, settings
from jobtracker.schemas.job import JobResult
from jobtracker.services.query_params import offer_category_label
from jobtracker.services.total_count import extract_total
from jobtracker.utils.dates import format_start_date
from jobtracker.utils.identity import identity_of

logger = logging.getLogger("jobtracker.search")

UNTITLED = "Ohne Titel"


class SearchFetchError(Exception):
    """A page of search results could not be loaded."""


class UpstreamError(SearchFetchError):
    """The job board answered, but not with a usable success response."""

    def __init__(self, status_code: int, body: Any, url: str):
        super().__init__(f"Upstream error {status_code}")
        self.status_code = status_code
        self.body = body
        self.url = url


def _first(row: dict, *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _employer(row: dict) -> str:
    employer = row.get("arbeitgeber")
    if isinstance(employer, str) and employer.strip():
        return employer.strip()
    if isinstance(employer, dict) and _text(employer.get("name")):
        return _text(employer.get("name"))
    return _text(row.get("unternehmen")) or _text(row.get("firma"))


def _location(row: dict) -> str:
    place = row.get("arbeitsort")
    if place is None:
        places = row.get("arbeitsorte")
        place = places[0] if isinstance(places, list) and places else {}
    if isinstance(place, str):
        return place.strip()
    if not isinstance(place, dict):
        return ""
    parts = [_text(place.get(k)) for k in ("ort", "region", "land")]
    return ", ".join(p for p in parts if p)


def _distance(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_row(row: dict, detail_base: str | None = None) -> JobResult:
    """Flatten one Jobsuche "stellenangebot" into a JobResult."""
    detail_base = detail_base or settings.jobsuche_detail_url

    title = _text(_first(row, "titel", "beruf", "stellenbezeichnung", "berufsbezeichnung")) or UNTITLED
    hash_id = _first(row, "hashId", "hashID", "refnr")
    hash_id = str(hash_id).strip() if hash_id is not None else None

    # Prefer the employer's own posting; fall back to the job board detail page.
    external_url = _text(_first(row, "externeUrl", "externeURL", "externeurl"))
    if external_url:
        detail_url = external_url
    elif hash_id:
        detail_url = f"{detail_base}{quote(hash_id, safe='')}"
    else:
        detail_url = None

    offer_category = _first(row, "angebotsart", "arbeitszeit")
    start_date = row.get("eintrittsdatum") if isinstance(row.get("eintrittsdatum"), str) else None

    result = JobResult(
        title=title,
        employer=_employer(row),
        location=_location(row),
        hash_id=hash_id or None,
        detail_url=detail_url,
        offer_category=offer_category if isinstance(offer_category, (str, int)) else None,
        offer_category_label=offer_category_label(offer_category) if isinstance(offer_category, (str, int)) else None,
        logo_url=_text(_first(row, "arbeitgeberLogo", "logoUrl")) or None,
        distance_km=_distance(row.get("entfernung")),
        start_date=start_date,
        start_label=format_start_date(start_date),
        published_at=_text(_first(row, "aktuelleVeroeffentlichungsdatum", "veroeffentlichungsdatum")) or None,
    )
    result.identity_key = identity_of(result)
    return result


class JobsucheClient:
    def __init__(self, http: httpx.AsyncClient, config: Settings | None = None):
        self._http = http
        self._config = config or settings

    def _headers(self) -> dict[str, str]:
        return {
            "X-API-Key": self._config.jobsuche_api_key,
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }

    async def search_raw(self, params: dict[str, str]) -> dict:
        """
        One GET against the Jobsuche search endpoint, returning the decoded body.
        Non-2xx answers raise UpstreamError; transport failures raise httpx errors.
        """
        resp = await self._http.get(
            self._config.jobsuche_base_url,
            params=params,
            headers=self._headers(),
            timeout=self._config.upstream_timeout_seconds,
        )
        if not resp.is_success:
            try:
                body: Any = resp.json()
            except ValueError:
                body = resp.text
            logger.warning("Jobsuche returned %s for %s", resp.status_code, resp.url)
            raise UpstreamError(resp.status_code, body, str(resp.url))

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError(502, resp.text, str(resp.url)) from exc
        if not isinstance(data, dict):
            raise UpstreamError(502, data, str(resp.url))
        return data

    async def fetch_page(self, params: dict[str, str]) -> dict:
        data = await self.search_raw(params)
        rows = data.get("stellenangebote")
        if not isinstance(rows, list):
            rows = []

        results = [
            normalize_row(row, self._config.jobsuche_detail_url)
            for row in rows
            if isinstance(row, dict)
        ]
        upstream_page = data.get("page") if isinstance(data.get("page"), dict) else None
        return {
            "results": results,
            "total": extract_total(data),
            "page": int(params.get("page", 1)),
            "size": int(params.get("size", self._config.page_size)),
            "upstream_page": upstream_page,
        }
