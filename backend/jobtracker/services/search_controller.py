"""
Paginated job search session.

The controller owns one SearchState and only mutates it through its
operations. Results from successive upstream pages are merged into a single
deduplicated buffer; display pages are slices of that buffer, so the display
page number and the number of upstream pages consumed can drift apart when the
job board repeats offers across pages.

Every fetch is tagged with the session generation it was issued for. A
completion that arrives after a newer search started is dropped, and a failed
fetch leaves the state exactly as it was so the same operation can be retried.
"""
import logging
import math
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from jobtracker.config import settings
from jobtracker.schemas.job import JobResult, SearchFilters
from jobtracker.services.query_params import build_search_params
from jobtracker.services.search_service import SearchFetchError, UpstreamError
from jobtracker.services.total_count import extract_total
from jobtracker.utils.identity import dedupe, identity_of, merge_unique

logger = logging.getLogger("jobtracker.search")

PageFetch = Callable[[dict[str, str]], Awaitable[Mapping[str, Any]]]

FETCH_ERRORS = (SearchFetchError, httpx.HTTPError)


@dataclass
class SearchState:
    query: str = ""
    location: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    results: list[JobResult] = field(default_factory=list)
    page: int = 1
    known_total: int | None = None
    fetched_pages: int = 0


@dataclass(frozen=True)
class PageInfo:
    page: int
    total_pages: int
    exact: bool

    @property
    def label(self) -> str:
        return f"{self.page} / {self.total_pages}{'' if self.exact else '+'}"


def _coerce_rows(payload: Mapping[str, Any]) -> list[JobResult]:
    rows = payload.get("results") if isinstance(payload, Mapping) else None
    if not isinstance(rows, list):
        return []
    out = []
    for row in rows:
        if isinstance(row, JobResult):
            result = row
        elif isinstance(row, Mapping):
            try:
                result = JobResult.model_validate(row)
            except ValidationError:
                logger.debug("Skipping malformed result row: %r", row)
                continue
        else:
            continue
        if not result.identity_key:
            result.identity_key = identity_of(result)
        out.append(result)
    return out


def _describe(exc: Exception) -> str:
    if isinstance(exc, UpstreamError):
        return f"Search failed (upstream status {exc.status_code})"
    return f"Search failed: {exc}" if str(exc) else "Search failed"


class SearchController:
    def __init__(self, fetch_page: PageFetch, page_size: int | None = None, sort: str | None = None):
        self._fetch_page = fetch_page
        self.page_size = page_size or settings.page_size
        self.sort = sort
        self.state = SearchState()
        self.loading = False
        self.error: str | None = None
        self._generation = 0

    # --- views -----------------------------------------------------------

    @property
    def active(self) -> bool:
        return bool(self.state.query and self.state.location)

    @property
    def page_results(self) -> list[JobResult]:
        start = (self.state.page - 1) * self.page_size
        return self.state.results[start:start + self.page_size]

    @property
    def total_pages(self) -> int:
        if self.state.known_total is not None:
            return max(1, math.ceil(self.state.known_total / self.page_size))
        return math.ceil(max(1, len(self.state.results)) / self.page_size)

    @property
    def page_info(self) -> PageInfo:
        return PageInfo(
            page=self.state.page,
            total_pages=self.total_pages,
            exact=self.state.known_total is not None,
        )

    @property
    def can_go_next(self) -> bool:
        if not self.active or self.loading:
            return False
        return self.state.known_total is None or self.state.page < self.total_pages

    @property
    def can_go_previous(self) -> bool:
        return self.state.page > 1 and not self.loading

    # --- operations ------------------------------------------------------

    def _params(self, state: SearchState, page: int) -> dict[str, str]:
        return build_search_params(
            state.query, state.location, state.filters,
            page=page, size=self.page_size, sort=self.sort,
        )

    async def _fetch(self, params: dict[str, str], generation: int) -> Mapping[str, Any] | None:
        """Run one fetch; None means it failed or was superseded and must not be applied."""
        self.loading = True
        self.error = None
        try:
            payload = await self._fetch_page(params)
        except FETCH_ERRORS as exc:
            if generation == self._generation:
                logger.warning("Search page %s failed: %s", params.get("page"), exc)
                self.error = _describe(exc)
            return None
        finally:
            # a superseded fetch leaves the flag to the one that replaced it
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug("Discarding stale page %s for superseded search", params.get("page"))
            return None
        return payload

    def reset(self, filters: SearchFilters | None = None):
        self._generation += 1
        self.state = SearchState(filters=filters or self.state.filters)
        self.loading = False
        self.error = None

    async def start_search(self, query: str, location: str, filters: SearchFilters | None = None) -> bool:
        query = (query or "").strip()
        location = (location or "").strip()
        filters = filters or self.state.filters
        if not query or not location:
            self.reset(filters)
            return False

        self._generation += 1
        generation = self._generation
        candidate = SearchState(query=query, location=location, filters=filters)
        payload = await self._fetch(self._params(candidate, 1), generation)
        if payload is None:
            return False

        rows = _coerce_rows(payload)
        candidate.results = dedupe(rows)
        candidate.fetched_pages = 1
        candidate.known_total = extract_total(payload)
        if candidate.known_total is None and len(rows) < self.page_size:
            # a short first page is the whole result set
            candidate.known_total = len(candidate.results)

        self.state = candidate
        logger.info(
            "Search %r in %r: %d results, total=%s",
            query, location, len(candidate.results), candidate.known_total,
        )
        return True

    async def next_page(self) -> bool:
        state = self.state
        if not self.active or self.loading:
            return False
        if state.known_total is not None and state.page >= self.total_pages:
            return False

        target = state.page + 1
        buffered = len(state.results)
        if target * self.page_size <= buffered or (
            state.known_total is not None and buffered >= state.known_total
        ):
            state.page = target
            return True

        generation = self._generation
        raw_page = state.fetched_pages + 1
        payload = await self._fetch(self._params(state, raw_page), generation)
        if payload is None:
            return False

        rows = _coerce_rows(payload)
        merged, added = merge_unique(state.results, rows)
        reported = extract_total(payload)
        known = state.known_total
        if reported is not None:
            known = reported
        elif added == 0 and known is None:
            # duplicate-only page: nothing left upstream
            known = len(merged)
        elif len(rows) < self.page_size and known is None:
            # last partial page; cannot exceed what is actually buffered
            known = min((raw_page - 1) * self.page_size + len(rows), len(merged))

        state.results = merged
        state.known_total = known
        state.fetched_pages = raw_page
        # The page pointer advances at most to the last page that holds data, so a
        # duplicate-only fetch keeps the current page while the raw page still moves on.
        if known is not None:
            target = min(target, max(1, math.ceil(known / self.page_size)))
        state.page = target
        return True

    def previous_page(self) -> bool:
        if not self.can_go_previous:
            return False
        self.state.page -= 1
        return True

    async def change_filters(self, filters: SearchFilters) -> bool:
        merged = self.state.filters.model_copy(update=filters.model_dump(exclude_unset=True))
        if not self.active:
            self.state.filters = merged
            return False
        return await self.start_search(self.state.query, self.state.location, merged)
