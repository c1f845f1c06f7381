import secrets
import time

from jobtracker.config import settings
from jobtracker.services.search_controller import PageFetch, SearchController
from jobtracker.services.suggestion_feed import SuggestionFeed, SuggestionFetch


class SearchSessionRegistry:
    def __init__(self, ttl_seconds: int | None = None, max_sessions: int | None = None):
        self._ttl = ttl_seconds or settings.session_ttl_seconds
        self._max = max_sessions or settings.max_sessions
        self._sessions: dict[str, tuple[SearchController, float]] = {}  # id -> (controller, expires_at)
        self._feeds: dict[str, dict[str, SuggestionFeed]] = {}  # id -> input field -> feed

    def _drop(self, session_id: str):
        for feed in self._feeds.pop(session_id, {}).values():
            feed.close()

    def _cleanup_expired(self):
        now = time.time()
        for sid in [sid for sid, entry in self._sessions.items() if entry[1] <= now]:
            del self._sessions[sid]
            self._drop(sid)

    def __len__(self) -> int:
        self._cleanup_expired()
        return len(self._sessions)

    def create(self, fetch_page: PageFetch, page_size: int | None = None, sort: str | None = None) -> tuple[str, SearchController]:
        self._cleanup_expired()
        while len(self._sessions) >= self._max:
            oldest = min(self._sessions, key=lambda sid: self._sessions[sid][1])
            del self._sessions[oldest]
            self._drop(oldest)

        session_id = secrets.token_urlsafe(16)
        controller = SearchController(fetch_page, page_size=page_size, sort=sort)
        self._sessions[session_id] = (controller, time.time() + self._ttl)
        return session_id, controller

    def get(self, session_id: str) -> SearchController | None:
        """Look up a live session and extend its lifetime."""
        self._cleanup_expired()
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        controller = entry[0]
        self._sessions[session_id] = (controller, time.time() + self._ttl)
        return controller

    def feed(self, session_id: str, input_field: str, fetch: SuggestionFetch) -> SuggestionFeed | None:
        """The session's autocomplete feed for one input field, created on first use."""
        if self.get(session_id) is None:
            return None
        feeds = self._feeds.setdefault(session_id, {})
        if input_field not in feeds:
            feeds[input_field] = SuggestionFeed(fetch)
        return feeds[input_field]

    def discard(self, session_id: str) -> bool:
        self._drop(session_id)
        return self._sessions.pop(session_id, None) is not None

    def clear(self):
        for sid in list(self._feeds):
            self._drop(sid)
        self._sessions.clear()


session_registry = SearchSessionRegistry()
