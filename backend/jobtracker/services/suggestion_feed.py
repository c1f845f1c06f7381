import asyncio
import logging
from collections.abc import Awaitable, Callable

from jobtracker.config import settings
from jobtracker.services.suggestion_service import rank

logger = logging.getLogger("jobtracker.suggest")

SuggestionFetch = Callable[[str], Awaitable[list[str]]]


class SuggestionFeed:
    """
    Debounced autocomplete for one input field.

    Every update cancels the lookup started by the previous keystroke, so a slow
    answer for "ber" can never overwrite the list already shown for "berlin".
    """

    def __init__(
        self,
        fetch: SuggestionFetch,
        debounce_seconds: float | None = None,
        max_results: int | None = None,
    ):
        self._fetch = fetch
        self._debounce = settings.suggestion_debounce_seconds if debounce_seconds is None else debounce_seconds
        self._max = settings.suggestion_limit if max_results is None else max_results
        self._task: asyncio.Task | None = None
        self.text = ""
        self.suggestions: list[str] = []

    async def _lookup(self, text: str):
        await asyncio.sleep(self._debounce)
        try:
            candidates = await self._fetch(text)
        except Exception as exc:
            logger.debug("Suggestion fetch failed for %r: %s", text, exc)
            candidates = []
        if text != self.text:
            return
        self.suggestions = rank(candidates or [], text, self._max)

    def update(self, text: str) -> asyncio.Task | None:
        """Record a keystroke; returns the scheduled lookup, or None when the field is blank."""
        self.cancel()
        self.text = text
        if not text.strip():
            self.suggestions = []
            return None
        self._task = asyncio.get_running_loop().create_task(self._lookup(text))
        return self._task

    async def settle(self) -> list[str]:
        """Wait for the pending lookup, if any, and return the current suggestions."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})
        return self.suggestions

    def cancel(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def close(self):
        self.cancel()
        self.suggestions = []
