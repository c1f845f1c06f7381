import asyncio

import httpx

from jobtracker.services.suggestion_feed import SuggestionFeed


class TestSuggestionFeed:
    def test_only_last_keystroke_is_fetched(self):
        calls = []

        async def fetch(text):
            calls.append(text)
            return ["Hamburg", "Bernau", "Berlin"]

        async def scenario():
            feed = SuggestionFeed(fetch, debounce_seconds=0.05)
            feed.update("b")
            feed.update("be")
            feed.update("ber")
            return await feed.settle()

        suggestions = asyncio.run(scenario())
        assert calls == ["ber"]
        assert suggestions == ["Bernau", "Berlin"]

    def test_stale_lookup_is_cancelled(self):
        async def scenario():
            release = asyncio.Event()

            async def fetch(text):
                if text == "ber":
                    await release.wait()
                    return ["Bergisch Gladbach"]
                return ["Berlin"]

            feed = SuggestionFeed(fetch, debounce_seconds=0)
            first = feed.update("ber")
            await asyncio.sleep(0.01)  # first lookup is now waiting on the upstream
            feed.update("berlin")
            release.set()
            result = await feed.settle()
            await asyncio.wait({first})
            return first.cancelled(), result

        cancelled, result = asyncio.run(scenario())
        assert cancelled
        assert result == ["Berlin"]

    def test_blank_input_clears_without_fetch(self):
        calls = []

        async def fetch(text):
            calls.append(text)
            return ["Berlin"]

        async def scenario():
            feed = SuggestionFeed(fetch, debounce_seconds=0)
            feed.update("ber")
            await feed.settle()
            assert feed.suggestions == ["Berlin"]
            assert feed.update("  ") is None
            return await feed.settle()

        assert asyncio.run(scenario()) == []
        assert calls == ["ber"]

    def test_fetch_error_yields_no_suggestions(self):
        async def fetch(text):
            raise httpx.ConnectError("offline")

        async def scenario():
            feed = SuggestionFeed(fetch, debounce_seconds=0)
            feed.update("köln")
            return await feed.settle()

        assert asyncio.run(scenario()) == []

    def test_reranks_server_order(self):
        async def fetch(text):
            return ["Oberau", "Hamburg", "Berlin"]

        async def scenario():
            feed = SuggestionFeed(fetch, debounce_seconds=0, max_results=1)
            feed.update("ber")
            return await feed.settle()

        assert asyncio.run(scenario()) == ["Berlin"]

    def test_close_cancels_pending_lookup(self):
        calls = []

        async def fetch(text):
            calls.append(text)
            return [text]

        async def scenario():
            feed = SuggestionFeed(fetch, debounce_seconds=0.05)
            task = feed.update("kiel")
            feed.close()
            await asyncio.wait({task})
            return feed.suggestions

        assert asyncio.run(scenario()) == []
        assert calls == []
