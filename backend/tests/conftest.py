import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from jobtracker.dependencies import get_http_client, get_session_registry
from jobtracker.main import app
from jobtracker.services.session_service import SearchSessionRegistry


def make_offer(i: int, **overrides) -> dict:
    offer = {
        "titel": f"Verkäufer {i}",
        "arbeitgeber": f"Firma {i}",
        "arbeitsort": {"ort": "Berlin", "region": "Berlin", "land": "Deutschland"},
        "hashId": f"hash-{i}",
        "angebotsart": 1,
    }
    offer.update(overrides)
    return offer


def make_page(start: int, count: int, **extra) -> dict:
    return {"stellenangebote": [make_offer(i) for i in range(start, start + count)], **extra}


class FakeUpstream:
    """Scripted stand-in for Jobsuche, BERUFENET and Photon."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.jobsuche_pages: dict[int, dict] = {}
        self.jobsuche_status = 200
        self.keyword_jobs: dict = {"stellenangebote": []}
        self.berufenet: dict = {"berufe": []}
        self.photon: dict = {"features": []}
        self.failing: set[str] = set()  # "jobsuche", "berufenet", "photon"

    def requests_to(self, name: str) -> list[httpx.Request]:
        return [r for r in self.requests if self._route(r) == name]

    def _route(self, request: httpx.Request) -> str:
        if request.url.host == "photon.komoot.io":
            return "photon"
        if request.url.path.endswith("/berufe"):
            return "berufenet"
        return "jobsuche"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._route(request)
        if route in self.failing:
            raise httpx.ConnectError("connection refused", request=request)

        if route == "photon":
            return httpx.Response(200, json=self.photon)
        if route == "berufenet":
            return httpx.Response(200, json=self.berufenet)
        if "veroeffentlichtseit" in request.url.params:
            return httpx.Response(200, json=self.keyword_jobs)
        if self.jobsuche_status != 200:
            return httpx.Response(self.jobsuche_status, json={"message": "upstream unavailable"})
        page = int(request.url.params.get("page", "1"))
        return httpx.Response(200, json=self.jobsuche_pages.get(page, {"stellenangebote": []}))


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    yield client
    asyncio.run(client.aclose())


@pytest.fixture
def registry():
    return SearchSessionRegistry(ttl_seconds=60, max_sessions=10)


@pytest.fixture
def client(http, registry):
    async def override_http():
        return http

    async def override_registry():
        return registry

    app.dependency_overrides[get_http_client] = override_http
    app.dependency_overrides[get_session_registry] = override_registry
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
