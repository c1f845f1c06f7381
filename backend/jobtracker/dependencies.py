import httpx
from fastapi import Depends, HTTPException, Request

from jobtracker.services.search_service import JobsucheClient
from jobtracker.services.session_service import SearchSessionRegistry, session_registry
from jobtracker.services.suggestion_service import SuggestionService


async def get_http_client(request: Request) -> httpx.AsyncClient:
    http = getattr(request.app.state, "http", None)
    if http is None:
        raise HTTPException(status_code=503, detail="Upstream HTTP client is not initialised")
    return http


async def get_jobsuche_client(http: httpx.AsyncClient = Depends(get_http_client)) -> JobsucheClient:
    return JobsucheClient(http)


async def get_suggestion_service(
    http: httpx.AsyncClient = Depends(get_http_client),
    jobsuche: JobsucheClient = Depends(get_jobsuche_client),
) -> SuggestionService:
    return SuggestionService(http, jobsuche)


async def get_session_registry() -> SearchSessionRegistry:
    return session_registry
