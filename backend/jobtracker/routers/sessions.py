from typing import Literal

from fastapi import APIRouter, Depends, HTTPException

from jobtracker.dependencies import get_jobsuche_client, get_session_registry, get_suggestion_service
from jobtracker.schemas.job import SearchFilters
from jobtracker.schemas.search import SearchRequest, SearchSessionCreate, SearchSessionResponse
from jobtracker.schemas.suggest import SessionSuggestionResponse
from jobtracker.services.search_controller import SearchController
from jobtracker.services.search_service import JobsucheClient
from jobtracker.services.session_service import SearchSessionRegistry
from jobtracker.services.suggestion_service import SuggestionService

router = APIRouter(prefix="/search-sessions", tags=["search-sessions"])


def _session_to_response(session_id: str, controller: SearchController) -> SearchSessionResponse:
    state = controller.state
    info = controller.page_info
    return SearchSessionResponse(
        session_id=session_id,
        query=state.query,
        location=state.location,
        filters=state.filters,
        results=controller.page_results,
        page=info.page,
        page_size=controller.page_size,
        total_pages=info.total_pages,
        total_exact=info.exact,
        page_label=info.label,
        known_total=state.known_total,
        buffered=len(state.results),
        can_go_next=controller.can_go_next,
        can_go_previous=controller.can_go_previous,
        loading=controller.loading,
        error=controller.error,
    )


def _get_controller(session_id: str, registry: SearchSessionRegistry) -> SearchController:
    controller = registry.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Search session not found or expired")
    return controller


@router.post("", response_model=SearchSessionResponse, status_code=201)
async def create_session(
    req: SearchSessionCreate,
    jobsuche: JobsucheClient = Depends(get_jobsuche_client),
    registry: SearchSessionRegistry = Depends(get_session_registry),
):
    session_id, controller = registry.create(jobsuche.fetch_page, page_size=req.page_size, sort=req.sort)
    await controller.start_search(req.query, req.location, req.filters)
    return _session_to_response(session_id, controller)


@router.get("/{session_id}", response_model=SearchSessionResponse)
async def get_session(session_id: str, registry: SearchSessionRegistry = Depends(get_session_registry)):
    return _session_to_response(session_id, _get_controller(session_id, registry))


@router.post("/{session_id}/search", response_model=SearchSessionResponse)
async def search(
    session_id: str,
    req: SearchRequest,
    registry: SearchSessionRegistry = Depends(get_session_registry),
):
    controller = _get_controller(session_id, registry)
    await controller.start_search(req.query, req.location, req.filters)
    return _session_to_response(session_id, controller)


@router.post("/{session_id}/next", response_model=SearchSessionResponse)
async def next_page(session_id: str, registry: SearchSessionRegistry = Depends(get_session_registry)):
    controller = _get_controller(session_id, registry)
    await controller.next_page()
    return _session_to_response(session_id, controller)


@router.post("/{session_id}/previous", response_model=SearchSessionResponse)
async def previous_page(session_id: str, registry: SearchSessionRegistry = Depends(get_session_registry)):
    controller = _get_controller(session_id, registry)
    controller.previous_page()
    return _session_to_response(session_id, controller)


@router.put("/{session_id}/filters", response_model=SearchSessionResponse)
async def change_filters(
    session_id: str,
    req: SearchFilters,
    registry: SearchSessionRegistry = Depends(get_session_registry),
):
    controller = _get_controller(session_id, registry)
    await controller.change_filters(req)
    return _session_to_response(session_id, controller)


@router.delete("/{session_id}")
async def delete_session(session_id: str, registry: SearchSessionRegistry = Depends(get_session_registry)):
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="Search session not found or expired")
    return {"message": "Search session deleted"}


@router.get("/{session_id}/suggest/{input_field}", response_model=SessionSuggestionResponse)
async def suggest(
    session_id: str,
    input_field: Literal["keywords", "locations"],
    q: str = "",
    service: SuggestionService = Depends(get_suggestion_service),
    registry: SearchSessionRegistry = Depends(get_session_registry),
):
    fetch = service.keywords if input_field == "keywords" else service.locations
    feed = registry.feed(session_id, input_field, fetch)
    if feed is None:
        raise HTTPException(status_code=404, detail="Search session not found or expired")
    feed.update(q)
    suggestions = await feed.settle()
    return SessionSuggestionResponse(suggestions=suggestions, superseded=feed.text != q)
