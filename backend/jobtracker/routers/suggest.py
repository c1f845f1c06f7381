from fastapi import APIRouter, Depends

from jobtracker.dependencies import get_suggestion_service
from jobtracker.schemas.suggest import SuggestionResponse
from jobtracker.services.suggestion_service import SuggestionService

router = APIRouter(prefix="/suggest", tags=["suggest"])


@router.get("/keywords", response_model=SuggestionResponse)
async def suggest_keywords(q: str = "", service: SuggestionService = Depends(get_suggestion_service)):
    return SuggestionResponse(suggestions=await service.keywords(q))


@router.get("/locations", response_model=SuggestionResponse)
async def suggest_locations(q: str = "", service: SuggestionService = Depends(get_suggestion_service)):
    return SuggestionResponse(suggestions=await service.locations(q))
