import httpx
from fastapi import APIRouter, Depends, HTTPException, Query

from jobtracker.config import settings
from jobtracker.dependencies import get_jobsuche_client
from jobtracker.schemas.job import JobSearchResponse, SearchFilters
from jobtracker.services.query_params import build_search_params
from jobtracker.services.search_service import JobsucheClient, UpstreamError

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobSearchResponse)
async def search_jobs(
    q: str = "",
    was: str | None = None,
    location: str = "",
    wo: str | None = None,
    category: str | None = None,
    distance_km: int | None = Query(None, ge=0),
    page: int = Query(1, ge=1),
    size: int = Query(settings.page_size, ge=1, le=settings.max_page_size),
    sort: str | None = None,
    jobsuche: JobsucheClient = Depends(get_jobsuche_client),
):
    params = build_search_params(
        was if was is not None else q,
        wo if wo is not None else location,
        SearchFilters(offer_category=category, distance_km=distance_km),
        page=page,
        size=size,
        sort=sort,
    )
    try:
        data = await jobsuche.fetch_page(params)
    except UpstreamError as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail={"error": str(exc), "upstream": exc.body, "forwarded_url": exc.url},
        ) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail={"error": f"Job board unreachable: {exc}"}) from exc

    return JobSearchResponse(**data)
