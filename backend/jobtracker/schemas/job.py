from pydantic import BaseModel, Field


class JobResult(BaseModel):
    title: str = ""
    employer: str = ""
    location: str = ""
    hash_id: str | None = None
    detail_url: str | None = None
    identity_key: str = ""
    offer_category: str | int | None = None
    offer_category_label: str | None = None
    logo_url: str | None = None
    distance_km: float | None = None
    start_date: str | None = None
    start_label: str | None = None
    published_at: str | None = None


class JobSearchResponse(BaseModel):
    results: list[JobResult]
    total: int | None
    page: int
    size: int
    upstream_page: dict | None = None


class SearchFilters(BaseModel):
    offer_category: str | None = None
    distance_km: int | None = Field(default=None, ge=0)
