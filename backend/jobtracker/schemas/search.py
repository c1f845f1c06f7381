from pydantic import BaseModel, Field

from jobtracker.schemas.job import JobResult, SearchFilters


class SearchSessionCreate(BaseModel):
    query: str = ""
    location: str = ""
    filters: SearchFilters | None = None
    page_size: int | None = Field(default=None, ge=1, le=100)
    sort: str | None = None


class SearchRequest(BaseModel):
    query: str = ""
    location: str = ""
    filters: SearchFilters | None = None


class SearchSessionResponse(BaseModel):
    session_id: str
    query: str
    location: str
    filters: SearchFilters
    results: list[JobResult]
    page: int
    page_size: int
    total_pages: int
    total_exact: bool
    page_label: str
    known_total: int | None
    buffered: int
    can_go_next: bool
    can_go_previous: bool
    loading: bool
    error: str | None
