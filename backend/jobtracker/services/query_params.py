"""
Translation between the filter vocabulary the UI speaks and the parameter
vocabulary of the Jobsuche API (angebotsart, arbeitszeit, umkreis, ...).
"""
from jobtracker.schemas.job import SearchFilters
from jobtracker.utils.text import humanize

# Jobsuche "angebotsart": 1 = Arbeit, 2 = Selbststaendigkeit,
# 4 = Ausbildung/Duales Studium, 34 = Praktikum/Trainee.
DEFAULT_OFFER_CATEGORY = 1

OFFER_CATEGORY_CODES: dict[str, int] = {
    "full-time": 1,
    "part-time": 1,
    "mini-job": 1,
    "working-student": 1,
    "freelance": 2,
    "apprenticeship": 4,
    "internship": 34,
}

WORK_TIME_CODES: dict[str, str] = {
    "full-time": "vz",
    "part-time": "tz",
    "mini-job": "mj",
}

OFFER_CATEGORY_LABELS: dict[str, str] = {
    "1": "Arbeit",
    "2": "Selbstständigkeit",
    "4": "Ausbildung/Duales Studium",
    "34": "Praktikum/Trainee",
    "vz": "Vollzeit",
    "tz": "Teilzeit",
    "mj": "Minijob",
    "snw": "Schicht/Nacht/Wochenende",
    "ho": "Homeoffice",
    "arbeit": "Arbeit",
    "selbstaendigkeit": "Selbstständigkeit",
    "ausbildung": "Ausbildung/Duales Studium",
    "praktikum_trainee": "Praktikum/Trainee",
}


def _key(value: str | None) -> str:
    return (value or "").strip().lower()


def map_offer_category(value: str | None) -> int | None:
    key = _key(value)
    if not key:
        return DEFAULT_OFFER_CATEGORY
    return OFFER_CATEGORY_CODES.get(key)


def map_work_time_type(value: str | None) -> str | None:
    return WORK_TIME_CODES.get(_key(value))


def offer_category_label(raw: str | int | None) -> str | None:
    if raw is None:
        return None
    key = str(raw).strip()
    if not key:
        return None
    label = OFFER_CATEGORY_LABELS.get(key.lower())
    if label:
        return label
    return humanize(key)


def build_search_params(
    query: str,
    location: str | None,
    filters: SearchFilters | None = None,
    page: int = 1,
    size: int = 20,
    sort: str | None = None,
) -> dict[str, str]:
    """
    Build the Jobsuche query string for one page.

    The category is always sent. Jobsuche's own default is not "all offers",
    so leaving it out would narrow the result set and the totals would no
    longer match what the job board shows for an unfiltered search.
    """
    filters = filters or SearchFilters()
    params: dict[str, str] = {}

    query = (query or "").strip()
    location = (location or "").strip()
    if query:
        params["was"] = query
    if location:
        params["wo"] = location
        # umkreis without wo is rejected upstream
        if filters.distance_km:
            params["umkreis"] = str(filters.distance_km)

    category = map_offer_category(filters.offer_category)
    params["angebotsart"] = str(category if category is not None else DEFAULT_OFFER_CATEGORY)

    work_time = map_work_time_type(filters.offer_category)
    if work_time:
        params["arbeitszeit"] = work_time
    if sort:
        params["sortierung"] = sort

    params["page"] = str(max(1, page))
    params["size"] = str(size)
    return params
