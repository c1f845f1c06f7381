from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    # Bundesagentur fuer Arbeit job board. The public key is the one published
    # for the Jobsuche web client; override it via JOBTRACKER_JOBSUCHE_API_KEY.
    jobsuche_base_url: str = "https://rest.arbeitsagentur.de/jobboerse/jobsuche-service/pc/v4/jobs"
    jobsuche_detail_url: str = "https://www.arbeitsagentur.de/jobsuche/jobdetail/"
    jobsuche_api_key: str = "jobboerse-jobsuche"
    berufenet_base_url: str = "https://rest.arbeitsagentur.de/infosysbub/bnet/pc/v1/berufe"
    berufenet_api_key: str = "infosysbub-berufenet"
    photon_base_url: str = "https://photon.komoot.io/api/"
    user_agent: str = "job-tracker/0.1"
    upstream_timeout_seconds: float = 15.0

    page_size: int = 20
    max_page_size: int = 100
    suggestion_limit: int = 8
    suggestion_debounce_seconds: float = 0.22
    # Below this many keyword candidates the BERUFENET occupation list is consulted too.
    keyword_fallback_threshold: int = 4

    session_ttl_seconds: int = 1800  # 30 minutes
    max_sessions: int = 500

    model_config = {"env_prefix": "JOBTRACKER_"}


settings = Settings()
