"""Runtime configuration for the API.

Uses Pydantic BaseSettings to read environment variables with the
`PRIORS_API_` prefix.

Example:
    export PRIORS_API_CORS_ALLOW_ALL=false
    export PRIORS_API_SURVEY=surveys/btom-priors.yml
    export PRIORS_API_SESSION_TTL_SECONDS=7200
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings read from environment variables.

    Attributes:
        cors_allow_all (bool): Whether to allow all CORS origins. Useful in dev.
        survey (str): Survey name or YAML path used when a request names none.
        session_ttl_seconds (float): Idle time after which a session is dropped.
    """

    model_config = SettingsConfigDict(env_prefix="PRIORS_API_")

    cors_allow_all: bool = True
    survey: str = "btom-priors"
    session_ttl_seconds: float = 3600


settings = Settings()
