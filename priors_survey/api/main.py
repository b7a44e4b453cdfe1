"""FastAPI application for running survey sessions over JSON.

`uvicorn priors_survey.api.main:app` serves the session routes under `/v1`,
a `/healthz` probe, and the generated docs at `/docs`.

CORS is open unless PRIORS_API_CORS_ALLOW_ALL=false.
"""

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from priors_survey.api.routers import sessions
from priors_survey.api.services.registry import SessionRegistry, get_registry
from priors_survey.api.settings import Settings, settings


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the API with its middleware and routes."""
    app = FastAPI(
        title="Priors Survey API",
        version="0.1.0",
        description="Start survey sessions, report slider moves, submit ratings.",
    )

    if app_settings.cors_allow_all:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["*"],
        )

    @app.get("/healthz", tags=["meta"])
    def healthz(registry: SessionRegistry = Depends(get_registry)) -> dict:
        return {
            "status": "ok",
            "survey": app_settings.survey,
            "sessions": len(registry),
        }

    app.include_router(sessions.router, prefix="/v1", tags=["sessions"])
    return app


app = create_app()
