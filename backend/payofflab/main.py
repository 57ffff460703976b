"""Payoff Lab API.

Usage:
    uvicorn payofflab.main:app --host 0.0.0.0 --port 8000
    # or
    payofflab-server
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from payofflab.api.router import api_router
from payofflab.config import Settings, setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title="Options Payoff Lab API", version="0.1.0")
    app.state.settings = settings

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    logger.info("app ready (display range %.2f, %d zoom presets)", settings.display_range, len(settings.zoom_presets))
    return app


app = create_app()


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run("payofflab.main:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    run()
