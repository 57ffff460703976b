from __future__ import annotations

from fastapi import Request

from payofflab.config import Settings


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return request.app.state.settings
