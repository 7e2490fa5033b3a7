from __future__ import annotations

from fastapi import Request

from freelancy_api.core.config import Settings
from freelancy_api.services.store import ResourceStore


def get_store(request: Request) -> ResourceStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
