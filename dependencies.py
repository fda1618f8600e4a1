"""
Dependency wiring for the FastAPI app.

The application factory owns the `Database` and `Settings` instances and
parks them on `app.state`; handlers reach them through these helpers.
"""

from fastapi import Request

from config import Settings
from database import Database


def get_db(request: Request) -> Database:
    return request.app.state.database


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
