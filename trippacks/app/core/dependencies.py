"""
Shared FastAPI dependencies.

The repository is created once at startup and kept on the application
state.
"""

from fastapi import Request

from trippacks.app.services.record_repository import RecordRepository


def get_repository(request: Request) -> RecordRepository:
    """FastAPI dependency returning the application's record repository."""
    return request.app.state.repository
