"""
Record schemas.

Rows are returned as plain column maps because a projection may drop any
column.
"""

from pydantic import BaseModel
from typing import Any, Dict, List


class RecordListResponse(BaseModel):
    """Rows returned by a list request."""
    path: str
    type: str
    count: int
    rows: List[Dict[str, Any]]


class InsertResponse(BaseModel):
    """Location of the inserted row."""
    uri: str
    id: int


class UpdateResponse(BaseModel):
    path: str
    updated: int


class DeleteResponse(BaseModel):
    path: str
    deleted: int


class DeleteAllResponse(BaseModel):
    """Rows removed from each table."""
    trips: int
    stops: int


class TypeResponse(BaseModel):
    path: str
    type: str
