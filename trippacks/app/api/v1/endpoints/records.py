"""
Record API Endpoints.

List, insert, update and delete rows of the trip and stop collections.
Query parameters other than ``columns`` and ``sort`` are equality filters.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from trippacks.app.core.dependencies import get_repository
from trippacks.app.core.exceptions import UnsupportedTargetError, WriteRejectedError
from trippacks.app.domain.validation import MessageCollector
from trippacks.app.schemas.records import (
    DeleteAllResponse, DeleteResponse, InsertResponse, RecordListResponse,
    TypeResponse, UpdateResponse,
)
from trippacks.app.services.record_repository import RecordRepository

router = APIRouter(tags=["Records"])

RESERVED_PARAMS = {"columns", "sort"}


def _selection(request: Request) -> Dict[str, str]:
    return {key: value for key, value in request.query_params.items() if key not in RESERVED_PARAMS}


def _projection(columns: Optional[str]) -> Optional[List[str]]:
    if not columns:
        return None
    return [name.strip() for name in columns.split(",") if name.strip()]


async def _list(path: str, request: Request, columns: Optional[str], sort: Optional[str],
                repository: RecordRepository) -> RecordListResponse:
    rows = await repository.query(
        path,
        projection=_projection(columns),
        selection=_selection(request),
        sort_order=sort,
    )
    return RecordListResponse(path=path, type=repository.get_type(path), count=len(rows), rows=rows)


async def _update(path: str, values: Dict[str, Any], request: Request,
                  repository: RecordRepository) -> UpdateResponse:
    display = MessageCollector()
    updated = await repository.update(path, values, selection=_selection(request), display=display)
    if display:
        raise WriteRejectedError(path, display.messages)
    return UpdateResponse(path=path, updated=updated)


@router.get("/types", response_model=TypeResponse)
async def get_type(
    path: str = Query(..., description="Target path, e.g. /trips/3"),
    repository: RecordRepository = Depends(get_repository)
):
    """Resolve the type tag of a target path."""
    return TypeResponse(path=path, type=repository.get_type(path))


@router.delete("/records", response_model=DeleteAllResponse)
async def delete_all_records(repository: RecordRepository = Depends(get_repository)):
    """Delete every trip and every stop."""
    result = await repository.delete_all()
    return DeleteAllResponse(trips=result.trips, stops=result.stops)


@router.get("/{collection}", response_model=RecordListResponse)
async def list_collection(
    collection: str,
    request: Request,
    columns: Optional[str] = Query(None, description="Comma separated projection"),
    sort: Optional[str] = Query(None, description="e.g. 'trip_number DESC' or '-stop_index'"),
    repository: RecordRepository = Depends(get_repository)
):
    """List rows of a collection."""
    return await _list(f"/{collection}", request, columns, sort, repository)


@router.get("/{collection}/{item_id}", response_model=RecordListResponse)
async def list_item(
    collection: str,
    item_id: str,
    request: Request,
    columns: Optional[str] = Query(None),
    repository: RecordRepository = Depends(get_repository)
):
    """List the single row behind an item path (zero or one row)."""
    return await _list(f"/{collection}/{item_id}", request, columns, None, repository)


@router.post("/{collection}", status_code=status.HTTP_201_CREATED, response_model=InsertResponse)
async def insert_record(
    collection: str,
    values: Dict[str, Any] = Body(...),
    repository: RecordRepository = Depends(get_repository)
):
    """
    Insert one row.

    Returns 422 with the offending field names when validation rejects it.
    """
    path = f"/{collection}"
    display = MessageCollector()
    uri = await repository.insert(path, values, display=display)
    if uri is None:
        raise WriteRejectedError(path, display.messages)
    return InsertResponse(uri=uri, id=int(uri.rsplit("/", 1)[1]))


@router.post("/{collection}/{item_id}", status_code=status.HTTP_400_BAD_REQUEST)
async def insert_at_item(collection: str, item_id: str):
    """Item paths never accept inserts."""
    raise UnsupportedTargetError("Insertion", f"/{collection}/{item_id}")


@router.patch("/{collection}", response_model=UpdateResponse)
async def update_collection(
    collection: str,
    request: Request,
    values: Dict[str, Any] = Body(...),
    repository: RecordRepository = Depends(get_repository)
):
    """Update every row matching the query filters."""
    return await _update(f"/{collection}", values, request, repository)


@router.patch("/{collection}/{item_id}", response_model=UpdateResponse)
async def update_item(
    collection: str,
    item_id: str,
    request: Request,
    values: Dict[str, Any] = Body(...),
    repository: RecordRepository = Depends(get_repository)
):
    """Update a single row."""
    return await _update(f"/{collection}/{item_id}", values, request, repository)


@router.delete("/{collection}", response_model=DeleteResponse)
async def delete_collection(
    collection: str,
    request: Request,
    repository: RecordRepository = Depends(get_repository)
):
    """Delete rows matching the query filters, or all rows without filters."""
    path = f"/{collection}"
    deleted = await repository.delete(path, selection=_selection(request))
    return DeleteResponse(path=path, deleted=deleted)


@router.delete("/{collection}/{item_id}", response_model=DeleteResponse)
async def delete_item(
    collection: str,
    item_id: str,
    repository: RecordRepository = Depends(get_repository)
):
    """Delete a single row."""
    path = f"/{collection}/{item_id}"
    deleted = await repository.delete(path)
    return DeleteResponse(path=path, deleted=deleted)
