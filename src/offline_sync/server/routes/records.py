"""Record API routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from offline_sync.remote.repository import RecordRepository, RepositoryConflict
from offline_sync.server.dependencies import get_repository
from offline_sync.server.models import (
    ErrorResponse,
    RecordCreateRequest,
    RecordResponse,
    RecordUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/records", tags=["records"])

Repository = Annotated[RecordRepository, Depends(get_repository)]


@router.get("", response_model=list[RecordResponse], summary="List all records")
async def list_records(repository: Repository) -> list[RecordResponse]:
    return [RecordResponse.from_record(r) for r in repository.list_all()]


@router.get(
    "/{record_id}",
    response_model=RecordResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a record",
)
async def get_record(record_id: int, repository: Repository) -> RecordResponse:
    record = repository.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record {record_id} not found")
    return RecordResponse.from_record(record)


@router.post(
    "",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
    summary="Create a record",
    description="Store a new record under a server-assigned id.",
)
async def create_record(request: RecordCreateRequest, repository: Repository) -> RecordResponse:
    try:
        record = repository.create(request.to_record())
    except RepositoryConflict as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    logger.info("Created record %d", record.id)
    return RecordResponse.from_record(record)


@router.put(
    "/{record_id}",
    response_model=RecordResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Replace a record",
)
async def update_record(
    record_id: int,
    request: RecordUpdateRequest,
    repository: Repository,
) -> RecordResponse:
    if request.id is not None and request.id != record_id:
        raise HTTPException(
            status_code=400,
            detail=f"Body id {request.id} does not match path id {record_id}",
        )
    try:
        record = repository.replace(record_id, request.to_record(record_id))
    except RepositoryConflict as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record {record_id} not found")
    return RecordResponse.from_record(record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a record",
)
async def delete_record(record_id: int, repository: Repository) -> Response:
    if not repository.delete(record_id):
        raise HTTPException(status_code=404, detail=f"Record {record_id} not found")
    logger.info("Deleted record %d", record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
