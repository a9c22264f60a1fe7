"""
FastAPI router for speaker CRUD endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import db

from . import schemas, service

router = APIRouter(prefix="/speakers")

# Ids are stored as signed 64-bit integers.
MAX_SPEAKER_ID = 2**63 - 1


@router.get("", response_model=list[schemas.SpeakerResponse])
async def list_speakers(
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(db.get_session),
) -> list[schemas.SpeakerResponse]:
    return await service.list_speakers(session, limit=limit, offset=offset)


@router.get("/{speaker_id}", response_model=schemas.SpeakerResponse)
async def get_speaker(
    speaker_id: int = Path(..., ge=1, le=MAX_SPEAKER_ID),
    session: AsyncSession = Depends(db.get_session),
) -> schemas.SpeakerResponse:
    return await service.get_speaker(session, speaker_id)


@router.post("", response_model=schemas.SpeakerResponse, status_code=status.HTTP_201_CREATED)
async def create_speaker(
    payload: schemas.SpeakerCreate,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(db.get_session),
) -> schemas.SpeakerResponse:
    speaker = await service.create_speaker(session, payload)
    response.headers["Location"] = str(request.url_for("get_speaker", speaker_id=speaker.id))
    return speaker


@router.put("/{speaker_id}", response_model=schemas.SpeakerResponse)
async def update_speaker(
    payload: schemas.SpeakerUpdate,
    speaker_id: int = Path(..., ge=1, le=MAX_SPEAKER_ID),
    session: AsyncSession = Depends(db.get_session),
) -> schemas.SpeakerResponse:
    """
    Update name, bio or web_site. Fields left out of the body are unchanged.
    """
    return await service.update_speaker(session, speaker_id, payload)


@router.delete("/{speaker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_speaker(
    speaker_id: int = Path(..., ge=1, le=MAX_SPEAKER_ID),
    session: AsyncSession = Depends(db.get_session),
) -> Response:
    await service.delete_speaker(session, speaker_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
