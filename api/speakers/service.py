"""
Speaker business logic.

Scope:
- map ORM rows to response schemas
- not-found and id-mismatch errors
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from . import repository, schemas
from .models import Speaker

logger = logging.getLogger(__name__)


def _to_response(speaker: Speaker) -> schemas.SpeakerResponse:
    return schemas.SpeakerResponse.model_validate(speaker)


async def _require_speaker(session: AsyncSession, speaker_id: int) -> Speaker:
    speaker = await repository.get_speaker(session, speaker_id)
    if speaker is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Speaker not found.")
    return speaker


async def list_speakers(
    session: AsyncSession,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> list[schemas.SpeakerResponse]:
    rows = await repository.list_speakers(session, limit=limit, offset=offset)
    return [_to_response(row) for row in rows]


async def get_speaker(session: AsyncSession, speaker_id: int) -> schemas.SpeakerResponse:
    return _to_response(await _require_speaker(session, speaker_id))


async def create_speaker(session: AsyncSession, payload: schemas.SpeakerCreate) -> schemas.SpeakerResponse:
    speaker = await repository.create_speaker(
        session,
        name=payload.name,
        bio=payload.bio,
        web_site=payload.web_site,
    )
    logger.info("speaker_created id=%s", speaker.id)
    return _to_response(speaker)


async def update_speaker(
    session: AsyncSession,
    speaker_id: int,
    payload: schemas.SpeakerUpdate,
) -> schemas.SpeakerResponse:
    if payload.id is not None and payload.id != speaker_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Speaker id in body does not match the URL.",
        )

    speaker = await _require_speaker(session, speaker_id)
    changes = payload.changes()
    speaker = await repository.update_speaker(session, speaker, **changes)
    logger.info("speaker_updated id=%s fields=%s", speaker.id, ",".join(sorted(changes)))
    return _to_response(speaker)


async def delete_speaker(session: AsyncSession, speaker_id: int) -> None:
    speaker = await _require_speaker(session, speaker_id)
    await repository.delete_speaker(session, speaker)
    logger.info("speaker_deleted id=%s", speaker_id)
