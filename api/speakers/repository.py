"""
Speaker persistence (SQLAlchemy ORM).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Speaker


async def list_speakers(session: AsyncSession, *, limit: int | None = None, offset: int = 0) -> list[Speaker]:
    stmt = select(Speaker).order_by(Speaker.id).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.scalars(stmt)
    return list(result)


async def get_speaker(session: AsyncSession, speaker_id: int) -> Speaker | None:
    return await session.get(Speaker, speaker_id)


async def create_speaker(
    session: AsyncSession,
    *,
    name: str,
    bio: str | None = None,
    web_site: str | None = None,
) -> Speaker:
    speaker = Speaker(name=name, bio=bio, web_site=web_site)
    session.add(speaker)
    await session.commit()
    await session.refresh(speaker)
    return speaker


async def update_speaker(session: AsyncSession, speaker: Speaker, **fields: Any) -> Speaker:
    for key in ("name", "bio", "web_site"):
        if key in fields:
            setattr(speaker, key, fields[key])
    await session.commit()
    await session.refresh(speaker)
    return speaker


async def delete_speaker(session: AsyncSession, speaker: Speaker) -> None:
    await session.delete(speaker)
    await session.commit()
