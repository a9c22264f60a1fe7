"""
Speaker ORM model.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base

NAME_MAX_LENGTH = 200
BIO_MAX_LENGTH = 4000
WEB_SITE_MAX_LENGTH = 1000


class Speaker(Base):
    __tablename__ = "speakers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    bio: Mapped[str | None] = mapped_column(String(BIO_MAX_LENGTH), nullable=True)
    web_site: Mapped[str | None] = mapped_column(String(WEB_SITE_MAX_LENGTH), nullable=True)

    def __repr__(self) -> str:
        return f"<Speaker(id={self.id}, name={self.name!r})>"
