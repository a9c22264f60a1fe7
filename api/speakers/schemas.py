"""
Speaker API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import BIO_MAX_LENGTH, NAME_MAX_LENGTH, WEB_SITE_MAX_LENGTH


def _require_text(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("Name must not be blank.")
    return value


class SpeakerCreate(BaseModel):
    # Any client-supplied id is dropped; storage assigns it.
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)
    web_site: str | None = Field(default=None, max_length=WEB_SITE_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _require_text(value)


class SpeakerUpdate(BaseModel):
    """
    Partial update: only fields present in the body are written.
    """

    id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)
    web_site: str | None = Field(default=None, max_length=WEB_SITE_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("Name is required and cannot be null.")
        return _require_text(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"id"})


class SpeakerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    bio: str | None = None
    web_site: str | None = None
