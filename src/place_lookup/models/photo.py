from typing import Annotated

from pydantic import Field, field_validator

from .base import BaseLookupModel

PHOTO_NAME_PREFIX = "places/"
MAX_PHOTO_DIMENSION_PX = 4800


class PhotoRequest(BaseLookupModel):
    """A photo resource name plus pixel bounds."""

    photo_name: str
    max_width_px: int = Field(default=400, gt=0, le=MAX_PHOTO_DIMENSION_PX)
    max_height_px: Annotated[int, Field(gt=0, le=MAX_PHOTO_DIMENSION_PX)] | None = None

    @field_validator("photo_name")
    @classmethod
    def require_places_prefix(cls, v: str) -> str:
        if not v.startswith(PHOTO_NAME_PREFIX):
            raise ValueError(
                "photoName must be a full Places photo resource name "
                f'(starts with "{PHOTO_NAME_PREFIX}")'
            )
        if any(ch.isspace() or not ch.isprintable() for ch in v):
            raise ValueError(
                "photoName must not contain whitespace or control characters"
            )
        return v


class PhotoContent(BaseLookupModel):
    """Image bytes ready to be returned to the caller."""

    content: bytes
    content_type: str = "image/jpeg"
    cache_control: str = "public, max-age=86400"
