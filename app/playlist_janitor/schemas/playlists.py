from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class PlaylistCreate(BaseModel):
    """Start monitoring a Spotify playlist"""
    id: str
    skip_threshold: Optional[int] = Field(default=None, ge=0)  # seconds
    ignore_initial_skips: bool = False
    auto_cleanup_limit: Optional[int] = Field(default=None, ge=1)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PlaylistUpdate(BaseModel):
    """Update a playlist; only fields that are sent change"""
    skip_threshold: Optional[int] = Field(default=None, ge=0)
    ignore_initial_skips: Optional[bool] = None
    auto_cleanup_limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("ignore_initial_skips")
    @classmethod
    def ignore_initial_skips_not_null(cls, v):
        # Omitted keeps the stored value; null is never a valid setting
        if v is None:
            raise ValueError("ignoreInitialSkips must be true or false")
        return v

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PlaylistOut(BaseModel):
    """Output schema for a playlist"""
    id: str
    skip_threshold: Optional[int] = None
    ignore_initial_skips: bool = False
    auto_cleanup_limit: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageOut(BaseModel):
    """Error body"""
    message: str
