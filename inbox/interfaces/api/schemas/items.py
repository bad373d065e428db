"""Schemas exposed by the feed endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AddItemBody(BaseModel):
    """Event posted by the indexer webhook."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., min_length=1, pattern=r"^[^/:]+$")
    data: Any
    chain_id: str | None = Field(default=None, alias="chainId")

    @field_validator("data")
    @classmethod
    def _require_data(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("data is required")
        return value


class LoadedItemRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    timestamp: str | None = None
    chain_id: str | None = Field(default=None, alias="chainId")
    data: Any = None


class ItemsResponse(BaseModel):
    items: list[LoadedItemRead]


class SuccessResponse(BaseModel):
    success: bool = True


__all__ = ["AddItemBody", "ItemsResponse", "LoadedItemRead", "SuccessResponse"]
