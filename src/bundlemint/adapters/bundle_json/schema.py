"""Pydantic models describing JSON transaction bundles."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class BundleBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BundleRequestPayload(BundleBaseModel):
    method: HttpMethod
    url: str

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class BundleEntryPayload(BundleBaseModel):
    full_url: str | None = Field(default=None, alias="fullUrl")
    resource: dict[str, Any] | None = None
    request: BundleRequestPayload | None = None

    _normalize_full_url = field_validator("full_url", mode="before")(_blank_to_none)

    @field_validator("resource")
    @classmethod
    def _require_resource_type(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        if value is not None and not isinstance(value.get("resourceType"), str):
            raise ValueError("resource must declare a resourceType")
        return value


class BundlePayload(BundleBaseModel):
    resource_type: Literal["Bundle"] = Field(alias="resourceType")
    id: str | None = None
    type: str | None = None
    entry: list[BundleEntryPayload] = Field(default_factory=list[BundleEntryPayload])
