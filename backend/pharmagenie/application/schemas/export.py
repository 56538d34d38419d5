"""Pydantic schemas for CSV / Excel export requests."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class ExportRequest(BaseModel):
    """Either a full chatbot response or a bare record list with its collection.

    ``response_data`` is the payload returned by ``POST /chat``; when it is
    absent, ``data`` is exported as ``collection_type``.
    """

    response_data: dict[str, Any] | None = Field(default=None, alias="responseData")
    data: list[dict[str, Any]] | None = None
    collection_type: str | None = Field(default=None, alias="collectionType")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _require_payload(self) -> "ExportRequest":
        if self.response_data is None and not self.data:
            raise ValueError("Either response_data or non-empty data is required")
        if self.response_data is None and not self.collection_type:
            raise ValueError("collection_type is required when exporting raw data")
        return self
