"""Pydantic schemas for query analysis responses."""

from pydantic import BaseModel, Field


class QueryAnalysisSchema(BaseModel):
    """The analyzer's reading of one free-text query."""

    query: str
    intent: str
    entities: dict[str, list[str]] = Field(default_factory=dict)
    keywords: list[str] = Field(default_factory=list)
    filters: dict[str, str] = Field(default_factory=dict)
    export_format: str = "text"
    collections: list[str] = Field(default_factory=list)
