"""Consolidation request/response schemas."""

from pydantic import BaseModel, Field


class ConsolidationRequest(BaseModel):
    """Keys extracted from one inbound message."""

    phone: str = Field(min_length=1, max_length=64)
    lid: str = Field(min_length=1, max_length=255)
    identifier: str = Field(min_length=1, max_length=255)


class ConsolidationResult(BaseModel):
    """Outcome of one consolidation pass."""

    inbox_id: int
    outcome: str
    applied: bool
