"""Identity merge audit response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class IdentityMergeAuditRead(BaseModel):
    """Serialized identity merge audit record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    inbox_id: int
    contact_id: int
    branch: str
    phone: str
    lid: str
    identifier: str
    surviving_contact_inbox_id: int
    removed_contact_inbox_id: int | None
    previous_source_id: str | None
    moved_conversation_ids_json: list[int]
    timestamp: datetime
