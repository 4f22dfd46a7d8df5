"""Contact inbox response schemas."""

from datetime import datetime

from pydantic import BaseModel


class ContactInboxRead(BaseModel):
    """Serialized identity record with the number of conversations attached."""

    id: int
    inbox_id: int
    contact_id: int
    source_id: str
    conversation_count: int
    created_at: datetime
    updated_at: datetime
