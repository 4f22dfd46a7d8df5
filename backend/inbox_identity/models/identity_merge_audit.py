"""Identity merge audit log model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, IdMixin


class IdentityMergeAudit(Base, IdMixin):
    """Append-only record of every applied contact inbox consolidation."""

    __tablename__ = "identity_merge_audits"

    inbox_id: Mapped[int] = mapped_column(index=True, nullable=False)
    contact_id: Mapped[int] = mapped_column(index=True, nullable=False)
    branch: Mapped[str] = mapped_column(String(32), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    lid: Mapped[str] = mapped_column(String(255), nullable=False)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    surviving_contact_inbox_id: Mapped[int] = mapped_column(nullable=False)
    removed_contact_inbox_id: Mapped[int | None] = mapped_column(nullable=True)
    previous_source_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    moved_conversation_ids_json: Mapped[list[int]] = mapped_column(JSON, default=list, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
