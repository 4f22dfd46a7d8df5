"""Conversation ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, CreatedAtMixin, IdMixin, UpdatedAtMixin


class Conversation(Base, IdMixin, CreatedAtMixin, UpdatedAtMixin):
    """Conversation thread attached to exactly one contact inbox."""

    __tablename__ = "conversations"

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    inbox_id: Mapped[int] = mapped_column(
        ForeignKey("inboxes.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("contacts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    contact_inbox_id: Mapped[int] = mapped_column(
        ForeignKey("contact_inboxes.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(32), default="open", nullable=False)
