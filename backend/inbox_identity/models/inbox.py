"""Inbox ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, CreatedAtMixin, IdMixin


class Inbox(Base, IdMixin, CreatedAtMixin):
    """Channel endpoint; lookups and source key uniqueness are scoped to one inbox."""

    __tablename__ = "inboxes"

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    channel_type: Mapped[str] = mapped_column(String(64), default="whatsapp", nullable=False)
