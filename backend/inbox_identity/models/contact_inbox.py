"""Contact inbox (identity record) ORM model."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, CreatedAtMixin, IdMixin, UpdatedAtMixin


class ContactInbox(Base, IdMixin, CreatedAtMixin, UpdatedAtMixin):
    """Binds an external source key within one inbox to a contact."""

    __tablename__ = "contact_inboxes"
    __table_args__ = (
        UniqueConstraint("inbox_id", "source_id", name="uq_contact_inboxes_inbox_source"),
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
    source_id: Mapped[str] = mapped_column(String(255), nullable=False)
