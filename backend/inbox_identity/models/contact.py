"""Contact ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, CreatedAtMixin, IdMixin, UpdatedAtMixin


class Contact(Base, IdMixin, CreatedAtMixin, UpdatedAtMixin):
    """End-user contact.

    ``phone_number`` is stored as ``+<digits>``. ``identifier`` is an opaque
    external identity tag (e.g. ``12345678@lid``). Neither is unique at the
    schema level; consolidation refuses writes that would duplicate them.
    """

    __tablename__ = "contacts"

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    identifier: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
