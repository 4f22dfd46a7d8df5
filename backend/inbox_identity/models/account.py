"""Account ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from inbox_identity.models.base import Base, CreatedAtMixin, IdMixin


class Account(Base, IdMixin, CreatedAtMixin):
    """Tenant that owns contacts and inboxes."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
