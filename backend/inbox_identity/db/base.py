"""SQLAlchemy metadata registry import for Alembic."""

from inbox_identity.models import Account, Contact, ContactInbox, Conversation, IdentityMergeAudit, Inbox
from inbox_identity.models.base import Base

__all__ = ["Base", "Account", "Inbox", "Contact", "ContactInbox", "Conversation", "IdentityMergeAudit"]
