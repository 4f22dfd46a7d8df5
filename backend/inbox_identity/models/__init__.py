"""ORM models package exports."""

from inbox_identity.models.account import Account
from inbox_identity.models.contact import Contact
from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.models.conversation import Conversation
from inbox_identity.models.identity_merge_audit import IdentityMergeAudit
from inbox_identity.models.inbox import Inbox

__all__ = [
    "Account",
    "Inbox",
    "Contact",
    "ContactInbox",
    "Conversation",
    "IdentityMergeAudit",
]
