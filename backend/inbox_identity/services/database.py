"""Query services for transparent identity record views."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.models.conversation import Conversation
from inbox_identity.models.identity_merge_audit import IdentityMergeAudit
from inbox_identity.schemas.contact_inbox import ContactInboxRead


def list_contact_inboxes(db: Session, inbox_id: int) -> list[ContactInboxRead]:
    """List identity records for an inbox with their conversation counts."""

    conversation_counts = (
        select(Conversation.contact_inbox_id, func.count(Conversation.id).label("conversation_count"))
        .group_by(Conversation.contact_inbox_id)
        .subquery()
    )
    stmt = (
        select(ContactInbox, func.coalesce(conversation_counts.c.conversation_count, 0))
        .outerjoin(conversation_counts, conversation_counts.c.contact_inbox_id == ContactInbox.id)
        .where(ContactInbox.inbox_id == inbox_id)
        .order_by(ContactInbox.id.asc())
    )
    rows = db.execute(stmt).all()
    return [
        ContactInboxRead(
            id=record.id,
            inbox_id=record.inbox_id,
            contact_id=record.contact_id,
            source_id=record.source_id,
            conversation_count=conversation_count,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
        for record, conversation_count in rows
    ]


def list_identity_merge_audits(db: Session, inbox_id: int) -> list[IdentityMergeAudit]:
    """List identity merge audits for an inbox, oldest first."""

    stmt = (
        select(IdentityMergeAudit)
        .where(IdentityMergeAudit.inbox_id == inbox_id)
        .order_by(IdentityMergeAudit.id.asc())
    )
    return list(db.scalars(stmt).all())
