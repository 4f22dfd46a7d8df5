"""Read-only lookups for identity records and contacts."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from inbox_identity.models.contact import Contact
from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.models.inbox import Inbox


def format_phone_number(phone: str) -> str:
    """Return the stored contact form of a raw channel phone key."""

    return f"+{phone}"


def get_inbox(db: Session, inbox_id: int) -> Inbox | None:
    return db.get(Inbox, inbox_id)


def find_contact_inbox_by_source_id(db: Session, inbox: Inbox, source_id: str) -> ContactInbox | None:
    """Return the identity record keyed by ``source_id`` in one inbox."""

    stmt = select(ContactInbox).where(
        ContactInbox.inbox_id == inbox.id,
        ContactInbox.source_id == source_id,
    )
    return db.scalar(stmt)


def find_by_phone_key(db: Session, inbox: Inbox, phone: str) -> ContactInbox | None:
    return find_contact_inbox_by_source_id(db, inbox, phone)


def find_by_lid_key(db: Session, inbox: Inbox, lid: str) -> ContactInbox | None:
    return find_contact_inbox_by_source_id(db, inbox, lid)


def find_contact_by_phone_number(db: Session, account_id: int, phone: str) -> Contact | None:
    """Return a contact whose stored phone number matches the raw phone key.

    Used as a fallback when no identity record is keyed by the phone itself.
    """

    stmt = (
        select(Contact)
        .where(
            Contact.account_id == account_id,
            Contact.phone_number == format_phone_number(phone),
        )
        .order_by(Contact.id.asc())
        .limit(1)
    )
    return db.scalar(stmt)


def find_contact_inbox_for_contact(db: Session, contact: Contact, inbox: Inbox) -> ContactInbox | None:
    """Return the contact's identity record in ``inbox`` (oldest first if several)."""

    stmt = (
        select(ContactInbox)
        .where(
            ContactInbox.contact_id == contact.id,
            ContactInbox.inbox_id == inbox.id,
        )
        .order_by(ContactInbox.id.asc())
        .limit(1)
    )
    return db.scalar(stmt)
