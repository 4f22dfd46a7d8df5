"""Collision checks run before any contact or identity record is rewritten."""

from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from inbox_identity.models.contact import Contact
from inbox_identity.services.lookups import format_phone_number


class ContactKeyField(str, Enum):
    """Contact columns that must stay unique per account."""

    IDENTIFIER = "identifier"
    PHONE_NUMBER = "phone_number"


_FIELD_COLUMNS = {
    ContactKeyField.IDENTIFIER: Contact.identifier,
    ContactKeyField.PHONE_NUMBER: Contact.phone_number,
}


def has_conflicting_contact(
    db: Session,
    account_id: int,
    field: ContactKeyField,
    value: str,
    excluded_contact_id: int,
) -> bool:
    """Return True when a contact other than ``excluded_contact_id`` already holds ``value``."""

    column = _FIELD_COLUMNS[field]
    stmt = (
        select(Contact.id)
        .where(
            Contact.account_id == account_id,
            column == value,
            Contact.id != excluded_contact_id,
        )
        .limit(1)
    )
    return db.scalar(stmt) is not None


def identifier_conflict(db: Session, account_id: int, contact: Contact, identifier: str) -> bool:
    return has_conflicting_contact(db, account_id, ContactKeyField.IDENTIFIER, identifier, contact.id)


def phone_conflict(db: Session, account_id: int, contact: Contact, phone: str) -> bool:
    return has_conflicting_contact(
        db,
        account_id,
        ContactKeyField.PHONE_NUMBER,
        format_phone_number(phone),
        contact.id,
    )
