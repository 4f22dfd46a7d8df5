"""Consolidation of phone-keyed and LID-keyed contact inboxes.

A WhatsApp-style channel first addresses a contact by phone number and later
by a linked identity token (LID). Contact inboxes are created lazily, so one
contact can end up with a phone-keyed record and a LID-keyed record in the
same inbox, each holding its own conversations. One consolidation pass
reconciles a single ``(inbox, phone, lid, identifier)`` tuple:

* both records exist for the same contact: conversations move to the LID
  record and the phone record is deleted;
* only the phone record exists: it is re-keyed to the LID and the contact's
  identifier and phone number are updated;
* both exist for different contacts: nothing happens;
* no phone record exists: the contact is located by stored phone number and
  its record in this inbox is re-keyed to the LID.

Every unsafe or ambiguous case is a silent no-op. Persistence errors roll
back the pass and propagate to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from time import perf_counter

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from inbox_identity.models.contact import Contact
from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.models.conversation import Conversation
from inbox_identity.models.identity_merge_audit import IdentityMergeAudit
from inbox_identity.models.inbox import Inbox
from inbox_identity.services.conflicts import identifier_conflict, phone_conflict
from inbox_identity.services.lookups import (
    find_by_lid_key,
    find_by_phone_key,
    find_contact_by_phone_number,
    find_contact_inbox_for_contact,
    format_phone_number,
)

logger = logging.getLogger(__name__)


class ConsolidationBranch(str, Enum):
    MERGE = "merge"
    MIGRATE_IN_PLACE = "migrate_in_place"
    CROSS_CONTACT = "cross_contact"
    FALLBACK_MIGRATE = "fallback_migrate"


class ConsolidationOutcome(str, Enum):
    """Terminal result of one consolidation pass."""

    SKIPPED_BLANK_INPUT = "skipped_blank_input"
    SKIPPED_SAME_KEY = "skipped_same_key"
    MERGED = "merged"
    MIGRATED = "migrated"
    FALLBACK_MIGRATED = "fallback_migrated"
    CROSS_CONTACT = "cross_contact"
    IDENTIFIER_CONFLICT = "identifier_conflict"
    PHONE_CONFLICT = "phone_conflict"
    LID_KEY_TAKEN = "lid_key_taken"
    NO_CONTACT = "no_contact"
    NO_CONTACT_INBOX = "no_contact_inbox"

    @property
    def applied(self) -> bool:
        return self in _APPLIED_OUTCOMES


_APPLIED_OUTCOMES = frozenset(
    {
        ConsolidationOutcome.MERGED,
        ConsolidationOutcome.MIGRATED,
        ConsolidationOutcome.FALLBACK_MIGRATED,
    }
)


def decide_branch(
    phone_record: ContactInbox | None,
    lid_record: ContactInbox | None,
) -> ConsolidationBranch:
    """Pick the consolidation branch for the records found in an inbox."""

    phone_exists = phone_record is not None
    lid_exists = lid_record is not None
    same_contact = phone_exists and lid_exists and phone_record.contact_id == lid_record.contact_id

    match (phone_exists, lid_exists, same_contact):
        case (True, True, True):
            return ConsolidationBranch.MERGE
        case (True, False, _):
            return ConsolidationBranch.MIGRATE_IN_PLACE
        case (True, True, False):
            return ConsolidationBranch.CROSS_CONTACT
        case (False, _, _):
            return ConsolidationBranch.FALLBACK_MIGRATE
    raise AssertionError("unreachable consolidation branch")


def consolidate_contact_inboxes(
    db: Session,
    inbox: Inbox,
    *,
    phone: str | None,
    lid: str | None,
    identifier: str | None,
) -> ConsolidationOutcome:
    """Run one consolidation pass for ``inbox``.

    The returned outcome is informational; all effects are persisted through
    ``db``, which is committed on every applied branch and rolled back on
    failure, so it must not carry unrelated pending changes.
    """

    if _is_blank(phone) or _is_blank(lid) or _is_blank(identifier):
        return _log_outcome(inbox, ConsolidationOutcome.SKIPPED_BLANK_INPUT)
    if phone == lid:
        return _log_outcome(inbox, ConsolidationOutcome.SKIPPED_SAME_KEY)

    phone_record = find_by_phone_key(db, inbox, phone)
    lid_record = find_by_lid_key(db, inbox, lid)
    branch = decide_branch(phone_record, lid_record)

    started = perf_counter()
    try:
        match branch:
            case ConsolidationBranch.MERGE:
                outcome = _merge_contact_inboxes(db, inbox, phone_record, lid_record, phone, lid, identifier)
            case ConsolidationBranch.MIGRATE_IN_PLACE:
                outcome = _migrate_phone_to_lid(db, inbox, phone_record, phone, lid, identifier)
            case ConsolidationBranch.CROSS_CONTACT:
                outcome = ConsolidationOutcome.CROSS_CONTACT
            case ConsolidationBranch.FALLBACK_MIGRATE:
                outcome = _migrate_contact_found_by_phone(db, inbox, phone, lid, identifier)
    except Exception:
        db.rollback()
        logger.exception(
            "identity.consolidation_failed inbox_id=%s branch=%s elapsed_ms=%.2f",
            inbox.id,
            branch.value,
            (perf_counter() - started) * 1000.0,
        )
        raise

    return _log_outcome(inbox, outcome, branch=branch, started=started)


def _reparent_conversations(db: Session, source: ContactInbox, target: ContactInbox) -> list[int]:
    """Point every conversation of ``source`` at ``target``; return the moved ids."""

    moved_ids = list(
        db.scalars(
            select(Conversation.id)
            .where(Conversation.contact_inbox_id == source.id)
            .order_by(Conversation.id.asc())
        )
    )
    if moved_ids:
        db.execute(
            update(Conversation)
            .where(Conversation.contact_inbox_id == source.id)
            .values(contact_inbox_id=target.id)
        )
    return moved_ids


def _merge_contact_inboxes(
    db: Session,
    inbox: Inbox,
    phone_record: ContactInbox,
    lid_record: ContactInbox,
    phone: str,
    lid: str,
    identifier: str,
) -> ConsolidationOutcome:
    # Conversations must leave the phone record before it is deleted.
    moved_ids = _reparent_conversations(db, phone_record, lid_record)
    removed_id = phone_record.id
    db.delete(phone_record)
    db.add(
        IdentityMergeAudit(
            inbox_id=inbox.id,
            contact_id=lid_record.contact_id,
            branch=ConsolidationBranch.MERGE.value,
            phone=phone,
            lid=lid,
            identifier=identifier,
            surviving_contact_inbox_id=lid_record.id,
            removed_contact_inbox_id=removed_id,
            previous_source_id=phone,
            moved_conversation_ids_json=moved_ids,
        )
    )
    db.commit()
    return ConsolidationOutcome.MERGED


def _migrate_phone_to_lid(
    db: Session,
    inbox: Inbox,
    phone_record: ContactInbox,
    phone: str,
    lid: str,
    identifier: str,
) -> ConsolidationOutcome:
    contact = db.get(Contact, phone_record.contact_id)
    if identifier_conflict(db, inbox.account_id, contact, identifier):
        return ConsolidationOutcome.IDENTIFIER_CONFLICT
    if phone_conflict(db, inbox.account_id, contact, phone):
        return ConsolidationOutcome.PHONE_CONFLICT

    phone_record.source_id = lid
    contact.identifier = identifier
    contact.phone_number = format_phone_number(phone)
    db.add(
        IdentityMergeAudit(
            inbox_id=inbox.id,
            contact_id=contact.id,
            branch=ConsolidationBranch.MIGRATE_IN_PLACE.value,
            phone=phone,
            lid=lid,
            identifier=identifier,
            surviving_contact_inbox_id=phone_record.id,
            previous_source_id=phone,
            moved_conversation_ids_json=[],
        )
    )
    db.commit()
    return ConsolidationOutcome.MIGRATED


def _migrate_contact_found_by_phone(
    db: Session,
    inbox: Inbox,
    phone: str,
    lid: str,
    identifier: str,
) -> ConsolidationOutcome:
    contact = find_contact_by_phone_number(db, inbox.account_id, phone)
    if contact is None:
        return ConsolidationOutcome.NO_CONTACT
    contact_inbox = find_contact_inbox_for_contact(db, contact, inbox)
    if contact_inbox is None:
        return ConsolidationOutcome.NO_CONTACT_INBOX
    if find_by_lid_key(db, inbox, lid) is not None:
        return ConsolidationOutcome.LID_KEY_TAKEN
    # Phone number already matches, so only the identifier is checked here.
    if identifier_conflict(db, inbox.account_id, contact, identifier):
        return ConsolidationOutcome.IDENTIFIER_CONFLICT

    previous_source_id = contact_inbox.source_id
    contact.identifier = identifier
    contact_inbox.source_id = lid
    db.add(
        IdentityMergeAudit(
            inbox_id=inbox.id,
            contact_id=contact.id,
            branch=ConsolidationBranch.FALLBACK_MIGRATE.value,
            phone=phone,
            lid=lid,
            identifier=identifier,
            surviving_contact_inbox_id=contact_inbox.id,
            previous_source_id=previous_source_id,
            moved_conversation_ids_json=[],
        )
    )
    db.commit()
    return ConsolidationOutcome.FALLBACK_MIGRATED


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _log_outcome(
    inbox: Inbox,
    outcome: ConsolidationOutcome,
    *,
    branch: ConsolidationBranch | None = None,
    started: float | None = None,
) -> ConsolidationOutcome:
    elapsed_ms = (perf_counter() - started) * 1000.0 if started is not None else 0.0
    event = "identity.consolidation_applied" if outcome.applied else "identity.consolidation_skipped"
    logger.info(
        "%s inbox_id=%s branch=%s outcome=%s elapsed_ms=%.2f",
        event,
        inbox.id,
        branch.value if branch is not None else "-",
        outcome.value,
        elapsed_ms,
    )
    return outcome
