"""Run one contact inbox consolidation pass against the configured database.

Usage (from repository root):
    python backend/scripts/consolidate_inbox.py --inbox-id 1 --phone 5511912345678 --lid 12345678

Usage (from backend directory):
    python scripts/consolidate_inbox.py --inbox-id 1 --phone 5511912345678 --lid 12345678
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Make `inbox_identity` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from inbox_identity.db.session import SessionLocal
from inbox_identity.services.consolidation import consolidate_contact_inboxes
from inbox_identity.services.database import list_contact_inboxes
from inbox_identity.services.lookups import get_inbox


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Consolidate phone-keyed and LID-keyed contact inboxes.")
    parser.add_argument("--inbox-id", type=int, required=True, help="Inbox to reconcile.")
    parser.add_argument("--phone", required=True, help="Phone key without the leading '+'.")
    parser.add_argument("--lid", required=True, help="Linked identity key issued by the provider.")
    parser.add_argument(
        "--identifier",
        default=None,
        help="Contact identifier to assign (default: '<lid>@lid').",
    )
    return parser.parse_args()


def main() -> int:
    """Run the pass and print the outcome with the resulting identity records."""

    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    identifier: str = args.identifier or f"{args.lid}@lid"

    with SessionLocal() as db:
        inbox = get_inbox(db, args.inbox_id)
        if inbox is None:
            print(f"inbox_id={args.inbox_id} not found", file=sys.stderr)
            return 1

        outcome = consolidate_contact_inboxes(
            db,
            inbox,
            phone=args.phone,
            lid=args.lid,
            identifier=identifier,
        )
        records = list_contact_inboxes(db, inbox.id)

    print(f"outcome={outcome.value}")
    print(f"applied={outcome.applied}")
    print()
    print("Contact inboxes:")
    for record in records:
        print(
            f"  id={record.id} contact_id={record.contact_id} "
            f"source_id={record.source_id} conversations={record.conversation_count}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
