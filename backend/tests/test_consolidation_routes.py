"""HTTP-level tests for consolidation and identity record views."""

from __future__ import annotations

import unittest
from unittest import mock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from inbox_identity.config import Settings
from inbox_identity.db.dependencies import get_db
from inbox_identity.main import app
from inbox_identity.models.account import Account
from inbox_identity.models.base import Base
from inbox_identity.models.contact import Contact
from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.models.conversation import Conversation
from inbox_identity.models.identity_merge_audit import IdentityMergeAudit
from inbox_identity.models.inbox import Inbox

PAYLOAD = {"phone": "5511912345678", "lid": "12345678", "identifier": "12345678@lid"}


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class ConsolidationRouteTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(cls.engine, "connect", _enable_sqlite_foreign_keys)
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

        def _override_get_db():
            db = cls.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _override_get_db
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        app.dependency_overrides.pop(get_db, None)
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()
        account = Account(name="Acme")
        self.db.add(account)
        self.db.flush()
        inbox = Inbox(account_id=account.id, name="WhatsApp")
        self.db.add(inbox)
        self.db.flush()
        contact = Contact(account_id=account.id, phone_number="+5511912345678", identifier="12345678@lid")
        self.db.add(contact)
        self.db.flush()
        lid_record = ContactInbox(inbox_id=inbox.id, contact_id=contact.id, source_id="12345678")
        phone_record = ContactInbox(inbox_id=inbox.id, contact_id=contact.id, source_id="5511912345678")
        self.db.add_all([lid_record, phone_record])
        self.db.flush()
        self.db.add_all(
            [
                Conversation(
                    account_id=account.id,
                    inbox_id=inbox.id,
                    contact_id=contact.id,
                    contact_inbox_id=phone_record.id,
                ),
                Conversation(
                    account_id=account.id,
                    inbox_id=inbox.id,
                    contact_id=contact.id,
                    contact_inbox_id=lid_record.id,
                ),
            ]
        )
        self.db.commit()
        self.inbox_id = inbox.id
        self.lid_record_id = lid_record.id

    def tearDown(self) -> None:
        self.db.close()

    def test_consolidate_merges_and_lists_result(self) -> None:
        response = self.client.post(f"/inboxes/{self.inbox_id}/contact-inboxes/consolidate", json=PAYLOAD)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["data"],
            {"inbox_id": self.inbox_id, "outcome": "merged", "applied": True},
        )

        records = self.client.get(f"/inboxes/{self.inbox_id}/contact-inboxes").json()["data"]
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]["id"], self.lid_record_id)
        self.assertEqual(records[0]["source_id"], "12345678")
        self.assertEqual(records[0]["conversation_count"], 2)

        audits = self.client.get(f"/inboxes/{self.inbox_id}/identity-merges").json()["data"]
        self.assertEqual(len(audits), 1)
        self.assertEqual(audits[0]["branch"], "merge")

    def test_repeated_request_reports_no_change(self) -> None:
        self.client.post(f"/inboxes/{self.inbox_id}/contact-inboxes/consolidate", json=PAYLOAD)
        response = self.client.post(f"/inboxes/{self.inbox_id}/contact-inboxes/consolidate", json=PAYLOAD)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["applied"])

    def test_unknown_inbox_returns_404(self) -> None:
        response = self.client.post("/inboxes/9999/contact-inboxes/consolidate", json=PAYLOAD)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get("/inboxes/9999/contact-inboxes").status_code, 404)

    def test_blank_keys_are_rejected(self) -> None:
        response = self.client.post(
            f"/inboxes/{self.inbox_id}/contact-inboxes/consolidate",
            json={**PAYLOAD, "lid": ""},
        )
        self.assertEqual(response.status_code, 422)

    def test_disabled_feature_leaves_records_untouched(self) -> None:
        with mock.patch(
            "inbox_identity.routers.consolidation.get_settings",
            return_value=Settings(enable_identity_consolidation=False),
        ):
            response = self.client.post(f"/inboxes/{self.inbox_id}/contact-inboxes/consolidate", json=PAYLOAD)

        self.assertEqual(response.json()["data"]["outcome"], "disabled")
        records = self.client.get(f"/inboxes/{self.inbox_id}/contact-inboxes").json()["data"]
        self.assertEqual(len(records), 2)

    def _reset_tables(self) -> None:
        self.db.execute(delete(IdentityMergeAudit))
        self.db.execute(delete(Conversation))
        self.db.execute(delete(ContactInbox))
        self.db.execute(delete(Contact))
        self.db.execute(delete(Inbox))
        self.db.execute(delete(Account))
        self.db.commit()


if __name__ == "__main__":
    unittest.main()
