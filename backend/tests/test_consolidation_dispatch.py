"""Unit tests for consolidation branch selection."""

import unittest

from inbox_identity.models.contact_inbox import ContactInbox
from inbox_identity.services.consolidation import ConsolidationBranch, ConsolidationOutcome, decide_branch


def _record(contact_id: int, source_id: str) -> ContactInbox:
    return ContactInbox(inbox_id=1, contact_id=contact_id, source_id=source_id)


class DecideBranchTests(unittest.TestCase):
    def test_same_contact_records_are_merged(self) -> None:
        branch = decide_branch(_record(7, "5511912345678"), _record(7, "12345678"))
        self.assertEqual(branch, ConsolidationBranch.MERGE)

    def test_phone_record_alone_is_migrated_in_place(self) -> None:
        branch = decide_branch(_record(7, "5511912345678"), None)
        self.assertEqual(branch, ConsolidationBranch.MIGRATE_IN_PLACE)

    def test_records_of_different_contacts_are_cross_contact(self) -> None:
        branch = decide_branch(_record(7, "5511912345678"), _record(8, "12345678"))
        self.assertEqual(branch, ConsolidationBranch.CROSS_CONTACT)

    def test_missing_phone_record_falls_back(self) -> None:
        self.assertEqual(decide_branch(None, None), ConsolidationBranch.FALLBACK_MIGRATE)
        self.assertEqual(decide_branch(None, _record(7, "12345678")), ConsolidationBranch.FALLBACK_MIGRATE)


class ConsolidationOutcomeTests(unittest.TestCase):
    def test_only_mutating_outcomes_are_applied(self) -> None:
        applied = {outcome for outcome in ConsolidationOutcome if outcome.applied}
        self.assertEqual(
            applied,
            {
                ConsolidationOutcome.MERGED,
                ConsolidationOutcome.MIGRATED,
                ConsolidationOutcome.FALLBACK_MIGRATED,
            },
        )


if __name__ == "__main__":
    unittest.main()
