"""
Unit tests for ReferralWriter.

Tests verify:
- a save creates one PENDING_REVIEW referral with encoded skills
- a duplicate (requisition, candidate) save is swallowed
- a save for a vanished requisition is a silent drop
"""
import pytest

from core.referral import ReferralWriter
from database.models import ReferralStatus, Requisition, RequisitionStatus
from database.uow import talent_uow
from tests.fixtures.talent_fixtures import add_requisition, add_candidate


@pytest.mark.db
class TestReferralWriter:

    @pytest.fixture(autouse=True)
    def _rows(self, database, document_store):
        self.requisition_id = add_requisition(document_store)
        self.candidate_id = add_candidate(document_store)
        self.writer = ReferralWriter()

    def test_save_creates_pending_referral(self):
        referral = self.writer.save(self.requisition_id, self.candidate_id, 92, "Good fit.", ["Java", "SQL"])

        assert referral is not None
        with talent_uow() as repo:
            stored = repo.referrals.get_by_id(referral.id)
            assert stored.status == ReferralStatus.PENDING_REVIEW
            assert stored.match_score == 92
            assert stored.justification == "Good fit."
            assert stored.matching_skills == "Java,SQL"
            assert stored.matching_skills_list == ["Java", "SQL"]

    def test_duplicate_save_is_swallowed(self):
        first = self.writer.save(self.requisition_id, self.candidate_id, 92, "Good fit.", ["Java"])
        second = self.writer.save(self.requisition_id, self.candidate_id, 40, "Rescored.", [])

        assert first is not None
        assert second is None
        with talent_uow() as repo:
            referrals = repo.referrals.list_for_requisition(self.requisition_id)
            assert len(referrals) == 1
            assert referrals[0].match_score == 92

    def test_vanished_requisition_is_dropped(self):
        with talent_uow() as repo:
            repo.db.delete(repo.db.get(Requisition, self.requisition_id))

        result = self.writer.save(self.requisition_id, self.candidate_id, 92, "Good fit.", ["Java"])

        assert result is None
        with talent_uow() as repo:
            assert repo.referrals.get_existing(self.requisition_id, self.candidate_id) is None

    def test_closed_requisition_is_dropped(self):
        with talent_uow() as repo:
            repo.requisitions.set_status(self.requisition_id, RequisitionStatus.CLOSED)

        result = self.writer.save(self.requisition_id, self.candidate_id, 92, "Good fit.", ["Java"])

        assert result is None
        with talent_uow() as repo:
            assert repo.referrals.get_existing(self.requisition_id, self.candidate_id) is None

    def test_empty_skills_stored_as_null(self):
        referral = self.writer.save(self.requisition_id, self.candidate_id, 10, "", [])

        with talent_uow() as repo:
            stored = repo.referrals.get_by_id(referral.id)
            assert stored.matching_skills is None
            assert stored.matching_skills_list == []
