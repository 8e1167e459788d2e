"""
Unit tests for ReferralStateMachine.

Tests verify the candidate side effect of every decision, the one-active-
referral rule, and that the status and availability writes commit together.
"""
import datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import (
    CandidateAlreadyEngagedError,
    DecisionPersistenceError,
    InvalidTransitionError,
    ReferralNotFoundError,
)
from core.referral import ReferralStateMachine, availability_after
from database.models import AvailabilityStatus, ReferralStatus
from tests.fixtures.talent_fixtures import (
    add_candidate,
    add_referral,
    add_requisition,
    get_candidate,
    get_referral,
)


class TestAvailabilityAfter:

    @pytest.mark.parametrize("previous, new, expected", [
        (ReferralStatus.PENDING_REVIEW, ReferralStatus.SELECTED, AvailabilityStatus.ON_PROJECT),
        (ReferralStatus.PENDING_REVIEW, ReferralStatus.RESERVED, AvailabilityStatus.RESERVED),
        (ReferralStatus.RESERVED, ReferralStatus.REJECTED, AvailabilityStatus.AVAILABLE),
        (ReferralStatus.PENDING_REVIEW, ReferralStatus.REJECTED, None),
        (ReferralStatus.SELECTED, ReferralStatus.REJECTED, None),
        (ReferralStatus.RESERVED, ReferralStatus.SELECTED, AvailabilityStatus.ON_PROJECT),
    ])
    def test_side_effects(self, previous, new, expected):
        assert availability_after(previous, new) == expected


@pytest.mark.db
class TestApplyDecision:

    @pytest.fixture(autouse=True)
    def _rows(self, database, document_store):
        self.store = document_store
        self.requisition_id = add_requisition(document_store)
        self.candidate_id = add_candidate(document_store)
        self.referral_id = add_referral(self.requisition_id, self.candidate_id)
        self.machine = ReferralStateMachine()

    def test_selected_puts_candidate_on_project(self):
        decision = self.machine.apply_decision(self.referral_id, ReferralStatus.SELECTED)

        assert decision.previous_status == ReferralStatus.PENDING_REVIEW
        assert decision.status == ReferralStatus.SELECTED
        assert decision.availability_changed
        assert get_referral(self.referral_id).status == ReferralStatus.SELECTED
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.ON_PROJECT

    def test_reserved_reserves_candidate(self):
        self.machine.apply_decision(self.referral_id, "RESERVED")

        assert get_referral(self.referral_id).status == ReferralStatus.RESERVED
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.RESERVED

    def test_rejecting_pending_leaves_candidate_untouched(self):
        decision = self.machine.apply_decision(self.referral_id, ReferralStatus.REJECTED)

        assert not decision.availability_changed
        assert get_referral(self.referral_id).status == ReferralStatus.REJECTED
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.AVAILABLE

    def test_rejecting_reserved_frees_candidate(self):
        self.machine.apply_decision(self.referral_id, ReferralStatus.RESERVED)
        decision = self.machine.apply_decision(self.referral_id, ReferralStatus.REJECTED)

        assert decision.previous_status == ReferralStatus.RESERVED
        candidate = get_candidate(self.candidate_id)
        assert candidate.availability == AvailabilityStatus.AVAILABLE
        assert candidate.expected_availability_date is None

    def test_rejecting_reserved_clears_expected_date(self):
        candidate_id = add_candidate(
            self.store, full_name="Busy",
            availability=AvailabilityStatus.ON_PROJECT,
            expected_date=datetime.date.today() + datetime.timedelta(days=10),
            resume_text="Python",
        )
        referral_id = add_referral(self.requisition_id, candidate_id, status=ReferralStatus.RESERVED)

        self.machine.apply_decision(referral_id, ReferralStatus.REJECTED)

        candidate = get_candidate(candidate_id)
        assert candidate.availability == AvailabilityStatus.AVAILABLE
        assert candidate.expected_availability_date is None

    def test_pending_review_is_not_a_decision(self):
        with pytest.raises(InvalidTransitionError):
            self.machine.apply_decision(self.referral_id, ReferralStatus.PENDING_REVIEW)

    def test_unknown_status_raises(self):
        with pytest.raises(InvalidTransitionError):
            self.machine.apply_decision(self.referral_id, "HIRED")

    def test_unknown_referral_raises(self):
        with pytest.raises(ReferralNotFoundError):
            self.machine.apply_decision(9999, ReferralStatus.SELECTED)

    def test_second_active_referral_is_refused(self):
        other_requisition = add_requisition(self.store, title="Data Engineer")
        other_referral = add_referral(other_requisition, self.candidate_id)
        self.machine.apply_decision(self.referral_id, ReferralStatus.RESERVED)

        with pytest.raises(CandidateAlreadyEngagedError):
            self.machine.apply_decision(other_referral, ReferralStatus.SELECTED)

        assert get_referral(other_referral).status == ReferralStatus.PENDING_REVIEW
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.RESERVED

    def test_rejecting_is_allowed_while_engaged_elsewhere(self):
        other_requisition = add_requisition(self.store, title="Data Engineer")
        other_referral = add_referral(other_requisition, self.candidate_id)
        self.machine.apply_decision(self.referral_id, ReferralStatus.SELECTED)

        self.machine.apply_decision(other_referral, ReferralStatus.REJECTED)

        assert get_referral(other_referral).status == ReferralStatus.REJECTED
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.ON_PROJECT

    def test_reserved_can_be_promoted_to_selected(self):
        self.machine.apply_decision(self.referral_id, ReferralStatus.RESERVED)
        self.machine.apply_decision(self.referral_id, ReferralStatus.SELECTED)

        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.ON_PROJECT

    def test_failed_write_rolls_back_both_rows(self):
        with patch(
            "database.repository.TalentRepository.flush",
            side_effect=OperationalError("UPDATE", {}, Exception("disk I/O error")),
        ):
            with pytest.raises(DecisionPersistenceError):
                self.machine.apply_decision(self.referral_id, ReferralStatus.SELECTED)

        assert get_referral(self.referral_id).status == ReferralStatus.PENDING_REVIEW
        assert get_candidate(self.candidate_id).availability == AvailabilityStatus.AVAILABLE
