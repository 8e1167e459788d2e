"""
Unit tests for CandidateFilter.

Tests verify:
- the availability pool rule (90-day horizon, boundary inclusive)
- the experience gate (NULL counts as 0, resume required)
- the repository query agrees with the pure predicate
"""
import datetime
from types import SimpleNamespace

import pytest

from core.matcher import CandidateFilter, is_in_pool, passes_experience_gate
from core.matcher.candidate_filter import availability_threshold
from database.models import AvailabilityStatus
from database.uow import talent_uow
from tests.fixtures.talent_fixtures import add_candidate

TODAY = datetime.date(2026, 3, 1)


def _candidate(cid=1, years=5, availability=AvailabilityStatus.AVAILABLE, expected=None, resume="resumes/a.pdf"):
    return SimpleNamespace(
        id=cid,
        years_of_experience=years,
        availability=availability,
        expected_availability_date=expected,
        resume_path=resume,
    )


class TestPoolPredicate:

    def setup_method(self):
        self.threshold = availability_threshold(90, TODAY)

    def test_threshold_is_today_plus_horizon(self):
        assert self.threshold == datetime.date(2026, 5, 30)

    def test_available_is_in_pool(self):
        assert is_in_pool(_candidate(), self.threshold)

    def test_on_project_free_in_89_days_is_in_pool(self):
        expected = TODAY + datetime.timedelta(days=89)
        assert is_in_pool(_candidate(availability=AvailabilityStatus.ON_PROJECT, expected=expected), self.threshold)

    def test_on_project_free_in_exactly_90_days_is_in_pool(self):
        expected = TODAY + datetime.timedelta(days=90)
        assert is_in_pool(_candidate(availability=AvailabilityStatus.ON_PROJECT, expected=expected), self.threshold)

    def test_on_project_free_in_91_days_is_not_in_pool(self):
        expected = TODAY + datetime.timedelta(days=91)
        assert not is_in_pool(_candidate(availability=AvailabilityStatus.ON_PROJECT, expected=expected), self.threshold)

    def test_on_project_without_date_is_not_in_pool(self):
        assert not is_in_pool(_candidate(availability=AvailabilityStatus.ON_PROJECT), self.threshold)

    def test_reserved_is_never_in_pool(self):
        assert not is_in_pool(_candidate(availability=AvailabilityStatus.RESERVED, expected=TODAY), self.threshold)


class TestExperienceGate:

    def test_exact_requirement_passes(self):
        assert passes_experience_gate(_candidate(years=5), 5)

    def test_below_requirement_fails(self):
        assert not passes_experience_gate(_candidate(years=4), 5)

    def test_null_years_counts_as_zero(self):
        assert passes_experience_gate(_candidate(years=None), 0)
        assert not passes_experience_gate(_candidate(years=None), 1)

    def test_null_requirement_counts_as_zero(self):
        assert passes_experience_gate(_candidate(years=0), None)

    def test_missing_resume_fails(self):
        assert not passes_experience_gate(_candidate(resume=None), 0)

    def test_apply_experience_gate_keeps_order(self):
        candidates = [
            _candidate(cid=1, years=8),
            _candidate(cid=2, years=2),
            _candidate(cid=3, years=5, resume=None),
            _candidate(cid=4, years=5),
        ]

        eligible = CandidateFilter().apply_experience_gate(candidates, 5)

        assert [c.id for c in eligible] == [1, 4]

    def test_gate_agrees_with_predicate(self):
        candidates = [_candidate(cid=i, years=y) for i, y in enumerate([None, 0, 3, 5, 9])]
        eligible = CandidateFilter().apply_experience_gate(candidates, 3)

        assert eligible == [c for c in candidates if passes_experience_gate(c, 3)]


@pytest.mark.db
class TestSelectPool:

    def test_query_matches_predicate(self, database):
        today = datetime.date.today()
        ids = {
            'available': add_candidate(full_name="A"),
            'soon': add_candidate(
                full_name="B", availability=AvailabilityStatus.ON_PROJECT,
                expected_date=today + datetime.timedelta(days=89)
            ),
            'late': add_candidate(
                full_name="C", availability=AvailabilityStatus.ON_PROJECT,
                expected_date=today + datetime.timedelta(days=91)
            ),
            'undated': add_candidate(full_name="D", availability=AvailabilityStatus.ON_PROJECT),
            'reserved': add_candidate(full_name="E", availability=AvailabilityStatus.RESERVED),
        }

        with talent_uow() as repo:
            pool = CandidateFilter(horizon_days=90).select_pool(repo, today=today)
            pool_ids = {c.id for c in pool}
            threshold = availability_threshold(90, today)
            everyone = [repo.candidates.get_by_id(i) for i in ids.values()]
            expected_ids = {c.id for c in everyone if is_in_pool(c, threshold)}

        assert pool_ids == {ids['available'], ids['soon']}
        assert pool_ids == expected_ids

    def test_horizon_override(self, database):
        today = datetime.date.today()
        cid = add_candidate(
            availability=AvailabilityStatus.ON_PROJECT,
            expected_date=today + datetime.timedelta(days=30)
        )

        with talent_uow() as repo:
            narrow = CandidateFilter().select_pool(repo, horizon_days=10, today=today)
            wide = CandidateFilter().select_pool(repo, horizon_days=30, today=today)

        assert cid not in {c.id for c in narrow}
        assert cid in {c.id for c in wide}
