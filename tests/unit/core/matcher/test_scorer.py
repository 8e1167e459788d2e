"""
Unit tests for MatchScorer reply handling.

Tests verify:
- well-formed replies, fenced or bare, give the same MatchScore
- scores are clamped to 0..100
- malformed replies raise InferenceResponseError
"""
import json

import pytest

from core.exceptions import InferenceResponseError
from core.matcher import MatchScorer
from tests.mocks.llm_mocks import FakeLLM, SCORING_MARKER

REPLY = '{"score": 92, "justification": "Strong Java background.", "matching_skills": ["Java", "Spring Boot", "SQL"]}'


class TestMatchScorer:

    def test_score_parses_reply(self):
        scorer = MatchScorer(FakeLLM(score=REPLY))

        result = scorer.score("requisition", "resume")

        assert result.score == 92
        assert result.justification == "Strong Java background."
        assert result.matching_skills == ["Java", "Spring Boot", "SQL"]

    def test_fenced_and_bare_replies_are_equivalent(self):
        assert MatchScorer.parse_response(f"```json\n{REPLY}\n```") == MatchScorer.parse_response(REPLY)
        assert MatchScorer.parse_response(f"```\n{REPLY}\n```") == MatchScorer.parse_response(REPLY)

    def test_prompt_contains_both_texts(self):
        llm = FakeLLM(score=REPLY)
        MatchScorer(llm).score("REQ-TEXT", "RESUME-TEXT")

        prompt = llm.calls_for(SCORING_MARKER)[0]
        assert "REQ-TEXT" in prompt
        assert "RESUME-TEXT" in prompt

    @pytest.mark.parametrize("raw, expected", [(150, 100), (-5, 0), ("88", 88), (73.6, 73)])
    def test_score_is_coerced_and_clamped(self, raw, expected):
        reply = json.dumps({"score": raw, "justification": "", "matching_skills": []})

        assert MatchScorer.parse_response(reply).score == expected

    def test_null_skills_become_empty(self):
        result = MatchScorer.parse_response('{"score": 40, "justification": "Weak.", "matching_skills": null}')

        assert result.matching_skills == []

    def test_missing_score_raises(self):
        with pytest.raises(InferenceResponseError):
            MatchScorer.parse_response('{"justification": "no score"}')

    def test_non_numeric_score_raises(self):
        with pytest.raises(InferenceResponseError):
            MatchScorer.parse_response('{"score": "high"}')

    def test_skills_must_be_a_list(self):
        with pytest.raises(InferenceResponseError):
            MatchScorer.parse_response('{"score": 50, "matching_skills": "Java, SQL"}')

    def test_prose_reply_raises(self):
        with pytest.raises(InferenceResponseError):
            MatchScorer.parse_response("The candidate scores 92.")
