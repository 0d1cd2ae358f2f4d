"""Tests for govtally.votes.ballots and govtally.votes.colors."""

import logging

import pytest
from pydantic import ValidationError

from govtally.schemas.scores import ScoreBreakdown
from govtally.schemas.votes import Ballot, ChoiceColor, RawBallot
from govtally.votes.ballots import (
    create_votes,
    drop_invalid_ballots,
    normalize_power,
    sort_votes_by_power,
    to_proposal_ids,
)
from govtally.votes.colors import classify_choice

# ── Factories ──────────────────────────────────────────────────────


def _breakdown(total: int, delegated: int = 0) -> ScoreBreakdown:
    return ScoreBreakdown(total_vp=total, delegated_vp=delegated, own_vp=total - delegated)


def _raw(voter: str, choice: int, created: object = "1690000000") -> dict:
    return {"voter": voter, "choice": choice, "created": created}


# ── classify_choice ──────────────────────────────────────────────


class TestClassifyChoice:
    @pytest.mark.parametrize("label", ["yes", "YES", "Yes", "for", "FOR", "approve", "Approve"])
    def test_approve_labels(self, label):
        assert classify_choice(label, 5) == ChoiceColor.APPROVE

    @pytest.mark.parametrize("label", ["no", "No", "against", "AGAINST", "reject", "Reject"])
    def test_reject_labels(self, label):
        assert classify_choice(label, 5) == ChoiceColor.REJECT

    def test_no_partial_match(self):
        assert classify_choice("Yes, with changes", 2) == 2
        assert classify_choice("nope", 3) == 3

    def test_palette_bucket_wraps(self):
        assert classify_choice("Option", 0) == 0
        assert classify_choice("Option", 7) == 7
        assert classify_choice("Option", 8) == 0
        assert classify_choice("Option", 13) == 5

    def test_idempotent(self):
        assert classify_choice("YES", 0) == classify_choice("yes", 0) == ChoiceColor.APPROVE


# ── create_votes ─────────────────────────────────────────────────


class TestCreateVotes:
    def test_merges_power_by_address(self):
        balances = {"0xalice": _breakdown(70), "0xbob": _breakdown(30, 10)}
        votes = create_votes([_raw("0xAlice", 1), _raw("0xBob", 2)], balances)

        assert set(votes) == {"0xalice", "0xbob"}
        assert votes["0xalice"].vp == 70
        assert votes["0xalice"].choice == 1
        assert votes["0xbob"].vp == 30
        assert votes["0xbob"].voter == "0xbob"

    def test_balance_keys_compared_lowercased(self):
        votes = create_votes([_raw("0xabc", 1)], {"0xABC": _breakdown(12)})
        assert votes["0xabc"].vp == 12

    def test_missing_balance_defaults_to_zero(self):
        votes = create_votes([_raw("0xnobody", 2)], {})
        assert votes["0xnobody"].vp == 0

    def test_last_vote_wins(self):
        raw = [_raw("0xA", 1, 100), _raw("0xa", 2, 200)]
        votes = create_votes(raw, {"0xa": _breakdown(5)})
        assert len(votes) == 1
        assert votes["0xa"].choice == 2
        assert votes["0xa"].timestamp == 200

    @pytest.mark.parametrize(
        "created,expected",
        [("1690000000", 1690000000), (1690000000, 1690000000), (1690000000.0, 1690000000)],
    )
    def test_timestamp_coercion(self, created, expected):
        votes = create_votes([_raw("0xa", 1, created)], {})
        assert votes["0xa"].timestamp == expected
        assert votes["0xa"].cast_at == expected

    @pytest.mark.parametrize("created", ["inf", "-inf", "nan", float("inf"), 1e400])
    def test_non_finite_timestamp_rejected(self, created):
        with pytest.raises(ValidationError, match="finite timestamp"):
            create_votes([_raw("0xa", 1, created)], {})

    def test_non_numeric_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            create_votes([_raw("0xa", 1, "yesterday")], {})

    def test_accepts_raw_ballot_models(self):
        raw = RawBallot(voter="0xA", choice=1, created="42")
        votes = create_votes([raw], {"0xa": _breakdown(3)})
        assert votes["0xa"] == Ballot(voter="0xa", choice=1, vp=3, timestamp=42)

    def test_ballots_are_immutable(self):
        votes = create_votes([_raw("0xa", 1)], {})
        with pytest.raises(ValidationError):
            votes["0xa"].vp = 100


# ── Helpers ──────────────────────────────────────────────────────


class TestNormalizePower:
    @pytest.mark.parametrize(
        "value,expected",
        [(None, 0), (-1, 0), (float("nan"), 0), (float("inf"), 0), (0, 0), (12, 12), (1.5, 1.5)],
    )
    def test_values(self, value, expected):
        assert normalize_power(value) == expected


class TestSortVotesByPower:
    def test_descending_power(self):
        votes = {
            "a": Ballot(voter="a", choice=1, vp=5),
            "b": Ballot(voter="b", choice=2, vp=50),
            "c": Ballot(voter="c", choice=1, vp=20),
        }
        assert [address for address, _ in sort_votes_by_power(votes)] == ["b", "c", "a"]

    def test_empty(self):
        assert sort_votes_by_power({}) == []


class TestToProposalIds:
    _ID = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"

    def test_none_and_empty(self):
        assert to_proposal_ids(None) == []
        assert to_proposal_ids("") == []
        assert to_proposal_ids([]) == []

    def test_single_id(self):
        assert to_proposal_ids(self._ID) == [self._ID]

    def test_filters_invalid(self):
        ids = [self._ID, "not-a-uuid", "3f2504e04f8911d39a0c0305e82c3301", self._ID.upper()]
        assert to_proposal_ids(ids) == [self._ID, self._ID.upper()]


class TestDropInvalidBallots:
    def test_drops_out_of_range(self, caplog):
        votes = {
            "a": Ballot(voter="a", choice=1, vp=1),
            "b": Ballot(voter="b", choice=3, vp=1),
            "c": Ballot(voter="c", choice=0, vp=1),
        }
        with caplog.at_level(logging.WARNING, logger="govtally.votes.ballots"):
            kept = drop_invalid_ballots(votes, 2)
        assert list(kept) == ["a"]
        assert "Dropping ballot from b" in caplog.text
        assert "Dropping ballot from c" in caplog.text
        assert len(votes) == 3
