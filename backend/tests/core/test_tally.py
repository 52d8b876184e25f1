"""Vote Tally Engine — tests for pure ballot reduction.

Tests cover:
    - counts sum to total, percentages sum to ~100
    - tie-break favours the lowest index
    - winner chosen by count, not percentage
    - no winner without ballots
    - out-of-range ballots ignored, one ballot per voter
    - user_vote surfaced once
    - round-half-up percentages
"""

import random
from uuid import uuid4

import pytest

from kontekst.core.tally import Ballot, percentage, tally


def _ballots(*indexes):
    return [Ballot(option_index=i, user_id=uuid4()) for i in indexes]


# ─── counts & percentages ────────────────────────────────────────

def test_counts_include_unvoted_options():
    result = tally(["A", "B", "C"], _ballots(0, 0, 2))
    assert result.counts == [2, 0, 1]
    assert result.total == 3


@pytest.mark.parametrize("seed", range(20))
def test_sum_properties_hold_for_random_ballots(seed):
    rng = random.Random(seed)
    options = ["A", "B", "C", "D"][: rng.randint(1, 4)]
    ballots = _ballots(*[rng.randrange(len(options)) for _ in range(rng.randint(1, 60))])
    result = tally(options, ballots)
    assert sum(result.counts) == result.total == len(ballots)
    assert abs(sum(result.percentages) - 100) <= len(options)


def test_no_ballots_all_zero_and_no_winner():
    result = tally(["A", "B"], [])
    assert result.percentages == [0, 0]
    assert result.total == 0
    assert result.winner is None


def test_percentage_rounds_half_up():
    assert percentage(1, 8) == 13  # 12.5
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67


# ─── winner ──────────────────────────────────────────────────────

def test_tie_goes_to_lowest_index():
    result = tally(["A", "B"], _ballots(0, 1, 0, 1))
    assert result.winner.index == 0
    assert result.winner.text == "A"


def test_winner_by_count():
    result = tally(["A", "B"], _ballots(*([0] * 10 + [1] * 3)))
    assert result.winner.index == 0
    assert result.winner.count == 10


def test_later_option_wins_with_strictly_more():
    result = tally(["A", "B", "C"], _ballots(0, 2, 2))
    assert result.winner.index == 2


# ─── ballot hygiene ──────────────────────────────────────────────

def test_out_of_range_ballots_ignored():
    result = tally(["A", "B"], _ballots(0, 5, -1, 1))
    assert result.counts == [1, 1]
    assert result.total == 2


def test_repeated_voter_counted_once_last_wins():
    voter = uuid4()
    ballots = [Ballot(0, voter), Ballot(1, voter)]
    result = tally(["A", "B"], ballots, user_id=voter)
    assert result.counts == [0, 1]
    assert result.user_vote == 1


def test_user_vote_surfaced_without_double_count():
    me = uuid4()
    ballots = _ballots(0, 0) + [Ballot(1, me)]
    result = tally(["A", "B"], ballots, user_id=me)
    assert result.user_vote == 1
    assert result.counts == [2, 1]


def test_user_vote_none_when_user_did_not_vote():
    assert tally(["A", "B"], _ballots(0), user_id=uuid4()).user_vote is None


def test_seventy_thirty_split():
    result = tally(["Yes", "No"], _ballots(*([0] * 7 + [1] * 3)))
    assert result.percentages == [70, 30]
    assert result.winner.text == "Yes"
    assert result.option_rows()[0] == {"index": 0, "text": "Yes", "votes": 7, "percentage": 70}
