"""Vote Tally Engine — reduces ballots for one ContentVote to counts, percentages, winner.

Invariants:
    - tally() is PURE: no IO, input sequences are never mutated
    - sum(counts) == total; options nobody voted for count 0
    - At most one ballot per voter: when a voter id repeats, the last ballot wins
    - Ballots pointing outside [0, len(options)) are ignored
    - percentages[i] = round-half-up(counts[i] / total * 100), all 0 when total == 0
    - Winner = strictly highest COUNT (never percentage); ties go to the lowest index;
      no winner when total == 0
    - The caller's own ballot is reported as user_vote and counted exactly once

Design Decisions:
    - Round-half-up instead of round(): Python's banker's rounding would show 12.5% as 12
    - Winner carries the option text so confirmations can name it without a second lookup
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class Ballot:
    """One voter's choice. user_id is optional for anonymous reductions."""
    option_index: int
    user_id: UUID | None = None


@dataclass(frozen=True)
class Winner:
    index: int
    count: int
    text: str


@dataclass(frozen=True)
class Tally:
    counts: list[int]
    percentages: list[int]
    total: int
    winner: Winner | None
    user_vote: int | None = None
    options: list[str] = field(default_factory=list)

    def option_rows(self) -> list[dict]:
        """Per-option rows for API responses."""
        return [
            {"index": i, "text": text, "votes": self.counts[i], "percentage": self.percentages[i]}
            for i, text in enumerate(self.options)
        ]


def percentage(count: int, total: int) -> int:
    """Round-half-up share of total, 0 when there are no ballots."""
    if total <= 0:
        return 0
    return int(math.floor(count / total * 100 + 0.5))


def pick_winner(counts: Sequence[int], options: Sequence[str]) -> Winner | None:
    """Strictly highest count wins; first-listed option wins ties."""
    if not counts or sum(counts) == 0:
        return None
    best = 0
    for i in range(1, len(counts)):
        if counts[i] > counts[best]:
            best = i
    return Winner(index=best, count=counts[best], text=options[best])


def _one_per_voter(ballots: Iterable[Ballot]) -> list[Ballot]:
    anonymous: list[Ballot] = []
    by_voter: dict[UUID, Ballot] = {}
    for ballot in ballots:
        if ballot.user_id is None:
            anonymous.append(ballot)
        else:
            by_voter[ballot.user_id] = ballot
    return anonymous + list(by_voter.values())


def tally(
    options: Sequence[str],
    ballots: Iterable[Ballot],
    user_id: UUID | None = None,
) -> Tally:
    """Count ballots per option and pick the winner."""
    counts = [0] * len(options)
    user_vote: int | None = None

    for ballot in _one_per_voter(ballots):
        if not 0 <= ballot.option_index < len(options):
            continue
        counts[ballot.option_index] += 1
        if user_id is not None and ballot.user_id == user_id:
            user_vote = ballot.option_index

    total = sum(counts)
    return Tally(
        counts=counts,
        percentages=[percentage(c, total) for c in counts],
        total=total,
        winner=pick_winner(counts, options),
        user_vote=user_vote,
        options=list(options),
    )
