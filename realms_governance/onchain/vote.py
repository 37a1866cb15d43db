"""
Vote choices accepted by the CastVote instruction and stored in vote records.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Union

from ..errors import AccountDataError, InvalidVoteWeights
from .util import BorshReader, BorshWriter

FULL_WEIGHT = 100


@dataclass(frozen=True)
class VoteChoice:
    rank: int
    weight_percentage: int


@dataclass(frozen=True)
class Approve:
    """
    Approve the proposal options, one choice per option
    """

    VARIANT = 0
    choices: List[VoteChoice] = field(default_factory=list)


@dataclass(frozen=True)
class Deny:
    VARIANT = 1


@dataclass(frozen=True)
class Abstain:
    VARIANT = 2


@dataclass(frozen=True)
class Veto:
    VARIANT = 3


Vote = Union[Approve, Deny, Abstain, Veto]

VOTE_VARIANTS = {cls.VARIANT: cls for cls in (Approve, Deny, Abstain, Veto)}


def approve_option(option_index: int, options_count: int = 1) -> Approve:
    """
    Single choice approval: full weight on one option and none on the others
    """
    if not 0 <= option_index < options_count:
        raise InvalidVoteWeights(
            f"Option index {option_index} outside of {options_count} options"
        )
    return Approve(
        [
            VoteChoice(rank=0, weight_percentage=FULL_WEIGHT if i == option_index else 0)
            for i in range(options_count)
        ]
    )


def _choice_from_dict(choice) -> VoteChoice:
    try:
        weight = choice.get("weightPercentage", choice.get("weight_percentage"))
        return VoteChoice(rank=int(choice["rank"]), weight_percentage=int(weight))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise InvalidVoteWeights(f"Malformed vote choice {choice!r}") from e


def vote_from_dict(vote: dict) -> Vote:
    """
    Parse the JSON form used by the JS SDK, e.g. {"approve": [[{"rank": 0, "weightPercentage": 100}]]}
    """
    if not isinstance(vote, dict) or len(vote) != 1:
        raise InvalidVoteWeights(f"Expected exactly one vote variant, got {vote!r}")
    ((variant, payload),) = vote.items()
    if variant == "approve":
        if not isinstance(payload, list):
            raise InvalidVoteWeights(f"Expected a list of choices, got {payload!r}")
        # the JS form wraps the choice list in a one element tuple
        if payload and isinstance(payload[0], list):
            payload = payload[0]
        return Approve([_choice_from_dict(c) for c in payload])
    try:
        return {"deny": Deny, "abstain": Abstain, "veto": Veto}[variant]()
    except (KeyError, TypeError):
        raise InvalidVoteWeights(f"Unknown vote variant {variant!r}") from None


def validate_vote(vote: Vote) -> None:
    """
    Check that every rank group of an approval carries exactly 100% of the weight.
    Deny, Abstain and Veto carry no weights and are always valid.
    """
    if not isinstance(vote, Approve):
        return
    if not vote.choices:
        raise InvalidVoteWeights("An approval needs at least one choice")
    rank_weights: Dict[int, int] = defaultdict(int)
    for choice in vote.choices:
        if not 0 <= choice.rank <= 255:
            raise InvalidVoteWeights(f"Rank {choice.rank} out of range")
        if not 0 <= choice.weight_percentage <= FULL_WEIGHT:
            raise InvalidVoteWeights(
                f"Weight {choice.weight_percentage} out of range for rank {choice.rank}"
            )
        rank_weights[choice.rank] += choice.weight_percentage
    for rank, total in sorted(rank_weights.items()):
        if total != FULL_WEIGHT:
            raise InvalidVoteWeights(
                f"Weights of rank {rank} sum to {total}, expected {FULL_WEIGHT}"
            )


def write_vote(writer: BorshWriter, vote: Vote) -> BorshWriter:
    writer.u8(vote.VARIANT)
    if isinstance(vote, Approve):
        writer.vec(
            vote.choices,
            lambda c: writer.u8(c.rank).u8(c.weight_percentage),
        )
    return writer


def read_vote(reader: BorshReader) -> Vote:
    variant = reader.u8()
    if variant == Approve.VARIANT:
        return Approve(
            reader.vec(
                lambda: VoteChoice(rank=reader.u8(), weight_percentage=reader.u8()),
                min_item_size=2,
            )
        )
    try:
        return VOTE_VARIANTS[variant]()
    except KeyError:
        raise AccountDataError(f"Unknown vote variant {variant}") from None
