"""
Typed records of the accounts owned by the governance program.

Each record knows the discriminators it accepts and decodes itself from the raw
account data with `from_bytes`. Accounts written by the first program versions
(the V1 discriminators) are decoded into the same records, filling the fields
those layouts lack the way the program itself upgrades them.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, List, Optional, Type, TypeVar, Union

from solders.pubkey import Pubkey

from ..errors import (
    AccountDataError,
    TruncatedData,
    UnexpectedAccountKind,
    UnsupportedVersion,
)
from .pda import (
    GOVERNANCE_KIND_BY_ACCOUNT_TYPE,
    ProgramAddress,
    get_governance_address,
    get_token_owner_record_address,
    get_vote_record_address,
)
from .util import (
    GOVERNANCE_PROGRAM_ID,
    NEWEST_ACCOUNT_TYPE,
    BorshReader,
    GovernanceAccountType,
)
from .vote import FULL_WEIGHT, Approve, Deny, Vote, VoteChoice, read_vote

T = TypeVar("T")


class ProposalState(IntEnum):
    DRAFT = 0
    SIGNING_OFF = 1
    VOTING = 2
    SUCCEEDED = 3
    EXECUTING = 4
    COMPLETED = 5
    CANCELLED = 6
    DEFEATED = 7
    EXECUTING_WITH_ERRORS = 8
    VETOED = 9


class VoteThresholdType(IntEnum):
    YES_VOTE_PERCENTAGE = 0
    QUORUM_PERCENTAGE = 1
    DISABLED = 2


class VoteTipping(IntEnum):
    STRICT = 0
    EARLY = 1
    DISABLED = 2


class MintMaxVoterWeightSourceType(IntEnum):
    SUPPLY_FRACTION = 0
    ABSOLUTE = 1


class OptionVoteResult(IntEnum):
    NONE = 0
    SUCCEEDED = 1
    DEFEATED = 2


# result of the single option of a V1 proposal, unresolved states map to NONE
V1_OPTION_RESULTS = {
    ProposalState.SUCCEEDED: OptionVoteResult.SUCCEEDED,
    ProposalState.EXECUTING: OptionVoteResult.SUCCEEDED,
    ProposalState.EXECUTING_WITH_ERRORS: OptionVoteResult.SUCCEEDED,
    ProposalState.COMPLETED: OptionVoteResult.SUCCEEDED,
    ProposalState.DEFEATED: OptionVoteResult.DEFEATED,
}


class MultiChoiceType(IntEnum):
    FULL_WEIGHT = 0
    WEIGHTED = 1


class InstructionExecutionFlags(IntEnum):
    NONE = 0
    ORDERED = 1
    USE_TRANSACTION = 2


def _enum(enum_cls, value: int, reader: BorshReader):
    try:
        return enum_cls(value)
    except ValueError:
        raise AccountDataError(
            f"Invalid {enum_cls.__name__} value {value} at offset {reader.offset - 1}"
        ) from None


@dataclass(frozen=True)
class ProgramAccount(Generic[T]):
    """
    A decoded account together with the address it was fetched from
    """

    pubkey: Pubkey
    account: T


@dataclass
class MintMaxVoterWeightSource:
    type: MintMaxVoterWeightSourceType
    value: int

    @classmethod
    def read(cls, reader: BorshReader) -> "MintMaxVoterWeightSource":
        return cls(
            type=_enum(MintMaxVoterWeightSourceType, reader.u8(), reader),
            value=reader.u64(),
        )


@dataclass
class VoteThreshold:
    type: VoteThresholdType
    value: Optional[int] = None

    @classmethod
    def read(cls, reader: BorshReader) -> "VoteThreshold":
        threshold_type = _enum(VoteThresholdType, reader.u8(), reader)
        if threshold_type == VoteThresholdType.DISABLED:
            return cls(threshold_type)
        return cls(threshold_type, reader.u8())


@dataclass
class RealmConfig:
    min_community_weight_to_create_governance: int
    community_mint_max_voter_weight_source: MintMaxVoterWeightSource
    council_mint: Optional[Pubkey]

    @classmethod
    def read(cls, reader: BorshReader) -> "RealmConfig":
        # legacy1, legacy2 and 6 reserved bytes
        reader.take(8)
        return cls(
            min_community_weight_to_create_governance=reader.u64(),
            community_mint_max_voter_weight_source=MintMaxVoterWeightSource.read(
                reader
            ),
            council_mint=reader.option(reader.pubkey),
        )


@dataclass
class GovernanceConfig:
    community_vote_threshold: VoteThreshold
    min_community_weight_to_create_proposal: int
    transactions_hold_up_time: int
    voting_base_time: int
    community_vote_tipping: VoteTipping
    council_vote_threshold: VoteThreshold
    council_veto_vote_threshold: VoteThreshold
    min_council_weight_to_create_proposal: int
    council_vote_tipping: VoteTipping
    community_veto_vote_threshold: VoteThreshold
    voting_cool_off_time: int
    deposit_exempt_proposal_count: int

    @classmethod
    def read(cls, reader: BorshReader) -> "GovernanceConfig":
        return cls(
            community_vote_threshold=VoteThreshold.read(reader),
            min_community_weight_to_create_proposal=reader.u64(),
            transactions_hold_up_time=reader.u32(),
            voting_base_time=reader.u32(),
            community_vote_tipping=_enum(VoteTipping, reader.u8(), reader),
            council_vote_threshold=VoteThreshold.read(reader),
            council_veto_vote_threshold=VoteThreshold.read(reader),
            min_council_weight_to_create_proposal=reader.u64(),
            council_vote_tipping=_enum(VoteTipping, reader.u8(), reader),
            community_veto_vote_threshold=VoteThreshold.read(reader),
            voting_cool_off_time=reader.u32(),
            deposit_exempt_proposal_count=reader.u8(),
        )


@dataclass
class ProposalOption:
    label: str
    vote_weight: int
    vote_result: OptionVoteResult
    transactions_executed_count: int
    transactions_count: int
    transactions_next_index: int

    # u32 label length, u64 weight, u8 result and three u16 counters
    MIN_SIZE = 4 + 8 + 1 + 6

    @classmethod
    def read(cls, reader: BorshReader) -> "ProposalOption":
        return cls(
            label=reader.string(),
            vote_weight=reader.u64(),
            vote_result=_enum(OptionVoteResult, reader.u8(), reader),
            transactions_executed_count=reader.u16(),
            transactions_count=reader.u16(),
            transactions_next_index=reader.u16(),
        )


@dataclass
class SingleChoice:
    pass


@dataclass
class MultiChoice:
    choice_type: MultiChoiceType
    min_voter_options: int
    max_voter_options: int
    max_winning_options: int


VoteType = Union[SingleChoice, MultiChoice]


def _read_vote_type(reader: BorshReader) -> VoteType:
    tag = reader.u8()
    if tag == 0:
        return SingleChoice()
    if tag == 1:
        return MultiChoice(
            choice_type=_enum(MultiChoiceType, reader.u8(), reader),
            min_voter_options=reader.u8(),
            max_voter_options=reader.u8(),
            max_winning_options=reader.u8(),
        )
    raise AccountDataError(f"Invalid vote type {tag} at offset {reader.offset - 1}")


class GovernanceProgramAccount:
    """
    Base of all decoded records. Subclasses list the discriminators they decode.
    """

    ACCOUNT_TYPES: tuple = ()

    @classmethod
    def check_account_type(cls, data: bytes) -> GovernanceAccountType:
        if not data:
            raise TruncatedData(0, 1, 0)
        account_type = data[0]
        if account_type in cls.ACCOUNT_TYPES:
            return GovernanceAccountType(account_type)
        if account_type > NEWEST_ACCOUNT_TYPE:
            raise UnsupportedVersion(account_type)
        raise UnexpectedAccountKind(cls.__name__, account_type)

    @classmethod
    def from_bytes(cls, data: bytes):
        account_type = cls.check_account_type(data)
        reader = BorshReader(data, offset=1)
        return cls._read(account_type, reader)

    @classmethod
    def _read(cls, account_type: GovernanceAccountType, reader: BorshReader):
        raise NotImplementedError()


@dataclass
class Realm(GovernanceProgramAccount):
    """
    Root account of a DAO
    """

    ACCOUNT_TYPES = (GovernanceAccountType.REALM_V1, GovernanceAccountType.REALM_V2)

    account_type: GovernanceAccountType
    community_mint: Pubkey
    config: RealmConfig
    authority: Optional[Pubkey]
    name: str

    @classmethod
    def _read(cls, account_type, reader):
        community_mint = reader.pubkey()
        config = RealmConfig.read(reader)
        # 6 reserved bytes and the legacy voting proposal count
        reader.take(8)
        return cls(
            account_type=account_type,
            community_mint=community_mint,
            config=config,
            authority=reader.option(reader.pubkey),
            name=reader.string(),
        )


@dataclass
class GovernanceAccount(GovernanceProgramAccount):
    """
    Governance of a set of proposals within a realm
    """

    V1_ACCOUNT_TYPES = (
        GovernanceAccountType.GOVERNANCE_V1,
        GovernanceAccountType.PROGRAM_GOVERNANCE_V1,
        GovernanceAccountType.MINT_GOVERNANCE_V1,
        GovernanceAccountType.TOKEN_GOVERNANCE_V1,
    )
    ACCOUNT_TYPES = V1_ACCOUNT_TYPES + (
        GovernanceAccountType.GOVERNANCE_V2,
        GovernanceAccountType.PROGRAM_GOVERNANCE_V2,
        GovernanceAccountType.MINT_GOVERNANCE_V2,
        GovernanceAccountType.TOKEN_GOVERNANCE_V2,
    )
    # bytes between the config and the required signatories count
    RESERVED_V2_SIZE = 119

    account_type: GovernanceAccountType
    realm: Pubkey
    governance_seed: Pubkey
    config: GovernanceConfig
    required_signatories_count: int
    active_proposal_count: int

    @classmethod
    def _read(cls, account_type, reader):
        realm = reader.pubkey()
        governance_seed = reader.pubkey()
        # proposals count in V1, reserved since V2
        reader.u32()
        config = GovernanceConfig.read(reader)
        if account_type in cls.V1_ACCOUNT_TYPES:
            return cls(
                account_type=account_type,
                realm=realm,
                governance_seed=governance_seed,
                config=config,
                required_signatories_count=0,
                active_proposal_count=0,
            )
        reader.take(cls.RESERVED_V2_SIZE)
        return cls(
            account_type=account_type,
            realm=realm,
            governance_seed=governance_seed,
            config=config,
            required_signatories_count=reader.u8(),
            active_proposal_count=reader.u64(),
        )

    def address(self, program_id: Pubkey = GOVERNANCE_PROGRAM_ID) -> ProgramAddress:
        return get_governance_address(
            self.realm,
            self.governance_seed,
            program_id,
            GOVERNANCE_KIND_BY_ACCOUNT_TYPE[self.account_type],
        )


@dataclass
class Proposal(GovernanceProgramAccount):
    ACCOUNT_TYPES = (GovernanceAccountType.PROPOSAL_V1, GovernanceAccountType.PROPOSAL_V2)
    RESERVED_SIZE = 64

    account_type: GovernanceAccountType
    governance: Pubkey
    governing_token_mint: Pubkey
    state: ProposalState
    token_owner_record: Pubkey
    signatories_count: int
    signatories_signed_off_count: int
    vote_type: VoteType
    options: List[ProposalOption]
    deny_vote_weight: Optional[int]
    abstain_vote_weight: Optional[int]
    start_voting_at: Optional[int]
    draft_at: int
    signing_off_at: Optional[int]
    voting_at: Optional[int]
    voting_at_slot: Optional[int]
    voting_completed_at: Optional[int]
    executing_at: Optional[int]
    closed_at: Optional[int]
    execution_flags: InstructionExecutionFlags
    max_vote_weight: Optional[int]
    max_voting_time: Optional[int]
    vote_threshold: Optional[VoteThreshold]
    name: str
    description_link: str
    veto_vote_weight: int

    @classmethod
    def _read(cls, account_type, reader):
        if account_type == GovernanceAccountType.PROPOSAL_V1:
            return cls._read_v1(account_type, reader)
        governance = reader.pubkey()
        governing_token_mint = reader.pubkey()
        state = _enum(ProposalState, reader.u8(), reader)
        token_owner_record = reader.pubkey()
        signatories_count = reader.u8()
        signatories_signed_off_count = reader.u8()
        vote_type = _read_vote_type(reader)
        options = reader.vec(
            lambda: ProposalOption.read(reader), min_item_size=ProposalOption.MIN_SIZE
        )
        deny_vote_weight = reader.option(reader.u64)
        # reserved1
        reader.u8()
        abstain_vote_weight = reader.option(reader.u64)
        start_voting_at = reader.option(reader.i64)
        draft_at = reader.i64()
        signing_off_at = reader.option(reader.i64)
        voting_at = reader.option(reader.i64)
        voting_at_slot = reader.option(reader.u64)
        voting_completed_at = reader.option(reader.i64)
        executing_at = reader.option(reader.i64)
        closed_at = reader.option(reader.i64)
        execution_flags = _enum(InstructionExecutionFlags, reader.u8(), reader)
        max_vote_weight = reader.option(reader.u64)
        max_voting_time = reader.option(reader.u32)
        vote_threshold = reader.option(lambda: VoteThreshold.read(reader))
        reader.take(cls.RESERVED_SIZE)
        return cls(
            account_type=account_type,
            governance=governance,
            governing_token_mint=governing_token_mint,
            state=state,
            token_owner_record=token_owner_record,
            signatories_count=signatories_count,
            signatories_signed_off_count=signatories_signed_off_count,
            vote_type=vote_type,
            options=options,
            deny_vote_weight=deny_vote_weight,
            abstain_vote_weight=abstain_vote_weight,
            start_voting_at=start_voting_at,
            draft_at=draft_at,
            signing_off_at=signing_off_at,
            voting_at=voting_at,
            voting_at_slot=voting_at_slot,
            voting_completed_at=voting_completed_at,
            executing_at=executing_at,
            closed_at=closed_at,
            execution_flags=execution_flags,
            max_vote_weight=max_vote_weight,
            max_voting_time=max_voting_time,
            vote_threshold=vote_threshold,
            name=reader.string(),
            description_link=reader.string(),
            veto_vote_weight=reader.u64(),
        )

    @classmethod
    def _read_v1(cls, account_type, reader):
        """
        V1 proposals are yes/no votes: the yes votes become a single "Yes" option
        and the no votes the deny weight.
        """
        governance = reader.pubkey()
        governing_token_mint = reader.pubkey()
        state = _enum(ProposalState, reader.u8(), reader)
        token_owner_record = reader.pubkey()
        signatories_count = reader.u8()
        signatories_signed_off_count = reader.u8()
        yes_votes_count = reader.u64()
        no_votes_count = reader.u64()
        yes_option = ProposalOption(
            label="Yes",
            vote_weight=yes_votes_count,
            vote_result=V1_OPTION_RESULTS.get(state, OptionVoteResult.NONE),
            transactions_executed_count=reader.u16(),
            transactions_count=reader.u16(),
            transactions_next_index=reader.u16(),
        )
        return cls(
            account_type=account_type,
            governance=governance,
            governing_token_mint=governing_token_mint,
            state=state,
            token_owner_record=token_owner_record,
            signatories_count=signatories_count,
            signatories_signed_off_count=signatories_signed_off_count,
            vote_type=SingleChoice(),
            options=[yes_option],
            deny_vote_weight=no_votes_count,
            abstain_vote_weight=None,
            start_voting_at=None,
            draft_at=reader.i64(),
            signing_off_at=reader.option(reader.i64),
            voting_at=reader.option(reader.i64),
            voting_at_slot=reader.option(reader.u64),
            voting_completed_at=reader.option(reader.i64),
            executing_at=reader.option(reader.i64),
            closed_at=reader.option(reader.i64),
            execution_flags=_enum(InstructionExecutionFlags, reader.u8(), reader),
            max_vote_weight=reader.option(reader.u64),
            max_voting_time=None,
            vote_threshold=reader.option(lambda: VoteThreshold.read(reader)),
            name=reader.string(),
            description_link=reader.string(),
            veto_vote_weight=0,
        )

    @property
    def is_voting(self) -> bool:
        return self.state == ProposalState.VOTING


@dataclass
class TokenOwnerRecord(GovernanceProgramAccount):
    """
    Voting power of one owner for one governing mint within one realm
    """

    ACCOUNT_TYPES = (
        GovernanceAccountType.TOKEN_OWNER_RECORD_V1,
        GovernanceAccountType.TOKEN_OWNER_RECORD_V2,
    )
    # offset of governing_token_owner, used for memcmp filters
    OWNER_OFFSET = 1 + 32 + 32

    account_type: GovernanceAccountType
    realm: Pubkey
    governing_token_mint: Pubkey
    governing_token_owner: Pubkey
    governing_token_deposit_amount: int
    unrelinquished_votes_count: int
    outstanding_proposal_count: int
    version: int
    governance_delegate: Optional[Pubkey] = None

    @classmethod
    def _read(cls, account_type, reader):
        realm = reader.pubkey()
        governing_token_mint = reader.pubkey()
        governing_token_owner = reader.pubkey()
        governing_token_deposit_amount = reader.u64()
        if account_type == GovernanceAccountType.TOKEN_OWNER_RECORD_V1:
            unrelinquished_votes_count = reader.u32()
            # total_votes_count, dropped in V2
            reader.u32()
        else:
            unrelinquished_votes_count = reader.u64()
        outstanding_proposal_count = reader.u8()
        version = reader.u8()
        reader.take(6)
        return cls(
            account_type=account_type,
            realm=realm,
            governing_token_mint=governing_token_mint,
            governing_token_owner=governing_token_owner,
            governing_token_deposit_amount=governing_token_deposit_amount,
            unrelinquished_votes_count=unrelinquished_votes_count,
            outstanding_proposal_count=outstanding_proposal_count,
            version=version,
            governance_delegate=reader.option(reader.pubkey),
        )

    def address(self, program_id: Pubkey = GOVERNANCE_PROGRAM_ID) -> ProgramAddress:
        return get_token_owner_record_address(
            self.realm,
            self.governing_token_mint,
            self.governing_token_owner,
            program_id,
        )


@dataclass
class VoteRecord(GovernanceProgramAccount):
    ACCOUNT_TYPES = (
        GovernanceAccountType.VOTE_RECORD_V1,
        GovernanceAccountType.VOTE_RECORD_V2,
    )

    account_type: GovernanceAccountType
    proposal: Pubkey
    governing_token_owner: Pubkey
    is_relinquished: bool
    voter_weight: int
    vote: Vote

    @classmethod
    def _read(cls, account_type, reader):
        proposal = reader.pubkey()
        governing_token_owner = reader.pubkey()
        is_relinquished = reader.bool()
        if account_type == GovernanceAccountType.VOTE_RECORD_V1:
            # V1 stores Yes(u64) or No(u64)
            tag = reader.u8()
            if tag == 0:
                vote = Approve([VoteChoice(rank=0, weight_percentage=FULL_WEIGHT)])
            elif tag == 1:
                vote = Deny()
            else:
                raise AccountDataError(
                    f"Invalid vote weight tag {tag} at offset {reader.offset - 1}"
                )
            voter_weight = reader.u64()
        else:
            voter_weight = reader.u64()
            vote = read_vote(reader)
        return cls(
            account_type=account_type,
            proposal=proposal,
            governing_token_owner=governing_token_owner,
            is_relinquished=is_relinquished,
            voter_weight=voter_weight,
            vote=vote,
        )

    def address(
        self, token_owner_record: Pubkey, program_id: Pubkey = GOVERNANCE_PROGRAM_ID
    ) -> ProgramAddress:
        return get_vote_record_address(self.proposal, token_owner_record, program_id)


RECORD_TYPES: List[Type[GovernanceProgramAccount]] = [
    Realm,
    GovernanceAccount,
    Proposal,
    TokenOwnerRecord,
    VoteRecord,
]

R = TypeVar("R", bound=GovernanceProgramAccount)


def decode(kind: Type[R], data: bytes) -> R:
    """
    Decode raw account data into a record of the given kind.

    Raises UnexpectedAccountKind, UnsupportedVersion or TruncatedData,
    never returns a partially populated record.
    """
    return kind.from_bytes(data)


def account_kind(data: bytes) -> Optional[Type[GovernanceProgramAccount]]:
    """
    The record class whose discriminators include the first byte of data, if any
    """
    if not data:
        return None
    for record_type in RECORD_TYPES:
        if data[0] in record_type.ACCOUNT_TYPES:
            return record_type
    return None
