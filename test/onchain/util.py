"""
Builders for raw governance account data, laid out the way the program stores them.
"""
from typing import List, Optional

from solders.pubkey import Pubkey

from realms_governance.onchain.accounts import ProposalState
from realms_governance.onchain.util import BorshWriter, GovernanceAccountType
from realms_governance.onchain.vote import Vote, write_vote


def realm_data(
    community_mint: Pubkey,
    name: str = "Test DAO",
    council_mint: Optional[Pubkey] = None,
    authority: Optional[Pubkey] = None,
) -> bytes:
    w = BorshWriter()
    w.u8(GovernanceAccountType.REALM_V2).pubkey(community_mint)
    # realm config
    w.raw(bytes(8)).u64(1).u8(0).u64(10_000_000_000)
    w.option(council_mint, w.pubkey)
    w.raw(bytes(6)).u16(0)
    w.option(authority, w.pubkey)
    w.string(name)
    w.raw(bytes(128))
    return w.to_bytes()


def governance_data(
    realm: Pubkey,
    governance_seed: Pubkey,
    account_type: int = GovernanceAccountType.GOVERNANCE_V2,
    active_proposal_count: int = 0,
) -> bytes:
    w = BorshWriter()
    w.u8(account_type).pubkey(realm).pubkey(governance_seed).u32(0)
    # community threshold: yes vote 60%
    w.u8(0).u8(60)
    w.u64(1).u32(0).u32(3 * 24 * 3600).u8(0)
    # council threshold: quorum 50%, council veto disabled
    w.u8(1).u8(50)
    w.u8(2)
    w.u64(1).u8(1)
    # community veto disabled
    w.u8(2)
    w.u32(12 * 3600).u8(10)
    w.raw(bytes(119))
    w.u8(0).u64(active_proposal_count)
    return w.to_bytes()


def proposal_data(
    governance: Pubkey,
    governing_token_mint: Pubkey,
    token_owner_record: Pubkey,
    state: ProposalState = ProposalState.VOTING,
    options: List[str] = ("Approve",),
    name: str = "Fund the treasury",
    description_link: str = "https://example.com/proposal",
    options_count: Optional[int] = None,
) -> bytes:
    w = BorshWriter()
    w.u8(GovernanceAccountType.PROPOSAL_V2)
    w.pubkey(governance).pubkey(governing_token_mint).u8(state)
    w.pubkey(token_owner_record).u8(1).u8(1)
    # single choice
    w.u8(0)
    w.u32(len(options) if options_count is None else options_count)
    for label in options:
        w.string(label).u64(0).u8(0).u16(0).u16(0).u16(0)
    w.option(0, w.u64)
    w.u8(0)
    w.option(None, w.u64)
    w.option(None, w.i64)
    w.i64(1_700_000_000)
    w.option(1_700_000_100, w.i64)
    w.option(1_700_000_200, w.i64)
    w.option(250_000_000, w.u64)
    w.option(None, w.i64)
    w.option(None, w.i64)
    w.option(None, w.i64)
    w.u8(0)
    w.option(1_000_000, w.u64)
    w.option(None, w.u32)
    w.option(60, lambda v: w.u8(0).u8(v))
    w.raw(bytes(64))
    w.string(name).string(description_link)
    w.u64(0)
    return w.to_bytes()


def token_owner_record_data(
    realm: Pubkey,
    governing_token_mint: Pubkey,
    governing_token_owner: Pubkey,
    deposit: int = 1000,
    delegate: Optional[Pubkey] = None,
    account_type: int = GovernanceAccountType.TOKEN_OWNER_RECORD_V2,
) -> bytes:
    w = BorshWriter()
    w.u8(account_type)
    w.pubkey(realm).pubkey(governing_token_mint).pubkey(governing_token_owner)
    w.u64(deposit)
    if account_type == GovernanceAccountType.TOKEN_OWNER_RECORD_V1:
        w.u32(2).u32(7)
    else:
        w.u64(2)
    w.u8(1).u8(1).raw(bytes(6))
    w.option(delegate, w.pubkey)
    w.raw(bytes(124))
    return w.to_bytes()


def vote_record_data(
    proposal: Pubkey, governing_token_owner: Pubkey, vote: Vote, weight: int = 1000
) -> bytes:
    w = BorshWriter()
    w.u8(GovernanceAccountType.VOTE_RECORD_V2)
    w.pubkey(proposal).pubkey(governing_token_owner).bool(False).u64(weight)
    write_vote(w, vote)
    w.raw(bytes(8))
    return w.to_bytes()


def proposal_v1_data(
    governance: Pubkey,
    governing_token_mint: Pubkey,
    token_owner_record: Pubkey,
    state: ProposalState = ProposalState.SUCCEEDED,
    yes_votes: int = 700,
    no_votes: int = 300,
    name: str = "Upgrade the program",
) -> bytes:
    w = BorshWriter()
    w.u8(GovernanceAccountType.PROPOSAL_V1)
    w.pubkey(governance).pubkey(governing_token_mint).u8(state)
    w.pubkey(token_owner_record).u8(1).u8(1)
    w.u64(yes_votes).u64(no_votes)
    w.u16(1).u16(2).u16(2)
    w.i64(1_600_000_000)
    w.option(1_600_000_100, w.i64)
    w.option(1_600_000_200, w.i64)
    w.option(90_000_000, w.u64)
    w.option(1_600_300_000, w.i64)
    w.option(None, w.i64)
    w.option(None, w.i64)
    w.u8(0)
    w.option(1_000, w.u64)
    # yes vote threshold 60%
    w.option(60, lambda v: w.u8(0).u8(v))
    w.string(name).string("https://example.com/v1")
    return w.to_bytes()


def vote_record_v1_data(
    proposal: Pubkey, governing_token_owner: Pubkey, yes: bool, weight: int = 1000
) -> bytes:
    w = BorshWriter()
    w.u8(GovernanceAccountType.VOTE_RECORD_V1)
    w.pubkey(proposal).pubkey(governing_token_owner).bool(True)
    w.u8(0 if yes else 1).u64(weight)
    return w.to_bytes()
