"""
Builders for the vote related instructions of the governance program.

The builders are pure: they validate their arguments, derive the vote record and
realm config addresses and return a solders Instruction with the account order
required by the program. Nothing is fetched, signed or sent here.
"""
from dataclasses import dataclass
from typing import List, Optional

import solders.system_program
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..errors import IncompletePluginPair, IncompleteRelinquishAccounts, MintMismatch
from ..onchain.accounts import ProgramAccount, Proposal
from ..onchain.pda import get_realm_config_address, get_vote_record_address
from ..onchain.util import GOVERNANCE_PROGRAM_ID, BorshWriter
from ..onchain.vote import Vote, validate_vote, write_vote

CAST_VOTE_INSTRUCTION = 13
RELINQUISH_VOTE_INSTRUCTION = 15


@dataclass(frozen=True)
class VoterWeightPlugin:
    """
    Accounts of an external voter weight addin, passed instead of the raw deposit
    """

    voter_weight_record: Pubkey
    max_voter_weight_record: Pubkey

    def account_metas(self) -> List[AccountMeta]:
        return [
            AccountMeta(self.voter_weight_record, is_signer=False, is_writable=False),
            AccountMeta(
                self.max_voter_weight_record, is_signer=False, is_writable=False
            ),
        ]


def voter_weight_plugin(
    voter_weight_record: Optional[Pubkey] = None,
    max_voter_weight_record: Optional[Pubkey] = None,
) -> Optional[VoterWeightPlugin]:
    """
    Pair up the plugin accounts, both or neither must be given
    """
    if voter_weight_record is None and max_voter_weight_record is None:
        return None
    if voter_weight_record is None or max_voter_weight_record is None:
        raise IncompletePluginPair(
            "voter_weight_record and max_voter_weight_record must be supplied together"
        )
    return VoterWeightPlugin(voter_weight_record, max_voter_weight_record)


def build_cast_vote(
    vote: Vote,
    realm: Pubkey,
    governance: Pubkey,
    proposal: ProgramAccount[Proposal],
    proposal_owner_record: Pubkey,
    voter_token_owner_record: Pubkey,
    governance_authority: Pubkey,
    governing_token_mint: Pubkey,
    payer: Pubkey,
    plugin: Optional[VoterWeightPlugin] = None,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> Instruction:
    validate_vote(vote)
    if proposal.account.governing_token_mint != governing_token_mint:
        raise MintMismatch(proposal.account.governing_token_mint, governing_token_mint)

    vote_record = get_vote_record_address(
        proposal.pubkey, voter_token_owner_record, program_id
    ).address
    realm_config = get_realm_config_address(realm, program_id).address

    accounts = [
        AccountMeta(realm, is_signer=False, is_writable=False),
        AccountMeta(governance, is_signer=False, is_writable=True),
        AccountMeta(proposal.pubkey, is_signer=False, is_writable=True),
        AccountMeta(proposal_owner_record, is_signer=False, is_writable=True),
        AccountMeta(voter_token_owner_record, is_signer=False, is_writable=True),
        AccountMeta(governance_authority, is_signer=True, is_writable=False),
        AccountMeta(vote_record, is_signer=False, is_writable=True),
        AccountMeta(governing_token_mint, is_signer=False, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(solders.system_program.ID, is_signer=False, is_writable=False),
        AccountMeta(realm_config, is_signer=False, is_writable=False),
    ]
    if plugin is not None:
        accounts.extend(plugin.account_metas())

    data = write_vote(BorshWriter().u8(CAST_VOTE_INSTRUCTION), vote).to_bytes()
    return Instruction(program_id, data, accounts)


def build_relinquish_vote(
    realm: Pubkey,
    governance: Pubkey,
    proposal: Pubkey,
    voter_token_owner_record: Pubkey,
    governing_token_mint: Pubkey,
    governance_authority: Optional[Pubkey] = None,
    beneficiary: Optional[Pubkey] = None,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> Instruction:
    """
    The authority and the beneficiary are only needed while the proposal is still
    being voted on, the program rejects the instruction if they are missing then.
    They are supplied together or not at all.
    """
    if (governance_authority is None) != (beneficiary is None):
        raise IncompleteRelinquishAccounts(
            "governance_authority and beneficiary must be supplied together"
        )
    vote_record = get_vote_record_address(
        proposal, voter_token_owner_record, program_id
    ).address
    accounts = [
        AccountMeta(realm, is_signer=False, is_writable=False),
        AccountMeta(governance, is_signer=False, is_writable=False),
        AccountMeta(proposal, is_signer=False, is_writable=True),
        AccountMeta(voter_token_owner_record, is_signer=False, is_writable=True),
        AccountMeta(vote_record, is_signer=False, is_writable=True),
        AccountMeta(governing_token_mint, is_signer=False, is_writable=False),
    ]
    if governance_authority is not None:
        accounts.append(
            AccountMeta(governance_authority, is_signer=True, is_writable=False)
        )
        accounts.append(AccountMeta(beneficiary, is_signer=False, is_writable=True))

    data = BorshWriter().u8(RELINQUISH_VOTE_INSTRUCTION).to_bytes()
    return Instruction(program_id, data, accounts)
