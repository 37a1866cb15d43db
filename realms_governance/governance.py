"""
Client for one deployment of the governance program.
"""
import logging
from typing import List, Optional, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .offchain.instructions import (
    build_cast_vote,
    build_relinquish_vote,
    voter_weight_plugin,
)
from .offchain.ledger import LedgerReader
from .offchain.queries import GovernanceQuerier
from .onchain.accounts import (
    GovernanceAccount,
    ProgramAccount,
    Proposal,
    Realm,
    TokenOwnerRecord,
    VoteRecord,
    decode,
)
from .onchain.pda import (
    ProgramAddress,
    get_token_owner_record_address,
    get_vote_record_address,
)
from .onchain.util import GOVERNANCE_PROGRAM_ID
from .onchain.vote import Vote

_LOGGER = logging.getLogger(__name__)


class Governance:
    """
    Fetches governance accounts through a ledger reader and builds vote
    instructions for the program deployed at `program_id`.
    """

    def __init__(
        self, ledger: LedgerReader, program_id: Pubkey = GOVERNANCE_PROGRAM_ID
    ):
        self.ledger = ledger
        self.program_id = program_id
        self.querier = GovernanceQuerier(ledger, program_id)

    def get_token_owner_record_address(
        self,
        realm: Pubkey,
        governing_token_mint: Pubkey,
        governing_token_owner: Pubkey,
    ) -> ProgramAddress:
        return get_token_owner_record_address(
            realm, governing_token_mint, governing_token_owner, self.program_id
        )

    def get_vote_record_address(
        self, proposal: Pubkey, token_owner_record: Pubkey
    ) -> ProgramAddress:
        return get_vote_record_address(proposal, token_owner_record, self.program_id)

    async def _get(self, kind, address: Pubkey):
        data = await self.ledger.fetch_account(address)
        return decode(kind, data)

    async def get_realm(self, address: Pubkey) -> Realm:
        return await self._get(Realm, address)

    async def get_governance(self, address: Pubkey) -> GovernanceAccount:
        return await self._get(GovernanceAccount, address)

    async def get_proposal(self, address: Pubkey) -> Proposal:
        return await self._get(Proposal, address)

    async def get_token_owner_record(self, address: Pubkey) -> TokenOwnerRecord:
        return await self._get(TokenOwnerRecord, address)

    async def get_vote_record(self, address: Pubkey) -> VoteRecord:
        return await self._get(VoteRecord, address)

    async def get_token_owner_records_from_pubkey(
        self, owner: Pubkey
    ) -> List[ProgramAccount[TokenOwnerRecord]]:
        return await self.querier.token_owner_records_for_user(owner)

    async def get_governance_for_realm(
        self, realm: Pubkey
    ) -> List[ProgramAccount[GovernanceAccount]]:
        return await self.querier.governances_for_realm(realm)

    async def get_proposals_for_governance(
        self, governance: Pubkey
    ) -> List[ProgramAccount[Proposal]]:
        return await self.querier.proposals_for_governance(governance)

    async def cast_vote_instruction(
        self,
        vote: Vote,
        realm: Pubkey,
        governance: Pubkey,
        proposal: Union[Pubkey, ProgramAccount[Proposal]],
        proposal_owner_record: Pubkey,
        voter_token_owner_record: Pubkey,
        governance_authority: Pubkey,
        governing_token_mint: Pubkey,
        payer: Pubkey,
        voter_weight_record: Optional[Pubkey] = None,
        max_voter_weight_record: Optional[Pubkey] = None,
    ) -> Instruction:
        """
        Build a CastVote instruction. The proposal is fetched to check that it is
        governed by `governing_token_mint`, unless it is passed already decoded as
        a ProgramAccount. The voter weight records of a plugin are appended to the
        accounts when both are given.
        """
        plugin = voter_weight_plugin(voter_weight_record, max_voter_weight_record)
        if isinstance(proposal, ProgramAccount):
            proposal_account = proposal
        else:
            proposal_account = ProgramAccount(
                proposal, await self.get_proposal(proposal)
            )
        _LOGGER.info(
            f"Building vote on proposal {proposal_account.pubkey} ({proposal_account.account.name})"
        )
        return build_cast_vote(
            vote,
            realm,
            governance,
            proposal_account,
            proposal_owner_record,
            voter_token_owner_record,
            governance_authority,
            governing_token_mint,
            payer,
            plugin,
            self.program_id,
        )

    def relinquish_vote_instruction(
        self,
        realm: Pubkey,
        governance: Pubkey,
        proposal: Pubkey,
        voter_token_owner_record: Pubkey,
        governing_token_mint: Pubkey,
        governance_authority: Optional[Pubkey] = None,
        beneficiary: Optional[Pubkey] = None,
    ) -> Instruction:
        return build_relinquish_vote(
            realm,
            governance,
            proposal,
            voter_token_owner_record,
            governing_token_mint,
            governance_authority,
            beneficiary,
            self.program_id,
        )
