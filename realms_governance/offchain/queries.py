"""
Read-only enumeration of governance accounts.

Each query asks the ledger for the program accounts matching a memcmp filter
and decodes the accounts of the requested kind. Nothing is cached, every call
reflects the latest snapshot of the ledger.
"""
import logging
from typing import Callable, List, Type

from solders.pubkey import Pubkey

from ..onchain.accounts import (
    GovernanceAccount,
    ProgramAccount,
    Proposal,
    R,
    TokenOwnerRecord,
    account_kind,
)
from ..onchain.util import GOVERNANCE_PROGRAM_ID
from .ledger import LedgerReader, MemcmpFilter

_LOGGER = logging.getLogger(__name__)

# realm of a governance and governance of a proposal directly follow the discriminator
PARENT_OFFSET = 1


class GovernanceQuerier:
    def __init__(
        self, ledger: LedgerReader, program_id: Pubkey = GOVERNANCE_PROGRAM_ID
    ):
        self.ledger = ledger
        self.program_id = program_id

    async def _query(
        self,
        kind: Type[R],
        memcmp: MemcmpFilter,
        keep: Callable[[R], bool],
    ) -> List[ProgramAccount[R]]:
        raw_accounts = await self.ledger.fetch_accounts_by_filter(
            self.program_id, [memcmp]
        )
        results = []
        for pubkey, data in raw_accounts:
            if account_kind(data) is not kind:
                _LOGGER.debug(f"Skipping {pubkey}, not a {kind.__name__} account")
                continue
            record = kind.from_bytes(data)
            if not keep(record):
                continue
            results.append(ProgramAccount(pubkey, record))
        _LOGGER.info(
            f"Found {len(results)} {kind.__name__} accounts matching {memcmp.value}"
        )
        return results

    async def token_owner_records_for_user(
        self, user: Pubkey
    ) -> List[ProgramAccount[TokenOwnerRecord]]:
        """
        All token owner records of the user across every realm, i.e. the DAOs the user is a member of
        """
        return await self._query(
            TokenOwnerRecord,
            MemcmpFilter(TokenOwnerRecord.OWNER_OFFSET, user),
            lambda tor: tor.governing_token_owner == user,
        )

    async def governances_for_realm(
        self, realm: Pubkey
    ) -> List[ProgramAccount[GovernanceAccount]]:
        return await self._query(
            GovernanceAccount,
            MemcmpFilter(PARENT_OFFSET, realm),
            lambda governance: governance.realm == realm,
        )

    async def proposals_for_governance(
        self, governance: Pubkey
    ) -> List[ProgramAccount[Proposal]]:
        return await self._query(
            Proposal,
            MemcmpFilter(PARENT_OFFSET, governance),
            lambda proposal: proposal.governance == governance,
        )
