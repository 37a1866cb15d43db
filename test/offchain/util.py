from typing import Dict, List, Sequence, Tuple

from solders.pubkey import Pubkey

from realms_governance.errors import AccountNotFound
from realms_governance.offchain.ledger import MemcmpFilter


class FakeLedger:
    """
    In-memory ledger snapshot. `unfiltered` accounts are returned by every
    bulk fetch, like unrelated accounts whose bytes happen to match a filter.
    """

    def __init__(
        self,
        accounts: Dict[Pubkey, bytes],
        unfiltered: Sequence[Tuple[Pubkey, bytes]] = (),
    ):
        self.accounts = dict(accounts)
        self.unfiltered = list(unfiltered)
        self.fetches: List[Pubkey] = []
        self.filter_calls: List[Tuple[Pubkey, Sequence[MemcmpFilter]]] = []

    async def fetch_account(self, address: Pubkey) -> bytes:
        self.fetches.append(address)
        try:
            return self.accounts[address]
        except KeyError:
            raise AccountNotFound(address) from None

    async def fetch_accounts_by_filter(
        self, program_id: Pubkey, filters: Sequence[MemcmpFilter]
    ) -> List[Tuple[Pubkey, bytes]]:
        self.filter_calls.append((program_id, filters))
        matching = [
            (pubkey, data)
            for pubkey, data in self.accounts.items()
            if all(f.matches(data) for f in filters)
        ]
        return matching + self.unfiltered
