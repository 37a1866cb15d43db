import asyncio

import fire
from solders.pubkey import Pubkey

from realms_governance.governance import Governance
from realms_governance.utils import program_id
from realms_governance.utils.network import connect
from .ledger import RpcLedgerReader


async def fetch_daos(user: Pubkey, governance: Governance):
    # DAOs the user is a member of
    tors = await governance.get_token_owner_records_from_pubkey(user)
    print(f"The user is currently the member of {len(tors)} DAOs.")
    if not tors:
        return tors, [], {}

    # Governances of the first DAO
    realm = tors[0].account.realm
    governances = await governance.get_governance_for_realm(realm)
    print(f"Fetched {len(governances)} governance accounts for realm {realm}")

    # Proposals of every governance
    proposals = {}
    for g in governances:
        proposals[g.pubkey] = await governance.get_proposals_for_governance(g.pubkey)
        print(
            f"Found {len(proposals[g.pubkey])} proposals for governance account: {g.pubkey}"
        )
    return tors, governances, proposals


def main(user: str, governance_program: str = str(program_id)):
    async def run():
        async with connect() as client:
            governance = Governance(
                RpcLedgerReader(client), Pubkey.from_string(governance_program)
            )
            return await fetch_daos(Pubkey.from_string(user), governance)

    asyncio.run(run())


if __name__ == "__main__":
    fire.Fire(main)
