import asyncio

import fire
from solders.pubkey import Pubkey

from realms_governance.governance import Governance
from realms_governance.utils import get_signing_info, program_id
from realms_governance.utils.network import connect, show_tx
from .ledger import RpcLedgerReader, RpcTransactionSubmitter


def main(
    realm: str,
    proposal: str,
    wallet: str = "voter",
    governance_program: str = str(program_id),
):
    # Get signing info
    payment_keypair, payment_address = get_signing_info(wallet)
    realm = Pubkey.from_string(realm)
    proposal = Pubkey.from_string(proposal)

    async def run():
        async with connect() as client:
            governance = Governance(
                RpcLedgerReader(client), Pubkey.from_string(governance_program)
            )
            proposal_account = await governance.get_proposal(proposal)
            voter_token_owner_record = governance.get_token_owner_record_address(
                realm, proposal_account.governing_token_mint, payment_address
            ).address

            # authority and beneficiary are only required while the vote is running
            if proposal_account.is_voting:
                authority, beneficiary = payment_address, payment_address
            else:
                authority, beneficiary = None, None

            relinquish_vote_ix = governance.relinquish_vote_instruction(
                realm,
                proposal_account.governance,
                proposal,
                voter_token_owner_record,
                proposal_account.governing_token_mint,
                authority,
                beneficiary,
            )

            # Sign and submit the transaction
            return await RpcTransactionSubmitter(client).submit(
                [relinquish_vote_ix], [payment_keypair]
            )

    signature = asyncio.run(run())
    show_tx(signature)
    return signature


if __name__ == "__main__":
    fire.Fire(main)
