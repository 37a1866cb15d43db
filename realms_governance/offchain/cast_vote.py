import asyncio
import json
from typing import Optional, Union

import fire
from solders.pubkey import Pubkey

from realms_governance.governance import Governance
from realms_governance.offchain.ledger import RpcLedgerReader, RpcTransactionSubmitter
from realms_governance.onchain.accounts import ProgramAccount
from realms_governance.onchain.vote import (
    Abstain,
    Deny,
    Veto,
    approve_option,
    vote_from_dict,
)
from realms_governance.utils import get_signing_info, program_id
from realms_governance.utils.network import connect, show_tx


def vote_from_choice(choice: str, option_index: int, options_count: int):
    if choice == "approve":
        return approve_option(option_index, options_count)
    return {"deny": Deny, "abstain": Abstain, "veto": Veto}[choice]()


def parse_vote(vote: Union[str, dict]):
    """
    fire hands over a JSON argument already parsed, quoted ones arrive as a string
    """
    if isinstance(vote, str):
        vote = json.loads(vote)
    return vote_from_dict(vote)


def main(
    realm: str,
    proposal: str,
    wallet: str = "voter",
    choice: str = "approve",
    option_index: int = 0,
    vote: Optional[str] = None,
    governance_program: str = str(program_id),
    voter_weight_record: Optional[str] = None,
    max_voter_weight_record: Optional[str] = None,
):
    """
    Cast a vote on a proposal. `vote` takes the full vote as JSON, e.g.
    '{"approve": [[{"rank": 0, "weightPercentage": 100}]]}', and overrides `choice`.
    """
    # Get signing info
    payment_keypair, payment_address = get_signing_info(wallet)
    realm = Pubkey.from_string(realm)
    proposal = Pubkey.from_string(proposal)
    parsed_vote = parse_vote(vote) if vote is not None else None

    async def run():
        async with connect() as client:
            governance = Governance(
                RpcLedgerReader(client), Pubkey.from_string(governance_program)
            )
            proposal_account = await governance.get_proposal(proposal)

            # the voter record of the signing wallet for the mint of the proposal
            voter_token_owner_record = governance.get_token_owner_record_address(
                realm, proposal_account.governing_token_mint, payment_address
            ).address

            if parsed_vote is None:
                cast = vote_from_choice(
                    choice, option_index, max(len(proposal_account.options), 1)
                )
            else:
                cast = parsed_vote
            cast_vote_ix = await governance.cast_vote_instruction(
                cast,
                realm,
                proposal_account.governance,
                ProgramAccount(proposal, proposal_account),
                proposal_account.token_owner_record,
                voter_token_owner_record,
                payment_address,
                proposal_account.governing_token_mint,
                payment_address,
                Pubkey.from_string(voter_weight_record) if voter_weight_record else None,
                Pubkey.from_string(max_voter_weight_record)
                if max_voter_weight_record
                else None,
            )

            # Sign and submit the transaction
            return await RpcTransactionSubmitter(client).submit(
                [cast_vote_ix], [payment_keypair]
            )

    signature = asyncio.run(run())
    show_tx(signature)
    return signature


if __name__ == "__main__":
    fire.Fire(main)
