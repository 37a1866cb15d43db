from .governance import Governance
from .onchain.accounts import (
    GovernanceAccount,
    ProgramAccount,
    Proposal,
    ProposalState,
    Realm,
    TokenOwnerRecord,
    VoteRecord,
)
from .onchain.pda import ProgramAddress
from .onchain.util import GOVERNANCE_PROGRAM_ID
from .onchain.vote import Abstain, Approve, Deny, Veto, VoteChoice
