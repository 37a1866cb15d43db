"""
Program derived addresses of the governance program.

An address is derived from the seeds, a bump byte and the owning program id.
Candidates that are valid ed25519 points are rejected since they could have a
private key, so solders probes bumps from 255 downwards.
"""
import functools
from enum import Enum
from typing import NamedTuple, Sequence, Tuple

from solders.pubkey import Pubkey

from ..errors import DerivationExhausted, InvalidSeeds
from .util import GOVERNANCE_PROGRAM_ID, GovernanceAccountType

MAX_SEEDS = 16
MAX_SEED_LENGTH = 32


class ProgramAddress(NamedTuple):
    address: Pubkey
    bump: int


class PdaKind(Enum):
    """
    Kind of derived account, each bound to its domain separating prefix seed
    """

    REALM = "realm"
    TOKEN_OWNER_RECORD = "token_owner_record"
    GOVERNING_TOKEN_HOLDING = "governing_token_holding"
    VOTE_RECORD = "vote_record"
    PROPOSAL = "proposal"
    REALM_CONFIG = "realm_config"
    ACCOUNT_GOVERNANCE = "account_governance"
    PROGRAM_GOVERNANCE = "program_governance"
    MINT_GOVERNANCE = "mint_governance"
    TOKEN_GOVERNANCE = "token_governance"

    @property
    def prefix(self) -> bytes:
        return _PREFIXES[self]


_PREFIXES = {
    PdaKind.REALM: b"governance",
    PdaKind.TOKEN_OWNER_RECORD: b"governance",
    PdaKind.GOVERNING_TOKEN_HOLDING: b"governance",
    PdaKind.VOTE_RECORD: b"governance",
    PdaKind.PROPOSAL: b"governance",
    PdaKind.REALM_CONFIG: b"realm-config",
    PdaKind.ACCOUNT_GOVERNANCE: b"account-governance",
    PdaKind.PROGRAM_GOVERNANCE: b"program-governance",
    PdaKind.MINT_GOVERNANCE: b"mint-governance",
    PdaKind.TOKEN_GOVERNANCE: b"token-governance",
}


GOVERNANCE_KIND_BY_ACCOUNT_TYPE = {
    GovernanceAccountType.GOVERNANCE_V1: PdaKind.ACCOUNT_GOVERNANCE,
    GovernanceAccountType.GOVERNANCE_V2: PdaKind.ACCOUNT_GOVERNANCE,
    GovernanceAccountType.PROGRAM_GOVERNANCE_V1: PdaKind.PROGRAM_GOVERNANCE,
    GovernanceAccountType.PROGRAM_GOVERNANCE_V2: PdaKind.PROGRAM_GOVERNANCE,
    GovernanceAccountType.MINT_GOVERNANCE_V1: PdaKind.MINT_GOVERNANCE,
    GovernanceAccountType.MINT_GOVERNANCE_V2: PdaKind.MINT_GOVERNANCE,
    GovernanceAccountType.TOKEN_GOVERNANCE_V1: PdaKind.TOKEN_GOVERNANCE,
    GovernanceAccountType.TOKEN_GOVERNANCE_V2: PdaKind.TOKEN_GOVERNANCE,
}


def _check_seeds(seeds: Sequence[bytes]) -> None:
    if len(seeds) >= MAX_SEEDS:
        # one slot is reserved for the bump
        raise InvalidSeeds(f"At most {MAX_SEEDS - 1} seeds allowed, got {len(seeds)}")
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise InvalidSeeds(
                f"Seed {seed!r} is longer than {MAX_SEED_LENGTH} bytes"
            )


@functools.lru_cache(maxsize=4096)
def _find_program_address(seeds: Tuple[bytes, ...], program_id: Pubkey) -> ProgramAddress:
    _check_seeds(seeds)
    try:
        address, bump = Pubkey.find_program_address(list(seeds), program_id)
    except BaseException as e:
        # solders reports an exhausted bump search as a rust panic
        if type(e).__name__ != "PanicException":
            raise
        raise DerivationExhausted(
            f"No off-curve address for seeds {list(seeds)} and program {program_id}"
        ) from e
    return ProgramAddress(address, bump)


def find_program_address(
    seeds: Sequence[bytes], program_id: Pubkey = GOVERNANCE_PROGRAM_ID
) -> ProgramAddress:
    """
    Find the first off-curve address for the given seeds, probing bumps from 255 down to 1.
    """
    return _find_program_address(tuple(bytes(s) for s in seeds), program_id)


def derive(
    kind: PdaKind, seeds: Sequence[bytes], program_id: Pubkey = GOVERNANCE_PROGRAM_ID
) -> ProgramAddress:
    return find_program_address([kind.prefix, *seeds], program_id)


def get_realm_address(name: str, program_id: Pubkey = GOVERNANCE_PROGRAM_ID) -> ProgramAddress:
    return derive(PdaKind.REALM, [name.encode("utf-8")], program_id)


def get_token_owner_record_address(
    realm: Pubkey,
    governing_token_mint: Pubkey,
    governing_token_owner: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> ProgramAddress:
    return derive(
        PdaKind.TOKEN_OWNER_RECORD,
        [bytes(realm), bytes(governing_token_mint), bytes(governing_token_owner)],
        program_id,
    )


def get_governing_token_holding_address(
    realm: Pubkey,
    governing_token_mint: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> ProgramAddress:
    return derive(
        PdaKind.GOVERNING_TOKEN_HOLDING,
        [bytes(realm), bytes(governing_token_mint)],
        program_id,
    )


def get_vote_record_address(
    proposal: Pubkey,
    token_owner_record: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> ProgramAddress:
    return derive(
        PdaKind.VOTE_RECORD, [bytes(proposal), bytes(token_owner_record)], program_id
    )


def get_realm_config_address(
    realm: Pubkey, program_id: Pubkey = GOVERNANCE_PROGRAM_ID
) -> ProgramAddress:
    return derive(PdaKind.REALM_CONFIG, [bytes(realm)], program_id)


def get_governance_address(
    realm: Pubkey,
    governance_seed: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
    kind: PdaKind = PdaKind.ACCOUNT_GOVERNANCE,
) -> ProgramAddress:
    return derive(kind, [bytes(realm), bytes(governance_seed)], program_id)


def get_program_governance_address(
    realm: Pubkey,
    governed_program: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> ProgramAddress:
    return get_governance_address(
        realm, governed_program, program_id, PdaKind.PROGRAM_GOVERNANCE
    )


def get_proposal_address(
    governance: Pubkey,
    governing_token_mint: Pubkey,
    proposal_seed: Pubkey,
    program_id: Pubkey = GOVERNANCE_PROGRAM_ID,
) -> ProgramAddress:
    return derive(
        PdaKind.PROPOSAL,
        [bytes(governance), bytes(governing_token_mint), bytes(proposal_seed)],
        program_id,
    )
