import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from solders.pubkey import Pubkey

from realms_governance.errors import DerivationExhausted, InvalidSeeds
from realms_governance.onchain import pda
from realms_governance.onchain.util import GOVERNANCE_PROGRAM_ID

REALM = Pubkey.from_string("FfJ8awaN9Ut4d3S82DSaLBcKUV3RfvRACo9D1DyqEXAm")
MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
OWNER = Pubkey.from_string("EZLvwGdGyeks3jQLWeBbjL1uGeGbqb2MYU4157pDP9ch")

seeds_strategy = st.lists(st.binary(max_size=32), max_size=4)


@settings(max_examples=50, deadline=None)
@given(seeds_strategy)
def test_find_program_address_agrees_with_runtime(seeds):
    address, bump = pda.find_program_address(seeds, GOVERNANCE_PROGRAM_ID)
    expected_address, expected_bump = Pubkey.find_program_address(
        seeds, GOVERNANCE_PROGRAM_ID
    )
    assert address == expected_address
    assert bump == expected_bump
    assert not address.is_on_curve()


@settings(max_examples=50, deadline=None)
@given(seeds_strategy)
def test_find_program_address_is_deterministic(seeds):
    pda._find_program_address.cache_clear()
    first = pda.find_program_address(seeds)
    pda._find_program_address.cache_clear()
    second = pda.find_program_address(seeds)
    assert first == second


def test_token_owner_record_address():
    first = pda.get_token_owner_record_address(REALM, MINT, OWNER)
    second = pda.get_token_owner_record_address(REALM, MINT, OWNER)
    assert first == second
    expected, bump = Pubkey.find_program_address(
        [b"governance", bytes(REALM), bytes(MINT), bytes(OWNER)],
        GOVERNANCE_PROGRAM_ID,
    )
    assert first.address == expected
    assert first.bump == bump


def test_token_owner_record_address_depends_on_every_seed():
    base = pda.get_token_owner_record_address(REALM, MINT, OWNER).address
    assert pda.get_token_owner_record_address(OWNER, MINT, REALM).address != base
    assert pda.get_token_owner_record_address(REALM, OWNER, MINT).address != base
    other_program = Pubkey.from_string("pytGY6tWRgGinSCvRLnSv4fHfBTMoiDGiCsesmHWM6U")
    assert (
        pda.get_token_owner_record_address(REALM, MINT, OWNER, other_program).address
        != base
    )


def test_kinds_are_domain_separated():
    governance = pda.get_governance_address(REALM, MINT).address
    program_governance = pda.get_program_governance_address(REALM, MINT).address
    holding = pda.get_governing_token_holding_address(REALM, MINT).address
    assert len({governance, program_governance, holding}) == 3
    realm_config = pda.get_realm_config_address(REALM).address
    assert realm_config != pda.find_program_address([b"governance", bytes(REALM)]).address


def test_vote_record_address():
    proposal = Pubkey.from_string("2Cbbqw6Rej1oxM6Tm7fQfh5bLXgyCv57hTKAwTiptBcc")
    tor = pda.get_token_owner_record_address(REALM, MINT, OWNER).address
    expected, _ = Pubkey.find_program_address(
        [b"governance", bytes(proposal), bytes(tor)], GOVERNANCE_PROGRAM_ID
    )
    assert pda.get_vote_record_address(proposal, tor).address == expected


def test_realm_address_from_name():
    expected, _ = Pubkey.find_program_address(
        [b"governance", b"Test DAO"], GOVERNANCE_PROGRAM_ID
    )
    assert pda.get_realm_address("Test DAO").address == expected


def test_seed_too_long():
    with pytest.raises(InvalidSeeds):
        pda.find_program_address([b"x" * 33])


def test_too_many_seeds():
    with pytest.raises(InvalidSeeds):
        pda.find_program_address([b"x"] * 16)


class PanicException(BaseException):
    pass


class ExhaustedPubkey:
    @staticmethod
    def find_program_address(seeds, program_id):
        raise PanicException("Unable to find a viable program address bump seed")


class BrokenPubkey:
    @staticmethod
    def find_program_address(seeds, program_id):
        raise KeyboardInterrupt()


def test_derivation_exhausted(monkeypatch):
    pda._find_program_address.cache_clear()
    monkeypatch.setattr(pda, "Pubkey", ExhaustedPubkey)
    try:
        with pytest.raises(DerivationExhausted):
            pda.find_program_address([b"exhausted"])
    finally:
        pda._find_program_address.cache_clear()


def test_other_failures_propagate(monkeypatch):
    pda._find_program_address.cache_clear()
    monkeypatch.setattr(pda, "Pubkey", BrokenPubkey)
    try:
        with pytest.raises(KeyboardInterrupt):
            pda.find_program_address([b"interrupted"])
    finally:
        pda._find_program_address.cache_clear()


def test_proposal_address():
    governance = pda.get_governance_address(REALM, MINT).address
    seed = Pubkey.from_string("2Cbbqw6Rej1oxM6Tm7fQfh5bLXgyCv57hTKAwTiptBcc")
    expected, _ = Pubkey.find_program_address(
        [b"governance", bytes(governance), bytes(MINT), bytes(seed)],
        GOVERNANCE_PROGRAM_ID,
    )
    assert pda.get_proposal_address(governance, MINT, seed).address == expected
