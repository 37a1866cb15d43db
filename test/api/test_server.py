import pytest
from fastapi.testclient import TestClient
from solders.pubkey import Pubkey

from realms_governance.api.server import app, get_governance
from realms_governance.governance import Governance
from realms_governance.onchain.pda import get_token_owner_record_address
from test.offchain.util import FakeLedger
from test.onchain.util import (
    governance_data,
    proposal_data,
    realm_data,
    token_owner_record_data,
)

REALM = Pubkey.from_string("FfJ8awaN9Ut4d3S82DSaLBcKUV3RfvRACo9D1DyqEXAm")
GOVERNANCE = Pubkey.from_string("2Cbbqw6Rej1oxM6Tm7fQfh5bLXgyCv57hTKAwTiptBcc")
PROPOSAL = Pubkey.from_string("8Z7bQ5ZwxfQwpcrsPthWZG9LL1N3pmKn2TKAtzTFbH63")
MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
VOTER = Pubkey.from_string("EZLvwGdGyeks3jQLWeBbjL1uGeGbqb2MYU4157pDP9ch")

VOTER_RECORD = get_token_owner_record_address(REALM, MINT, VOTER).address


@pytest.fixture
def client():
    ledger = FakeLedger(
        {
            REALM: realm_data(MINT),
            GOVERNANCE: governance_data(REALM, MINT),
            PROPOSAL: proposal_data(GOVERNANCE, MINT, VOTER_RECORD, name="Budget"),
            VOTER_RECORD: token_owner_record_data(REALM, MINT, VOTER, deposit=500),
        }
    )
    app.dependency_overrides[get_governance] = lambda: Governance(ledger)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_daos(client):
    response = client.get("/api/v1/daos", params={"wallet": str(VOTER)})
    assert response.status_code == 200
    (dao,) = response.json()
    assert dao["pubkey"] == str(VOTER_RECORD)
    assert dao["account"]["realm"] == str(REALM)
    assert dao["account"]["governing_token_deposit_amount"] == 500
    assert dao["account"]["account_type"] == "TOKEN_OWNER_RECORD_V2"


def test_governances(client):
    response = client.get("/api/v1/governances", params={"realm": str(REALM)})
    assert response.status_code == 200
    assert [g["pubkey"] for g in response.json()] == [str(GOVERNANCE)]


def test_proposals(client):
    response = client.get("/api/v1/proposals", params={"governance": str(GOVERNANCE)})
    assert response.status_code == 200
    (proposal,) = response.json()
    assert proposal["account"]["name"] == "Budget"
    assert proposal["account"]["state"] == "VOTING"
    assert proposal["account"]["vote_type"] == {"kind": "SingleChoice"}


def test_proposal(client):
    response = client.get("/api/v1/proposal", params={"address": str(PROPOSAL)})
    assert response.status_code == 200
    assert response.json()["governance"] == str(GOVERNANCE)


def test_unknown_proposal(client):
    response = client.get("/api/v1/proposal", params={"address": str(MINT)})
    assert response.status_code == 404


def test_invalid_address(client):
    response = client.get("/api/v1/proposal", params={"address": "not-an-address"})
    assert response.status_code == 400


def test_undecodable_account(client):
    # the realm is not a proposal
    response = client.get("/api/v1/proposal", params={"address": str(REALM)})
    assert response.status_code == 502
