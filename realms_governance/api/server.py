import logging

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from solders.pubkey import Pubkey

from realms_governance.errors import AccountDataError, AccountNotFound
from realms_governance.governance import Governance
from realms_governance.offchain.ledger import RpcLedgerReader
from realms_governance.utils import program_id
from realms_governance.utils.network import connect
from .util import to_primitive

# logger setup
_LOGGER = logging.getLogger(__name__)


def DashingQuery(convert_underscores=True, **kwargs) -> Query:
    """
    This class enables "convert underscores" by default, allowing parameter names
    with underscores to be accessed via hypehenated versions
    """
    query = Query(**kwargs)
    query.convert_underscores = convert_underscores
    return query


app = FastAPI(
    default_response_class=ORJSONResponse,
    title="Realms Governance API.",
    description="Read access to the realms, governances and proposals of the SPL Governance program.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def get_governance():
    async with connect() as client:
        yield Governance(RpcLedgerReader(client), program_id)


def parse_pubkey(value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid address {value}")


@app.exception_handler(AccountNotFound)
async def account_not_found(request, exc: AccountNotFound):
    return ORJSONResponse({"detail": str(exc)}, status_code=404)


@app.exception_handler(AccountDataError)
async def account_data_error(request, exc: AccountDataError):
    _LOGGER.warning(f"Undecodable account data: {exc}")
    return ORJSONResponse({"detail": str(exc)}, status_code=502)


#################################################################################################
#                                            Endpoints                                          #
#################################################################################################

WalletQuery = DashingQuery(
    description="Wallet address in base58",
    examples=["EZLvwGdGyeks3jQLWeBbjL1uGeGbqb2MYU4157pDP9ch"],
)
RealmQuery = DashingQuery(
    description="Realm address in base58",
    examples=["FfJ8awaN9Ut4d3S82DSaLBcKUV3RfvRACo9D1DyqEXAm"],
)
GovernanceQuery = DashingQuery(
    alias="governance",
    description="Governance address in base58",
)
ProposalQuery = DashingQuery(
    description="Proposal address in base58",
    examples=["2Cbbqw6Rej1oxM6Tm7fQfh5bLXgyCv57hTKAwTiptBcc"],
)


@app.get("/api/v1/health")
def health():
    return ORJSONResponse({"status": "ok", "program_id": str(program_id)})


@app.get("/api/v1/daos")
async def daos(
    wallet: str = WalletQuery,
    governance: Governance = Depends(get_governance),
):
    """
    Get the token owner records of a wallet, one per DAO and governing mint
    """
    return ORJSONResponse(
        to_primitive(
            await governance.get_token_owner_records_from_pubkey(parse_pubkey(wallet))
        )
    )


@app.get("/api/v1/governances")
async def governances(
    realm: str = RealmQuery,
    governance: Governance = Depends(get_governance),
):
    """
    Get the governance accounts of a realm
    """
    return ORJSONResponse(
        to_primitive(await governance.get_governance_for_realm(parse_pubkey(realm)))
    )


@app.get("/api/v1/proposals")
async def proposals(
    governance_address: str = GovernanceQuery,
    governance: Governance = Depends(get_governance),
):
    """
    Get the proposals of a governance account
    """
    return ORJSONResponse(
        to_primitive(
            await governance.get_proposals_for_governance(
                parse_pubkey(governance_address)
            )
        )
    )


@app.get("/api/v1/proposal")
async def proposal(
    address: str = ProposalQuery,
    governance: Governance = Depends(get_governance),
):
    """
    Get a single proposal
    """
    return ORJSONResponse(
        to_primitive(await governance.get_proposal(parse_pubkey(address)))
    )
