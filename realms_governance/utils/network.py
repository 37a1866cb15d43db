import logging

from solana.rpc.async_api import AsyncClient
from solders.signature import Signature

from . import cluster, commitment, rpc_url

_LOGGER = logging.getLogger(__name__)


def connect() -> AsyncClient:
    return AsyncClient(rpc_url, commitment=commitment)


def show_tx(signature: Signature):
    _LOGGER.info(f"Transaction {signature} confirmed")
    print(f"transaction id: {signature}")
    print(f"https://explorer.solana.com/tx/{signature}?cluster={cluster}")
