"""
Collaborators reading accounts from and submitting transactions to the cluster.

The governance client only depends on the two protocols below. The RPC backed
implementations wrap solana-py's AsyncClient.
"""
import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException, UnconfirmedTxError
from solana.rpc.types import MemcmpOpts, TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from ..errors import AccountNotFound, SubmissionError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemcmpFilter:
    """
    Match accounts holding `value` at byte `offset` of their data
    """

    offset: int
    value: Pubkey

    def matches(self, data: bytes) -> bool:
        return data[self.offset : self.offset + 32] == bytes(self.value)


class LedgerReader(Protocol):
    async def fetch_account(self, address: Pubkey) -> bytes:
        ...

    async def fetch_accounts_by_filter(
        self, program_id: Pubkey, filters: Sequence[MemcmpFilter]
    ) -> List[Tuple[Pubkey, bytes]]:
        ...


class TransactionSubmitter(Protocol):
    async def submit(
        self, instructions: Sequence[Instruction], signers: Sequence[Keypair]
    ) -> Signature:
        ...


class RpcLedgerReader:
    def __init__(self, client: AsyncClient, commitment: Commitment = Confirmed):
        self.client = client
        self.commitment = commitment

    async def fetch_account(self, address: Pubkey) -> bytes:
        resp = await self.client.get_account_info(
            address, commitment=self.commitment, encoding="base64"
        )
        if resp.value is None:
            raise AccountNotFound(address)
        return bytes(resp.value.data)

    async def fetch_accounts_by_filter(
        self, program_id: Pubkey, filters: Sequence[MemcmpFilter]
    ) -> List[Tuple[Pubkey, bytes]]:
        resp = await self.client.get_program_accounts(
            program_id,
            commitment=self.commitment,
            encoding="base64",
            filters=[MemcmpOpts(offset=f.offset, bytes=str(f.value)) for f in filters],
        )
        _LOGGER.debug(f"Fetched {len(resp.value)} accounts of program {program_id}")
        return [(keyed.pubkey, bytes(keyed.account.data)) for keyed in resp.value]


class RpcTransactionSubmitter:
    """
    Sign with all signers, the first one pays the fees, send and wait for confirmation.
    """

    def __init__(self, client: AsyncClient, commitment: Commitment = Confirmed):
        self.client = client
        self.commitment = commitment

    async def submit(
        self, instructions: Sequence[Instruction], signers: Sequence[Keypair]
    ) -> Signature:
        if not signers:
            raise SubmissionError("At least one signer is needed to pay the fees")
        try:
            blockhash = (
                await self.client.get_latest_blockhash(self.commitment)
            ).value.blockhash
            message = Message.new_with_blockhash(
                list(instructions), signers[0].pubkey(), blockhash
            )
            tx = Transaction(list(signers), message, blockhash)
            signature = (
                await self.client.send_transaction(
                    tx, opts=TxOpts(preflight_commitment=self.commitment)
                )
            ).value
            _LOGGER.info(f"Submitted transaction {signature}")
            status = await self.client.confirm_transaction(
                signature, commitment=self.commitment
            )
        except (SolanaRpcException, RPCException, UnconfirmedTxError) as e:
            raise SubmissionError(f"Transaction submission failed: {e}") from e
        err = status.value[0].err if status.value and status.value[0] else None
        if err is not None:
            raise SubmissionError(f"Transaction {signature} failed: {err}")
        return signature
