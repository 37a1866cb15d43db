"""
Settings of the off-chain scripts, read from the environment.
"""
import json
import os
from pathlib import Path
from typing import Tuple

from solana.rpc.commitment import Commitment
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..onchain.util import GOVERNANCE_PROGRAM_ID

cluster = os.environ.get("SOLANA_CLUSTER", "devnet")
rpc_url = os.environ.get("SOLANA_RPC_URL", f"https://api.{cluster}.solana.com")
commitment = Commitment(os.environ.get("SOLANA_COMMITMENT", "confirmed"))
program_id = Pubkey.from_string(
    os.environ.get("GOVERNANCE_PROGRAM_ID", str(GOVERNANCE_PROGRAM_ID))
)
keys_dir = Path(os.environ.get("KEYS_DIR", "keys"))


def get_signing_info(wallet: str) -> Tuple[Keypair, Pubkey]:
    """
    Load the keypair stored as a JSON secret key array in keys/<wallet>.json
    """
    with (keys_dir / f"{wallet}.json").open() as f:
        keypair = Keypair.from_bytes(bytes(json.load(f)))
    return keypair, keypair.pubkey()
