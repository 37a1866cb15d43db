import dataclasses
from enum import Enum

from solders.pubkey import Pubkey

from ..onchain.accounts import ProgramAccount


def to_primitive(value):
    """
    Convert decoded records into JSON serializable values.
    Addresses become base58 strings and enums their names.
    """
    if isinstance(value, Pubkey):
        return str(value)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, ProgramAccount):
        return {"pubkey": str(value.pubkey), "account": to_primitive(value.account)}
    if dataclasses.is_dataclass(value):
        primitive = {
            f.name: to_primitive(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
        # union members are told apart by their class name
        if not primitive or hasattr(value, "VARIANT"):
            primitive["kind"] = type(value).__name__
        return primitive
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    return value
