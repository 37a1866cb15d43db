"""
Shared layout helpers for the governance program accounts and instructions.

All program data is Borsh encoded: little endian integers, u32 length prefixes
for vectors and strings, a one byte tag for Option and enum values.
"""
import struct
from enum import IntEnum
from typing import Callable, List, Optional, TypeVar

from solders.pubkey import Pubkey

from ..errors import AccountDataError, TruncatedData

T = TypeVar("T")

GOVERNANCE_PROGRAM_ID = Pubkey.from_string(
    "GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw"
)

PUBKEY_LENGTH = 32


class GovernanceAccountType(IntEnum):
    """
    Leading discriminator byte of every account owned by the governance program
    """

    UNINITIALIZED = 0
    REALM_V1 = 1
    TOKEN_OWNER_RECORD_V1 = 2
    GOVERNANCE_V1 = 3
    PROGRAM_GOVERNANCE_V1 = 4
    PROPOSAL_V1 = 5
    SIGNATORY_RECORD_V1 = 6
    VOTE_RECORD_V1 = 7
    PROPOSAL_INSTRUCTION_V1 = 8
    MINT_GOVERNANCE_V1 = 9
    TOKEN_GOVERNANCE_V1 = 10
    REALM_CONFIG = 11
    VOTE_RECORD_V2 = 12
    PROPOSAL_TRANSACTION_V2 = 13
    PROPOSAL_V2 = 14
    PROGRAM_METADATA = 15
    REALM_V2 = 16
    TOKEN_OWNER_RECORD_V2 = 17
    GOVERNANCE_V2 = 18
    PROGRAM_GOVERNANCE_V2 = 19
    MINT_GOVERNANCE_V2 = 20
    TOKEN_GOVERNANCE_V2 = 21
    SIGNATORY_RECORD_V2 = 22
    PROPOSAL_DEPOSIT = 23
    REQUIRED_SIGNATORY = 24


NEWEST_ACCOUNT_TYPE = max(GovernanceAccountType)


class BorshReader:
    """
    Cursor over an account buffer. Every read is bounds checked and raises
    TruncatedData instead of reading past the end of the buffer.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, n: int) -> bytes:
        if n < 0 or self.offset + n > len(self.data):
            raise TruncatedData(self.offset, n, len(self.data))
        chunk = self.data[self.offset : self.offset + n]
        self.offset += n
        return chunk

    def _unpack(self, fmt: str) -> int:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]

    def u8(self) -> int:
        return self._unpack("<B")

    def u16(self) -> int:
        return self._unpack("<H")

    def u32(self) -> int:
        return self._unpack("<I")

    def u64(self) -> int:
        return self._unpack("<Q")

    def i64(self) -> int:
        return self._unpack("<q")

    def bool(self) -> bool:
        value = self.u8()
        if value > 1:
            raise AccountDataError(
                f"Invalid bool value {value} at offset {self.offset - 1}"
            )
        return value == 1

    def pubkey(self) -> Pubkey:
        return Pubkey.from_bytes(self.take(PUBKEY_LENGTH))

    def option(self, read: Callable[[], T]) -> Optional[T]:
        if self.bool():
            return read()
        return None

    def vec(self, read: Callable[[], T], min_item_size: int = 1) -> List[T]:
        length = self.u32()
        # reject lengths the buffer cannot possibly hold before looping
        if length * min_item_size > self.remaining:
            raise TruncatedData(self.offset, length * min_item_size, len(self.data))
        return [read() for _ in range(length)]

    def string(self) -> str:
        raw = self.take(self.u32())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AccountDataError(f"Invalid utf-8 string: {e}") from e


class BorshWriter:
    def __init__(self):
        self.parts: List[bytes] = []

    def to_bytes(self) -> bytes:
        return b"".join(self.parts)

    def raw(self, data: bytes) -> "BorshWriter":
        self.parts.append(bytes(data))
        return self

    def u8(self, value: int) -> "BorshWriter":
        return self.raw(struct.pack("<B", value))

    def u16(self, value: int) -> "BorshWriter":
        return self.raw(struct.pack("<H", value))

    def u32(self, value: int) -> "BorshWriter":
        return self.raw(struct.pack("<I", value))

    def u64(self, value: int) -> "BorshWriter":
        return self.raw(struct.pack("<Q", value))

    def i64(self, value: int) -> "BorshWriter":
        return self.raw(struct.pack("<q", value))

    def bool(self, value: bool) -> "BorshWriter":
        return self.u8(1 if value else 0)

    def pubkey(self, value: Pubkey) -> "BorshWriter":
        return self.raw(bytes(value))

    def option(self, value: Optional[T], write: Callable[[T], object]) -> "BorshWriter":
        if value is None:
            return self.u8(0)
        self.u8(1)
        write(value)
        return self

    def vec(self, values: List[T], write: Callable[[T], object]) -> "BorshWriter":
        self.u32(len(values))
        for v in values:
            write(v)
        return self

    def string(self, value: str) -> "BorshWriter":
        encoded = value.encode("utf-8")
        self.u32(len(encoded))
        return self.raw(encoded)
