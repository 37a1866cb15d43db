"""
Exceptions raised by the governance client.

Callers can tell three families apart:
- AccountDataError: the on-chain data is malformed or of a layout we do not know
- InvalidArgument: the arguments passed by the caller are inconsistent
- SubmissionError: the transport or the cluster rejected a transaction
"""


class GovernanceError(Exception):
    pass


class AccountDataError(GovernanceError, ValueError):
    """
    Raw account data could not be decoded into the requested record
    """


class UnexpectedAccountKind(AccountDataError):
    def __init__(self, expected: str, account_type: int):
        super().__init__(
            f"Expected a {expected} account but found account type {account_type}"
        )
        self.expected = expected
        self.account_type = account_type


class TruncatedData(AccountDataError):
    def __init__(self, offset: int, needed: int, length: int):
        super().__init__(
            f"Account data truncated: need {needed} bytes at offset {offset}, buffer has {length}"
        )
        self.offset = offset
        self.needed = needed
        self.length = length


class UnsupportedVersion(AccountDataError):
    def __init__(self, account_type: int, reason: str = "newer than known layouts"):
        super().__init__(f"Unsupported account type {account_type}: {reason}")
        self.account_type = account_type


class AccountNotFound(GovernanceError, LookupError):
    def __init__(self, address):
        super().__init__(f"Account not found: {address}")
        self.address = address


class InvalidArgument(GovernanceError, ValueError):
    """
    The caller supplied arguments that can never produce a valid instruction
    """


class InvalidVoteWeights(InvalidArgument):
    pass


class MintMismatch(InvalidArgument):
    def __init__(self, proposal_mint, supplied_mint):
        super().__init__(
            f"Proposal is governed by mint {proposal_mint}, got {supplied_mint}"
        )
        self.proposal_mint = proposal_mint
        self.supplied_mint = supplied_mint


class IncompletePluginPair(InvalidArgument):
    pass


class IncompleteRelinquishAccounts(InvalidArgument):
    pass


class InvalidSeeds(InvalidArgument):
    pass


class DerivationExhausted(GovernanceError):
    pass


class SubmissionError(GovernanceError):
    pass
