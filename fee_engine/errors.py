"""Error taxonomy for transaction fee estimation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AccountErrorCode(Enum):
    NOT_FOUND = "NOT_FOUND"
    MISSING_METHOD = "MISSING_METHOD"
    CANNOT_ESTIMATE_TRANSACTIONS = "CANNOT_ESTIMATE_TRANSACTIONS"


_MESSAGES = {
    AccountErrorCode.NOT_FOUND: "Account not found",
    AccountErrorCode.MISSING_METHOD: "Account is missing a required method",
    AccountErrorCode.CANNOT_ESTIMATE_TRANSACTIONS: "Cannot estimate transactions",
}


class AccountError(RuntimeError):
    """Coded failure surfaced to estimation callers."""

    def __init__(
        self,
        code: AccountErrorCode,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.code = code
        self.message = message or _MESSAGES[code]
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class InvocationError(ValueError):
    """Raised when call input cannot be turned into an invocation."""


@dataclass(frozen=True)
class CannotAggregate:
    """Aggregation failure value carrying the underlying cause."""

    reason: str
    cause: Optional[BaseException] = None

    def to_error(self) -> AccountError:
        return AccountError(
            AccountErrorCode.CANNOT_ESTIMATE_TRANSACTIONS,
            message=f"Cannot estimate transactions: {self.reason}",
            cause=self.cause,
        )
