# Overview: Exception taxonomy shared by the cart, checkout, wallet and ledger services.

"""
Two families, surfaced differently to callers:

- RuleViolation: an ordinary business rejection (empty cart, not enough
  balance or stock, bad amount). Nothing was changed; the operator can
  correct the input and try again.
- InvariantViolation: the caller handed the core something it should never
  see (a product or member id that does not exist, an attempt to rewrite
  ledger history). Indicates misuse of the interface, not a user mistake.
"""


class PosError(Exception):
    """Base for all point-of-sale service errors."""
    code = "POS_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": str(self), "code": self.code, "details": self.details}


class RuleViolation(PosError):
    code = "RULE_VIOLATION"


class InvariantViolation(PosError):
    code = "INVARIANT_VIOLATION"


class NoMemberSelectedError(RuleViolation):
    code = "NO_MEMBER_SELECTED"


class InsufficientStockError(RuleViolation):
    code = "INSUFFICIENT_STOCK"


class EmptyCartError(RuleViolation):
    code = "EMPTY_CART"


class InsufficientBalanceError(RuleViolation):
    code = "INSUFFICIENT_BALANCE"


class InvalidAmountError(RuleViolation):
    code = "INVALID_AMOUNT"


class TotalMismatchError(RuleViolation):
    code = "TOTAL_MISMATCH"


class CartLineNotFoundError(RuleViolation):
    code = "CART_LINE_NOT_FOUND"


class UnknownProductError(InvariantViolation):
    code = "UNKNOWN_PRODUCT"


class UnknownMemberError(InvariantViolation):
    code = "UNKNOWN_MEMBER"


class InvalidLineError(InvariantViolation):
    code = "INVALID_LINE"


class LedgerImmutableError(InvariantViolation):
    code = "LEDGER_IMMUTABLE"
