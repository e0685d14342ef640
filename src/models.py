from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
    localcontext,
)
from enum import Enum
from typing import Optional


# Balance arithmetic never rounds; an inexact result raises instead of losing money.
EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"


class TransactionParseError(ValueError):
    """Raised when an input row cannot be turned into a Transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class LedgerInvariantError(RuntimeError):
    """total != available + held after an operation. Always a bug, never bad input."""


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionRecord:
    """A deposit or withdrawal kept for later dispute lookups."""

    transaction_id: int
    client_id: int
    transaction_type: TransactionType
    amount: Decimal
    disputed: bool = False
    charged_back: bool = False

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionRecord":
        return cls(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
        )


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        with localcontext(EXACT_CONTEXT):
            self.available += amount
            self.total += amount

    def debit(self, amount: Decimal) -> None:
        with localcontext(EXACT_CONTEXT):
            self.available -= amount
            self.total -= amount

    def hold(self, amount: Decimal) -> None:
        with localcontext(EXACT_CONTEXT):
            self.available -= amount
            self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        with localcontext(EXACT_CONTEXT):
            self.held -= amount
            self.available += amount

    def charge_back(self, amount: Decimal) -> None:
        with localcontext(EXACT_CONTEXT):
            self.held -= amount
            self.total -= amount
        self.locked = True

    def check_invariant(self) -> None:
        with localcontext(EXACT_CONTEXT):
            balanced = self.total == self.available + self.held
        if not balanced:
            raise LedgerInvariantError(
                f"Client {self.client_id}: total {self.total} != available {self.available} + held {self.held}"
            )


class ProcessingStats:
    """Counters for applied and rejected operations."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0

    def record_success(self):
        self.processed += 1

    def record_rejection(self):
        self.rejected += 1
