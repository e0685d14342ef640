import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

from models import (
    ClientAccount,
    ProcessingResult,
    ProcessingStats,
    Transaction,
    TransactionParseError,
    TransactionType,
)
from ledger import Ledger
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")


class PaymentsEngine:
    """
    Reads transactions in input order and applies each one to the ledger as soon as it is parsed.
    A malformed row aborts the run with TransactionParseError.
    """

    def __init__(self, precision: int = 4):
        self.precision = precision
        self._ledger = Ledger()
        self._processor = TransactionProcessor(self._ledger)
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            return self.process_rows(f)

    def process_rows(self, lines: Iterable[str]) -> Dict[int, ClientAccount]:
        """Process CSV lines (header first) and return final account states."""
        reader = csv.DictReader(lines)
        for row in reader:
            transaction = self._parse_csv_row(row, reader.line_num)
            self.process_transaction(transaction)

        logger.info(f"Processed: {self._stats.processed}, Rejected: {self._stats.rejected}")
        return {account.client_id: account for account in self._ledger.all_accounts()}

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        result = self._processor.process_transaction(transaction)
        if result == ProcessingResult.SUCCESS:
            self._stats.record_success()
        else:
            self._stats.record_rejection()
        return result

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._ledger.get_account(client_id)

    def _parse_csv_row(self, row: Dict[Optional[str], object], line_number: Optional[int] = None) -> Transaction:
        """Parse CSV row into Transaction."""
        normalized = {
            k.strip(): (v or "").strip()
            for k, v in row.items()
            if isinstance(k, str)
        }

        for column in REQUIRED_COLUMNS:
            if not normalized.get(column):
                raise TransactionParseError(f"missing value for column '{column}'", line_number)

        transaction_type_str = normalized["type"].lower()
        try:
            transaction_type = TransactionType(transaction_type_str)
        except ValueError:
            raise TransactionParseError(f"unknown transaction type '{normalized['type']}'", line_number) from None

        try:
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])
        except ValueError as e:
            raise TransactionParseError(f"invalid identifier: {e}", line_number) from e

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            try:
                amount = Decimal(amount_str)
            except InvalidOperation:
                raise TransactionParseError(f"invalid amount '{amount_str}'", line_number) from None
            if not amount.is_finite():
                raise TransactionParseError(f"invalid amount '{amount_str}'", line_number)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
