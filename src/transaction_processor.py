import logging
from typing import Optional

from models import (
    ClientAccount,
    ProcessingResult,
    Transaction,
    TransactionRecord,
    TransactionType,
)
from ledger import Ledger

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the ledger one at a time.
    Inapplicable operations are discarded and reported as REJECTED; the ledger is left untouched.
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the account
            REJECTED: Discarded (locked account, bad amount, insufficient funds, bad dispute reference)
        """
        account = self._ledger.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.info(f"{transaction}: account {account.client_id} is locked, skipping")
            return ProcessingResult.REJECTED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(account, transaction)
            case _:
                return ProcessingResult.REJECTED

        if result == ProcessingResult.SUCCESS:
            account.check_invariant()
        return result

    def _check_new_funds_movement(self, transaction: Transaction) -> bool:
        name = transaction.transaction_type.value.capitalize()
        if transaction.amount is None or transaction.amount < 0:
            logger.warning(f"{name} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return False

        if self._ledger.find_transaction(transaction.transaction_id) is not None:
            logger.warning(f"{name} tx {transaction.transaction_id}: transaction id already used, skipping")
            return False
        return True

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._check_new_funds_movement(transaction):
            return ProcessingResult.REJECTED

        account.credit(transaction.amount)
        self._ledger.store_transaction(TransactionRecord.from_transaction(transaction))
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._check_new_funds_movement(transaction):
            return ProcessingResult.REJECTED

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({account.available} < {transaction.amount})")
            return ProcessingResult.REJECTED

        account.debit(transaction.amount)
        self._ledger.store_transaction(TransactionRecord.from_transaction(transaction))
        return ProcessingResult.SUCCESS

    def _find_referenced(self, transaction: Transaction) -> Optional[TransactionRecord]:
        """Look up the transaction a dispute/resolve/chargeback points at."""
        name = transaction.transaction_type.value.capitalize()
        original = self._ledger.find_transaction(transaction.transaction_id)

        if original is None:
            logger.info(f"{name} for tx {transaction.transaction_id}: transaction not found")
            return None

        if original.client_id != transaction.client_id:
            logger.error(f"{name} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return None

        return original

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_referenced(transaction)
        if original is None:
            return ProcessingResult.REJECTED

        if original.disputed:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.REJECTED

        if original.charged_back:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction already charged back")
            return ProcessingResult.REJECTED

        account.hold(original.amount)
        original.disputed = True
        logger.info(f"Dispute for tx {transaction.transaction_id}: holding {original.amount} from {original.transaction_type.value}")
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_referenced(transaction)
        if original is None:
            return ProcessingResult.REJECTED

        if not original.disputed:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.REJECTED

        account.release_hold(original.amount)
        original.disputed = False
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_referenced(transaction)
        if original is None:
            return ProcessingResult.REJECTED

        if not original.disputed:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.REJECTED

        account.charge_back(original.amount)
        original.disputed = False
        original.charged_back = True
        logger.info(f"Chargeback for tx {transaction.transaction_id}: client {account.client_id} locked")
        return ProcessingResult.SUCCESS
