import logging
from typing import Dict, List, Optional

from models import ClientAccount, TransactionRecord

logger = logging.getLogger(__name__)


class Ledger:
    """
    Authoritative in-memory state.
    Stores client accounts and the deposits/withdrawals that may later be disputed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, TransactionRecord] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account for a client, or None if the client was never seen."""
        return self._accounts.get(client_id)

    def lock_account(self, client_id: int, is_locked: bool = True) -> ClientAccount:
        """
        Manually set the lock flag on an account.
        This is the only way to unlock an account after a chargeback.
        """
        account = self.get_or_create_account(client_id)
        account.locked = is_locked
        logger.info(f"Client {client_id}: account {'locked' if is_locked else 'unlocked'} manually")
        return account

    def store_transaction(self, record: TransactionRecord) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[record.transaction_id] = record

    def find_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def all_accounts(self) -> List[ClientAccount]:
        return list(self._accounts.values())
