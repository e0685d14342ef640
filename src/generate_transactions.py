#!/usr/bin/env python3
"""Generate random transaction feeds for exercising the payments engine.

Rows are deliberately noisy: transaction ids repeat, disputes may point at ids
that never appear, and withdrawals may overdraw. Use the output for regression
and load testing, not as an example of a valid feed.
"""
import argparse
import csv
import random
import sys
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

from models import Transaction, TransactionType

BPS = Decimal("0.0001")
MIN_AMOUNT = Decimal("0.1")
MAX_AMOUNT = Decimal("500")


def random_amount(rng: random.Random) -> Decimal:
    """Sum of three uniform draws, kept to four decimal places."""
    low = int(MIN_AMOUNT / BPS)
    high = int(MAX_AMOUNT / BPS)
    value = sum(Decimal(rng.randint(low, high)) for _ in range(3)) * BPS
    return value.quantize(BPS, rounding=ROUND_HALF_UP)


def generate_transactions(num_transactions: int, num_clients: int, seed: Optional[int] = None) -> List[Transaction]:
    if num_transactions < 1:
        raise ValueError("num_transactions must be positive")
    if not 1 <= num_clients <= 65_535:
        raise ValueError("num_clients must be between 1 and 65535")

    rng = random.Random(seed)
    kinds = list(TransactionType)
    transactions = []
    for _ in range(num_transactions):
        transaction_type = rng.choice(kinds)
        amount = None
        if transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
            amount = random_amount(rng)
        transactions.append(Transaction(
            transaction_type=transaction_type,
            client_id=rng.randint(1, num_clients),
            transaction_id=rng.randint(1, num_transactions),
            amount=amount,
        ))
    return transactions


def write_transactions_csv(transactions: Iterable[Transaction], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(("type", "client", "tx", "amount"))
    for transaction in transactions:
        amount = "" if transaction.amount is None else f"{transaction.amount:.4f}"
        writer.writerow((
            transaction.transaction_type.value,
            transaction.client_id,
            transaction.transaction_id,
            amount,
        ))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Emit a random transactions CSV for the payments engine.")
    parser.add_argument("--rows", type=int, default=1000, help="Number of transactions to emit.")
    parser.add_argument("--clients", type=int, default=10, help="How many client IDs to draw from.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible datasets.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("-"),
        help="Where to write the CSV. Use '-' for stdout.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        transactions = generate_transactions(args.rows, args.clients, args.seed)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if str(args.output) == "-":
        write_transactions_csv(transactions, sys.stdout)
    else:
        with open(args.output, "w", newline="") as f:
            write_transactions_csv(transactions, f)


if __name__ == "__main__":
    main()
