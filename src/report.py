import csv
from decimal import Decimal, localcontext
from typing import Iterable, TextIO

from models import ClientAccount

HEADER = ("client", "available", "held", "total", "locked")


def format_amount(value: Decimal, precision: int = 4) -> str:
    """Format decimal with exactly `precision` decimal places."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + precision + 2)
        ctx.Emax = max(ctx.Emax, value.adjusted() + 1)
        return f"{value.quantize(Decimal(1).scaleb(-precision)):f}"


def write_accounts_csv(accounts: Iterable[ClientAccount], stream: TextIO, precision: int = 4) -> None:
    """Write one row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow((
            account.client_id,
            format_amount(account.available, precision),
            format_amount(account.held, precision),
            format_amount(account.total, precision),
            str(account.locked).lower(),
        ))
