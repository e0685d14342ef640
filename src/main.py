import logging
import os
import sys

from models import TransactionParseError
from payments_engine import PaymentsEngine
from report import write_accounts_csv

logging.basicConfig(
    level=os.environ.get("PAYMENTS_LOG_LEVEL", "WARNING").upper(),
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def main():
    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, TransactionParseError) as e:
        logger.error(f"Failed to process {filepath}: {e}")
        sys.exit(1)

    write_accounts_csv(accounts.values(), sys.stdout, precision=engine.precision)


if __name__ == "__main__":
    main()
