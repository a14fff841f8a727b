"""
Command-Line Demo for Balance Service

Runs a list of transactions for one user against in-memory storage,
then prints the transaction report and the final balance.

Usage:
    python -m app.main
    python -m app.main --user-id 7 --transaction credit 500 USD --transaction debit 300 EUR

With no --transaction options the default scenario runs:
credit 500 USD, then debit 300 EUR, for user 1.
"""

import argparse
import asyncio
import sys
from typing import Optional, TextIO

from balance_service.audit import configure_logging
from balance_service.config import get_settings
from balance_service.processor import TransactionProcessor, create_processor


DEFAULT_TRANSACTIONS = [
    ["credit", "500", "USD"],
    ["debit", "300", "EUR"],
]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Apply credit/debit transactions and print the resulting report"
    )
    parser.add_argument(
        "--user-id",
        type=int,
        default=1,
        help="Account to apply the transactions to (default: 1)",
    )
    parser.add_argument(
        "--transaction",
        action="append",
        nargs="+",
        metavar="ARG",
        help=(
            "A transaction as TYPE AMOUNT [CURRENCY], e.g. '--transaction debit 300 EUR'. "
            "Repeat for several; currency defaults to the base currency."
        ),
    )
    args = parser.parse_args(argv)
    
    for spec in args.transaction or []:
        if len(spec) not in (2, 3):
            parser.error(
                f"--transaction takes TYPE AMOUNT [CURRENCY], got: {' '.join(spec)}"
            )
    return args


async def run_transactions(
    processor: TransactionProcessor,
    user_id: int,
    transactions: list[list[str]],
    out: TextIO,
) -> bool:
    """
    Apply transactions in order, printing an error line for each failure.
    
    Returns True if every transaction succeeded.
    """
    all_ok = True
    for spec in transactions:
        transaction_type, amount = spec[0], spec[1]
        currency = spec[2] if len(spec) > 2 else None
        
        result = await processor.process(user_id, transaction_type, amount, currency)
        if not result.success:
            all_ok = False
            print(f"Error: {result.message}", file=out)
    
    print(await processor.report(user_id), file=out)
    balance = await processor.get_balance(user_id)
    print(f"Final balance: {balance} {processor.base_currency}", file=out)
    return all_ok


def main(argv: Optional[list[str]] = None, out: Optional[TextIO] = None) -> int:
    args = parse_args(argv)
    out = out or sys.stdout
    
    configure_logging(get_settings().app.log_level)
    processor = create_processor(alert_stream=out)
    
    ok = asyncio.run(
        run_transactions(
            processor,
            args.user_id,
            args.transaction or DEFAULT_TRANSACTIONS,
            out,
        )
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
