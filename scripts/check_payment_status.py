#!/usr/bin/env python3
"""
Poll Pesapal for the status of one or more orders.

Prints one line per tracking id: the gateway status code, PENDING when the
gateway has none yet, or ERROR when the lookup failed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

from src.database.ledger import InMemoryTransactionLedger
from src.deposit.notifications import LoggingNotifier
from src.deposit.workflow import DepositWorkflow
from src.integrations.clients.real_http.pesapal import PesapalClient
from src.utils.config_loader import ConfigError, load_pesapal_config


async def run(tracking_ids, workflow: DepositWorkflow) -> None:
    for tracking_id in tracking_ids:
        status = await workflow.check_payment_status(tracking_id)
        print(f"{tracking_id}\t{status}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Check Pesapal order status")
    parser.add_argument("tracking_ids", nargs="+", help="Order tracking id(s) returned on submission")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_pesapal_config()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    workflow = DepositWorkflow(PesapalClient(config), InMemoryTransactionLedger(), LoggingNotifier())
    asyncio.run(run(args.tracking_ids, workflow))
    return 0


if __name__ == "__main__":
    sys.exit(main())
