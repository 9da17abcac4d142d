#!/usr/bin/env python3
"""
Register the configured IPN URL with Pesapal.

Run once per environment; the deposit flow itself never registers IPN URLs.
Uses PESAPAL_* environment variables (see src/utils/config_loader.py).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

from src.integrations.clients.real_http.pesapal import PesapalClient
from src.utils.config_loader import ConfigError, load_pesapal_config


def main() -> int:
    parser = argparse.ArgumentParser(description="Register the Pesapal IPN URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_pesapal_config()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    result = asyncio.run(PesapalClient(config).register_ipn_url())
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
