#!/usr/bin/env python3
"""
Scheduled Price Refresh

Runs one multi-tenant price refresh against the partner catalog and prints
the run counters as JSON. Meant for cron or a scheduler; the HTTP endpoint
POST /update-products does the same thing.

Usage:
    python3 scripts/update_products.py
    python3 scripts/update_products.py --verbose
    python3 scripts/update_products.py --fail-fast

SETUP:
    Set environment variables (or put them in .env):
    - SUPABASE_URL: Supabase project URL
    - SUPABASE_ANON_KEY: API key with read/write access to products
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.catalog import CatalogAPIClient
from src.common.config_loader import load_catalog_settings
from src.common.errors import CatalogSyncError
from src.common.log_config import setup_logging
from src.persistence import SupabaseGateway
from src.pipeline import ProductUpdater

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Refresh stale product prices for every tenant.",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort the run on the first tenant that fails (default: log and continue)",
    )
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        gateway = SupabaseGateway.from_env()
    except ValueError:
        logger.error("SUPABASE_URL and SUPABASE_ANON_KEY are required")
        sys.exit(1)

    settings = load_catalog_settings()

    with gateway, CatalogAPIClient(settings) as client:
        updater = ProductUpdater(gateway, client, settings, fail_fast=args.fail_fast)
        try:
            summary = updater.run()
        except CatalogSyncError as e:
            logger.error("Price refresh failed: %s", e)
            sys.exit(1)

    print(json.dumps(summary.to_dict(), indent=2))
    sys.exit(1 if summary.tenants_failed else 0)


if __name__ == "__main__":
    main()
