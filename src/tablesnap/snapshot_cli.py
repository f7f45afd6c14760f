#!/usr/bin/env python3
"""
CLI for snapshotting database tables into per-row JSON files.

Usage:
    tablesnap                     # reads ./config.json
    tablesnap path/to/config.json
    tablesnap path/to/config.yaml

Environment:
    TABLESNAP_LOG_LEVEL    Logging level (default: INFO)
    TABLESNAP_LOG_FORMAT   'text' (default) or 'json'
    TABLESNAP_SQLSERVER_*  Connection overrides, see config_loader
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from tablesnap.config.config_loader import DEFAULT_CONFIG_PATH, load_config
from tablesnap.core.exceptions import TableSnapshotError
from tablesnap.core.logging import configure_logging, parse_level
from tablesnap.snapshot.run import run_snapshot
from tablesnap.source.sql_source import SqlTableSource

logger = logging.getLogger("tablesnap.cli")


def setup_logging() -> None:
    """Configure logging from the environment."""
    configure_logging(
        level=parse_level(os.environ.get("TABLESNAP_LOG_LEVEL")),
        structured=os.environ.get("TABLESNAP_LOG_FORMAT", "text").lower() == "json",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="tablesnap",
        description="Snapshot database tables into one JSON file per row",
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to the config file (default: config.json)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    setup_logging()

    try:
        config = load_config(args.config)
        source = SqlTableSource(config.connection)
        run_snapshot(config, source)
    except TableSnapshotError as e:
        logger.error(f"Snapshot failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
