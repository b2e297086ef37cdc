#!/usr/bin/env python
"""Main entry point for the InkFlow MCP server."""
import argparse
import logging
import os
import sys
from pathlib import Path

from inkflow.config import InkflowConfig, get_config
from inkflow.exceptions import ConfigurationError, InkflowError
from inkflow.observability import configure_logging
from inkflow.server.mcp_server import InkflowMcpServer
from inkflow.services.inkflow_service import InkflowService


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="InkFlow data layer server")
    parser.add_argument(
        "--data-dir",
        help="Directory holding notes.json, notebooks.json and sync/",
        type=str,
        default=os.environ.get("INKFLOW_DATA_DIR")
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("INKFLOW_LOG_LEVEL", "INFO")
    )
    parser.add_argument(
        "--init",
        help="Write the built-in notebooks and notes if no data exists, then exit",
        action="store_true",
    )
    return parser.parse_args(argv)


def update_config(cfg: InkflowConfig, args) -> None:
    """Update the shared config with command line arguments."""
    if args.data_dir:
        cfg.data_dir = Path(args.data_dir).expanduser()


def main(argv=None):
    """Run the InkFlow MCP server."""
    args = parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    try:
        log_dir = configure_logging(level=log_level, console=True)
    except Exception as e:
        # Fall back to basic console logging if file logging fails
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")
        log_dir = None

    logger = logging.getLogger(__name__)
    if log_dir:
        logger.info(f"Persistent logging enabled: {log_dir}")

    try:
        config = get_config()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        sys.exit(1)
    update_config(config, args)
    logger.info(f"Using data directory: {config.data_dir}")

    if args.init:
        try:
            seeded = InkflowService(config).ensure_defaults()
        except InkflowError as e:
            logger.error(f"Failed to seed default data: {e}")
            sys.exit(1)
        logger.info(f"Default data check complete: {seeded}")
        return

    try:
        logger.info("Starting InkFlow MCP server")
        server = InkflowMcpServer(config)
        server.run()
    except Exception as e:
        logger.error(f"Error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
