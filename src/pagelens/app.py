from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from pagelens.core.handlers import analyze_handler, config_handler
from pagelens.core.managers.config_manager import config_manager
from pagelens.core.utils.configure_logging import configure_from_settings

logger = logging.getLogger(__name__)

COMMAND_HANDLERS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "analyze": analyze_handler.handle_analyze,
    "batch": analyze_handler.handle_batch,
    "config": config_handler.handle_config,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagelens",
        description="SEO analysis of saved web pages.",
    )
    subparsers = parser.add_subparsers(dest="command")
    analyze_handler.register(subparsers)
    config_handler.register(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the pagelens command."""
    configure_from_settings(config_manager.get_nested("debug"))

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    logger.debug("Running command '%s'", args.command)
    return COMMAND_HANDLERS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
