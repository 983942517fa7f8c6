#!/usr/bin/env python3
"""Call Routing Resolver - Main Entry Point.

Resolves which outbound routes a subscriber's call would use, from a JSON
export of the routing directory.

Usage:
    ./main.py sip:alice@example.com 0044123456789
    ./main.py sip:alice@example.com 0044123456789 --catalog export.json
    ./main.py sip:alice@example.com 0044123456789 --json

Exit status is 0 when routes were found, 2 when no usage routes the number,
and 1 on errors.
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from config import get_settings
from core.call_routing import CallRoutingService
from core.errors import CallRoutingError
from core.models import ResolutionResult
from services.catalog import load_catalog

logger = logging.getLogger(__name__)

EXIT_ROUTED = 0
EXIT_ERROR = 1
EXIT_NO_ROUTE = 2


def configure_logging(debug: bool, log_level: str) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def result_to_dict(result: ResolutionResult) -> dict:
    """Plain representation of a resolution for JSON output."""
    return {
        "status": result.status.value,
        "dialed_number": result.dialed_number,
        "normalized_number": result.normalized_number,
        "translation_rule": result.matched_rule.name if result.matched_rule else None,
        "policy": result.policy_name,
        "usage": result.usage_group.name if result.usage_group else None,
        "routes": [
            {"name": route.name, "priority": route.priority, "gateways": list(route.gateways)}
            for route in result.routes
        ],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve outbound call routing for a subscriber")
    parser.add_argument("identity", help="Subscriber identity (SIP URI or UPN)")
    parser.add_argument("number", help="Dialed number")
    parser.add_argument("--catalog", help="Catalog JSON file (default: DIRECTORY_CATALOG_PATH)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging(False, "INFO")
        logger.error(f"Invalid settings: {e}")
        return EXIT_ERROR
    configure_logging(settings.debug, settings.log_level)

    try:
        directory = load_catalog(args.catalog or settings.directory.catalog_path)
        service = CallRoutingService(directory, settings.routing)
        result = service.resolve_call_routing(args.number, args.identity)
    except CallRoutingError as e:
        logger.error(str(e))
        return EXIT_ERROR

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    elif result.found:
        print("\n".join(result.route_names))

    return EXIT_ROUTED if result.found else EXIT_NO_ROUTE


if __name__ == "__main__":
    sys.exit(main())
