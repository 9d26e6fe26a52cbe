# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from stallion_checkout.adapters.location import FixedLocationProvider, UnavailableLocationProvider
from stallion_checkout.app import (
    CheckoutInputs,
    build_checkout_session,
    list_events,
    list_parties,
    resolve_order_context,
    submit_order,
)
from stallion_checkout.config import ConfigurationError, configure_logging, get_storefront_config
from stallion_checkout.domain.errors import CheckoutError
from stallion_checkout.domain.model import OrderType
from stallion_checkout.domain.payload import CartItem

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from stallion_checkout.domain.ports.location import LocationProvider
    from stallion_checkout.domain.resolution import OrderContext

log = logging.getLogger(__name__)

TOKEN_ENV_VAR = "STOREFRONT_API_TOKEN"


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--order-type",
        type=str,
        choices=[str(order_type) for order_type in OrderType],
        help="Order type (salesmen only; parties and distributors have a fixed type)",
    )
    parser.add_argument("--party", type=str, help="Selected party id")
    parser.add_argument("--event", type=str, help="Selected event id")
    parser.add_argument("--lat", type=float, help="Device latitude for visit orders")
    parser.add_argument("--lon", type=float, help="Device longitude for visit orders")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve and place storefront orders")
    parser.add_argument(
        "--token",
        type=str,
        default=os.getenv(TOKEN_ENV_VAR),
        help=f"Session token of the checking-out user (default: ${TOKEN_ENV_VAR})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Print the resolved order context")
    _add_selection_args(resolve)

    submit = subparsers.add_parser("submit", help="Resolve, validate and submit an order")
    _add_selection_args(submit)
    submit.add_argument(
        "--cart",
        type=Path,
        required=True,
        help="JSON file with a list of {product_id, quantity, price} items",
    )
    submit.add_argument("--notes", type=str, default="", help="Free-text order notes")

    parties = subparsers.add_parser("parties", help="List parties selectable for an order type")
    parties.add_argument(
        "--order-type",
        type=str,
        choices=[str(order_type) for order_type in OrderType],
        help="Order type the party is picked for",
    )

    subparsers.add_parser("events", help="List selectable events")

    return parser.parse_args(list(argv))


def _location_provider(args: argparse.Namespace) -> LocationProvider:
    lat = getattr(args, "lat", None)
    lon = getattr(args, "lon", None)
    if lat is None and lon is None:
        return UnavailableLocationProvider("no --lat/--lon given")
    if lat is None or lon is None:
        raise ValueError("--lat and --lon must be given together")
    return FixedLocationProvider(latitude=lat, longitude=lon)


def _inputs(args: argparse.Namespace) -> CheckoutInputs:
    return CheckoutInputs(
        order_type=args.order_type,
        party_id=getattr(args, "party", None),
        event_id=getattr(args, "event", None),
    )


def _load_cart(path: Path) -> list[CartItem]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read cart file {path}: {exc}") from exc
    if isinstance(raw, dict):
        raw = raw.get("items", raw.get("order_items"))
    if not isinstance(raw, list):
        raise ValueError(f"Cart file {path} must hold a list of items")
    if not all(isinstance(item, dict) for item in raw):
        raise ValueError(f"Cart file {path} must hold JSON objects")
    return [CartItem.from_mapping(item) for item in raw]


def _context_as_json(context: OrderContext) -> dict[str, object]:
    return {
        "order_type": str(context.order_type),
        **context.payload_fields(),
        "degraded": context.degraded,
        "sources": dict(context.sources),
    }


def _emit(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        if not parsed_args.token:
            raise ValueError(f"Missing --token (or ${TOKEN_ENV_VAR})")  # noqa: TRY301
        location = _location_provider(parsed_args)
        cart = _load_cart(parsed_args.cart) if parsed_args.command == "submit" else []
        storefront = get_storefront_config(api_token=parsed_args.token)
        session = build_checkout_session(
            parsed_args.token,
            storefront=storefront,
            location_provider=location,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "resolve":
            context = resolve_order_context(session, _inputs(parsed_args))
            _emit(_context_as_json(context))
        elif parsed_args.command == "submit":
            result = submit_order(
                session,
                cart,
                _inputs(parsed_args),
                notes=parsed_args.notes,
                storefront=storefront,
            )
            _emit({"order_id": result.order_id, "context": _context_as_json(result.context)})
        elif parsed_args.command == "parties":
            parties = list_parties(session, CheckoutInputs(order_type=parsed_args.order_type))
            _emit([asdict(party) for party in parties])
        elif parsed_args.command == "events":
            _emit([asdict(event) for event in list_events(session)])
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except CheckoutError as exc:
        log.error("Checkout failed: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during checkout")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
