"""
Command-line interface for exercising the gateway's modification and recurring APIs.
"""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, Optional, Sequence, Tuple

from .core.config import ApiConfig, load_api_config
from .core.errors import AdyenError, ConfigError
from .core.money import Amount
from .core.payment import ModificationResponse, PaymentService
from .core.recurring import RecurringService
from .core.service import Transport


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _minor_units(value: str) -> int:
    try:
        units = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer amount in minor units") from None
    if units < 0:
        raise argparse.ArgumentTypeError("Amounts must not be negative")
    return units


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adyen-payments",
        description="Modify payments and manage stored details at the payment gateway",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing ADYEN_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("capture", "Capture an authorised payment"),
        ("refund", "Refund a captured payment"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("psp_reference", help="PSP reference of the original payment")
        command.add_argument("--currency", required=True, help="ISO 4217 currency code")
        command.add_argument(
            "--value", required=True, type=_minor_units, help="Amount in minor units, e.g. cents"
        )

    for name, help_text in (
        ("cancel", "Cancel an authorised payment"),
        ("cancel-or-refund", "Cancel or refund a payment in an unknown state"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("psp_reference", help="PSP reference of the original payment")

    listing = commands.add_parser("list-details", help="List a shopper's stored details")
    listing.add_argument("shopper_reference")

    disable = commands.add_parser("disable", help="Disable a shopper's stored details")
    disable.add_argument("shopper_reference")
    disable.add_argument(
        "--detail",
        default=None,
        help="Recurring detail reference to disable (default: all details)",
    )
    return parser


def _modify(
    config: ApiConfig, args: argparse.Namespace, transport: Optional[Transport]
) -> ModificationResponse:
    service = PaymentService(config, transport=transport)
    if args.command == "capture":
        return service.capture(args.psp_reference, Amount(args.currency, args.value))
    if args.command == "refund":
        return service.refund(args.psp_reference, Amount(args.currency, args.value))
    if args.command == "cancel":
        return service.cancel(args.psp_reference)
    return service.cancel_or_refund(args.psp_reference)


def _run_command(
    config: ApiConfig, args: argparse.Namespace, transport: Optional[Transport]
) -> int:
    if args.command == "list-details":
        details = RecurringService(config, transport=transport).list(args.shopper_reference)
        if not details:
            logging.info("Shopper %s has no stored details", args.shopper_reference)
        for detail in details:
            card = detail.card
            print(
                detail.reference,
                detail.variant or "-",
                card.number if card and card.number else "-",
                detail.creation_date.isoformat() if detail.creation_date else "-",
                sep="\t",
            )
        return 0

    if args.command == "disable":
        result = RecurringService(config, transport=transport).disable(args.shopper_reference, args.detail)
        if not result.disabled:
            logging.error("Gateway did not disable details: %s", result.response)
            return 1
        logging.info("Gateway answered %s", result.response)
        return 0

    modification = _modify(config, args, transport)
    if not modification.received:
        logging.error("Gateway did not accept %s: %s", args.command, modification.response)
        return 1
    logging.info(
        "Gateway received %s for %s; the outcome follows as a notification",
        args.command,
        modification.psp_reference,
    )
    return 0


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    transport: Optional[Transport] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_api_config(env_file=args.env_file, overrides=overrides)
        config.require_credentials()
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        return _run_command(config, args, transport)
    except AdyenError as exc:
        logging.error("%s request failed: %s", args.command, exc)
        return 1


def main() -> None:
    raise SystemExit(run_cli())
