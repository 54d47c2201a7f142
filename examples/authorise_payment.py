"""
Minimal script that uses the public API to authorise and capture a card payment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

import adyen_payments
from adyen_payments import AdyenError, Amount, Card, ConfigError, Shopper, load_api_config


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Authorise a test card payment")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing ADYEN_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--reference", default="example-order-1")
    parser.add_argument("--currency", default="EUR")
    parser.add_argument("--value", type=int, default=1050, help="Amount in minor units")
    parser.add_argument(
        "--capture",
        action="store_true",
        help="Capture the payment right after a successful authorisation",
    )
    parser.add_argument(
        "--store-card",
        action="store_true",
        help="Store the card for later recurring and one-click payments",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_api_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1
    adyen_payments.configure(config)

    amount = Amount(args.currency, args.value)
    shopper = Shopper(reference="example-shopper", email="shopper@example.com", ip="127.0.0.1")
    # Gateway test card.
    card = Card("Simon Hopper", "4111111111111111", "737", 3, 2030)

    try:
        response = adyen_payments.authorise_payment(
            args.reference, amount, shopper, card, args.store_card
        )
    except AdyenError as exc:
        logging.error("Authorisation failed: %s", exc)
        return 1

    if not response.authorised:
        logging.error(
            "Payment %s not authorised: %s (%s)",
            response.psp_reference,
            response.result_code,
            response.refusal_reason,
        )
        return 1
    logging.info("Payment authorised with PSP reference %s", response.psp_reference)

    if not args.capture:
        return 0

    try:
        capture = adyen_payments.capture_payment(response.psp_reference, amount)
    except AdyenError as exc:
        logging.error("Capture request failed: %s", exc)
        return 1
    if not capture.received:
        logging.error("Capture not accepted: %s", capture.response)
        return 1
    logging.info("Capture received; the outcome follows as a notification")
    return 0


if __name__ == "__main__":
    sys.exit(main())
