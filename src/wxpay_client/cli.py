"""
Command-line interface for signing and sending pay API requests.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Iterable, Sequence, Tuple

from .api import create_pay_client
from .core.config import load_pay_config
from .core.errors import ConfigError, InputValidationError, ParseError, TransportError
from .core.client import PayClient


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _key_value(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Key must not be empty")
    return key, val


def _collect(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    collected: Dict[str, str] = {}
    for key, value in pairs:
        collected[key] = value
    return collected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wxpay",
        description="Sign and send requests to the pay API",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing WXPAY_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_key_value,
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
        ("sign", "Print the signature of the given fields"),
        ("unified-order", "Place a unified order"),
        ("order-query", "Query an order by out_trade_no or transaction_id"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument(
            "fields",
            nargs="*",
            type=_key_value,
            metavar="FIELD=VALUE",
            help="Request field, may be repeated",
        )

    session = commands.add_parser("session", help="Exchange a mini program login code")
    session.add_argument("code", help="Temporary login code from wx.login")
    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


async def _dispatch(client: PayClient, args: argparse.Namespace) -> Any:
    async with client:
        if args.command == "session":
            return await client.code_to_session(args.code)

        xml_body = client.build_xml(_collect(args.fields))
        if args.command == "unified-order":
            return await client.unified_order(xml_body)
        return await client.order_query(xml_body)


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect(args.set or ())

    try:
        config = load_pay_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_pay_client(config=config)

    if args.command == "sign":
        try:
            print(client.sign(_collect(args.fields)))
        except InputValidationError as exc:
            logging.error("Cannot sign fields: %s", exc)
            return 1
        return 0

    try:
        response = asyncio.run(_dispatch(client, args))
    except TransportError as exc:
        logging.error("Request failed: %s", exc)
        return 1
    except ParseError as exc:
        logging.error("Unreadable response: %s", exc)
        return 1
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1
    except InputValidationError as exc:
        logging.error("Invalid request fields: %s", exc)
        return 1

    _print_json(response)
    return 0


def main() -> None:
    sys.exit(run_cli())
