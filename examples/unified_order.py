"""
Minimal script that places a unified order and queries it back.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time

from wxpay_client import (
    ConfigError,
    ParseError,
    PayClient,
    TransportError,
    create_pay_client,
    fill_zero,
    load_pay_config,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Place a unified order using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing WXPAY_* settings",
    )
    parser.add_argument("--order-id", default=str(int(time.time())), help="Merchant order id")
    parser.add_argument("--total-fee", type=int, default=1, help="Amount in fen")
    parser.add_argument("--body", default="Test order", help="Goods description")
    parser.add_argument("--notify-url", required=True, help="Payment notification URL")
    parser.add_argument("--client-ip", default="127.0.0.1", help="Payer IP (spbill_create_ip)")
    parser.add_argument("--trade-type", default="MWEB", help="JSAPI, NATIVE, APP or MWEB")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    try:
        config = load_pay_config(env_file=args.env_file)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    out_trade_no = fill_zero(args.order_id)
    async with create_pay_client(config=config) as client:
        return await _place_and_query(client, args, out_trade_no)


async def _place_and_query(client: PayClient, args: argparse.Namespace, out_trade_no: str) -> int:
    try:
        result = await client.create_order(
            {
                "body": args.body,
                "out_trade_no": out_trade_no,
                "total_fee": args.total_fee,
                "spbill_create_ip": args.client_ip,
                "notify_url": args.notify_url,
                "trade_type": args.trade_type,
            }
        )
    except (TransportError, ParseError) as exc:
        logging.error("Unified order failed: %s", exc)
        return 1

    if not result.communication_ok:
        logging.error("Request rejected: %s", result.return_msg)
        return 1
    if not result.success:
        logging.error("Order failed: %s %s", result.err_code, result.err_code_des)
        return 1

    logging.info("Order %s created, prepay_id=%s", out_trade_no, result.raw.get("prepay_id"))

    try:
        status = await client.query_order({"out_trade_no": out_trade_no})
    except (TransportError, ParseError) as exc:
        logging.error("Order query failed: %s", exc)
        return 1
    logging.info("Trade state: %s", status.raw.get("trade_state"))
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
