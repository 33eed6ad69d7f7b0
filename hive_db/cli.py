"""Command-line interface for querying a Hive node's database API."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .bitmask import make_bitmask_filter
from .config import AppConfig, NodeConfig, load_config, validate
from .database import DatabaseAPI
from .errors import HiveError
from .logging_setup import configure_logging
from .models import DiscussionQuery, DiscussionSortKey
from .operations import operation_from_name
from .transports import HttpTransport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="hive-db",
        description="Query a Hive node's database API",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--node",
        action="append",
        default=None,
        help="RPC endpoint URL, repeatable (overrides config endpoints)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("props", help="Dynamic global properties")
    sub.add_parser("chain-props", help="Median chain properties")
    sub.add_parser("price", help="Current median history price")
    sub.add_parser("config", help="Node configuration constants")
    sub.add_parser("version", help="Node version")

    state = sub.add_parser("state", help="State for a url path")
    state.add_argument("path")

    accounts = sub.add_parser("accounts", help="Account objects")
    accounts.add_argument("names", nargs="+")

    block = sub.add_parser("block", help="Block by number")
    block.add_argument("block_num", type=int)
    block.add_argument("--header", action="store_true", help="Header only")

    ops = sub.add_parser("ops", help="Operations applied in a block")
    ops.add_argument("block_num", type=int)
    ops.add_argument("--virtual", action="store_true", help="Virtual operations only")

    tx = sub.add_parser("tx", help="Transaction by id")
    tx.add_argument("tx_id")

    delegations = sub.add_parser("delegations", help="Vesting delegations of an account")
    delegations.add_argument("account")
    delegations.add_argument("--from", dest="start", default="")
    delegations.add_argument("--limit", type=int, default=None)

    discussions = sub.add_parser("discussions", help="Posts by sort order")
    discussions.add_argument("sort", choices=[k.value for k in DiscussionSortKey])
    discussions.add_argument("--tag", default=None)
    discussions.add_argument("--limit", type=int, default=10)

    history = sub.add_parser("history", help="Account operation history")
    history.add_argument("account")
    history.add_argument("--from", dest="start", type=int, default=-1)
    history.add_argument("--limit", type=int, default=100)
    history.add_argument(
        "--op",
        dest="ops",
        action="append",
        default=None,
        help="Only this operation type, e.g. transfer (repeatable)",
    )

    return parser


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    """Endpoints from ``--node`` win; the config file is optional then."""
    if not args.node:
        return load_config(args.config)

    timeout = NodeConfig.rpc_timeout
    if args.config:
        timeout = load_config(args.config).node.rpc_timeout
    cfg = AppConfig(node=NodeConfig(rpc_endpoints=tuple(args.node), rpc_timeout=timeout))
    validate(cfg)
    return cfg


async def _dispatch(api: DatabaseAPI, args: argparse.Namespace) -> Any:
    """Execute the selected command and return its result."""
    command = args.command
    if command == "props":
        return await api.get_dynamic_global_properties()
    if command == "chain-props":
        return await api.get_chain_properties()
    if command == "price":
        return await api.get_current_median_history_price()
    if command == "config":
        return await api.get_config()
    if command == "version":
        return await api.get_version()
    if command == "state":
        return await api.get_state(args.path)
    if command == "accounts":
        return await api.get_accounts(args.names)
    if command == "block":
        if args.header:
            return await api.get_block_header(args.block_num)
        return await api.get_block(args.block_num)
    if command == "ops":
        return await api.get_operations(args.block_num, args.virtual)
    if command == "tx":
        return await api.get_transaction(args.tx_id)
    if command == "delegations":
        return await api.get_vesting_delegations(args.account, args.start, args.limit)
    if command == "discussions":
        query = DiscussionQuery(limit=args.limit, tag=args.tag)
        return await api.get_discussions(args.sort, query)
    if command == "history":
        operation_filter = None
        if args.ops:
            try:
                ids = [operation_from_name(name) for name in args.ops]
            except ValueError as e:
                raise SystemExit(f"error: {e}") from None
            operation_filter = make_bitmask_filter(ids)
        entries = await api.get_account_history(
            args.account, args.start, args.limit, operation_filter
        )
        return [list(entry) for entry in entries]
    raise ValueError(f"Unknown command: {command}")


async def _run(args: argparse.Namespace) -> int:
    configure_logging(args.log_level)
    config = _resolve_config(args)
    api = DatabaseAPI(HttpTransport(config.node))

    try:
        result = await _dispatch(api, args)
    except HiveError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
