"""
Command-line entry points

- pingpong-transfer [--recover | -r]
- pingpong-single
- pingpong-check

Exit codes: 0 for any completed run (early stop included), 1 for
initialization failure or an unhandled error, 130 on interrupt.
"""

import argparse
import asyncio
import os
import sys
from typing import Callable, List, Mapping, Optional

from loguru import logger

from .app import PingPongApp, SingleTransferApp
from .config import (
    DEFAULT_NETWORK_CONFIG_PATH,
    NetworkConfig,
    load_dotenv_file,
    load_network_config,
    load_single_transfer_wallets,
    load_transfer_config,
    load_wallet_pair,
)
from .errors import ConfigurationError, LedgerError
from .ledger_client import Web3LedgerClient
from .setup_check import run_setup_check


LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"

LedgerFactory = Callable[[NetworkConfig], Web3LedgerClient]


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Replace loguru's default sink with the CLI sinks"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file:
        logger.add(log_file, level="DEBUG", rotation="10 MB", retention=5, enqueue=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pingpong-transfer",
        description="Alternate full-balance transfers between two testnet wallets",
    )
    parser.add_argument('-r', '--recover', action='store_true',
                        help='Force recovery: move all funds from wallet B back to wallet A')
    return parser


def _prepare(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if env is None:
        load_dotenv_file()
        env = os.environ
    configure_logging(env.get('LOG_LEVEL', 'INFO'), env.get('LOG_FILE'))
    return env


def _execute(coro_factory, ledger: Web3LedgerClient) -> int:
    async def runner():
        try:
            return await coro_factory()
        finally:
            await ledger.close()

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        logger.warning("⚠ Interrupted")
        return 130
    except LedgerError as e:
        logger.error(f"✗ Network error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"✗ Script failed: {e}")
        return 1
    return 0


def main(
    argv: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    ledger_factory: LedgerFactory = Web3LedgerClient
) -> int:
    """Ping-pong entry point"""
    args = build_parser().parse_args(argv)
    env = _prepare(env)

    try:
        config = load_transfer_config(env)
        wallets = load_wallet_pair(env)
    except ConfigurationError as e:
        logger.error(f"✗ Initialization failed: {e}")
        return 1

    ledger = ledger_factory(config.network)
    app = PingPongApp(ledger, config, wallets)
    logger.info("✓ Ping-Pong Transfer initialized successfully")

    return _execute(lambda: app.run(force_recovery=args.recover), ledger)


def main_single(
    argv: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    ledger_factory: LedgerFactory = Web3LedgerClient
) -> int:
    """Single-transfer entry point"""
    argparse.ArgumentParser(
        prog="pingpong-single",
        description="Send wallet A's spendable balance to wallet B once",
    ).parse_args(argv)
    env = _prepare(env)

    try:
        config = load_transfer_config(env)
        wallets = load_single_transfer_wallets(env)
    except ConfigurationError as e:
        logger.error(f"✗ Initialization failed: {e}")
        return 1

    ledger = ledger_factory(config.network)
    app = SingleTransferApp(ledger, config, wallets)
    logger.info("✓ Single Transfer initialized successfully")

    return _execute(app.run, ledger)


def main_check(
    argv: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    ledger_factory: LedgerFactory = Web3LedgerClient
) -> int:
    """Setup check entry point"""
    argparse.ArgumentParser(
        prog="pingpong-check",
        description="Verify dependencies, environment variables and RPC connectivity",
    ).parse_args(argv)
    env = _prepare(env)

    try:
        network = load_network_config(
            env.get('NETWORK_CONFIG') or DEFAULT_NETWORK_CONFIG_PATH,
            rpc_url_override=env.get('RPC_URL'),
        )
    except ConfigurationError as e:
        logger.error(f"✗ Initialization failed: {e}")
        return 1

    ledger = ledger_factory(network)

    async def runner():
        try:
            return await run_setup_check(ledger, env)
        finally:
            await ledger.close()

    try:
        ready = asyncio.run(runner())
    except Exception as e:
        logger.exception(f"✗ Test failed: {e}")
        return 1
    return 0 if ready else 1


if __name__ == "__main__":
    sys.exit(main())
