"""
Reporting

Amount formatting and the end-of-run balance / statistics summary.
"""

from decimal import Decimal
from typing import Dict, Optional

from loguru import logger
from web3 import Web3

from .config import TransferConfig, WalletCredentials, WalletPair
from .errors import LedgerError
from .ledger_client import LedgerClient
from .models import CycleReport


def _plain(value: int, unit: str) -> str:
    # str(Decimal) switches to E notation for small amounts
    return f"{Decimal(Web3.from_wei(value, unit)).normalize():f}"


def format_ether(value: int) -> str:
    """Wei to native units; negative values keep their sign"""
    sign = "-" if value < 0 else ""
    return f"{sign}{_plain(abs(value), 'ether')}"


def format_gwei(value: int) -> str:
    return _plain(value, 'gwei')


def format_amount(value: Optional[int], config: TransferConfig) -> str:
    if value is None:
        return "unavailable"
    return f"{format_ether(value)} {config.network.currency}"


def log_banner(title: str, width: int = 50):
    logger.info(title)
    logger.info("=" * width)


def log_startup(config: TransferConfig, wallets: WalletPair, title: str, ping_pong: bool = True):
    network = config.network
    log_banner(title, width=len(title) + 2)
    logger.info(f"📡 Connected to: {network.name}")
    logger.info(f"🔗 RPC URL: {network.rpc_url}")
    logger.info(f"👤 Wallet A: {wallets.wallet_a.address}")
    logger.info(f"👤 Wallet B: {wallets.wallet_b.address}")
    logger.info(f"💰 Currency: {network.currency}")

    if ping_pong:
        logger.info(f"🔄 Max Cycles: {config.max_cycles}")
        logger.info(f"💎 Min Remaining: {format_amount(config.min_remaining_amount, config)}")
    else:
        logger.info(f"💎 Min Transfer: {format_amount(config.min_transfer_amount, config)}")

    logger.info(f"🔄 Max Retries: {config.max_retries}")
    logger.info(f"⏱️  Retry Delay: {config.retry_delay:g}s")


async def fetch_balances(ledger: LedgerClient, wallets: WalletPair) -> Dict[str, int]:
    return {
        'A': await ledger.get_balance(wallets.wallet_a.address),
        'B': await ledger.get_balance(wallets.wallet_b.address),
    }


async def _read_balance(ledger: LedgerClient, wallet: WalletCredentials) -> Optional[int]:
    try:
        return await ledger.get_balance(wallet.address)
    except LedgerError as e:
        logger.warning(f"⚠ {wallet.label} balance unavailable: {e}")
        return None


async def log_final_balances(
    ledger: LedgerClient,
    wallets: WalletPair,
    config: TransferConfig,
    total_fees: int,
    report: Optional[CycleReport] = None
) -> Dict[str, Optional[int]]:
    """
    Log final balances and transfer statistics

    Best-effort: a balance the ledger cannot report is logged as
    unavailable and the statistics are still written.

    Returns:
        Final balances keyed by role, None where the read failed
    """
    balances = {
        'A': await _read_balance(ledger, wallets.wallet_a),
        'B': await _read_balance(ledger, wallets.wallet_b),
    }

    log_banner("📊 Final Balances:", width=30)
    logger.info(f"💰 Wallet A: {format_amount(balances['A'], config)}")
    logger.info(f"💰 Wallet B: {format_amount(balances['B'], config)}")

    log_banner("📈 Transfer Statistics:", width=30)
    if report is not None:
        logger.info(f"🔄 Total Cycles: {report.cycle_count}")
        logger.info(f"📤 Total Transfers: {report.total_transfers}")
        logger.info(f"🛑 Stop Reason: {report.stop_state.value}")
    logger.info(f"💰 Total Fees Used: {format_amount(total_fees, config)}")
    logger.info(f"⛽ Gas Price: {config.network.gas_price_gwei} Gwei")
    if report is not None:
        logger.info(f"💎 Min Threshold: {format_amount(config.min_remaining_amount, config)}")

    return balances
