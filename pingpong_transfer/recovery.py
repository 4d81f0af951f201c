"""
Recovery Detector

Funds sitting on wallet B while wallet A is empty means an earlier run
stopped before its final sweep. Such a run is repaired with one
retry-wrapped B -> A transfer instead of a new ping-pong cycle.
"""

from dataclasses import dataclass

from loguru import logger

from .config import TransferConfig, WalletPair
from .models import TransferOutcome
from .reporting import format_amount, log_banner
from .transfer_engine import TransferEngine


@dataclass(frozen=True)
class RecoveryCheck:
    degraded: bool
    balance_a: int
    balance_b: int


def detect(balance_a: int, balance_b: int) -> RecoveryCheck:
    return RecoveryCheck(
        degraded=balance_a == 0 and balance_b > 0,
        balance_a=balance_a,
        balance_b=balance_b,
    )


def log_detection(check: RecoveryCheck, config: TransferConfig):
    log_banner("🔄 Recovery Mode Detected!", width=30)
    logger.info(f"💰 Wallet A: {format_amount(check.balance_a, config)} (empty)")
    logger.info(f"💰 Wallet B: {format_amount(check.balance_b, config)} (has funds)")
    logger.info("🔧 Attempting to recover funds from Wallet B to Wallet A...")


async def run_recovery(engine: TransferEngine, wallets: WalletPair) -> TransferOutcome:
    """One retry-wrapped transfer of wallet B's spendable balance to wallet A"""
    log_banner("🚨 RECOVERY MODE - Transferring all funds from B to A")

    outcome = await engine.transfer_with_retry(
        wallets.wallet_b,
        wallets.wallet_a.address,
        label="Recovery Transfer",
    )

    if outcome.success:
        logger.info("✓ Recovery transfer completed successfully!")
        logger.info("🎉 All funds have been moved back to Wallet A")
    else:
        logger.error(
            f"✗ Recovery transfer failed after {outcome.attempts_used} attempts: {outcome.reason.value}"
        )
        logger.info("💡 You may need to manually transfer funds or check gas prices")

    return outcome
