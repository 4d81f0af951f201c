"""
Transfer Runners

Process-level flows built from the engine pieces:

Ping-pong:
1. Forced recovery (--recover) goes straight to the recovery transfer
2. Otherwise read both balances
3. Recovery detector; degraded -> one recovery transfer, no cycle
4. Ping-pong loop (both empty -> pre-flight refusal) + final sweep,
   then the best-effort balance/statistics summary

Single transfer:
1. Wallet A empty -> pre-flight refusal
2. One retry-wrapped A -> B transfer with the single-mode minimum
"""

import asyncio

from loguru import logger

from .config import TransferConfig, WalletPair
from .errors import PreflightError
from .fee_calculator import ViabilityPolicy
from .ledger_client import LedgerClient
from .models import RunMode, RunSummary
from .orchestrator import PingPongOrchestrator
from .recovery import detect, log_detection, run_recovery
from .reporting import fetch_balances, format_amount, log_banner, log_final_balances, log_startup
from .retry import SleepFn
from .transfer_engine import TransferEngine


class PingPongApp:
    """Ping-pong run with recovery detection"""

    def __init__(
        self,
        ledger: LedgerClient,
        config: TransferConfig,
        wallets: WalletPair,
        sleep: SleepFn = asyncio.sleep
    ):
        self.ledger = ledger
        self.config = config
        self.wallets = wallets
        self.engine = TransferEngine(ledger, config, sleep=sleep)
        self.orchestrator = PingPongOrchestrator(self.engine, config, wallets)

    async def run(self, force_recovery: bool = False) -> RunSummary:
        log_startup(self.config, self.wallets, "🚀 Ping-Pong Transfer Script")

        if force_recovery:
            log_banner("🔧 Force Recovery Mode Enabled", width=30)
            return await self._recover()

        balances = await fetch_balances(self.ledger, self.wallets)

        logger.info("💰 Initial Balances:")
        logger.info(f"   Wallet A: {format_amount(balances['A'], self.config)}")
        logger.info(f"   Wallet B: {format_amount(balances['B'], self.config)}")

        check = detect(balances['A'], balances['B'])
        if check.degraded:
            log_detection(check, self.config)
            return await self._recover()

        try:
            report = await self.orchestrator.run(balances)
        except PreflightError as e:
            logger.error(f"✗ {e}")
            return RunSummary(mode=RunMode.PING_PONG, success=False, preflight_failed=True, message=str(e))

        if report.degraded:
            logger.error("✗ Ping-Pong Transfer failed. Please check the logs above for details.")
            logger.info("💡 If funds are stuck in Wallet B, you can re-run this script to recover them.")
        else:
            logger.info("🎉 Ping-Pong Transfer completed successfully!")

        final_balances = await log_final_balances(
            self.ledger, self.wallets, self.config, report.total_fees, report=report
        )

        return RunSummary(
            mode=RunMode.PING_PONG,
            success=not report.degraded,
            total_fees=report.total_fees,
            cycle_report=report,
            final_balances=final_balances,
        )

    async def _recover(self) -> RunSummary:
        outcome = await run_recovery(self.engine, self.wallets)

        total_fees = outcome.fee_paid if outcome.success else 0
        final_balances = None
        if outcome.success:
            final_balances = await log_final_balances(self.ledger, self.wallets, self.config, total_fees)

        return RunSummary(
            mode=RunMode.RECOVERY,
            success=outcome.success,
            total_fees=total_fees,
            outcome=outcome,
            final_balances=final_balances,
        )


class SingleTransferApp:
    """One-directional transfer of wallet A's spendable balance to wallet B"""

    def __init__(
        self,
        ledger: LedgerClient,
        config: TransferConfig,
        wallets: WalletPair,
        sleep: SleepFn = asyncio.sleep
    ):
        self.ledger = ledger
        self.config = config
        self.wallets = wallets
        self.engine = TransferEngine(ledger, config, sleep=sleep)

    async def run(self) -> RunSummary:
        log_startup(self.config, self.wallets, "🚀 Single Transfer Script", ping_pong=False)

        balance = await self.ledger.get_balance(self.wallets.wallet_a.address)
        if balance == 0:
            message = "Wallet A has no balance. Please fund the wallet first."
            logger.error(f"✗ {message}")
            return RunSummary(mode=RunMode.SINGLE, success=False, preflight_failed=True, message=message)

        outcome = await self.engine.transfer_with_retry(
            self.wallets.wallet_a,
            self.wallets.wallet_b.address,
            label="Transfer",
            policy=ViabilityPolicy.SINGLE,
        )

        if not outcome.success:
            logger.error("✗ Transfer failed. Please check the logs above for details.")
            return RunSummary(mode=RunMode.SINGLE, success=False, outcome=outcome)

        logger.info("🎉 Transfer completed successfully!")
        final_balances = await log_final_balances(self.ledger, self.wallets, self.config, outcome.fee_paid)

        return RunSummary(
            mode=RunMode.SINGLE,
            success=True,
            total_fees=outcome.fee_paid,
            outcome=outcome,
            final_balances=final_balances,
        )
