"""
Cycle Orchestrator

Refuses to start when both wallets are empty, then drives the
alternating A -> B -> A ... transfer loop:

    RUNNING --success--> RUNNING (roles swap)
    RUNNING --below_minimum--> STOPPED_MIN_THRESHOLD
    RUNNING --insufficient_balance--> STOPPED_INSUFFICIENT
    RUNNING --any other failure--> STOPPED_ERROR
    RUNNING --cycle_count == max_cycles--> STOPPED_MAX_CYCLES
    STOPPED_* --final sweep B -> A--> COMPLETE

The sweep never changes the stop state reported to the caller.
"""

from typing import Dict, List, Optional

from loguru import logger

from .config import TransferConfig, WalletCredentials, WalletPair
from .errors import PreflightError
from .models import (
    CycleReport,
    CycleState,
    FailureReason,
    Role,
    RoundRecord,
    RunState,
    TransferOutcome,
)
from .reporting import fetch_balances, format_amount, log_banner
from .transfer_engine import TransferEngine


STOP_STATES = {
    FailureReason.BELOW_MINIMUM: RunState.STOPPED_MIN_THRESHOLD,
    FailureReason.INSUFFICIENT_BALANCE: RunState.STOPPED_INSUFFICIENT,
}


def stop_state_for(reason: FailureReason) -> RunState:
    return STOP_STATES.get(reason, RunState.STOPPED_ERROR)


def check_preflight(balance_a: int, balance_b: int):
    """Refuse to start when neither wallet holds anything"""
    if balance_a == 0 and balance_b == 0:
        raise PreflightError("Both wallets have zero balance. Please fund at least one wallet first.")


class PingPongOrchestrator:
    """
    Alternating transfer loop with a final sweep back to wallet A

    Owns the CycleState of one run; a fresh state is created per run().
    """

    def __init__(self, engine: TransferEngine, config: TransferConfig, wallets: WalletPair):
        self.engine = engine
        self.config = config
        self.wallets = wallets

    def _wallet(self, role: Role) -> WalletCredentials:
        return self.wallets.wallet_a if role is Role.A else self.wallets.wallet_b

    async def run(self, balances: Optional[Dict[str, int]] = None) -> CycleReport:
        """
        Run the ping-pong loop, then the final sweep

        Args:
            balances: Starting balances keyed by role, read from the ledger if omitted

        Returns:
            CycleReport with the stop state and run totals

        Raises:
            PreflightError: both wallets are empty, nothing was sent
        """
        if balances is None:
            balances = await fetch_balances(self.engine.ledger, self.wallets)
        check_preflight(balances['A'], balances['B'])

        state = CycleState()
        rounds: List[RoundRecord] = []
        max_cycles = self.config.max_cycles

        log_banner("🔄 Starting Ping-Pong Transfer Process")

        while state.cycle_count < max_cycles:
            state.cycle_count += 1

            sender = self._wallet(state.sender_role)
            receiver = self._wallet(state.sender_role.other)

            logger.info(f"🔄 CYCLE {state.cycle_count}/{max_cycles}")
            logger.info(f"📤 Transferring from {sender.address} to {receiver.address}")
            logger.info("-" * 40)

            outcome = await self.engine.transfer_with_retry(
                sender,
                receiver.address,
                label=f"Cycle {state.cycle_count} Transfer",
            )
            rounds.append(RoundRecord(cycle=state.cycle_count, sender_role=state.sender_role, outcome=outcome))

            if not outcome.success:
                state.state = stop_state_for(outcome.reason)
                self._log_stop(state.state, outcome)
                break

            state.total_transfers += 1
            state.total_fees += outcome.fee_paid
            logger.info(f"💰 Running total fees: {format_amount(state.total_fees, self.config)}")

            state.sender_role = state.sender_role.other

            if state.cycle_count < max_cycles:
                logger.info(f"⏱️  Waiting {self.config.inter_transfer_delay:g} seconds before next transfer...")
                await self.engine.sleep(self.config.inter_transfer_delay)

        if state.state == RunState.RUNNING:
            state.state = RunState.STOPPED_MAX_CYCLES
            logger.info(f"✓ Reached max cycles ({max_cycles})")

        stop_state = state.state

        sweep_outcome = await self._final_sweep()
        if sweep_outcome is not None and sweep_outcome.success:
            state.total_fees += sweep_outcome.fee_paid

        state.state = RunState.COMPLETE

        return CycleReport(
            stop_state=stop_state,
            final_state=state.state,
            cycle_count=state.cycle_count,
            total_transfers=state.total_transfers,
            total_fees=state.total_fees,
            sender_role=state.sender_role,
            rounds=rounds,
            sweep_outcome=sweep_outcome,
            sweep_skipped=sweep_outcome is None,
        )

    async def _final_sweep(self):
        log_banner("🏁 Performing final transfer - moving all funds back to Wallet A", width=60)

        outcome = await self.engine.sweep(self.wallets.wallet_b, self.wallets.wallet_a)

        if outcome is None:
            return None
        if outcome.success:
            logger.info("✓ Final transfer completed successfully!")
        else:
            logger.error(f"✗ Final transfer failed: {outcome.reason.value}")
        return outcome

    def _log_stop(self, stop_state: RunState, outcome: TransferOutcome):
        if stop_state == RunState.STOPPED_MIN_THRESHOLD:
            logger.info("🛑 Minimum threshold reached. Stopping ping-pong transfers.")
        elif stop_state == RunState.STOPPED_INSUFFICIENT:
            logger.info("🛑 Insufficient balance for gas fees. Stopping ping-pong transfers.")
        else:
            detail = f" ({outcome.error_message})" if outcome.error_message else ""
            logger.error(f"✗ Transfer failed: {outcome.reason.value}{detail}. Stopping ping-pong transfers.")
