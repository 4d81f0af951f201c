"""
Transfer Engine

One fee-aware transfer attempt, its retry-wrapped form, and the sweep that
moves a wallet's whole spendable balance back to the other side.

Attempt sequence:
1. Query sender balance
2. Query gas price
3. Compute available amount (fee_calculator)
4. Apply the mode's minimum-amount policy
5. Submit and wait for settlement
"""

import asyncio
from typing import Optional

from loguru import logger

from .config import TransferConfig, WalletCredentials
from .errors import LedgerError
from .fee_calculator import ViabilityPolicy, compute
from .ledger_client import LedgerClient
from .models import FailureReason, TransferAttemptResult, TransferOutcome
from .reporting import format_amount, format_gwei
from .retry import SleepFn, execute_with_retry


class TransferEngine:
    """Executes transfers between two wallets through a ledger client"""

    def __init__(
        self,
        ledger: LedgerClient,
        config: TransferConfig,
        sleep: SleepFn = asyncio.sleep
    ):
        self.ledger = ledger
        self.config = config
        self.sleep = sleep

    async def perform_transfer(
        self,
        sender: WalletCredentials,
        to_address: str,
        policy: ViabilityPolicy = ViabilityPolicy.PING_PONG
    ) -> TransferAttemptResult:
        """
        Single transfer attempt of the sender's whole spendable balance

        Ledger exceptions propagate; the retry executor classifies them.

        Args:
            sender: Sending wallet
            to_address: Recipient address
            policy: Viability policy of the calling mode

        Returns:
            TransferAttemptResult
        """
        balance = await self.ledger.get_balance(sender.address)
        logger.info(f"💰 {sender.address} balance: {format_amount(balance, self.config)}")

        gas_price = await self.ledger.get_gas_price()
        logger.debug(f"⛽ Gas price: {format_gwei(gas_price)} Gwei")

        quote = compute(
            balance,
            gas_price,
            self.config.gas_limit,
            policy=policy,
            min_transfer_amount=self.config.min_transfer_amount,
        )

        logger.info(f"💸 Estimated fee: {format_amount(quote.estimated_fee, self.config)}")
        logger.info(f"📤 Available for transfer: {format_amount(quote.available_amount, self.config)}")

        if policy == ViabilityPolicy.SINGLE:
            if not quote.viable:
                logger.warning(
                    f"✗ Cannot transfer: Available amount ({format_amount(quote.available_amount, self.config)}) "
                    f"is less than minimum required ({format_amount(self.config.min_transfer_amount, self.config)})"
                )
                return TransferAttemptResult.failed(FailureReason.BELOW_MINIMUM)
        else:
            if not quote.viable:
                logger.warning("✗ Cannot transfer: Insufficient balance for gas fees")
                return TransferAttemptResult.failed(FailureReason.INSUFFICIENT_BALANCE)

            if quote.available_amount < self.config.min_remaining_amount:
                logger.info(
                    f"🛑 Transfer amount ({format_amount(quote.available_amount, self.config)}) is below "
                    f"minimum threshold ({format_amount(self.config.min_remaining_amount, self.config)})"
                )
                return TransferAttemptResult.failed(FailureReason.BELOW_MINIMUM)

        logger.info(f"📝 Preparing transaction to send {format_amount(quote.available_amount, self.config)} to {to_address}")

        receipt = await self.ledger.send_value(
            sender,
            to_address,
            quote.available_amount,
            self.config.gas_limit,
            gas_price,
        )

        if not receipt.success:
            logger.error(f"✗ Transaction failed: {receipt.tx_hash}")
            return TransferAttemptResult.failed(FailureReason.TRANSACTION_FAILED, tx_hash=receipt.tx_hash)

        logger.info("✓ Transaction confirmed successfully!")
        logger.info(f"📊 Gas used: {receipt.gas_used}")
        logger.info(f"⛽ Gas price: {format_gwei(receipt.effective_gas_price)} Gwei")
        logger.info(f"💰 Transaction fee: {format_amount(receipt.fee, self.config)}")

        return TransferAttemptResult.succeeded(quote.available_amount, receipt.fee, tx_hash=receipt.tx_hash)

    async def transfer_with_retry(
        self,
        sender: WalletCredentials,
        to_address: str,
        label: str = "Transfer",
        policy: ViabilityPolicy = ViabilityPolicy.PING_PONG
    ) -> TransferOutcome:
        """Retry-wrapped perform_transfer"""
        async def attempt() -> TransferAttemptResult:
            return await self.perform_transfer(sender, to_address, policy)

        return await execute_with_retry(
            attempt,
            self.config.max_retries,
            self.config.retry_delay,
            label=label,
            sleep=self.sleep,
        )

    async def sweep(
        self,
        source: WalletCredentials,
        destination: WalletCredentials,
        label: str = "Final Transfer"
    ) -> Optional[TransferOutcome]:
        """
        Move all of source's spendable balance to destination

        Returns:
            None when source already holds nothing, else the transfer outcome
        """
        try:
            balance = await self.ledger.get_balance(source.address)
        except LedgerError as e:
            logger.error(f"✗ {label} could not read {source.label} balance: {e}")
            return TransferOutcome(
                success=False,
                attempts_used=0,
                reason=FailureReason.NETWORK_ERROR,
                error_message=str(e),
            )

        if balance == 0:
            logger.info(f"✓ {source.label} already has zero balance")
            return None

        return await self.transfer_with_retry(source, destination.address, label=label)
