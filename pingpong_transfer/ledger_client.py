"""
Ledger Client

The three capabilities the orchestrator needs from a chain:
- get_balance(address)
- get_gas_price()
- send_value(...), returning only once the transfer has settled

Web3LedgerClient implements them over web3's AsyncWeb3 with local signing
through eth_account. Transport failures surface as LedgerError.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from eth_account import Account
from loguru import logger
from web3 import AsyncWeb3, Web3

from .config import NetworkConfig, WalletCredentials
from .errors import LedgerError


@dataclass(frozen=True)
class TransferReceipt:
    """Settlement result of a submitted value transfer"""
    tx_hash: str
    success: bool
    gas_used: int
    effective_gas_price: int

    @property
    def fee(self) -> int:
        return self.gas_used * self.effective_gas_price


class LedgerClient(Protocol):
    async def get_balance(self, address: str) -> int: ...

    async def get_gas_price(self) -> int: ...

    async def send_value(
        self,
        sender: WalletCredentials,
        to_address: str,
        amount: int,
        gas_limit: int,
        gas_price: int
    ) -> TransferReceipt: ...


class Web3LedgerClient:
    """
    AsyncWeb3-backed ledger client

    Uses legacy gasPrice transactions so the fee estimate is exactly
    gas_price * gas_limit.
    """

    def __init__(self, network: NetworkConfig, w3: Optional[AsyncWeb3] = None):
        """
        Initialize ledger client

        Args:
            network: Network parameters (RPC URL, chain id, reference gas price)
            w3: Optional preconfigured AsyncWeb3 instance
        """
        self.network = network
        self.w3 = w3 if w3 is not None else AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(network.rpc_url))
        self._accounts: Dict[str, object] = {}

        logger.debug(f"Ledger client created for {network.name} ({network.rpc_url})")

    async def get_balance(self, address: str) -> int:
        try:
            balance = await self.w3.eth.get_balance(Web3.to_checksum_address(address))
        except Exception as e:
            logger.error(f"✗ Failed to get balance for {address}: {e}")
            raise LedgerError(f"get_balance failed for {address}: {e}") from e

        logger.debug(f"Balance of {address}: {balance} wei")
        return int(balance)

    async def get_gas_price(self) -> int:
        """Current gas price, or the configured reference price if the node cannot say"""
        try:
            gas_price = await self.w3.eth.gas_price
        except Exception as e:
            logger.warning(f"⚠ Failed to get gas price: {e}, using {self.network.gas_price_gwei} Gwei")
            return self.network.reference_gas_price

        if not gas_price:
            return self.network.reference_gas_price
        return int(gas_price)

    async def send_value(
        self,
        sender: WalletCredentials,
        to_address: str,
        amount: int,
        gas_limit: int,
        gas_price: int
    ) -> TransferReceipt:
        """
        Sign, submit and wait for settlement of a value transfer

        Args:
            sender: Wallet whose key signs the transaction
            to_address: Recipient address
            amount: Value in wei
            gas_limit: Gas limit
            gas_price: Gas price in wei

        Returns:
            TransferReceipt (success False when the chain reverted it)
        """
        account = self._account_for(sender)

        try:
            nonce = await self.w3.eth.get_transaction_count(account.address, 'pending')
            transaction = {
                'to': Web3.to_checksum_address(to_address),
                'value': amount,
                'gas': gas_limit,
                'gasPrice': gas_price,
                'nonce': nonce,
                'chainId': self.network.chain_id,
            }

            signed = account.sign_transaction(transaction)
            raw_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise LedgerError(f"Failed to submit transaction from {sender.address}: {e}") from e

        tx_hash = Web3.to_hex(raw_hash)
        logger.info(f"🚀 Transaction sent! Hash: {tx_hash}")
        logger.info(f"🔍 Explorer: {self.network.tx_url(tx_hash)}")
        logger.info("⏳ Waiting for confirmation...")

        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(raw_hash)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise LedgerError(f"No settlement for {tx_hash}: {e}") from e

        return TransferReceipt(
            tx_hash=tx_hash,
            success=receipt['status'] == 1,
            gas_used=int(receipt['gasUsed']),
            effective_gas_price=int(receipt.get('effectiveGasPrice') or gas_price),
        )

    async def is_connected(self) -> bool:
        try:
            return bool(await self.w3.is_connected())
        except Exception as e:
            logger.debug(f"Connection check failed: {e}")
            return False

    async def get_chain_id(self) -> int:
        try:
            return int(await self.w3.eth.chain_id)
        except Exception as e:
            raise LedgerError(f"get_chain_id failed: {e}") from e

    async def get_block_number(self) -> int:
        try:
            return int(await self.w3.eth.block_number)
        except Exception as e:
            raise LedgerError(f"get_block_number failed: {e}") from e

    async def close(self):
        """Disconnect the provider session if the provider keeps one"""
        provider = self.w3.provider
        disconnect = getattr(provider, 'disconnect', None)
        if disconnect is None:
            return

        try:
            await disconnect()
            logger.debug("✓ Ledger client closed")
        except Exception as e:
            logger.debug(f"Error closing ledger client: {e}")

    def _account_for(self, sender: WalletCredentials):
        if not sender.private_key:
            raise LedgerError(f"{sender.label} has no signing key")

        account = self._accounts.get(sender.address)
        if account is None:
            account = Account.from_key(sender.private_key)
            self._accounts[sender.address] = account
        return account
