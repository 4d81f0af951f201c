"""
Transfer Configuration

Loads one immutable configuration snapshot at process start:
- Network parameters from network_config.yaml (merged over built-in defaults)
- Run options and wallet credentials from the environment (.env supported)

The snapshot is passed explicitly to every component; nothing reads the
environment after loading.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from eth_account import Account
from loguru import logger
from web3 import Web3

from .errors import ConfigurationError


DEFAULT_NETWORK_CONFIG_PATH = "network_config.yaml"

# Monad testnet
DEFAULT_NETWORK = {
    'name': "Monad Testnet",
    'rpc_url': "https://testnet-rpc.monad.xyz/",
    'chain_id': 10143,
    'currency': "MON",
    'explorer': "https://testnet.monadexplorer.com/",
    'gas_limit': 21000,
    'gas_price_gwei': 20,
}

DEFAULT_MAX_CYCLES = 100
DEFAULT_MIN_REMAINING_AMOUNT = "0.5"
DEFAULT_MIN_TRANSFER_AMOUNT = "0.5"
DEFAULT_DELAY_BETWEEN_TRANSFERS_MS = 2000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 5000

PING_PONG_ENV_VARS = (
    "WALLET_A_PRIVATE_KEY",
    "WALLET_B_PRIVATE_KEY",
    "WALLET_A_ADDRESS",
    "WALLET_B_ADDRESS",
)
SINGLE_ENV_VARS = (
    "PRIVATE_KEY",
    "WALLET_A_ADDRESS",
    "WALLET_B_ADDRESS",
)


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    rpc_url: str
    chain_id: int
    currency: str
    explorer: str
    gas_limit: int
    gas_price_gwei: int

    @property
    def reference_gas_price(self) -> int:
        """Fallback gas price in wei"""
        return Web3.to_wei(self.gas_price_gwei, 'gwei')

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer.rstrip('/')}/tx/{tx_hash}"


@dataclass(frozen=True)
class WalletCredentials:
    """A wallet identity and its signing key"""
    label: str
    address: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class TransferConfig:
    """Immutable run configuration. Amounts in wei, delays in seconds."""
    network: NetworkConfig
    max_cycles: int = DEFAULT_MAX_CYCLES
    min_remaining_amount: int = Web3.to_wei(Decimal(DEFAULT_MIN_REMAINING_AMOUNT), 'ether')
    min_transfer_amount: int = Web3.to_wei(Decimal(DEFAULT_MIN_TRANSFER_AMOUNT), 'ether')
    inter_transfer_delay: float = DEFAULT_DELAY_BETWEEN_TRANSFERS_MS / 1000
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY_MS / 1000

    @property
    def gas_limit(self) -> int:
        return self.network.gas_limit

    @property
    def reference_gas_price(self) -> int:
        return self.network.reference_gas_price


@dataclass(frozen=True)
class WalletPair:
    wallet_a: WalletCredentials
    wallet_b: WalletCredentials


def load_network_config(config_path: str = DEFAULT_NETWORK_CONFIG_PATH,
                        rpc_url_override: Optional[str] = None) -> NetworkConfig:
    """
    Load network parameters from YAML, falling back to defaults

    Args:
        config_path: Path to network config YAML
        rpc_url_override: RPC URL taking precedence over the file

    Returns:
        NetworkConfig
    """
    values = dict(DEFAULT_NETWORK)

    try:
        config_file = Path(config_path)
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}

            custom = config.get('network', {})
            if custom:
                values.update(custom)
                logger.info(f"Loaded network config from {config_file}")
        else:
            logger.debug(f"No network config at {config_file}, using defaults")

    except Exception as e:
        logger.warning(f"Failed to load network config from {config_path}: {e}, using defaults")

    if rpc_url_override:
        values['rpc_url'] = rpc_url_override

    try:
        return NetworkConfig(
            name=str(values['name']),
            rpc_url=str(values['rpc_url']),
            chain_id=int(values['chain_id']),
            currency=str(values['currency']),
            explorer=str(values['explorer']),
            gas_limit=_non_negative(int(values['gas_limit']), 'gas_limit'),
            gas_price_gwei=_non_negative(int(values['gas_price_gwei']), 'gas_price_gwei'),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid network config: {e}") from e


def load_transfer_config(env: Optional[Mapping[str, str]] = None,
                         network: Optional[NetworkConfig] = None) -> TransferConfig:
    """
    Build the run configuration from environment variables

    Unset variables take their defaults; an explicit 0 is kept.
    """
    if env is None:
        env = os.environ

    if network is None:
        network = load_network_config(
            env.get('NETWORK_CONFIG') or DEFAULT_NETWORK_CONFIG_PATH,
            rpc_url_override=env.get('RPC_URL'),
        )

    return TransferConfig(
        network=network,
        max_cycles=_env_int(env, 'MAX_CYCLES', DEFAULT_MAX_CYCLES),
        min_remaining_amount=_env_ether(env, 'MIN_REMAINING_AMOUNT', DEFAULT_MIN_REMAINING_AMOUNT),
        min_transfer_amount=_env_ether(env, 'MIN_TRANSFER_AMOUNT', DEFAULT_MIN_TRANSFER_AMOUNT),
        inter_transfer_delay=_env_int(env, 'DELAY_BETWEEN_TRANSFERS', DEFAULT_DELAY_BETWEEN_TRANSFERS_MS) / 1000,
        max_retries=_env_int(env, 'MAX_RETRIES', DEFAULT_MAX_RETRIES),
        retry_delay=_env_int(env, 'RETRY_DELAY', DEFAULT_RETRY_DELAY_MS) / 1000,
    )


def load_wallet_pair(env: Optional[Mapping[str, str]] = None) -> WalletPair:
    """Load and verify both ping-pong wallets"""
    if env is None:
        env = os.environ

    _require(env, PING_PONG_ENV_VARS)

    return WalletPair(
        wallet_a=_verified_wallet("Wallet A", env['WALLET_A_PRIVATE_KEY'], env['WALLET_A_ADDRESS']),
        wallet_b=_verified_wallet("Wallet B", env['WALLET_B_PRIVATE_KEY'], env['WALLET_B_ADDRESS']),
    )


def load_single_transfer_wallets(env: Optional[Mapping[str, str]] = None) -> WalletPair:
    """
    Load wallets for single-transfer mode

    Only the sender (wallet A) has a key; wallet B is a destination address.
    """
    if env is None:
        env = os.environ

    _require(env, SINGLE_ENV_VARS)

    wallet_a = _verified_wallet("Wallet A", env['PRIVATE_KEY'], env['WALLET_A_ADDRESS'])
    wallet_b = WalletCredentials(label="Wallet B", address=env['WALLET_B_ADDRESS'], private_key="")
    return WalletPair(wallet_a=wallet_a, wallet_b=wallet_b)


def load_dotenv_file(dotenv_path: Optional[str] = None) -> bool:
    """Load .env into the process environment without overriding set variables"""
    loaded = load_dotenv(dotenv_path=dotenv_path, override=False)
    if loaded:
        logger.debug("Loaded environment from .env")
    return loaded


def env_var_status(names, env: Optional[Mapping[str, str]] = None) -> Dict[str, bool]:
    """Map each variable name to whether it is set"""
    if env is None:
        env = os.environ
    return {name: bool(env.get(name)) for name in names}


def _require(env: Mapping[str, str], names) -> None:
    for name in names:
        if not env.get(name):
            raise ConfigurationError(f"{name} not found in environment variables")


def _verified_wallet(label: str, private_key: str, address: str) -> WalletCredentials:
    try:
        derived = Account.from_key(private_key).address
    except Exception as e:
        raise ConfigurationError(f"{label} private key is invalid: {e}") from e

    if derived.lower() != address.lower():
        env_prefix = label.upper().replace(" ", "_")
        raise ConfigurationError(f"{env_prefix}_ADDRESS does not match its private key")

    return WalletCredentials(label=label, address=address, private_key=private_key)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    return _non_negative(value, name)


def _env_ether(env: Mapping[str, str], name: str, default: str) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        raw = default
    try:
        value = Web3.to_wei(Decimal(raw), 'ether')
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ConfigurationError(f"{name} must be a decimal amount, got {raw!r}") from e
    return _non_negative(value, name)


def _non_negative(value: int, name: str) -> int:
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")
    return value
