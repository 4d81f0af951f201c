"""
Setup Check

Verifies a machine is ready to run transfers:
1. Library versions
2. Required environment variables (values never shown)
3. RPC connectivity (chain id, latest block)
"""

from importlib import metadata
from typing import Dict, Mapping, Optional

from loguru import logger

from .config import PING_PONG_ENV_VARS, env_var_status
from .errors import LedgerError
from .ledger_client import Web3LedgerClient


def library_versions() -> Dict[str, Optional[str]]:
    versions = {}
    for dist in ("web3", "eth-account", "python-dotenv", "loguru", "PyYAML"):
        try:
            versions[dist] = metadata.version(dist)
        except metadata.PackageNotFoundError:
            versions[dist] = None
    return versions


async def check_connection(ledger: Web3LedgerClient) -> bool:
    try:
        chain_id = await ledger.get_chain_id()
        block_number = await ledger.get_block_number()
    except LedgerError as e:
        logger.error(f"   ✗ Connection failed: {e}")
        return False

    logger.info(f"   ✓ Connected to: {ledger.network.name} (Chain ID: {chain_id})")
    logger.info(f"   ✓ Latest block: {block_number}")

    if chain_id != ledger.network.chain_id:
        logger.warning(f"   ⚠ Expected chain id {ledger.network.chain_id}, node reports {chain_id}")
    return True


async def run_setup_check(ledger: Web3LedgerClient, env: Optional[Mapping[str, str]] = None) -> bool:
    """
    Run all checks and log a summary

    Returns:
        True when environment and network are both ready
    """
    logger.info("🧪 Testing Transfer Script Setup")
    logger.info("=" * 37)

    logger.info("1️⃣ Dependencies:")
    for dist, version in library_versions().items():
        if version:
            logger.info(f"   ✓ {dist}: {version}")
        else:
            logger.warning(f"   ✗ {dist}: not installed")

    logger.info("2️⃣ Environment Variables:")
    status = env_var_status(PING_PONG_ENV_VARS, env)
    for name, is_set in status.items():
        if is_set:
            logger.info(f"   ✓ {name}: set")
        else:
            logger.warning(f"   ✗ {name}: not set")
    env_ready = all(status.values())

    logger.info(f"3️⃣ {ledger.network.name} Connection:")
    network_ready = await check_connection(ledger)

    logger.info("📊 Setup Summary:")
    logger.info(f"   Environment: {'✓ Ready' if env_ready else '✗ Missing variables'}")
    logger.info(f"   Network: {'✓ Connected' if network_ready else '✗ Failed'}")

    if env_ready and network_ready:
        logger.info("🎉 Setup is complete! You can now run: pingpong-transfer")
    else:
        logger.warning("⚠ Please fix the issues above before running the transfer script.")
        if not env_ready:
            logger.info("   → Copy .env.example to .env and fill in your details")

    return env_ready and network_ready
