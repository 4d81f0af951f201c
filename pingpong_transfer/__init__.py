"""
Ping-Pong Transfer System

Automated full-balance value transfers between two testnet wallets,
alternating sender and receiver each round until a stop condition fires.

Components:
- fee_calculator: Fee-aware transferable amount and viability policies
- retry: Fixed-count retry executor around a single transfer attempt
- transfer_engine: One transfer attempt, retry-wrapped transfers, sweep
- orchestrator: Alternating cycle state machine with final sweep
- recovery: Detection and repair of funds stuck on wallet B
- ledger_client: AsyncWeb3 ledger client (balance, gas price, send + settle)
- config: Immutable configuration from .env and network_config.yaml
- app: Ping-pong and single-transfer runners
- cli: Console entry points

Run Flow:
1. Load configuration - abort on missing/mismatched credentials
2. Pre-flight - refuse when both wallets are empty
3. Recovery check - wallet A empty and wallet B funded -> one B -> A transfer
4. Ping-pong cycles - until min threshold, insufficient balance, error or max cycles
5. Final sweep - B -> A, always attempted
6. Summary - final balances, cycles, transfers, total fees
"""

from .config import (
    NetworkConfig,
    TransferConfig,
    WalletCredentials,
    WalletPair,
    load_network_config,
    load_transfer_config,
    load_wallet_pair,
    load_single_transfer_wallets,
)
from .errors import (
    ConfigurationError,
    LedgerError,
    PingPongError,
    PreflightError,
)
from .fee_calculator import (
    TransferQuote,
    ViabilityPolicy,
    compute,
)
from .models import (
    CycleReport,
    CycleState,
    FailureReason,
    Role,
    RoundRecord,
    RunMode,
    RunState,
    RunSummary,
    TransferAttemptResult,
    TransferOutcome,
)
from .retry import execute_with_retry
from .ledger_client import (
    LedgerClient,
    TransferReceipt,
    Web3LedgerClient,
)
from .transfer_engine import TransferEngine
from .orchestrator import (
    PingPongOrchestrator,
    check_preflight,
)
from .recovery import (
    RecoveryCheck,
    detect,
    run_recovery,
)
from .app import (
    PingPongApp,
    SingleTransferApp,
)

__all__ = [
    # Configuration
    'NetworkConfig',
    'TransferConfig',
    'WalletCredentials',
    'WalletPair',
    'load_network_config',
    'load_transfer_config',
    'load_wallet_pair',
    'load_single_transfer_wallets',

    # Errors
    'ConfigurationError',
    'LedgerError',
    'PingPongError',
    'PreflightError',

    # Calculator
    'TransferQuote',
    'ViabilityPolicy',
    'compute',

    # Models
    'CycleReport',
    'CycleState',
    'FailureReason',
    'Role',
    'RoundRecord',
    'RunMode',
    'RunState',
    'RunSummary',
    'TransferAttemptResult',
    'TransferOutcome',

    # Retry
    'execute_with_retry',

    # Ledger
    'LedgerClient',
    'TransferReceipt',
    'Web3LedgerClient',

    # Engine
    'TransferEngine',
    'PingPongOrchestrator',
    'check_preflight',
    'RecoveryCheck',
    'detect',
    'run_recovery',

    # Runners
    'PingPongApp',
    'SingleTransferApp',
]

__version__ = '1.0.0'
__description__ = 'Fee-aware ping-pong value transfers with recovery'
