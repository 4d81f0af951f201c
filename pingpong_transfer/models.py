"""
Transfer Models

Result and state types shared by the calculator, retry executor,
orchestrator and recovery detector.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional


class FailureReason(str, Enum):
    INSUFFICIENT_BALANCE = "insufficient_balance"
    BELOW_MINIMUM = "below_minimum"
    TRANSACTION_FAILED = "transaction_failed"
    NETWORK_ERROR = "network_error"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"


class Role(str, Enum):
    A = "A"
    B = "B"

    @property
    def other(self) -> "Role":
        return Role.B if self is Role.A else Role.A


class RunState(str, Enum):
    RUNNING = "RUNNING"
    STOPPED_MIN_THRESHOLD = "STOPPED_MIN_THRESHOLD"
    STOPPED_INSUFFICIENT = "STOPPED_INSUFFICIENT"
    STOPPED_ERROR = "STOPPED_ERROR"
    STOPPED_MAX_CYCLES = "STOPPED_MAX_CYCLES"
    COMPLETE = "COMPLETE"


class RunMode(str, Enum):
    PING_PONG = "ping_pong"
    RECOVERY = "recovery"
    SINGLE = "single"


@dataclass(frozen=True)
class TransferAttemptResult:
    """Outcome of exactly one transfer attempt"""
    success: bool
    amount_sent: int = 0
    fee_paid: int = 0
    reason: Optional[FailureReason] = None
    error_message: Optional[str] = None
    tx_hash: Optional[str] = None

    @classmethod
    def succeeded(cls, amount_sent: int, fee_paid: int, tx_hash: Optional[str] = None) -> "TransferAttemptResult":
        return cls(success=True, amount_sent=amount_sent, fee_paid=fee_paid, tx_hash=tx_hash)

    @classmethod
    def failed(cls, reason: FailureReason, error_message: Optional[str] = None,
               tx_hash: Optional[str] = None) -> "TransferAttemptResult":
        return cls(success=False, reason=reason, error_message=error_message, tx_hash=tx_hash)


@dataclass(frozen=True)
class TransferOutcome:
    """Terminal result of the retry executor"""
    success: bool
    attempts_used: int
    amount_sent: int = 0
    fee_paid: int = 0
    reason: Optional[FailureReason] = None
    error_message: Optional[str] = None
    tx_hash: Optional[str] = None

    @classmethod
    def from_attempt(cls, result: TransferAttemptResult, attempts_used: int) -> "TransferOutcome":
        return cls(
            success=result.success,
            attempts_used=attempts_used,
            amount_sent=result.amount_sent,
            fee_paid=result.fee_paid,
            reason=result.reason,
            error_message=result.error_message,
            tx_hash=result.tx_hash,
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['reason'] = self.reason.value if self.reason else None
        return data


@dataclass
class CycleState:
    """Mutable loop state, owned by a single orchestrator run"""
    cycle_count: int = 0
    total_transfers: int = 0
    total_fees: int = 0
    sender_role: Role = Role.A
    state: RunState = RunState.RUNNING


@dataclass(frozen=True)
class RoundRecord:
    cycle: int
    sender_role: Role
    outcome: TransferOutcome


@dataclass(frozen=True)
class CycleReport:
    """What a finished ping-pong run hands back to the caller"""
    stop_state: RunState
    final_state: RunState
    cycle_count: int
    total_transfers: int
    total_fees: int
    sender_role: Role
    rounds: List[RoundRecord] = field(default_factory=list)
    sweep_outcome: Optional[TransferOutcome] = None
    sweep_skipped: bool = False

    @property
    def degraded(self) -> bool:
        return self.stop_state == RunState.STOPPED_ERROR

    def to_dict(self) -> Dict:
        return {
            'stop_state': self.stop_state.value,
            'final_state': self.final_state.value,
            'cycle_count': self.cycle_count,
            'total_transfers': self.total_transfers,
            'total_fees': self.total_fees,
            'sender_role': self.sender_role.value,
            'rounds': [
                {'cycle': r.cycle, 'sender_role': r.sender_role.value, 'outcome': r.outcome.to_dict()}
                for r in self.rounds
            ],
            'sweep_outcome': self.sweep_outcome.to_dict() if self.sweep_outcome else None,
            'sweep_skipped': self.sweep_skipped,
        }


@dataclass(frozen=True)
class RunSummary:
    """Process-level result of one invocation"""
    mode: RunMode
    success: bool
    total_fees: int = 0
    cycle_report: Optional[CycleReport] = None
    outcome: Optional[TransferOutcome] = None
    final_balances: Optional[Dict[str, Optional[int]]] = None
    preflight_failed: bool = False
    message: Optional[str] = None
