"""
Fee-Aware Amount Calculator

Computes the largest transferable amount once the network fee is set aside.
Pure and deterministic: no I/O, no clamping of negative results.
"""

from dataclasses import dataclass
from enum import Enum


class ViabilityPolicy(str, Enum):
    # available > 0, minimum checked separately by the caller
    PING_PONG = "ping_pong"
    # available >= min_transfer_amount in one step
    SINGLE = "single"


@dataclass(frozen=True)
class TransferQuote:
    balance: int
    gas_price: int
    gas_limit: int
    estimated_fee: int
    available_amount: int
    viable: bool


def compute(
    balance: int,
    gas_price: int,
    gas_limit: int,
    policy: ViabilityPolicy = ViabilityPolicy.PING_PONG,
    min_transfer_amount: int = 0
) -> TransferQuote:
    """
    Compute transferable amount and viability

    Args:
        balance: Sender balance (wei)
        gas_price: Gas price (wei per gas)
        gas_limit: Gas limit of a plain value transfer
        policy: Viability policy of the calling mode
        min_transfer_amount: Minimum amount, used by the SINGLE policy only

    Returns:
        TransferQuote (available_amount may be negative)
    """
    estimated_fee = gas_price * gas_limit
    available_amount = balance - estimated_fee

    if policy == ViabilityPolicy.SINGLE:
        viable = available_amount >= min_transfer_amount
    else:
        viable = available_amount > 0

    return TransferQuote(
        balance=balance,
        gas_price=gas_price,
        gas_limit=gas_limit,
        estimated_fee=estimated_fee,
        available_amount=available_amount,
        viable=viable,
    )
