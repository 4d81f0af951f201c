"""Unit tests for the recovery detector and recovery transfer."""

import asyncio

import pytest

from pingpong_transfer.models import FailureReason
from pingpong_transfer.recovery import detect, run_recovery
from pingpong_transfer.transfer_engine import TransferEngine

from .helpers import ADDRESS_A, ADDRESS_B, ETHER, FakeLedger, make_config


@pytest.mark.parametrize("balance_b", [1, 5, 10 ** 18])
def test_empty_a_with_funded_b_is_degraded(balance_b):
    check = detect(0, balance_b)

    assert check.degraded is True
    assert check.balance_b == balance_b


@pytest.mark.parametrize("balance_a,balance_b", [(1, 0), (1, 1), (10 ** 18, 5), (0, 0)])
def test_other_balances_are_not_degraded(balance_a, balance_b):
    assert detect(balance_a, balance_b).degraded is False


def test_recovery_moves_b_to_a(wallets, fake_sleep):
    ledger = FakeLedger({ADDRESS_A: 0, ADDRESS_B: 5 * ETHER}, gas_price=1)
    engine = TransferEngine(ledger, make_config(), sleep=fake_sleep)

    outcome = asyncio.run(run_recovery(engine, wallets))

    assert outcome.success
    assert ledger.sends() == [('send_value', ADDRESS_B, ADDRESS_A, 5 * ETHER - 1)]
    assert ledger.balances == {ADDRESS_A: 5 * ETHER - 1, ADDRESS_B: 0}


def test_recovery_failure_is_reported(wallets, fake_sleep):
    ledger = FakeLedger({ADDRESS_A: 0, ADDRESS_B: ETHER // 10}, gas_price=1)
    engine = TransferEngine(ledger, make_config(min_remaining_amount=ETHER // 2, max_retries=2), sleep=fake_sleep)

    outcome = asyncio.run(run_recovery(engine, wallets))

    assert not outcome.success
    assert outcome.reason == FailureReason.BELOW_MINIMUM
    assert outcome.attempts_used == 2
