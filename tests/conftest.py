from typing import Dict

import pytest

from pingpong_transfer.config import WalletCredentials, WalletPair

from .helpers import ADDRESS_A, ADDRESS_B, KEY_A, KEY_B, FakeSleep


@pytest.fixture
def wallets() -> WalletPair:
    return WalletPair(
        wallet_a=WalletCredentials(label="Wallet A", address=ADDRESS_A, private_key=KEY_A),
        wallet_b=WalletCredentials(label="Wallet B", address=ADDRESS_B, private_key=KEY_B),
    )


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def wallet_env() -> Dict[str, str]:
    return {
        'WALLET_A_PRIVATE_KEY': KEY_A,
        'WALLET_B_PRIVATE_KEY': KEY_B,
        'WALLET_A_ADDRESS': ADDRESS_A,
        'WALLET_B_ADDRESS': ADDRESS_B,
    }
