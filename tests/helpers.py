"""Test doubles: an in-memory ledger that settles transfers instantly"""

from typing import Dict, List, Optional

from pingpong_transfer.config import NetworkConfig, TransferConfig
from pingpong_transfer.errors import LedgerError
from pingpong_transfer.ledger_client import TransferReceipt


ETHER = 10 ** 18

ADDRESS_A = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ADDRESS_B = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
KEY_A = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
KEY_B = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"


class FakeLedger:
    """
    Scripted ledger

    send_script entries are consumed one per send_value call:
    an Exception instance is raised, "revert" settles with a failing
    receipt, None settles normally.
    """

    def __init__(self, balances: Dict[str, int], gas_price: int = 1):
        self.balances = dict(balances)
        self.gas_price = gas_price
        self.send_script: List = []
        self.balance_errors: List[Exception] = []
        self.calls: List[tuple] = []
        self.closed = False
        self._tx_counter = 0

    async def get_balance(self, address: str) -> int:
        self.calls.append(('get_balance', address))
        if self.balance_errors:
            raise self.balance_errors.pop(0)
        return self.balances.get(address, 0)

    async def get_gas_price(self) -> int:
        self.calls.append(('get_gas_price',))
        return self.gas_price

    async def send_value(self, sender, to_address, amount, gas_limit, gas_price) -> TransferReceipt:
        self.calls.append(('send_value', sender.address, to_address, amount))
        action = self.send_script.pop(0) if self.send_script else None
        if isinstance(action, Exception):
            raise action

        self._tx_counter += 1
        tx_hash = f"0x{self._tx_counter:064x}"
        fee = gas_limit * gas_price

        if action == "revert":
            self.balances[sender.address] -= fee
            return TransferReceipt(tx_hash=tx_hash, success=False, gas_used=gas_limit, effective_gas_price=gas_price)

        self.balances[sender.address] -= amount + fee
        self.balances[to_address] = self.balances.get(to_address, 0) + amount
        return TransferReceipt(tx_hash=tx_hash, success=True, gas_used=gas_limit, effective_gas_price=gas_price)

    async def close(self):
        self.closed = True

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def sends(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == 'send_value']


class OutageLedger(FakeLedger):
    """FakeLedger whose node stops answering balance reads after healthy_reads of them"""

    def __init__(self, balances: Dict[str, int], healthy_reads: int, gas_price: int = 1):
        super().__init__(balances, gas_price=gas_price)
        self.healthy_reads = healthy_reads

    async def get_balance(self, address: str) -> int:
        if self.count('get_balance') >= self.healthy_reads:
            self.calls.append(('get_balance', address))
            raise LedgerError("node down")
        return await super().get_balance(address)

class FakeSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


def make_network(gas_limit: int = 1, gas_price_gwei: int = 0) -> NetworkConfig:
    return NetworkConfig(
        name="Test Network",
        rpc_url="http://localhost:8545",
        chain_id=31337,
        currency="TST",
        explorer="https://explorer.test/",
        gas_limit=gas_limit,
        gas_price_gwei=gas_price_gwei,
    )


def make_config(
    max_cycles: int = 10,
    min_remaining_amount: int = ETHER // 2,
    min_transfer_amount: int = ETHER // 2,
    max_retries: int = 3,
    retry_delay: float = 5.0,
    inter_transfer_delay: float = 2.0,
    gas_limit: int = 1,
    network: Optional[NetworkConfig] = None
) -> TransferConfig:
    return TransferConfig(
        network=network or make_network(gas_limit=gas_limit),
        max_cycles=max_cycles,
        min_remaining_amount=min_remaining_amount,
        min_transfer_amount=min_transfer_amount,
        inter_transfer_delay=inter_transfer_delay,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )
