"""Unit tests for configuration loading and validation."""

import dataclasses

import pytest

from pingpong_transfer.config import (
    TransferConfig,
    load_network_config,
    load_single_transfer_wallets,
    load_transfer_config,
    load_wallet_pair,
)
from pingpong_transfer.errors import ConfigurationError

from .helpers import ADDRESS_A, ADDRESS_B, ETHER, KEY_A, KEY_B, make_network


def test_defaults_when_environment_is_empty():
    config = load_transfer_config({}, network=make_network())

    assert config.max_cycles == 100
    assert config.min_remaining_amount == ETHER // 2
    assert config.min_transfer_amount == ETHER // 2
    assert config.inter_transfer_delay == 2.0
    assert config.max_retries == 3
    assert config.retry_delay == 5.0


def test_environment_overrides():
    env = {
        'MAX_CYCLES': "7",
        'MIN_REMAINING_AMOUNT': "1.25",
        'DELAY_BETWEEN_TRANSFERS': "500",
        'MAX_RETRIES': "5",
        'RETRY_DELAY': "0",
    }

    config = load_transfer_config(env, network=make_network())

    assert config.max_cycles == 7
    assert config.min_remaining_amount == 5 * ETHER // 4
    assert config.inter_transfer_delay == 0.5
    assert config.max_retries == 5
    assert config.retry_delay == 0


def test_explicit_zero_max_cycles_is_kept():
    config = load_transfer_config({'MAX_CYCLES': "0"}, network=make_network())

    assert config.max_cycles == 0


@pytest.mark.parametrize("name,value", [
    ('MAX_CYCLES', "-1"),
    ('MAX_CYCLES', "ten"),
    ('MAX_RETRIES', "1.5"),
    ('MIN_REMAINING_AMOUNT', "abc"),
    ('MIN_REMAINING_AMOUNT', "-0.5"),
])
def test_invalid_numbers_are_configuration_errors(name, value):
    with pytest.raises(ConfigurationError):
        load_transfer_config({name: value}, network=make_network())


def test_config_is_immutable():
    config = load_transfer_config({}, network=make_network())

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.max_cycles = 1


def test_gas_limit_and_reference_price_come_from_network():
    config = TransferConfig(network=make_network(gas_limit=21000))

    assert config.gas_limit == 21000
    assert config.reference_gas_price == 0


def test_network_defaults_without_file(tmp_path):
    network = load_network_config(str(tmp_path / "missing.yaml"))

    assert network.chain_id == 10143
    assert network.gas_limit == 21000
    assert network.reference_gas_price == 20 * 10 ** 9
    assert network.currency == "MON"


def test_network_file_overrides_defaults(tmp_path):
    path = tmp_path / "network.yaml"
    path.write_text("network:\n  name: Local\n  chain_id: 31337\n  gas_price_gwei: 1\n", encoding="utf-8")

    network = load_network_config(str(path), rpc_url_override="http://127.0.0.1:8545")

    assert network.name == "Local"
    assert network.chain_id == 31337
    assert network.reference_gas_price == 10 ** 9
    assert network.rpc_url == "http://127.0.0.1:8545"
    assert network.gas_limit == 21000


def test_unreadable_network_file_falls_back(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("network: [unclosed\n", encoding="utf-8")

    network = load_network_config(str(path))

    assert network.chain_id == 10143


def test_explorer_link():
    network = make_network()

    assert network.tx_url("0xabc") == "https://explorer.test/tx/0xabc"


def test_wallet_pair_loads_and_hides_keys(wallet_env):
    pair = load_wallet_pair(wallet_env)

    assert pair.wallet_a.address == ADDRESS_A
    assert pair.wallet_b.address == ADDRESS_B
    assert KEY_A not in repr(pair)


def test_address_match_is_case_insensitive(wallet_env):
    wallet_env['WALLET_A_ADDRESS'] = ADDRESS_A.lower()

    pair = load_wallet_pair(wallet_env)

    assert pair.wallet_a.address == ADDRESS_A.lower()


@pytest.mark.parametrize("missing", [
    'WALLET_A_PRIVATE_KEY', 'WALLET_B_PRIVATE_KEY', 'WALLET_A_ADDRESS', 'WALLET_B_ADDRESS',
])
def test_missing_credentials(wallet_env, missing):
    del wallet_env[missing]

    with pytest.raises(ConfigurationError, match=missing):
        load_wallet_pair(wallet_env)


def test_mismatched_address(wallet_env):
    wallet_env['WALLET_B_PRIVATE_KEY'] = KEY_A

    with pytest.raises(ConfigurationError, match="WALLET_B_ADDRESS does not match"):
        load_wallet_pair(wallet_env)


def test_invalid_private_key(wallet_env):
    wallet_env['WALLET_A_PRIVATE_KEY'] = "0x1234"

    with pytest.raises(ConfigurationError):
        load_wallet_pair(wallet_env)


def test_single_transfer_wallets():
    env = {'PRIVATE_KEY': KEY_A, 'WALLET_A_ADDRESS': ADDRESS_A, 'WALLET_B_ADDRESS': ADDRESS_B}

    pair = load_single_transfer_wallets(env)

    assert pair.wallet_a.private_key == KEY_A
    assert pair.wallet_b.private_key == ""


def test_single_transfer_key_must_match_wallet_a():
    env = {'PRIVATE_KEY': KEY_B, 'WALLET_A_ADDRESS': ADDRESS_A, 'WALLET_B_ADDRESS': ADDRESS_B}

    with pytest.raises(ConfigurationError):
        load_single_transfer_wallets(env)
