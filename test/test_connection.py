import aiohttp
import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError

from gasfee.adapters.connection import Web3Connection, DEFAULT_PRIORITY_FEE
from gasfee.core.errors import EstimationFailed, NetworkUnavailable

GWEI = 10**9
RECIPIENT = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
SENDER = "0x2222222222222222222222222222222222222222"


async def _resolve(value):
    if isinstance(value, Exception):
        raise value
    return value


class DummyEth:
    """Mimics the awaitable properties and coroutines of AsyncWeb3's eth module."""
    def __init__(self, block=None, gas_price=20 * GWEI, max_priority_fee=2 * GWEI, estimate=21000):
        self.block = block if block is not None else {"number": 100}
        self._gas_price = gas_price
        self._max_priority_fee = max_priority_fee
        self._estimate = estimate
        self.estimate_params = []

    @property
    def gas_price(self):
        return _resolve(self._gas_price)

    @property
    def max_priority_fee(self):
        return _resolve(self._max_priority_fee)

    async def get_block(self, identifier):
        assert identifier == "latest"
        return await _resolve(self.block)

    async def estimate_gas(self, params):
        self.estimate_params.append(params)
        return await _resolve(self._estimate)


class DummyW3:
    def __init__(self, eth):
        self.eth = eth


@pytest.mark.asyncio
async def test_legacy_network_fee_data():
    conn = Web3Connection(DummyW3(DummyEth(block={"number": 5})))
    fee = await conn.get_fee_data()

    assert fee.gas_price == 20 * GWEI
    assert fee.max_fee_per_gas is None
    assert fee.max_priority_fee_per_gas is None


@pytest.mark.asyncio
async def test_eip1559_network_fee_data():
    block = {"number": 5, "baseFeePerGas": 10 * GWEI}
    conn = Web3Connection(DummyW3(DummyEth(block=block)))
    fee = await conn.get_fee_data()

    assert fee.gas_price == 20 * GWEI
    assert fee.max_priority_fee_per_gas == 2 * GWEI
    assert fee.max_fee_per_gas == 2 * 10 * GWEI + 2 * GWEI


@pytest.mark.asyncio
async def test_unsupported_rpc_methods_become_absent_fields():
    block = {"number": 5, "baseFeePerGas": 10 * GWEI}
    eth = DummyEth(block=block, gas_price=ValueError("method not found"), max_priority_fee=ValueError("method not found"))
    fee = await Web3Connection(DummyW3(eth)).get_fee_data()

    assert fee.gas_price is None
    assert fee.max_priority_fee_per_gas == DEFAULT_PRIORITY_FEE
    assert fee.max_fee_per_gas == 20 * GWEI + DEFAULT_PRIORITY_FEE


@pytest.mark.asyncio
async def test_unreachable_endpoint_raises_network_unavailable():
    eth = DummyEth(block=aiohttp.ClientConnectionError("connection refused"))
    conn = Web3Connection(DummyW3(eth))

    with pytest.raises(NetworkUnavailable):
        await conn.get_fee_data()
    with pytest.raises(NetworkUnavailable):
        await conn.get_latest_block_number()


@pytest.mark.asyncio
async def test_transfer_simulation_params():
    eth = DummyEth()
    gas = await Web3Connection(DummyW3(eth)).estimate_transfer_gas(RECIPIENT, 10**18, SENDER)

    assert gas == 21000
    assert eth.estimate_params == [
        {"to": Web3.to_checksum_address(RECIPIENT), "value": 10**18, "from": Web3.to_checksum_address(SENDER)}
    ]


@pytest.mark.asyncio
async def test_contract_simulation_params_without_sender():
    eth = DummyEth(estimate=54321)
    gas = await Web3Connection(DummyW3(eth)).estimate_contract_gas(RECIPIENT, "0xabcdef", 0)

    assert gas == 54321
    assert eth.estimate_params == [{"to": Web3.to_checksum_address(RECIPIENT), "value": 0, "data": "0xabcdef"}]


@pytest.mark.asyncio
async def test_revert_becomes_estimation_failed():
    eth = DummyEth(estimate=ContractLogicError("execution reverted: nope"))

    with pytest.raises(EstimationFailed) as exc_info:
        await Web3Connection(DummyW3(eth)).estimate_contract_gas(RECIPIENT, "0xabcdef", 0)
    assert "execution reverted: nope" in exc_info.value.reason
    assert len(eth.estimate_params) == 1


@pytest.mark.asyncio
async def test_latest_block_number():
    conn = Web3Connection(DummyW3(DummyEth(block={"number": 19_000_000})))
    assert await conn.get_latest_block_number() == 19_000_000


class DummyProvider:
    def __init__(self):
        self.disconnects = 0

    async def disconnect(self):
        self.disconnects += 1


@pytest.mark.asyncio
async def test_close_disconnects_provider():
    w3 = DummyW3(DummyEth())
    w3.provider = DummyProvider()
    conn = Web3Connection(w3)

    await conn.get_latest_block_number()
    await conn.close()

    assert w3.provider.disconnects == 1
