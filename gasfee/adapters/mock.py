# /gasfee/adapters/mock.py
# Test implementations of the connection and price-feed adapters.
# They record every call so tests can assert which network operations ran.

from decimal import Decimal
from typing import Any, Dict, List, Optional

from gasfee.adapters.connection import NetworkConnection
from gasfee.adapters.oracle import PriceOracle
from gasfee.core.errors import EstimationFailed
from gasfee.core.logger import get_logger
from gasfee.core.models import FeeData

log = get_logger(__name__)

class MockNetworkConnection(NetworkConnection):
    """
    A scripted network. Set ``fee_data_error`` / ``estimation_error`` /
    ``block_error`` to an exception instance to make that operation fail.
    """
    def __init__(
        self,
        fee_data: Optional[FeeData] = None,
        gas_limit: int = 21000,
        block_number: int = 1,
        fee_data_error: Optional[Exception] = None,
        estimation_error: Optional[Exception] = None,
        block_error: Optional[Exception] = None,
    ):
        self.fee_data = fee_data if fee_data is not None else FeeData(gas_price=20 * 10**9)
        self.gas_limit = gas_limit
        self.block_number = block_number
        self.fee_data_error = fee_data_error
        self.estimation_error = estimation_error
        self.block_error = block_error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        log.info("MOCK_NETWORK_CONNECTION_INITIALIZED")

    def calls_to(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method]

    async def get_fee_data(self) -> FeeData:
        self.calls.append({"method": "get_fee_data"})
        if self.fee_data_error:
            raise self.fee_data_error
        return self.fee_data

    async def _estimate(self, call: Dict[str, Any]) -> int:
        self.calls.append(call)
        if self.estimation_error:
            log.error("MOCK_ESTIMATION_FORCED_FAILURE", call=call)
            raise self.estimation_error
        return self.gas_limit

    async def estimate_transfer_gas(self, to: str, value_wei: int, from_address: Optional[str] = None) -> int:
        return await self._estimate({"method": "estimate_transfer_gas", "to": to, "value": value_wei, "from": from_address})

    async def estimate_contract_gas(self, to: str, data: str, value_wei: int, from_address: Optional[str] = None) -> int:
        return await self._estimate(
            {"method": "estimate_contract_gas", "to": to, "data": data, "value": value_wei, "from": from_address}
        )

    async def get_latest_block_number(self) -> int:
        self.calls.append({"method": "get_latest_block_number"})
        if self.block_error:
            raise self.block_error
        return self.block_number

    async def close(self) -> None:
        self.closed = True


class RevertingNetworkConnection(MockNetworkConnection):
    """A network whose simulator rejects every call with the given revert reason."""
    def __init__(self, reason: str = "execution reverted", **kwargs):
        super().__init__(estimation_error=EstimationFailed(reason), **kwargs)


class StaticPriceOracle(PriceOracle):
    def __init__(self, price: Decimal = Decimal("3000")):
        self.price = Decimal(price)
        self.calls = 0

    async def get_native_asset_price_usd(self) -> Decimal:
        self.calls += 1
        return self.price
