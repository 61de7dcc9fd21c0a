# /gasfee/adapters/connection.py
# Network connection handle consumed by the estimation core. The core never
# builds one itself: callers hand it a connection (web3-backed in production,
# MockNetworkConnection in tests).
import asyncio
from typing import Any, Dict, Optional

import aiohttp
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, ProviderConnectionError, Web3Exception

from gasfee.core.errors import EstimationFailed, NetworkUnavailable
from gasfee.core.logger import get_logger
from gasfee.core.models import FeeData

log = get_logger(__name__)

# Tip assumed when an EIP-1559 node cannot suggest one (1 gwei)
DEFAULT_PRIORITY_FEE = 10**9

# Failures meaning the endpoint could not answer at all
NETWORK_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, ProviderConnectionError)
# Failures meaning the endpoint answered with an error
RPC_ERRORS = (ContractLogicError, Web3Exception, ValueError)


class NetworkConnection:
    """
    The four operations the estimation core needs from a live network.
    """
    async def get_fee_data(self) -> FeeData:
        raise NotImplementedError

    async def estimate_transfer_gas(self, to: str, value_wei: int, from_address: Optional[str] = None) -> int:
        raise NotImplementedError

    async def estimate_contract_gas(self, to: str, data: str, value_wei: int, from_address: Optional[str] = None) -> int:
        raise NotImplementedError

    async def get_latest_block_number(self) -> int:
        raise NotImplementedError

    async def close(self) -> None:
        """Releases transport resources; a no-op for connections that hold none."""
        return None


class Web3Connection(NetworkConnection):
    """NetworkConnection over an AsyncWeb3 instance. No retries; timeouts belong to the provider."""
    def __init__(self, w3: AsyncWeb3):
        self.w3 = w3

    @classmethod
    def from_url(cls, rpc_url: str, timeout_seconds: float = 10.0) -> "Web3Connection":
        provider = AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout_seconds)},
        )
        return cls(AsyncWeb3(provider))

    async def _latest_block(self) -> Any:
        try:
            return await self.w3.eth.get_block("latest")
        except NETWORK_ERRORS as e:
            raise NetworkUnavailable(f"RPC endpoint unreachable: {e}") from e
        except RPC_ERRORS as e:
            raise NetworkUnavailable(f"RPC endpoint could not return the latest block: {e}") from e

    async def _optional_fee(self, awaitable, method: str) -> Optional[int]:
        """Fee fields a node may not support come back as None rather than an error."""
        try:
            return int(await awaitable)
        except NETWORK_ERRORS as e:
            raise NetworkUnavailable(f"RPC endpoint unreachable: {e}") from e
        except RPC_ERRORS as e:
            log.warning("FEE_FIELD_UNSUPPORTED", method=method, error=str(e))
            return None

    async def get_fee_data(self) -> FeeData:
        block = await self._latest_block()
        gas_price = await self._optional_fee(self.w3.eth.gas_price, "eth_gasPrice")

        max_fee = None
        priority_fee = None
        base_fee = block.get("baseFeePerGas")
        if base_fee is not None:
            priority_fee = await self._optional_fee(self.w3.eth.max_priority_fee, "eth_maxPriorityFeePerGas")
            if priority_fee is None:
                priority_fee = DEFAULT_PRIORITY_FEE
            max_fee = int(base_fee) * 2 + priority_fee

        log.debug("FEE_DATA_FETCHED", gas_price=gas_price, max_fee_per_gas=max_fee, max_priority_fee_per_gas=priority_fee)
        return FeeData(gas_price=gas_price, max_fee_per_gas=max_fee, max_priority_fee_per_gas=priority_fee)

    async def _estimate_gas(self, params: Dict[str, Any]) -> int:
        try:
            return int(await self.w3.eth.estimate_gas(params))
        except NETWORK_ERRORS as e:
            raise NetworkUnavailable(f"RPC endpoint unreachable: {e}") from e
        except RPC_ERRORS as e:
            raise EstimationFailed(str(e)) from e

    @staticmethod
    def _base_params(to: str, value_wei: int, from_address: Optional[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"to": Web3.to_checksum_address(to), "value": value_wei}
        if from_address:
            params["from"] = Web3.to_checksum_address(from_address)
        return params

    async def estimate_transfer_gas(self, to: str, value_wei: int, from_address: Optional[str] = None) -> int:
        return await self._estimate_gas(self._base_params(to, value_wei, from_address))

    async def estimate_contract_gas(self, to: str, data: str, value_wei: int, from_address: Optional[str] = None) -> int:
        params = self._base_params(to, value_wei, from_address)
        params["data"] = data
        return await self._estimate_gas(params)

    async def get_latest_block_number(self) -> int:
        block = await self._latest_block()
        return int(block["number"])

    async def close(self) -> None:
        # AsyncHTTPProvider keeps an aiohttp session open until disconnected
        await self.w3.provider.disconnect()
