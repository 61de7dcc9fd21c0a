# /gasfee/core/gas_estimator.py
# Sequences fee data, gas-limit simulation and the price feed into one
# estimate. Every external call is attempted once per request; retrying is
# left to the caller.

from gasfee.adapters.connection import NetworkConnection
from gasfee.adapters.oracle import PriceOracle
from gasfee.core.calculator import DEFAULT_NATIVE_DECIMALS, compute_cost, recommend
from gasfee.core.errors import GasEstimationError, InvalidAddress
from gasfee.core.logger import get_logger, GAS_ESTIMATES, GAS_RECOMMENDATIONS
from gasfee.core.models import GasEstimate, GasPrediction, RecommendedFee, TransactionRequest
from gasfee.core.validation import (
    is_contract_call,
    is_valid_address,
    parse_native_amount,
    require_address,
    shorten_address,
)

log = get_logger(__name__)

class GasEstimator:
    """
    Estimates transaction fees against the connection it is given.
    Holds no state between requests.
    """
    def __init__(
        self,
        connection: NetworkConnection,
        oracle: PriceOracle,
        native_decimals: int = DEFAULT_NATIVE_DECIMALS,
    ):
        self.connection = connection
        self.oracle = oracle
        self.native_decimals = native_decimals

    async def estimate_gas_limit(self, request: TransactionRequest) -> int:
        """
        Simulates the transaction: a contract call when a payload is present,
        a plain transfer otherwise.
        """
        value_wei = parse_native_amount(request.value)
        if is_contract_call(request.data):
            return await self.connection.estimate_contract_gas(
                request.to, request.data, value_wei, request.from_address
            )
        return await self.connection.estimate_transfer_gas(request.to, value_wei, request.from_address)

    async def estimate_transaction_fee(self, request: TransactionRequest) -> GasEstimate:
        mode = "contract_call" if is_contract_call(request.data) else "transfer"
        try:
            # Input checks happen before any network round trip.
            require_address(request.to)
            if request.from_address and not is_valid_address(request.from_address):
                raise InvalidAddress(f"Invalid sender address format: {request.from_address!r}")
            parse_native_amount(request.value)

            fee_data = await self.connection.get_fee_data()
            fee_data.resolve()
            gas_limit = await self.estimate_gas_limit(request)
        except GasEstimationError as e:
            GAS_ESTIMATES.labels(e.kind).inc()
            log.error("GAS_ESTIMATE_FAILED", to=shorten_address(request.to), mode=mode, kind=e.kind, error=str(e), exc_info=True)
            raise

        native_price_usd = await self.oracle.get_native_asset_price_usd()
        estimate = compute_cost(gas_limit, fee_data, native_price_usd, self.native_decimals)

        GAS_ESTIMATES.labels("ok").inc()
        log.info(
            "GAS_ESTIMATE_COMPLETED",
            to=shorten_address(request.to),
            mode=mode,
            gas_limit=estimate.gas_limit,
            gas_price_gwei=estimate.gas_price_gwei,
            fee_model=estimate.fee_model,
            total_cost_usd=estimate.total_cost_usd,
        )
        return estimate

    async def get_recommended_gas_price(self) -> RecommendedFee:
        try:
            fee_data = await self.connection.get_fee_data()
            current_price = fee_data.resolve().price
            block_number = await self.connection.get_latest_block_number()
        except GasEstimationError as e:
            GAS_RECOMMENDATIONS.labels(e.kind).inc()
            log.error("GAS_RECOMMENDATION_FAILED", kind=e.kind, error=str(e), exc_info=True)
            raise

        recommended = recommend(current_price, block_number)
        GAS_RECOMMENDATIONS.labels("ok").inc()
        log.info(
            "GAS_RECOMMENDATION_COMPUTED",
            current_gwei=recommended.current_gwei,
            recommended_gwei=recommended.recommended_gwei,
            block_number=block_number,
        )
        return recommended

    async def predict(self, request: TransactionRequest) -> GasPrediction:
        """Estimate followed by the recommendation, as one user action issues them."""
        estimate = await self.estimate_transaction_fee(request)
        recommended = await self.get_recommended_gas_price()
        return GasPrediction(estimate=estimate, recommended=recommended)
