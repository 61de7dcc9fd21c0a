# /gasfee/core/calculator.py
# Pure arithmetic of the pipeline: cost composition and the recommendation
# markup. Amounts stay in integer wei until they are formatted for display.
from decimal import Decimal, ROUND_HALF_UP

from gasfee.core.models import FeeData, GasEstimate, RecommendedFee

WEI_PER_GWEI = 10**9
WEI_PER_NATIVE = 10**18

# +10% for faster confirmation, integer arithmetic (truncating)
RECOMMENDED_MARKUP_NUMERATOR = 110
RECOMMENDED_MARKUP_DENOMINATOR = 100

USD_DECIMALS = 2
GWEI_DECIMALS = 2
DEFAULT_NATIVE_DECIMALS = 6


def _quantize(amount: Decimal, decimals: int) -> Decimal:
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    return amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def wei_to_native(amount_wei: int) -> Decimal:
    return Decimal(amount_wei) / Decimal(WEI_PER_NATIVE)


def wei_to_gwei(amount_wei: int) -> Decimal:
    return Decimal(amount_wei) / Decimal(WEI_PER_GWEI)


def format_native(amount_wei: int, decimals: int = DEFAULT_NATIVE_DECIMALS) -> str:
    return f"{_quantize(wei_to_native(amount_wei), decimals):f}"


def format_gwei(amount_wei: int) -> str:
    return f"{_quantize(wei_to_gwei(amount_wei), GWEI_DECIMALS):f}"


def format_usd(amount: Decimal) -> str:
    return f"{_quantize(amount, USD_DECIMALS):f}"


def compute_cost(
    gas_limit: int,
    fee_data: FeeData,
    native_price_usd: Decimal,
    native_decimals: int = DEFAULT_NATIVE_DECIMALS,
) -> GasEstimate:
    """
    Composes gas limit x gas price -> native cost -> USD cost.

    The gas price is the legacy price when the network reports one, else the
    EIP-1559 max fee. Raises InsufficientFeeData when neither is available,
    before any multiplication happens.
    """
    fee_model = fee_data.resolve()
    gas_price = fee_model.price

    total_cost_wei = gas_limit * gas_price
    price_usd = Decimal(native_price_usd)
    cost_usd = wei_to_native(total_cost_wei) * price_usd

    return GasEstimate(
        gas_limit=gas_limit,
        gas_price=gas_price,
        fee_model=fee_model.kind,
        total_cost_native=format_native(total_cost_wei, native_decimals),
        total_cost_usd=format_usd(cost_usd),
        native_price_usd=price_usd,
        gas_price_gwei=format_gwei(gas_price),
        max_fee_per_gas=fee_data.max_fee_per_gas,
        max_priority_fee_per_gas=fee_data.max_priority_fee_per_gas,
    )


def recommend(current_gas_price: int, block_number: int) -> RecommendedFee:
    """Flat +10% markup over the observed price. 1 wei stays 1 wei."""
    recommended = current_gas_price * RECOMMENDED_MARKUP_NUMERATOR // RECOMMENDED_MARKUP_DENOMINATOR
    return RecommendedFee(
        current_price=current_gas_price,
        recommended_price=recommended,
        current_gwei=format_gwei(current_gas_price),
        recommended_gwei=format_gwei(recommended),
        block_number=block_number,
    )
