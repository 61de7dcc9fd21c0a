# /gasfee/core/models.py
# Request-scoped records of the estimation pipeline. None of them is
# persisted or cached; each is created fresh per estimation call.
from decimal import Decimal
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field, field_serializer

from gasfee.core.errors import InsufficientFeeData


class TransactionRequest(BaseModel):
    """A draft transaction whose gas cost should be estimated."""
    to: str
    value: Optional[str] = "0"          # decimal amount in native-asset units
    data: Optional[str] = None          # hex payload; None or "0x" means a plain transfer
    from_address: Optional[str] = Field(default=None, alias="from")

    class Config:
        populate_by_name = True
        frozen = True


class LegacyFee(BaseModel):
    kind: Literal["legacy"] = "legacy"
    gas_price: int

    class Config:
        frozen = True

    @property
    def price(self) -> int:
        return self.gas_price


class Eip1559Fee(BaseModel):
    kind: Literal["eip1559"] = "eip1559"
    max_fee_per_gas: int
    max_priority_fee_per_gas: Optional[int] = None

    class Config:
        frozen = True

    @property
    def price(self) -> int:
        return self.max_fee_per_gas


FeeModel = Union[LegacyFee, Eip1559Fee]


class FeeData(BaseModel):
    """
    Raw fee fields reported by the network. A legacy node fills only
    ``gas_price``; an EIP-1559 node fills the max-fee pair and usually
    ``gas_price`` as well.
    """
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    class Config:
        frozen = True

    def resolve(self) -> FeeModel:
        """Picks the price to charge: the legacy price wins when present."""
        if self.gas_price is not None:
            return LegacyFee(gas_price=self.gas_price)
        if self.max_fee_per_gas is not None:
            return Eip1559Fee(
                max_fee_per_gas=self.max_fee_per_gas,
                max_priority_fee_per_gas=self.max_priority_fee_per_gas,
            )
        raise InsufficientFeeData("Network reported neither a gas price nor a max fee per gas")


class GasEstimate(BaseModel):
    gas_limit: int = Field(serialization_alias="gasLimit")
    gas_price: int = Field(serialization_alias="gasPrice")
    fee_model: Literal["legacy", "eip1559"] = Field(serialization_alias="feeModel")
    total_cost_native: str = Field(serialization_alias="totalCostETH")
    total_cost_usd: str = Field(serialization_alias="totalCostUSD")
    native_price_usd: Decimal = Field(serialization_alias="ethPriceUSD")
    gas_price_gwei: str = Field(serialization_alias="gasPriceGwei")
    max_fee_per_gas: Optional[int] = Field(default=None, serialization_alias="maxFeePerGas")
    max_priority_fee_per_gas: Optional[int] = Field(default=None, serialization_alias="maxPriorityFeePerGas")

    class Config:
        frozen = True

    # wei amounts overflow JavaScript numbers, so they travel as strings
    @field_serializer("gas_limit", "gas_price", "max_fee_per_gas", "max_priority_fee_per_gas", when_used="json")
    def _wei_as_str(self, value: Optional[int]) -> Optional[str]:
        return None if value is None else str(value)


class RecommendedFee(BaseModel):
    current_price: int = Field(serialization_alias="current")
    recommended_price: int = Field(serialization_alias="recommended")
    current_gwei: str = Field(serialization_alias="currentGwei")
    recommended_gwei: str = Field(serialization_alias="recommendedGwei")
    block_number: int = Field(serialization_alias="blockNumber")

    class Config:
        frozen = True

    @field_serializer("current_price", "recommended_price", when_used="json")
    def _wei_as_str(self, value: int) -> str:
        return str(value)


class GasPrediction(BaseModel):
    """Estimate plus recommendation, as produced by one user action."""
    estimate: GasEstimate
    recommended: RecommendedFee

    class Config:
        frozen = True
