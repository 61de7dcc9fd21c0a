# /gasfee/adapters/oracle.py
from decimal import Decimal, InvalidOperation
import asyncio
import aiohttp

from gasfee.core.config import settings
from gasfee.core.logger import get_logger, PRICE_FEED_FAILURES

log = get_logger(__name__)

ZERO = Decimal("0")

class PriceOracle:
    async def get_native_asset_price_usd(self) -> Decimal:
        raise NotImplementedError

class CoinGeckoPriceOracle(PriceOracle):
    """
    USD price of the native asset from the CoinGecko simple price endpoint.
    Any failure degrades to a price of 0: a missing USD conversion must not
    hide the gas numbers.
    """
    def __init__(
        self,
        asset_id: str | None = None,
        url: str | None = None,
        timeout_seconds: float | None = None,
    ):
        self.asset_id = asset_id or settings.NATIVE_ASSET_ID
        self.url = url or settings.PRICE_FEED_URL
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.PRICE_FEED_TIMEOUT_SECONDS

    async def _fetch_payload(self):
        params = {"ids": self.asset_id, "vs_currencies": "usd"}
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)) as session:
            async with session.get(self.url, params=params) as response:
                response.raise_for_status()
                return await response.json()

    def _parse_price(self, payload) -> Decimal:
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected price payload: {payload!r}")
        entry = payload.get(self.asset_id)
        if not isinstance(entry, dict) or "usd" not in entry:
            raise KeyError(f"{self.asset_id}.usd")
        raw = entry["usd"]
        if isinstance(raw, bool):
            raise TypeError("usd price is a boolean")
        price = Decimal(str(raw))
        if not price.is_finite() or price < 0:
            raise ValueError(f"Invalid usd price: {raw!r}")
        return price

    async def get_native_asset_price_usd(self) -> Decimal:
        try:
            payload = await self._fetch_payload()
            price = self._parse_price(payload)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError, TypeError, KeyError, InvalidOperation) as e:
            PRICE_FEED_FAILURES.inc()
            log.warning("PRICE_FEED_UNAVAILABLE", asset=self.asset_id, error=str(e))
            return ZERO
        log.debug("PRICE_FEED_QUOTE", asset=self.asset_id, usd=str(price))
        return price
