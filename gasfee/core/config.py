# /gasfee/core/config.py
from pydantic_settings import BaseSettings
from pydantic import SecretStr

# Settings are read from the environment (and an optional .env file).
# Nothing here is consulted by the estimation core directly: the API layer
# builds connections and oracles from these values and passes them in.
class Settings(BaseSettings):
    # RPC endpoint used to build the network connection handle
    ETH_RPC_URL: SecretStr | None = None
    RPC_TIMEOUT_SECONDS: float = 10.0

    # Price feed (CoinGecko simple price API)
    PRICE_FEED_URL: str = "https://api.coingecko.com/api/v3/simple/price"
    PRICE_FEED_TIMEOUT_SECONDS: float = 10.0
    NATIVE_ASSET_ID: str = "ethereum"
    NATIVE_ASSET_SYMBOL: str = "ETH"

    # Display
    NATIVE_DISPLAY_DECIMALS: int = 6

    # Operational Settings
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: SecretStr | None = None
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_TOKEN: str | None = None

    @property
    def rpc_url(self) -> str | None:
        """Plain-text RPC URL, or ``None`` when it is not configured."""
        if self.ETH_RPC_URL is None:
            return None
        return self.ETH_RPC_URL.get_secret_value()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

try:
    settings = Settings()
except Exception as e:
    # The logger depends on settings, so report the failure without it.
    print("FAILED_TO_LOAD_SETTINGS", e)
    raise SystemExit(1)
