# /gasfee/core/config_validator.py
# Run at startup to check the settings the service cannot work without.
from gasfee.core.config import settings
from gasfee.core.logger import log

def validate():
    log.info("--- CONFIG VALIDATION START ---")
    required_vars = ['ETH_RPC_URL', 'PRICE_FEED_URL', 'NATIVE_ASSET_ID']
    errors = []

    for var in required_vars:
        if not getattr(settings, var, None):
            errors.append(f"Missing required configuration: {var}")

    if settings.NATIVE_DISPLAY_DECIMALS < 0:
        errors.append("NATIVE_DISPLAY_DECIMALS must be >= 0")

    if errors:
        for error in errors:
            log.critical(error)
        raise ValueError("Service configuration is incomplete. Halting.")

    log.info("--- CONFIG VALIDATION PASSED ---")

if __name__ == "__main__":
    validate()
