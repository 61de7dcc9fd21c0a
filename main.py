# /main.py
# Serves the gas fee estimation API.
import asyncio
import uvicorn

from gasfee.core.config import settings
from gasfee.core.config_validator import validate as validate_config
from gasfee.core.logger import configure_logging, get_logger
from gasfee.core.api import app

async def main():
    configure_logging()
    log = get_logger("GasFee.System")
    validate_config()
    log.info("GAS_FEE_SERVICE_STARTING", host=settings.API_HOST, port=settings.API_PORT)

    server = uvicorn.Server(uvicorn.Config(app, host=settings.API_HOST, port=settings.API_PORT, log_level=settings.LOG_LEVEL.lower()))
    await server.serve()

    log.warning("GAS_FEE_SERVICE_SHUTDOWN_COMPLETE")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
