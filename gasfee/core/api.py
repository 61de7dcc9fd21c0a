# /gasfee/core/api.py
import uuid
from fastapi import FastAPI, HTTPException, Header, Depends, Request
from fastapi.responses import JSONResponse
from structlog.contextvars import clear_contextvars

from gasfee.adapters.connection import Web3Connection
from gasfee.adapters.oracle import CoinGeckoPriceOracle
from gasfee.core.config import settings
from gasfee.core.errors import (
    GasEstimationError,
    InvalidAddress,
    InvalidAmount,
    EstimationFailed,
    InsufficientFeeData,
    NetworkUnavailable,
)
from gasfee.core.gas_estimator import GasEstimator
from gasfee.core.logger import get_logger, bind_request_context
from gasfee.core.models import TransactionRequest

app = FastAPI(title="gasfee")
log = get_logger(__name__)

ERROR_STATUS = {
    InvalidAddress: 400,
    InvalidAmount: 400,
    EstimationFailed: 422,
    InsufficientFeeData: 502,
    NetworkUnavailable: 503,
}

def verify(authorization: str | None = Header(None)):
    token = settings.API_TOKEN
    if token and authorization != f"Bearer {token}":
        raise HTTPException(status_code=401, detail="Unauthorized")

async def get_estimator():
    """Builds a fresh connection and oracle per request; the connection is closed once the response is sent."""
    if not settings.rpc_url:
        raise HTTPException(status_code=503, detail="RPC endpoint not configured")
    connection = Web3Connection.from_url(settings.rpc_url, settings.RPC_TIMEOUT_SECONDS)
    try:
        yield GasEstimator(connection, CoinGeckoPriceOracle(), settings.NATIVE_DISPLAY_DECIMALS)
    finally:
        await connection.close()

@app.middleware("http")
async def request_context(request: Request, call_next):
    clear_contextvars()
    bind_request_context(request.headers.get("x-request-id") or uuid.uuid4().hex)
    return await call_next(request)

@app.exception_handler(GasEstimationError)
async def estimation_error_handler(request: Request, exc: GasEstimationError):
    status = ERROR_STATUS.get(type(exc), 500)
    log.warning("GAS_API_REQUEST_FAILED", path=request.url.path, status=status, kind=exc.kind)
    return JSONResponse(status_code=status, content={"error": exc.kind, "message": exc.message})

@app.get("/healthz")
async def healthz():
    return {"status": "ok", "rpc_configured": bool(settings.rpc_url)}

@app.post("/gas/estimate")
async def estimate(request: TransactionRequest, auth: None = Depends(verify), estimator: GasEstimator = Depends(get_estimator)):
    result = await estimator.estimate_transaction_fee(request)
    return result.model_dump(mode="json", by_alias=True)

@app.get("/gas/recommended")
async def recommended(auth: None = Depends(verify), estimator: GasEstimator = Depends(get_estimator)):
    result = await estimator.get_recommended_gas_price()
    return result.model_dump(mode="json", by_alias=True)

@app.post("/gas/predict")
async def predict(request: TransactionRequest, auth: None = Depends(verify), estimator: GasEstimator = Depends(get_estimator)):
    result = await estimator.predict(request)
    return result.model_dump(mode="json", by_alias=True)
