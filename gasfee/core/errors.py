# /gasfee/core/errors.py
# Failure kinds surfaced by the estimation pipeline. Every one of them is
# scoped to a single request; none is fatal to the process.


class GasEstimationError(Exception):
    """Base class. ``kind`` is the stable name reported to callers."""
    kind = "GasEstimationError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class InvalidAddress(GasEstimationError):
    kind = "InvalidAddress"


class InvalidAmount(GasEstimationError):
    kind = "InvalidAmount"


class NetworkUnavailable(GasEstimationError):
    kind = "NetworkUnavailable"


class EstimationFailed(GasEstimationError):
    """The node answered but rejected the simulated call."""
    kind = "EstimationFailed"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InsufficientFeeData(GasEstimationError):
    kind = "InsufficientFeeData"
