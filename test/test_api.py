from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from gasfee.adapters.connection import Web3Connection
from gasfee.adapters.mock import MockNetworkConnection, RevertingNetworkConnection, StaticPriceOracle
from gasfee.core.api import app, get_estimator
from gasfee.core.config import settings
from gasfee.core.errors import NetworkUnavailable
from gasfee.core.gas_estimator import GasEstimator
from gasfee.core.models import FeeData

RECIPIENT = "0x1111111111111111111111111111111111111111"
SENDER = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def use_network():
    """Routes the API to a scripted network for the duration of a test."""
    def _use(network):
        app.dependency_overrides[get_estimator] = lambda: GasEstimator(network, StaticPriceOracle(Decimal("3000")))
        return TestClient(app)

    yield _use
    app.dependency_overrides.clear()


def test_estimate_endpoint(use_network):
    client = use_network(MockNetworkConnection(fee_data=FeeData(gas_price=20 * 10**9)))
    r = client.post("/gas/estimate", json={"to": RECIPIENT, "value": "1", "data": "", "from": SENDER})

    assert r.status_code == 200
    body = r.json()
    assert body["gasLimit"] == "21000"
    assert body["gasPriceGwei"] == "20.00"
    assert body["totalCostETH"] == "0.000420"
    assert body["totalCostUSD"] == "1.26"


def test_recommended_endpoint(use_network):
    client = use_network(MockNetworkConnection(fee_data=FeeData(gas_price=100), block_number=7))
    r = client.get("/gas/recommended")

    assert r.status_code == 200
    assert r.json()["current"] == "100"
    assert r.json()["recommended"] == "110"
    assert r.json()["blockNumber"] == 7


def test_predict_endpoint(use_network):
    client = use_network(MockNetworkConnection())
    r = client.post("/gas/predict", json={"to": RECIPIENT, "from": SENDER})

    assert r.status_code == 200
    assert set(r.json()) == {"estimate", "recommended"}


@pytest.mark.parametrize(
    "network,payload,status,kind",
    [
        (MockNetworkConnection(), {"to": "0x1234"}, 400, "InvalidAddress"),
        (MockNetworkConnection(), {"to": RECIPIENT, "value": "-2"}, 400, "InvalidAmount"),
        (MockNetworkConnection(), {"to": RECIPIENT, "value": "1e100"}, 400, "InvalidAmount"),
        (RevertingNetworkConnection("execution reverted"), {"to": RECIPIENT, "data": "0xab"}, 422, "EstimationFailed"),
        (MockNetworkConnection(fee_data=FeeData()), {"to": RECIPIENT}, 502, "InsufficientFeeData"),
        (MockNetworkConnection(fee_data_error=NetworkUnavailable("down")), {"to": RECIPIENT}, 503, "NetworkUnavailable"),
    ],
)
def test_errors_map_to_status_codes(use_network, network, payload, status, kind):
    client = use_network(network)
    r = client.post("/gas/estimate", json=payload)

    assert r.status_code == status
    assert r.json()["error"] == kind


def test_token_required_when_configured(use_network, monkeypatch):
    monkeypatch.setattr(settings, "API_TOKEN", "tok")
    client = use_network(MockNetworkConnection())

    r = client.get("/gas/recommended")
    assert r.status_code == 401
    r = client.get("/gas/recommended", headers={"Authorization": "Bearer tok"})
    assert r.status_code == 200


def test_unconfigured_rpc_is_unavailable(monkeypatch):
    monkeypatch.setattr(settings, "ETH_RPC_URL", None)
    client = TestClient(app)

    assert client.get("/healthz").json() == {"status": "ok", "rpc_configured": False}
    assert client.get("/gas/recommended").status_code == 503


@pytest.mark.parametrize(
    "network,status",
    [
        (MockNetworkConnection(block_number=9), 200),
        (MockNetworkConnection(block_error=NetworkUnavailable("down")), 503),
    ],
)
def test_connection_closed_after_each_request(monkeypatch, network, status):
    """
    GIVEN the API builds its own connection from settings
    WHEN a request finishes, successfully or not
    THEN that connection has been closed
    """
    monkeypatch.setattr(settings, "ETH_RPC_URL", SecretStr("http://localhost:8545"))
    monkeypatch.setattr(Web3Connection, "from_url", classmethod(lambda cls, url, timeout: network))
    client = TestClient(app)

    r = client.get("/gas/recommended")

    assert r.status_code == status
    assert network.closed is True
