from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from market.payment_service import main as mock
from market.services import payment_client
from market.services.payment_client import HttpPaymentGateway


@pytest.fixture
def mock_client(monkeypatch):
    monkeypatch.setattr(mock, "CHARGES", {})
    client = TestClient(mock.app)

    def route_to_mock(url, json=None, headers=None, timeout=None):
        return client.post("/charges", json=json, headers=headers)

    monkeypatch.setattr(payment_client.requests, "post", route_to_mock)
    return client


def test_gateway_against_mock_approves_once_per_order(mock_client):
    gateway = HttpPaymentGateway(base_url="http://payments")

    first = gateway.charge(11, Decimal("120.00"), "credit_card")
    repeat = gateway.charge(11, Decimal("120.00"), "credit_card")

    assert first.success is True
    assert first.reference.startswith("mock_11_")
    assert repeat.reference == first.reference


def test_gateway_against_mock_declines(mock_client):
    result = HttpPaymentGateway(base_url="http://payments").charge(12, Decimal("120.00"), "expired_card")

    assert result.success is False
    assert result.message == "expired_card was declined"
