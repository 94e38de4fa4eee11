from __future__ import annotations

import os
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from exetel.auth import Authorization


@pytest.fixture
def clean_env(monkeypatch):
    """Clean environment fixture to isolate tests."""
    for key in list(os.environ):
        if key.startswith("EXETEL_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def login_response_data():
    """Successful postLogin payload."""
    return {
        "tokenType": "Bearer",
        "expiresIn": 3600,
        "accessToken": "abc",
        "refreshToken": "xyz",
        "persistLogin": False,
    }


@pytest.fixture
def mock_successful_login_response(login_response_data):
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.json.return_value = login_response_data
    return mock_response


@pytest.fixture
def issued_at():
    return datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def authorization(issued_at):
    return Authorization(issued_at=issued_at, token="abc", expires_in=3600, refresh_token="xyz")


@pytest.fixture
def service_record():
    """A broadband record as returned by /v1/service, including a field the model does not know."""
    return {
        "id": 1234567,
        "description": "NBN 100/20 Unlimited",
        "monthlyCharge": "$79.95",
        "contractStartDate": "5 Jan 2024",
        "contractEndDate": "5 Jan 2025",
        "currentContract": 42,
        "billingCycleProgressPercentage": 37,
        "inContract": True,
        "paymentVia": "Credit Card",
        "paymentExpiry": "12/27",
        "planChange": False,
        "serviceNumber": "0299998888",
        "serviceType": "NBN",
        "nextBillingCycleStart": "5 Feb 24",
        "speedTier": {"down": 100, "up": 20},
    }


@pytest.fixture
def services_payload(service_record):
    return {
        "broadband": {"data": [service_record]},
        "mobile": {"data": []},
        "phone": {"data": []},
        "voip": {"data": []},
    }
