import os

import pytest
import requests

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")

from tapify.core.errors import (  # noqa: E402
    AlreadyProcessedError,
    AuthorizationError,
    NotFoundError,
    ProviderError,
)
from tapify.disbursement.http import HttpDisbursementProvider  # noqa: E402


class Resp:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json body")
        return self._body


def _provider():
    return HttpDisbursementProvider("https://payouts.example.com/api/payout", "provider-token")


def test_execute_posts_job_id_with_bearer_and_timeout(monkeypatch):
    called = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        called.update(url=url, json=json, headers=headers, timeout=timeout)
        return Resp(200, {"success": True, "transfers": ["tr_1", "tr_2"]})

    monkeypatch.setattr("tapify.disbursement.http.requests.post", fake_post)
    receipt = _provider().execute(17, timeout=3)

    assert receipt == {"success": True, "transfers": ["tr_1", "tr_2"]}
    assert called["url"] == "https://payouts.example.com/api/payout"
    assert called["json"] == {"payoutJobId": 17}
    assert called["headers"]["Authorization"] == "Bearer provider-token"
    assert called["timeout"] == 3


def test_execute_without_body_still_returns_a_receipt(monkeypatch):
    monkeypatch.setattr("tapify.disbursement.http.requests.post", lambda *a, **k: Resp(204))
    assert _provider().execute(5) == {"success": True, "payoutJobId": 5}


@pytest.mark.parametrize(
    "status_code, body, expected",
    [
        (404, {"error": "Payout job not found"}, NotFoundError),
        (400, {"error": "Payout already processed"}, AlreadyProcessedError),
        (409, None, AlreadyProcessedError),
        (401, {"error": "Unauthorized"}, ProviderError),
        (500, {"error": "Transfer failed"}, ProviderError),
        (400, {"error": "Vendor bank account not connected"}, ProviderError),
    ],
)
def test_execute_maps_provider_status_codes(monkeypatch, status_code, body, expected):
    monkeypatch.setattr(
        "tapify.disbursement.http.requests.post",
        lambda *a, **k: Resp(status_code, body),
    )
    with pytest.raises(expected):
        _provider().execute(8)


@pytest.mark.parametrize("status_code", [401, 403])
def test_provider_credentials_rejection_is_a_provider_failure(monkeypatch, status_code):
    monkeypatch.setattr("tapify.disbursement.http.requests.post", lambda *a, **k: Resp(status_code))
    with pytest.raises(ProviderError) as excinfo:
        _provider().execute(8)
    assert not isinstance(excinfo.value, AuthorizationError)
    assert excinfo.value.code == "provider_unauthorized"
    assert excinfo.value.status_code == 502
    assert excinfo.value.details["provider_status"] == status_code
    assert excinfo.value.retryable is True


def test_provider_error_keeps_provider_message(monkeypatch):
    monkeypatch.setattr(
        "tapify.disbursement.http.requests.post",
        lambda *a, **k: Resp(502, text="bad gateway"),
    )
    with pytest.raises(ProviderError) as excinfo:
        _provider().execute(8)
    assert excinfo.value.message == "bad gateway"
    assert excinfo.value.provider_status == 502
    assert excinfo.value.retryable


def test_read_timeout_is_an_unknown_outcome(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ReadTimeout("read timed out")

    monkeypatch.setattr("tapify.disbursement.http.requests.post", fake_post)
    with pytest.raises(ProviderError) as excinfo:
        _provider().execute(8)
    assert excinfo.value.unknown_outcome is True
    assert excinfo.value.code == "unknown_outcome"
    assert excinfo.value.status_code == 504
    assert excinfo.value.retryable is False


def test_connect_timeout_never_reached_the_provider(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectTimeout("connect timed out")

    monkeypatch.setattr("tapify.disbursement.http.requests.post", fake_post)
    with pytest.raises(ProviderError) as excinfo:
        _provider().execute(8)
    assert excinfo.value.unknown_outcome is False
    assert excinfo.value.retryable is True


def test_unconfigured_provider_fails_without_dispatch(monkeypatch):
    def fake_post(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr("tapify.disbursement.http.requests.post", fake_post)
    with pytest.raises(ProviderError) as excinfo:
        HttpDisbursementProvider(None).execute(8)
    assert excinfo.value.code == "provider_not_configured"
