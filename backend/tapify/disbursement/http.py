from __future__ import annotations

from typing import Any

import requests

from tapify.core.config import settings
from tapify.core.errors import (
    AlreadyProcessedError,
    NotFoundError,
    ProviderError,
)
from tapify.disbursement.base import DisbursementProvider


def _error_text(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").strip()
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or "")
    return ""


def _receipt(resp, job_id: int) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return body
    return {"success": True, "payoutJobId": job_id}


class HttpDisbursementProvider(DisbursementProvider):
    def __init__(self, url: str | None, token: str | None = None):
        self.url = url
        self.token = token

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def execute(self, job_id: int, *, timeout: float | None = None) -> dict[str, Any]:
        if not self.url:
            raise ProviderError(
                job_id,
                "Disbursement provider not configured",
                code="provider_not_configured",
            )
        timeout = timeout or settings.PAYOUT_TRIGGER_TIMEOUT_SECONDS
        try:
            resp = requests.post(
                self.url,
                json={"payoutJobId": job_id},
                headers=self._headers(),
                timeout=timeout,
            )
        except requests.exceptions.ConnectTimeout as exc:
            # Never reached the provider, so nothing was dispatched.
            raise ProviderError(job_id, f"Disbursement provider unreachable: {exc}") from exc
        except requests.exceptions.Timeout as exc:
            raise ProviderError(
                job_id,
                "Disbursement provider timed out; payout status unknown",
                unknown_outcome=True,
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise ProviderError(job_id, f"Disbursement provider request failed: {exc}") from exc

        if resp.status_code < 400:
            return _receipt(resp, job_id)

        detail = _error_text(resp)
        if resp.status_code == 404:
            raise NotFoundError(job_id)
        if resp.status_code == 409 or (resp.status_code == 400 and "already processed" in detail.lower()):
            raise AlreadyProcessedError(job_id)
        if resp.status_code in (401, 403):
            # The service's own credentials, not the caller's permissions.
            raise ProviderError(
                job_id,
                "Disbursement provider rejected credentials",
                provider_status=resp.status_code,
                code="provider_unauthorized",
            )
        raise ProviderError(
            job_id,
            detail or f"Disbursement provider failed with status {resp.status_code}",
            provider_status=resp.status_code,
        )
