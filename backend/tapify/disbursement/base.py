from __future__ import annotations

from typing import Any


class DisbursementProvider:
    """Executes one payout job on the provider side.

    Implementations return the provider's receipt body on success and
    raise a PayoutTriggerError subclass on every failure.
    """

    def execute(self, job_id: int, *, timeout: float | None = None) -> dict[str, Any]:
        raise NotImplementedError
