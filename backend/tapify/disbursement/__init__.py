from tapify.core.config import settings
from tapify.disbursement.base import DisbursementProvider
from tapify.disbursement.http import HttpDisbursementProvider


def get_provider() -> DisbursementProvider:
    return HttpDisbursementProvider(
        settings.DISBURSEMENT_PROVIDER_URL,
        settings.DISBURSEMENT_PROVIDER_TOKEN,
    )
