# Bootstraps the FastAPI app: error handlers, logging and metrics
# middlewares, and the payout engine routers under /api.

import os

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from tapify.core.db import Base, engine
from tapify.core.errors import PayoutEngineError
from tapify.core.logging import APILoggingMiddleware
from tapify.core.metrics import MetricsMiddleware

import tapify.models  # noqa: F401  registers tables on Base.metadata

from tapify.api.admin_commission import router as admin_commission_router
from tapify.api.admin_payouts import router as admin_payouts_router
from tapify.api.payout import router as payout_router
from tapify.api.retailer_earnings import router as retailer_earnings_router


API_PREFIX = "/api"

# Local runs without Alembic still get a schema.
if os.getenv("SKIP_MIGRATIONS") != "1":
    Base.metadata.create_all(bind=engine)

app = FastAPI(title="Tapify Payouts")


@app.exception_handler(PayoutEngineError)
def handle_payout_engine_error(_request: Request, exc: PayoutEngineError):
    response = JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_payload()))
    response.headers["X-Error-Code"] = exc.code
    return response


@app.exception_handler(RequestValidationError)
def handle_request_validation(_request: Request, exc: RequestValidationError):
    response = JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "code": "invalid_request",
            "detail": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        },
    )
    response.headers["X-Error-Code"] = "invalid_request"
    return response


app.add_middleware(APILoggingMiddleware)
app.add_middleware(MetricsMiddleware)

api_router = APIRouter(prefix=API_PREFIX)
for router in (
    admin_payouts_router,
    payout_router,
    admin_commission_router,
    retailer_earnings_router,
):
    api_router.include_router(router)
app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/ping")
def ping():
    return {"message": "pong"}


_origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]
if _origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
