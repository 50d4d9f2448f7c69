"""HTTP transport for live ingestion and balance queries.

Routes:
    POST /liveEvent            submit one JSON event (Authorization required)
    GET  /userEvents/{user_id} current balance for a user
    GET  /health               liveness plus database reachability
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from infrastructure.logging.logger import get_logger
from system.revenue_aggregator.domain.errors import StorageError
from system.revenue_aggregator.domain.models import RejectionReason
from system.revenue_aggregator.engine import AggregationEngine

REJECTION_STATUS: dict[RejectionReason, int] = {
    RejectionReason.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    RejectionReason.MALFORMED: status.HTTP_400_BAD_REQUEST,
    RejectionReason.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

logger = get_logger("RevenueAggregatorAPI")


def create_app(engine: AggregationEngine, db: Any | None = None) -> FastAPI:
    """Build the FastAPI application around an engine.

    Args:
        engine: Engine handling submissions and lookups.
        db: Optional client exposing ``ping()``, reported by ``/health``.
    """
    app = FastAPI(title="Revenue Aggregator", version="0.1.0")
    app.state.engine = engine

    @app.post("/liveEvent")
    async def live_event(request: Request) -> JSONResponse:
        body = await request.body()
        auth_header = request.headers.get("authorization")
        # The engine blocks on the database; keep it off the event loop.
        result = await run_in_threadpool(engine.submit_event, body, auth_header)

        if not result.accepted:
            return JSONResponse(
                status_code=REJECTION_STATUS[result.reason],
                content={"status": "rejected", "error": result.reason.value},
            )
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "accepted", "applied": result.applied},
        )

    @app.get("/userEvents/{user_id}")
    def user_events(user_id: str) -> JSONResponse:
        try:
            balance = engine.get_balance(user_id)
        except StorageError as e:
            logger.error(f"Error querying balance for {user_id}: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )
        if balance is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "User not found"},
            )
        return JSONResponse(status_code=status.HTTP_200_OK, content=balance.to_payload())

    @app.get("/health")
    def health() -> dict[str, Any]:
        database = bool(db.ping()) if db is not None else True
        return {"status": "ok" if database else "degraded", "database": database}

    return app
