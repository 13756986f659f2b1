"""Health check endpoint for load balancers and monitoring."""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_store
from app.services.store import WorkoutStore

router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check. Optionally includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(store: WorkoutStore = Depends(get_store)):
    """Readiness: app + document store round trip."""
    try:
        await store.query_templates("__readiness__")
        return {"status": "ok", "store": type(store).__name__}
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "store": str(e)},
        )
