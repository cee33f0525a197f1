"""
Kubernetes-style probes: liveness, readiness (store reachable), startup and a
detailed report. Plain JSON, not wrapped in the loan response envelope.
"""
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import settings
from database import check_database
from logger import logger

router = APIRouter(prefix="/api/health", tags=["health"])

HEALTHY = "Healthy"
UNHEALTHY = "Unhealthy"


async def _check_self() -> None:
    return None


# name -> coroutine that raises when the dependency is unavailable
HEALTH_CHECKS: dict[str, Callable[[], Awaitable[None]]] = {
    "database": lambda: check_database(),
    "self": _check_self,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def run_checks() -> tuple[str, float, list[dict[str, Any]]]:
    """Run every registered check; returns (overall status, total ms, entries)."""
    entries: list[dict[str, Any]] = []
    started = time.perf_counter()
    for name, check in HEALTH_CHECKS.items():
        t0 = time.perf_counter()
        entry: dict[str, Any] = {"name": name, "status": HEALTHY}
        try:
            await check()
        except Exception as e:
            logger.error("[Health] Check %s failed: %s", name, e, exc_info=True)
            entry["status"] = UNHEALTHY
            entry["description"] = f"{name} check failed"
            entry["exception"] = str(e)
        entry["duration"] = round((time.perf_counter() - t0) * 1000, 3)
        entries.append(entry)
    total = round((time.perf_counter() - started) * 1000, 3)
    overall = HEALTHY if all(e["status"] == HEALTHY for e in entries) else UNHEALTHY
    return overall, total, entries


@router.get("/live")
async def live():
    return {
        "status": HEALTHY,
        "timestamp": _now(),
        "service": settings.app_name,
        "check": "liveness",
    }


@router.get("/ready")
async def ready():
    overall, _, entries = await run_checks()
    body = {
        "status": overall,
        "timestamp": _now(),
        "service": settings.app_name,
        "check": "readiness",
        "checks": entries,
    }
    return JSONResponse(status_code=200 if overall == HEALTHY else 503, content=body)


@router.get("/startup")
async def startup():
    return {
        "status": "Started",
        "timestamp": _now(),
        "service": settings.app_name,
        "check": "startup",
        "version": settings.app_version,
    }


@router.get("")
async def health():
    overall, total, entries = await run_checks()
    body = {
        "status": overall,
        "timestamp": _now(),
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "totalDuration": total,
        "checks": entries,
    }
    return JSONResponse(status_code=200 if overall == HEALTHY else 503, content=body)
