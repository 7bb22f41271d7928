from __future__ import annotations

from fastapi import APIRouter, Depends

from roster.core.config import Settings
from roster.core.dependencies import get_gateway, get_roster, get_settings
from roster.services.employee_gateway import EmployeeGateway
from roster.services.roster_cache import RosterCache

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(
    gateway: EmployeeGateway = Depends(get_gateway),  # noqa: B008
    roster: RosterCache = Depends(get_roster),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
):
    services: dict[str, str] = {}

    try:
        if gateway.initialized:
            ok = await gateway.check_connection()
            services["employee_api"] = "ok" if ok else "error"
        else:
            services["employee_api"] = "not_configured"
    except Exception:
        services["employee_api"] = "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
        "roster": {"loaded": roster.loaded, "count": len(roster)},
    }


@router.get("/ready")
async def readiness_probe(roster: RosterCache = Depends(get_roster)):  # noqa: B008
    return {"ready": roster.loaded}
