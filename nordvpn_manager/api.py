"""HTTP surface for the NordVPN manager.

Serve through the application factory, e.g.
``uvicorn --factory nordvpn_manager.api:create_app``. Settings are read when
the factory runs, not when this module is imported.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.responses import JSONResponse

from ._action_coordinator import ActionCoordinator
from ._vpn_config import VPNManagerConfig, build_config
from ._vpn_errors import MappingError, UnsupportedIntentError
from ._vpn_models import parse_intent

router = APIRouter()


def _coordinator(request: Request) -> ActionCoordinator:
    return request.app.state.coordinator


@router.post("/action")
async def run_action(
    request: Request,
    payload: dict[str, Any] = Body(default_factory=dict),
):
    """
    Run one action against the VPN client:
    - type: login | disconnect | connect
    - region: required for connect
    Mapping errors return 400; client and launch errors return 200 with an error payload.
    """
    region = payload.get("region")
    try:
        intent = parse_intent(payload.get("type"), region if isinstance(region, str) else None)
    except UnsupportedIntentError:
        return JSONResponse({"error": "Invalid command"}, status_code=400)
    except MappingError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    config: VPNManagerConfig = request.app.state.config
    result = await _coordinator(request).dispatch(intent, config.auth_token)
    status_code = 400 if result.code == MappingError.code else 200
    return JSONResponse(result.to_mapping(), status_code=status_code)


@router.get("/status")
async def get_status(request: Request):
    result = await _coordinator(request).query_status()
    return result.to_mapping()


@router.get("/regions")
async def list_regions(request: Request):
    return {"regions": list(_coordinator(request).catalog)}


def create_app(
    config: VPNManagerConfig | None = None,
    coordinator: ActionCoordinator | None = None,
) -> FastAPI:
    """Build the ASGI application.

    ``config`` defaults to :func:`build_config` over the process environment;
    ``coordinator`` defaults to one built from ``config``.
    """

    config = config or build_config()
    application = FastAPI(title="NordVPN Manager", version="0.1.0")
    application.state.config = config
    application.state.coordinator = coordinator or config.build_coordinator()
    application.include_router(router)
    return application
