from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.deps import get_blacklist_service, get_settings, json_body
from app.core.config import Settings
from app.schemas.blacklist import AuthRequest, AuthResult
from app.services.blacklist import BlacklistService

router = APIRouter()


@router.post(
    "",
    response_model=AuthResult,
    responses={403: {"model": AuthResult, "description": "IP or wallet is blocked"}},
)
def auth(
    request: Request,
    body: AuthRequest = Depends(json_body(AuthRequest)),
    svc: BlacklistService = Depends(get_blacklist_service),
    settings: Settings = Depends(get_settings),
):
    """Called by the upstream router before forwarding a request."""
    ip = request.headers.get(settings.client_ip_header, "")
    if svc.check(ip, body.wallet):
        return JSONResponse(status_code=403, content={"auth": False})
    return {"auth": True}
