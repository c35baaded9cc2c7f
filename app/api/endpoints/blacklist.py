from fastapi import APIRouter, Depends

from app.core.deps import get_blacklist_service, json_body
from app.schemas.blacklist import (
    BlacklistCountsOut,
    BlacklistOut,
    BlacklistUpdateIn,
    InitFromUrlIn,
)
from app.services.blacklist import BlacklistService

router = APIRouter()


@router.get("", response_model=BlacklistOut)
def list_blacklist(svc: BlacklistService = Depends(get_blacklist_service)):
    ips, wallets = svc.snapshot()
    return {"ips": ips, "wallets": wallets}


@router.post("", response_model=BlacklistCountsOut)
def update_blacklist(
    item: BlacklistUpdateIn = Depends(json_body(BlacklistUpdateIn)),
    svc: BlacklistService = Depends(get_blacklist_service),
):
    ips_count, wallets_count = svc.apply_update(item.mode, item.ips, item.wallets)
    return {"success": True, "ips_count": ips_count, "wallets_count": wallets_count}


@router.post("/init", response_model=BlacklistCountsOut)
def init_blacklist(
    item: InitFromUrlIn = Depends(json_body(InitFromUrlIn)),
    svc: BlacklistService = Depends(get_blacklist_service),
):
    """
    Replace the whole blacklist with the JSON served at item.url.
    On any fetch/decode failure the current blacklist is kept (500 via RemoteSourceError).
    """
    ips_count, wallets_count = svc.load_from_url(item.url)
    return {"success": True, "ips_count": ips_count, "wallets_count": wallets_count}
