# app/core/deps.py
import json
from typing import Type, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.core.block_store import BlockSetStore
from app.core.config import Settings
from app.services.blacklist import BlacklistService

T = TypeVar("T", bound=BaseModel)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> BlockSetStore:
    return request.app.state.store


def get_blacklist_service(
    store: BlockSetStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BlacklistService:
    return BlacklistService(store, timeout=settings.remote_timeout)


def json_body(model: Type[T]):
    """
    Parse the raw request body as JSON into ``model`` whatever the Content-Type.

    Routers in front of the gate often forward auth sub-requests without a
    JSON Content-Type. A JSON ``null`` body counts as ``{}``.
    Failures raise RequestValidationError, which the handlers map to 400.
    """
    async def _parse(request: Request) -> T:
        raw = await request.body()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            pos = getattr(e, "pos", getattr(e, "start", 0))
            reason = getattr(e, "msg", None) or str(e)
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body", pos),
                "msg": "JSON decode error",
                "input": {},
                "ctx": {"error": reason},
            }])
        if data is None:
            data = {}
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
            )

    return _parse
