from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional


class AuthRequest(BaseModel):
    # Any JSON value is accepted; only a string counts as a wallet
    wallet: Optional[Any] = None

    @field_validator("wallet", mode="before")
    @classmethod
    def wallet_string_only(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class AuthResult(BaseModel):
    auth: bool


class BlacklistOut(BaseModel):
    ips: List[str]
    wallets: List[str]


class EntryLists(BaseModel):
    ips: List[str] = Field(default_factory=list)
    wallets: List[str] = Field(default_factory=list)

    @field_validator("ips", "wallets", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class BlacklistUpdateIn(EntryLists):
    mode: str = Field("", description="full | add | remove")

    @field_validator("mode", mode="before")
    @classmethod
    def null_mode_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class RemotePayload(EntryLists):
    """Body expected from a remote blacklist source."""


class BlacklistCountsOut(BaseModel):
    success: bool = True
    ips_count: int
    wallets_count: int


class InitFromUrlIn(BaseModel):
    # Missing or null url is left to requests to reject (500, like any bad source)
    url: str = Field("", description="Endpoint returning {\"ips\": [...], \"wallets\": [...]}")

    @field_validator("url", mode="before")
    @classmethod
    def null_url_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v
