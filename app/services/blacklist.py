from typing import List, Optional, Sequence, Tuple

import requests
from pydantic import ValidationError as PydanticValidationError

from app.core.block_store import BlockSetStore, MutationMode
from app.core.exceptions import RemoteSourceError
from app.schemas.blacklist import RemotePayload
from app.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)


class BlacklistService:
    def __init__(self, store: BlockSetStore, timeout: float = 10.0):
        self.store = store
        self.timeout = timeout

    # ---------------- Gate ----------------
    def check(self, ip: Optional[str], wallet: Optional[str] = None) -> bool:
        blocked = self.store.is_blocked(ip, wallet)
        logger.info("auth check ip=%s wallet=%s blocked=%s", ip, wallet or "", blocked)
        return blocked

    # ---------------- Management ----------------
    def snapshot(self) -> Tuple[List[str], List[str]]:
        return self.store.list()

    def apply_update(self, mode: str, ips: Sequence[str], wallets: Sequence[str]) -> Tuple[int, int]:
        if mode not in {m.value for m in MutationMode}:
            # Lenient on purpose: reported as success with unchanged counts
            logger.warning("ignoring blacklist update with unknown mode %r", mode)
        ips_count, wallets_count = self.store.mutate(mode, ips, wallets)
        logger.info(
            "blacklist %s: %d ips, %d wallets in request -> %d ips, %d wallets",
            mode, len(ips), len(wallets), ips_count, wallets_count,
        )
        return ips_count, wallets_count

    # ---------------- Remote source ----------------
    def fetch_remote(self, url: str) -> Tuple[List[str], List[str]]:
        """
        Download {"ips": [...], "wallets": [...]} from url.
        Any transport, status or decode failure is raised as RemoteSourceError.
        """
        try:
            response = requests.get(url, timeout=self.timeout, headers={"Accept": "application/json"})
            response.raise_for_status()
            payload = RemotePayload.model_validate(response.json())
        except requests.RequestException as e:
            # JSON decode errors from response.json() land here too
            raise RemoteSourceError(str(e)) from e
        except PydanticValidationError as e:
            raise RemoteSourceError(f"Invalid blacklist payload from {url}: {e}") from e
        return payload.ips, payload.wallets

    @log_execution_time(level="INFO")
    def load_from_url(self, url: str) -> Tuple[int, int]:
        logger.info("loading blacklist from %s", url)
        try:
            ips, wallets = self.fetch_remote(url)
        except RemoteSourceError as e:
            logger.error("blacklist load from %s failed: %s", url, e.message)
            raise
        # network call is done; only the swap holds the write lock
        ips_count, wallets_count = self.store.replace_from_remote(ips, wallets)
        logger.info("blacklist loaded from %s: %d ips, %d wallets", url, ips_count, wallets_count)
        return ips_count, wallets_count
