# app/core/block_store.py
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple


class MutationMode(str, Enum):
    FULL = "full"
    ADD = "add"
    REMOVE = "remove"


class ReadWriteLock:
    """
    Shared/exclusive lock built on a single Condition.
    Waiting writers block new readers, so a busy /auth path can't starve a replace.
    """
    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def shared(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            except BaseException:
                # readers parked behind this writer must re-check
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class BlockSetStore:
    """
    In-memory store for blocked IPs and wallets.
    Both sets sit behind one ReadWriteLock so a full replace swaps them as a pair.
    """
    def __init__(self, ips: Iterable[str] = (), wallets: Iterable[str] = ()):
        self._lock = ReadWriteLock()
        self._ips: Set[str] = set(ips)
        self._wallets: Set[str] = set(wallets)

    def is_blocked(self, ip: Optional[str], wallet: Optional[str] = None) -> bool:
        with self._lock.shared():
            if ip is not None and ip in self._ips:
                return True
            return bool(wallet) and wallet in self._wallets

    def list(self) -> Tuple[List[str], List[str]]:
        with self._lock.shared():
            return list(self._ips), list(self._wallets)

    def counts(self) -> Tuple[int, int]:
        with self._lock.shared():
            return len(self._ips), len(self._wallets)

    def mutate(self, mode, ips: Iterable[str] = (), wallets: Iterable[str] = ()) -> Tuple[int, int]:
        """
        Apply one mutation under exclusive access and return (ip_count, wallet_count).

        ``mode`` may be a MutationMode or its string value. Anything else leaves
        both sets untouched and still reports the current sizes.
        """
        ips = list(ips or ())
        wallets = list(wallets or ())
        try:
            mode = MutationMode(mode)
        except ValueError:
            mode = None

        with self._lock.exclusive():
            if mode is MutationMode.FULL:
                # build first, then rebind both together
                new_ips, new_wallets = set(ips), set(wallets)
                self._ips, self._wallets = new_ips, new_wallets
            elif mode is MutationMode.ADD:
                self._ips.update(ips)
                self._wallets.update(wallets)
            elif mode is MutationMode.REMOVE:
                self._ips.difference_update(ips)
                self._wallets.difference_update(wallets)
            return len(self._ips), len(self._wallets)

    def replace_from_remote(self, ips: Iterable[str], wallets: Iterable[str]) -> Tuple[int, int]:
        return self.mutate(MutationMode.FULL, ips, wallets)
