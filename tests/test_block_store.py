"""Unit tests for the in-memory block set store."""

import threading
import time

import pytest

from app.core.block_store import BlockSetStore, MutationMode, ReadWriteLock


class TestMembership:
    """Tests for is_blocked."""

    def test_empty_store_blocks_nothing(self, store):
        assert not store.is_blocked("1.2.3.4", "0xABC")

    def test_add_then_remove_ip(self, store):
        store.mutate(MutationMode.ADD, ["1.2.3.4"], [])
        assert store.is_blocked("1.2.3.4", "")

        store.mutate(MutationMode.REMOVE, ["1.2.3.4"], [])
        assert not store.is_blocked("1.2.3.4", "")

    def test_blocked_wallet_blocks_any_ip(self, store):
        store.mutate("add", [], ["0xDEAD"])
        assert store.is_blocked("9.9.9.9", "0xDEAD")

    def test_empty_wallet_never_matches(self):
        """An empty wallet must not match even if "" was loaded as an entry."""
        store = BlockSetStore(wallets=[""])
        assert not store.is_blocked("9.9.9.9", "")
        assert not store.is_blocked("9.9.9.9", None)

    def test_missing_ip_is_not_an_error(self, store):
        store.mutate("add", ["1.2.3.4"], [])
        assert not store.is_blocked(None, None)
        assert not store.is_blocked("", None)


class TestMutations:
    """Tests for full / add / remove."""

    def test_full_replaces_previous_contents(self, store):
        store.mutate("add", ["1.1.1.1", "2.2.2.2"], ["0x1"])

        counts = store.mutate(MutationMode.FULL, ["3.3.3.3", "3.3.3.3"], [])

        assert counts == (1, 0)
        ips, wallets = store.list()
        assert ips == ["3.3.3.3"]
        assert wallets == []

    def test_full_deduplicates(self, store):
        store.mutate("full", ["a", "b", "a"], ["w", "w"])
        ips, wallets = store.list()
        assert sorted(ips) == ["a", "b"]
        assert wallets == ["w"]

    def test_add_is_idempotent(self, store):
        first = store.mutate("add", ["a", "b"], ["w"])
        second = store.mutate("add", ["a", "b"], ["w"])
        assert first == second == (2, 1)

    def test_remove_is_idempotent_and_ignores_absent(self, store):
        store.mutate("add", ["a", "b"], ["w"])
        assert store.mutate("remove", ["a", "zzz"], ["nope"]) == (1, 1)
        assert store.mutate("remove", ["a", "zzz"], ["nope"]) == (1, 1)

    def test_unknown_mode_leaves_store_untouched(self, store):
        store.mutate("add", ["a"], ["w"])
        assert store.mutate("purge", ["b"], []) == (1, 1)
        assert store.list() == (["a"], ["w"])

    def test_replace_from_remote_is_full_replace(self, store):
        store.mutate("add", ["old"], ["old-w"])
        assert store.replace_from_remote(["new"], []) == (1, 0)
        assert store.list() == (["new"], [])

    def test_none_inputs_treated_as_empty(self, store):
        assert store.mutate("add", None, None) == (0, 0)

    def test_list_returns_copies(self, store):
        store.mutate("add", ["a"], [])
        ips, _ = store.list()
        ips.append("b")
        assert store.counts() == (1, 0)


class TestReadWriteLock:
    """Tests for the shared/exclusive discipline."""

    def test_readers_share(self):
        lock = ReadWriteLock()
        barrier = threading.Barrier(2, timeout=2)
        errors = []

        def reader():
            with lock.shared():
                try:
                    barrier.wait()
                except threading.BrokenBarrierError as e:
                    errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
        assert errors == []

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.shared():
                entered.set()

        with lock.exclusive():
            t = threading.Thread(target=reader)
            t.start()
            assert not entered.wait(0.2)
        assert entered.wait(2)
        t.join(2)

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def writer():
            with lock.exclusive():
                entered.set()

        with lock.shared():
            t = threading.Thread(target=writer)
            t.start()
            assert not entered.wait(0.2)
        assert entered.wait(2)
        t.join(2)

    def test_interrupted_writer_releases_parked_readers(self):
        lock = ReadWriteLock()
        real_wait = lock._cond.wait
        interrupt = threading.Event()
        reader_in = threading.Event()
        writer_errors = []

        def wait(timeout=None):
            if threading.current_thread().name == "writer" and interrupt.is_set():
                raise RuntimeError("interrupted")
            return real_wait(timeout)

        lock._cond.wait = wait

        def writer():
            try:
                with lock.exclusive():
                    pass
            except RuntimeError as e:
                writer_errors.append(e)

        def reader():
            with lock.shared():
                reader_in.set()

        with lock.shared():
            w = threading.Thread(target=writer, name="writer")
            w.start()
            time.sleep(0.1)
            r = threading.Thread(target=reader)
            r.start()
            # parked behind the waiting writer
            assert not reader_in.wait(0.2)

            with lock._cond:
                interrupt.set()
                lock._cond.notify_all()
            w.join(2)

            assert len(writer_errors) == 1
            assert reader_in.wait(2)
        r.join(2)


class TestConcurrentFullReplace:
    """Readers never see a torn ip/wallet pair during full replaces."""

    GENERATIONS = {
        "a": (["ip-a1", "ip-a2"], ["w-a"]),
        "b": (["ip-b1"], ["w-b1", "w-b2"]),
    }

    @staticmethod
    def _generation(ips, wallets):
        ip_gen = {ip.split("-")[1][0] for ip in ips}
        wallet_gen = {w.split("-")[1][0] for w in wallets}
        return ip_gen, wallet_gen

    def test_no_torn_snapshot(self):
        store = BlockSetStore(*self.GENERATIONS["a"])
        stop = threading.Event()
        torn = []

        def writer():
            i = 0
            while not stop.is_set():
                store.mutate(MutationMode.FULL, *self.GENERATIONS["ab"[i % 2]])
                i += 1

        def reader():
            while not stop.is_set():
                ip_gen, wallet_gen = self._generation(*store.list())
                if len(ip_gen) != 1 or ip_gen != wallet_gen:
                    torn.append((ip_gen, wallet_gen))
                if store.counts() not in {(2, 1), (1, 2)}:
                    torn.append(store.counts())

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        time.sleep(0.5)
        stop.set()
        for t in threads:
            t.join(5)

        assert torn == []

    def test_membership_never_mixes_generations(self):
        """ip of one generation + wallet of the other is always blocked unless the pair is torn."""
        store = BlockSetStore(["ip-a"], ["w-a"])
        stop = threading.Event()
        torn = []

        def writer():
            i = 0
            while not stop.is_set():
                gen = "ab"[i % 2]
                store.mutate(MutationMode.FULL, [f"ip-{gen}"], [f"w-{gen}"])
                i += 1

        def reader(ip, wallet):
            while not stop.is_set():
                if not store.is_blocked(ip, wallet):
                    torn.append((ip, wallet))

        readers = [
            threading.Thread(target=reader, args=pair)
            for pair in [("ip-a", "w-b"), ("ip-b", "w-a")] * 2
        ]
        threads = [threading.Thread(target=writer)] + readers
        for t in threads:
            t.start()
        time.sleep(0.5)
        stop.set()
        for t in threads:
            t.join(5)

        assert torn == []

    @pytest.mark.parametrize("mode", ["add", "remove"])
    def test_concurrent_mutations_do_not_lose_updates(self, mode):
        store = BlockSetStore(ips=[f"ip-{n}" for n in range(200)] if mode == "remove" else ())

        def worker(start):
            for n in range(start, 200, 4):
                store.mutate(mode, [f"ip-{n}"], [])

        threads = [threading.Thread(target=worker, args=(s,)) for s in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        expected = 200 if mode == "add" else 0
        assert store.counts() == (expected, 0)
