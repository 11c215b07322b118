"""Tests for the destination lock manager."""
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from mediaplacer.services.locks import DestinationLockManager


PATH = Path("/library/band/unknown-album/03_song.mp3")


class TestDestinationLockManager:
    """Tests for claim/release semantics."""

    def test_claim_once(self):
        locks = DestinationLockManager()
        assert locks.try_claim(PATH) is True
        assert locks.try_claim(PATH) is False

    def test_claims_are_per_path(self):
        locks = DestinationLockManager()
        assert locks.try_claim(PATH)
        assert locks.try_claim(PATH.with_name("04_other.mp3"))

    def test_release_allows_new_claim(self):
        locks = DestinationLockManager()
        locks.try_claim(PATH)
        locks.release(PATH)
        assert locks.try_claim(PATH) is True

    def test_release_unclaimed_is_noop(self):
        locks = DestinationLockManager()
        locks.release(PATH)
        assert locks.try_claim(PATH) is True

    def test_await_unclaimed_is_already_set(self):
        locks = DestinationLockManager()
        assert locks.await_release(PATH).is_set()

    def test_await_claimed_until_release(self):
        locks = DestinationLockManager()
        locks.try_claim(PATH)
        event = locks.await_release(PATH)
        assert not event.is_set()

        locks.release(PATH)

        assert event.is_set()

    def test_release_wakes_every_waiter(self):
        locks = DestinationLockManager()
        locks.try_claim(PATH)
        events = [locks.await_release(PATH) for _ in range(5)]

        locks.release(PATH)

        assert all(event.is_set() for event in events)

    def test_waiter_thread_wakes(self):
        locks = DestinationLockManager()
        locks.try_claim(PATH)
        woke = threading.Event()

        def waiter():
            locks.await_release(PATH).wait(timeout=5)
            woke.set()

        thread = threading.Thread(target=waiter)
        thread.start()
        locks.release(PATH)
        thread.join(timeout=5)

        assert woke.is_set()

    def test_single_winner_under_contention(self):
        locks = DestinationLockManager()
        barrier = threading.Barrier(16)

        def contend(_):
            barrier.wait()
            return locks.try_claim(PATH)

        with ThreadPoolExecutor(max_workers=16) as executor:
            results = list(executor.map(contend, range(16)))

        assert results.count(True) == 1
