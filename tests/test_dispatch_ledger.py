import threading

import pytest

from dispatch.ledger import DispatchLedger


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_claim_is_exclusive_until_expiry():
    clock = FakeClock()
    ledger = DispatchLedger(ttl_seconds=60, clock=clock)

    assert ledger.claim("order-1")
    assert not ledger.claim("order-1")
    assert "order-1" in ledger

    clock.now += 61

    assert "order-1" not in ledger
    assert ledger.claim("order-1")


def test_release_allows_a_new_claim():
    ledger = DispatchLedger(ttl_seconds=60, clock=FakeClock())

    ledger.claim("order-1")
    ledger.release("order-1")
    ledger.release("never-claimed")

    assert ledger.claim("order-1")
    assert len(ledger) == 1


def test_concurrent_claims_have_one_winner():
    ledger = DispatchLedger(ttl_seconds=60)
    wins = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        if ledger.claim("order-1"):
            wins.append(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(wins) == 1


def test_negative_ttl_rejected():
    with pytest.raises(ValueError):
        DispatchLedger(ttl_seconds=-1)
