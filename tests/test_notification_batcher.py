import math

import pytest
import requests

from conftest import RecordingGateway
from push.batcher import chunk_messages, send_in_batches
from push.messages import build_new_order_message


def make_messages(count):
    return [build_new_order_message(f"tok-{i:03d}", "order-1", "Pollería", 20) for i in range(count)]


@pytest.mark.parametrize("count,size", [(0, 100), (1, 100), (99, 100), (100, 100), (101, 100), (250, 100), (7, 3), (5, 1)])
def test_chunks_are_complete_ordered_and_bounded(count, size):
    items = list(range(count))

    chunks = chunk_messages(items, size)

    assert len(chunks) == math.ceil(count / size)
    assert all(1 <= len(chunk) <= size for chunk in chunks)
    assert [item for chunk in chunks for item in chunk] == items


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        chunk_messages([1, 2, 3], 0)


def test_250_messages_go_out_as_100_100_50(gateway):
    report = send_in_batches(gateway, make_messages(250), batch_size=100)

    assert [len(batch) for batch in gateway.batches] == [100, 100, 50]
    assert report.sent == 250
    assert report.batches == 3
    assert report.failed_batches == 0


@pytest.mark.parametrize("max_workers", [1, 4])
def test_failed_batch_does_not_stop_the_others(max_workers):
    """
    The second batch (tok-100..tok-199) is rejected; batches 1 and 3 still count.
    """
    gateway = RecordingGateway(fail_tokens={"tok-150"})

    report = send_in_batches(gateway, make_messages(250), batch_size=100, max_workers=max_workers)

    assert len(gateway.batches) == 3
    assert report.sent == 150
    assert report.failed_batches == 1


def test_transport_errors_are_absorbed():
    class TimingOutGateway:
        def __init__(self):
            self.calls = 0

        def send(self, messages):
            self.calls += 1
            if self.calls == 1:
                raise requests.Timeout("gateway too slow")
            return None

    gateway = TimingOutGateway()

    report = send_in_batches(gateway, make_messages(120), batch_size=100)

    assert gateway.calls == 2
    assert report.sent == 20
    assert report.failed_batches == 1


def test_nothing_to_send_makes_no_calls(gateway):
    report = send_in_batches(gateway, [], batch_size=100, max_workers=4)

    assert gateway.batches == []
    assert report.sent == 0
    assert report.batches == 0


def test_every_batch_failing_reports_zero(gateway):
    gateway.fail_tokens = {f"tok-{i:03d}" for i in range(30)}

    report = send_in_batches(gateway, make_messages(30), batch_size=10, max_workers=3)

    assert report.sent == 0
    assert report.failed_batches == 3
