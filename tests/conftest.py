import threading

import pytest

from drivers.models import CourierAvailability
from push.gateway import PushGatewayError

# Kilometres per degree of latitude on a 6371 km sphere.
KM_PER_DEGREE = 111.19492664455873


class RecordingGateway:
    """
    Fake push gateway. Records every batch it receives and rejects any batch
    that contains one of `fail_tokens`.
    """
    def __init__(self, fail_tokens=()):
        self.fail_tokens = set(fail_tokens)
        self.batches = []
        self._lock = threading.Lock()

    def send(self, messages):
        with self._lock:
            self.batches.append(list(messages))
        if any(message.to in self.fail_tokens for message in messages):
            raise PushGatewayError(500, "rejected")
        return {"data": [{"status": "ok"} for _ in messages]}

    @property
    def messages(self):
        return [message for batch in self.batches for message in batch]


def courier_north_of(store, km, courier_id, token=None, online=True):
    """Courier placed `km` kilometres due north of `store`."""
    lat, lon = store
    return CourierAvailability.new(
        courier_id,
        is_online=online,
        push_token=token if token is not None else f"token-{courier_id}",
        lat=lat + km / KM_PER_DEGREE,
        lon=lon,
    )


@pytest.fixture
def lima_store():
    return (-12.0464, -77.0428)


@pytest.fixture
def gateway():
    return RecordingGateway()
