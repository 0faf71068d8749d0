import os
import random
import time
from typing import List

import pandas as pd

from dispatch.dispatcher import Dispatcher
from dispatch.ledger import DispatchLedger
from drivers.models import CourierAvailability
from drivers.policy import DispatchPolicy
from drivers.sources import InMemoryCourierSource
from push.gateway import PushGatewayError

class MockPushGateway:
    """
    Stands in for the real gateway. Rejects a share of batches so the
    per-batch isolation shows up in the report.
    """
    def __init__(self, failure_rate=0.2, latency_seconds=0.05):
        self.failure_rate = failure_rate
        self.latency_seconds = latency_seconds
        self.calls = 0

    def send(self, messages):
        self.calls += 1
        time.sleep(self.latency_seconds)
        if random.random() < self.failure_rate:
            raise PushGatewayError(503, "simulated outage")
        return {"data": [{"status": "ok"} for _ in messages]}

def load_couriers(filepath="mock_couriers.csv") -> List[CourierAvailability]:
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = filepath if os.path.isabs(filepath) else os.path.join(base_dir, filepath)

    df = pd.read_csv(absolute_path)
    return [
        CourierAvailability.new(
            row["courier_id"],
            row["is_online"],
            row["push_token"] if isinstance(row["push_token"], str) else None,
            row["current_latitude"],
            row["current_longitude"],
        )
        for row in df.to_dict(orient="records")
    ]

def run_simulation(num_orders=10):
    print("=== STARTING NEW-ORDER DISPATCH SIMULATION ===")

    # 1. Load Data
    couriers = load_couriers()
    print(f"Loaded {len(couriers)} couriers.\n")

    # 2. Configure System
    policy = DispatchPolicy(radius_km=10.0, max_workers=4)
    gateway = MockPushGateway()
    dispatcher = Dispatcher(
        courier_source=InMemoryCourierSource(couriers),
        gateway=gateway,
        policy=policy,
        ledger=DispatchLedger(ttl_seconds=policy.dedupe_ttl_seconds),
    )

    # 3. Dispatch orders from stores scattered around the center
    stores = [
        ("Pollería La Brasa", -12.0464, -77.0428),
        ("Cevichería El Muelle", -12.1211, -77.0297),
        ("Chifa Lung Fung", -12.0931, -77.0465),
        ("Sin ubicación", None, None),
    ]

    totals = {"notified": 0, "eligible": 0}
    for order_index in range(num_orders):
        name, lat, lng = stores[order_index % len(stores)]
        order_id = f"ORD-{str(order_index + 1).zfill(5)}"

        start_time = time.time()
        result = dispatcher.dispatch(order_id, name, lat, lng, round(random.uniform(15, 120), 2))
        elapsed = time.time() - start_time

        totals["notified"] += result.notified
        totals["eligible"] += result.eligible
        print(
            f"[{result.outcome.value.upper()}] {order_id} from {name}: "
            f"{result.notified}/{result.eligible} notified, {result.total_online} online, "
            f"{result.without_location} without location, "
            f"{result.failed_batches}/{result.batches} batches failed ({elapsed:.2f}s)"
        )

    # 4. Retrying an order that already went out is a no-op
    retry = dispatcher.dispatch("ORD-00001", *stores[0])
    print(f"\nRetry of ORD-00001 -> {retry.outcome.value} ({retry.message})")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Messages acknowledged: {totals['notified']} / {totals['eligible']}")
    print(f"Gateway calls: {gateway.calls}")

if __name__ == "__main__":
    run_simulation()
