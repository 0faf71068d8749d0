"""
Manual check against the real push gateway (not collected by pytest).

    PUSH_TEST_TOKEN="ExponentPushToken[...]" python tests/run_push_integration.py

Sends one new-order notification to the device behind PUSH_TEST_TOKEN through
the full dispatch pipeline, with the courier placed next to the store.
"""
import logging
import os

from dotenv import load_dotenv

from dispatch.dispatcher import Dispatcher
from drivers.models import CourierAvailability
from drivers.sources import InMemoryCourierSource
from push.gateway import PushGatewayClient


def main():
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    token = os.getenv("PUSH_TEST_TOKEN")
    if not token:
        raise SystemExit("Set PUSH_TEST_TOKEN to a device push token first.")

    store = (-12.0464, -77.0428)
    couriers = InMemoryCourierSource([
        CourierAvailability.new("integration", is_online=True, push_token=token, lat=store[0] + 0.01, lon=store[1]),
    ])

    dispatcher = Dispatcher(courier_source=couriers, gateway=PushGatewayClient())
    result = dispatcher.dispatch("integration-test", "Pollería de Prueba", store[0], store[1], 19.9)

    print(f"\n{result.message}: notified {result.notified} of {result.total_online} online")
    if result.failed_batches:
        print(f"{result.failed_batches} batch(es) rejected, see log above")


if __name__ == "__main__":
    main()
