import pytest

from conftest import RecordingGateway, courier_north_of
from dispatch import dispatcher as dispatcher_module
from dispatch.dispatcher import Dispatcher
from dispatch.ledger import DispatchLedger
from dispatch.result import DispatchOutcome, DispatchResult
from dispatch.state_machines.order_state import transition_order
from drivers.models import CourierAvailability
from drivers.policy import DispatchPolicy
from drivers.sources import CourierSourceError, InMemoryCourierSource
from orders.models import Order, OrderStatus


class FailingSource:
    """Courier source whose data store is down (optionally after some pages)."""
    def __init__(self, good_pages=()):
        self.good_pages = list(good_pages)
        self.calls = 0

    def iter_online_batches(self, page_size=500):
        self.calls += 1
        for page in self.good_pages:
            yield page
        raise CourierSourceError("connection refused")


class RecordingSource(InMemoryCourierSource):
    def __init__(self, couriers=()):
        super().__init__(couriers)
        self.page_sizes = []

    def iter_online_batches(self, page_size=500):
        self.page_sizes.append(page_size)
        return super().iter_online_batches(page_size)


def make_dispatcher(couriers=(), gateway=None, **policy):
    return Dispatcher(
        courier_source=RecordingSource(couriers),
        gateway=gateway or RecordingGateway(),
        policy=DispatchPolicy(**policy),
    )


def test_no_couriers_online(gateway):
    """
    Scenario 1: nobody online -> notified 0, explanatory message, no gateway traffic.
    """
    dispatcher = make_dispatcher([CourierAvailability.new("off", False, "tok")], gateway)

    result = dispatcher.dispatch("order-1", "Pollería", -12.0464, -77.0428, 25)

    assert result.outcome == DispatchOutcome.NO_COURIERS_ONLINE
    assert result.message == "No online drivers available"
    assert result.notified == 0
    assert gateway.batches == []


def test_online_without_push_token_counts_as_offline(gateway):
    dispatcher = make_dispatcher([CourierAvailability.new("mute", True, None)], gateway)

    result = dispatcher.dispatch("order-1")

    assert result.outcome == DispatchOutcome.NO_COURIERS_ONLINE


def test_two_of_three_couriers_in_radius_are_notified(lima_store, gateway):
    """
    Scenario 2: couriers at 2, 8 and 15 km with a 10 km radius.
    """
    couriers = [
        courier_north_of(lima_store, 2, "c2"),
        courier_north_of(lima_store, 8, "c8"),
        courier_north_of(lima_store, 15, "c15"),
    ]
    dispatcher = make_dispatcher(couriers, gateway, radius_km=10)

    result = dispatcher.dispatch("order-42", "Pollería La Brasa", *lima_store, 25.5)

    assert result.outcome == DispatchOutcome.SENT
    assert result.message == "Notifications sent"
    assert result.notified == 2
    assert result.eligible == 2
    assert result.total_online == 3
    assert result.without_location == 0

    assert [message.to for message in gateway.messages] == ["token-c2", "token-c8"]
    message = gateway.messages[0]
    assert message.body == "Pedido de Pollería La Brasa - S/25.50 de delivery"
    assert message.data == {"orderId": "order-42", "type": "new_order"}
    assert message.priority == "high"
    assert message.channel_id == "orders"


@pytest.mark.parametrize("max_workers", [1, 4])
def test_250_couriers_with_second_batch_failing(max_workers):
    """
    Scenario 3: 250 eligible couriers -> batches of 100, 100, 50; batch 2 fails -> 150 notified.
    """
    couriers = [CourierAvailability.new(f"c{i}", True, f"tok-{i:03d}") for i in range(250)]
    gateway = RecordingGateway(fail_tokens={"tok-100"})
    dispatcher = make_dispatcher(couriers, gateway, max_workers=max_workers)

    result = dispatcher.dispatch("order-250")

    assert sorted(len(batch) for batch in gateway.batches) == [50, 100, 100]
    assert result.outcome == DispatchOutcome.SENT
    assert result.notified == 150
    assert result.batches == 3
    assert result.failed_batches == 1
    assert result.total_online == 250


def test_courier_without_location_is_included(lima_store, gateway):
    """
    Scenario 4: online, push token, no coordinates, store location known -> included.
    """
    couriers = [
        CourierAvailability.new("no_gps", True, "tok-gps"),
        courier_north_of(lima_store, 40, "far"),
    ]
    dispatcher = make_dispatcher(couriers, gateway)

    result = dispatcher.dispatch("order-7", "Chifa", *lima_store, 10)

    assert result.notified == 1
    assert result.without_location == 1
    assert [message.to for message in gateway.messages] == ["tok-gps"]


def test_everyone_too_far(lima_store, gateway):
    dispatcher = make_dispatcher([courier_north_of(lima_store, 40, "far")], gateway)

    result = dispatcher.dispatch("order-8", "Chifa", *lima_store, 10)

    assert result.outcome == DispatchOutcome.NO_ELIGIBLE_NEARBY
    assert result.message == "No drivers with push tokens nearby"
    assert result.total_online == 1
    assert gateway.batches == []


@pytest.mark.parametrize("store_lat,store_lng", [(None, None), ("abc", 1), (500, 500)])
def test_unknown_store_location_notifies_all_online(lima_store, gateway, store_lat, store_lng):
    dispatcher = make_dispatcher([courier_north_of(lima_store, 400, "far")], gateway)

    result = dispatcher.dispatch("order-9", "Chifa", store_lat, store_lng)

    assert result.notified == 1


@pytest.mark.parametrize("order_id", ["", "   ", None, 123])
def test_invalid_order_id_never_touches_collaborators(gateway, order_id):
    source = FailingSource()
    dispatcher = Dispatcher(source, gateway)

    result = dispatcher.dispatch(order_id)

    assert result.outcome == DispatchOutcome.INVALID_REQUEST
    assert source.calls == 0
    assert gateway.batches == []


def test_courier_read_failure_is_a_result_not_an_exception(gateway):
    dispatcher = Dispatcher(FailingSource(), gateway)

    result = dispatcher.dispatch("order-10")

    assert result.outcome == DispatchOutcome.COURIER_READ_FAILED
    assert result.is_failure
    assert result.message == "Failed to fetch drivers"
    assert "connection refused" in result.error
    assert gateway.batches == []


def test_read_failure_mid_stream_sends_nothing(gateway):
    page = [CourierAvailability.new("c1", True, "tok-1")]
    dispatcher = Dispatcher(FailingSource(good_pages=[page]), gateway)

    result = dispatcher.dispatch("order-11")

    assert result.outcome == DispatchOutcome.COURIER_READ_FAILED
    assert gateway.batches == []


def test_unexpected_error_is_contained(monkeypatch, gateway):
    def explode(*args, **kwargs):
        raise RuntimeError("template broke")

    monkeypatch.setattr(dispatcher_module, "build_new_order_message", explode)
    dispatcher = make_dispatcher([CourierAvailability.new("c1", True, "tok")], gateway)

    result = dispatcher.dispatch("order-12")

    assert isinstance(result, DispatchResult)
    assert result.outcome == DispatchOutcome.FAILED
    assert result.message == "Internal server error"


def test_gateway_down_still_returns_sent_with_zero(gateway):
    gateway.fail_tokens = {"tok"}
    dispatcher = make_dispatcher([CourierAvailability.new("c1", True, "tok")], gateway)

    result = dispatcher.dispatch("order-13")

    assert result.outcome == DispatchOutcome.SENT
    assert result.notified == 0
    assert result.failed_batches == 1


def test_couriers_are_streamed_in_pages(lima_store, gateway):
    couriers = [courier_north_of(lima_store, 1, f"c{i}") for i in range(5)]
    source = RecordingSource(couriers)
    dispatcher = Dispatcher(source, gateway, policy=DispatchPolicy(courier_page_size=2))

    result = dispatcher.dispatch("order-14", "Chifa", *lima_store)

    assert source.page_sizes == [2]
    assert result.total_online == 5
    assert result.notified == 5


def test_same_order_is_dispatched_once(gateway):
    dispatcher = Dispatcher(
        InMemoryCourierSource([CourierAvailability.new("c1", True, "tok")]),
        gateway,
        ledger=DispatchLedger(ttl_seconds=600),
    )

    first = dispatcher.dispatch("order-15")
    second = dispatcher.dispatch("order-15")

    assert first.outcome == DispatchOutcome.SENT
    assert second.outcome == DispatchOutcome.ALREADY_DISPATCHED
    assert second.notified == 0
    assert len(gateway.batches) == 1


def test_nothing_sent_leaves_the_order_retryable(gateway):
    source = InMemoryCourierSource()
    dispatcher = Dispatcher(source, gateway, ledger=DispatchLedger(ttl_seconds=600))

    assert dispatcher.dispatch("order-16").outcome == DispatchOutcome.NO_COURIERS_ONLINE

    source.add(CourierAvailability.new("late", True, "tok-late"))

    assert dispatcher.dispatch("order-16").outcome == DispatchOutcome.SENT


def test_read_failure_releases_the_claim(gateway):
    ledger = DispatchLedger(ttl_seconds=600)
    dispatcher = Dispatcher(FailingSource(), gateway, ledger=ledger)

    dispatcher.dispatch("order-17")

    assert "order-17" not in ledger


def test_created_order_is_dispatched_only_while_pending(gateway):
    dispatcher = make_dispatcher([CourierAvailability.new("c1", True, "tok")], gateway)
    order = Order.new("cust", "store", "20", "5", -12.05, -77.04)

    result = dispatcher.dispatch_created_order(order, "Chifa")

    assert result.outcome == DispatchOutcome.SENT
    assert gateway.messages[0].body == "Pedido de Chifa - S/25.00 de delivery"
    assert gateway.messages[0].data["orderId"] == order.id

    transition_order(order, OrderStatus.CONFIRMED)
    again = dispatcher.dispatch_created_order(order, "Chifa")

    assert again.outcome == DispatchOutcome.NOT_PENDING
    assert len(gateway.batches) == 1


def test_policy_validation():
    with pytest.raises(ValueError):
        DispatchPolicy(gateway_batch_size=101).validate()
    with pytest.raises(ValueError):
        DispatchPolicy(radius_km=0).validate()
    with pytest.raises(ValueError):
        make_dispatcher(max_workers=0)
