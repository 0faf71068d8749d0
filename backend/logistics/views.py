import logging

import requests
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from dispatch.result import OUTCOME_MESSAGES, DispatchOutcome
from dispatch.state_machines.order_state import OrderStateException, transition_order
from push.gateway import PushGatewayError

from . import services
from .models import Order, Store
from .serializers import (
    NewOrderNotificationSerializer,
    OrderSerializer,
    OrderStatusNotificationSerializer,
    OrderTransitionSerializer,
    StoreSerializer,
)

logger = logging.getLogger(__name__)


def _payload(request):
    # A JSON body that is not an object (list, string) is treated as empty.
    return request.data if hasattr(request.data, 'get') else {}


class StoreViewSet(viewsets.ModelViewSet):
    queryset = Store.objects.all()
    serializer_class = StoreSerializer
    permission_classes = [permissions.AllowAny]


class OrderViewSet(viewsets.ModelViewSet):
    """
    Handles Order creation and status management.
    Creating an order schedules the courier notification for after the commit,
    so a failed insert never dispatches and a failed dispatch never rolls back the insert.
    """
    queryset = Order.objects.select_related('store').order_by('-created_at')
    serializer_class = OrderSerializer
    permission_classes = [permissions.AllowAny]

    def perform_create(self, serializer):
        order = serializer.save()
        transaction.on_commit(lambda: services.notify_new_order(order))

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        """
        Move the order along its lifecycle, e.g. {"status": "confirmed"}.
        """
        order = self.get_object()
        body = OrderTransitionSerializer(data=_payload(request))
        body.is_valid(raise_exception=True)
        new_status = body.validated_data['status']

        domain_order = order.to_domain()
        try:
            transition_order(domain_order, new_status)
        except OrderStateException as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        order.status = domain_order.status.value
        order.save(update_fields=['status', 'updated_at'])

        transaction.on_commit(lambda: self._notify_customer(order, new_status))
        return Response(OrderSerializer(order).data)

    @staticmethod
    def _notify_customer(order, new_status):
        try:
            services.notify_order_status(order, new_status)
        except (PushGatewayError, requests.RequestException) as exc:
            logger.error("Status push for order %s failed: %s", order.pk, exc)


class NewOrderNotificationView(APIView):
    """
    POST /api/v1/notifications/new-order
    Called when a new order is placed to notify nearby online couriers.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        data = _payload(request)
        order_id = data.get('orderId')
        if isinstance(order_id, str):
            order_id = order_id.strip()
        if not order_id:
            return Response({"error": OUTCOME_MESSAGES[DispatchOutcome.INVALID_REQUEST]},
                            status=status.HTTP_400_BAD_REQUEST)

        body = NewOrderNotificationSerializer(data=data)
        body.is_valid(raise_exception=True)
        fields = body.validated_data

        try:
            dispatcher = services.get_dispatcher()
        except Exception:
            logger.exception("Could not build dispatcher for order %s", fields['orderId'])
            return Response({"error": OUTCOME_MESSAGES[DispatchOutcome.FAILED]},
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        result = dispatcher.dispatch(
            fields['orderId'],
            store_name=fields.get('restaurantName'),
            store_lat=fields.get('restaurantLat'),
            store_lng=fields.get('restaurantLng'),
            order_total=fields.get('total'),
        )

        if result.outcome == DispatchOutcome.SENT:
            return Response({
                "message": result.message,
                "notified": result.notified,
                "totalDriversOnline": result.total_online,
            })

        if result.outcome == DispatchOutcome.INVALID_REQUEST:
            return Response({"error": result.message}, status=status.HTTP_400_BAD_REQUEST)

        if result.is_failure:
            logger.error("New-order notification for %s failed: %s", result.order_id, result.error)
            return Response({"error": result.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        # No one online, no one nearby, or already dispatched: a normal outcome.
        return Response({"message": result.message, "notified": 0})


class OrderStatusNotificationView(APIView):
    """
    POST /api/v1/notifications/order-status
    Sends the customer a push when their order changes status.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        data = _payload(request)
        if not data.get('orderId') or not data.get('status'):
            return Response({"error": "orderId and status are required"}, status=status.HTTP_400_BAD_REQUEST)

        body = OrderStatusNotificationSerializer(data=data)
        body.is_valid(raise_exception=True)
        fields = body.validated_data

        try:
            order = Order.objects.select_related('store').get(pk=fields['orderId'])
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            return Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)

        try:
            sent = services.notify_order_status(order, fields['status'], fields.get('restaurantName'))
        except (PushGatewayError, requests.RequestException) as exc:
            logger.error("Push notification error for order %s: %s", order.pk, exc)
            return Response({"error": "Failed to send notification"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if not sent:
            return Response({"message": "User has no push token", "sent": False})

        return Response({"message": "Notification sent", "sent": True, "status": fields['status']})
