from rest_framework import serializers

from orders.models import Order as DomainOrder
from orders.models import OrderStatus, OrderValidationError

from .models import Order, Store


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = '__all__'


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = '__all__'
        read_only_fields = ['id', 'status', 'payment_status', 'total', 'created_at', 'updated_at']

    def _current(self, attrs, name, default=None):
        # On a partial update, fields absent from the body keep their stored value.
        if name in attrs:
            return attrs[name]
        if self.instance is not None:
            return getattr(self.instance, name)
        return default

    def validate(self, attrs):
        # Reuse the domain factory so the API enforces the same creation invariants:
        # non-negative money, total = subtotal + delivery_fee - discount, coordinate ranges.
        store = self._current(attrs, 'store')
        try:
            domain_order = DomainOrder.new(
                customer_id=self._current(attrs, 'customer_id'),
                store_id=str(store.pk) if store else None,
                subtotal=self._current(attrs, 'subtotal'),
                delivery_fee=self._current(attrs, 'delivery_fee'),
                discount=self._current(attrs, 'discount', 0),
                delivery_latitude=self._current(attrs, 'delivery_lat'),
                delivery_longitude=self._current(attrs, 'delivery_lng'),
                payment_method=self._current(attrs, 'payment_method', Order.PaymentMethod.CASH),
            )
        except (OrderValidationError, TypeError, ValueError) as exc:
            raise serializers.ValidationError(str(exc))

        attrs['total'] = domain_order.total
        return attrs


class NewOrderNotificationSerializer(serializers.Serializer):
    """
    Body of POST /notifications/new-order. Field names follow the mobile clients (camelCase).
    """
    orderId = serializers.CharField()
    restaurantName = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    restaurantLat = serializers.FloatField(required=False, allow_null=True)
    restaurantLng = serializers.FloatField(required=False, allow_null=True)
    total = serializers.FloatField(required=False, allow_null=True)


class OrderStatusNotificationSerializer(serializers.Serializer):
    orderId = serializers.CharField()
    status = serializers.ChoiceField(choices=[status.value for status in OrderStatus])
    restaurantName = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)


class OrderTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in OrderStatus])
