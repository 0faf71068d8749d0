import uuid

from django.db import models

from orders import models as domain


class Store(models.Model):
    """
    Represents a restaurant or shop that orders are picked up from.
    Coordinates are optional: without them dispatch skips the radius filter.
    """
    name = models.CharField(max_length=255)
    address_text = models.TextField(blank=True)

    lat = models.FloatField(blank=True, null=True)
    lng = models.FloatField(blank=True, null=True)

    is_open = models.BooleanField(default=True)

    def __str__(self):
        return self.name


class Order(models.Model):
    """
    Central model for the marketplace workflow.
    Tracks lifecycle: pending -> confirmed -> preparing -> ready -> picked_up -> delivered (or cancelled).
    Status changes go through dispatch.state_machines.order_state, never straight to the field.
    """
    class Status(models.TextChoices):
        PENDING = domain.OrderStatus.PENDING.value, "Pending"
        CONFIRMED = domain.OrderStatus.CONFIRMED.value, "Confirmed"
        PREPARING = domain.OrderStatus.PREPARING.value, "Preparing"
        READY = domain.OrderStatus.READY.value, "Ready for Pickup"
        PICKED_UP = domain.OrderStatus.PICKED_UP.value, "Picked Up"
        DELIVERED = domain.OrderStatus.DELIVERED.value, "Delivered"
        CANCELLED = domain.OrderStatus.CANCELLED.value, "Cancelled"

    class PaymentMethod(models.TextChoices):
        CASH = domain.PaymentMethod.CASH.value, "Cash on Delivery"
        CARD = domain.PaymentMethod.CARD.value, "Card"
        WALLET = domain.PaymentMethod.WALLET.value, "Wallet"

    class PaymentStatus(models.TextChoices):
        PENDING = domain.PaymentStatus.PENDING.value, "Pending"
        PAID = domain.PaymentStatus.PAID.value, "Paid"
        FAILED = domain.PaymentStatus.FAILED.value, "Failed"
        REFUNDED = domain.PaymentStatus.REFUNDED.value, "Refunded"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Customers live in the auth service; we only keep the reference.
    customer_id = models.CharField(max_length=64)
    store = models.ForeignKey(Store, on_delete=models.PROTECT, related_name='orders')

    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)

    delivery_address = models.TextField()
    # Coordinates where the courier needs to go
    delivery_lat = models.FloatField()
    delivery_lng = models.FloatField()

    # Device of the customer who placed the order, for status updates
    customer_push_token = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order #{self.id} - {self.status}"

    def to_domain(self) -> domain.Order:
        return domain.Order(
            id=str(self.id),
            customer_id=self.customer_id,
            store_id=str(self.store_id),
            subtotal=self.subtotal,
            delivery_fee=self.delivery_fee,
            discount=self.discount,
            total=self.total,
            delivery_latitude=self.delivery_lat,
            delivery_longitude=self.delivery_lng,
            payment_method=domain.PaymentMethod(self.payment_method),
            payment_status=domain.PaymentStatus(self.payment_status),
            status=domain.OrderStatus(self.status),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class CourierProfile(models.Model):
    """
    Availability record kept up to date by the courier app.
    The dispatch core only reads it.
    """
    display_name = models.CharField(max_length=255, blank=True)
    is_online = models.BooleanField(default=False)

    # Registered device address; null until the app registers for push
    push_token = models.CharField(max_length=255, blank=True, null=True)

    # Last reported position; null until the app reports one
    current_latitude = models.FloatField(blank=True, null=True)
    current_longitude = models.FloatField(blank=True, null=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['is_online'])]

    def __str__(self):
        state = "online" if self.is_online else "offline"
        return f"{self.display_name or self.pk} ({state})"
