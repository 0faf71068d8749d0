from django.urls import path, include
from rest_framework.routers import DefaultRouter
from logistics.views import (
    NewOrderNotificationView,
    OrderStatusNotificationView,
    OrderViewSet,
    StoreViewSet,
)

router = DefaultRouter()
router.register(r'stores', StoreViewSet)
router.register(r'orders', OrderViewSet, basename='order')

urlpatterns = [
    path('api/v1/', include(router.urls)),
    path('api/v1/notifications/new-order', NewOrderNotificationView.as_view(), name='notify-new-order'),
    path('api/v1/notifications/order-status', OrderStatusNotificationView.as_view(), name='notify-order-status'),
]
