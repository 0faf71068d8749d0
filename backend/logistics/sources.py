"""
Courier source backed by the CourierProfile table.

Pages are read with keyset pagination on the primary key, so each page is one
small query and concurrent inserts never shift rows between pages.
"""
import logging

from django.db import DatabaseError

from drivers.models import CourierAvailability
from drivers.sources import CourierSourceError

from .models import CourierProfile

logger = logging.getLogger(__name__)


class OrmCourierSource:
    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else CourierProfile.objects.all()

    def online_with_push_token(self):
        return (
            self.queryset
            .filter(is_online=True, push_token__isnull=False)
            .exclude(push_token='')
            .order_by('pk')
        )

    def iter_online_batches(self, page_size=500):
        base = self.online_with_push_token()
        last_pk = None

        while True:
            page = base if last_pk is None else base.filter(pk__gt=last_pk)
            try:
                rows = list(
                    page.values_list(
                        'pk', 'push_token', 'current_latitude', 'current_longitude', 'updated_at'
                    )[:page_size]
                )
            except DatabaseError as exc:
                logger.error("Courier read failed after pk=%s: %s", last_pk, exc)
                raise CourierSourceError("Failed to fetch drivers") from exc

            if not rows:
                return

            yield [
                CourierAvailability.new(
                    courier_id=pk,
                    is_online=True,
                    push_token=token,
                    lat=lat,
                    lon=lng,
                    last_seen_at=updated_at,
                )
                for pk, token, lat, lng, updated_at in rows
            ]

            if len(rows) < page_size:
                return
            last_pk = rows[-1][0]
