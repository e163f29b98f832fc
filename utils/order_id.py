"""
Order ID generation.

Uniqueness is best-effort within one process: timestamp ids are bumped so
they strictly increase even when two orders land in the same millisecond,
sequence ids use a per-generator counter.
"""

from datetime import datetime
from typing import Callable

from enums.order_id_format import OrderIdFormat, OrderDateFormat
from models.settings import StoreSettings


class OrderIdGenerator:

    def __init__(self, settings: StoreSettings, clock: Callable[[], datetime] = datetime.now):
        self.settings = settings
        self.clock = clock
        self._last_timestamp_ms = 0
        self._counter = settings.order_start_number

    def next_id(self) -> str:
        """
        Generate the next order id.

        Examples:
            TIMESTAMP: "ORD1760745600123"
            SEQUENCE:  "SHOP-001-20261018" (or "SHOP-001-18102026" with DDMMYYYY)
        """
        if self.settings.order_id_format == OrderIdFormat.SEQUENCE:
            return self._next_sequence_id()
        return self._next_timestamp_id()

    def _next_timestamp_id(self) -> str:
        timestamp_ms = int(self.clock().timestamp() * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms
        return f"ORD{timestamp_ms}"

    def _next_sequence_id(self) -> str:
        now = self.clock()
        if self.settings.order_date_format == OrderDateFormat.DDMMYYYY:
            date_str = now.strftime("%d%m%Y")
        else:
            date_str = now.strftime("%Y%m%d")

        order_num = str(self._counter).zfill(3)
        self._counter += 1
        return f"{self.settings.order_prefix}-{order_num}-{date_str}"
