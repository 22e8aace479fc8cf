# storefront/domain/statuses.py
"""Zamknieta lista statusow zamowienia i platnosci."""
from enum import Enum

from storefront.domain.errors import InvalidStatus


def title_case(raw: str) -> str:
    # "cash on  DELIVERY" -> "Cash On Delivery"
    return " ".join(word.capitalize() for word in raw.strip().lower().split())


class OrderStatus(str, Enum):
    NOT_PROCESSED = "Not Processed"
    PROCESSING = "Processing"
    DISPATCHED = "Dispatched"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, raw: str) -> "OrderStatus":
        try:
            return cls(title_case(raw or ""))
        except ValueError:
            raise InvalidStatus("orderStatus", raw, [s.value for s in cls]) from None

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_move_to(self, target: "OrderStatus") -> bool:
        if target == self:
            return True
        if self.is_terminal:
            return False
        if target == OrderStatus.CANCELLED:
            return True
        return _FLOW.index(target) > _FLOW.index(self)


_FLOW = [
    OrderStatus.NOT_PROCESSED,
    OrderStatus.PROCESSING,
    OrderStatus.DISPATCHED,
    OrderStatus.DELIVERED,
]


class PaymentStatus(str, Enum):
    PROCESSING = "Processing"
    CASH_ON_DELIVERY = "Cash On Delivery"
    PAYMENT_SUCCESSFUL = "Payment Successful"
    PAYMENT_FAILED = "Payment Failed"
    DECLINED = "Declined"

    @classmethod
    def parse(cls, raw: str) -> "PaymentStatus":
        try:
            return cls(title_case(raw or ""))
        except ValueError:
            raise InvalidStatus("paymentStatus", raw, [s.value for s in cls]) from None
