import pytest

from storefront.domain.errors import InvalidStatus
from storefront.domain.statuses import OrderStatus, PaymentStatus, title_case


class TestNormalization:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("not processed", "Not Processed"),
            ("  CASH   on delivery ", "Cash On Delivery"),
            ("Delivered", "Delivered"),
        ],
    )
    def test_title_case(self, raw, expected):
        assert title_case(raw) == expected

    def test_parse_order_status(self):
        assert OrderStatus.parse("DISPATCHED") is OrderStatus.DISPATCHED

    def test_parse_payment_status(self):
        assert PaymentStatus.parse("payment failed") is PaymentStatus.PAYMENT_FAILED

    def test_unknown_values_rejected(self):
        with pytest.raises(InvalidStatus) as exc:
            OrderStatus.parse("In Orbit")

        assert exc.value.details["field"] == "orderStatus"
        assert "Processing" in exc.value.details["allowed"]

    def test_empty_value_rejected(self):
        with pytest.raises(InvalidStatus):
            PaymentStatus.parse("")


class TestTransitions:
    def test_forward_moves(self):
        assert OrderStatus.NOT_PROCESSED.can_move_to(OrderStatus.PROCESSING)
        assert OrderStatus.PROCESSING.can_move_to(OrderStatus.DELIVERED)

    def test_backward_moves_rejected(self):
        assert not OrderStatus.DISPATCHED.can_move_to(OrderStatus.PROCESSING)

    @pytest.mark.parametrize(
        "status", [OrderStatus.NOT_PROCESSED, OrderStatus.PROCESSING, OrderStatus.DISPATCHED]
    )
    def test_cancel_from_non_terminal(self, status):
        assert status.can_move_to(OrderStatus.CANCELLED)

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states(self, status):
        assert status.is_terminal
        assert not status.can_move_to(OrderStatus.PROCESSING)
        assert status.can_move_to(status)
