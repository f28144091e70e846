"""
Testes do preço do carrinho: subtotal, comissão, taxa de entrega com fallback e pedido mínimo.
"""

from unittest.mock import Mock

import pytest

from frete.logic.cart_pricing import (
    FALLBACK_DELIVERY_FEE,
    CartItem,
    cart_subtotal,
    checkout_gate,
    fetch_delivery_fee,
    price_cart,
    price_checkout,
)
from frete.providers.api_client import ApiError

BUSINESS = {"latitude": 19.7708, "longitude": -104.3636, "minimum_order": 80}
ADDRESS = {"latitude": 19.7800, "longitude": -104.3636}


class TestCartSubtotal:
    def test_quantity_items(self) -> None:
        items = [
            CartItem("p1", "Tacos", unit_price=20, quantity=3),
            CartItem("p2", "Agua", unit_price=15),
        ]
        assert cart_subtotal(items) == 75

    def test_weight_item_ignores_quantity(self) -> None:
        item = CartItem("p3", "Queso", unit_price=120, quantity=5, weight_kg=0.5)
        assert item.line_total == 60

    def test_empty_cart(self) -> None:
        assert cart_subtotal([]) == 0


class TestPriceCart:
    def test_commission_and_total(self) -> None:
        pricing = price_cart(100, 23)
        assert pricing.commission == pytest.approx(15)
        assert pricing.total == pytest.approx(138)

    def test_commission_not_applied_to_delivery(self) -> None:
        a = price_cart(100, 0)
        b = price_cart(100, 40)
        assert a.commission == b.commission
        assert b.total - a.total == pytest.approx(40)

    def test_total_invariant(self) -> None:
        pricing = price_cart(57.3, 25)
        assert pricing.total == pytest.approx(
            pricing.products_subtotal + pricing.commission + pricing.delivery_fee
        )

    def test_coupon_never_makes_total_negative(self) -> None:
        pricing = price_cart(10, 0, coupon_discount=1000)
        assert pricing.total == 0
        assert pricing.coupon_discount == pytest.approx(11.5)

    def test_coupon_discount(self) -> None:
        assert price_cart(100, 25, coupon_discount=10).total == pytest.approx(130)

    def test_to_dict_rounds(self) -> None:
        data = price_cart(33.333, 25).to_dict()
        assert data["productsSubtotal"] == 33.33
        assert data["commission"] == 5.0
        assert data["total"] == 63.33


class TestCheckoutGate:
    def test_below_minimum(self) -> None:
        gate = checkout_gate(70, 80)
        assert gate.can_proceed is False
        assert gate.shortfall == 10

    def test_exactly_minimum(self) -> None:
        gate = checkout_gate(80, 80)
        assert gate.can_proceed is True
        assert gate.shortfall == 0

    def test_no_minimum(self) -> None:
        assert checkout_gate(0, None).can_proceed is True


class TestFetchDeliveryFee:
    def test_converts_cents(self) -> None:
        client = Mock()
        client.calculate_delivery.return_value = {"success": True, "deliveryFee": 2300}

        assert fetch_delivery_fee(client, BUSINESS, ADDRESS) == 23
        client.calculate_delivery.assert_called_once_with(19.7708, -104.3636, 19.78, -104.3636)

    def test_missing_coordinates_uses_fallback(self) -> None:
        client = Mock()
        fee = fetch_delivery_fee(client, {"latitude": 19.77}, ADDRESS)

        assert fee == FALLBACK_DELIVERY_FEE == 25
        client.calculate_delivery.assert_not_called()

    def test_missing_address_uses_fallback(self) -> None:
        assert fetch_delivery_fee(Mock(), BUSINESS, None) == FALLBACK_DELIVERY_FEE

    def test_invalid_coordinates_use_fallback(self) -> None:
        client = Mock()
        fee = fetch_delivery_fee(client, BUSINESS, {"latitude": "abc", "longitude": 0})

        assert fee == FALLBACK_DELIVERY_FEE
        client.calculate_delivery.assert_not_called()

    def test_api_error_uses_fallback(self, caplog) -> None:
        client = Mock()
        client.calculate_delivery.side_effect = ApiError("500: boom", status_code=500)

        with caplog.at_level("WARNING"):
            assert fetch_delivery_fee(client, BUSINESS, ADDRESS) == FALLBACK_DELIVERY_FEE
        assert "boom" in caplog.text

    def test_malformed_response_uses_fallback(self) -> None:
        client = Mock()
        client.calculate_delivery.return_value = {"success": True}

        assert fetch_delivery_fee(client, BUSINESS, ADDRESS) == FALLBACK_DELIVERY_FEE


class TestPriceCheckout:
    def test_below_minimum_order(self) -> None:
        client = Mock()
        client.calculate_delivery.return_value = {"success": True, "deliveryFee": 2300}
        items = [CartItem("p1", "Tacos", unit_price=35, quantity=2)]

        pricing, gate = price_checkout(client, items, BUSINESS, ADDRESS)

        assert pricing.products_subtotal == 70
        assert pricing.commission == pytest.approx(10.5)
        assert pricing.delivery_fee == 23
        assert pricing.total == pytest.approx(103.5)
        assert gate.can_proceed is False
        assert gate.shortfall == 10
