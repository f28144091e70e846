# frete/logic/cart_pricing.py
"""
Preço exibido no carrinho/checkout.

total = subtotal dos produtos + comissão da plataforma (15% do subtotal)
        + taxa de entrega - cupom

A taxa de entrega vem de POST /api/orders/calculate-delivery (em centavos).
Sem coordenadas, ou se a chamada falhar, usamos FALLBACK_DELIVERY_FEE.
"""
import logging
from typing import Iterable, NamedTuple, Optional

from .. import config
from ..providers.api_client import ApiError
from ..utils.geo import InvalidCoordinateError, validate_coordinate

logger = logging.getLogger(__name__)

PLATFORM_COMMISSION_RATE = config.PLATFORM_COMMISSION_RATE
FALLBACK_DELIVERY_FEE = config.FALLBACK_DELIVERY_FEE


class CartItem(NamedTuple):
    product_id: str
    name: str
    unit_price: float
    quantity: int = 1
    # Produtos vendidos a peso: o preço é por kg e a quantidade é ignorada
    weight_kg: Optional[float] = None

    @property
    def line_total(self) -> float:
        if self.weight_kg is not None:
            return self.unit_price * self.weight_kg
        return self.unit_price * self.quantity


class CartPricing(NamedTuple):
    products_subtotal: float
    commission: float
    delivery_fee: float
    coupon_discount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "productsSubtotal": round(self.products_subtotal, 2),
            "commission": round(self.commission, 2),
            "deliveryFee": round(self.delivery_fee, 2),
            "couponDiscount": round(self.coupon_discount, 2),
            "total": round(self.total, 2),
        }


class CheckoutGate(NamedTuple):
    can_proceed: bool
    shortfall: float


def cart_subtotal(items: Iterable[CartItem]) -> float:
    return sum(item.line_total for item in items)


def platform_commission(subtotal) -> float:
    return subtotal * PLATFORM_COMMISSION_RATE


def price_cart(subtotal, delivery_fee, coupon_discount=0.0) -> CartPricing:
    commission = platform_commission(subtotal)
    gross = subtotal + commission + delivery_fee
    # O cupom nunca deixa o total negativo
    discount = min(max(coupon_discount, 0.0), gross)
    return CartPricing(
        products_subtotal=subtotal,
        commission=commission,
        delivery_fee=delivery_fee,
        coupon_discount=discount,
        total=gross - discount,
    )


def checkout_gate(subtotal, minimum_order) -> CheckoutGate:
    """Só permite seguir para o pagamento se o subtotal atinge o pedido mínimo do negócio."""
    minimum_order = minimum_order or 0
    if subtotal >= minimum_order:
        return CheckoutGate(can_proceed=True, shortfall=0.0)
    return CheckoutGate(can_proceed=False, shortfall=round(minimum_order - subtotal, 2))


def fetch_delivery_fee(client, business: dict, address: dict) -> float:
    """
    Pede a taxa ao servidor para o par negócio/endereço e converte centavos -> unidades.
    Nunca levanta: coordenadas ausentes ou erro remoto resultam na taxa fixa de fallback.
    """
    coords = (
        (business or {}).get("latitude"),
        (business or {}).get("longitude"),
        (address or {}).get("latitude"),
        (address or {}).get("longitude"),
    )
    if any(c is None for c in coords):
        logger.info("Coordenadas ausentes, usando taxa de entrega fixa")
        return FALLBACK_DELIVERY_FEE

    try:
        business_lat, business_lng = validate_coordinate(coords[0], coords[1])
        delivery_lat, delivery_lng = validate_coordinate(coords[2], coords[3])
    except InvalidCoordinateError as e:
        logger.warning(f"{e}; usando taxa de entrega fixa")
        return FALLBACK_DELIVERY_FEE

    try:
        data = client.calculate_delivery(business_lat, business_lng, delivery_lat, delivery_lng)
        return float(data["deliveryFee"]) / 100
    except ApiError as e:
        logger.warning(f"Falha ao calcular taxa de entrega, usando fallback: {e}")
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Resposta inesperada de calculate-delivery ({e}), usando fallback")
    return FALLBACK_DELIVERY_FEE


def price_checkout(client, items: Iterable[CartItem], business: dict, address: dict,
                   coupon_discount=0.0):
    """Junta tudo o que a tela de checkout exibe: (CartPricing, CheckoutGate)."""
    subtotal = cart_subtotal(items)
    delivery_fee = fetch_delivery_fee(client, business, address)
    pricing = price_cart(subtotal, delivery_fee, coupon_discount)
    gate = checkout_gate(subtotal, (business or {}).get("minimum_order"))
    return pricing, gate
