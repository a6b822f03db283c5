# app/shared/services/pricing_service.py
"""
Cálculo del precio de una entrega a partir de los atributos del pedido.

Orden del cálculo:
1. valor por distancia = distancia × tarifa por km
2. valor por peso = peso × tarifa por kg
3. base = distancia + peso
4. recargo del 20% sobre la base si la entrega es urgente
5. descuento del 10% si el subtotal (base + recargo) supera 500
6. tasa fija de 15 si el peso supera 50 kg, sumada después del descuento
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

CENTS = Decimal("0.01")


class InvalidPricingInput(ValueError):
    """Distancia o peso no positivos"""


@dataclass(frozen=True)
class PricingRules:
    urgent_rate: Decimal = Decimal("0.20")
    discount_threshold: Decimal = Decimal("500")
    discount_rate: Decimal = Decimal("0.10")
    heavy_threshold_kg: Decimal = Decimal("50")
    heavy_fee_amount: Decimal = Decimal("15")

    @classmethod
    def from_settings(cls, settings) -> "PricingRules":
        return cls(
            urgent_rate=Decimal(str(settings.pricing_urgent_rate)),
            discount_threshold=Decimal(str(settings.pricing_discount_threshold)),
            discount_rate=Decimal(str(settings.pricing_discount_rate)),
            heavy_threshold_kg=Decimal(str(settings.pricing_heavy_threshold_kg)),
            heavy_fee_amount=Decimal(str(settings.pricing_heavy_fee)),
        )


DEFAULT_RULES = PricingRules()


@dataclass(frozen=True)
class PricingInput:
    distance: Decimal
    weight: Decimal
    rate_per_km: Decimal
    rate_per_kg: Decimal
    urgent: bool

    @classmethod
    def from_order(cls, order) -> "PricingInput":
        return cls(
            distance=_to_decimal(order.distance),
            weight=_to_decimal(order.weight),
            rate_per_km=_to_decimal(order.rate_per_km),
            rate_per_kg=_to_decimal(order.rate_per_kg),
            urgent=bool(order.urgent),
        )


@dataclass(frozen=True)
class PricingBreakdown:
    distance_cost: Decimal
    weight_cost: Decimal
    surcharge: Decimal
    discount: Decimal
    heavy_fee: bool
    final_price: Decimal

    @property
    def base(self) -> Decimal:
        return self.distance_cost + self.weight_cost

    @property
    def subtotal(self) -> Decimal:
        return self.base + self.surcharge

    def stored_values(self) -> Dict[str, Any]:
        """Campos que se guardan en la entrega"""
        return {
            "distance_cost": self.distance_cost,
            "weight_cost": self.weight_cost,
            "surcharge": self.surcharge,
            "discount": self.discount,
            "heavy_fee": self.heavy_fee,
            "final_price": self.final_price,
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "distance_cost": self.distance_cost,
            "weight_cost": self.weight_cost,
            "base": self.base,
            "surcharge": self.surcharge,
            "subtotal": self.subtotal,
            "discount": self.discount,
            "heavy_fee": self.heavy_fee,
            "final_price": self.final_price,
        }


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_delivery_price(pricing_input: PricingInput, rules: PricingRules = DEFAULT_RULES) -> PricingBreakdown:
    """
    Calcular el desglose de precio de una entrega.

    Función pura: el resultado depende solo de ``pricing_input`` y ``rules``.
    Los montos se redondean a centavos únicamente al final.

    Raises:
        InvalidPricingInput: si la distancia o el peso no son mayores que cero
    """
    distance = _to_decimal(pricing_input.distance)
    weight = _to_decimal(pricing_input.weight)
    rate_per_km = _to_decimal(pricing_input.rate_per_km)
    rate_per_kg = _to_decimal(pricing_input.rate_per_kg)

    if distance <= 0:
        raise InvalidPricingInput("La distancia debe ser mayor que cero")
    if weight <= 0:
        raise InvalidPricingInput("El peso debe ser mayor que cero")
    if rate_per_km < 0 or rate_per_kg < 0:
        raise InvalidPricingInput("Las tarifas no pueden ser negativas")

    distance_cost = distance * rate_per_km
    weight_cost = weight * rate_per_kg
    base = distance_cost + weight_cost

    heavy_fee = weight > rules.heavy_threshold_kg

    surcharge = base * rules.urgent_rate if pricing_input.urgent else Decimal("0")
    subtotal = base + surcharge

    discount = subtotal * rules.discount_rate if subtotal > rules.discount_threshold else Decimal("0")
    final_price = subtotal - discount

    if heavy_fee:
        final_price += rules.heavy_fee_amount

    return PricingBreakdown(
        distance_cost=_cents(distance_cost),
        weight_cost=_cents(weight_cost),
        surcharge=_cents(surcharge),
        discount=_cents(discount),
        heavy_fee=heavy_fee,
        final_price=_cents(final_price),
    )
