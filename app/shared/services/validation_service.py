# app/shared/services/validation_service.py
"""
Reglas de validación de clientes, pedidos y entregas.

Cada predicado devuelve un ``ValidationResult``: el valor aceptado
(normalizado) o un ``Rejection`` clasificado. Las fallas esperadas nunca se
señalan con excepciones; es el servicio quien decide convertir el rechazo
en una respuesta HTTP.

En actualizaciones parciales se construye primero el candidato completo con
``merge_update`` y se valida con la misma regla usada en la creación.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence
import re

from app.core.exceptions import ErrorKind, Rejection
from app.shared.database.models import DELIVERY_STATUS_VALUES


@dataclass(frozen=True)
class ValidationResult:
    value: Any = None
    rejection: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def accept(cls, value: Any) -> "ValidationResult":
        return cls(value=value)

    @classmethod
    def reject(cls, kind: ErrorKind, message: str, field: Optional[str] = None) -> "ValidationResult":
        return cls(rejection=Rejection(kind=kind, message=message, field=field))

    def value_or_raise(self) -> Any:
        """Devolver el valor aceptado o lanzar el rechazo como ServiceError"""
        if self.rejection is not None:
            raise self.rejection.as_http_exception()
        return self.value


def _invalid(message: str, field: Optional[str] = None) -> ValidationResult:
    return ValidationResult.reject(ErrorKind.INVALID_INPUT, message, field)


# =====================================================
# CLIENTES
# =====================================================

CUSTOMER_FIELDS = (
    "name", "surname", "tax_id", "phone", "email",
    "street", "number", "neighborhood", "state", "postal_code", "city",
)

# (mínimo, máximo) de caracteres por campo
CUSTOMER_LENGTHS = {
    "name": (3, 50),
    "surname": (3, 255),
    "phone": (8, 30),
    "email": (5, 255),
    "street": (1, 255),
    "number": (1, 20),
    "neighborhood": (1, 100),
    "state": (1, 50),
    "city": (1, 100),
}

CUSTOMER_DIGIT_FIELDS = {
    "tax_id": 11,
    "postal_code": 8,
}

CUSTOMER_LABELS = {
    "name": "nombre",
    "surname": "apellido",
    "tax_id": "CPF",
    "phone": "teléfono",
    "email": "email",
    "street": "calle",
    "number": "número",
    "neighborhood": "barrio",
    "state": "estado",
    "postal_code": "CEP",
    "city": "ciudad",
}


def validate_customer(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validar el formato de un cliente completo (creación o actualización)"""
    data: Dict[str, str] = {}

    for field in CUSTOMER_FIELDS:
        value = candidate.get(field)
        label = CUSTOMER_LABELS[field]
        if value is None:
            return _invalid(f"El campo {label} es obligatorio", field)
        if not isinstance(value, str):
            return _invalid(f"El campo {label} debe ser texto", field)
        value = value.strip()
        if not value:
            return _invalid(f"El campo {label} es obligatorio", field)
        data[field] = value

    for field, (min_length, max_length) in CUSTOMER_LENGTHS.items():
        length = len(data[field])
        if length < min_length or length > max_length:
            label = CUSTOMER_LABELS[field]
            return _invalid(
                f"El campo {label} debe tener entre {min_length} y {max_length} caracteres",
                field
            )

    for field, digits in CUSTOMER_DIGIT_FIELDS.items():
        if not re.fullmatch(rf"[0-9]{{{digits}}}", data[field]):
            label = CUSTOMER_LABELS[field]
            return _invalid(f"El {label} debe tener exactamente {digits} dígitos", field)

    if "@" not in data["email"]:
        return _invalid("El email debe contener '@'", "email")

    return ValidationResult.accept(data)


def ensure_unique_customer_field(
    field: str,
    holder: Optional[Any],
    customer_id: Optional[int] = None
) -> ValidationResult:
    """
    Verificar que ningún otro cliente use el mismo CPF o email.

    ``holder`` es el cliente encontrado con ese valor (o None) y
    ``customer_id`` el cliente que se está actualizando, si aplica.
    """
    if holder is not None and holder.id != customer_id:
        label = CUSTOMER_LABELS.get(field, field)
        return ValidationResult.reject(
            ErrorKind.CONFLICT,
            f"Ya existe un cliente registrado con este {label}",
            field
        )
    return ValidationResult.accept(holder)


def ensure_customer_deletable(customer_id: int, orders: Sequence[Any]) -> ValidationResult:
    """Un cliente con pedidos no puede eliminarse"""
    if orders:
        return ValidationResult.reject(
            ErrorKind.RELATIONSHIP_CONFLICT,
            f"El cliente {customer_id} tiene {len(orders)} pedido(s) asociado(s) y no puede eliminarse"
        )
    return ValidationResult.accept(customer_id)


# =====================================================
# PEDIDOS
# =====================================================

ORDER_FIELDS = (
    "order_date", "urgent", "distance", "weight",
    "rate_per_km", "rate_per_kg", "customer_id", "status",
)

ORDER_POSITIVE_FIELDS = {
    "distance": "distancia",
    "weight": "peso",
    "rate_per_km": "valor por km",
    "rate_per_kg": "valor por kg",
}

# Columnas Numeric(10, 2): centavos y menos de 10^8
ORDER_NUMBER_SCALE = Decimal("0.01")
ORDER_NUMBER_LIMIT = Decimal("100000000")


def _as_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _as_positive_id(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def validate_status(status: Any) -> ValidationResult:
    if status is None:
        return _invalid("El estado de la entrega es obligatorio", "status")
    if status not in DELIVERY_STATUS_VALUES:
        options = ", ".join(DELIVERY_STATUS_VALUES)
        return _invalid(f"Estado de entrega inválido. Valores permitidos: {options}", "status")
    return ValidationResult.accept(status)


def validate_order(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validar el formato de un pedido completo (creación o actualización)"""
    data: Dict[str, Any] = {}

    order_date = candidate.get("order_date")
    if isinstance(order_date, str):
        try:
            order_date = date.fromisoformat(order_date)
        except ValueError:
            return _invalid("La fecha del pedido debe tener formato AAAA-MM-DD", "order_date")
    if not isinstance(order_date, date):
        return _invalid("La fecha del pedido es obligatoria", "order_date")
    data["order_date"] = order_date

    urgent = candidate.get("urgent")
    if not isinstance(urgent, bool):
        return _invalid("El campo urgente es obligatorio y debe ser booleano", "urgent")
    data["urgent"] = urgent

    for field, label in ORDER_POSITIVE_FIELDS.items():
        number = _as_decimal(candidate.get(field))
        if number is None:
            return _invalid(f"El campo {label} es obligatorio y debe ser numérico", field)
        if number <= 0:
            return _invalid(f"El campo {label} debe ser mayor que cero", field)
        if number >= ORDER_NUMBER_LIMIT:
            return _invalid(f"El campo {label} debe ser menor que {ORDER_NUMBER_LIMIT}", field)
        if number != number.quantize(ORDER_NUMBER_SCALE):
            return _invalid(f"El campo {label} admite como máximo 2 decimales", field)
        data[field] = number

    customer_id = _as_positive_id(candidate.get("customer_id"))
    if customer_id is None:
        return _invalid("El ID del cliente debe ser un entero positivo", "customer_id")
    data["customer_id"] = customer_id

    status = validate_status(candidate.get("status"))
    if not status.ok:
        return status
    data["status"] = status.value

    return ValidationResult.accept(data)


# =====================================================
# ENTREGAS
# =====================================================

DELIVERY_FIELDS = ("status", "order_id")


def validate_delivery(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validar el formato de una entrega (estado y pedido)"""
    status = validate_status(candidate.get("status"))
    if not status.ok:
        return status

    order_id = _as_positive_id(candidate.get("order_id"))
    if order_id is None:
        return _invalid("El ID del pedido debe ser un entero positivo", "order_id")

    return ValidationResult.accept({"status": status.value, "order_id": order_id})


def ensure_order_free_for_delivery(
    order_id: int,
    existing_delivery: Optional[Any],
    delivery_id: Optional[int] = None
) -> ValidationResult:
    """Un pedido admite una sola entrega; la entrega en edición no cuenta"""
    if existing_delivery is not None and existing_delivery.id != delivery_id:
        return ValidationResult.reject(
            ErrorKind.CONFLICT,
            f"Ya existe una entrega relacionada al pedido {order_id}",
            "order_id"
        )
    return ValidationResult.accept(order_id)


# =====================================================
# COMUNES
# =====================================================

def ensure_found(entity: Optional[Any], message: str) -> ValidationResult:
    if entity is None:
        return ValidationResult.reject(ErrorKind.NOT_FOUND, message)
    return ValidationResult.accept(entity)


def merge_update(current: Any, changes: Mapping[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Candidato completo: los campos omitidos o nulos conservan el valor actual"""
    merged = {}
    for field in fields:
        new_value = changes.get(field)
        merged[field] = new_value if new_value is not None else getattr(current, field)
    return merged
