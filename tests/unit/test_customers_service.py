"""Tests unitarios para CustomersService con repositorios simulados."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ErrorKind, ServiceError
from app.modules.customers.schemas import CustomerCreateRequest, CustomerUpdateRequest
from app.modules.customers.service import CustomersService


CUSTOMER_DATA = {
    "name": "João",
    "surname": "Silva",
    "tax_id": "12345678901",
    "phone": "11999999999",
    "email": "joao@email.com",
    "street": "Rua das Flores",
    "number": "123",
    "neighborhood": "Centro",
    "state": "SP",
    "postal_code": "01001000",
    "city": "São Paulo",
}


def _customer(customer_id=1, **overrides):
    return SimpleNamespace(id=customer_id, **{**CUSTOMER_DATA, **overrides})


def _order(order_id=1, customer_id=1):
    return SimpleNamespace(
        id=order_id, order_date=date(2025, 5, 10), urgent=False,
        distance=Decimal("10"), weight=Decimal("10"),
        rate_per_km=Decimal("5"), rate_per_kg=Decimal("2"),
        customer_id=customer_id, status="calculado",
    )


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.find_customer_by_tax_id.return_value = None
    repo.find_customer_by_email.return_value = None
    return repo


@pytest.fixture
def orders_repository():
    repo = MagicMock()
    repo.find_orders_by_customer_id.return_value = []
    return repo


@pytest.fixture
def service(repository, orders_repository):
    return CustomersService(MagicMock(), repository=repository, orders_repository=orders_repository)


class TestCreateCustomer:
    """Registro de clientes."""

    @pytest.mark.asyncio
    async def test_create_valid_customer(self, service, repository):
        repository.insert_customer.return_value = _customer(10)

        response = await service.create_customer(CustomerCreateRequest(**CUSTOMER_DATA))

        assert response.success is True
        assert response.customer.id == 10
        repository.insert_customer.assert_called_once_with(CUSTOMER_DATA)

    @pytest.mark.asyncio
    async def test_invalid_tax_id_never_reaches_repository(self, service, repository):
        """CPF '123' → 400 sin tocar la base"""
        payload = CustomerCreateRequest(**{**CUSTOMER_DATA, "tax_id": "123"})

        with pytest.raises(ServiceError) as exc_info:
            await service.create_customer(payload)

        assert exc_info.value.status_code == 400
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        repository.insert_customer.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_tax_id_is_conflict(self, service, repository):
        repository.find_customer_by_tax_id.return_value = _customer(2)

        with pytest.raises(ServiceError) as exc_info:
            await service.create_customer(CustomerCreateRequest(**CUSTOMER_DATA))

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {"field": "tax_id"}

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, service, repository):
        repository.find_customer_by_email.return_value = _customer(2)

        with pytest.raises(ServiceError) as exc_info:
            await service.create_customer(CustomerCreateRequest(**CUSTOMER_DATA))

        assert exc_info.value.kind == ErrorKind.CONFLICT
        assert exc_info.value.details == {"field": "email"}

    @pytest.mark.asyncio
    async def test_integrity_error_is_conflict(self, service, repository):
        """Carrera entre verificación e insert: la restricción única responde 409"""
        repository.insert_customer.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        with pytest.raises(ServiceError) as exc_info:
            await service.create_customer(CustomerCreateRequest(**CUSTOMER_DATA))

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal_failure(self, service, repository):
        repository.insert_customer.side_effect = RuntimeError("conexión perdida")

        with pytest.raises(ServiceError) as exc_info:
            await service.create_customer(CustomerCreateRequest(**CUSTOMER_DATA))

        assert exc_info.value.status_code == 500
        assert "conexión" not in exc_info.value.detail


class TestUpdateCustomer:
    """Actualización parcial."""

    @pytest.mark.asyncio
    async def test_partial_update_merges_stored_values(self, service, repository):
        stored = _customer(1)
        repository.find_customer_by_id.side_effect = [stored, _customer(1, city="Campinas")]
        repository.find_customer_by_tax_id.return_value = stored
        repository.find_customer_by_email.return_value = stored

        response = await service.update_customer(1, CustomerUpdateRequest(city="Campinas"))

        repository.update_customer.assert_called_once_with(1, {**CUSTOMER_DATA, "city": "Campinas"})
        assert response.customer.city == "Campinas"

    @pytest.mark.asyncio
    async def test_update_with_invalid_postal_code(self, service, repository):
        repository.find_customer_by_id.return_value = _customer(1)

        with pytest.raises(ServiceError) as exc_info:
            await service.update_customer(1, CustomerUpdateRequest(postal_code="123"))

        assert exc_info.value.status_code == 400
        repository.update_customer.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_to_email_of_other_customer(self, service, repository):
        repository.find_customer_by_id.return_value = _customer(1)
        repository.find_customer_by_email.return_value = _customer(2, email="otro@email.com")

        with pytest.raises(ServiceError) as exc_info:
            await service.update_customer(1, CustomerUpdateRequest(email="otro@email.com"))

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_update_missing_customer(self, service, repository):
        repository.find_customer_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.update_customer(99, CustomerUpdateRequest(city="Campinas"))

        assert exc_info.value.status_code == 404


class TestDeleteCustomer:
    """Eliminación con verificación de pedidos."""

    @pytest.mark.asyncio
    async def test_delete_customer_without_orders(self, service, repository):
        repository.find_customer_by_id.return_value = _customer(1)
        repository.delete_customer.return_value = 1

        response = await service.delete_customer(1)

        assert response.result.affected_rows == 1

    @pytest.mark.asyncio
    async def test_delete_customer_with_orders_is_blocked(self, service, repository, orders_repository):
        repository.find_customer_by_id.return_value = _customer(1)
        orders_repository.find_orders_by_customer_id.return_value = [_order(1), _order(2)]

        with pytest.raises(ServiceError) as exc_info:
            await service.delete_customer(1)

        assert exc_info.value.status_code == 409
        assert exc_info.value.kind == ErrorKind.RELATIONSHIP_CONFLICT
        repository.delete_customer.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_customer(self, service, repository):
        repository.find_customer_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.delete_customer(99)

        assert exc_info.value.status_code == 404


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_customers(self, service, repository):
        repository.list_customers.return_value = [_customer(1), _customer(2, tax_id="10987654321")]
        repository.count_customers.return_value = 2

        response = await service.list_customers(50, 0)

        assert response.total == 2
        assert [c.id for c in response.customers] == [1, 2]

    @pytest.mark.asyncio
    async def test_customer_orders(self, service, repository, orders_repository):
        repository.find_customer_by_id.return_value = _customer(1)
        orders_repository.find_orders_by_customer_id.return_value = [_order(3)]

        response = await service.list_customer_orders(1)

        assert response.total == 1
        assert response.orders[0].id == 3
