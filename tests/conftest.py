"""Fixtures compartidos: base SQLite en memoria y cliente HTTP de la API."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.main import app


@pytest.fixture
def db_session():
    """Sesión sobre una base SQLite en memoria con el esquema completo."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient con get_db apuntando a la sesión de prueba."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def customer_payload():
    return {
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


@pytest.fixture
def order_payload():
    """Pedido sin customer_id; cada test lo completa con el cliente creado."""
    return {
        "order_date": "2025-05-10",
        "urgent": False,
        "distance": 10,
        "weight": 10,
        "rate_per_km": 5,
        "rate_per_kg": 2,
        "status": "calculado",
    }
