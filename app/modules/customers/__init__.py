# app/modules/customers/__init__.py
"""
Módulo de Clientes - Registro y Mantenimiento de Clientes

Este módulo maneja el ciclo de vida de los clientes:
- Registro con validación de CPF, CEP, teléfono y email
- Unicidad de CPF y email
- Actualización parcial
- Eliminación bloqueada mientras existan pedidos

Arquitectura:
- router.py: Endpoints de clientes
- service.py: Lógica de negocio de clientes
- repository.py: Acceso a datos de clientes
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import CustomersService
from .repository import CustomersRepository

__all__ = [
    "router",
    "CustomersService",
    "CustomersRepository"
]
