# app/modules/orders/__init__.py
"""
Módulo de Pedidos - Gestión de Pedidos de Envío

Este módulo maneja los pedidos de los clientes:
- Registro con distancia, peso, tarifas y urgencia
- Cotización del precio de entrega
- Actualización parcial con recálculo de la entrega asociada
- Eliminación del pedido junto con su entrega

Arquitectura:
- router.py: Endpoints de pedidos
- service.py: Lógica de negocio de pedidos
- repository.py: Acceso a datos de pedidos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import OrdersService
from .repository import OrdersRepository

__all__ = [
    "router",
    "OrdersService",
    "OrdersRepository"
]
