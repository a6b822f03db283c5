# app/modules/deliveries/__init__.py
"""
Módulo de Entregas - Cálculo y Seguimiento de Entregas

Este módulo maneja la entrega de cada pedido:
- Cálculo del precio (distancia, peso, urgencia, descuento y tasa de carga pesada)
- Una única entrega por pedido
- Seguimiento de estado: calculado, em transito, entregue, cancelado
- Recálculo completo en cada actualización

Arquitectura:
- router.py: Endpoints de entregas
- service.py: Lógica de negocio de entregas
- repository.py: Acceso a datos de entregas
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import DeliveriesService
from .repository import DeliveriesRepository

__all__ = [
    "router",
    "DeliveriesService",
    "DeliveriesRepository"
]
