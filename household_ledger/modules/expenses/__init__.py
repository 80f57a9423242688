# household_ledger/modules/expenses/__init__.py
"""
Módulo de Gastos - Gastos compartidos del piso

Este módulo maneja los gastos comunes de un piso compartido:
- Registro de gastos con división equitativa entre miembros
- Consulta, edición y borrado de gastos
- Registro de pagos de cada parte (split)

Arquitectura:
- router.py: Endpoints de gastos
- service.py: Validación, cálculo del reparto y mapeo de errores
- repository.py: Acceso a datos de gastos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ExpensesService
from .repository import ExpensesRepository

__all__ = [
    "router",
    "ExpensesService",
    "ExpensesRepository"
]
