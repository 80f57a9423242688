# household_ledger/modules/expenses/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from household_ledger.config.database import get_db
from household_ledger.shared.schemas.common import BaseResponse
from .service import ExpensesService
from .schemas import (
    ExpenseCreateRequest, ExpenseUpdateRequest,
    ExpenseResponse, ExpenseListResponse, ExpenseSplitResponse,
    ExpenseCategoriesResponse
)

router = APIRouter()

# ===== ENDPOINTS DEL MÓDULO =====
# Declarados antes de /{expense_id} para que no los capture

@router.get("/health")
async def expenses_health():
    """Health check del módulo de gastos"""
    return {
        "service": "expenses",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Gastos compartidos por piso",
            "División equitativa entre miembros",
            "Registro de pagos por split"
        ]
    }

@router.get("/categories", response_model=ExpenseCategoriesResponse)
async def get_expense_categories(db: Session = Depends(get_db)):
    """Obtener categorías disponibles para los gastos"""
    service = ExpensesService(db)
    return await service.get_expense_categories()

# ===== GASTOS - CRUD =====

@router.get("/", response_model=ExpenseListResponse)
async def list_expenses(
    household_id: Optional[str] = Query(None, alias="householdId", description="ID del piso"),
    db: Session = Depends(get_db)
):
    """
    Listar los gastos de un piso

    - Incluye creador (id, nombre, email) y splits con su usuario
    - Ordenados por fecha, más recientes primero
    - 400 si falta `householdId`
    """
    service = ExpensesService(db)
    return await service.list_expenses(household_id)

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(expense_id: str, db: Session = Depends(get_db)):
    """Obtener un gasto por ID (404 si no existe)"""
    service = ExpensesService(db)
    return await service.get_expense(expense_id)

@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear un gasto y dividirlo a partes iguales

    **Body (JSON):**
    - `householdId`, `creatorId`, `amount` (> 0), `description`
    - `category` (opcional, por defecto OTHER)
    - `memberIds`: lista no vacía de usuarios entre los que se divide

    Cada miembro debe `amount / len(memberIds)`; la parte del creador
    se marca como pagada.
    """
    service = ExpensesService(db)
    return await service.create_expense(expense_data)

@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    update_data: ExpenseUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Actualizar un gasto

    Solo se modifican los campos enviados (`amount`, `description`,
    `category`); los splits existentes no se recalculan.
    """
    service = ExpensesService(db)
    return await service.update_expense(expense_id, update_data)

@router.delete("/{expense_id}", response_model=BaseResponse)
async def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    """Eliminar un gasto y sus splits"""
    service = ExpensesService(db)
    return await service.delete_expense(expense_id)

@router.patch("/{expense_id}/splits/{split_id}/paid", response_model=ExpenseSplitResponse)
async def mark_split_paid(
    expense_id: str,
    split_id: str,
    db: Session = Depends(get_db)
):
    """Marcar como pagada la parte de un miembro"""
    service = ExpensesService(db)
    return await service.mark_split_paid(expense_id, split_id)
