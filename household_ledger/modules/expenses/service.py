# household_ledger/modules/expenses/service.py
from typing import Optional
from sqlalchemy.orm import Session
import logging

from .repository import ExpensesRepository
from .schemas import (
    ExpenseCreateRequest, ExpenseUpdateRequest, ExpenseOut, ExpenseSplitOut,
    ExpenseResponse, ExpenseListResponse, ExpenseSplitResponse,
    ExpenseCategoryInfo, ExpenseCategoriesResponse
)
from household_ledger.core.exceptions import (
    ServiceError, ExpenseValidationError, NotFoundError, PersistenceError
)
from household_ledger.shared.database.models import ExpenseCategory
from household_ledger.shared.schemas.common import BaseResponse

logger = logging.getLogger(__name__)

CATEGORY_DESCRIPTIONS = {
    ExpenseCategory.RENT: "Alquiler del piso",
    ExpenseCategory.UTILITIES: "Luz, agua y gas",
    ExpenseCategory.GROCERIES: "Compra del supermercado",
    ExpenseCategory.FOOD: "Comidas y cenas",
    ExpenseCategory.CLEANING: "Productos y servicios de limpieza",
    ExpenseCategory.INTERNET: "Internet y teléfono",
    ExpenseCategory.TRANSPORT: "Transporte",
    ExpenseCategory.ENTERTAINMENT: "Ocio",
    ExpenseCategory.OTHER: "Gastos varios",
}


class ExpensesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ExpensesRepository(db)

    def _fail(self, message: str, error: Exception, details: Optional[str] = None) -> PersistenceError:
        """Deshacer la transacción en curso y construir el error 500"""
        self.db.rollback()
        logger.exception(f"{message}: {error}")
        return PersistenceError(message, details)

    async def list_expenses(self, household_id: Optional[str]) -> ExpenseListResponse:
        """Obtener todos los gastos de un piso"""
        if not household_id or not household_id.strip():
            raise ExpenseValidationError("householdId es requerido")

        try:
            expenses = self.repository.get_expenses_by_household(household_id)

            return ExpenseListResponse(
                success=True,
                message="Gastos obtenidos correctamente",
                count=len(expenses),
                data=[ExpenseOut.model_validate(expense) for expense in expenses]
            )

        except Exception as e:
            raise self._fail("Error al obtener los gastos", e)

    async def get_expense(self, expense_id: str) -> ExpenseResponse:
        """Obtener un gasto por ID"""
        try:
            expense = self.repository.get_expense_by_id(expense_id)

            if not expense:
                raise NotFoundError("Gasto no encontrado")

            return ExpenseResponse(
                success=True,
                message="Gasto encontrado",
                data=ExpenseOut.model_validate(expense)
            )

        except ServiceError:
            raise
        except Exception as e:
            raise self._fail("Error al obtener el gasto", e)

    async def create_expense(self, expense_data: ExpenseCreateRequest) -> ExpenseResponse:
        """
        Crear gasto dividido a partes iguales entre ``member_ids``.

        Cada miembro debe ``amount / len(member_ids)``; el split del creador
        nace pagado. Gasto y splits se guardan en una única transacción.
        """
        try:
            logger.info(
                f"Creando gasto - Piso: {expense_data.household_id}, "
                f"Creador: {expense_data.creator_id}, Miembros: {len(expense_data.member_ids)}"
            )

            amount_per_person = expense_data.amount / len(expense_data.member_ids)

            expense = self.repository.create_expense_with_splits(
                expense_data.dict(), amount_per_person
            )

            logger.info(f"Gasto {expense.id} creado con {len(expense.splits)} splits")

            return ExpenseResponse(
                success=True,
                message="Gasto creado correctamente",
                data=ExpenseOut.model_validate(expense)
            )

        except ServiceError:
            raise
        except Exception as e:
            raise self._fail("Error al crear el gasto", e, details=str(e))

    async def update_expense(self, expense_id: str, update_data: ExpenseUpdateRequest) -> ExpenseResponse:
        """Actualizar monto, descripción y/o categoría; solo los campos enviados"""
        try:
            changes = update_data.dict(exclude_unset=True, exclude_none=True)
            expense = self.repository.update_expense(expense_id, changes)

            if not expense:
                raise NotFoundError("Gasto no encontrado")

            return ExpenseResponse(
                success=True,
                message="Gasto actualizado correctamente",
                data=ExpenseOut.model_validate(expense)
            )

        except ServiceError:
            raise
        except Exception as e:
            raise self._fail("Error al actualizar el gasto", e)

    async def delete_expense(self, expense_id: str) -> BaseResponse:
        """Eliminar un gasto junto con sus splits"""
        try:
            if not self.repository.delete_expense(expense_id):
                raise NotFoundError("Gasto no encontrado")

            logger.info(f"Gasto {expense_id} eliminado")

            return BaseResponse(
                success=True,
                message="Gasto eliminado correctamente"
            )

        except ServiceError:
            raise
        except Exception as e:
            raise self._fail("Error al eliminar el gasto", e)

    async def mark_split_paid(self, expense_id: str, split_id: str) -> ExpenseSplitResponse:
        """Registrar el pago de un split; repetirlo no es un error"""
        try:
            split = self.repository.mark_split_paid(expense_id, split_id)

            if not split:
                raise NotFoundError("Split no encontrado para este gasto")

            return ExpenseSplitResponse(
                success=True,
                message="Pago registrado correctamente",
                data=ExpenseSplitOut.model_validate(split)
            )

        except ServiceError:
            raise
        except Exception as e:
            raise self._fail("Error al registrar el pago", e)

    async def get_expense_categories(self) -> ExpenseCategoriesResponse:
        categories = [
            ExpenseCategoryInfo(name=category, description=CATEGORY_DESCRIPTIONS[category])
            for category in ExpenseCategory
        ]

        return ExpenseCategoriesResponse(
            success=True,
            message="Categorías de gastos disponibles",
            categories=categories,
            total_categories=len(categories)
        )
