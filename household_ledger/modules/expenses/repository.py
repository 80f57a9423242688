# household_ledger/modules/expenses/repository.py
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import desc
from typing import List, Dict, Any, Optional

from household_ledger.shared.database.models import Expense, ExpenseSplit, SplitType

class ExpensesRepository:
    def __init__(self, db: Session):
        self.db = db

    def _expense_query(self):
        """Query base con creador y splits (con su usuario) precargados"""
        return self.db.query(Expense).options(
            joinedload(Expense.creator),
            selectinload(Expense.splits).joinedload(ExpenseSplit.user)
        )

    def get_expenses_by_household(self, household_id: str) -> List[Expense]:
        """Obtener gastos de un piso, más recientes primero"""
        return self._expense_query().filter(
            Expense.household_id == household_id
        ).order_by(desc(Expense.date)).all()

    def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        """Obtener un gasto por ID"""
        return self._expense_query().filter(Expense.id == expense_id).first()

    def create_expense_with_splits(self, expense_data: Dict[str, Any], amount_per_person: float) -> Expense:
        """
        Crear gasto y sus splits en una sola transacción.

        Si el commit falla no queda nada persistido; el rollback lo hace
        quien llama.
        """
        creator_id = expense_data['creator_id']

        expense = Expense(
            household_id=expense_data['household_id'],
            creator_id=creator_id,
            amount=expense_data['amount'],
            description=expense_data['description'],
            category=expense_data['category'],
            split_type=SplitType.EQUAL
        )
        expense.splits = [
            ExpenseSplit(
                user_id=user_id,
                amount_owed=amount_per_person,
                is_paid=user_id == creator_id  # el creador ya pagó su parte
            )
            for user_id in expense_data['member_ids']
        ]

        self.db.add(expense)
        self.db.commit()
        return self.get_expense_by_id(expense.id)

    def update_expense(self, expense_id: str, update_data: Dict[str, Any]) -> Optional[Expense]:
        """Actualizar campos del gasto; None si no existe"""
        expense = self.db.query(Expense).filter(Expense.id == expense_id).first()

        if not expense:
            return None

        for key, value in update_data.items():
            setattr(expense, key, value)

        if update_data:
            self.db.commit()
        return self.get_expense_by_id(expense_id)

    def delete_expense(self, expense_id: str) -> bool:
        """Eliminar gasto; los splits se borran en cascada"""
        expense = self.db.query(Expense).filter(Expense.id == expense_id).first()

        if not expense:
            return False

        self.db.delete(expense)
        self.db.commit()
        return True

    def mark_split_paid(self, expense_id: str, split_id: str) -> Optional[ExpenseSplit]:
        """Marcar split como pagado; None si no existe o no es de ese gasto"""
        split = self.db.query(ExpenseSplit).filter(
            ExpenseSplit.id == split_id,
            ExpenseSplit.expense_id == expense_id
        ).first()

        if not split:
            return None

        split.is_paid = True
        self.db.commit()
        self.db.refresh(split)
        return split

