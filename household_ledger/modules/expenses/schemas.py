from pydantic import BaseModel, Field, validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from household_ledger.shared.database.models import ExpenseCategory, SplitType
from household_ledger.shared.schemas.common import BaseResponse, CamelModel

# ===== REQUEST SCHEMAS =====

def reject_bool_amount(v):
    # true/false no son montos aunque float() los acepte
    if isinstance(v, bool):
        raise ValueError('amount debe ser un número')
    return v


class ExpenseCreateRequest(BaseModel):
    """Body de POST /expenses"""
    household_id: str = Field(..., min_length=1, description="ID del piso")
    creator_id: str = Field(..., min_length=1, description="ID del usuario que registra el gasto")
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Monto total del gasto")
    description: str = Field(..., min_length=1, max_length=500, description="Descripción del gasto")
    category: ExpenseCategory = Field(ExpenseCategory.OTHER, description="Categoría del gasto")
    member_ids: List[str] = Field(..., min_length=1, description="Usuarios entre los que se divide")

    @validator('amount', pre=True)
    def validate_amount(cls, v):
        return reject_bool_amount(v)

    @validator('description')
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError('La descripción no puede estar vacía')
        return v.strip()

    @validator('member_ids')
    def validate_member_ids(cls, v):
        if any(not member_id.strip() for member_id in v):
            raise ValueError('memberIds no puede contener IDs vacíos')
        if len(v) != len(set(v)):
            raise ValueError('memberIds contiene usuarios duplicados')
        return v

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class ExpenseUpdateRequest(BaseModel):
    """Body de PUT /expenses/{id} - todos los campos opcionales"""
    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[ExpenseCategory] = None

    @validator('amount', pre=True)
    def validate_amount(cls, v):
        return reject_bool_amount(v)

    @validator('description')
    def validate_description(cls, v):
        if v is not None and not v.strip():
            raise ValueError('La descripción no puede estar vacía')
        return v.strip() if v else v

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"

# ===== RESPONSE SCHEMAS =====

class UserSummary(CamelModel):
    id: str
    name: str
    email: Optional[str] = None


class SplitUserSummary(CamelModel):
    id: str
    name: str


class ExpenseSplitOut(CamelModel):
    id: str
    expense_id: str
    user_id: str
    amount_owed: float
    is_paid: bool
    user: Optional[SplitUserSummary] = None


class ExpenseOut(CamelModel):
    id: str
    household_id: str
    creator_id: str
    amount: float
    description: str
    category: ExpenseCategory
    split_type: SplitType
    date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    creator: Optional[UserSummary] = None
    splits: List[ExpenseSplitOut] = []


class ExpenseResponse(BaseResponse):
    data: ExpenseOut


class ExpenseListResponse(BaseResponse):
    count: int
    data: List[ExpenseOut]


class ExpenseSplitResponse(BaseResponse):
    data: ExpenseSplitOut


class ExpenseCategoryInfo(BaseModel):
    name: ExpenseCategory
    description: str


class ExpenseCategoriesResponse(BaseResponse, CamelModel):
    categories: List[ExpenseCategoryInfo]
    total_categories: int
