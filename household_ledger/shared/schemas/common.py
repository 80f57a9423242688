# household_ledger/shared/schemas/common.py
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None
    timestamp: datetime = Field(default_factory=datetime.now)

class CamelModel(BaseModel):
    """Modelo con claves JSON en camelCase (householdId, isPaid...)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
