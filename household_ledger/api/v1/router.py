# household_ledger/api/v1/router.py
from fastapi import APIRouter
from household_ledger.modules.expenses.router import router as expenses_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    expenses_router,
    prefix="/expenses",
    tags=["Expenses"]
)

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Household Ledger API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "expenses": "/api/v1/expenses"
        }
    }
