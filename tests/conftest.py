from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from household_ledger.config.database import build_engine, get_db
from household_ledger.main import app
from household_ledger.shared.database.models import Base, Household, User, Expense, ExpenseSplit

EXPENSES_URL = "/api/v1/expenses/"


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with factory() as db:
        db.add_all([
            Household(id="h1", name="Piso Malasaña"),
            Household(id="h2", name="Piso Gràcia"),
            User(id="u1", name="Ana", email="ana@example.com"),
            User(id="u2", name="Bruno", email="bruno@example.com"),
            User(id="u3", name="Carla", email="carla@example.com"),
        ])
        db.commit()

    yield factory

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_expense(client):
    def _create(**overrides):
        payload = {
            "householdId": "h1",
            "creatorId": "u1",
            "amount": 30,
            "description": "Dinner",
            "memberIds": ["u1", "u2", "u3"],
        }
        payload.update(overrides)
        response = client.post(EXPENSES_URL, json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def seed_expense(session_factory):
    """Insertar un gasto directamente en BD con fecha controlada"""
    def _seed(household_id: str, description: str, date: datetime, amount: float = 20.0):
        with session_factory() as db:
            expense = Expense(
                household_id=household_id,
                creator_id="u1",
                amount=amount,
                description=description,
                date=date,
                splits=[
                    ExpenseSplit(user_id="u1", amount_owed=amount / 2, is_paid=True),
                    ExpenseSplit(user_id="u2", amount_owed=amount / 2, is_paid=False),
                ]
            )
            db.add(expense)
            db.commit()
            return expense.id

    return _seed
