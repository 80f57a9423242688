#!/usr/bin/env python3
"""
Script para crear un piso y usuarios de prueba
Ejecutar desde la raíz del proyecto: python scripts/create_demo_household.py
"""
import logging

from household_ledger.config.database import SessionLocal, init_db
from household_ledger.core.logging_config import setup_logging
from household_ledger.shared.database.models import Household, User

logger = logging.getLogger("create_demo_household")

DEMO_HOUSEHOLD = ("house-001", "Piso Lavapiés")

DEMO_USERS = [
    ("user-ana", "Ana", "ana@piso.test"),
    ("user-bruno", "Bruno", "bruno@piso.test"),
    ("user-carla", "Carla", "carla@piso.test"),
]


def main() -> bool:
    setup_logging("INFO")
    init_db()

    with SessionLocal() as db:
        household_id, household_name = DEMO_HOUSEHOLD
        if db.get(Household, household_id) is None:
            db.add(Household(id=household_id, name=household_name))
            logger.info(f"Piso creado: {household_name} ({household_id})")
        else:
            logger.info(f"Usando piso existente: {household_id}")

        for user_id, name, email in DEMO_USERS:
            if db.get(User, user_id) is None:
                db.add(User(id=user_id, name=name, email=email))
                logger.info(f"Usuario creado: {name} <{email}>")
            else:
                logger.info(f"Usuario existente: {user_id}")

        db.commit()

    return True


if __name__ == "__main__":
    main()
