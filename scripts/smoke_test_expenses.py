#!/usr/bin/env python3
"""
Script de pruebas contra un servidor en marcha para el módulo de gastos
Ejecutar desde la raíz del proyecto: python scripts/smoke_test_expenses.py

Requiere haber creado el piso de prueba con scripts/create_demo_household.py
"""

import asyncio
import os

import httpx

from create_demo_household import DEMO_HOUSEHOLD, DEMO_USERS

BASE_URL = os.getenv("LEDGER_API_URL", "http://localhost:8000/api/v1")
HOUSEHOLD_ID = DEMO_HOUSEHOLD[0]
MEMBER_IDS = [user_id for user_id, _, _ in DEMO_USERS]


class ExpensesTester:
    def __init__(self):
        self.client = httpx.AsyncClient(base_url=BASE_URL)

    async def test_create(self):
        """Crear gasto dividido entre todos los miembros"""
        print("\n📋 Test: Crear gasto")

        response = await self.client.post("/expenses/", json={
            "householdId": HOUSEHOLD_ID,
            "creatorId": MEMBER_IDS[0],
            "amount": 30,
            "description": "Cena de bienvenida",
            "category": "FOOD",
            "memberIds": MEMBER_IDS
        })

        if response.status_code != 201:
            print(f"❌ Error creando gasto: {response.status_code}")
            print(f"   Response: {response.text}")
            return None

        data = response.json()["data"]
        print(f"✅ Gasto creado: ID {data['id']}")
        for split in data["splits"]:
            print(f"   {split['user']['name']}: {split['amountOwed']:.2f} - pagado: {split['isPaid']}")
        return data

    async def test_list(self, expense_id: str):
        """Listar gastos del piso"""
        print("\n📋 Test: Listar gastos del piso")

        response = await self.client.get("/expenses/", params={"householdId": HOUSEHOLD_ID})
        if response.status_code != 200:
            print(f"❌ Error listando: {response.status_code}")
            return False

        body = response.json()
        found = any(expense["id"] == expense_id for expense in body["data"])
        print(f"{'✅' if found else '❌'} {body['count']} gastos, el nuevo {'aparece' if found else 'no aparece'}")
        return found

    async def test_update(self, expense_id: str):
        """Actualizar descripción"""
        print("\n✏️ Test: Actualizar gasto")

        response = await self.client.put(f"/expenses/{expense_id}", json={"description": "Cena de bienvenida (pizza)"})
        ok = response.status_code == 200
        print(f"{'✅' if ok else '❌'} Actualización: {response.status_code}")
        return ok

    async def test_mark_paid(self, expense: dict):
        """Marcar como pagado el split de otro miembro, dos veces"""
        print("\n💸 Test: Registrar pago")

        split = next(s for s in expense["splits"] if not s["isPaid"])
        url = f"/expenses/{expense['id']}/splits/{split['id']}/paid"

        for attempt in (1, 2):
            response = await self.client.patch(url)
            if response.status_code != 200 or not response.json()["data"]["isPaid"]:
                print(f"❌ Intento {attempt}: {response.status_code} {response.text}")
                return False
            print(f"✅ Intento {attempt}: pago registrado")
        return True

    async def test_delete(self, expense_id: str):
        """Eliminar y comprobar 404 posterior"""
        print("\n🗑️ Test: Eliminar gasto")

        response = await self.client.delete(f"/expenses/{expense_id}")
        if response.status_code != 200:
            print(f"❌ Error eliminando: {response.status_code}")
            return False

        response = await self.client.get(f"/expenses/{expense_id}")
        ok = response.status_code == 404
        print(f"{'✅' if ok else '❌'} Tras eliminar, GET devuelve {response.status_code}")
        return ok

    async def cleanup(self):
        await self.client.aclose()


async def main():
    tester = ExpensesTester()
    try:
        expense = await tester.test_create()
        if not expense:
            print("\n❌ No se pudo crear el gasto, abortando")
            return

        results = [
            await tester.test_list(expense["id"]),
            await tester.test_update(expense["id"]),
            await tester.test_mark_paid(expense),
            await tester.test_delete(expense["id"]),
        ]

        if all(results):
            print("\n🎉 TODOS LOS TESTS PASARON")
        else:
            print("\n❌ ALGUNOS TESTS FALLARON")
    except httpx.HTTPError as e:
        print(f"\n❌ Error de conexión: {e}")
    finally:
        await tester.cleanup()


if __name__ == "__main__":
    print("🧪 INICIANDO TESTS DEL MÓDULO EXPENSES")
    print(f"📋 Servidor: {BASE_URL}")
    asyncio.run(main())
