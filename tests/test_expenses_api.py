from datetime import datetime

import pytest

from household_ledger.shared.database.models import Expense, ExpenseSplit

EXPENSES_URL = "/api/v1/expenses/"


def expense_url(expense_id: str) -> str:
    return f"{EXPENSES_URL}{expense_id}"


def splits_by_user(expense: dict) -> dict:
    return {split["userId"]: split for split in expense["splits"]}


class TestCreateExpense:
    def test_equal_split_between_members(self, client):
        response = client.post(EXPENSES_URL, json={
            "householdId": "h1",
            "creatorId": "u1",
            "amount": 30,
            "description": "Dinner",
            "memberIds": ["u1", "u2", "u3"],
        })

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Gasto creado correctamente"

        expense = body["data"]
        assert expense["amount"] == 30
        assert expense["category"] == "OTHER"
        assert expense["splitType"] == "EQUAL"
        assert expense["creator"]["id"] == "u1"
        assert expense["creator"]["name"] == "Ana"

        splits = splits_by_user(expense)
        assert set(splits) == {"u1", "u2", "u3"}
        assert all(split["amountOwed"] == 10 for split in splits.values())
        assert splits["u1"]["isPaid"] is True
        assert splits["u2"]["isPaid"] is False
        assert splits["u3"]["isPaid"] is False
        assert splits["u2"]["user"]["name"] == "Bruno"

    def test_uneven_amount_sums_back_within_tolerance(self, create_expense):
        expense = create_expense(amount=10, memberIds=["u1", "u2", "u3"])

        owed = [split["amountOwed"] for split in expense["splits"]]
        assert len(owed) == 3
        assert owed[0] == pytest.approx(10 / 3)
        assert sum(owed) == pytest.approx(10)

    def test_creator_outside_members_owes_nothing_and_all_unpaid(self, create_expense):
        expense = create_expense(amount=50, memberIds=["u2", "u3"])

        splits = splits_by_user(expense)
        assert set(splits) == {"u2", "u3"}
        assert all(split["amountOwed"] == 25 for split in splits.values())
        assert not any(split["isPaid"] for split in splits.values())

    def test_explicit_category_is_kept(self, create_expense):
        expense = create_expense(category="GROCERIES")
        assert expense["category"] == "GROCERIES"

    def test_amount_given_as_string_is_parsed(self, create_expense):
        expense = create_expense(amount="45.5", memberIds=["u1"])
        assert expense["amount"] == 45.5
        assert expense["splits"][0]["amountOwed"] == 45.5

    @pytest.mark.parametrize("missing", ["householdId", "creatorId", "amount", "description", "memberIds"])
    def test_missing_required_field_is_rejected(self, client, missing):
        payload = {
            "householdId": "h1",
            "creatorId": "u1",
            "amount": 30,
            "description": "Dinner",
            "memberIds": ["u1", "u2"],
        }
        del payload[missing]

        response = client.post(EXPENSES_URL, json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert missing in body["error"]

    @pytest.mark.parametrize("overrides", [
        {"memberIds": []},
        {"memberIds": "u1"},
        {"memberIds": ["u1", "u1"]},
        {"amount": 0},
        {"amount": -5},
        {"amount": True},
        {"description": "   "},
        {"category": "LUXURY"},
        {"splitType": "PERCENTAGE"},
    ])
    def test_invalid_payload_is_rejected(self, client, overrides):
        payload = {
            "householdId": "h1",
            "creatorId": "u1",
            "amount": 30,
            "description": "Dinner",
            "memberIds": ["u1", "u2"],
        }
        payload.update(overrides)

        response = client.post(EXPENSES_URL, json=payload)

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_amount_is_rejected(self, client, session_factory, literal):
        raw = (
            '{"householdId": "h1", "creatorId": "u1", "amount": ' + literal +
            ', "description": "Dinner", "memberIds": ["u1", "u2"]}'
        )

        response = client.post(EXPENSES_URL, content=raw, headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert "amount" in response.json()["error"]
        with session_factory() as db:
            assert db.query(Expense).count() == 0

    def test_unknown_member_fails_without_partial_write(self, client, session_factory):
        response = client.post(EXPENSES_URL, json={
            "householdId": "h1",
            "creatorId": "u1",
            "amount": 30,
            "description": "Dinner",
            "memberIds": ["u1", "ghost"],
        })

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Error al crear el gasto"
        assert body["details"]

        with session_factory() as db:
            assert db.query(Expense).count() == 0
            assert db.query(ExpenseSplit).count() == 0


class TestListExpenses:
    def test_missing_household_id_is_rejected(self, client):
        response = client.get(EXPENSES_URL)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "householdId es requerido",
            "timestamp": response.json()["timestamp"],
        }

    def test_blank_household_id_is_rejected(self, client):
        response = client.get(EXPENSES_URL, params={"householdId": ""})
        assert response.status_code == 400

    def test_only_household_expenses_newest_first(self, client, seed_expense):
        seed_expense("h1", "Luz enero", datetime(2024, 1, 10))
        seed_expense("h1", "Luz marzo", datetime(2024, 3, 10))
        seed_expense("h2", "Otro piso", datetime(2024, 4, 1))
        seed_expense("h1", "Luz febrero", datetime(2024, 2, 10))

        response = client.get(EXPENSES_URL, params={"householdId": "h1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 3
        assert [e["description"] for e in body["data"]] == ["Luz marzo", "Luz febrero", "Luz enero"]
        assert all(e["householdId"] == "h1" for e in body["data"])

    def test_includes_creator_email_and_split_users(self, client, create_expense):
        create_expense()

        expense = client.get(EXPENSES_URL, params={"householdId": "h1"}).json()["data"][0]

        assert expense["creator"] == {"id": "u1", "name": "Ana", "email": "ana@example.com"}
        assert {split["user"]["name"] for split in expense["splits"]} == {"Ana", "Bruno", "Carla"}

    def test_split_users_expose_only_id_and_name(self, client, create_expense):
        created = create_expense()

        listed = client.get(EXPENSES_URL, params={"householdId": "h1"}).json()["data"][0]
        fetched = client.get(expense_url(created["id"])).json()["data"]

        for expense in (created, listed, fetched):
            assert "email" in expense["creator"]
            for split in expense["splits"]:
                assert set(split["user"]) == {"id", "name"}

    def test_household_without_expenses_returns_empty_list(self, client):
        body = client.get(EXPENSES_URL, params={"householdId": "h2"}).json()
        assert body["count"] == 0
        assert body["data"] == []


class TestGetExpense:
    def test_returns_expense(self, client, create_expense):
        created = create_expense()

        response = client.get(expense_url(created["id"]))

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]
        assert len(response.json()["data"]["splits"]) == 3

    def test_unknown_id_is_not_found(self, client):
        response = client.get(expense_url("does-not-exist"))

        assert response.status_code == 404
        assert response.json()["error"] == "Gasto no encontrado"


class TestUpdateExpense:
    def test_partial_update_changes_only_sent_fields(self, client, create_expense):
        created = create_expense()

        response = client.put(expense_url(created["id"]), json={"description": "Cena del viernes"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Gasto actualizado correctamente"
        assert body["data"]["description"] == "Cena del viernes"
        assert body["data"]["amount"] == 30
        assert body["data"]["category"] == "OTHER"

    def test_update_amount_and_category(self, client, create_expense):
        created = create_expense()

        data = client.put(
            expense_url(created["id"]),
            json={"amount": 42.5, "category": "FOOD"}
        ).json()["data"]

        assert data["amount"] == 42.5
        assert data["category"] == "FOOD"
        # los splits no se recalculan
        assert all(split["amountOwed"] == 10 for split in data["splits"])

    def test_empty_body_leaves_record_unchanged(self, client, create_expense):
        created = create_expense()

        response = client.put(expense_url(created["id"]), json={})

        assert response.status_code == 200
        data = response.json()["data"]
        for key in ("amount", "description", "category", "householdId", "creatorId"):
            assert data[key] == created[key]

    def test_null_fields_are_ignored(self, client, create_expense):
        created = create_expense()

        data = client.put(
            expense_url(created["id"]),
            json={"amount": None, "description": None}
        ).json()["data"]

        assert data["amount"] == 30
        assert data["description"] == "Dinner"

    @pytest.mark.parametrize("payload", [
        {"amount": 0},
        {"amount": True},
        {"description": ""},
        {"category": "NOPE"},
        {"householdId": "h2"},
    ])
    def test_invalid_update_is_rejected(self, client, create_expense, payload):
        created = create_expense()

        response = client.put(expense_url(created["id"]), json=payload)

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_infinite_amount_update_is_rejected(self, client, create_expense):
        created = create_expense()

        response = client.put(
            expense_url(created["id"]),
            content='{"amount": Infinity}',
            headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert client.get(expense_url(created["id"])).json()["data"]["amount"] == 30

    def test_unknown_id_is_not_found(self, client):
        response = client.put(expense_url("does-not-exist"), json={"amount": 10})

        assert response.status_code == 404
        assert response.json()["error"] == "Gasto no encontrado"


class TestDeleteExpense:
    def test_delete_removes_expense_and_splits(self, client, create_expense, session_factory):
        created = create_expense()

        response = client.delete(expense_url(created["id"]))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Gasto eliminado correctamente"

        assert client.get(expense_url(created["id"])).status_code == 404
        with session_factory() as db:
            assert db.query(ExpenseSplit).filter(ExpenseSplit.expense_id == created["id"]).count() == 0

    def test_delete_keeps_other_expenses(self, client, create_expense):
        first = create_expense(description="Luz")
        second = create_expense(description="Agua")

        client.delete(expense_url(first["id"]))

        body = client.get(EXPENSES_URL, params={"householdId": "h1"}).json()
        assert [e["id"] for e in body["data"]] == [second["id"]]

    def test_unknown_id_is_not_found(self, client):
        response = client.delete(expense_url("does-not-exist"))

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestMarkSplitPaid:
    def test_marks_split_as_paid(self, client, create_expense):
        created = create_expense()
        split = splits_by_user(created)["u2"]

        response = client.patch(f"{expense_url(created['id'])}/splits/{split['id']}/paid")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Pago registrado correctamente"
        assert body["data"]["id"] == split["id"]
        assert body["data"]["isPaid"] is True

        expense = client.get(expense_url(created["id"])).json()["data"]
        assert splits_by_user(expense)["u2"]["isPaid"] is True
        assert splits_by_user(expense)["u3"]["isPaid"] is False

    def test_marking_twice_is_idempotent(self, client, create_expense):
        created = create_expense()
        split = splits_by_user(created)["u3"]
        url = f"{expense_url(created['id'])}/splits/{split['id']}/paid"

        first = client.patch(url)
        second = client.patch(url)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["data"]["isPaid"] is True

    def test_unknown_split_is_not_found(self, client, create_expense):
        created = create_expense()

        response = client.patch(f"{expense_url(created['id'])}/splits/nope/paid")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_split_from_another_expense_is_not_found(self, client, create_expense):
        first = create_expense(description="Luz")
        second = create_expense(description="Agua")
        foreign_split = splits_by_user(second)["u2"]

        response = client.patch(f"{expense_url(first['id'])}/splits/{foreign_split['id']}/paid")

        assert response.status_code == 404


class TestModuleEndpoints:
    def test_categories(self, client):
        body = client.get(f"{EXPENSES_URL}categories").json()

        names = [category["name"] for category in body["categories"]]
        assert "OTHER" in names
        assert body["totalCategories"] == len(names)
        assert "total_categories" not in body

    def test_health(self, client):
        assert client.get(f"{EXPENSES_URL}health").json()["status"] == "healthy"
        assert client.get("/health").json()["status"] == "healthy"
