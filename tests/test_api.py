"""HTTP tests for the dashboard invoice and customer routes."""

from datetime import date
from decimal import Decimal

from app import app
from app.db.engine import get_engine

LEE_ID = "3958dc9e-742f-4377-85e9-fec4b6a6442a"
DELBA_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestInvoiceList:
    def test_lists_newest_first_with_customer(self, client, make_invoice):
        make_invoice("inv-old", invoice_date=date(2022, 1, 1))
        make_invoice("inv-new", customer_id=DELBA_ID, amount=4999, status="paid", invoice_date=date(2023, 6, 1))

        body = client.get("/dashboard/invoices").json()

        assert body["total"] == 2
        assert [item["id"] for item in body["items"]] == ["inv-new", "inv-old"]
        first = body["items"][0]
        assert first["name"] == "Delba de Oliveira"
        assert first["email"] == "delba@oliveira.com"
        assert first["amount"] == 4999
        assert first["status"] == "paid"
        assert first["date"] == "2023-06-01"

    def test_query_filters_by_customer(self, client, make_invoice):
        make_invoice("inv-1")
        make_invoice("inv-2", customer_id=DELBA_ID)

        body = client.get("/dashboard/invoices", params={"query": "delba"}).json()

        assert body["total"] == 1
        assert body["items"][0]["id"] == "inv-2"

    def test_paging(self, client, make_invoice):
        for day in range(1, 5):
            make_invoice(f"inv-{day}", invoice_date=date(2023, 1, day))

        body = client.get("/dashboard/invoices", params={"limit": 2, "offset": 1}).json()

        assert body["total"] == 4
        assert [item["id"] for item in body["items"]] == ["inv-3", "inv-2"]
        assert body["limit"] == 2
        assert body["offset"] == 1

    def test_served_from_cache_until_a_write(self, client, make_invoice, route_cache):
        assert client.get("/dashboard/invoices").json()["total"] == 0
        assert len(route_cache) == 1

        # written behind the cache's back
        make_invoice("inv-1")
        assert client.get("/dashboard/invoices").json()["total"] == 0

        response = client.post(
            "/dashboard/invoices/create",
            data={"customerId": LEE_ID, "amount": "10", "status": "paid"},
            follow_redirects=False,
        )
        assert response.status_code == 303

        assert client.get("/dashboard/invoices").json()["total"] == 2


class TestCreateRoute:
    def test_redirects_to_list(self, client, fetch_invoices):
        response = client.post(
            "/dashboard/invoices/create",
            data={"customerId": LEE_ID, "amount": "49.99", "status": "pending"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/invoices"
        rows = fetch_invoices()
        assert len(rows) == 1
        assert rows[0]["amount"] == 4999

    def test_validation_errors(self, client, route_cache, fetch_invoices):
        client.get("/dashboard/invoices")

        response = client.post("/dashboard/invoices/create", data={"amount": "0"})

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Missing Fields. Failed to Create Invoice."
        assert set(body["errors"]) == {"customerId", "amount", "status"}
        assert fetch_invoices() == []
        assert len(route_cache) == 1

    def test_storage_error(self, client, broken_engine):
        app.dependency_overrides[get_engine] = lambda: broken_engine

        response = client.post(
            "/dashboard/invoices/create",
            data={"customerId": LEE_ID, "amount": "1", "status": "paid"},
            follow_redirects=False,
        )

        assert response.status_code == 500
        assert response.json() == {"errors": {}, "message": "Database Error: Failed to Create Invoice."}


class TestEditRoute:
    def test_get_invoice_for_form(self, client, make_invoice):
        make_invoice("inv-1", amount=4999, status="paid")

        body = client.get("/dashboard/invoices/inv-1").json()

        assert body["id"] == "inv-1"
        assert body["customer_id"] == LEE_ID
        assert Decimal(str(body["amount"])) == Decimal("49.99")
        assert body["status"] == "paid"
        assert body["date"] == "2023-01-15"

    def test_get_missing_invoice(self, client):
        response = client.get("/dashboard/invoices/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "Invoice not found"

    def test_update_redirects(self, client, make_invoice, fetch_invoices):
        make_invoice("inv-1")

        response = client.post(
            "/dashboard/invoices/inv-1/edit",
            data={"customerId": DELBA_ID, "amount": "7.5", "status": "paid"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        row = fetch_invoices()[0]
        assert (row["customer_id"], row["amount"], row["status"]) == (DELBA_ID, 750, "paid")
        assert row["date"] == date(2023, 1, 15)

    def test_update_validation_errors(self, client, make_invoice):
        make_invoice("inv-1")

        response = client.post(
            "/dashboard/invoices/inv-1/edit",
            data={"customerId": LEE_ID, "amount": "abc", "status": "paid"},
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"amount": ["Please enter an amount greater than $0."]}


class TestDeleteRoute:
    def test_delete(self, client, make_invoice, fetch_invoices):
        make_invoice("inv-1")

        response = client.post("/dashboard/invoices/inv-1/delete")

        assert response.status_code == 200
        assert response.json()["message"] == "Deleted Invoice."
        assert fetch_invoices() == []

    def test_delete_storage_error(self, client, broken_engine):
        app.dependency_overrides[get_engine] = lambda: broken_engine

        response = client.post("/dashboard/invoices/inv-1/delete")

        assert response.status_code == 500
        assert response.json()["message"] == "Database Error: Failed to Delete Invoice."


class TestCustomers:
    def test_list_ordered_by_name(self, client):
        body = client.get("/customers/").json()

        assert body == [
            {"id": DELBA_ID, "name": "Delba de Oliveira"},
            {"id": LEE_ID, "name": "Lee Robinson"},
        ]

    def test_get_customer(self, client):
        body = client.get(f"/customers/{LEE_ID}").json()

        assert body["email"] == "lee@robinson.com"
        assert body["image_url"] is None

    def test_get_missing_customer(self, client):
        assert client.get("/customers/nope").status_code == 404
