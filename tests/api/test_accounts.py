"""
Tests for tenant, chart-of-accounts and Beleg endpoints.
"""


class TestCreateTenant:

    def test_create_tenant_returns_201(self, client):
        response = client.post("/tenants", json={"name": "Neu GmbH", "slug": "neu"})

        assert response.status_code == 201
        assert response.json()["slug"] == "neu"

    def test_duplicate_slug_returns_400(self, client, tenant):
        response = client.post("/tenants", json={"name": "Kopie", "slug": "muster"})
        assert response.status_code == 400

    def test_invalid_slug_returns_422(self, client):
        response = client.post("/tenants", json={"name": "X", "slug": "Not A Slug"})
        assert response.status_code == 422


class TestAccounts:

    def test_create_account_returns_201(self, client, headers):
        response = client.post("/accounts", json={
            "code": "1200",
            "name": "Bank",
            "account_type": "asset",
        }, headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "1200"
        assert data["account_type"] == "asset"
        assert data["is_active"] is True

    def test_duplicate_code_returns_400(self, client, headers):
        body = {"code": "1200", "name": "Bank", "account_type": "asset"}
        client.post("/accounts", json=body, headers=headers)

        response = client.post("/accounts", json=body, headers=headers)
        assert response.status_code == 400

    def test_unknown_account_type_returns_422(self, client, headers):
        response = client.post("/accounts", json={
            "code": "1200", "name": "Bank", "account_type": "ASSET",
        }, headers=headers)
        assert response.status_code == 422

    def test_list_accounts_filtered_by_type(self, client, headers, accounts):
        response = client.get("/accounts?account_type=expense", headers=headers)

        assert response.status_code == 200
        assert [a["code"] for a in response.json()] == ["4930"]

    def test_get_account_of_other_tenant_returns_404(self, client, other_ctx, accounts):
        response = client.get(
            f"/accounts/{accounts['1200'].id}",
            headers={"X-Tenant-ID": str(other_ctx.tenant_id)},
        )
        assert response.status_code == 404

    def test_deactivate(self, client, headers, accounts):
        response = client.post(
            f"/accounts/{accounts['1000'].id}/deactivate", headers=headers
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_delete_unused_returns_204(self, client, headers, accounts):
        response = client.delete(f"/accounts/{accounts['0800'].id}", headers=headers)
        assert response.status_code == 204

    def test_delete_used_returns_422(self, client, headers, accounts):
        client.post("/bookings", json={
            "date": "2024-03-15",
            "description": "Bareinlage",
            "lines": [
                {"account_id": accounts["1000"].id, "type": "debit", "amount": 500},
                {"account_id": accounts["0800"].id, "type": "credit", "amount": 500},
            ],
        }, headers=headers)

        response = client.delete(f"/accounts/{accounts['0800'].id}", headers=headers)
        assert response.status_code == 422


class TestBelege:

    def test_create_and_get_beleg(self, client, headers):
        response = client.post("/belege", json={
            "document_number": "ER-2024-001",
            "document_type": "eingang",
            "title": "Bürobedarf",
            "document_date": "2024-03-01",
            "amount": 5950,
            "tax_amount": 950,
        }, headers=headers)

        assert response.status_code == 201
        beleg = response.json()
        assert beleg["status"] == "draft"

        fetched = client.get(f"/belege/{beleg['id']}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["document_number"] == "ER-2024-001"

    def test_booking_marks_beleg_booked(self, client, headers, accounts):
        beleg = client.post("/belege", json={
            "document_number": "RE-1001",
            "document_type": "ausgang",
            "title": "Rechnung",
            "document_date": "2024-03-15",
        }, headers=headers).json()

        client.post("/bookings", json={
            "date": "2024-03-15",
            "description": "Ausgangsrechnung RE-1001",
            "beleg_id": beleg["id"],
            "lines": [
                {"account_id": accounts["1200"].id, "type": "debit", "amount": 100},
                {"account_id": accounts["8400"].id, "type": "credit", "amount": 100},
            ],
        }, headers=headers)

        fetched = client.get(f"/belege/{beleg['id']}", headers=headers).json()
        assert fetched["status"] == "booked"

    def test_unknown_beleg_returns_404(self, client, headers):
        response = client.get("/belege/999", headers=headers)
        assert response.status_code == 404
